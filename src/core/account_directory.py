"""Priority tier lookup for monitored social accounts."""
from typing import Dict, Optional
from config.settings import get_listener_config
from src.models.reference import MonitoredAccount
from src.storage.base_store import BaseStore
from src.utils.constants import DEFAULT_ACCOUNT_TIER

class AccountDirectory:
    """
    Maps a handle to a tier: 1 = official/health authority,
    2 = expert/influencer, 3 = anything unrecognized.
    """

    def __init__(self, tiers: Optional[Dict[str, int]] = None):
        if tiers is None:
            tiers = {a['handle']: a['priority'] for a in get_listener_config()['accounts']}
        self.tiers: Dict[str, int] = {self._normalize(h): int(p) for h, p in tiers.items()}

    @classmethod
    def from_store(cls, store: BaseStore) -> "AccountDirectory":
        """Configured tiers overridden by persisted monitored_accounts rows."""
        directory = cls()
        for account in store.list(MonitoredAccount):
            handle = cls._normalize(account.account_handle)
            if account.is_active:
                directory.tiers[handle] = int(account.priority or DEFAULT_ACCOUNT_TIER)
            else:
                directory.tiers.pop(handle, None)
        return directory

    def priority_of(self, handle: Optional[str]) -> int:
        if not handle:
            return DEFAULT_ACCOUNT_TIER
        tier = self.tiers.get(self._normalize(handle), DEFAULT_ACCOUNT_TIER)
        return tier if tier in (1, 2, 3) else DEFAULT_ACCOUNT_TIER

    @staticmethod
    def _normalize(handle: str) -> str:
        handle = handle.strip().lower()
        return handle if handle.startswith('@') else f"@{handle}"
