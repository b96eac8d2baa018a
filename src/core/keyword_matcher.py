"""
Bilingual keyword detection for social posts.
"""
from typing import Iterable, List, Optional, Set
from config.settings import get_listener_config
from src.models.reference import ListenerKeyword
from src.storage.base_store import BaseStore

class KeywordMatcher:
    """
    Case-insensitive substring matcher over a fixed English/Arabic keyword list.

    detect() returns the matched keyword literals as configured, not their
    categories, so downstream rules can test membership in the critical and
    GCC subsets.
    """

    def __init__(self, keywords: Optional[Iterable[str]] = None):
        if keywords is None:
            keywords = [k['keyword'] for k in get_listener_config()['keywords']]
        self.keywords: List[str] = list(dict.fromkeys(keywords))
        self._folded = [(k, k.casefold()) for k in self.keywords]

    @classmethod
    def from_store(cls, store: BaseStore) -> "KeywordMatcher":
        """Built-in keywords extended with active rows from listener_keywords."""
        defaults = [k['keyword'] for k in get_listener_config()['keywords']]
        persisted = [row.keyword for row in store.list(ListenerKeyword, is_active=True)]
        return cls(defaults + persisted)

    def detect(self, text: Optional[str]) -> Set[str]:
        if not text:
            return set()
        folded = text.casefold()
        return {keyword for keyword, needle in self._folded if needle in folded}
