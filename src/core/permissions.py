"""Caller identity and the edit-capability check consumed by workflows."""
from dataclasses import dataclass, field
from typing import Callable, Dict
from src.utils.constants import PERMISSION_EDIT

@dataclass
class Actor:
    """Authenticated caller as handed over by the auth layer."""
    id: str
    role: str = 'Analyst'
    permissions: Dict[str, str] = field(default_factory=dict)

def can_edit(actor: Actor, domain: str) -> bool:
    """True when the actor holds edit capability on the domain."""
    return actor.permissions.get(domain) == PERMISSION_EDIT

PermissionChecker = Callable[[Actor, str], bool]
