"""Shared plumbing for the human-review workflow services."""
from datetime import datetime
from typing import Any, Callable, Optional, Type
from src.core.audit import AuditTrail
from src.core.exceptions import NotFound, PermissionDenied, WorkflowError
from src.core.permissions import Actor, PermissionChecker, can_edit
from src.models.base import utcnow
from src.storage.base_store import BaseStore
from src.utils.constants import PERMISSION_EDIT
from src.utils.metrics import record_rejection
from src.utils.logging import get_logger

logger = get_logger(__name__)

class WorkflowService:
    """
    Base for services that move records through review states.

    Every operation follows read current state -> validate transition ->
    write new state. Races on the same record id are not detected.
    """

    domain: str = ''

    def __init__(
        self,
        store: BaseStore,
        permission_checker: Optional[PermissionChecker] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.permission_checker = permission_checker or can_edit
        self.clock = clock
        self.audit = AuditTrail(store, clock)

    def _require_edit(self, actor: Actor, domain: Optional[str] = None):
        domain = domain or self.domain
        if not self.permission_checker(actor, domain):
            raise self._refuse(PermissionDenied(
                f"Actor {actor.id} lacks '{PERMISSION_EDIT}' permission on '{domain}'"
            ))

    def _load(self, model: Type, record_id: str) -> Any:
        record = self.store.get(model, record_id)
        if record is None:
            raise self._refuse(NotFound(f"{model.__name__} {record_id} not found"))
        return record

    def _refuse(self, error: WorkflowError) -> WorkflowError:
        """Log and count a refused transition; returns the error for raising."""
        logger.warning(f"{type(self).__name__} refused transition ({type(error).__name__}): {error.reason}")
        record_rejection(type(error).__name__)
        return error
