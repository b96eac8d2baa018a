"""Hash-chained audit trail for workflow transitions."""
import json
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from src.models.audit_log import AuditLog
from src.models.base import utcnow
from src.storage.base_store import BaseStore
from src.utils.hashing import create_event_hash, json_default

def snapshot(record: Any) -> Dict[str, Any]:
    """JSON-safe copy of a record's column values."""
    values = {c.key: getattr(record, c.key) for c in record.__table__.columns}
    return json.loads(json.dumps(values, default=json_default))

class AuditTrail:
    """Appends AuditLog entries, each chained to the previous entry's hash."""

    def __init__(self, store: BaseStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    def record(
        self,
        event_type: str,
        entity: Any,
        actor_id: str,
        action: str,
        reason: Optional[str] = None,
        before_state: Optional[Dict[str, Any]] = None
    ) -> AuditLog:
        latest = self.store.list(AuditLog, order_by='sequence', descending=True, limit=1)
        previous = latest[0] if latest else None

        timestamp = self.clock()
        after_state = snapshot(entity)
        previous_hash = previous.event_hash if previous else None

        entry = AuditLog(
            sequence=(previous.sequence + 1) if previous else 1,
            timestamp=timestamp,
            event_type=event_type,
            entity_type=entity.__tablename__,
            entity_id=str(entity.id),
            actor=str(actor_id)[:50],
            action=action,
            reason=reason[:255] if reason else None,
            before_state=before_state,
            after_state=after_state,
            event_hash=create_event_hash(timestamp, event_type, str(entity.id), after_state, previous_hash),
            previous_hash=previous_hash,
        )
        self.store.insert(entry)
        return entry
