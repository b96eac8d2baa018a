"""Cryptographic hashing for audit trail integrity."""
import hashlib
import json
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, Any, Optional

def json_default(obj):
    """Serialize Decimal and date values for canonical JSON."""
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

def create_event_hash(
    timestamp: datetime,
    event_type: str,
    entity_id: str,
    after_state: Dict[str, Any],
    previous_hash: Optional[str] = None
) -> str:
    """
    Create SHA-256 hash of event for audit trail.
    The previous hash is folded in so that rewriting any entry breaks the chain.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)

    event_data = {
        'timestamp': timestamp.isoformat(),
        'event_type': event_type,
        'entity_id': entity_id,
        'after_state': after_state,
        'previous_hash': previous_hash or ''
    }

    # Create canonical JSON with Decimal handling
    canonical_json = json.dumps(event_data, sort_keys=True, default=json_default)

    # Hash
    hash_obj = hashlib.sha256(canonical_json.encode('utf-8'))
    return hash_obj.hexdigest()

def verify_audit_chain(audit_logs: list) -> bool:
    """Verify integrity of audit log chain (entries in write order)."""
    for i, entry in enumerate(audit_logs):
        expected = create_event_hash(
            entry.timestamp,
            entry.event_type,
            entry.entity_id,
            entry.after_state,
            entry.previous_hash
        )
        if entry.event_hash != expected:
            return False
        if i > 0 and entry.previous_hash != audit_logs[i - 1].event_hash:
            return False

    return True
