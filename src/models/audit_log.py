"""Audit log database model."""
from sqlalchemy import Column, String, TIMESTAMP, Integer, JSON
from src.models.base import Base, new_id, utcnow

class AuditLog(Base):
    """
    Immutable trail of workflow transitions with hash-chain integrity.
    """
    __tablename__ = 'audit_log'

    # Primary key
    id = Column(String(36), primary_key=True, default=new_id)
    sequence = Column(Integer, nullable=False, index=True)
    timestamp = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, index=True)

    # Event details
    event_type = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(64), nullable=False, index=True)

    # Actor and action
    actor = Column(String(50), nullable=False)
    action = Column(String(255), nullable=False)
    reason = Column(String(255))

    # State snapshots
    before_state = Column(JSON)
    after_state = Column(JSON)

    # Cryptographic integrity
    event_hash = Column(String(64), nullable=False)
    previous_hash = Column(String(64))
