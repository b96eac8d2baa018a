"""Escalation database model."""
from sqlalchemy import Column, String, TIMESTAMP, JSON, Text, ForeignKey
from src.models.base import Base, new_id, utcnow
from src.utils.constants import DEFAULT_ESCALATION_LEVEL, DIRECTOR_PENDING

class Escalation(Base):
    """
    Director-facing review package raised from an assessment.
    """
    __tablename__ = 'escalations'

    id = Column(String(36), primary_key=True, default=new_id)
    signal_id = Column(String(36), ForeignKey('signals.id'), nullable=False, index=True)
    assessment_id = Column(String(36), ForeignKey('assessments.id'), nullable=False, index=True)

    escalation_level = Column(String(50), default=DEFAULT_ESCALATION_LEVEL)
    priority = Column(String(20), nullable=False)
    escalation_reason = Column(Text, nullable=False)
    recommended_actions = Column(JSON)

    # Director review
    director_status = Column(String(50), default=DIRECTOR_PENDING, index=True)
    director_decision = Column(Text)
    director_notes = Column(Text)
    actions_taken = Column(JSON)
    reviewed_by = Column(String(36))
    reviewed_at = Column(TIMESTAMP(timezone=True))

    escalated_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    escalated_by = Column(String(36), nullable=False)
    resolved_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None

    def __repr__(self):
        return f"<Escalation(id='{self.id}', assessment_id='{self.assessment_id}', status='{self.director_status}')>"
