"""Assessment database model."""
from sqlalchemy import Column, String, TIMESTAMP, JSON, Text, Boolean, ForeignKey
from src.models.base import Base, new_id, utcnow
from src.utils.constants import ASSESSMENT_DRAFT, ASSESSMENT_TYPE

class Assessment(Base):
    """
    One reviewer's IHR Annex 2 / Rapid Risk Assessment of a signal.
    """
    __tablename__ = 'assessments'

    id = Column(String(36), primary_key=True, default=new_id)
    signal_id = Column(String(36), ForeignKey('signals.id', ondelete='CASCADE'), nullable=False, index=True)
    assessment_type = Column(String(50), nullable=False, default=ASSESSMENT_TYPE)

    # IHR Annex 2 decision instrument
    ihr_question_1 = Column(Boolean)
    ihr_question_1_notes = Column(Text)
    ihr_question_2 = Column(Boolean)
    ihr_question_2_notes = Column(Text)
    ihr_question_3 = Column(Boolean)
    ihr_question_3_notes = Column(Text)
    ihr_question_4 = Column(Boolean)
    ihr_question_4_notes = Column(Text)
    ihr_decision = Column(String(50))

    # Rapid risk assessment
    rra_hazard_assessment = Column(JSON)
    rra_exposure_assessment = Column(JSON)
    rra_context_assessment = Column(JSON)
    rra_overall_risk = Column(String(20))
    rra_confidence_level = Column(String(20))
    rra_key_uncertainties = Column(JSON)
    rra_recommendations = Column(JSON)

    # Workflow
    status = Column(String(50), default=ASSESSMENT_DRAFT, index=True)
    assigned_to = Column(String(36), nullable=False)
    reviewed_by = Column(String(36))
    outcome_decision = Column(String(50))
    outcome_justification = Column(Text)

    # Audit
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    started_at = Column(TIMESTAMP(timezone=True))
    completed_at = Column(TIMESTAMP(timezone=True))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def ihr_answers(self) -> list:
        """The four IHR answers in question order."""
        return [self.ihr_question_1, self.ihr_question_2, self.ihr_question_3, self.ihr_question_4]

    def __repr__(self):
        return f"<Assessment(id='{self.id}', signal_id='{self.signal_id}', status='{self.status}')>"
