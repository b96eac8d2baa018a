"""Signal database model."""
from sqlalchemy import Column, String, Numeric, TIMESTAMP, Integer, JSON, Text, Date, Boolean
from src.models.base import Base, new_id, utcnow
from src.utils.constants import TRIAGE_PENDING, SIGNAL_NEW

class Signal(Base):
    """
    Tracked outbreak events, from the Beacon feed or promoted social posts.
    """
    __tablename__ = 'signals'

    # Primary key
    id = Column(String(36), primary_key=True, default=new_id)

    # Idempotency key for Beacon ingestion (NULL for promoted social posts)
    beacon_event_id = Column(String(255), unique=True, index=True)

    # Source information
    source_url = Column(Text, nullable=False)
    raw_data = Column(JSON, nullable=False, default=dict)

    # Event details
    disease = Column(String(255), nullable=False)
    country = Column(String(100), nullable=False)
    location = Column(String(255))
    date_reported = Column(Date, nullable=False)
    date_onset = Column(Date)
    cases = Column(Integer, default=0)
    deaths = Column(Integer, default=0)
    case_fatality_rate = Column(Numeric(5, 2))
    description = Column(Text)
    outbreak_status = Column(String(50))

    # Triage
    triage_status = Column(String(50), default=TRIAGE_PENDING, index=True)
    triaged_by = Column(String(36))
    triaged_at = Column(TIMESTAMP(timezone=True))
    triage_notes = Column(Text)
    rejection_reason = Column(Text)

    # Scoring
    priority_score = Column(Numeric(5, 2))
    gcc_relevant = Column(Boolean, default=False)
    saudi_risk_level = Column(String(20))

    # Denormalized mirror of the workflow position
    current_status = Column(String(50), default=SIGNAL_NEW, index=True)

    # Audit
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    last_beacon_sync = Column(TIMESTAMP(timezone=True))

    def __repr__(self):
        return f"<Signal(id='{self.id}', disease='{self.disease}', country='{self.country}')>"
