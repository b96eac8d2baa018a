"""Social signal database model."""
from sqlalchemy import Column, String, Numeric, TIMESTAMP, JSON, Text, Boolean, ForeignKey
from src.models.base import Base, new_id, utcnow
from src.utils.constants import PLATFORM_TWITTER, VERIFICATION_PENDING

def _empty_engagement() -> dict:
    return {'likes': 0, 'retweets': 0, 'replies': 0}

class SocialSignal(Base):
    """
    Unverified candidate posts drawn from monitored social accounts.
    The relevance score is a point-in-time snapshot taken at ingestion.
    """
    __tablename__ = 'social_signals'

    id = Column(String(36), primary_key=True, default=new_id)
    platform = Column(String(50), nullable=False, default=PLATFORM_TWITTER)

    # Idempotency key for social ingestion
    post_id = Column(String(255), unique=True, nullable=False, index=True)

    # Post
    author = Column(String(255), nullable=False)
    author_handle = Column(String(255), nullable=False, index=True)
    content = Column(Text, nullable=False)
    language = Column(String(10), default='en')
    location = Column(String(255))
    hashtags = Column(JSON, default=list)
    mentions = Column(JSON, default=list)
    urls = Column(JSON, default=list)
    engagement = Column(JSON, default=_empty_engagement)

    # Scoring
    detected_keywords = Column(JSON, default=list)
    relevance_score = Column(Numeric(5, 2), default=0)
    sentiment_score = Column(Numeric(5, 2))

    # Verification
    verification_status = Column(String(50), default=VERIFICATION_PENDING, index=True)
    related_signal_id = Column(String(36), ForeignKey('signals.id', ondelete='SET NULL'))
    promoted_at = Column(TIMESTAMP(timezone=True))
    promoted_by = Column(String(36))
    is_dismissed = Column(Boolean, default=False, index=True)

    posted_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<SocialSignal(post_id='{self.post_id}', handle='{self.author_handle}', score={self.relevance_score})>"
