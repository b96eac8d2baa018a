"""Reference data for the social listener: monitored accounts and keywords."""
from sqlalchemy import Column, String, TIMESTAMP, Integer, Text, Boolean
from src.models.base import Base, new_id, utcnow
from src.utils.constants import PLATFORM_TWITTER

class MonitoredAccount(Base):
    """Known social accounts and their priority tier (1 = official)."""
    __tablename__ = 'monitored_accounts'

    id = Column(String(36), primary_key=True, default=new_id)
    platform = Column(String(50), nullable=False, default=PLATFORM_TWITTER)
    account_handle = Column(String(255), unique=True, nullable=False)
    account_name = Column(String(255), nullable=False)
    account_type = Column(String(50), nullable=False)  # official, media, expert, influencer
    region = Column(String(100))
    priority = Column(Integer, default=2)
    is_active = Column(Boolean, default=True)
    description = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

class ListenerKeyword(Base):
    """Keywords watched by the social listener."""
    __tablename__ = 'listener_keywords'

    id = Column(String(36), primary_key=True, default=new_id)
    keyword = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)  # disease, location, severity, metric
    language = Column(String(10), default='en')
    priority = Column(Integer, default=2)
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
