"""SQLAlchemy base configuration and session management."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from config.settings import get_settings

settings = get_settings()

# SQLite (local development, tests) does not take pool sizing arguments
engine_kwargs = {'pool_pre_ping': True}
if not settings.DATABASE_URL.startswith('sqlite'):
    engine_kwargs.update(pool_size=10, max_overflow=20)

# Create database engine
engine = create_engine(settings.DATABASE_URL, **engine_kwargs)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()

def new_id() -> str:
    """Primary key generator shared by all tables."""
    return str(uuid.uuid4())

def utcnow() -> datetime:
    """Timezone-aware UTC now, used as the default clock."""
    return datetime.now(timezone.utc)

def get_db() -> Session:
    """
    Dependency for FastAPI routes.
    Provides database session and ensures cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
