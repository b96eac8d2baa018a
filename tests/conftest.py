"""
Shared fixtures: stores, a fixed clock, actors and record factories.
"""
import os

# Settings are read on first import of src; point them at SQLite before that
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.core.permissions import Actor
from src.models.base import Base
from src.models.signals import Signal
from src.models.social_signals import SocialSignal
from src.storage.memory_store import MemoryStore
from src.storage.sql_store import SqlAlchemyStore

NOW = datetime(2026, 1, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def sql_store(db_session):
    return SqlAlchemyStore(db_session)


@pytest.fixture
def analyst():
    return Actor(id="analyst-1", permissions={"triage": "edit", "assessment": "edit"})


@pytest.fixture
def director():
    return Actor(id="director-1", role="Director", permissions={"escalation": "edit"})


@pytest.fixture
def viewer():
    return Actor(id="viewer-1", role="Viewer", permissions={"triage": "view", "assessment": "view", "escalation": "view"})


@pytest.fixture
def make_signal():
    """Insert a Pending Triage signal into the given store."""
    counter = {"n": 0}

    def _make(target, **overrides):
        counter["n"] += 1
        fields = dict(
            beacon_event_id=f"evt-{counter['n']}",
            source_url=f"https://beaconbio.org/en/event?eventid=evt-{counter['n']}",
            raw_data={"source": "beacon"},
            disease="MERS-CoV",
            country="Saudi Arabia",
            date_reported=date(2026, 1, 30),
            cases=12,
            deaths=3,
            priority_score=90,
            created_at=NOW,
            updated_at=NOW,
        )
        fields.update(overrides)
        return target.insert(Signal(**fields))

    return _make


@pytest.fixture
def make_social_signal():
    """Insert a Pending social signal into the given store."""
    counter = {"n": 0}

    def _make(target, **overrides):
        counter["n"] += 1
        fields = dict(
            post_id=f"post_{counter['n']}",
            author="Saudi Ministry of Health",
            author_handle="@SaudiMOH",
            content="Alert: 15 cases of H5N1 reported in the Eastern Province",
            language="en",
            location="Riyadh, Saudi Arabia",
            urls=["https://moh.gov.sa/avian-flu-alert"],
            engagement={"likes": 1247, "retweets": 892, "replies": 234},
            detected_keywords=["H5N1", "alert", "cases"],
            relevance_score=84.5,
            posted_at=NOW,
            created_at=NOW,
            updated_at=NOW,
        )
        fields.update(overrides)
        return target.insert(SocialSignal(**fields))

    return _make
