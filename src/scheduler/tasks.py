"""
Celery background tasks.
"""
from celery import Task
from src.scheduler.celery_app import app
from src.models.base import SessionLocal
from src.storage.sql_store import SqlAlchemyStore
from src.core import beacon_collector, social_collector
from src.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseTask(Task):
    """Base task with database session management."""
    _db = None

    @property
    def db(self):
        if self._db is None:
            self._db = SessionLocal()
        return self._db

    @property
    def store(self):
        return SqlAlchemyStore(self.db)

    def after_return(self, *args, **kwargs):
        if self._db is not None:
            self._db.close()
            self._db = None


@app.task(base=DatabaseTask, bind=True)
def collect_beacon_events(self):
    """
    Periodic task: one Beacon feed collection cycle.
    Failures are absorbed inside the collector; the counts are the result.
    """
    logger.info("Beacon collection task started")
    return beacon_collector.collect_beacon_events(self.store)


@app.task(base=DatabaseTask, bind=True)
def collect_social_signals(self):
    """
    Periodic task: one social listener cycle.
    """
    logger.info("Social collection task started")
    return social_collector.collect_social_signals(self.store)
