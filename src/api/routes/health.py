"""
Health check endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from config.settings import get_settings
from src.models.base import get_db, utcnow
from src.models.signals import Signal
from src.utils.constants import SOURCE_BEACON
import redis

router = APIRouter()

@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.
    Verifies database connectivity and reports the last Beacon sync.
    """
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        last_sync = db.query(func.max(Signal.last_beacon_sync)).scalar()

        return {
            "status": "healthy",
            "timestamp": utcnow().isoformat(),
            "database": "connected",
            "last_sync": {SOURCE_BEACON: last_sync.isoformat() if last_sync else None},
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "timestamp": utcnow().isoformat(),
            "database": "disconnected",
            "error": str(e)
        }

@router.get("/celery/status")
def celery_status():
    """
    Celery worker status endpoint.
    Checks Redis connectivity and worker count.
    """
    settings = get_settings()
    try:
        r = redis.Redis(host=settings.REDIS_HOST, port=settings.REDIS_PORT, decode_responses=True)

        # Check if Celery is active by looking for task metadata
        celery_keys = r.keys('celery-task-meta-*')
        worker_count = len(celery_keys) if celery_keys else 0

        return {
            "status": "healthy" if worker_count > 0 else "idle",
            "workers": worker_count,
            "timestamp": utcnow().isoformat()
        }
    except redis.RedisError as e:
        return {
            "status": "unhealthy",
            "workers": 0,
            "timestamp": utcnow().isoformat(),
            "error": str(e)
        }
