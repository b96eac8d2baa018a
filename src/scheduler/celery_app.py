"""
Celery application configuration.
"""
from celery import Celery
from config.settings import get_settings

settings = get_settings()

# Create Celery app
app = Celery(
    'ghi_signals',
    broker=f'redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0',
    backend=f'redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/0',
    include=['src.scheduler.tasks']
)

# Celery configuration
app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,  # a stuck cycle is abandoned, the next one starts clean
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

# Schedule configuration; overlapping runs are safe, inserts are keyed
app.conf.beat_schedule = {
    'collect-beacon-events': {
        'task': 'src.scheduler.tasks.collect_beacon_events',
        'schedule': settings.BEACON_SCHEDULE_MINUTES * 60.0,
    },
    'collect-social-signals': {
        'task': 'src.scheduler.tasks.collect_social_signals',
        'schedule': settings.SOCIAL_SCHEDULE_MINUTES * 60.0,
    },
}

if __name__ == '__main__':
    app.start()
