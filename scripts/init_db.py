"""
Database initialization script.
Creates all tables and seeds the listener reference data from config/listener.yaml.
"""
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker
from src.models.base import Base
# CRITICAL: Import all models to register them
from src.models.signals import Signal  # noqa: F401
from src.models.assessments import Assessment  # noqa: F401
from src.models.escalations import Escalation  # noqa: F401
from src.models.social_signals import SocialSignal  # noqa: F401
from src.models.reference import MonitoredAccount, ListenerKeyword
from src.models.audit_log import AuditLog  # noqa: F401
from src.storage.base_store import BaseStore
from src.storage.sql_store import SqlAlchemyStore
from config.settings import get_settings, get_listener_config

def seed_reference_data(store: BaseStore) -> dict:
    """
    Insert configured accounts and keywords that are not stored yet.
    Existing rows are left alone so edits made in the database survive.
    """
    config = get_listener_config()
    counts = {'accounts': 0, 'keywords': 0}

    with store.transaction():
        for account in config['accounts']:
            record = MonitoredAccount(
                account_handle=account['handle'],
                account_name=account['name'],
                account_type=account['type'],
                region=account.get('region'),
                priority=account['priority'],
                is_active=True,
            )
            if store.insert_if_absent(record, 'account_handle'):
                counts['accounts'] += 1

        for keyword in config['keywords']:
            record = ListenerKeyword(
                keyword=keyword['keyword'],
                category=keyword['category'],
                language=keyword.get('language', 'en'),
                priority=keyword.get('priority', 2),
                is_active=True,
            )
            if store.insert_if_absent(record, 'keyword'):
                counts['keywords'] += 1

    return counts

def init_database():
    """
    Initialize database with all tables.
    Steps:
    1. Create all tables from SQLAlchemy models
    2. Seed monitored accounts and listener keywords
    3. Verify
    """
    settings = get_settings()
    engine = create_engine(settings.DATABASE_URL)

    print("GHI Signals - Database Initialization")
    print("=" * 50)

    # Step 1: Create all tables
    print("\n1. Creating all tables...")
    Base.metadata.create_all(bind=engine)
    print("  ✓ All tables created")

    # Step 2: Seed reference data
    print("\n2. Seeding reference data...")
    db = sessionmaker(bind=engine)()
    try:
        counts = seed_reference_data(SqlAlchemyStore(db))
    finally:
        db.close()
    print(f"  ✓ {counts['accounts']} accounts, {counts['keywords']} keywords added")

    # Step 3: Verify
    print("\n3. Verifying tables...")
    tables = sorted(inspect(engine).get_table_names())
    print(f"  ✓ Found {len(tables)} tables:")
    for table in tables:
        print(f"    - {table}")

    print("\n" + "=" * 50)
    print("✅ Database initialization complete!")
    print("\nNext steps:")
    print("1. Access API: http://localhost:8000/docs")
    print("2. Start workers: celery -A src.scheduler.celery_app worker --beat")

if __name__ == "__main__":
    init_database()
