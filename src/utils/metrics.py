"""Prometheus metrics exporters."""
from prometheus_client import Counter, Histogram, CollectorRegistry

# Create registry
registry = CollectorRegistry()

# ========== INGESTION METRICS ==========
signals_ingested = Counter(
    'signals_ingested_total',
    'Total number of records inserted by collectors',
    ['source'],
    registry=registry
)

duplicates_skipped = Counter(
    'signals_duplicates_skipped_total',
    'Total number of collected records skipped as already present',
    ['source'],
    registry=registry
)

ingestion_failures = Counter(
    'ingestion_failures_total',
    'Total number of absorbed collection failures',
    ['source'],
    registry=registry
)

collection_duration = Histogram(
    'collection_cycle_seconds',
    'Collection cycle duration in seconds',
    ['source'],
    registry=registry
)

# ========== WORKFLOW METRICS ==========
workflow_transitions = Counter(
    'workflow_transitions_total',
    'Total number of workflow transitions',
    ['entity', 'action'],
    registry=registry
)

workflow_rejections = Counter(
    'workflow_rejections_total',
    'Total number of refused workflow transitions',
    ['error'],
    registry=registry
)

# ========== HELPER FUNCTIONS ==========
def record_signal_ingested(source: str):
    """Record a new collected record."""
    signals_ingested.labels(source=source).inc()

def record_duplicate_skipped(source: str):
    """Record an idempotent skip."""
    duplicates_skipped.labels(source=source).inc()

def record_ingestion_failure(source: str):
    """Record an absorbed ingestion failure."""
    ingestion_failures.labels(source=source).inc()

def record_transition(entity: str, action: str):
    """Record a workflow transition."""
    workflow_transitions.labels(entity=entity, action=action).inc()

def record_rejection(error: str):
    """Record a refused workflow transition."""
    workflow_rejections.labels(error=error).inc()
