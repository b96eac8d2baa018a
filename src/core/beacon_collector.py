"""
Beacon collector: one best-effort ingestion cycle over the Beacon feed.
"""
import time
from datetime import datetime
from typing import Callable, Dict, Optional
from src.core.exceptions import TransientIngestionError
from src.core.signal_scorer import calculate_beacon_priority, is_gcc_country
from src.data.beacon import BeaconEvent, BeaconFetcher, BeaconParser
from src.models.base import utcnow
from src.models.signals import Signal
from src.storage.base_store import BaseStore
from src.utils.constants import SOURCE_BEACON, TRIAGE_PENDING, SIGNAL_NEW
from src.utils.metrics import (
    collection_duration, record_signal_ingested, record_duplicate_skipped, record_ingestion_failure,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)

class BeaconCollector:
    """
    Fetch -> parse -> score -> insert-if-absent, keyed by beacon_event_id.

    Nothing is kept between runs except the signals table, so overlapping
    cycles are safe: the second writer of an event id is a no-op.
    """

    def __init__(
        self,
        store: BaseStore,
        fetcher: Optional[BeaconFetcher] = None,
        parser: Optional[BeaconParser] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.fetcher = fetcher or BeaconFetcher()
        self.parser = parser or BeaconParser()
        self.clock = clock

    def run_once(self) -> Dict[str, int]:
        """
        Run one collection cycle.

        Returns:
            Counts of inserted, duplicate and failed events
        """
        counts = {'inserted': 0, 'duplicates': 0, 'failed': 0}
        started = time.monotonic()
        now = self.clock()

        logger.info("Starting Beacon collection")

        try:
            document = self.fetcher.fetch_document()
        except TransientIngestionError as e:
            logger.error(f"Beacon fetch failed, cycle abandoned: {e}")
            record_ingestion_failure(SOURCE_BEACON)
            return counts

        events = self.parser.parse(document, now)
        logger.info(f"Parsed {len(events)} Beacon events")

        for event in events:
            try:
                inserted = self.store.insert_if_absent(self.to_signal(event, now), 'beacon_event_id')
            except Exception as e:
                counts['failed'] += 1
                record_ingestion_failure(SOURCE_BEACON)
                logger.error(f"Failed to store Beacon event {event.beacon_event_id}: {e}")
                continue

            if inserted:
                counts['inserted'] += 1
                record_signal_ingested(SOURCE_BEACON)
                logger.info(f"Signal inserted: {event.disease}, {event.country} ({event.beacon_event_id})")
            else:
                counts['duplicates'] += 1
                record_duplicate_skipped(SOURCE_BEACON)
                logger.info(f"Duplicate Beacon event skipped: {event.beacon_event_id}")

        collection_duration.labels(source=SOURCE_BEACON).observe(time.monotonic() - started)
        logger.info(f"Beacon collection complete: {counts['inserted']} inserted, {counts['duplicates']} duplicates, {counts['failed']} failed")
        return counts

    @staticmethod
    def to_signal(event: BeaconEvent, now: datetime) -> Signal:
        return Signal(
            beacon_event_id=event.beacon_event_id,
            source_url=event.source_url,
            raw_data=event.to_raw_data(),
            disease=event.disease,
            country=event.country,
            location=event.location,
            date_reported=event.date_reported,
            cases=event.cases,
            deaths=event.deaths,
            case_fatality_rate=event.case_fatality_rate,
            description=event.description,
            priority_score=calculate_beacon_priority(event.disease, event.country, event.cases),
            gcc_relevant=is_gcc_country(event.country),
            triage_status=TRIAGE_PENDING,
            current_status=SIGNAL_NEW,
            created_at=now,
            updated_at=now,
            last_beacon_sync=now,
        )

def collect_beacon_events(store: BaseStore, **kwargs) -> Dict[str, int]:
    """Scheduler entry point; never raises."""
    try:
        return BeaconCollector(store, **kwargs).run_once()
    except Exception as e:
        logger.exception(f"Beacon collection crashed: {e}")
        record_ingestion_failure(SOURCE_BEACON)
        return {'inserted': 0, 'duplicates': 0, 'failed': 0}
