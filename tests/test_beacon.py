"""
Beacon feed parsing stages and the collection cycle.
"""
from datetime import date
from decimal import Decimal

import pytest
import requests

from src.core.beacon_collector import BeaconCollector, collect_beacon_events
from src.core.exceptions import TransientIngestionError
from src.data.beacon import (
    BeaconFetcher, BeaconParser, LineKind, case_fatality_rate, classify_line,
    extract_event_id, match_header, parse_report_date, split_blocks,
)
from src.models.signals import Signal
from src.storage.memory_store import MemoryStore

FEED = """Title: Beacon

Markdown Content:
[Home](https://beaconbio.org/en/)

* * *
[MERS-CoV, Saudi Arabia](https://beaconbio.org/en/event?eventid=abc123)
Fri 30 Jan 2026
![map](https://beaconbio.org/static/map.png)
3 reports
Saudi Ministry of Health reports 12 cases and 3 deaths in Riyadh.
* * *
[Cholera, Yemen](/en/event?eventid=yem-9&lang=en)
Thu 29 Jan 2026
127 cases reported across provinces,
8 deaths so far.
* * *
Footer text
"""


class StubFetcher:
    feed_url = "https://r.jina.ai/https://beaconbio.org/en/"

    def __init__(self, document=FEED, error=None):
        self.document = document
        self.error = error
        self.calls = 0

    def fetch_document(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.document


class TestParserStages:

    def test_split_blocks(self):
        blocks = split_blocks(FEED)
        assert len(blocks) == 4
        assert blocks[1].startswith("[MERS-CoV, Saudi Arabia]")

    def test_split_empty_document(self):
        assert split_blocks("") == []

    def test_match_header(self):
        assert match_header("[Ebola, DRC](https://x/event?eventid=1)") == ("Ebola", "DRC", "https://x/event?eventid=1")

    def test_chrome_has_no_header(self):
        assert match_header("[Home](https://beaconbio.org/en/)") is None
        assert match_header("Footer text") is None

    @pytest.mark.parametrize("line, kind", [
        ("Fri 30 Jan 2026", LineKind.DATE),
        ("![map](https://img)", LineKind.IMAGE),
        ("3 reports", LineKind.REPORT_COUNT),
        ("1 report", LineKind.REPORT_COUNT),
        ("12 cases reported", LineKind.TEXT),
    ])
    def test_classify_line(self, line, kind):
        assert classify_line(line) == kind

    def test_parse_report_date(self):
        assert parse_report_date("Fri 30 Jan 2026") == date(2026, 1, 30)
        assert parse_report_date("Mon 30 Feb 2026") is None

    def test_extract_event_id(self):
        assert extract_event_id("https://beaconbio.org/en/event?eventid=abc123") == "abc123"
        assert extract_event_id("https://beaconbio.org/en/event?lang=en&eventid=x9") == "x9"
        assert extract_event_id("https://beaconbio.org/en/event/77") == "https://beaconbio.org/en/event/77"

    def test_case_fatality_rate(self):
        assert case_fatality_rate(12, 3) == Decimal("25.00")
        assert case_fatality_rate(127, 8) == Decimal("6.30")
        assert case_fatality_rate(0, 5) is None
        assert case_fatality_rate(2, 5) == Decimal("100.00")


class TestBeaconParser:

    @pytest.fixture
    def events(self, now):
        return BeaconParser("https://beaconbio.org").parse(FEED, now)

    def test_only_event_blocks_are_parsed(self, events):
        assert [(e.disease, e.country) for e in events] == [("MERS-CoV", "Saudi Arabia"), ("Cholera", "Yemen")]

    def test_fields_of_first_event(self, events):
        mers = events[0]
        assert mers.beacon_event_id == "abc123"
        assert mers.date_reported == date(2026, 1, 30)
        assert mers.description == "Saudi Ministry of Health reports 12 cases and 3 deaths in Riyadh."
        assert mers.cases == 12
        assert mers.deaths == 3

    def test_relative_link_is_resolved(self, events):
        cholera = events[1]
        assert cholera.source_url == "https://beaconbio.org/en/event?eventid=yem-9&lang=en"
        assert cholera.beacon_event_id == "yem-9"
        assert cholera.description == "127 cases reported across provinces, 8 deaths so far."
        assert cholera.cases == 127
        assert cholera.deaths == 8

    def test_missing_date_defaults_to_collection_time(self, now):
        event = BeaconParser("https://beaconbio.org").parse_block("[Ebola, DRC](/en/event?eventid=e1)\nNo counts yet", now)
        assert event.date_reported == now.date()
        assert event.cases == 0
        assert event.deaths == 0
        assert event.case_fatality_rate is None

    def test_first_date_wins(self, now):
        block = "[Ebola, DRC](/en/event?eventid=e1)\nFri 30 Jan 2026\nThu 29 Jan 2026\ntext"
        event = BeaconParser("https://beaconbio.org").parse_block(block, now)
        assert event.date_reported == date(2026, 1, 30)
        assert event.description == "text"


class TestBeaconFetcher:

    class FailingSession:
        def __init__(self):
            self.headers = {}

        def get(self, url, timeout=None):
            raise requests.ConnectionError("connection refused")

    def test_feed_url_goes_through_reader_proxy(self):
        fetcher = BeaconFetcher("https://beaconbio.org", "https://r.jina.ai/", 5, self.FailingSession())
        assert fetcher.feed_url == "https://r.jina.ai/https://beaconbio.org/en/"

    def test_network_error_is_transient(self):
        fetcher = BeaconFetcher("https://beaconbio.org", "https://r.jina.ai/", 5, self.FailingSession())
        with pytest.raises(TransientIngestionError):
            fetcher.fetch_document()


class TestBeaconCollector:

    def test_inserts_signals(self, store, clock, now):
        counts = BeaconCollector(store, fetcher=StubFetcher(), clock=clock).run_once()

        assert counts == {"inserted": 2, "duplicates": 0, "failed": 0}
        mers = store.get_by(Signal, "beacon_event_id", "abc123")
        assert mers.priority_score == 100
        assert mers.gcc_relevant is True
        assert mers.case_fatality_rate == Decimal("25.00")
        assert mers.triage_status == "Pending Triage"
        assert mers.current_status == "New"
        assert mers.last_beacon_sync == now
        assert mers.raw_data["disease"] == "MERS-CoV"

        cholera = store.get_by(Signal, "beacon_event_id", "yem-9")
        assert cholera.priority_score == 80
        assert cholera.gcc_relevant is False

    def test_second_run_inserts_nothing(self, store, clock):
        collector = BeaconCollector(store, fetcher=StubFetcher(), clock=clock)
        collector.run_once()
        before = {s.id: s.description for s in store.list(Signal)}

        counts = collector.run_once()

        assert counts == {"inserted": 0, "duplicates": 2, "failed": 0}
        assert {s.id: s.description for s in store.list(Signal)} == before

    def test_fetch_failure_ends_cycle_cleanly(self, store, clock):
        fetcher = StubFetcher(error=TransientIngestionError("timeout"))
        counts = BeaconCollector(store, fetcher=fetcher, clock=clock).run_once()

        assert counts == {"inserted": 0, "duplicates": 0, "failed": 0}
        assert store.list(Signal) == []

    def test_one_bad_record_does_not_abort_the_batch(self, clock):
        class FlakyStore(MemoryStore):
            def insert_if_absent(self, record, key):
                if getattr(record, key) == "abc123":
                    raise RuntimeError("disk full")
                return super().insert_if_absent(record, key)

        store = FlakyStore()
        counts = BeaconCollector(store, fetcher=StubFetcher(), clock=clock).run_once()

        assert counts == {"inserted": 1, "duplicates": 0, "failed": 1}
        assert [s.beacon_event_id for s in store.list(Signal)] == ["yem-9"]

    def test_entry_point_never_raises(self, store, clock):
        fetcher = StubFetcher(error=RuntimeError("unexpected"))
        assert collect_beacon_events(store, fetcher=fetcher, clock=clock) == {"inserted": 0, "duplicates": 0, "failed": 0}

    def test_idempotent_against_database(self, sql_store, clock):
        collector = BeaconCollector(sql_store, fetcher=StubFetcher(), clock=clock)

        assert collector.run_once()["inserted"] == 2
        assert collector.run_once()["inserted"] == 0
        assert len(sql_store.list(Signal)) == 2

    def test_oversized_count_does_not_stall_the_database_cycle(self, sql_store, clock):
        feed = (
            "[MERS-CoV, Saudi Arabia](https://beaconbio.org/en/event?eventid=big)\n"
            "99999999999999999999 cases reported\n"
            "* * *\n"
            "[Cholera, Yemen](https://beaconbio.org/en/event?eventid=ok)\n"
            "15 cases and 3 deaths\n"
        )
        collector = BeaconCollector(sql_store, fetcher=StubFetcher(document=feed), clock=clock)

        counts = collector.run_once()

        assert counts == {"inserted": 1, "duplicates": 0, "failed": 1}
        assert [s.beacon_event_id for s in sql_store.list(Signal)] == ["ok"]
        assert collector.run_once() == {"inserted": 0, "duplicates": 1, "failed": 1}
