"""
Beacon outbreak feed fetcher and parser.

The Beacon site is a client-rendered app, so it is fetched through a
markdown reader proxy. The markdown is parsed in named stages:
block splitter -> header matcher -> line classifier -> field extractor.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse
import requests
from config.settings import get_settings
from src.core.exceptions import TransientIngestionError
from src.utils.logging import get_logger

logger = get_logger(__name__)

# Events are separated by markdown horizontal rules
BLOCK_DELIMITER = re.compile(r'\n\* \* \*\n')
# [Disease, Country](link)
HEADER_PATTERN = re.compile(r'\[(.*?), (.*?)\]\((.*?)\)')
# Fri 30 Jan 2026
DATE_LINE_PATTERN = re.compile(r'^[A-Z][a-z]{2}\s+\d{1,2}\s+[A-Z][a-z]{2}\s+\d{4}$')
REPORT_COUNT_PATTERN = re.compile(r'^\d+ reports?$', re.IGNORECASE)
CASES_PATTERN = re.compile(r'(\d+)\s+cases', re.IGNORECASE)
DEATHS_PATTERN = re.compile(r'(\d+)\s+deaths', re.IGNORECASE)

class LineKind(str, Enum):
    """Classification of a line inside an event block."""
    DATE = "DATE"
    IMAGE = "IMAGE"
    REPORT_COUNT = "REPORT_COUNT"
    TEXT = "TEXT"

@dataclass
class BeaconEvent:
    """One parsed Beacon event, ready to become a Signal."""
    disease: str
    country: str
    source_url: str
    beacon_event_id: str
    date_reported: date
    description: str = ""
    cases: int = 0
    deaths: int = 0
    case_fatality_rate: Optional[Decimal] = None
    raw_block: str = field(default="", repr=False)

    @property
    def location(self) -> str:
        return self.country

    def to_raw_data(self) -> dict:
        """JSON-safe payload kept on the signal for provenance."""
        return {
            'disease': self.disease,
            'country': self.country,
            'cases': self.cases,
            'deaths': self.deaths,
            'description': self.description,
            'source_url': self.source_url,
            'beacon_event_id': self.beacon_event_id,
            'date_reported': self.date_reported.isoformat(),
            'block': self.raw_block,
        }

# ========== PARSER STAGES ==========

def split_blocks(document: str) -> List[str]:
    """Split a feed document into candidate event blocks."""
    if not document:
        return []
    return BLOCK_DELIMITER.split(document.replace('\r\n', '\n'))

def match_header(block: str) -> Optional[Tuple[str, str, str]]:
    """Extract (disease, country, link) from an event block, or None for page chrome."""
    match = HEADER_PATTERN.search(block)
    if not match:
        return None
    disease, country, link = (part.strip() for part in match.groups())
    if not disease or not country or not link:
        return None
    return disease, country, link

def classify_line(line: str) -> LineKind:
    if DATE_LINE_PATTERN.match(line):
        return LineKind.DATE
    if line.startswith('!['):
        return LineKind.IMAGE
    if REPORT_COUNT_PATTERN.match(line):
        return LineKind.REPORT_COUNT
    return LineKind.TEXT

def parse_report_date(line: str) -> Optional[date]:
    """Parse 'Fri 30 Jan 2026'; None when the calendar date is invalid."""
    parts = line.split()
    try:
        return datetime.strptime(' '.join(parts[1:]), '%d %b %Y').date()
    except ValueError:
        return None

def extract_count(text: str, pattern: re.Pattern) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0

def extract_event_id(link: str) -> str:
    """Stable external id: the link's eventid query parameter, else the link itself."""
    values = parse_qs(urlparse(link).query).get('eventid')
    if values and values[0]:
        return values[0]
    if 'eventid=' in link:
        candidate = link.split('eventid=')[-1].split('&')[0]
        if candidate:
            return candidate
    return link

def case_fatality_rate(cases: int, deaths: int) -> Optional[Decimal]:
    """Deaths per 100 cases, two decimals; None without cases."""
    if cases <= 0:
        return None
    rate = min(Decimal(100), Decimal(deaths) * 100 / Decimal(cases))
    return rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

class BeaconParser:
    """Turns the reader-proxy markdown into BeaconEvent records."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or get_settings().BEACON_BASE_URL).rstrip('/')

    def parse(self, document: str, collected_at: datetime) -> List[BeaconEvent]:
        events = []
        for block in split_blocks(document):
            try:
                event = self.parse_block(block, collected_at)
            except ValueError as e:
                logger.warning(f"Skipping unparseable Beacon block: {e}")
                continue
            if event is not None:
                events.append(event)
        return events

    def parse_block(self, block: str, collected_at: datetime) -> Optional[BeaconEvent]:
        header = match_header(block)
        if header is None:
            return None

        disease, country, link = header
        source_url = link if link.startswith('http') else f"{self.base_url}{link}"

        lines = [line.strip() for line in block.split('\n') if line.strip()]
        header_index = next(i for i, line in enumerate(lines) if HEADER_PATTERN.search(line))

        reported = None
        description_parts = []
        for line in lines[header_index + 1:]:
            kind = classify_line(line)
            if kind == LineKind.DATE:
                if reported is None:
                    reported = parse_report_date(line)
                continue
            if kind in (LineKind.IMAGE, LineKind.REPORT_COUNT):
                continue
            description_parts.append(line)

        description = ' '.join(description_parts)
        cases = extract_count(description, CASES_PATTERN)
        deaths = extract_count(description, DEATHS_PATTERN)

        return BeaconEvent(
            disease=disease,
            country=country,
            source_url=source_url,
            beacon_event_id=extract_event_id(source_url),
            date_reported=reported or collected_at.date(),
            description=description,
            cases=cases,
            deaths=deaths,
            case_fatality_rate=case_fatality_rate(cases, deaths),
            raw_block=block.strip(),
        )

class BeaconFetcher:
    """
    Fetches the Beacon landing page through the reader proxy.
    Free, no API key needed.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        proxy_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.BEACON_BASE_URL).rstrip('/')
        self.proxy_url = proxy_url if proxy_url is not None else settings.BEACON_READER_PROXY
        self.timeout = timeout or settings.BEACON_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)',
            'Accept': 'text/plain, text/markdown'
        })

    @property
    def feed_url(self) -> str:
        return f"{self.proxy_url}{self.base_url}/en/"

    def fetch_document(self) -> str:
        """
        Retrieve the rendered feed.

        Raises:
            TransientIngestionError: on network failure, timeout or HTTP error
        """
        logger.info(f"Fetching Beacon feed from {self.feed_url}")

        try:
            response = self.session.get(self.feed_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransientIngestionError(f"Beacon fetch failed: {e}") from e

        return response.text
