"""
Signal scoring.

Two deterministic scorers:
- RelevanceScorer: 0-100 relevance for social posts from four additive
  components (account, keywords, engagement, recency).
- calculate_beacon_priority: 0-100 integer priority for Beacon events.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Set
import numpy as np
from config.settings import get_listener_config
from src.utils.constants import (
    ACCOUNT_TIER_POINTS, DEFAULT_ACCOUNT_TIER,
    KEYWORD_POINTS_CRITICAL_AND_GCC, KEYWORD_POINTS_CRITICAL_OR_GCC, KEYWORD_POINTS_ANY_MATCH,
    ENGAGEMENT_REPOST_WEIGHT, ENGAGEMENT_LOG_MULTIPLIER, ENGAGEMENT_MAX_POINTS,
    RECENCY_BUCKETS, RECENCY_STALE_POINTS, MAX_RELEVANCE_SCORE, SCORE_PRECISION,
    BEACON_BASE_PRIORITY, BEACON_DISEASE_BONUS, BEACON_COUNTRY_BONUS,
    BEACON_CASE_THRESHOLD, BEACON_CASE_BONUS, MAX_PRIORITY_SCORE, GCC_COUNTRIES,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)

@dataclass
class ScoringFactors:
    """Individual relevance components before capping."""
    account_score: float
    keyword_score: float
    engagement_score: float
    recency_score: float

    @property
    def total(self) -> float:
        raw = self.account_score + self.keyword_score + self.engagement_score + self.recency_score
        return round(min(MAX_RELEVANCE_SCORE, max(0.0, raw)), SCORE_PRECISION)

class RelevanceScorer:
    """
    Quantifies how relevant a social post is to GCC outbreak surveillance.

    Scoring Process:
    1. Account tier (official 40, expert 25, unknown 10)
    2. Keywords (critical term and GCC location 30, either 20, any match 10)
    3. Engagement, log-scaled and capped at 20
    4. Recency (<=1h 10, <=6h 7, <=24h 5, older 2)
    Total is capped at 100 and rounded to two decimals.

    Pure: "now" is injected, nothing is read or written.
    """

    def __init__(
        self,
        critical_keywords: Optional[Iterable[str]] = None,
        gcc_locations: Optional[Iterable[str]] = None
    ):
        config = get_listener_config()
        self.critical_keywords: Set[str] = set(critical_keywords if critical_keywords is not None else config['critical_keywords'])
        self.gcc_locations = list(gcc_locations if gcc_locations is not None else config['gcc_locations'])

    def score(self, post, tier: int, matched_keywords: Set[str], now: Optional[datetime] = None) -> float:
        """Score a post; `post` needs content, location, engagement and posted_at."""
        return self.score_factors(post, tier, matched_keywords, now).total

    def score_factors(self, post, tier: int, matched_keywords: Set[str], now: Optional[datetime] = None) -> ScoringFactors:
        if now is None:
            now = datetime.now(timezone.utc)

        return ScoringFactors(
            account_score=self._score_account(tier),
            keyword_score=self._score_keywords(post, matched_keywords),
            engagement_score=self._score_engagement(post.engagement),
            recency_score=self._score_recency(post.posted_at, now),
        )

    def _score_account(self, tier: int) -> float:
        return ACCOUNT_TIER_POINTS.get(tier, ACCOUNT_TIER_POINTS[DEFAULT_ACCOUNT_TIER])

    def _score_keywords(self, post, matched_keywords: Set[str]) -> float:
        has_critical = any(k in self.critical_keywords for k in matched_keywords)
        has_gcc = any(k in self.gcc_locations for k in matched_keywords) or self._mentions_gcc(post)

        if has_critical and has_gcc:
            return KEYWORD_POINTS_CRITICAL_AND_GCC
        elif has_critical or has_gcc:
            return KEYWORD_POINTS_CRITICAL_OR_GCC
        elif matched_keywords:
            return KEYWORD_POINTS_ANY_MATCH
        return 0.0

    def _mentions_gcc(self, post) -> bool:
        """Fallback: GCC place names anywhere in the content or declared location."""
        content = post.content or ''
        location = post.location or ''
        return any(loc in content or loc in location for loc in self.gcc_locations)

    def _score_engagement(self, engagement: Optional[Dict[str, int]]) -> float:
        engagement = engagement or {}
        total = (
            max(0, int(engagement.get('likes', 0)))
            + ENGAGEMENT_REPOST_WEIGHT * max(0, int(engagement.get('retweets', 0)))
            + max(0, int(engagement.get('replies', 0)))
        )
        # +1 keeps log10 defined at zero engagement
        return float(min(ENGAGEMENT_MAX_POINTS, np.log10(total + 1) * ENGAGEMENT_LOG_MULTIPLIER))

    def _score_recency(self, posted_at: datetime, now: datetime) -> float:
        hours_ago = (now - posted_at).total_seconds() / 3600.0

        for max_hours, points in RECENCY_BUCKETS:
            if hours_ago <= max_hours:
                return points
        return RECENCY_STALE_POINTS

def calculate_beacon_priority(disease: str, country: str, cases: int) -> int:
    """
    Beacon event priority: base 50, disease and country bonuses
    (which stack), a bonus above 50 cases, capped at 100.
    """
    disease = (disease or '').lower()
    country = (country or '').lower()

    score = BEACON_BASE_PRIORITY
    for needle, bonus in BEACON_DISEASE_BONUS.items():
        if needle in disease:
            score += bonus
    for needle, bonus in BEACON_COUNTRY_BONUS.items():
        if needle in country:
            score += bonus
            break
    if (cases or 0) > BEACON_CASE_THRESHOLD:
        score += BEACON_CASE_BONUS

    return min(score, MAX_PRIORITY_SCORE)

def is_gcc_country(country: Optional[str]) -> bool:
    """Whole-word match so that e.g. Romania does not count as Oman."""
    country = (country or '').lower()
    return any(re.search(rf"\b{re.escape(name)}\b", country) for name in GCC_COUNTRIES)
