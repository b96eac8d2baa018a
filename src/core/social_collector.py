"""
Social listener collector: pull a batch from the source, score, store.
"""
import time
from datetime import datetime
from typing import Callable, Dict, Optional
from src.core.account_directory import AccountDirectory
from src.core.keyword_matcher import KeywordMatcher
from src.core.signal_scorer import RelevanceScorer
from src.data.social_listener import FixtureSocialSource, SocialPost, SocialSource
from src.models.base import utcnow
from src.models.social_signals import SocialSignal
from src.storage.base_store import BaseStore
from src.utils.constants import SOURCE_SOCIAL, VERIFICATION_PENDING
from src.utils.metrics import (
    collection_duration, record_signal_ingested, record_duplicate_skipped, record_ingestion_failure,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)

class SocialListenerCollector:
    """
    Scores each candidate post once, at ingestion, and inserts it keyed by
    post_id. Already-stored posts are never re-scored.
    """

    def __init__(
        self,
        store: BaseStore,
        source: Optional[SocialSource] = None,
        scorer: Optional[RelevanceScorer] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.source = source or FixtureSocialSource()
        self.scorer = scorer or RelevanceScorer()
        self.clock = clock

    def run_once(self) -> Dict[str, int]:
        counts = {'inserted': 0, 'duplicates': 0, 'failed': 0}
        started = time.monotonic()
        now = self.clock()

        # Reference data may change between cycles
        matcher = KeywordMatcher.from_store(self.store)
        directory = AccountDirectory.from_store(self.store)

        posts = self.source.next_batch(now)
        logger.info(f"Starting social collection: {len(posts)} posts from {type(self.source).__name__}")

        for post in posts:
            try:
                record = self.to_social_signal(post, matcher, directory, now)
                inserted = self.store.insert_if_absent(record, 'post_id')
            except Exception as e:
                counts['failed'] += 1
                record_ingestion_failure(SOURCE_SOCIAL)
                logger.error(f"Failed to store social post {post.post_id}: {e}")
                continue

            if inserted:
                counts['inserted'] += 1
                record_signal_ingested(SOURCE_SOCIAL)
                logger.info(f"Social signal inserted: {post.post_id} from {post.author_handle} (relevance {record.relevance_score})")
            else:
                counts['duplicates'] += 1
                record_duplicate_skipped(SOURCE_SOCIAL)
                logger.info(f"Duplicate social post skipped: {post.post_id}")

        collection_duration.labels(source=SOURCE_SOCIAL).observe(time.monotonic() - started)
        logger.info(f"Social collection complete: {counts['inserted']} inserted, {counts['duplicates']} duplicates, {counts['failed']} failed")
        return counts

    def to_social_signal(
        self,
        post: SocialPost,
        matcher: KeywordMatcher,
        directory: AccountDirectory,
        now: datetime
    ) -> SocialSignal:
        keywords = matcher.detect(post.content)
        tier = directory.priority_of(post.author_handle)
        score = self.scorer.score(post, tier, keywords, now)

        return SocialSignal(
            platform=post.platform,
            post_id=post.post_id,
            author=post.author,
            author_handle=post.author_handle,
            content=post.content,
            language=post.language,
            location=post.location,
            hashtags=list(post.hashtags),
            mentions=list(post.mentions),
            urls=list(post.urls),
            engagement=dict(post.engagement),
            detected_keywords=sorted(keywords),
            relevance_score=score,
            verification_status=VERIFICATION_PENDING,
            is_dismissed=False,
            posted_at=post.posted_at,
            created_at=now,
            updated_at=now,
        )

def collect_social_signals(store: BaseStore, **kwargs) -> Dict[str, int]:
    """Scheduler entry point; never raises."""
    try:
        return SocialListenerCollector(store, **kwargs).run_once()
    except Exception as e:
        logger.exception(f"Social collection crashed: {e}")
        record_ingestion_failure(SOURCE_SOCIAL)
        return {'inserted': 0, 'duplicates': 0, 'failed': 0}
