"""
Promotion bridge: social posts become formal signals in the triage pool.
"""
from typing import Optional
from src.core.audit import snapshot
from src.core.exceptions import AlreadyPromoted, InvalidTransition
from src.core.permissions import Actor
from src.core.signal_scorer import is_gcc_country
from src.core.workflow_base import WorkflowService
from src.models.signals import Signal
from src.models.social_signals import SocialSignal
from src.utils.constants import (
    DOMAIN_TRIAGE, TRIAGE_PENDING, SIGNAL_NEW, SOURCE_SOCIAL,
    VERIFICATION_PROMOTED, VERIFICATION_DISMISSED,
)
from src.utils.metrics import record_transition
from src.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN = 'Unknown'

def canonical_post_url(social: SocialSignal) -> str:
    """First URL shared in the post, else a permalink to the post itself."""
    if social.urls:
        return social.urls[0]
    handle = (social.author_handle or '').lstrip('@')
    return f"https://twitter.com/{handle}/status/{social.post_id}"

class PromotionBridge(WorkflowService):
    """
    Pending -> Promoted | Dismissed for social signals.

    Promotion is not repeatable: a second attempt raises AlreadyPromoted and
    leaves both the social signal and the signal pool untouched.
    """

    domain = DOMAIN_TRIAGE

    def promote(
        self,
        social_signal_id: str,
        actor: Actor,
        disease: Optional[str] = None,
        country: Optional[str] = None
    ) -> Signal:
        """
        Convert a social signal into a Pending Triage signal.

        The new signal is dated at promotion time, not at the post's time,
        and inherits the post's relevance score as its priority.
        """
        self._require_edit(actor)
        social = self._load(SocialSignal, social_signal_id)

        if social.verification_status == VERIFICATION_PROMOTED or social.related_signal_id:
            raise self._refuse(AlreadyPromoted(
                f"Social signal {social.id} was already promoted to signal {social.related_signal_id}"
            ))
        if social.is_dismissed:
            raise self._refuse(InvalidTransition(
                f"Social signal {social.id} was dismissed and cannot be promoted"
            ))

        now = self.clock()
        country = country or social.location or UNKNOWN
        before = snapshot(social)

        with self.store.transaction():
            signal = Signal(
                source_url=canonical_post_url(social),
                raw_data={
                    'source': SOURCE_SOCIAL,
                    'social_signal_id': social.id,
                    'platform': social.platform,
                    'post_id': social.post_id,
                    'original_post': social.content,
                    'author': social.author,
                    'author_handle': social.author_handle,
                    'engagement': social.engagement,
                    'posted_at': social.posted_at.isoformat() if social.posted_at else None,
                },
                disease=disease or UNKNOWN,
                country=country,
                location=social.location,
                date_reported=now.date(),
                description=social.content,
                priority_score=social.relevance_score,
                gcc_relevant=is_gcc_country(country),
                triage_status=TRIAGE_PENDING,
                current_status=SIGNAL_NEW,
                created_at=now,
                updated_at=now,
            )
            self.store.insert(signal)
            self.store.update(
                social,
                related_signal_id=signal.id,
                promoted_at=now,
                promoted_by=actor.id,
                verification_status=VERIFICATION_PROMOTED,
            )
            self.audit.record('PROMOTION', social, actor.id, 'promote', before_state=before)

        record_transition('social_signal', 'promote')
        logger.info(f"Social signal {social.id} promoted to signal {signal.id} by {actor.id}")
        return signal

    def dismiss(self, social_signal_id: str, actor: Actor) -> SocialSignal:
        """Dismiss a social signal. Irreversible; repeating it is a no-op."""
        self._require_edit(actor)
        social = self._load(SocialSignal, social_signal_id)

        if social.is_dismissed:
            return social
        if social.verification_status == VERIFICATION_PROMOTED:
            raise self._refuse(InvalidTransition(
                f"Social signal {social.id} was promoted and cannot be dismissed"
            ))

        before = snapshot(social)
        with self.store.transaction():
            self.store.update(social, is_dismissed=True, verification_status=VERIFICATION_DISMISSED)
            self.audit.record('PROMOTION', social, actor.id, 'dismiss', before_state=before)

        record_transition('social_signal', 'dismiss')
        logger.info(f"Social signal {social.id} dismissed by {actor.id}")
        return social
