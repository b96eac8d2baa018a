"""
Triage gate: the one-shot accept/reject decision on a signal.
"""
from typing import Optional
from src.core.audit import snapshot
from src.core.exceptions import InvalidTransition
from src.core.permissions import Actor
from src.core.workflow_base import WorkflowService
from src.models.assessments import Assessment
from src.models.signals import Signal
from src.utils.constants import (
    DOMAIN_TRIAGE, TRIAGE_PENDING, TRIAGE_ACCEPTED, TRIAGE_REJECTED,
    SIGNAL_UNDER_ASSESSMENT, SIGNAL_ARCHIVED, ASSESSMENT_DRAFT, ASSESSMENT_TYPE,
)
from src.utils.metrics import record_transition
from src.utils.logging import get_logger

logger = get_logger(__name__)

class TriageGate(WorkflowService):
    """
    Pending Triage -> Accepted | Rejected.

    Accepting a signal opens a Draft assessment in the same transaction.
    There is no re-triage: an accepted or rejected signal stays that way.
    """

    domain = DOMAIN_TRIAGE

    def accept(
        self,
        signal_id: str,
        actor: Actor,
        notes: Optional[str] = None,
        assigned_to: Optional[str] = None
    ) -> Assessment:
        """
        Accept a signal for assessment.

        Args:
            signal_id: Signal to accept
            actor: Caller; needs edit on triage
            notes: Optional triage notes
            assigned_to: Analyst for the new assessment (defaults to the caller)

        Returns:
            The Draft assessment created for the signal
        """
        self._require_edit(actor)
        signal = self._load(Signal, signal_id)
        self._require_pending(signal)

        now = self.clock()
        before = snapshot(signal)

        with self.store.transaction():
            self.store.update(
                signal,
                triage_status=TRIAGE_ACCEPTED,
                current_status=SIGNAL_UNDER_ASSESSMENT,
                triaged_by=actor.id,
                triaged_at=now,
                triage_notes=notes,
            )
            assessment = Assessment(
                signal_id=signal.id,
                assessment_type=ASSESSMENT_TYPE,
                status=ASSESSMENT_DRAFT,
                assigned_to=assigned_to or actor.id,
                created_at=now,
                updated_at=now,
            )
            self.store.insert(assessment)
            self.audit.record('TRIAGE', signal, actor.id, 'accept', notes, before)

        record_transition('signal', 'accept')
        logger.info(f"Signal {signal.id} accepted by {actor.id}, assessment {assessment.id} opened")
        return assessment

    def reject(self, signal_id: str, actor: Actor, reason: Optional[str] = None) -> Signal:
        """Reject a signal and archive it."""
        self._require_edit(actor)
        signal = self._load(Signal, signal_id)
        self._require_pending(signal)

        now = self.clock()
        before = snapshot(signal)

        with self.store.transaction():
            self.store.update(
                signal,
                triage_status=TRIAGE_REJECTED,
                current_status=SIGNAL_ARCHIVED,
                triaged_by=actor.id,
                triaged_at=now,
                rejection_reason=reason,
            )
            self.audit.record('TRIAGE', signal, actor.id, 'reject', reason, before)

        record_transition('signal', 'reject')
        logger.info(f"Signal {signal.id} rejected by {actor.id}: {reason}")
        return signal

    def _require_pending(self, signal: Signal):
        if signal.triage_status != TRIAGE_PENDING:
            raise self._refuse(InvalidTransition(
                f"Signal {signal.id} is already '{signal.triage_status}'; triage is one-shot"
            ))
