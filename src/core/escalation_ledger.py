"""
Escalation ledger: director-level review of escalated assessments.
"""
from datetime import datetime
from typing import List, Optional
from src.core.audit import snapshot
from src.core.exceptions import Conflict, InvalidTransition, PreconditionFailed
from src.core.permissions import Actor
from src.core.workflow_base import WorkflowService
from src.models.assessments import Assessment
from src.models.escalations import Escalation
from src.models.signals import Signal
from src.utils.constants import (
    DOMAIN_ESCALATION, DIRECTOR_PENDING, DIRECTOR_APPROVED, DIRECTOR_REJECTED,
    DIRECTOR_DECISIONS, DEFAULT_ESCALATION_LEVEL, RISK_LEVELS,
    SIGNAL_RESPONSE_ACTIVATED, SIGNAL_CLOSED,
)
from src.utils.metrics import record_transition
from src.utils.logging import get_logger

logger = get_logger(__name__)

# Signal status mirrored from the director's decision
SIGNAL_STATUS_BY_DECISION = {
    DIRECTOR_APPROVED: SIGNAL_RESPONSE_ACTIVATED,
    DIRECTOR_REJECTED: SIGNAL_CLOSED,
}

class EscalationLedger(WorkflowService):
    """
    Pending Review -> Approved | Rejected.

    At most one escalation per assessment may be pending at a time.
    A resolved escalation is terminal.
    """

    domain = DOMAIN_ESCALATION

    def pending_for(self, assessment_id: str) -> List[Escalation]:
        return self.store.list(Escalation, assessment_id=assessment_id, director_status=DIRECTOR_PENDING)

    def open(
        self,
        assessment: Assessment,
        actor: Actor,
        reason: str,
        priority: str,
        now: datetime
    ) -> Escalation:
        """
        Raise an escalation for an assessment.
        Called by AssessmentWorkflow.escalate inside its transaction.
        """
        if priority not in RISK_LEVELS:
            raise self._refuse(PreconditionFailed(
                f"Escalation priority '{priority}' is not one of {', '.join(RISK_LEVELS)}"
            ))
        if self.pending_for(assessment.id):
            raise self._refuse(Conflict(
                f"Assessment {assessment.id} already has an escalation pending director review"
            ))

        escalation = Escalation(
            signal_id=assessment.signal_id,
            assessment_id=assessment.id,
            escalation_level=DEFAULT_ESCALATION_LEVEL,
            priority=priority,
            escalation_reason=reason,
            recommended_actions=assessment.rra_recommendations,
            director_status=DIRECTOR_PENDING,
            escalated_by=actor.id,
            escalated_at=now,
            created_at=now,
            updated_at=now,
        )
        self.store.insert(escalation)
        self.audit.record('ESCALATION', escalation, actor.id, 'open', reason)
        return escalation

    def resolve(
        self,
        escalation_id: str,
        actor: Actor,
        decision: str,
        notes: Optional[str] = None,
        actions_taken: Optional[list] = None
    ) -> Escalation:
        """
        Record the director's review.

        Args:
            escalation_id: Escalation under review
            actor: Director; needs edit on escalation
            decision: Approved or Rejected (terminal), or Pending Review to
                record notes without deciding
            notes: Director notes
            actions_taken: Response actions already taken

        Returns:
            Updated escalation
        """
        self._require_edit(actor)
        escalation = self._load(Escalation, escalation_id)

        if escalation.director_status != DIRECTOR_PENDING or escalation.resolved_at is not None:
            raise self._refuse(InvalidTransition(
                f"Escalation {escalation.id} was already resolved as '{escalation.director_status}'"
            ))
        if decision not in DIRECTOR_DECISIONS and decision != DIRECTOR_PENDING:
            raise self._refuse(PreconditionFailed(
                f"Director decision must be one of {', '.join(DIRECTOR_DECISIONS)} or '{DIRECTOR_PENDING}'"
            ))

        now = self.clock()
        before = snapshot(escalation)
        fields = dict(
            director_status=decision,
            director_notes=notes,
            reviewed_by=actor.id,
            reviewed_at=now,
        )
        if actions_taken is not None:
            fields['actions_taken'] = actions_taken

        terminal = decision in DIRECTOR_DECISIONS
        if terminal:
            fields.update(director_decision=decision, resolved_at=now)

        with self.store.transaction():
            self.store.update(escalation, **fields)
            if terminal:
                signal = self.store.get(Signal, escalation.signal_id)
                if signal is not None:
                    self.store.update(signal, current_status=SIGNAL_STATUS_BY_DECISION[decision])
            self.audit.record('ESCALATION', escalation, actor.id, 'resolve' if terminal else 'review', notes, before)

        record_transition('escalation', decision.lower().replace(' ', '_'))
        logger.info(f"Escalation {escalation.id} reviewed by {actor.id}: {decision}")
        return escalation
