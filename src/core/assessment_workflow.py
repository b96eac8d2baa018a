"""
Assessment workflow: IHR Annex 2 matrix, rapid risk assessment, and the
decision to escalate or close out.
"""
from dataclasses import dataclass, asdict
from typing import Any, Iterable, Optional
from src.core.audit import snapshot
from src.core.escalation_ledger import EscalationLedger
from src.core.exceptions import Conflict, InvalidTransition, PreconditionFailed
from src.core.permissions import Actor
from src.core.workflow_base import WorkflowService
from src.models.assessments import Assessment
from src.models.base import utcnow
from src.models.escalations import Escalation
from src.models.signals import Signal
from src.utils.constants import (
    DOMAIN_ASSESSMENT, IHR_YES_THRESHOLD, IHR_MANDATORY_NOTIFICATION, IHR_LOCAL_MONITORING,
    ASSESSMENT_DRAFT, ASSESSMENT_UNDER_ASSESSMENT, ASSESSMENT_ESCALATED, ASSESSMENT_COMPLETED,
    ASSESSMENT_EDITABLE, ASSESSMENT_TYPE, RISK_LEVELS, RISK_CRITICAL, CONFIDENCE_LEVELS,
    TRIAGE_ACCEPTED, SIGNAL_UNDER_ASSESSMENT, SIGNAL_ESCALATED, SIGNAL_ARCHIVED,
    DEFAULT_ESCALATION_PRIORITY,
)
from src.utils.metrics import record_transition
from src.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ESCALATION_REASON = 'Criteria met for PH Emergency'

def count_yes(answers: Iterable[Optional[bool]]) -> int:
    return sum(1 for answer in answers if answer is True)

def ihr_decision(answers: Iterable[Optional[bool]]) -> str:
    """
    IHR Annex 2 analogue: two or more "yes" answers out of the four
    questions make the event notifiable.
    """
    if count_yes(answers) >= IHR_YES_THRESHOLD:
        return IHR_MANDATORY_NOTIFICATION
    return IHR_LOCAL_MONITORING

def is_escalation_eligible(assessment: Assessment) -> bool:
    """Escalation needs the 2-yes rule or a Critical overall risk."""
    return (
        ihr_decision(assessment.ihr_answers) == IHR_MANDATORY_NOTIFICATION
        or assessment.rra_overall_risk == RISK_CRITICAL
    )

@dataclass
class AssessmentAnswers:
    """Analyst input for one save; None leaves a field unchanged."""
    q1: Optional[bool] = None
    q2: Optional[bool] = None
    q3: Optional[bool] = None
    q4: Optional[bool] = None
    q1_notes: Optional[str] = None
    q2_notes: Optional[str] = None
    q3_notes: Optional[str] = None
    q4_notes: Optional[str] = None
    risk_level: Optional[str] = None
    confidence_level: Optional[str] = None
    hazard: Optional[Any] = None
    exposure: Optional[Any] = None
    context: Optional[Any] = None
    key_uncertainties: Optional[Any] = None
    recommendations: Optional[Any] = None

    def to_columns(self) -> dict:
        """Map provided answers onto Assessment column names."""
        mapping = {
            'q1': 'ihr_question_1', 'q2': 'ihr_question_2',
            'q3': 'ihr_question_3', 'q4': 'ihr_question_4',
            'q1_notes': 'ihr_question_1_notes', 'q2_notes': 'ihr_question_2_notes',
            'q3_notes': 'ihr_question_3_notes', 'q4_notes': 'ihr_question_4_notes',
            'risk_level': 'rra_overall_risk',
            'confidence_level': 'rra_confidence_level',
            'hazard': 'rra_hazard_assessment',
            'exposure': 'rra_exposure_assessment',
            'context': 'rra_context_assessment',
            'key_uncertainties': 'rra_key_uncertainties',
            'recommendations': 'rra_recommendations',
        }
        return {mapping[k]: v for k, v in asdict(self).items() if v is not None}

class AssessmentWorkflow(WorkflowService):
    """
    Draft -> Under Assessment -> Escalated | Completed.

    Answers are editable only while Draft or Under Assessment, so an
    escalated assessment's IHR answers are frozen; revisiting a case means
    opening a new assessment.
    """

    domain = DOMAIN_ASSESSMENT

    def __init__(self, store, permission_checker=None, clock=utcnow, ledger: Optional[EscalationLedger] = None):
        super().__init__(store, permission_checker, clock)
        self.ledger = ledger or EscalationLedger(store, self.permission_checker, self.clock)

    def create(self, signal_id: str, actor: Actor, assigned_to: Optional[str] = None) -> Assessment:
        """Open a new assessment on an accepted signal with no active one."""
        self._require_edit(actor)
        signal = self._load(Signal, signal_id)

        if signal.triage_status != TRIAGE_ACCEPTED:
            raise self._refuse(InvalidTransition(
                f"Signal {signal.id} is '{signal.triage_status}'; only accepted signals can be assessed"
            ))
        if self.active_for(signal.id):
            raise self._refuse(InvalidTransition(
                f"Signal {signal.id} already has an active assessment"
            ))

        now = self.clock()
        with self.store.transaction():
            assessment = Assessment(
                signal_id=signal.id,
                assessment_type=ASSESSMENT_TYPE,
                status=ASSESSMENT_DRAFT,
                assigned_to=assigned_to or actor.id,
                created_at=now,
                updated_at=now,
            )
            self.store.insert(assessment)
            self.store.update(signal, current_status=SIGNAL_UNDER_ASSESSMENT)
            self.audit.record('ASSESSMENT', assessment, actor.id, 'create')

        record_transition('assessment', 'create')
        logger.info(f"Assessment {assessment.id} created for signal {signal.id} by {actor.id}")
        return assessment

    def active_for(self, signal_id: str) -> list:
        return [
            a for a in self.store.list(Assessment, signal_id=signal_id)
            if a.status in ASSESSMENT_EDITABLE
        ]

    def start(self, assessment_id: str, actor: Actor) -> Assessment:
        """Draft -> Under Assessment."""
        self._require_edit(actor)
        assessment = self._load(Assessment, assessment_id)

        if assessment.status != ASSESSMENT_DRAFT:
            raise self._refuse(InvalidTransition(
                f"Assessment {assessment.id} is '{assessment.status}'; only drafts can be started"
            ))

        before = snapshot(assessment)
        with self.store.transaction():
            self.store.update(assessment, status=ASSESSMENT_UNDER_ASSESSMENT, started_at=self.clock())
            self.audit.record('ASSESSMENT', assessment, actor.id, 'start', before_state=before)

        record_transition('assessment', 'start')
        return assessment

    def record_answers(self, assessment_id: str, actor: Actor, answers: AssessmentAnswers) -> Assessment:
        """
        Save IHR answers and RRA sections. Does not change status.
        The IHR decision is derived once all four questions are answered.
        """
        self._require_edit(actor)
        assessment = self._load(Assessment, assessment_id)
        self._require_editable(assessment, 'edited')

        if answers.risk_level is not None and answers.risk_level not in RISK_LEVELS:
            raise self._refuse(PreconditionFailed(
                f"Risk level '{answers.risk_level}' is not one of {', '.join(RISK_LEVELS)}"
            ))
        if answers.confidence_level is not None and answers.confidence_level not in CONFIDENCE_LEVELS:
            raise self._refuse(PreconditionFailed(
                f"Confidence level '{answers.confidence_level}' is not one of {', '.join(CONFIDENCE_LEVELS)}"
            ))

        fields = answers.to_columns()
        merged = [
            fields.get(f'ihr_question_{i}', current)
            for i, current in enumerate(assessment.ihr_answers, start=1)
        ]
        if all(answer is not None for answer in merged):
            fields['ihr_decision'] = ihr_decision(merged)

        before = snapshot(assessment)
        with self.store.transaction():
            self.store.update(assessment, **fields)
            self.audit.record('ASSESSMENT', assessment, actor.id, 'save', before_state=before)

        record_transition('assessment', 'save')
        logger.info(
            f"Assessment {assessment.id} saved: {count_yes(assessment.ihr_answers)} IHR yes, "
            f"decision={assessment.ihr_decision}, risk={assessment.rra_overall_risk}"
        )
        return assessment

    def escalate(
        self,
        assessment_id: str,
        actor: Actor,
        reason: Optional[str] = None,
        priority: Optional[str] = None
    ) -> Escalation:
        """
        Raise the assessment to director review.

        Raises:
            PreconditionFailed: fewer than two IHR "yes" answers and risk not Critical
            Conflict: an escalation is already pending for this assessment
        """
        self._require_edit(actor)
        assessment = self._load(Assessment, assessment_id)
        if self.ledger.pending_for(assessment.id):
            raise self._refuse(Conflict(
                f"Assessment {assessment.id} already has an escalation pending director review"
            ))
        self._require_editable(assessment, 'escalated')

        if not is_escalation_eligible(assessment):
            raise self._refuse(PreconditionFailed(
                f"Assessment {assessment.id} has {count_yes(assessment.ihr_answers)} IHR 'yes' answers "
                f"(needs {IHR_YES_THRESHOLD}) and overall risk '{assessment.rra_overall_risk}' (needs {RISK_CRITICAL})"
            ))

        now = self.clock()
        before = snapshot(assessment)
        with self.store.transaction():
            escalation = self.ledger.open(
                assessment,
                actor,
                reason or DEFAULT_ESCALATION_REASON,
                priority or DEFAULT_ESCALATION_PRIORITY,
                now
            )
            self.store.update(assessment, status=ASSESSMENT_ESCALATED)
            signal = self.store.get(Signal, assessment.signal_id)
            if signal is not None:
                self.store.update(signal, current_status=SIGNAL_ESCALATED)
            self.audit.record('ASSESSMENT', assessment, actor.id, 'escalate', reason, before)

        record_transition('assessment', 'escalate')
        logger.info(f"Assessment {assessment.id} escalated as {escalation.id} by {actor.id}")
        return escalation

    def complete(
        self,
        assessment_id: str,
        actor: Actor,
        outcome_decision: str,
        justification: Optional[str] = None
    ) -> Assessment:
        """Close out without escalation; archives the signal."""
        self._require_edit(actor)
        assessment = self._load(Assessment, assessment_id)
        self._require_editable(assessment, 'completed')

        now = self.clock()
        before = snapshot(assessment)
        with self.store.transaction():
            self.store.update(
                assessment,
                status=ASSESSMENT_COMPLETED,
                outcome_decision=outcome_decision,
                outcome_justification=justification,
                reviewed_by=actor.id,
                completed_at=now,
            )
            signal = self.store.get(Signal, assessment.signal_id)
            if signal is not None:
                self.store.update(signal, current_status=SIGNAL_ARCHIVED)
            self.audit.record('ASSESSMENT', assessment, actor.id, 'complete', justification, before)

        record_transition('assessment', 'complete')
        logger.info(f"Assessment {assessment.id} completed ({outcome_decision}) by {actor.id}")
        return assessment

    def _require_editable(self, assessment: Assessment, verb: str):
        if assessment.status not in ASSESSMENT_EDITABLE:
            raise self._refuse(InvalidTransition(
                f"Assessment {assessment.id} is '{assessment.status}' and can no longer be {verb}"
            ))
