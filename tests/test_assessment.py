"""
Assessment workflow: IHR decision rule, escalation preconditions, close-out.
"""
import pytest

from src.core.assessment_workflow import (
    AssessmentAnswers, AssessmentWorkflow, count_yes, ihr_decision,
)
from src.core.escalation_ledger import EscalationLedger
from src.core.exceptions import Conflict, InvalidTransition, PermissionDenied, PreconditionFailed
from src.core.triage import TriageGate
from src.models.assessments import Assessment
from src.models.escalations import Escalation
from src.models.signals import Signal


@pytest.fixture
def workflow(store, clock):
    return AssessmentWorkflow(store, clock=clock)


@pytest.fixture
def assessment(store, clock, analyst, make_signal):
    signal = make_signal(store)
    return TriageGate(store, clock=clock).accept(signal.id, analyst)


class TestDecisionRule:

    @pytest.mark.parametrize("answers, expected", [
        ([True, True, False, False], "Mandatory Notification"),
        ([True, True, True, True], "Mandatory Notification"),
        ([True, False, False, False], "Local Monitoring"),
        ([False, False, False, False], "Local Monitoring"),
        ([True, None, None, False], "Local Monitoring"),
    ])
    def test_two_yes_answers_make_event_notifiable(self, answers, expected):
        assert ihr_decision(answers) == expected

    def test_count_yes_ignores_unanswered(self):
        assert count_yes([True, None, False, True]) == 2


class TestRecordAnswers:

    def test_answers_and_rra_are_saved_without_status_change(self, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(
            q1=True, q1_notes="Unusual cluster", q2=False,
            risk_level="High", confidence_level="Moderate",
            hazard={"agent": "MERS-CoV"}, exposure={"route": "camel contact"}, context={"season": "Hajj"},
        ))

        assert assessment.ihr_question_1 is True
        assert assessment.ihr_question_1_notes == "Unusual cluster"
        assert assessment.ihr_question_2 is False
        assert assessment.rra_overall_risk == "High"
        assert assessment.rra_confidence_level == "Moderate"
        assert assessment.rra_hazard_assessment == {"agent": "MERS-CoV"}
        assert assessment.status == "Draft"

    def test_decision_is_stored_once_all_four_are_answered(self, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, q2=True))
        assert assessment.ihr_decision is None

        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q3=False, q4=False))
        assert assessment.ihr_decision == "Mandatory Notification"

    def test_omitted_fields_are_left_unchanged(self, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, risk_level="Low"))
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q2=True))

        assert assessment.ihr_question_1 is True
        assert assessment.rra_overall_risk == "Low"

    def test_unknown_risk_level_is_refused(self, workflow, assessment, analyst):
        with pytest.raises(PreconditionFailed):
            workflow.record_answers(assessment.id, analyst, AssessmentAnswers(risk_level="Severe"))
        assert assessment.rra_overall_risk is None

    def test_requires_assessment_edit(self, workflow, assessment, viewer):
        with pytest.raises(PermissionDenied):
            workflow.record_answers(assessment.id, viewer, AssessmentAnswers(q1=True))


class TestLifecycle:

    def test_start_moves_draft_under_assessment(self, workflow, assessment, analyst, now):
        workflow.start(assessment.id, analyst)

        assert assessment.status == "Under Assessment"
        assert assessment.started_at == now
        with pytest.raises(InvalidTransition):
            workflow.start(assessment.id, analyst)

    def test_create_requires_accepted_signal(self, store, workflow, analyst, make_signal):
        signal = make_signal(store)
        with pytest.raises(InvalidTransition):
            workflow.create(signal.id, analyst)

    def test_create_refused_while_one_is_active(self, workflow, assessment, analyst):
        with pytest.raises(InvalidTransition):
            workflow.create(assessment.signal_id, analyst)

    def test_reassessment_after_completion(self, store, workflow, assessment, analyst):
        workflow.complete(assessment.id, analyst, "Local Monitoring")

        second = workflow.create(assessment.signal_id, analyst)

        assert second.status == "Draft"
        assert len(store.list(Assessment, signal_id=assessment.signal_id)) == 2
        assert store.get(Signal, assessment.signal_id).current_status == "Under Assessment"

    def test_complete_archives_signal(self, store, workflow, assessment, analyst, now):
        workflow.complete(assessment.id, analyst, "Local Monitoring", justification="Single sporadic case")

        assert assessment.status == "Completed"
        assert assessment.outcome_decision == "Local Monitoring"
        assert assessment.outcome_justification == "Single sporadic case"
        assert assessment.reviewed_by == "analyst-1"
        assert assessment.completed_at == now
        assert store.get(Signal, assessment.signal_id).current_status == "Archived"

    def test_completed_assessment_is_terminal(self, workflow, assessment, analyst):
        workflow.complete(assessment.id, analyst, "Local Monitoring")

        with pytest.raises(InvalidTransition):
            workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True))
        with pytest.raises(InvalidTransition):
            workflow.escalate(assessment.id, analyst)


class TestEscalate:

    def test_one_yes_answer_is_not_enough(self, store, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, q2=False, q3=False, q4=False))

        with pytest.raises(PreconditionFailed) as excinfo:
            workflow.escalate(assessment.id, analyst)

        assert "1 IHR 'yes'" in excinfo.value.reason
        assert store.list(Escalation) == []
        assert assessment.status == "Draft"

    def test_two_yes_answers_escalate(self, store, workflow, assessment, analyst, now):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(
            q1=True, q2=True, q3=False, q4=False, recommendations=["Deploy rapid response team"],
        ))

        escalation = workflow.escalate(assessment.id, analyst, reason="Hajj exposure risk")

        assert escalation.director_status == "Pending Review"
        assert escalation.priority == "High"
        assert escalation.escalation_reason == "Hajj exposure risk"
        assert escalation.escalated_by == "analyst-1"
        assert escalation.escalated_at == now
        assert escalation.recommended_actions == ["Deploy rapid response team"]
        assert assessment.status == "Escalated"
        assert store.get(Signal, assessment.signal_id).current_status == "Escalated"
        assert store.list(Escalation) == [escalation]

    def test_critical_risk_escalates_without_two_yes(self, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(risk_level="Critical"))

        escalation = workflow.escalate(assessment.id, analyst, priority="Critical")

        assert escalation.priority == "Critical"
        assert escalation.escalation_reason == "Criteria met for PH Emergency"

    def test_unknown_priority_changes_nothing(self, store, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, q2=True))

        with pytest.raises(PreconditionFailed):
            workflow.escalate(assessment.id, analyst, priority="Urgent")

        assert assessment.status == "Draft"
        assert store.list(Escalation) == []

    def test_answers_are_frozen_after_escalation(self, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, q2=True))
        workflow.escalate(assessment.id, analyst)

        with pytest.raises(InvalidTransition):
            workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=False))
        assert assessment.ihr_question_1 is True

        with pytest.raises(InvalidTransition):
            workflow.complete(assessment.id, analyst, "Local Monitoring")

    def test_second_pending_escalation_is_a_conflict(self, store, clock, now, workflow, assessment, analyst):
        workflow.record_answers(assessment.id, analyst, AssessmentAnswers(q1=True, q2=True))
        workflow.escalate(assessment.id, analyst)

        with pytest.raises(Conflict):
            workflow.escalate(assessment.id, analyst, reason="again")
        with pytest.raises(Conflict):
            EscalationLedger(store, clock=clock).open(assessment, analyst, "again", "High", now)
        assert len(store.list(Escalation)) == 1
