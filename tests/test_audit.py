"""
Hash-chained audit trail.
"""
from src.core.assessment_workflow import AssessmentAnswers, AssessmentWorkflow
from src.core.promotion import PromotionBridge
from src.core.triage import TriageGate
from src.models.audit_log import AuditLog
from src.utils.hashing import verify_audit_chain


def run_workflow(store, clock, analyst, make_signal, make_social_signal):
    gate = TriageGate(store, clock=clock)
    assessment = gate.accept(make_signal(store).id, analyst)
    gate.reject(make_signal(store).id, analyst, reason="Not relevant")
    AssessmentWorkflow(store, clock=clock).record_answers(assessment.id, analyst, AssessmentAnswers(q1=True))
    PromotionBridge(store, clock=clock).promote(make_social_signal(store).id, analyst)


class TestAuditTrail:

    def test_every_transition_is_recorded_in_order(self, store, clock, analyst, make_signal, make_social_signal):
        run_workflow(store, clock, analyst, make_signal, make_social_signal)

        entries = store.list(AuditLog, order_by="sequence", descending=False)

        assert [e.action for e in entries] == ["accept", "reject", "save", "promote"]
        assert [e.sequence for e in entries] == [1, 2, 3, 4]
        assert entries[0].previous_hash is None
        assert entries[1].previous_hash == entries[0].event_hash
        assert entries[1].reason == "Not relevant"
        assert all(e.actor == "analyst-1" for e in entries)

    def test_chain_verifies(self, store, clock, analyst, make_signal, make_social_signal):
        run_workflow(store, clock, analyst, make_signal, make_social_signal)
        entries = store.list(AuditLog, order_by="sequence", descending=False)

        assert verify_audit_chain(entries)

    def test_tampering_breaks_the_chain(self, store, clock, analyst, make_signal, make_social_signal):
        run_workflow(store, clock, analyst, make_signal, make_social_signal)
        entries = store.list(AuditLog, order_by="sequence", descending=False)

        entries[1].after_state = dict(entries[1].after_state, triage_status="Accepted")

        assert not verify_audit_chain(entries)

    def test_chain_verifies_after_database_round_trip(self, sql_store, db_session, clock, analyst,
                                                      make_signal, make_social_signal):
        run_workflow(sql_store, clock, analyst, make_signal, make_social_signal)
        db_session.expire_all()

        entries = sql_store.list(AuditLog, order_by="sequence", descending=False)

        assert len(entries) == 4
        assert verify_audit_chain(entries)
