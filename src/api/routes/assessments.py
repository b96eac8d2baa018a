"""
Assessment endpoints: IHR questions, RRA, escalation and close-out.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from src.api.dependencies import get_actor, get_store
from src.api.schemas import (
    AssessmentResponse, EscalationResponse, CreateAssessmentRequest,
    AnswersRequest, EscalateRequest, CompleteRequest,
)
from src.core.assessment_workflow import AssessmentAnswers, AssessmentWorkflow
from src.core.exceptions import NotFound
from src.core.permissions import Actor
from src.models.assessments import Assessment
from src.storage.base_store import BaseStore
from src.utils.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT

router = APIRouter()

@router.get("/", response_model=List[AssessmentResponse])
def list_assessments(
    status: Optional[str] = Query(None, description="Filter by status (Draft, Under Assessment, Escalated, Completed)"),
    signal_id: Optional[str] = Query(None, description="Filter by signal"),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    store: BaseStore = Depends(get_store)
):
    filters = {}
    if status:
        filters['status'] = status
    if signal_id:
        filters['signal_id'] = signal_id
    return store.list(Assessment, order_by='created_at', limit=limit, **filters)

@router.get("/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(assessment_id: str, store: BaseStore = Depends(get_store)):
    assessment = store.get(Assessment, assessment_id)
    if assessment is None:
        raise NotFound(f"Assessment {assessment_id} not found")
    return assessment

@router.post("/", response_model=AssessmentResponse, status_code=201)
def create_assessment(
    body: CreateAssessmentRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return AssessmentWorkflow(store).create(body.signal_id, actor, assigned_to=body.assigned_to)

@router.post("/{assessment_id}/start", response_model=AssessmentResponse)
def start_assessment(
    assessment_id: str,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return AssessmentWorkflow(store).start(assessment_id, actor)

@router.put("/{assessment_id}", response_model=AssessmentResponse)
def save_answers(
    assessment_id: str,
    body: AnswersRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    """
    Save IHR answers and RRA sections. Omitted fields are left unchanged.
    """
    answers = AssessmentAnswers(**body.model_dump())
    return AssessmentWorkflow(store).record_answers(assessment_id, actor, answers)

@router.post("/{assessment_id}/escalate", response_model=EscalationResponse, status_code=201)
def escalate_assessment(
    assessment_id: str,
    body: EscalateRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    """
    Escalate to director review. Refused with 409 unless two or more IHR
    answers are yes or the overall risk is Critical.
    """
    return AssessmentWorkflow(store).escalate(assessment_id, actor, reason=body.reason, priority=body.priority)

@router.post("/{assessment_id}/complete", response_model=AssessmentResponse)
def complete_assessment(
    assessment_id: str,
    body: CompleteRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return AssessmentWorkflow(store).complete(
        assessment_id, actor, body.outcome_decision, justification=body.justification
    )
