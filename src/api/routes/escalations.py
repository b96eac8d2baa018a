"""
Director review endpoints.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from src.api.dependencies import get_actor, get_store
from src.api.schemas import EscalationResponse, ResolveRequest
from src.core.escalation_ledger import EscalationLedger
from src.core.exceptions import NotFound
from src.core.permissions import Actor
from src.models.escalations import Escalation
from src.storage.base_store import BaseStore
from src.utils.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT

router = APIRouter()

@router.get("/", response_model=List[EscalationResponse])
def list_escalations(
    director_status: Optional[str] = Query(None, description="Filter by status (Pending Review, Approved, Rejected)"),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    store: BaseStore = Depends(get_store)
):
    filters = {'director_status': director_status} if director_status else {}
    return store.list(Escalation, order_by='escalated_at', limit=limit, **filters)

@router.get("/{escalation_id}", response_model=EscalationResponse)
def get_escalation(escalation_id: str, store: BaseStore = Depends(get_store)):
    escalation = store.get(Escalation, escalation_id)
    if escalation is None:
        raise NotFound(f"Escalation {escalation_id} not found")
    return escalation

@router.post("/{escalation_id}/resolve", response_model=EscalationResponse)
def resolve_escalation(
    escalation_id: str,
    body: ResolveRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return EscalationLedger(store).resolve(
        escalation_id, actor, body.decision, notes=body.notes, actions_taken=body.actions_taken
    )
