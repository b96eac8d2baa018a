"""
Signal triage endpoints.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from src.api.dependencies import get_actor, get_store
from src.api.schemas import SignalResponse, AssessmentResponse, AcceptRequest, RejectRequest
from src.core.exceptions import NotFound
from src.core.permissions import Actor
from src.core.triage import TriageGate
from src.models.signals import Signal
from src.storage.base_store import BaseStore
from src.utils.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT

router = APIRouter()

@router.get("/", response_model=List[SignalResponse])
def list_signals(
    triage_status: Optional[str] = Query(None, description="Filter by triage status (Pending Triage, Accepted, Rejected)"),
    current_status: Optional[str] = Query(None, description="Filter by workflow status"),
    gcc_relevant: Optional[bool] = Query(None, description="Only GCC-relevant signals"),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT, description="Maximum number of results"),
    store: BaseStore = Depends(get_store)
):
    """
    List signals, newest first.
    """
    filters = {}
    if triage_status:
        filters['triage_status'] = triage_status
    if current_status:
        filters['current_status'] = current_status
    if gcc_relevant is not None:
        filters['gcc_relevant'] = gcc_relevant

    return store.list(Signal, order_by='created_at', limit=limit, **filters)

@router.get("/{signal_id}", response_model=SignalResponse)
def get_signal(signal_id: str, store: BaseStore = Depends(get_store)):
    signal = store.get(Signal, signal_id)
    if signal is None:
        raise NotFound(f"Signal {signal_id} not found")
    return signal

@router.post("/{signal_id}/accept", response_model=AssessmentResponse, status_code=201)
def accept_signal(
    signal_id: str,
    body: AcceptRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    """
    Accept a signal; returns the Draft assessment opened for it.
    """
    return TriageGate(store).accept(signal_id, actor, notes=body.notes, assigned_to=body.assigned_to)

@router.post("/{signal_id}/reject", response_model=SignalResponse)
def reject_signal(
    signal_id: str,
    body: RejectRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return TriageGate(store).reject(signal_id, actor, reason=body.reason)
