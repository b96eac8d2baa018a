"""
Social listener endpoints: review queue, promotion and dismissal.
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from src.api.dependencies import get_actor, get_store
from src.api.schemas import SignalResponse, SocialSignalResponse, PromoteRequest
from src.core.exceptions import NotFound
from src.core.permissions import Actor
from src.core.promotion import PromotionBridge
from src.models.social_signals import SocialSignal
from src.storage.base_store import BaseStore
from src.utils.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT

router = APIRouter()

@router.get("/", response_model=List[SocialSignalResponse])
def list_social_signals(
    verification_status: Optional[str] = Query(None, description="Filter by status (Pending, Promoted, Dismissed)"),
    include_dismissed: bool = Query(False),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    store: BaseStore = Depends(get_store)
):
    """
    Review queue, highest relevance first. Dismissed posts are hidden
    unless asked for.
    """
    filters = {}
    if verification_status:
        filters['verification_status'] = verification_status
    if not include_dismissed:
        filters['is_dismissed'] = False
    return store.list(SocialSignal, order_by='relevance_score', limit=limit, **filters)

@router.get("/{social_signal_id}", response_model=SocialSignalResponse)
def get_social_signal(social_signal_id: str, store: BaseStore = Depends(get_store)):
    social = store.get(SocialSignal, social_signal_id)
    if social is None:
        raise NotFound(f"SocialSignal {social_signal_id} not found")
    return social

@router.post("/{social_signal_id}/promote", response_model=SignalResponse, status_code=201)
def promote_social_signal(
    social_signal_id: str,
    body: PromoteRequest,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    """
    Promote to a Pending Triage signal. 409 if already promoted.
    """
    return PromotionBridge(store).promote(social_signal_id, actor, disease=body.disease, country=body.country)

@router.post("/{social_signal_id}/dismiss", response_model=SocialSignalResponse)
def dismiss_social_signal(
    social_signal_id: str,
    store: BaseStore = Depends(get_store),
    actor: Actor = Depends(get_actor)
):
    return PromotionBridge(store).dismiss(social_signal_id, actor)
