"""
Reference data: monitored accounts and listener keywords.
"""
from fastapi import APIRouter, Depends
from typing import List
from src.api.dependencies import get_store
from src.api.schemas import MonitoredAccountResponse, ListenerKeywordResponse
from src.models.reference import MonitoredAccount, ListenerKeyword
from src.storage.base_store import BaseStore

router = APIRouter()

@router.get("/accounts", response_model=List[MonitoredAccountResponse])
def list_monitored_accounts(store: BaseStore = Depends(get_store)):
    """
    Active monitored accounts, tier 1 first.
    """
    return store.list(MonitoredAccount, order_by='priority', descending=False, is_active=True)

@router.get("/keywords", response_model=List[ListenerKeywordResponse])
def list_keywords(store: BaseStore = Depends(get_store)):
    return store.list(ListenerKeyword, order_by='priority', descending=False, is_active=True)
