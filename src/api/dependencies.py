"""
Request-scoped dependencies shared by the routers.
"""
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session
from src.core.permissions import Actor
from src.models.base import get_db
from src.storage.base_store import BaseStore
from src.storage.sql_store import SqlAlchemyStore

def get_store(db: Session = Depends(get_db)) -> BaseStore:
    return SqlAlchemyStore(db)

def parse_permissions(header: Optional[str]) -> dict:
    """
    Parse 'triage=edit,assessment=view' into a domain -> permission map.
    Malformed entries are ignored.
    """
    permissions = {}
    for item in (header or '').split(','):
        domain, sep, level = item.partition('=')
        if sep and domain.strip() and level.strip():
            permissions[domain.strip().lower()] = level.strip().lower()
    return permissions

def get_actor(
    x_actor_id: str = Header('anonymous'),
    x_actor_role: str = Header('Analyst'),
    x_actor_permissions: Optional[str] = Header(None),
) -> Actor:
    """
    Caller identity as forwarded by the authenticating proxy.
    Without a permissions header the caller can only read.
    """
    return Actor(id=x_actor_id, role=x_actor_role, permissions=parse_permissions(x_actor_permissions))
