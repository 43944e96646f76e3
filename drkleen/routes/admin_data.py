# drkleen/routes/admin_data.py
from typing import Any, Dict
import logging

from fastapi import APIRouter, Body, Depends

from drkleen.auth.dependencies import get_current_admin
from drkleen.database import RowStore, get_store
from drkleen.services import content_service

# every route here is back-office only
router = APIRouter(
    prefix="/admin-data",
    tags=["Admin Data"],
    dependencies=[Depends(get_current_admin)],
)

logger = logging.getLogger(__name__)


@router.get("/dashboard-overview", response_model=dict)
async def dashboard_overview(store: RowStore = Depends(get_store)):
    """Totals, recent activity and six month trends for the dashboard"""
    return {"data": await content_service.dashboard_overview(store)}


@router.get("/{entity}", response_model=dict)
async def list_entity(entity: str, store: RowStore = Depends(get_store)):
    return {"data": await content_service.list_entity(store, entity)}


@router.put("/{entity}/{row_id}", response_model=dict)
async def update_entity(
    entity: str,
    row_id: int,
    changes: Dict[str, Any] = Body(...),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.update_entity(store, entity, row_id, changes)}


@router.delete("/{entity}/{row_id}", response_model=dict)
async def delete_entity(entity: str, row_id: int, store: RowStore = Depends(get_store)):
    return {"data": await content_service.delete_entity(store, entity, row_id)}
