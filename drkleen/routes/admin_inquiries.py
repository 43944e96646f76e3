# drkleen/routes/admin_inquiries.py
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, Depends, Query

from drkleen.auth.dependencies import get_current_admin
from drkleen.database import RowStore, get_store
from drkleen.models.admin import AdminAccount
from drkleen.schemas.catalog import InquiryCreate
from drkleen.services import content_service

router = APIRouter(
    prefix="/admin-inquiries",
    tags=["Inquiries"]
)

logger = logging.getLogger(__name__)


@router.get("", response_model=dict)
async def list_inquiries(
    status: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    rows = await content_service.list_inquiries(store, status, priority, limit, offset)
    return {"data": rows}


@router.post("", response_model=dict)
async def create_inquiry(data: InquiryCreate, store: RowStore = Depends(get_store)):
    """Public contact form submission"""
    return {"data": await content_service.create_inquiry(store, data.model_dump())}


@router.get("/stats", response_model=dict)
async def inquiry_stats(
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.inquiry_stats(store)}


@router.put("/{inquiry_id}", response_model=dict)
async def update_inquiry(
    inquiry_id: int,
    changes: Dict[str, Any] = Body(...),
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    """Update status, priority or notes; resolving stamps resolved_at"""
    return {"data": await content_service.update_inquiry(store, inquiry_id, changes)}
