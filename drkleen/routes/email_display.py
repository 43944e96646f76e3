# drkleen/routes/email_display.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from drkleen.config import Settings, get_settings
from drkleen.database import RowStore, get_store
from drkleen.schemas.catalog import EmailLookup
from drkleen.services import content_service

router = APIRouter(
    prefix="/email-display",
    tags=["Email Display"]
)


@router.get("", response_model=dict)
async def show_emails(
    email: Optional[str] = Query(default=None),
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Stored outbound messages for one recipient, newest first"""
    return {"data": await content_service.lookup_pending_emails(store, email, settings.FRONTEND_URL)}


@router.post("", response_model=dict)
async def show_emails_post(
    data: Optional[EmailLookup] = None,
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    email = data.email if data else None
    return {"data": await content_service.lookup_pending_emails(store, email, settings.FRONTEND_URL)}
