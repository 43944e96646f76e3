# drkleen/routes/bookings.py
import logging

from fastapi import APIRouter, Depends

from drkleen.auth.dependencies import get_current_admin
from drkleen.database import RowStore, get_store
from drkleen.models.admin import AdminAccount
from drkleen.schemas.catalog import BookingCreate
from drkleen.services import content_service

router = APIRouter(
    prefix="/bookings-api",
    tags=["Bookings"]
)

logger = logging.getLogger(__name__)


@router.post("", response_model=dict)
async def create_booking(data: BookingCreate, store: RowStore = Depends(get_store)):
    """Book a cleaning service. The date defaults to today."""
    return {"data": await content_service.create_booking(store, data.model_dump())}


@router.get("", response_model=dict)
async def list_bookings(
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.list_bookings(store)}
