# drkleen/routes/admin_management.py
import logging

from fastapi import APIRouter, Depends

from drkleen.auth.dependencies import get_admin_service, get_current_admin
from drkleen.database import RowStore, get_store
from drkleen.models.admin import AdminAccount
from drkleen.schemas.catalog import ProductCreate, ServiceCreate, SettingUpdate
from drkleen.services import content_service
from drkleen.services.admin_service import AdminAccountService

router = APIRouter(
    prefix="/admin-management",
    tags=["Admin Management"]
)

logger = logging.getLogger(__name__)


@router.get("/admin-users", response_model=dict)
async def list_admin_users(
    current_admin: AdminAccount = Depends(get_current_admin),
    service: AdminAccountService = Depends(get_admin_service),
):
    """List every admin account with the current cap usage"""
    return {"data": await service.list_admins()}


@router.delete("/admin-users/{user_id}", response_model=dict)
async def delete_admin_user(
    user_id: int,
    current_admin: AdminAccount = Depends(get_current_admin),
    service: AdminAccountService = Depends(get_admin_service),
):
    """Remove another admin account. Admins cannot delete themselves."""
    return {"data": await service.delete_admin(user_id, current_admin)}


@router.get("/admin-stats", response_model=dict)
async def admin_stats(
    current_admin: AdminAccount = Depends(get_current_admin),
    service: AdminAccountService = Depends(get_admin_service),
):
    return {"data": await service.admin_stats()}


@router.get("/settings", response_model=dict)
async def list_settings(
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.list_settings(store)}


@router.put("/settings/{setting_key}", response_model=dict)
async def update_setting(
    setting_key: str,
    data: SettingUpdate,
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    """Create or overwrite a website setting"""
    row = await content_service.upsert_setting(
        store, setting_key, data.setting_value, data.description, current_admin.id
    )
    return {"data": row}


@router.post("/products", response_model=dict)
async def create_product(
    data: ProductCreate,
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.create_product(store, data.model_dump())}


@router.post("/services", response_model=dict)
async def create_service(
    data: ServiceCreate,
    current_admin: AdminAccount = Depends(get_current_admin),
    store: RowStore = Depends(get_store),
):
    return {"data": await content_service.create_service(store, data.model_dump())}
