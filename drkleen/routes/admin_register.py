# drkleen/routes/admin_register.py
import logging

from fastapi import APIRouter, Depends, Query

from drkleen.auth.dependencies import get_admin_service
from drkleen.schemas.admin import AdminRegister, ResendVerificationRequest, VerifyEmailRequest
from drkleen.services.admin_service import AdminAccountService

router = APIRouter(
    prefix="/admin-register",
    tags=["Admin Registration"]
)

logger = logging.getLogger(__name__)


@router.post("/register", response_model=dict)
async def register_admin(
    data: AdminRegister,
    service: AdminAccountService = Depends(get_admin_service),
):
    """Register a new admin account pending email verification"""
    return {"data": await service.register(data.email, data.password, data.full_name)}


@router.post("/verify-email", response_model=dict)
async def verify_email(
    data: VerifyEmailRequest,
    service: AdminAccountService = Depends(get_admin_service),
):
    """Consume a verification token and activate the account"""
    return {"data": await service.verify_email(data.token)}


@router.get("/verify-email", response_model=dict)
async def verify_email_link(
    token: str = Query(default=""),
    service: AdminAccountService = Depends(get_admin_service),
):
    return {"data": await service.verify_email(token)}


@router.post("/resend-verification", response_model=dict)
async def resend_verification(
    data: ResendVerificationRequest,
    service: AdminAccountService = Depends(get_admin_service),
):
    """Issue a fresh verification link for an account that is still unverified"""
    return {"data": await service.resend_verification(data.email)}
