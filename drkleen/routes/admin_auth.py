# drkleen/routes/admin_auth.py
from typing import Optional
import logging

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from drkleen.auth.dependencies import bearer_scheme, bearer_token, get_admin_service
from drkleen.schemas.admin import AdminLogin, AdminRegister, TokenVerifyRequest
from drkleen.services.admin_service import AdminAccountService

router = APIRouter(
    prefix="/admin-auth",
    tags=["Admin Authentication"]
)

logger = logging.getLogger(__name__)


@router.post("/login", response_model=dict)
async def admin_login(
    data: AdminLogin,
    service: AdminAccountService = Depends(get_admin_service),
):
    """Check credentials and issue a 24 hour session token"""
    result = await service.login(data.email, data.password)
    return {
        "data": result,
        "message": "Login successful. Welcome to Dr. Kleen Admin Portal!",
    }


@router.post("/verify", response_model=dict)
async def verify_session(
    data: Optional[TokenVerifyRequest] = None,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: AdminAccountService = Depends(get_admin_service),
):
    """
    Validate a session token and return the current account.
    The token may come in the body or as a bearer header.
    """
    token = (data.token if data else None) or bearer_token(credentials)
    return {"data": await service.verify_session(token)}


@router.post("/setup", response_model=dict)
async def setup_first_admin(
    data: AdminRegister,
    service: AdminAccountService = Depends(get_admin_service),
):
    """Create the very first admin account; refused once any admin exists"""
    return {"data": await service.setup_first_admin(data.email, data.password, data.full_name)}
