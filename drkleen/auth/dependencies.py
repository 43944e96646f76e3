# drkleen/auth/dependencies.py
from typing import Optional
import logging
import secrets

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from drkleen.config import Settings, get_settings
from drkleen.crud.admin_users import AdminUserStore
from drkleen.database import RowStore, get_store
from drkleen.errors import AuthenticationError, ErrorCode
from drkleen.models.admin import AdminAccount
from drkleen.services.admin_service import AdminAccountService
from drkleen.services.email_service import NotificationDispatcher
from drkleen.utils.jwt_handler import TokenService

logger = logging.getLogger(__name__)

# auto_error is off so a missing header maps to TOKEN_REQUIRED instead of a bare 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService.from_settings(settings)


def get_dispatcher(
    store: RowStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> NotificationDispatcher:
    return NotificationDispatcher(store, settings)


def get_admin_service(
    store: RowStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    notifier: NotificationDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_settings),
) -> AdminAccountService:
    return AdminAccountService(AdminUserStore(store), tokens, notifier, settings)


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: AdminAccountService = Depends(get_admin_service),
) -> AdminAccount:
    """Active admin behind the bearer token; the row is re-read on every request."""
    return await service.current_account(bearer_token(credentials))


def require_api_key(
    apikey: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Checks the ``apikey`` header when an API key is configured."""
    if not settings.API_KEY:
        return
    if not apikey or not secrets.compare_digest(apikey, settings.API_KEY):
        logger.warning("Request rejected: missing or wrong apikey header")
        raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS, "Invalid API key")
