# drkleen/services/admin_service.py
"""
Admin account lifecycle: registration, login, session checks, email
verification and management of the (at most two) admin accounts.

Every failure is raised as an ``ApiError`` carrying a stable ``ErrorCode``;
the routes only translate HTTP bodies into calls on this service.
"""
from typing import Any, Dict, Optional
import logging

from drkleen.config import Settings
from drkleen.crud.admin_users import AdminUserStore
from drkleen.database import StoreConflict, StoreError
from drkleen.errors import (
    AuthenticationError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from drkleen.models.admin import (
    STATE_FLAGS,
    AccountState,
    AdminAccount,
    AdminRole,
)
from drkleen.models.pending_email import EmailKind
from drkleen.services.email_service import NotificationDispatcher, dispatch_quietly
from drkleen.utils.email_validator import EmailValidator
from drkleen.utils.jwt_handler import TokenService, account_id_from_claims
from drkleen.utils.password import check_password_strength, hash_password, verify_password
from drkleen.utils.token import parse_timestamp, utcnow, verification_material

logger = logging.getLogger(__name__)

LOGIN_FIELDS = ("id", "email", "full_name", "role", "is_active", "is_email_verified", "last_login")
SESSION_FIELDS = ("id", "email", "full_name", "role")
VERIFIED_FIELDS = ("id", "email", "full_name", "is_active", "is_email_verified")


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def require_fields(message: str, **fields: Optional[str]) -> None:
    missing = {name: f"{name.replace('_', ' ').capitalize()} is required"
               for name, value in fields.items() if _blank(value)}
    if missing:
        raise ValidationError(ErrorCode.VALIDATION_ERROR, message, details=missing)


def require_email_format(email: str) -> str:
    valid, reason = EmailValidator.is_valid_format(email)
    if not valid:
        raise ValidationError(ErrorCode.INVALID_EMAIL_FORMAT, reason, field="email")
    return EmailValidator.normalize(email)


def require_strong_password(password: str) -> None:
    requirements = check_password_strength(password)
    if not all(requirements.values()):
        raise ValidationError(
            ErrorCode.WEAK_PASSWORD,
            "Password requirements not met. Must be at least 8 characters with "
            "uppercase, lowercase, numbers, and symbols.",
            field="password",
            requirements=requirements,
        )


class AdminAccountService:
    def __init__(
        self,
        accounts: AdminUserStore,
        tokens: TokenService,
        notifier: NotificationDispatcher,
        settings: Settings,
    ):
        self.accounts = accounts
        self.tokens = tokens
        self.notifier = notifier
        self.settings = settings

    @property
    def max_admins(self) -> int:
        return self.settings.MAX_ADMIN_USERS

    def _limit_reached(self, current: int) -> ConflictError:
        return ConflictError(
            ErrorCode.ADMIN_LIMIT_REACHED,
            f"Maximum admin limit reached ({current}/{self.max_admins}). "
            "No new admin registrations allowed.",
            currentCount=current,
            maxAllowed=self.max_admins,
        )

    @staticmethod
    def _email_taken() -> ConflictError:
        return ConflictError(
            ErrorCode.EMAIL_ALREADY_EXISTS,
            "Email already exists. An admin account with this email address is already registered.",
            field="email",
        )

    def _session_token(self, account: AdminAccount) -> str:
        return self.tokens.issue({
            "sub": account.id,
            "email": account.email,
            "role": account.role,
        })

    # ------------------ Registration ------------------

    async def register(self, email: Optional[str], password: Optional[str], full_name: Optional[str]) -> Dict[str, Any]:
        require_fields(
            "Email, password, and full name are required",
            email=email, password=password, full_name=full_name,
        )
        email = require_email_format(email)
        require_strong_password(password)

        current = await self.accounts.count()
        if current >= self.max_admins:
            logger.warning(f"Registration refused for {email}: admin limit reached")
            raise self._limit_reached(current)

        if await self.accounts.find_by_email(email):
            raise self._email_taken()

        token, expires_at = verification_material(self.settings.VERIFICATION_TOKEN_EXPIRE_HOURS)
        fields = {
            "email": email,
            "password_hash": hash_password(password),
            "full_name": full_name.strip(),
            "role": AdminRole.admin.value,
            "email_verification_token": token,
            "verification_token_expires_at": expires_at.isoformat(),
            "verification_sent_at": utcnow().isoformat(),
            **STATE_FLAGS[AccountState.PENDING_VERIFICATION],
        }

        try:
            account = await self.accounts.create_capped(fields, self.max_admins)
        except StoreConflict:
            # lost a race against another registration for the same email
            raise self._email_taken()
        if account is None:
            raise self._limit_reached(self.max_admins)

        logger.info(f"Admin registered: {account.id} ({account.email}), awaiting verification")
        await dispatch_quietly(self.notifier, EmailKind.verification.value, account.email, account.full_name, token)

        return {
            "message": "Admin registration successful! Please check your email to verify your account.",
            "user_id": account.id,
            "email": account.email,
            "requires_verification": True,
        }

    async def setup_first_admin(self, email: Optional[str], password: Optional[str], full_name: Optional[str]) -> Dict[str, Any]:
        """Bootstrap the first account as an active super admin."""
        require_fields(
            "Email, password, and full name are required",
            email=email, password=password, full_name=full_name,
        )
        email = require_email_format(email)
        require_strong_password(password)

        setup_done = ValidationError(ErrorCode.SETUP_COMPLETE, "Admin users already exist")
        if await self.accounts.count() > 0:
            raise setup_done

        fields = {
            "email": email,
            "password_hash": hash_password(password),
            "full_name": full_name.strip(),
            "role": AdminRole.super_admin.value,
            **STATE_FLAGS[AccountState.ACTIVE],
        }
        try:
            account = await self.accounts.create_capped(fields, 1)
        except StoreConflict:
            raise setup_done
        if account is None:
            raise setup_done

        logger.info(f"First admin created: {account.id} ({account.email})")
        return {
            "user": account.projection(*SESSION_FIELDS),
            "token": self._session_token(account),
            "message": "Admin user created successfully",
        }

    # ------------------ Login & session ------------------

    async def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        require_fields("Email and password are required", email=email, password=password)
        email = require_email_format(email)

        account = await self.accounts.find_by_email(email)
        if account is None:
            raise NotFoundError(ErrorCode.ACCOUNT_NOT_FOUND, "No admin account found")

        # order matters: unverified before inactive before password
        if account.state is AccountState.PENDING_VERIFICATION:
            raise ForbiddenError(
                ErrorCode.EMAIL_NOT_VERIFIED,
                "Email not verified. Please check your email for the verification link.",
                email=account.email,
                verification_required=True,
                suggestion='Click "Resend Verification" if you need a new verification email.',
            )
        if account.state is AccountState.INACTIVE:
            raise ForbiddenError(
                ErrorCode.ACCOUNT_INACTIVE,
                "Account is inactive",
                email=account.email,
                account_status="inactive",
            )
        if not verify_password(password, account.password_hash):
            logger.info(f"Failed login for admin {account.id}")
            raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS, "Invalid email or password")

        now = utcnow()
        try:
            await self.accounts.patch(account.id, {
                "last_login": now.isoformat(),
                "updated_at": now.isoformat(),
            })
        except StoreError as e:
            logger.warning(f"Failed to update last login for admin {account.id}: {e.message}")
        account.last_login = now

        logger.info(f"Admin {account.id} logged in")
        return {
            "user": account.projection(*LOGIN_FIELDS),
            "token": self._session_token(account),
        }

    async def current_account(self, token: Optional[str]) -> AdminAccount:
        """
        Resolve a session token to a live, active account.

        The row is re-read on every call so that deactivation or deletion
        takes effect before the token expires.
        """
        if _blank(token):
            raise AuthenticationError(ErrorCode.TOKEN_REQUIRED, "Token is required")

        claims = self.tokens.verify(token)
        account = await self.accounts.find_by_id(account_id_from_claims(claims))
        if account is None or not account.can_login:
            raise AuthenticationError(ErrorCode.USER_INACTIVE, "User is inactive")
        return account

    async def verify_session(self, token: Optional[str]) -> Dict[str, Any]:
        account = await self.current_account(token)
        return {"user": account.projection(*SESSION_FIELDS), "valid": True}

    # ------------------ Email verification ------------------

    async def verify_email(self, token: Optional[str]) -> Dict[str, Any]:
        require_fields("Verification token is required", token=token)

        account = await self.accounts.find_by_verification_token(token.strip())
        if account is None:
            raise ValidationError(ErrorCode.INVALID_TOKEN, "Invalid or expired verification token")

        expires_at = parse_timestamp(account.verification_token_expires_at)
        if expires_at is None or expires_at < utcnow():
            raise ValidationError(
                ErrorCode.TOKEN_EXPIRED,
                "Verification token has expired. Please request a new one.",
            )

        fields = account.transition_to(AccountState.ACTIVE)
        fields.update({
            "email_verification_token": None,
            "verification_token_expires_at": None,
        })
        updated = await self.accounts.patch(account.id, fields)
        if updated is None:
            raise NotFoundError(ErrorCode.USER_NOT_FOUND, "Admin user not found")

        logger.info(f"Admin {updated.id} verified email and is now active")
        await dispatch_quietly(self.notifier, EmailKind.welcome.value, updated.email, updated.full_name)

        return {
            "message": "Email verified successfully! Your admin account is now active.",
            "user": updated.projection(*VERIFIED_FIELDS),
        }

    async def resend_verification(self, email: Optional[str]) -> Dict[str, Any]:
        require_fields("Email is required", email=email)
        email = require_email_format(email)

        account = await self.accounts.find_by_email(email)
        if account is None:
            raise NotFoundError(ErrorCode.ACCOUNT_NOT_FOUND, "No admin account found")
        if account.state is not AccountState.PENDING_VERIFICATION:
            raise ValidationError(ErrorCode.ALREADY_VERIFIED, "Email address is already verified")

        token, expires_at = verification_material(self.settings.VERIFICATION_TOKEN_EXPIRE_HOURS)
        await self.accounts.patch(account.id, {
            "email_verification_token": token,
            "verification_token_expires_at": expires_at.isoformat(),
            "verification_sent_at": utcnow().isoformat(),
        })
        await self.notifier.dispatch(EmailKind.verification.value, account.email, account.full_name, token)

        logger.info(f"Verification email re-sent for admin {account.id}")
        return {"message": "Verification email sent", "email": account.email}

    # ------------------ Management ------------------

    async def list_admins(self) -> Dict[str, Any]:
        users = await self.accounts.list()
        active = [u for u in users if u.get("is_active") and u.get("is_email_verified")]
        return {
            "users": users,
            "count": {
                "total": len(users),
                "active": len(active),
                "max_allowed": self.max_admins,
            },
        }

    async def admin_stats(self) -> Dict[str, Any]:
        total = await self.accounts.count()
        users = await self.accounts.list()
        return {
            "total": total,
            "active": sum(1 for u in users if u.get("is_active") and u.get("is_email_verified")),
            "pending_verification": sum(1 for u in users if not u.get("is_email_verified")),
            "max_allowed": self.max_admins,
        }

    async def delete_admin(self, target_id: int, caller: AdminAccount) -> Dict[str, Any]:
        if target_id == caller.id:
            raise ValidationError(ErrorCode.CANNOT_DELETE_SELF, "You cannot delete your own admin account")

        if await self.accounts.find_by_id(target_id) is None:
            raise NotFoundError(ErrorCode.USER_NOT_FOUND, "Admin user not found")

        await self.accounts.delete(target_id)
        logger.info(f"Admin {target_id} deleted by admin {caller.id}")
        return {
            "message": "Admin user deleted successfully",
            "deleted_user_id": target_id,
            "deleted_by": caller.id,
        }
