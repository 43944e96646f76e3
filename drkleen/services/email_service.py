from typing import Any, Dict, Optional
from urllib.parse import quote
import logging
import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

from drkleen.config import Settings
from drkleen.database import RowStore, StoreError
from drkleen.errors import ErrorCode, UpstreamError, ValidationError
from drkleen.models.pending_email import (
    PENDING_EMAILS_TABLE,
    READY_TO_SEND,
    EmailKind,
    PendingEmail,
)
from drkleen.utils.token import utcnow

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates", "email")

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

SUBJECTS = {
    EmailKind.verification: "Dr. Kleen - Verify Your Admin Account",
    EmailKind.welcome: "Welcome to Dr. Kleen Admin Portal",
}


def verification_url(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/admin/verify-email?token={quote(token)}"


def login_url(frontend_url: str) -> str:
    return f"{frontend_url.rstrip('/')}/admin/login"


class NotificationDispatcher:
    """
    Renders admin notifications and stages them in pending_emails.

    Nothing is delivered; the email display endpoint reads the staged rows
    back by recipient address.
    """

    def __init__(self, store: RowStore, settings: Settings):
        self.store = store
        self.settings = settings

    def render(self, kind: EmailKind, email: str, name: str, token: Optional[str] = None) -> PendingEmail:
        context: Dict[str, Any] = {
            "name": name,
            "max_admins": self.settings.MAX_ADMIN_USERS,
            "expires_hours": self.settings.VERIFICATION_TOKEN_EXPIRE_HOURS,
        }
        url = None
        if kind is EmailKind.verification:
            if not token:
                raise ValidationError(
                    ErrorCode.MISSING_TOKEN,
                    "Verification token is required for verification emails",
                )
            url = verification_url(self.settings.FRONTEND_URL, token)
            context["verification_url"] = url
        else:
            context["login_url"] = login_url(self.settings.FRONTEND_URL)

        html = env.get_template(f"{kind.value}.html").render(**context)
        return PendingEmail(
            recipient_email=email,
            recipient_name=name,
            subject=SUBJECTS[kind],
            html_content=html,
            email_type=kind,
            verification_token=token if kind is EmailKind.verification else None,
            status=READY_TO_SEND,
            verification_url=url,
        )

    async def dispatch(
        self,
        kind: str,
        email: str,
        name: str,
        token: Optional[str] = None,
    ) -> PendingEmail:
        """Render and persist one message; returns the stored record."""
        try:
            kind = EmailKind(kind)
        except ValueError:
            raise ValidationError(
                ErrorCode.INVALID_EMAIL_TYPE,
                'Invalid email type. Must be "verification" or "welcome"',
            )

        message = self.render(kind, email, name, token)
        message.created_at = utcnow()

        try:
            row = await self.store.insert(
                PENDING_EMAILS_TABLE,
                message.model_dump(mode="json", exclude={"id"}),
            )
        except StoreError as e:
            logger.error(f"Failed to store {kind.value} email for {email}: {e.message}")
            raise UpstreamError(
                ErrorCode.DATABASE_ERROR,
                "Failed to store email for processing",
                status_code=500,
            )

        stored = PendingEmail.model_validate(row)
        logger.info(f"{kind.value} email staged for {email} (id={stored.id})")
        return stored


async def dispatch_quietly(
    dispatcher: NotificationDispatcher,
    kind: str,
    email: str,
    name: str,
    token: Optional[str] = None,
) -> Optional[PendingEmail]:
    """Dispatch a notification; failures are logged and swallowed."""
    try:
        return await dispatcher.dispatch(kind, email, name, token)
    except Exception as e:
        logger.warning(f"Failed to send {kind} email to {email}, continuing: {str(e)}")
        return None
