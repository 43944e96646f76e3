# drkleen/routes/admin_emails.py
import logging

from fastapi import APIRouter, Depends

from drkleen.auth.dependencies import get_current_admin, get_dispatcher
from drkleen.errors import ErrorCode, ValidationError
from drkleen.models.admin import AdminAccount
from drkleen.schemas.catalog import EmailDispatchRequest
from drkleen.services.email_service import NotificationDispatcher

router = APIRouter(
    prefix="/admin-emails",
    tags=["Admin Emails"]
)

logger = logging.getLogger(__name__)


@router.post("", response_model=dict)
async def dispatch_email(
    data: EmailDispatchRequest,
    current_admin: AdminAccount = Depends(get_current_admin),
    notifier: NotificationDispatcher = Depends(get_dispatcher),
):
    """Render a verification or welcome email and stage it in pending_emails"""
    if not data.type or not data.email or not data.full_name:
        raise ValidationError(
            ErrorCode.VALIDATION_ERROR,
            "Email type, recipient email, and full name are required",
        )

    stored = await notifier.dispatch(data.type, data.email, data.full_name, data.verification_token)
    logger.info(f"Admin {current_admin.id} staged a {stored.email_type.value} email")
    return {
        "data": {
            "message": "Email prepared and stored successfully",
            "type": stored.email_type.value,
            "recipient": stored.recipient_email,
            "subject": stored.subject,
            "email_id": stored.id,
            "status": stored.status,
            "verification_url": stored.verification_url,
        }
    }
