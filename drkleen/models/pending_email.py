# drkleen/models/pending_email.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

PENDING_EMAILS_TABLE = "pending_emails"
READY_TO_SEND = "ready_to_send"


class EmailKind(str, Enum):
    verification = "verification"
    welcome = "welcome"


class PendingEmail(BaseModel):
    """A rendered notification staged in place of a real send."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    recipient_email: str
    recipient_name: str
    subject: str
    html_content: str
    email_type: EmailKind
    verification_token: Optional[str] = None
    status: str = READY_TO_SEND
    created_at: Optional[datetime] = None
    verification_url: Optional[str] = None
