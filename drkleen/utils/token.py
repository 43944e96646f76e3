# drkleen/utils/token.py
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import uuid


def generate_verification_token() -> str:
    """Random single-use token for the email verification link."""
    return str(uuid.uuid4())


def verification_material(hours: int, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Return a fresh verification token and its expiry."""
    now = now or datetime.now(timezone.utc)
    return generate_verification_token(), now + timedelta(hours=hours)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as returned by the row store.
    Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
