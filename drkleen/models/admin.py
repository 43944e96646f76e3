# drkleen/models/admin.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from drkleen.errors import ErrorCode, ValidationError

ADMIN_USERS_TABLE = "admin_users"


class AdminRole(str, Enum):
    admin = "admin"
    super_admin = "super_admin"


class AccountState(str, Enum):
    PENDING_VERIFICATION = "pending_verification"
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


# target states reachable from each state
TRANSITIONS = {
    AccountState.PENDING_VERIFICATION: {AccountState.ACTIVE, AccountState.DELETED},
    AccountState.ACTIVE: {AccountState.INACTIVE, AccountState.DELETED},
    AccountState.INACTIVE: {AccountState.ACTIVE, AccountState.DELETED},
    AccountState.DELETED: set(),
}

# stored flag values for every persisted state
STATE_FLAGS = {
    AccountState.PENDING_VERIFICATION: {"is_active": False, "is_email_verified": False},
    AccountState.ACTIVE: {"is_active": True, "is_email_verified": True},
    AccountState.INACTIVE: {"is_active": False, "is_email_verified": True},
}


class IllegalTransition(ValidationError):
    def __init__(self, current: AccountState, target: AccountState):
        super().__init__(
            ErrorCode.ILLEGAL_STATE_TRANSITION,
            f"Cannot move account from {current.value} to {target.value}",
            current_state=current.value,
            target_state=target.value,
        )


def state_from_flags(is_active: bool, is_email_verified: bool) -> AccountState:
    if not is_email_verified:
        return AccountState.PENDING_VERIFICATION
    return AccountState.ACTIVE if is_active else AccountState.INACTIVE


def transition_fields(current: AccountState, target: AccountState) -> Dict[str, Any]:
    """
    Return the stored flags for moving ``current`` to ``target``.
    Raises IllegalTransition when the move is not allowed.
    """
    if target not in TRANSITIONS[current] or target is AccountState.DELETED:
        raise IllegalTransition(current, target)
    return dict(STATE_FLAGS[target])


class AdminAccount(BaseModel):
    """A row of the admin_users table."""

    model_config = ConfigDict(extra="ignore")

    id: int
    email: str
    password_hash: Optional[str] = None
    full_name: str = ""
    role: str = AdminRole.admin.value
    is_active: bool = False
    is_email_verified: bool = False
    email_verification_token: Optional[str] = None
    verification_token_expires_at: Optional[datetime] = None
    verification_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @property
    def state(self) -> AccountState:
        return state_from_flags(self.is_active, self.is_email_verified)

    @property
    def can_login(self) -> bool:
        return self.state is AccountState.ACTIVE

    def transition_to(self, target: AccountState) -> Dict[str, Any]:
        return transition_fields(self.state, target)

    def projection(self, *fields: str) -> Dict[str, Any]:
        """Public view of the account; never includes password material."""
        data = self.model_dump(
            mode="json",
            include=set(fields) if fields else None,
            exclude={"password_hash", "email_verification_token", "verification_token_expires_at"},
        )
        return data
