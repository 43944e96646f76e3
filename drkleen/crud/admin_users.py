# drkleen/crud/admin_users.py
from typing import Any, Dict, List, Optional
import logging

from drkleen.database import RowStore, eq
from drkleen.models.admin import ADMIN_USERS_TABLE, AdminAccount
from drkleen.utils.token import utcnow

logger = logging.getLogger(__name__)

LIST_COLUMNS = "id,email,full_name,role,is_active,is_email_verified,last_login,created_at"
CAPPED_INSERT_FUNCTION = "create_admin_user_capped"


class AdminUserStore:
    """
    Reads and writes of the admin_users table.

    Each call is one round trip to the row store. Only ``create_capped``
    is atomic with respect to the account cap.
    """

    def __init__(self, store: RowStore):
        self.store = store

    @staticmethod
    def _account(row: Optional[Dict[str, Any]]) -> Optional[AdminAccount]:
        return AdminAccount.model_validate(row) if row else None

    async def find_by_email(self, email: str) -> Optional[AdminAccount]:
        row = await self.store.select_one(ADMIN_USERS_TABLE, {"email": eq(email)})
        return self._account(row)

    async def find_by_id(self, account_id: int) -> Optional[AdminAccount]:
        row = await self.store.select_one(ADMIN_USERS_TABLE, {"id": eq(account_id)})
        return self._account(row)

    async def find_by_verification_token(self, token: str) -> Optional[AdminAccount]:
        row = await self.store.select_one(ADMIN_USERS_TABLE, {
            "email_verification_token": eq(token),
            "is_email_verified": eq(False),
        })
        return self._account(row)

    async def create(self, fields: Dict[str, Any]) -> AdminAccount:
        """Plain insert; does not look at the account cap."""
        row = await self.store.insert(ADMIN_USERS_TABLE, fields)
        logger.info(f"Admin account created: {row.get('id')}")
        return AdminAccount.model_validate(row)

    async def create_capped(self, fields: Dict[str, Any], max_users: int) -> Optional[AdminAccount]:
        """
        Insert ``fields`` only while fewer than ``max_users`` accounts exist.

        The count and the insert run as one statement inside the store, so
        concurrent registrations cannot overshoot the cap. Returns None when
        the cap was already reached.
        """
        rows = await self.store.rpc(CAPPED_INSERT_FUNCTION, {
            "account": fields,
            "max_users": max_users,
        })
        if not rows:
            return None
        logger.info(f"Admin account created: {rows[0].get('id')}")
        return AdminAccount.model_validate(rows[0])

    async def patch(self, account_id: int, fields: Dict[str, Any]) -> Optional[AdminAccount]:
        values = dict(fields)
        values.setdefault("updated_at", utcnow().isoformat())
        rows = await self.store.update(ADMIN_USERS_TABLE, {"id": eq(account_id)}, values)
        return self._account(rows[0]) if rows else None

    async def delete(self, account_id: int) -> None:
        await self.store.delete(ADMIN_USERS_TABLE, {"id": eq(account_id)})
        logger.info(f"Admin account deleted: {account_id}")

    async def count(self) -> int:
        return await self.store.count(ADMIN_USERS_TABLE)

    async def list(self) -> List[Dict[str, Any]]:
        return await self.store.select(
            ADMIN_USERS_TABLE, columns=LIST_COLUMNS, order="created_at.desc"
        )
