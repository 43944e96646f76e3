# drkleen/services/content_service.py
"""
Back-office and public content operations over the non-account tables:
website settings, catalog, inquiries, bookings and the generic entity editor.
"""
from datetime import date
from typing import Any, Dict, List, Optional
import asyncio
import logging

from drkleen.database import RowStore, StoreError, eq
from drkleen.errors import ErrorCode, NotFoundError, ValidationError
from drkleen.models import ENTITY_TABLES
from drkleen.models.pending_email import PENDING_EMAILS_TABLE, EmailKind
from drkleen.services.dashboard import build_overview
from drkleen.services.email_service import verification_url
from drkleen.utils.email_validator import EmailValidator
from drkleen.utils.token import utcnow

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "website_settings"
INQUIRIES_TABLE = "contact_inquiries"
BOOKINGS_TABLE = "bookings"
PRODUCTS_TABLE = "products"
SERVICES_TABLE = "services"
BANNERS_TABLE = "banners"
TESTIMONIALS_TABLE = "testimonials"

ALL_PRODUCTS = "All Products"
PRODUCT_SORT_FIELDS = {"id", "name", "price", "rating", "created_at", "stock", "discount"}


def require_entity(entity: str) -> str:
    if entity not in ENTITY_TABLES:
        raise ValidationError(
            ErrorCode.INVALID_ENTITY,
            "Invalid entity type",
            allowed=list(ENTITY_TABLES),
        )
    return entity


# ---------------- Website settings ----------------

async def list_settings(store: RowStore) -> List[Dict[str, Any]]:
    return await store.select(SETTINGS_TABLE, order="setting_key.asc")


async def upsert_setting(
    store: RowStore,
    key: str,
    value: str,
    description: Optional[str],
    updated_by: int,
) -> Dict[str, Any]:
    existing = await store.select_one(SETTINGS_TABLE, {"setting_key": eq(key)})
    if existing is None:
        row = await store.insert(SETTINGS_TABLE, {
            "setting_key": key,
            "setting_value": value,
            "description": description or "",
            "updated_by": updated_by,
        })
        logger.info(f"Setting {key} created by admin {updated_by}")
        return row

    changes: Dict[str, Any] = {
        "setting_value": value,
        "updated_by": updated_by,
        "updated_at": utcnow().isoformat(),
    }
    if description is not None:
        changes["description"] = description
    rows = await store.update(SETTINGS_TABLE, {"setting_key": eq(key)}, changes)
    logger.info(f"Setting {key} updated by admin {updated_by}")
    return rows[0] if rows else {**existing, **changes}


# ---------------- Catalog ----------------

async def create_product(store: RowStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    row = await store.insert(PRODUCTS_TABLE, {
        **fields,
        "rating": 5.0,
        "review_count": 0,
    })
    logger.info(f"Product created: {row.get('id')} {row.get('name')}")
    return row


async def create_service(store: RowStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    row = await store.insert(SERVICES_TABLE, fields)
    logger.info(f"Service created: {row.get('id')} {row.get('name')}")
    return row


async def search_products(
    store: RowStore,
    category: Optional[str] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort_by: str = "id",
    sort_order: str = "asc",
) -> List[Dict[str, Any]]:
    filters: Dict[str, Any] = {}
    if category and category != ALL_PRODUCTS:
        filters["category"] = eq(category)
    if search:
        filters["name"] = f"ilike.*{search}*"

    # both bounds target the same column, so they go in as a single and() filter
    bounds = []
    if min_price is not None:
        bounds.append(f"price.gte.{min_price}")
    if max_price is not None:
        bounds.append(f"price.lte.{max_price}")
    if bounds:
        filters["and"] = f"({','.join(bounds)})"

    if sort_by not in PRODUCT_SORT_FIELDS:
        sort_by = "id"
    direction = "desc" if sort_order == "desc" else "asc"
    return await store.select(PRODUCTS_TABLE, filters, order=f"{sort_by}.{direction}")


async def list_services(store: RowStore) -> List[Dict[str, Any]]:
    return await store.select(SERVICES_TABLE, order="id.asc")


async def list_banners(store: RowStore) -> List[Dict[str, Any]]:
    return await store.select(BANNERS_TABLE, order="added_at.desc")


async def list_testimonials(store: RowStore) -> List[Dict[str, Any]]:
    return await store.select(TESTIMONIALS_TABLE, order="created_at.desc", limit=10)


# ---------------- Inquiries ----------------

async def list_inquiries(
    store: RowStore,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    filters: Dict[str, Any] = {}
    if status:
        filters["status"] = eq(status)
    if priority:
        filters["priority"] = eq(priority)
    return await store.select(
        INQUIRIES_TABLE, filters,
        order="created_at.desc", limit=limit, offset=offset,
    )


async def create_inquiry(store: RowStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    row = await store.insert(INQUIRIES_TABLE, {
        "name": fields["name"],
        "email": fields["email"],
        "phone": fields.get("phone") or None,
        "message": fields["message"],
        "inquiry_type": fields.get("inquiry_type") or "general",
        "status": "new",
        "priority": "medium",
    })
    logger.info(f"Inquiry received: {row.get('id')}")
    return row


async def update_inquiry(store: RowStore, inquiry_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    now = utcnow().isoformat()
    changes = {k: v for k, v in changes.items() if k != "id"}
    changes["updated_at"] = now
    if changes.get("status") == "resolved" and not changes.get("resolved_at"):
        changes["resolved_at"] = now

    rows = await store.update(INQUIRIES_TABLE, {"id": eq(inquiry_id)}, changes)
    if not rows:
        raise NotFoundError(ErrorCode.NOT_FOUND, "Inquiry not found")
    return rows[0]


async def inquiry_stats(store: RowStore) -> Dict[str, int]:
    rows = await store.select(INQUIRIES_TABLE, columns="status,priority")
    return {
        "total": len(rows),
        "new": sum(1 for r in rows if r.get("status") == "new"),
        "in_progress": sum(1 for r in rows if r.get("status") == "in_progress"),
        "resolved": sum(1 for r in rows if r.get("status") == "resolved"),
        "high_priority": sum(1 for r in rows if r.get("priority") == "high"),
    }


# ---------------- Bookings ----------------

async def create_booking(store: RowStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    booking_date = fields.get("booking_date") or date.today()
    row = await store.insert(BOOKINGS_TABLE, {
        "customer_name": fields["customer_name"],
        "email": fields["email"],
        "phone": fields.get("phone") or None,
        "service_type": fields["service_type"],
        "booking_date": booking_date.isoformat() if isinstance(booking_date, date) else booking_date,
        "status": "pending",
    })
    logger.info(f"Booking created: {row.get('id')} for {row.get('service_type')}")
    return row


async def list_bookings(store: RowStore) -> List[Dict[str, Any]]:
    return await store.select(BOOKINGS_TABLE, order="created_at.desc")


# ---------------- Generic entity editor ----------------

async def list_entity(store: RowStore, entity: str) -> List[Dict[str, Any]]:
    table = require_entity(entity)
    return await store.select(table, order="created_at.desc")


async def update_entity(store: RowStore, entity: str, row_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    table = require_entity(entity)
    changes = {k: v for k, v in changes.items() if k != "id"}
    if not changes:
        raise ValidationError(ErrorCode.VALIDATION_ERROR, "No fields to update")
    rows = await store.update(table, {"id": eq(row_id)}, changes)
    if not rows:
        raise NotFoundError(ErrorCode.NOT_FOUND, f"No {entity} row with id {row_id}")
    logger.info(f"{entity} row {row_id} updated")
    return rows[0]


async def delete_entity(store: RowStore, entity: str, row_id: int) -> Dict[str, Any]:
    table = require_entity(entity)
    await store.delete(table, {"id": eq(row_id)})
    logger.info(f"{entity} row {row_id} deleted")
    return {"message": f"{entity} item deleted successfully", "id": row_id}


async def _snapshot(store: RowStore, table: str) -> List[Dict[str, Any]]:
    try:
        return await store.select(table, order="created_at.desc")
    except StoreError as e:
        logger.warning(f"Dashboard could not read {table}: {e.message}")
        return []


async def dashboard_overview(store: RowStore) -> Dict[str, Any]:
    """Read every back-office table concurrently and aggregate them."""
    snapshots = await asyncio.gather(*(_snapshot(store, t) for t in ENTITY_TABLES))
    return build_overview(dict(zip(ENTITY_TABLES, snapshots)))


# ---------------- Pending message viewer ----------------

def _empty_lookup(message: str) -> Dict[str, Any]:
    return {"emails": [], "count": 0, "message": message}


async def lookup_pending_emails(store: RowStore, email: Optional[str], frontend_url: str) -> Dict[str, Any]:
    """
    List stored outbound messages for one recipient, newest first.
    A missing or malformed address is not an error; it just finds nothing.
    """
    email = EmailValidator.normalize(email or "")
    if not email:
        return _empty_lookup("Email parameter missing")
    valid, _ = EmailValidator.is_valid_format(email)
    if not valid:
        return _empty_lookup("Invalid email format")

    rows = await store.select(
        PENDING_EMAILS_TABLE,
        {"recipient_email": eq(email)},
        order="created_at.desc",
    )
    for row in rows:
        if (
            row.get("email_type") == EmailKind.verification.value
            and row.get("verification_token")
            and not row.get("verification_url")
        ):
            row["verification_url"] = verification_url(frontend_url, row["verification_token"])

    found = len(rows)
    message = f"Found {found} emails for {email}" if found else f"No emails found for {email}"
    return {"emails": rows, "count": found, "message": message}
