# drkleen/models/__init__.py

from .admin import AdminAccount, AdminRole, AccountState
from .pending_email import PendingEmail, EmailKind

# tables the back office may edit generically
ENTITY_TABLES = (
    "bookings",
    "products",
    "services",
    "testimonials",
    "contact_inquiries",
    "service_requests",
)

__all__ = ["AdminAccount", "AdminRole", "AccountState", "PendingEmail", "EmailKind", "ENTITY_TABLES"]
