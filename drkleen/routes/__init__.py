# Import all routes
from .admin_auth import router as admin_auth_router
from .admin_register import router as admin_register_router
from .admin_management import router as admin_management_router
from .admin_data import router as admin_data_router
from .admin_inquiries import router as admin_inquiries_router
from .bookings import router as bookings_router
from .public import router as public_router
from .email_display import router as email_display_router
from .admin_emails import router as admin_emails_router
from .health import router as health_router

# All routers that should be included in the main app
__all__ = [
    "admin_auth_router",
    "admin_register_router",
    "admin_management_router",
    "admin_data_router",
    "admin_inquiries_router",
    "bookings_router",
    "public_router",
    "email_display_router",
    "admin_emails_router",
    "health_router",
]
