# drkleen/schemas/__init__.py
from .admin import (
    AdminRegister,
    AdminLogin,
    TokenVerifyRequest,
    VerifyEmailRequest,
    ResendVerificationRequest,
)
from .catalog import (
    SettingUpdate,
    ProductCreate,
    ServiceCreate,
    InquiryCreate,
    BookingCreate,
    EmailLookup,
    EmailDispatchRequest,
)

__all__ = [
    "AdminRegister",
    "AdminLogin",
    "TokenVerifyRequest",
    "VerifyEmailRequest",
    "ResendVerificationRequest",
    "SettingUpdate",
    "ProductCreate",
    "ServiceCreate",
    "InquiryCreate",
    "BookingCreate",
    "EmailLookup",
    "EmailDispatchRequest",
]
