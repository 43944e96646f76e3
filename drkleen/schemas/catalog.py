from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class SettingUpdate(BaseModel):
    setting_value: str = Field(..., min_length=1)
    description: Optional[str] = None

    class Config:
        title = "SettingUpdate"


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    description: str = ""
    image: str = ""
    is_new: bool = False
    discount: float = 0
    stock: int = 0

    class Config:
        title = "ProductCreate"


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price_range: str = Field(..., min_length=1)
    image: str = ""

    class Config:
        title = "ServiceCreate"


class InquiryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    message: str = Field(..., min_length=1)
    phone: Optional[str] = None
    inquiry_type: str = "general"

    class Config:
        title = "InquiryCreate"


class BookingCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    service_type: str = Field(..., min_length=1)
    phone: Optional[str] = None
    booking_date: Optional[date] = None

    class Config:
        title = "BookingCreate"


class EmailLookup(BaseModel):
    email: Optional[str] = None

    class Config:
        title = "EmailLookup"


class EmailDispatchRequest(BaseModel):
    type: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    verification_token: Optional[str] = None

    class Config:
        title = "EmailDispatchRequest"
