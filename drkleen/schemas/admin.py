from typing import Optional

from pydantic import BaseModel

# All fields optional; presence and format are checked by the account service


class AdminRegister(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None

    class Config:
        title = "AdminRegister"


class AdminLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    class Config:
        title = "AdminLogin"


class TokenVerifyRequest(BaseModel):
    token: Optional[str] = None

    class Config:
        title = "TokenVerifyRequest"


class VerifyEmailRequest(BaseModel):
    token: Optional[str] = None

    class Config:
        title = "VerifyEmailRequest"


class ResendVerificationRequest(BaseModel):
    email: Optional[str] = None

    class Config:
        title = "ResendVerificationRequest"
