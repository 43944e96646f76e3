from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === ROW STORE ===
    STORE_URL: str = Field(default="http://localhost:54321", description="Base URL of the hosted row store")
    STORE_SERVICE_KEY: str = Field(default="", description="Service key sent as bearer token and apikey header")
    STORE_TIMEOUT: float = Field(default=15.0, description="Timeout in seconds for row store calls")

    # === JWT AUTH ===
    SECRET_KEY: str = Field(default="change-me", description="Secret key for session token signing")
    ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    TOKEN_ISSUER: str = Field(default="drkleen-admin", description="Issuer claim on session tokens")
    ACCESS_TOKEN_EXPIRE_HOURS: int = Field(default=24, description="Session token lifetime in hours")

    # === ADMIN ACCOUNTS ===
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = Field(default=24, description="Email verification link lifetime")
    MAX_ADMIN_USERS: int = Field(default=2, description="Maximum number of admin accounts")

    # === FRONTEND / CORS ===
    FRONTEND_URL: str = Field(default="http://localhost:5173", description="Base URL used in email links")
    CORS_ORIGINS: str = Field(default="*", description="Comma-separated allowed CORS origins, or *")
    API_KEY: str = Field(default="", description="Value required in the apikey header; empty disables the check")

    # === DEBUG MODE ===
    DEBUG: bool = Field(default=False, description="Debug mode")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
