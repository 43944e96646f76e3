# drkleen/utils/jwt_handler.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

from jose import JWTError, jwt

from drkleen.config import Settings
from drkleen.errors import InvalidToken

logger = logging.getLogger(__name__)


class TokenService:
    """
    Issues and verifies signed session tokens.

    The secret, algorithm, issuer and lifetime are passed in at construction;
    nothing here reads configuration on its own.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: Optional[str] = None,
        expires: timedelta = timedelta(hours=24),
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.expires = expires

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            issuer=settings.TOKEN_ISSUER,
            expires=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
        )

    def issue(self, claims: Dict[str, Any], now: Optional[datetime] = None) -> str:
        """
        Create a session token carrying ``claims`` plus iat/exp/iss/type.
        """
        issued_at = now or datetime.now(timezone.utc)
        to_encode = dict(claims)
        if "sub" in to_encode:
            to_encode["sub"] = str(to_encode["sub"])

        to_encode.update({
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expires).timestamp()),
            "type": "access",
        })
        if self.issuer:
            to_encode["iss"] = self.issuer

        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode ``token`` and return its claims.

        Raises InvalidToken for a bad signature, expiry, wrong issuer or any
        malformed input; callers cannot tell these apart.
        """
        if not token or not isinstance(token, str):
            raise InvalidToken()
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except JWTError as e:
            logger.info(f"Session token rejected: {e.__class__.__name__}")
            raise InvalidToken()

        if payload.get("type") != "access" or not payload.get("sub"):
            raise InvalidToken()
        return payload


def account_id_from_claims(payload: Dict[str, Any]) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()
