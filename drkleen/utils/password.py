# drkleen/utils/password.py
import re
from typing import Dict

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

MIN_PASSWORD_LENGTH = 8
SYMBOLS = r"[^A-Za-z0-9\s]"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # unknown or corrupt hash format
        return False


def check_password_strength(password: str) -> Dict[str, bool]:
    """Report which strength requirements a password meets."""
    return {
        "length": len(password) >= MIN_PASSWORD_LENGTH,
        "uppercase": re.search(r"[A-Z]", password) is not None,
        "lowercase": re.search(r"[a-z]", password) is not None,
        "number": re.search(r"\d", password) is not None,
        "symbol": re.search(SYMBOLS, password) is not None,
    }


def is_strong_password(password: str) -> bool:
    return all(check_password_strength(password).values())
