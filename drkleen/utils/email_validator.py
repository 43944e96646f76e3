# drkleen/utils/email_validator.py
import re
import logging
from typing import Tuple

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EmailValidator:
    """Address-shape checks used by the registration and login forms"""

    @staticmethod
    def is_valid_format(email: str) -> Tuple[bool, str]:
        """
        Validate email format.
        Returns: (is_valid, error_message)
        """
        if not email or not isinstance(email, str):
            return False, "Email is required"

        if not EMAIL_PATTERN.match(email.strip()):
            return False, "Invalid email format. Please enter a valid email address."

        return True, "Email format is valid"

    @staticmethod
    def normalize(email: str) -> str:
        # Lookups are exact-match, so only surrounding whitespace is dropped.
        return email.strip()
