"""
Input Validation Utilities

This module provides validation functions for account input:
1. is_valid_email: local@domain.tld shape check
2. is_valid_password: password policy check

Both are pure functions so the services can apply them in a fixed order
and report the first failing field.
"""

import re


# local@domain.tld, with dots or dashes allowed between word runs on
# either side and a 2-3 character final label
EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}", re.ASCII)

# At least one digit, one lowercase and one uppercase letter; 6 to 20 chars
PASSWORD_PATTERN = re.compile(r"(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,20}")

# bcrypt silently ignores (or rejects) anything past 72 bytes
MAX_PASSWORD_BYTES = 72


def is_valid_email(email: str) -> bool:
    """
    Check if a string looks like an email address.

    Examples:
        >>> is_valid_email("jane@x.com")
        True
        >>> is_valid_email("jane@localhost")
        False
    """
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_password(password: str) -> bool:
    """
    Check a password against the account password policy.

    Examples:
        >>> is_valid_password("Abcdef1")
        True
        >>> is_valid_password("abcdef")
        False
    """
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return PASSWORD_PATTERN.fullmatch(password) is not None
