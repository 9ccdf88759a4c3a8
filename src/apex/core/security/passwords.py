"""Password policy checks and temporary password generation."""

import re
import secrets
import string

MIN_PASSWORD_LENGTH = 12

_SEQUENTIAL_PATTERNS = ("123", "abc", "qwe", "asd", "zxc")
_REPEATED_CHARACTER = re.compile(r"(.)\1{2,}")
_SPECIAL_CHARACTER = re.compile(r"[^A-Za-z0-9]")


def password_policy_violations(password: str) -> list[str]:
    """Return every rule the password breaks, empty when it is acceptable."""
    errors: list[str] = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL_CHARACTER.search(password):
        errors.append("Password must contain at least one special character")
    if _REPEATED_CHARACTER.search(password):
        errors.append("Password must not contain 3 or more repeated characters")
    lowered = password.lower()
    if any(pattern in lowered for pattern in _SEQUENTIAL_PATTERNS):
        errors.append("Password must not contain common sequential patterns")
    return errors


def generate_temporary_password() -> str:
    """Random password that always passes the policy."""
    alphabet = string.ascii_letters + string.digits
    while True:
        candidate = (
            "".join(secrets.choice(alphabet) for _ in range(10))
            + secrets.choice(string.ascii_uppercase)
            + secrets.choice(string.ascii_lowercase)
            + secrets.choice(string.digits)
            + secrets.choice("!@#$%&*")
        )
        if not password_policy_violations(candidate):
            return candidate
