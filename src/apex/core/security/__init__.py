"""Security utilities - crypto, password policy and role permissions.

Re-exports all security-related functions for convenience.
"""

from src.apex.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    generate_reset_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.apex.core.security.passwords import (
    MIN_PASSWORD_LENGTH,
    generate_temporary_password,
    password_policy_violations,
)
from src.apex.core.security.permissions import (
    PERMISSION_CATALOG,
    ROLE_DEFINITIONS,
    Permission,
    has_permission,
    permissions_for,
)

__all__ = [
    # Crypto
    "ACCESS_TOKEN_TYPE",
    "DUMMY_PASSWORD_HASH",
    "create_access_token",
    "decode_token",
    "generate_reset_token",
    "hash_password",
    "hash_token",
    "verify_password",
    # Passwords
    "MIN_PASSWORD_LENGTH",
    "generate_temporary_password",
    "password_policy_violations",
    # Permissions
    "PERMISSION_CATALOG",
    "ROLE_DEFINITIONS",
    "Permission",
    "has_permission",
    "permissions_for",
]
