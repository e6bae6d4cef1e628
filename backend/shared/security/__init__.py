"""
Security module: owner authentication.
"""

from shared.security.auth import (
    sign_jwt,
    issue_owner_token,
    verify_jwt,
    get_bearer_token,
    current_user_context,
)

__all__ = [
    "sign_jwt",
    "issue_owner_token",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
]
