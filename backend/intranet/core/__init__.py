from .config import settings
from .security import (
    create_access_token,
    create_admin_token,
    create_refresh_token,
    get_password_hash,
    hash_token_id,
    verify_password,
    verify_token,
)

__all__ = [
    "settings",
    "create_access_token",
    "create_admin_token",
    "create_refresh_token",
    "get_password_hash",
    "hash_token_id",
    "verify_password",
    "verify_token",
]
