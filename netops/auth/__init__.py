"""NetOps auth module - password checks, server-side sessions and the session gate."""

from netops.auth.gate import PUBLIC_PREFIXES, is_public_path, login_redirect_url
from netops.auth.passwords import (
    PasswordRotationRequired,
    hash_password,
    is_bcrypt_hash,
    verify_password,
)
from netops.auth.sessions import AuthedUser, LoginError, SessionStore

__all__ = [
    "PUBLIC_PREFIXES",
    "AuthedUser",
    "LoginError",
    "PasswordRotationRequired",
    "SessionStore",
    "hash_password",
    "is_bcrypt_hash",
    "is_public_path",
    "login_redirect_url",
    "verify_password",
]
