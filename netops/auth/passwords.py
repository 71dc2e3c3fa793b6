"""Password hashing and verification for portal users.

Only bcrypt hashes are accepted. A stored value without the ``$2`` prefix is
a legacy plain-text credential; verifying against it raises
:class:`PasswordRotationRequired` instead of comparing strings.
"""

import bcrypt

BCRYPT_PREFIX = "$2"


class PasswordRotationRequired(Exception):
    """The stored credential is not a bcrypt hash and must be rotated."""

    def __init__(self, username: str | None = None):
        self.username = username
        super().__init__(f"Stored password for {username or 'user'} is not a bcrypt hash")


def is_bcrypt_hash(stored: str | None) -> bool:
    return bool(stored) and stored.startswith(BCRYPT_PREFIX)


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a bcrypt hash of ``password`` as text."""
    if not password:
        raise ValueError("Password must not be empty")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, stored: str | None, username: str | None = None) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Raises:
        PasswordRotationRequired: ``stored`` is present but not a bcrypt hash.
    """
    if not stored:
        return False
    if not is_bcrypt_hash(stored):
        raise PasswordRotationRequired(username)
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False
