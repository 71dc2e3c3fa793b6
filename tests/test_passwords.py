"""Tests for bcrypt password hashing and legacy credential handling."""

import pytest

from netops.auth.passwords import (
    PasswordRotationRequired,
    hash_password,
    is_bcrypt_hash,
    verify_password,
)


class TestHashPassword:
    def test_produces_bcrypt_hash(self):
        hashed = hash_password("s3cret", rounds=4)
        assert hashed.startswith("$2")
        assert is_bcrypt_hash(hashed)

    def test_salted(self):
        """Two hashes of the same password differ."""
        assert hash_password("s3cret", rounds=4) != hash_password("s3cret", rounds=4)

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")


class TestVerifyPassword:
    @pytest.fixture(scope="class")
    def stored(self):
        return hash_password("s3cret", rounds=4)

    def test_correct(self, stored):
        assert verify_password("s3cret", stored) is True

    def test_wrong(self, stored):
        assert verify_password("S3cret", stored) is False

    def test_missing_hash(self):
        assert verify_password("s3cret", None) is False
        assert verify_password("s3cret", "") is False

    def test_plain_text_requires_rotation(self):
        """A legacy plain-text value is never compared, even when it matches."""
        with pytest.raises(PasswordRotationRequired) as exc_info:
            verify_password("s3cret", "s3cret", username="operator")
        assert exc_info.value.username == "operator"

    def test_malformed_hash(self):
        assert verify_password("s3cret", "$2b$not-a-real-hash") is False
