"""Tests for the operator CLI."""

from unittest.mock import patch

from click.testing import CliRunner

from netops.auth.passwords import verify_password
from netops.cli import main
from netops.remote.client import ConfigurationError
from tests.conftest import FakeRemote


def _invoke(*args):
    return CliRunner().invoke(main, list(args))


class TestPasswordCommands:
    def test_hash_password(self):
        result = _invoke("hash-password", "--password", "s3cret")
        assert result.exit_code == 0
        assert result.output.strip().startswith("$2")

    def test_rotate_plain_text_password(self):
        remote = FakeRemote()
        remote.tables["portal_users"] = [
            {"id": 1, "username": "legacy", "password_hash": "old", "is_active": True}
        ]
        with patch("netops.cli.create_remote_client", return_value=remote):
            result = _invoke("rotate-password", "legacy", "--password", "n3w-secret")

        assert result.exit_code == 0
        assert "Password rotated for legacy" in result.output
        assert "plain-text" in result.output
        assert verify_password("n3w-secret", remote.tables["portal_users"][0]["password_hash"])

    def test_rotate_unknown_user(self):
        with patch("netops.cli.create_remote_client", return_value=FakeRemote()):
            result = _invoke("rotate-password", "ghost", "--password", "x")
        assert result.exit_code == 1
        assert "No such user" in result.output

    def test_rotate_without_backend(self):
        with patch("netops.cli.create_remote_client", side_effect=ConfigurationError("Missing SUPABASE URL")):
            result = _invoke("rotate-password", "legacy", "--password", "x")
        assert result.exit_code == 1
        assert "Missing SUPABASE URL" in result.output


class TestStatusCommands:
    def test_status(self):
        result = _invoke("status")
        assert result.exit_code == 0
        assert "Session cookie" in result.output

    def test_check(self):
        remote = FakeRemote()
        remote.script("fetch_ca_date_bounds", [{"min_date": "2024-01-01", "max_date": "2024-05-01"}])
        remote.script("fetch_ssl_subregions", [{"subregion": "North-1"}, {"subregion": "South-1"}])
        with patch("netops.cli.create_remote_client", return_value=remote):
            result = _invoke("check")
        assert result.exit_code == 0
        assert "2024-01-01" in result.output
        assert "Backend reachable" in result.output
