"""Tests for settings loading."""

from netops.config import Config


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NETOPS_CHUNK_DAYS", raising=False)
        config = Config(SUPABASE_URL="https://backend.test", SUPABASE_API_KEY="k")
        assert config.chunk_days == 7
        assert config.session_ttl_hours == 168
        assert config.session_max_age == 604800

    def test_env_aliases(self, monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://public.test")
        monkeypatch.setenv("NETOPS_CHUNK_DAYS", "3")
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        config = Config()
        assert config.supabase_url == "https://public.test"
        assert config.chunk_days == 3

    def test_cors_origins(self):
        config = Config(cors_origins="http://a.test, http://b.test ,")
        assert config.cors_origins == ["http://a.test", "http://b.test"]

    def test_admin_usernames(self):
        config = Config(portal_admins=" Admin ,ops.lead,,")
        assert config.admin_usernames == {"admin", "ops.lead"}

    def test_is_production(self):
        assert Config(environment="Production").is_production
        assert not Config(environment="development").is_production

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("request_timeout: 45\nchunk_days: 14\n")
        config = Config.from_yaml(path)
        assert config.request_timeout == 45.0
        assert config.chunk_days == 14

    def test_from_missing_yaml(self, tmp_path):
        config = Config.from_yaml(tmp_path / "absent.yaml")
        assert config.api_base_url
