"""
Configuration management for the NetOps portal

Loads settings from:
1. config/config.yaml
2. Environment variables (.env)
3. Default values
"""

from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """NetOps configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Project paths
    project_root: Path = Path(__file__).parent.parent

    # Backend (database-as-a-service) settings
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "supabase_url"),
    )
    supabase_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_API_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY", "supabase_api_key"),
    )
    remote_timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("NETOPS_REMOTE_TIMEOUT", "remote_timeout"),
    )

    # Session settings
    auth_cookie_name: str = Field(
        default="nr_session",
        validation_alias=AliasChoices("AUTH_COOKIE_NAME", "auth_cookie_name"),
    )
    session_ttl_hours: int = Field(
        default=24 * 7,
        validation_alias=AliasChoices("NETOPS_SESSION_TTL_HOURS", "session_ttl_hours"),
    )
    portal_admins: str = Field(
        default="",
        validation_alias=AliasChoices("PORTAL_ADMINS", "portal_admins"),
    )
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("NETOPS_ENV", "environment"),
    )

    # Fetch orchestration
    request_timeout: float = Field(
        default=120.0,
        validation_alias=AliasChoices("NETOPS_REQUEST_TIMEOUT", "request_timeout"),
    )
    chunk_days: int = Field(
        default=7,
        validation_alias=AliasChoices("NETOPS_CHUNK_DAYS", "chunk_days"),
    )

    # API / dashboard
    cors_origins_raw: str = Field(
        default="http://localhost:8501",
        validation_alias=AliasChoices("NETOPS_CORS_ORIGINS", "cors_origins"),
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("NETOPS_API_URL", "api_base_url"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def admin_usernames(self) -> set[str]:
        return {u.strip().lower() for u in self.portal_admins.split(",") if u.strip()}

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def session_max_age(self) -> int:
        """Cookie max-age in seconds."""
        return self.session_ttl_hours * 3600

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "Config":
        """Load configuration from YAML file"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = Config.from_yaml()
    return _config


def reload_config(yaml_path: Optional[str | Path] = None) -> Config:
    """Reload configuration from file"""
    global _config
    _config = Config.from_yaml(yaml_path) if yaml_path else Config.from_yaml()
    return _config
