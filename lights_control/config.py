"""Configuration loader for the Lights Control application YAML file."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from .auth.authenticator import Authenticator
from .auth.stores import SqliteUserStore

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = "config/main.yaml"
DEFAULT_DATABASE_PATH = "data/lightscontrol.sqlite"
DEFAULT_SESSION_TTL_SECONDS = 3600
AUTO_LOGIN_SESSION_TTL_SECONDS = 30 * 24 * 3600


@dataclass
class AdminParams:
    """Application-level parameters shown in the admin pages."""

    admin_email: str = "webmaster@example.com"
    server_ip: str | None = None
    server_url: str | None = None


@dataclass
class AppSettings:
    """Lights Control application settings."""

    name: str = "Lights Control"
    database_path: str = DEFAULT_DATABASE_PATH
    allow_auto_login: bool = True
    session_ttl_seconds: int = AUTO_LOGIN_SESSION_TTL_SECONDS
    log_level: str = "INFO"
    log_file: str | None = None
    params: AdminParams = field(default_factory=AdminParams)


class ConfigLoader:
    """Loads and parses the application configuration file."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = Path(config_file)

    def load(self) -> AppSettings:
        """Load settings from the YAML file, falling back to defaults."""
        settings = AppSettings()

        if not self.config_file.exists():
            logger.warning("Config file does not exist", file=str(self.config_file))
        else:
            try:
                content = self._load_yaml_file(self.config_file)
                settings = self._parse_settings(content)
            except Exception as e:
                logger.error(
                    "Failed to load config file",
                    file=str(self.config_file),
                    error=str(e),
                )
                settings = AppSettings()

        self._apply_env_overrides(settings)
        return settings

    def _load_yaml_file(self, yaml_file: Path) -> dict[str, Any]:
        with open(yaml_file) as f:
            content = yaml.safe_load(f)

        if not content:
            return {}
        if not isinstance(content, dict):
            raise ValueError("top level of config file must be a mapping")
        return content

    def _parse_settings(self, content: dict[str, Any]) -> AppSettings:
        """Build settings from the parsed YAML sections."""
        settings = AppSettings()

        app_section = self._section(content, "app")
        db_section = self._section(content, "db")
        user_section = self._section(content, "user")
        log_section = self._section(content, "log")
        params_section = self._section(content, "params")

        settings.name = app_section.get("name", settings.name)
        settings.database_path = db_section.get("path", settings.database_path)

        allow_auto_login = user_section.get(
            "allow_auto_login", settings.allow_auto_login
        )
        if isinstance(allow_auto_login, bool):
            settings.allow_auto_login = allow_auto_login
        else:
            logger.warning(
                "Ignoring non-boolean allow_auto_login",
                value=repr(allow_auto_login),
            )
        if "session_ttl_seconds" in user_section:
            settings.session_ttl_seconds = int(user_section["session_ttl_seconds"])
        elif not settings.allow_auto_login:
            settings.session_ttl_seconds = DEFAULT_SESSION_TTL_SECONDS

        settings.log_level = str(log_section.get("level", settings.log_level)).upper()
        settings.log_file = log_section.get("file", settings.log_file)

        settings.params = AdminParams(
            admin_email=params_section.get("admin_email", AdminParams.admin_email),
            server_ip=params_section.get("server_ip"),
            server_url=params_section.get("server_url"),
        )
        return settings

    def _section(self, content: dict[str, Any], name: str) -> dict[str, Any]:
        """Return a config section, treating anything but a mapping as empty."""
        section = content.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            logger.warning(
                "Ignoring config section that is not a mapping",
                section=name,
                file=str(self.config_file),
            )
            return {}
        return section

    def _apply_env_overrides(self, settings: AppSettings) -> None:
        db_path = os.getenv("LIGHTS_CONTROL_DB_PATH")
        if db_path:
            settings.database_path = db_path

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            settings.log_level = log_level.upper()

        log_file = os.getenv("LOG_FILE")
        if log_file:
            settings.log_file = log_file


def get_config_loader() -> ConfigLoader:
    """Get configured config loader instance."""
    config_file = os.getenv("LIGHTS_CONTROL_CONFIG", DEFAULT_CONFIG_FILE)
    return ConfigLoader(config_file)


def load_settings() -> AppSettings:
    return get_config_loader().load()


def build_user_store(settings: AppSettings) -> SqliteUserStore:
    return SqliteUserStore(settings.database_path)


def build_authenticator(settings: AppSettings) -> Authenticator:
    """Create an authenticator backed by the configured user database."""
    return Authenticator(build_user_store(settings))
