from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from push_relay.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def expand_env_vars(config_str: str) -> str:
    """
    Expand environment variables in the format ${VAR_NAME} within a YAML string.
    Skips expansion in YAML comments (lines starting with #).

    Raises:
        KeyError: If a referenced environment variable is not set
    """
    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        try:
            return os.environ[var_name]
        except KeyError:
            msg = f"Environment variable '{var_name}' referenced in config.yaml but not set"
            raise KeyError(msg) from None

    lines = []
    for line in config_str.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith("#"):
            lines.append(line)
        else:
            lines.append(re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", replace_var, line))

    return "\n".join(lines)


def load_config_from_yaml(config_path: str | None = None) -> dict:
    """
    Load the optional YAML configuration file and expand environment variables.

    Args:
        config_path: Path to config.yaml file. If None, uses CONFIG_PATH environment variable.
                     Defaults to /app/config.yaml if neither is set.

    Returns:
        Parsed configuration, or an empty dict when the file does not exist

    Raises:
        ValueError: If the YAML is invalid or references an unset variable
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "/app/config.yaml")

    config_file = Path(config_path)
    if not config_file.exists():
        logger.debug("No config file at %s, using environment only", config_path)
        return {}

    with open(config_file) as f:
        config_str = f.read()

    try:
        expanded_config = expand_env_vars(config_str)
    except KeyError as e:
        msg = f"Error expanding environment variables in config.yaml: {e}"
        raise ValueError(msg) from None

    try:
        config_dict = yaml.safe_load(expanded_config)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in config.yaml: {e}"
        raise ValueError(msg) from None

    if config_dict is None:
        return {}

    if not isinstance(config_dict, dict):
        msg = "config.yaml must contain a YAML mapping/dictionary at root level"
        raise ValueError(msg)

    return config_dict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,  # P8_PRIVATE_KEY etc. match field names
    )

    # APNs token credentials (Certificates, Identifiers & Profiles -> Keys)
    p8_private_key: str = ""
    p8_key_id: str = ""
    p8_team_id: str = ""
    apns_environment: str = "development"  # "PRODUCTION" selects the production gateway

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    relay_prefix: str = "/relay-to"

    # Notification constants
    bundle_id: str = "dev.noppe.snowfox"
    alert_text: str = "\U0001f3ba"
    location_base_url: str = "https://not-supported"

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("relay_prefix", mode="after")
    @classmethod
    def normalize_relay_prefix(cls, v: str) -> str:
        """Prefix always starts with a slash and never ends with one."""
        return "/" + v.strip("/")

    @property
    def apns_mode(self) -> str:
        """aioapns environment derived from APNS_ENVIRONMENT."""
        return "production" if self.apns_environment.upper() == "PRODUCTION" else "development"

    def validate_apns_credentials(self) -> None:
        """Fail fast when the P8 credentials are incomplete (called at startup)."""
        missing = [
            name
            for name, value in (
                ("apns.private_key", self.p8_private_key),
                ("apns.key_id", self.p8_key_id),
                ("apns.team_id", self.p8_team_id),
            )
            if not value
        ]
        if missing:
            msg = f"Missing APNs credentials: {', '.join(missing)}"
            raise ConfigurationError(msg, context={"missing": missing})


def _build_settings_from_yaml(config_path: str | None = None) -> Settings:
    """Load settings from the YAML file (if any) on top of environment variables."""
    config_dict = load_config_from_yaml(config_path)

    # config.yaml is nested, Settings is flat
    flat_config = {}

    if isinstance(config_dict.get("apns"), dict):
        apns = config_dict["apns"]
        for yaml_key, field_name in (
            ("private_key", "p8_private_key"),
            ("key_id", "p8_key_id"),
            ("team_id", "p8_team_id"),
            ("environment", "apns_environment"),
        ):
            if apns.get(yaml_key) is not None:
                flat_config[field_name] = apns[yaml_key]

    if isinstance(config_dict.get("server"), dict):
        server = config_dict["server"]
        for key in ("host", "port", "relay_prefix"):
            if server.get(key) is not None:
                flat_config[key] = server[key]

    if isinstance(config_dict.get("notification"), dict):
        notification = config_dict["notification"]
        for key in ("bundle_id", "alert_text", "location_base_url"):
            if notification.get(key) is not None:
                flat_config[key] = notification[key]

    if isinstance(config_dict.get("logging"), dict):
        if "level" in config_dict["logging"]:
            flat_config["log_level"] = config_dict["logging"]["level"]
        if "json" in config_dict["logging"]:
            flat_config["log_json"] = config_dict["logging"]["json"]

    try:
        return Settings(**flat_config)
    except ValidationError as e:
        msg = f"Configuration validation error: {e}"
        raise ConfigurationError(msg) from e


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    global _settings

    if _settings is None:
        try:
            _settings = _build_settings_from_yaml()
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    return _settings


def reset_settings_for_testing() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
