"""Application settings.

Built once at startup and injected into the transport and the console
engine; nothing reads configuration from module-level globals.

Sources, highest priority first: explicit keyword arguments, ``GAMIFY_*``
environment variables, a ``.env`` file, then the YAML config file
(``config.yaml`` by default).
"""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from gamify_console.exceptions import ConfigurationError
from gamify_console.version import __version__

DEFAULT_BASE_URL: str = "http://localhost:8080/GamifyUser/"
DEFAULT_CONFIG_FILE: str = "config.yaml"

# Older config files spell the base URL differently.  These are mapped in a
# validator, not with AliasChoices: pydantic-settings skips env_prefix for
# aliased fields, so an alias would turn GAMIFY_BASE_URL into BASE_URL.
_BASE_URL_ALIASES: tuple[str, ...] = ("base_link", "baselink")


class AppSettings(BaseSettings):
    """Immutable console configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GAMIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        yaml_file=DEFAULT_CONFIG_FILE,
        yaml_file_encoding="utf-8",
    )

    username: str = Field(min_length=1, description="Operator account name.")
    password: SecretStr = Field(description="Operator account password.")
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="Base URL every endpoint path is resolved against.",
    )
    debug: bool = Field(default=False, description="Verbose diagnostics and debug logging.")
    history: bool = Field(default=False, description="Persist command history to disk.")
    history_file: Path = Field(
        default=Path(".gamify_history.txt"),
        description="Where command history is stored when enabled.",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per request (seconds).",
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_base_url_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "base_url" in data:
            return data
        for alias in _BASE_URL_ALIASES:
            if alias in data:
                data = dict(data)
                data["base_url"] = data.pop(alias)
                break
        return data

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        return value if value.endswith("/") else value + "/"

    @property
    def user_agent(self) -> str:
        """User-Agent header sent with every request."""
        return f"gamify-console / {__version__} / {platform.system().lower() or 'unknown'}"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(config_file: Path | None = None, **overrides: Any) -> AppSettings:
    """Build :class:`AppSettings`, optionally from an explicit YAML file.

    Raises
    ------
    ConfigurationError
        If *config_file* does not exist or the resulting settings are
        invalid (e.g. missing credentials).
    """
    settings_cls: type[AppSettings] = AppSettings
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigurationError(
                f"Config file not found: {config_file}",
                hint="Pass an existing YAML file to --config.",
            )

        class _ExplicitFileSettings(AppSettings):
            model_config = SettingsConfigDict(yaml_file=str(config_file))

        settings_cls = _ExplicitFileSettings

    try:
        return settings_cls(**overrides)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(fields) or 'unknown field'}",
            hint=(
                f"Set them in {config_file or DEFAULT_CONFIG_FILE} "
                "or as GAMIFY_<FIELD> environment variables."
            ),
        ) from exc
