"""
Configuration management using pydantic-settings.

Precedence, highest first: constructor arguments, ``LINGOLENS_*``
environment variables, the ``.env`` file, ``config/settings.json`` and the
field defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple, Type

import pytesseract
from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lingolens.errors import ConfigurationFailure

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SETTINGS_PATH = os.path.join(PROJECT_ROOT, "config", "settings.json")


def _resolve_path(base: str, relative: str) -> str:
    return os.path.abspath(os.path.join(base, relative))


def _load_settings_file(path: Optional[str]) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) or {}
    except (OSError, ValueError) as exc:
        print(f"Warning: Could not load settings from {path}: {exc}")
        return {}
    if not isinstance(data, dict):
        print(f"Warning: {path} must contain a JSON object; ignoring it.")
        return {}
    return data


class JsonFileSettingsSource(PydanticBaseSettingsSource):
    """Lowest-priority source backed by ``config/settings.json``.

    The file path is taken from the ``settings_file`` key of the model
    config so ``load_settings`` can point at another file.
    """

    def __init__(self, settings_cls: Type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        path = self.config.get("settings_file")
        self._data = _load_settings_file(path)
        for key in self._data:
            if key not in settings_cls.model_fields:
                print(f"Warning: Unknown setting '{key}' in {path}")

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                values[key] = value
        return values


class Settings(BaseSettings):
    """
    LingoLens settings.

    Every field can be overridden with ``LINGOLENS_<FIELD>``, for example
    ``LINGOLENS_API_KEY`` or ``LINGOLENS_REQUEST_TIMEOUT``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LINGOLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        settings_file=SETTINGS_PATH,
    )

    # Client side
    bridge_url: str = "http://localhost:3001"
    request_timeout: Optional[float] = 60.0

    # Bridge side
    host: str = "127.0.0.1"
    port: int = 3001
    api_key: Optional[str] = None
    model: str = "openai/gpt-4o-mini"
    provider_url: str = "https://openrouter.ai/api/v1"

    # Dependencies and logging
    tesseract_path: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("request_timeout", mode="after")
    @classmethod
    def validate_request_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Zero or a negative timeout means no timeout."""
        if v is not None and v <= 0:
            return None
        return v

    @field_validator("api_key", "tesseract_path", mode="before")
    @classmethod
    def blank_as_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v or "INFO").upper()
        if not isinstance(logging.getLevelName(level), int):
            logger.warning("Unknown log level %r, using INFO", v)
            return "INFO"
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonFileSettingsSource(settings_cls),
            file_secret_settings,
        )

    def require_api_key(self) -> str:
        """Return the provider credential or fail fast when it is missing."""
        if not self.api_key:
            raise ConfigurationFailure(detail="set LINGOLENS_API_KEY in the environment or .env file")
        return self.api_key


def load_settings(path: str = SETTINGS_PATH, env_file: Optional[str] = ".env") -> Settings:
    """Build settings from ``path``, the environment and ``env_file``.

    Doxygen:
    - @param path: JSON settings file (optional; a warning is printed when unreadable).
    - @param env_file: dotenv file; None skips it.
    - @return: Validated `Settings`.
    - @throws pydantic.ValidationError: If a value has the wrong type, e.g. a non-numeric port.
    """

    class _Settings(Settings):
        model_config = SettingsConfigDict(settings_file=path)

    return Settings.model_validate(_Settings(_env_file=env_file).model_dump())


def configure_dependencies(settings: Settings) -> Optional[str]:
    """Point pytesseract at the configured Tesseract binary, if any."""
    if not settings.tesseract_path:
        return None
    tess_abs = _resolve_path(PROJECT_ROOT, settings.tesseract_path)
    if os.path.exists(tess_abs):
        pytesseract.pytesseract.tesseract_cmd = tess_abs
        return tess_abs
    print(f"Warning: Tesseract path from config does not exist: {tess_abs}")
    return None
