"""Client configuration.

Settings are merged from several sources, lowest precedence first:

1. Built-in defaults
2. Global config (``courier.json`` / ``courier.jsonc`` in the user config dir)
3. An explicit config file passed by the caller
4. ``COURIER_*`` environment variables
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import commentjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..api_client.transport import HttpLogLevel, TransportConfig
from ..util.log import Log
from .global_paths import GlobalPath

log = Log.create({"service": "config"})

CONFIG_FILENAMES = ("courier.json", "courier.jsonc")

_ENV_FIELDS = {
    "COURIER_BASE_URL": "base_url",
    "COURIER_TIMEOUT": "timeout",
    "COURIER_FOLLOW_REDIRECTS": "follow_redirects",
    "COURIER_HTTP_LOG": "http_log",
    "COURIER_LOG_LEVEL": "log_level",
    "COURIER_LOG_FORMAT": "log_format",
}


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Config error in {path}: {message}")


class ClientSettings(BaseModel):
    """Resolved client settings."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = "http://127.0.0.1:8080"
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    http_log: HttpLogLevel = HttpLogLevel.NONE
    log_level: str = "info"
    log_format: str = "kv"

    def transport(self) -> TransportConfig:
        """The immutable transport record for a client."""
        return TransportConfig(
            base_url=self.base_url,
            default_headers=dict(self.headers),
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            log_level=self.http_log,
        )


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def substitute_env_vars(text: str, environ: Mapping[str, str]) -> str:
    """Replace ``{env:VAR}`` patterns with environment variable values."""
    return re.sub(r"\{env:([^}]+)\}", lambda m: environ.get(m.group(1), ""), text)


def load_config_file(path: Path, environ: Mapping[str, str]) -> Dict[str, Any]:
    """Load a JSON or JSONC config file.

    Raises:
        ConfigError: unreadable file, invalid JSON or a non-object document
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(str(path), str(e)) from e
    try:
        data = commentjson.loads(substitute_env_vars(text, environ))
    except Exception as e:
        # commentjson reports parse errors as ValueError or as lark exceptions
        raise ConfigError(str(path), f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top-level value must be an object")
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name, field in _ENV_FIELDS.items():
        value = environ.get(name)
        if value:
            overrides[field] = value

    raw_headers = environ.get("COURIER_HEADERS")
    if raw_headers:
        try:
            headers = json.loads(raw_headers)
        except ValueError as e:
            raise ConfigError("COURIER_HEADERS", f"invalid JSON: {e}") from e
        if not isinstance(headers, dict):
            raise ConfigError("COURIER_HEADERS", "must be a JSON object")
        overrides["headers"] = {str(k): str(v) for k, v in headers.items()}
    return overrides


def load_settings(
    path: Optional[str | Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientSettings:
    """Resolve settings from config files and the environment."""
    env = os.environ if environ is None else environ
    merged: Dict[str, Any] = {}
    source = "<defaults>"

    global_dir = Path(GlobalPath.config())
    for filename in CONFIG_FILENAMES:
        candidate = global_dir / filename
        if candidate.is_file():
            merged = deep_merge(merged, load_config_file(candidate, env))
            source = str(candidate)
            log.info("loaded global config", {"path": source})

    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigError(str(explicit), "file not found")
        merged = deep_merge(merged, load_config_file(explicit, env))
        source = str(explicit)
        log.info("loaded config", {"path": source})

    overrides = _env_overrides(env)
    if overrides:
        merged = deep_merge(merged, overrides)
        source = "environment"

    try:
        settings = ClientSettings.model_validate(merged)
        settings.transport()
    except ValidationError as e:
        raise ConfigError(source, str(e)) from e
    return settings
