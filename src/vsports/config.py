"""Configuration loading with XDG paths, atomic writes and environment overrides.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.vsports/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Client config** -- a single JSON document deserialised into
  :class:`~vsports.models.ClientConfig`, using the camelCase keys
  ``apiKey``, ``timeoutSeconds``, ``redisConfig`` and ``cacheDuration``.
* **Precedence** -- :func:`load_client_config` layers ``VSPORTS_*``
  environment variables over the config file over model defaults.

Writes go through :func:`_atomic_write` (temp file then rename) so a crash
never leaves a truncated config behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from vsports.exceptions import ConfigError
from vsports.models import ClientConfig

_APP_NAME = "vsports"
_CONFIG_FILENAME = "config.json"

# Environment variable -> (section, key, type). ``None`` section means top level.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, type]] = {
    "VSPORTS_API_KEY": (None, "apiKey", str),
    "VSPORTS_TIMEOUT": (None, "timeoutSeconds", float),
    "VSPORTS_CACHE_DURATION": (None, "cacheDuration", int),
    "VSPORTS_REDIS_ADDR": ("redisConfig", "addr", str),
    "VSPORTS_REDIS_PASSWORD": ("redisConfig", "password", str),
    "VSPORTS_REDIS_DB": ("redisConfig", "db", int),
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/vsports/`` (default ``~/.config/vsports/``).
    On macOS/Windows: ``~/.vsports/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/vsports/`` (default ``~/.local/share/vsports/``).
    On macOS/Windows: ``~/.vsports/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Loading ---


def _resolve_path(path: Optional[str | Path]) -> tuple[Path, bool]:
    """Pick the config file and whether it was asked for explicitly.

    An explicit argument wins over ``$VSPORTS_CONFIG``, which wins over the
    default location. Only the default location may be absent.
    """
    if path is not None:
        return Path(path).expanduser(), True
    env_path = os.environ.get("VSPORTS_CONFIG")
    if env_path:
        return Path(env_path).expanduser(), True
    return default_config_path(), False


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *data* with ``VSPORTS_*`` variables layered on top."""
    merged = dict(data)
    if isinstance(merged.get("redisConfig"), dict):
        merged["redisConfig"] = dict(merged["redisConfig"])
    for var, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = cast(raw)
        except ValueError:
            raise ConfigError(f"Environment variable {var} must be {cast.__name__}, got: {raw}") from None
        if section is None:
            merged[key] = value
        else:
            if not isinstance(merged.get(section), dict):
                merged[section] = {}
            merged[section][key] = value
    return merged


def load_client_config(path: Optional[str | Path] = None) -> ClientConfig:
    """Load the client configuration.

    Precedence (high to low):
        1. ``VSPORTS_*`` environment variables (``VSPORTS_API_KEY``,
           ``VSPORTS_TIMEOUT``, ``VSPORTS_CACHE_DURATION``,
           ``VSPORTS_REDIS_ADDR``, ``VSPORTS_REDIS_PASSWORD``,
           ``VSPORTS_REDIS_DB``)
        2. The config file: *path*, else ``$VSPORTS_CONFIG``, else
           ``<config_dir>/config.json``
        3. Model defaults

    Raises:
        ConfigError: If an explicitly named file is missing, the file is
            not a JSON object, a value fails validation, or no API key is
            set by any layer.
    """
    config_path, explicit = _resolve_path(path)
    data: dict[str, Any] = {}
    if config_path.is_file():
        data = _read_config_file(config_path)
    elif explicit:
        raise ConfigError(f"Config file not found: {config_path}")

    data = _apply_env_overrides(data)
    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc

    if not config.api_key:
        raise ConfigError(
            f"No API key configured: set apiKey in {config_path} or VSPORTS_API_KEY"
        )
    return config


def save_client_config(config: ClientConfig, path: Optional[str | Path] = None) -> Path:
    """Persist *config* atomically, returning the path written.

    Keys are written in their camelCase form so the file stays readable
    by other clients of the same API.
    """
    target, _ = _resolve_path(path)
    data = config.model_dump(mode="json", by_alias=True)
    _atomic_write(target, json.dumps(data, indent=2) + "\n")
    return target
