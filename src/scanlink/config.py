"""Where scanlink keeps its files, and how it reads and writes them.

Two JSON files live in the config directory:

``config.json``
    :class:`~scanlink.models.GlobalConfig`: the ``http`` section (proxy
    support, proxy URL, proxy authorization, timeout, SSL verification) and
    the metadata service URL. Edited with ``scanlink config set``.

``state.json``
    :class:`StateStore`: the scan server URL and username saved by
    ``scanlink connect``. The password is never written here; it lives in
    the OS vault (:mod:`scanlink.auth.secret_store`).

Directories follow the XDG Base Directory layout on Linux and the BSDs
(``$XDG_CONFIG_HOME/scanlink``, ``$XDG_DATA_HOME/scanlink``) and use
``~/.scanlink`` elsewhere. Every write replaces the file atomically, so a
crash mid-write leaves the previous version in place.

The HTTP settings a client actually uses come from
:func:`resolve_http_config`: ``SCANLINK_HTTP_*`` environment variables
override ``config.json``, which overrides the model defaults.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from scanlink.exceptions import ConfigError
from scanlink.models import GlobalConfig, HttpConfig, ProxySupport

logger = logging.getLogger(__name__)

_APP_NAME = "scanlink"
_CONFIG_FILENAME = "config.json"
_STATE_FILENAME = "state.json"

ENV_PROXY_SUPPORT = "SCANLINK_HTTP_PROXY_SUPPORT"
ENV_PROXY = "SCANLINK_HTTP_PROXY"
ENV_PROXY_AUTHORIZATION = "SCANLINK_HTTP_PROXY_AUTHORIZATION"


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, fallback_subdir: str = "") -> Path:
    """Resolve and create one of scanlink's directories.

    Args:
        xdg_var: ``XDG_CONFIG_HOME`` or ``XDG_DATA_HOME``.
        xdg_default: Path under ``$HOME`` used when *xdg_var* is unset.
        fallback_subdir: Subdirectory of ``~/.scanlink`` on non-XDG platforms.
    """
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or str(Path.home() / xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_subdir:
            path = path / fallback_subdir
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``config.json`` and ``state.json`` live here (created on demand)."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """Crash logs live under ``logs/`` here (created on demand)."""
    return _app_dir("XDG_DATA_HOME", os.path.join(".local", "share"), fallback_subdir="logs")


# --- Atomic writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The temp file sits next to *path* so :func:`os.replace` never crosses a
    filesystem. It is removed again if anything fails before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json``; a missing file means all defaults.

    Raises:
        ConfigError: If the file is not valid JSON or does not match
            :class:`~scanlink.models.GlobalConfig`.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _atomic_write(_global_config_path(), config.model_dump_json(indent=2) + "\n")


def set_global_config_value(key: str, value: str) -> GlobalConfig:
    """Set a dotted key (e.g. ``http.proxy``) in the global config and save it.

    The updated document is re-validated before it is written, so an invalid
    value (``http.proxy_support=sometimes``) never reaches disk.

    Args:
        key: Dotted path into :class:`~scanlink.models.GlobalConfig`.
        value: New value. The strings ``"true"``/``"false"`` are converted
            to booleans; everything else is left to Pydantic coercion.

    Returns:
        The saved configuration.

    Raises:
        ConfigError: If the key does not exist or the value is invalid.
    """
    data: dict[str, Any] = load_global_config().model_dump(mode="json")
    parts = key.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            raise ConfigError(f"Unknown config key: {key}")
        node = child
    if parts[-1] not in node:
        raise ConfigError(f"Unknown config key: {key}")

    coerced: Any = value
    if value.lower() in ("true", "false"):
        coerced = value.lower() == "true"
    node[parts[-1]] = coerced

    try:
        config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc
    save_global_config(config)
    return config


# --- Durable key-value state ---


class StateStore:
    """String key-value state that survives between runs.

    Backed by ``<config_dir>/state.json`` unless an explicit *path* is
    given. Every read goes to disk and every write is atomic, so two
    scanlink processes never see a torn file.

    Args:
        path: Optional override for the backing file.

    Example::

        state = StateStore()
        state.update("xray.url", "https://xray.example.com")
        assert state.get("xray.url") == "https://xray.example.com"
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_config_dir() / _STATE_FILENAME

    @property
    def path(self) -> Path:
        """The filesystem path to the state file."""
        return self._path

    def get(self, key: str, default: str = "") -> str:
        """Return the value stored under *key*, or *default* when absent.

        Raises:
            ConfigError: If the state file exists but cannot be read or parsed.
        """
        value = self._load().get(key)
        if value is None:
            return default
        return str(value)

    def update(self, key: str, value: Optional[str]) -> None:
        """Store *value* under *key*; ``None`` removes the key.

        Raises:
            OSError: If the state file cannot be written.
        """
        data = self._load()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        _atomic_write(self._path, json.dumps(data, indent=2, sort_keys=True) + "\n")
        logger.debug("Updated state key %s", key)

    def _load(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            raise ConfigError(f"Invalid state file at {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid state file at {self._path}: expected a JSON object")
        return data


# --- Precedence resolution ---


def resolve_http_config(global_config: Optional[GlobalConfig] = None) -> HttpConfig:
    """Resolve the ambient HTTP settings with full precedence chain.

    Precedence (high to low):
        1. Environment variables (``SCANLINK_HTTP_PROXY_SUPPORT``,
           ``SCANLINK_HTTP_PROXY``, ``SCANLINK_HTTP_PROXY_AUTHORIZATION``)
        2. User config (``~/.config/scanlink/config.json``, ``http`` section)
        3. Defaults

    Args:
        global_config: Pre-loaded global config. Loaded from disk when ``None``.

    Returns:
        A new :class:`~scanlink.models.HttpConfig`; the input is not mutated.

    Raises:
        ConfigError: If ``SCANLINK_HTTP_PROXY_SUPPORT`` holds an unknown value.
    """
    if global_config is None:
        global_config = load_global_config()
    http = global_config.http.model_copy()

    env_support = os.environ.get(ENV_PROXY_SUPPORT)
    if env_support:
        try:
            http.proxy_support = ProxySupport(env_support.strip().lower())
        except ValueError as exc:
            raise ConfigError(
                f"Invalid {ENV_PROXY_SUPPORT}={env_support!r}: expected default, override, or off"
            ) from exc

    env_proxy = os.environ.get(ENV_PROXY)
    if env_proxy:
        http.proxy = env_proxy

    env_auth = os.environ.get(ENV_PROXY_AUTHORIZATION)
    if env_auth:
        http.proxy_authorization = env_auth

    return http
