"""Where khipu-docs keeps its settings, and how the effective settings are chosen.

Files:

* ``config.json`` in the user config directory holds a
  :class:`~khipu_docs.models.GlobalConfig`. Linux and the BSDs follow the
  XDG base directory layout; other systems use ``~/.khipu-docs/``.
* ``khipu-docs.json`` in the working directory may pin the document a
  project works against.

:func:`resolve_config` layers CLI flags, environment variables, the project
file and the user file. The API key itself is never stored; ``api_key_source``
names where to read it from (``env:NAME`` or ``file:PATH``).

Writes go through :func:`_atomic_write`, so an interrupted save leaves the
previous file in place.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

from khipu_docs.exceptions import ConfigError
from khipu_docs.models import GlobalConfig

_APP_NAME = "khipu-docs"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "khipu-docs.json"

ENV_SPEC = "KHIPU_DOCS_SPEC"
ENV_BASE_URL = "KHIPU_BASE_URL"

# XDG variable -> default location relative to $HOME
_XDG_DEFAULTS = {
    "XDG_CONFIG_HOME": (".config",),
    "XDG_DATA_HOME": (".local", "share"),
}


def _is_xdg_platform() -> bool:
    """Linux and the BSDs use XDG directories."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, *fallback: str) -> Path:
    """Application directory under an XDG root, or under ``~/.khipu-docs``.

    *fallback* is the subdirectory used on non-XDG systems. The directory
    is created on first access.
    """
    if _is_xdg_platform():
        root = os.environ.get(xdg_var) or str(Path.home().joinpath(*_XDG_DEFAULTS[xdg_var]))
        path = Path(root) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/khipu-docs`` or ``~/.khipu-docs``."""
    return _app_dir("XDG_CONFIG_HOME")


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/khipu-docs`` or ``~/.khipu-docs/data``. Crash logs live here."""
    return _app_dir("XDG_DATA_HOME", "data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


# --- user config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read the user config, or return defaults when there is none.

    Raises:
        ConfigError: The file is not JSON or does not validate.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2)
    _atomic_write(global_config_path(), text + "\n")


# --- project config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./khipu-docs.json`` if present.

    Raises:
        ConfigError: The file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- effective config ---


def resolve_config(
    cli_spec: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Build the effective configuration.

    The document source is taken from the first of: ``--spec``,
    ``$KHIPU_DOCS_SPEC``, ``./khipu-docs.json``, the user config. When none
    is set, ``spec`` stays ``None`` and the bundled document is used.
    ``$KHIPU_BASE_URL`` replaces ``api.base_url``; ``--format`` replaces
    ``output.format``.
    """
    config = load_global_config()
    project = load_project_config() or {}

    spec_candidates = (
        cli_spec,
        os.environ.get(ENV_SPEC) or None,
        str(project["spec"]) if project.get("spec") else None,
        config.spec,
    )
    config.spec = next((value for value in spec_candidates if value is not None), None)

    base_url = os.environ.get(ENV_BASE_URL)
    if base_url:
        config.api.base_url = base_url
    if cli_format is not None:
        config.output.format = cli_format
    return config


# --- credentials ---


def _from_env(source: str, name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigError(f"Environment variable '{name}' is not set (source: {source})")
    return value


def _from_file(source: str, location: str) -> str:
    path = Path(location).expanduser()
    if not path.is_file():
        raise ConfigError(f"Credential file not found: {path} (source: {source})")
    try:
        value = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc
    if not value:
        raise ConfigError(f"Credential file is empty: {path} (source: {source})")
    return value


_CREDENTIAL_READERS: dict[str, Callable[[str, str], str]] = {
    "env": _from_env,
    "file": _from_file,
}


def _credential_reader(source: str) -> tuple[Callable[[str, str], str], str]:
    scheme, sep, rest = source.partition(":")
    reader = _CREDENTIAL_READERS.get(scheme) if sep else None
    if reader is None:
        raise ConfigError(f"Unknown credential source format: {source}")
    return reader, rest


def resolve_credential(source: str) -> str:
    """Read a secret from ``env:NAME`` or ``file:PATH``.

    Raises:
        ConfigError: Unknown scheme, or the variable/file is missing or empty.
    """
    reader, target = _credential_reader(source)
    return reader(source, target)


def find_api_key(config: GlobalConfig) -> Optional[str]:
    """The API key, or ``None`` when its source is currently empty.

    Decides at startup whether the ``api`` group exists. An unknown source
    scheme is still an error.
    """
    source = config.api.api_key_source
    reader, target = _credential_reader(source)
    try:
        return reader(source, target)
    except ConfigError:
        return None
