"""Configuration loading and precedence resolution.

A run is configured from four layers, highest precedence first:

1. CLI flags (``--strict-types``, ``--templates-dir``, ``--target`` ...).
2. Environment variables (``SDKGEN_STRICT_TYPES``, ``SDKGEN_STRICT_REFS``,
   ``SDKGEN_TEMPLATES_DIR``).
3. The config file: ``--config PATH`` or, when not given, the first of
   ``sdkgen.json`` / ``sdkgen.yaml`` / ``sdkgen.yml`` in the working directory.
4. Defaults from :class:`~sdkgen.models.GeneratorConfig`.

Example ``sdkgen.json``::

    {
      "strict_types": true,
      "targets": [
        {"language": "rust", "output_dir": "rust/src"},
        {"language": "go", "output_dir": "go", "package": "acme"}
      ]
    }
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from sdkgen.exceptions import ConfigError
from sdkgen.models import GeneratorConfig, TargetConfig

_APP_NAME = "sdkgen"
_PROJECT_CONFIG_FILENAMES = ("sdkgen.json", "sdkgen.yaml", "sdkgen.yml")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON or YAML config file.

    Raises:
        ConfigError: If the file is missing, unreadable, invalid, or not
            a mapping.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigError(f"Config file not found: {file_path}")
    try:
        text = file_path.read_text(encoding="utf-8")
        if file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {file_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config at {file_path} must be an object, got {type(data).__name__}")
    return data


def find_project_config(directory: Optional[Path] = None) -> Optional[Path]:
    """Return the project config file in *directory* (default: cwd), if any."""
    base = directory or Path.cwd()
    for name in _PROJECT_CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/sdkgen/`` (default ``~/.local/share/sdkgen/``).
    Elsewhere: ``~/.sdkgen/``.
    """
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        base = Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean in ${name}: {raw!r}")


def resolve_config(
    config_path: Optional[str] = None,
    cli_strict_types: Optional[bool] = None,
    cli_strict_refs: Optional[bool] = None,
    cli_templates_dir: Optional[str] = None,
    cli_targets: Optional[list[TargetConfig]] = None,
) -> GeneratorConfig:
    """Resolve the effective :class:`~sdkgen.models.GeneratorConfig`.

    ``None`` CLI values mean "not given" and fall through to the lower
    layers. Targets given on the command line replace the file's targets.

    Raises:
        ConfigError: If the config file or an environment variable is invalid.
    """
    # 4 + 3. Defaults, then the config file
    data: dict[str, Any] = {}
    path = Path(config_path) if config_path else find_project_config()
    if path is not None:
        data = load_config_file(path)
    try:
        config = GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    # 2. Environment
    updates: dict[str, Any] = {}
    for field_name, env_name in (
        ("strict_types", "SDKGEN_STRICT_TYPES"),
        ("strict_refs", "SDKGEN_STRICT_REFS"),
    ):
        env_value = _env_bool(env_name)
        if env_value is not None:
            updates[field_name] = env_value
    env_templates = os.environ.get("SDKGEN_TEMPLATES_DIR")
    if env_templates:
        updates["templates_dir"] = env_templates

    # 1. CLI flags
    if cli_strict_types is not None:
        updates["strict_types"] = cli_strict_types
    if cli_strict_refs is not None:
        updates["strict_refs"] = cli_strict_refs
    if cli_templates_dir is not None:
        updates["templates_dir"] = cli_templates_dir
    if cli_targets:
        updates["targets"] = cli_targets

    return config.model_copy(update=updates)
