"""Load SiteConfig from specsite.yaml / specsite.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import dataclasses
import shlex
import tomllib
from pathlib import Path

import yaml

from specsite._errors import ConfigError
from specsite.config import SiteConfig

CONFIG_FILENAMES = ("specsite.yaml", "specsite.yml", "specsite.toml")

_FIELDS = frozenset(f.name for f in dataclasses.fields(SiteConfig)) - {"root"}


def load_config(root: Path, **overrides: object) -> SiteConfig:
    """Load SiteConfig from root, optionally merging a specsite config file.

    Looks for specsite.yaml, specsite.yml, or specsite.toml in root. If found,
    loads and merges with overrides. Overrides take precedence; ``None``
    overrides are treated as "not given".

    Raises:
        ConfigError: If the file cannot be parsed or names unknown keys.

    """
    file_config = _read_config_file(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - _FIELDS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return SiteConfig(root=Path(root), **_normalize(merged))


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in CONFIG_FILENAMES:
        path = root / name
        if not path.is_file():
            continue
        if path.suffix == ".toml":
            return _parse_toml(path)
        return _parse_yaml(path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data)


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract specsite.* keys into top-level config."""
    result: dict[str, object] = {k: v for k, v in data.items() if k != "specsite"}
    section = data.get("specsite")
    if isinstance(section, dict):
        result.update(section)
    return result


def _normalize(values: dict[str, object]) -> dict[str, object]:
    """Coerce file/CLI values into the types SiteConfig expects."""
    result = dict(values)
    if "output" in result and not isinstance(result["output"], Path):
        result["output"] = Path(str(result["output"]))
    command = result.get("renderer_command")
    if isinstance(command, str):
        result["renderer_command"] = tuple(shlex.split(command))
    elif isinstance(command, list):
        result["renderer_command"] = tuple(str(part) for part in command)
    patterns = result.get("watch_patterns")
    if isinstance(patterns, str):
        result["watch_patterns"] = (patterns,)
    elif isinstance(patterns, list):
        result["watch_patterns"] = tuple(str(p) for p in patterns)
    if "port" in result:
        try:
            result["port"] = int(result["port"])  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            msg = f"port must be an integer, got {result['port']!r}"
            raise ConfigError(msg) from exc
    return result
