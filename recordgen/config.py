"""Configuration loading for recordgen (.recordgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

CONFIG_FILENAME = ".recordgen.yml"

DEFAULT_FILE_COMMENT = "Auto generated by recordgen"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class GenerationConfig:
    """Read-only generation settings, loaded fresh for every processed element."""

    file_indent: str = "    "
    file_comment: str = DEFAULT_FILE_COMMENT
    suffix: str = "Builder"
    interface_suffix: str = "Record"
    builder_method_name: str = "builder"
    copy_method_name: str = "from_record"
    build_method_name: str = "build"
    prefix_enclosing_class_names: bool = True
    templates_dir: Optional[Path] = None


_IDENTIFIER_OPTIONS = (
    "suffix",
    "interface_suffix",
    "builder_method_name",
    "copy_method_name",
    "build_method_name",
)


def load_config(
    config_path: Path | None,
    note: Callable[[str], None] | None = None,
) -> GenerationConfig:
    """Load configuration from disk, returning defaults when no file exists.

    ``note`` receives one message per option that differs from its default.
    """
    if config_path is None:
        return GenerationConfig()
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return GenerationConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = GenerationConfig()
    values: Dict[str, Any] = {}

    indent = data.get("file_indent")
    if isinstance(indent, int) and not isinstance(indent, bool):
        values["file_indent"] = " " * indent
    elif indent is not None:
        values["file_indent"] = _require_str("file_indent", indent)
        if values["file_indent"].strip():
            raise ConfigError("file_indent must contain only whitespace")

    if "file_comment" in data:
        comment = data.get("file_comment")
        values["file_comment"] = "" if comment is None else _require_str("file_comment", comment)

    for option in _IDENTIFIER_OPTIONS:
        raw = data.get(option)
        if raw is None:
            continue
        value = _require_str(option, raw)
        if not value.isidentifier():
            raise ConfigError(f"{option} must be a valid Python identifier: {value!r}")
        values[option] = value

    prefix = _as_bool(data.get("prefix_enclosing_class_names"))
    if prefix is not None:
        values["prefix_enclosing_class_names"] = prefix

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        values["templates_dir"] = config_file.parent.resolve() / templates_dir

    config = GenerationConfig(**values)
    if note is not None:
        for item in fields(GenerationConfig):
            current = getattr(config, item.name)
            if current != getattr(defaults, item.name):
                note(f"recordgen option {item.name}={current!r}")
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _require_str(option: str, value: Any) -> str:
    result = _as_str(value)
    if result is None:
        raise ConfigError(f"{option} must be a string")
    return result


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = ["CONFIG_FILENAME", "ConfigError", "GenerationConfig", "load_config"]
