"""Settings loading and validation."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from typed_pipeline.common.constants import (
    DEFAULT_FORBIDDEN_FIELDS,
    DEFAULT_INVALID_VALUE,
    DEFAULT_MIN_LENGTH,
    DEFAULT_PARSE_MARKERS,
    DEFAULT_TASK_NAME,
)
from typed_pipeline.common.errors import SettingsError
from typed_pipeline.common.fs import read_yaml

SECTION_KEYS = {
    "load": {"parse_markers", "encoding", "base_dir"},
    "validate": {"forbidden_fields", "invalid_value"},
    "process": {"min_length", "task_name"},
    "http": {"connect_timeout", "read_timeout", "max_attempts"},
}


@dataclass(frozen=True)
class PipelineSettings:
    parse_markers: tuple[str, ...] = DEFAULT_PARSE_MARKERS
    encoding: str = "utf-8"
    base_dir: Path | None = None
    forbidden_fields: tuple[str, ...] = DEFAULT_FORBIDDEN_FIELDS
    invalid_value: str = DEFAULT_INVALID_VALUE
    min_length: int = DEFAULT_MIN_LENGTH
    task_name: str = DEFAULT_TASK_NAME
    connect_timeout: float = 20.0
    read_timeout: float = 120.0
    max_attempts: int = 5


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str) -> None:
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise SettingsError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: Any, ctx: str) -> dict:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise SettingsError(f"{ctx} must be a mapping")
    return obj


def _string_list(value: Any, ctx: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
        raise SettingsError(f"{ctx} must be a list of non-empty strings")
    return tuple(value)


def _positive_number(value: Any, ctx: str, kind: type = float):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise SettingsError(f"{ctx} must be a positive number")
    if kind is int and not isinstance(value, int):
        raise SettingsError(f"{ctx} must be an integer")
    return kind(value)


def _codec_name(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value:
        raise SettingsError(f"{ctx} must be a non-empty string")
    try:
        codecs.lookup(value)
    except LookupError as exc:
        raise SettingsError(f"{ctx}: unknown encoding {value}") from exc
    return value


def validate_settings(raw: Any, *, relative_to: Path | None = None) -> PipelineSettings:
    cfg = _assert_mapping(raw, "settings")
    _assert_no_unknown_keys(cfg, set(SECTION_KEYS), "settings")
    sections = {}
    for name, known in SECTION_KEYS.items():
        section = _assert_mapping(cfg.get(name), name)
        _assert_no_unknown_keys(section, known, name)
        sections[name] = section

    defaults = PipelineSettings()
    load, validate, process, http = (sections[name] for name in ("load", "validate", "process", "http"))

    base_dir = defaults.base_dir
    if load.get("base_dir") is not None:
        if not isinstance(load["base_dir"], str) or not load["base_dir"]:
            raise SettingsError("load.base_dir must be a non-empty string")
        base_dir = Path(load["base_dir"])
        if relative_to is not None and not base_dir.is_absolute():
            base_dir = relative_to / base_dir

    return PipelineSettings(
        parse_markers=_string_list(load["parse_markers"], "load.parse_markers")
        if "parse_markers" in load
        else defaults.parse_markers,
        encoding=_codec_name(load.get("encoding", defaults.encoding), "load.encoding"),
        base_dir=base_dir,
        forbidden_fields=_string_list(validate["forbidden_fields"], "validate.forbidden_fields")
        if "forbidden_fields" in validate
        else defaults.forbidden_fields,
        invalid_value=str(validate.get("invalid_value", defaults.invalid_value)),
        min_length=_positive_number(process["min_length"], "process.min_length", int)
        if "min_length" in process
        else defaults.min_length,
        task_name=str(process.get("task_name", defaults.task_name)),
        connect_timeout=_positive_number(http.get("connect_timeout", defaults.connect_timeout), "http.connect_timeout"),
        read_timeout=_positive_number(http.get("read_timeout", defaults.read_timeout), "http.read_timeout"),
        max_attempts=_positive_number(http.get("max_attempts", defaults.max_attempts), "http.max_attempts", int),
    )


def load_settings(path: Path | None = None, *, overlay_path: Path | None = None) -> PipelineSettings:
    if path is None:
        return PipelineSettings()
    raw = _assert_mapping(read_yaml(path), str(path))
    if overlay_path is not None and overlay_path.exists():
        overlay = _assert_mapping(read_yaml(overlay_path), str(overlay_path))
        raw = _deep_merge(raw, overlay)
    return validate_settings(raw, relative_to=path.parent)
