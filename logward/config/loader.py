"""Reads ``logward.yaml`` into an ``EngineConfig``.

Every failure names the file and says what to change: a missing file, YAML
that does not parse, an empty document, a top level that is not a mapping,
or settings the schema rejects.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from logward.config.schema import EngineConfig


class ConfigValidationError(Exception):
    """A masking configuration could not be turned into an ``EngineConfig``.

    Attributes:
        path: The offending file (or ``<mapping>`` for in-memory input).
        details: One entry per problem; pydantic error dicts for schema
            failures, ``{"type": ...}`` markers for YAML-level failures.
    """

    def __init__(self, path: Path, details: list[dict[str, Any]], message: str) -> None:
        self.path = path
        self.details = details
        super().__init__(message)


def load_config(path: Path) -> EngineConfig:
    """Parse and validate the masking settings stored at *path*.

    Raises:
        FileNotFoundError: *path* does not exist.
        ConfigValidationError: The YAML is unreadable, empty, not a mapping,
            or declares invalid settings.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Masking config not found at {path}. Pass an existing file with --config, "
            f"or omit it to use the built-in sensitive fields."
        )
    return parse_config(_read_mapping(path), path=path)


def _read_mapping(path: Path) -> dict[str, Any]:
    def fail(detail: dict[str, Any], reason: str) -> ConfigValidationError:
        return ConfigValidationError(path=path, details=[detail], message=f"{path}: {reason}")

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise fail({"type": "yaml_parse_error", "msg": str(e)}, f"invalid YAML ({e})") from e

    if document is None:
        raise fail(
            {"type": "empty_file"},
            "no settings found; declare at least 'fields' with one sensitive field.",
        )
    if not isinstance(document, dict):
        kind = type(document).__name__
        raise fail(
            {"type": "not_a_mapping", "got": kind},
            f"expected a mapping of settings (enabled, mask_char, fields, ...), got a {kind}.",
        )
    return document


def parse_config(raw_data: dict[str, Any], path: Path | None = None) -> EngineConfig:
    """Validate an already-parsed mapping into an ``EngineConfig``.

    Raises:
        ConfigValidationError: If the mapping fails schema validation.
    """
    source = str(path) if path is not None else "<mapping>"
    try:
        return EngineConfig.model_validate(raw_data)
    except ValidationError as e:
        details = e.errors()
        raise ConfigValidationError(
            path=path or Path(source),
            details=details,
            message=f"Config validation failed for {source}:\n{_summarize(details)}",
        ) from e


def _summarize(details: list[Any]) -> str:
    """One ``  - a → b: message`` line per pydantic error."""
    return "\n".join(
        f"  - {' → '.join(str(part) for part in detail['loc'])}: {detail['msg']}"
        for detail in details
    )
