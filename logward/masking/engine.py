"""Sanitization engine: the two-pass scan over log text.

This is the single hot-path entry point.  Logging adapters call
:meth:`SanitizationEngine.sanitize` once per emitted record; the composition
root calls :meth:`SanitizationEngine.configure` at startup (and again on
reconfiguration).

Each ``configure`` compiles a complete, immutable snapshot and publishes it
with a single reference assignment.  ``sanitize`` reads that reference once
per call and never takes a lock, so concurrent callers see either the old
configuration or the new one, never a mix.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Callable

from logward.config.schema import EngineConfig, SensitiveFieldConfig
from logward.masking.models import CompiledPattern, DataCategory, Obfuscator
from logward.masking.obfuscators import DefaultObfuscator, is_already_masked
from logward.masking.patterns import (
    ConfigurationError,
    FieldPatternError,
    compile_categories,
    compile_field,
)
from logward.masking.registry import FormatterRegistry, ObfuscatorRegistry
from logward.masking.resolution import resolve_by_category, resolve_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CompiledField:
    config: SensitiveFieldConfig
    patterns: tuple[CompiledPattern, ...]


@dataclass(frozen=True)
class _Snapshot:
    """Everything one ``sanitize`` call reads, published as one unit."""

    config: EngineConfig
    fields: tuple[_CompiledField, ...]
    categories: tuple[tuple[DataCategory, CompiledPattern], ...]
    default_obfuscator: Obfuscator


class SanitizationEngine:
    """Detects and masks sensitive values in free-form text.

    Args:
        formatters: Formatter registry consulted on every match.  A fresh,
            empty registry is created when omitted.
        obfuscators: Obfuscator registry consulted on every match.  Its
            ``default`` obfuscator, when set, takes precedence over the one
            derived from the configuration's mask settings.
    """

    def __init__(
        self,
        formatters: FormatterRegistry | None = None,
        obfuscators: ObfuscatorRegistry | None = None,
    ) -> None:
        self.formatters = formatters if formatters is not None else FormatterRegistry()
        self.obfuscators = obfuscators if obfuscators is not None else ObfuscatorRegistry()
        self._write_lock = threading.Lock()
        self._snapshot: _Snapshot | None = None

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def configure(self, config: EngineConfig) -> None:
        """Compile *config* and make it the active configuration.

        Fields whose custom pattern fails to compile are left out; every
        other field is activated.  Safe to call repeatedly.

        Args:
            config: The engine configuration.

        Raises:
            ConfigurationError: After activating the usable part of the
                configuration, if one or more fields were left out.  The
                ``errors`` attribute lists each failure.
        """
        errors: list[FieldPatternError] = []
        compiled: list[_CompiledField] = []
        for field in config.fields:
            try:
                patterns = compile_field(field.name, field.case_sensitive, field.custom_pattern)
            except FieldPatternError as e:
                logger.warning("%s", e)
                errors.append(e)
                continue
            compiled.append(_CompiledField(config=field, patterns=tuple(patterns)))

        categories: tuple[tuple[DataCategory, CompiledPattern], ...] = ()
        if config.auto_detect:
            categories = tuple(compile_categories(config.auto_detect_categories).items())

        default = self.obfuscators.default or DefaultObfuscator(
            config.mask_char, config.default_mask
        )

        snapshot = _Snapshot(
            config=config,
            fields=tuple(compiled),
            categories=categories,
            default_obfuscator=default,
        )
        with self._write_lock:
            self._snapshot = snapshot

        logger.info(
            "Sanitization engine configured: enabled=%s, %d sensitive field(s), %d auto-detect categor%s",
            config.enabled,
            len(compiled),
            len(categories),
            "y" if len(categories) == 1 else "ies",
        )

        if errors:
            names = ", ".join(f"'{e.field}'" for e in errors)
            raise ConfigurationError(
                f"{len(errors)} sensitive field(s) excluded from masking: {names}",
                errors=errors,
            )

    def reset(self) -> None:
        """Return to the unconfigured state and clear both registries.

        The snapshot and the registries are cleared in two steps.  A
        ``sanitize`` call that already holds the old snapshot keeps scanning
        with its fields but may find the registries empty; every value it
        matches then falls through to the snapshot's default obfuscator, so
        it is still masked, only less selectively.
        """
        with self._write_lock:
            self._snapshot = None
        self.formatters.clear()
        self.obfuscators.clear()

    @property
    def is_configured(self) -> bool:
        return self._snapshot is not None

    @property
    def config(self) -> EngineConfig | None:
        """The active configuration, or ``None`` when unconfigured."""
        snapshot = self._snapshot
        return snapshot.config if snapshot is not None else None

    def field_patterns(self, name: str) -> list[CompiledPattern]:
        """Compiled patterns of an active field (empty if not active)."""
        snapshot = self._snapshot
        if snapshot is None:
            return []
        for compiled in snapshot.fields:
            field = compiled.config
            if field.name == name or (not field.case_sensitive and field.key == name.lower()):
                return list(compiled.patterns)
        return []

    def category_patterns(self) -> dict[DataCategory, CompiledPattern]:
        """Compiled auto-detect patterns of the active configuration."""
        snapshot = self._snapshot
        return dict(snapshot.categories) if snapshot is not None else {}

    # -------------------------------------------------------------------
    # Hot path
    # -------------------------------------------------------------------

    def sanitize(self, text: str | None) -> str | None:
        """Mask every sensitive value in *text*.

        Returns *text* unchanged when the engine is unconfigured or
        disabled, or when *text* is ``None`` or empty.  Never raises.
        """
        snapshot = self._snapshot
        if snapshot is None or not snapshot.config.enabled or not text:
            return text

        result = self._field_pass(text, snapshot)
        if snapshot.config.auto_detect:
            result = self._type_pass(result, snapshot)
        return result

    def _field_pass(self, text: str, snapshot: _Snapshot) -> str:
        mask_char = snapshot.config.mask_char
        for compiled in snapshot.fields:
            field = compiled.config

            def mask(value: str, field: SensitiveFieldConfig = field) -> str:
                return resolve_field(
                    value,
                    field,
                    formatters=self.formatters,
                    default=snapshot.default_obfuscator,
                    mask_char=mask_char,
                )

            for pattern in compiled.patterns:
                text = _substitute(text, pattern, mask, snapshot.default_obfuscator)
        return text

    def _type_pass(self, text: str, snapshot: _Snapshot) -> str:
        mask_char = snapshot.config.mask_char
        ratio = snapshot.config.already_masked_ratio
        for category, pattern in snapshot.categories:

            def mask(value: str, category: DataCategory = category) -> str | None:
                if is_already_masked(value, mask_char, ratio):
                    return None
                return resolve_by_category(
                    value,
                    category,
                    formatters=self.formatters,
                    obfuscators=self.obfuscators,
                    default=snapshot.default_obfuscator,
                )

            text = _substitute(text, pattern, mask, snapshot.default_obfuscator)
        return text


def _substitute(
    text: str,
    pattern: CompiledPattern,
    mask: Callable[[str], str | None],
    fallback: Obfuscator,
) -> str:
    """Replace the value group of every non-overlapping match of *pattern*.

    Characters of the match outside the value group (keys, quotes, ``=``,
    ``?``) are kept.  *mask* returning ``None`` leaves the match as is.  A
    mask that raises, or returns an empty string, degrades to *fallback*.
    """
    group = pattern.value_group

    def replace(match: re.Match[str]) -> str:
        value = match.group(group)
        if not value:
            return match.group(0)
        # No logging here: this runs inside logging handlers.
        try:
            masked = mask(value)
        except Exception:
            masked = fallback.obfuscate(value)
        if masked is None:
            return match.group(0)
        if not masked:
            masked = fallback.obfuscate(value)

        start, end = match.span(group)
        offset = match.start()
        whole = match.group(0)
        return whole[: start - offset] + masked + whole[end - offset:]

    return pattern.regex.sub(replace, text)
