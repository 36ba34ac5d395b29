"""Composition root: builds a configured engine from explicit parts.

Formatter and obfuscator registrations are collected as an ordered list of
extensions, sorted once by priority (lower first, ties keep insertion
order) and applied to fresh registries before the engine is configured.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from logward.config.schema import EngineConfig, SensitiveFieldConfig
from logward.masking.engine import SanitizationEngine
from logward.masking.formatters import default_formatters
from logward.masking.models import DataCategory, Formatter, Obfuscator
from logward.masking.patterns import ConfigurationError
from logward.masking.registry import FormatterRegistry, ObfuscatorRegistry

DEFAULT_PRIORITY = 100


@dataclass(frozen=True)
class Extension:
    """A deferred registration step.

    Attributes:
        apply: Called with ``(formatters, obfuscators)`` at build time.
        priority: Lower values are applied first.
    """

    apply: Callable[[FormatterRegistry, ObfuscatorRegistry], None]
    priority: int = DEFAULT_PRIORITY


class EngineBuilder:
    """Fluent builder for a :class:`SanitizationEngine`.

    Example::

        engine = (
            EngineBuilder()
            .with_default_formatters()
            .add_field("documento", DataCategory.CPF)
            .add_field("telefone", visible_start=2, visible_end=3)
            .build()
        )
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config if config is not None else EngineConfig()
        self._fields: list[SensitiveFieldConfig] = []
        self._extensions: list[Extension] = []
        self._default_obfuscator: Obfuscator | None = None

    # -------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------

    def _update(self, **changes: object) -> EngineBuilder:
        self._config = EngineConfig.model_validate({**self._config.model_dump(), **changes})
        return self

    def enabled(self, enabled: bool) -> EngineBuilder:
        return self._update(enabled=enabled)

    def mask_char(self, mask_char: str) -> EngineBuilder:
        return self._update(mask_char=mask_char)

    def default_mask(self, mask: str) -> EngineBuilder:
        return self._update(default_mask=mask)

    def auto_detect(self, enabled: bool, *categories: DataCategory) -> EngineBuilder:
        """Switch auto-detection; *categories*, if given, replace the defaults."""
        if categories:
            return self._update(auto_detect=enabled, auto_detect_categories=list(categories))
        return self._update(auto_detect=enabled)

    def add_field(
        self,
        field: str | SensitiveFieldConfig,
        category: DataCategory = DataCategory.GENERIC,
        *,
        visible_start: int = 0,
        visible_end: int = 0,
        formatter: str | None = None,
        custom_pattern: str | None = None,
        case_sensitive: bool = False,
    ) -> EngineBuilder:
        """Declare a sensitive field (by name, or as a ready-made config)."""
        if isinstance(field, SensitiveFieldConfig):
            self._fields.append(field)
        else:
            self._fields.append(SensitiveFieldConfig(
                name=field,
                category=category,
                visible_start=visible_start,
                visible_end=visible_end,
                formatter=formatter,
                custom_pattern=custom_pattern,
                case_sensitive=case_sensitive,
            ))
        return self

    # -------------------------------------------------------------------
    # Registrations
    # -------------------------------------------------------------------

    def add_formatter(
        self,
        key: str | DataCategory,
        formatter: Formatter,
        priority: int = DEFAULT_PRIORITY,
    ) -> EngineBuilder:
        self._extensions.append(Extension(
            apply=lambda formatters, _obfuscators: formatters.register(key, formatter),
            priority=priority,
        ))
        return self

    def add_obfuscator(
        self,
        key: str | DataCategory,
        obfuscator: Obfuscator,
        priority: int = DEFAULT_PRIORITY,
    ) -> EngineBuilder:
        self._extensions.append(Extension(
            apply=lambda _formatters, obfuscators: obfuscators.register(key, obfuscator),
            priority=priority,
        ))
        return self

    def add_extension(self, extension: Extension) -> EngineBuilder:
        self._extensions.append(extension)
        return self

    def default_obfuscator(self, obfuscator: Obfuscator) -> EngineBuilder:
        self._default_obfuscator = obfuscator
        return self

    def with_default_formatters(self, priority: int = 0) -> EngineBuilder:
        """Register the built-in category formatters.

        They default to priority 0, so any formatter added for the same
        category at the default priority replaces them.  The formatters are
        created at build time with the final ``mask_char``, wherever
        ``mask_char()`` appears in the chain.
        """

        def register_defaults(formatters: FormatterRegistry, _obfuscators: ObfuscatorRegistry) -> None:
            for formatter in default_formatters(self._config.mask_char):
                formatters.register(formatter.category, formatter)

        return self.add_extension(Extension(apply=register_defaults, priority=priority))

    # -------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        """The configuration ``build`` will apply."""
        if not self._fields:
            return self._config
        return self._config.with_fields(*self._fields)

    def build(self, strict: bool = True) -> SanitizationEngine:
        """Create registries, apply extensions by priority, configure.

        Args:
            strict: When False, fields excluded for a bad custom pattern are
                only logged (by the engine) and the partially configured
                engine is returned.

        Raises:
            ConfigurationError: If *strict* and a field's custom pattern
                does not compile.
        """
        formatters = FormatterRegistry()
        obfuscators = ObfuscatorRegistry()
        for extension in sorted(self._extensions, key=lambda ext: ext.priority):
            extension.apply(formatters, obfuscators)
        if self._default_obfuscator is not None:
            obfuscators.set_default(self._default_obfuscator)

        engine = SanitizationEngine(formatters=formatters, obfuscators=obfuscators)
        try:
            engine.configure(self.config)
        except ConfigurationError:
            if strict:
                raise
        return engine
