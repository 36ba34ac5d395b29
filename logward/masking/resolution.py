"""Resolution pipeline: turns a matched raw value into its masked form.

Two ordered fallback chains, one for named fields and one for auto-detected
categories.  Both always end at the default obfuscator, so a match is never
left unmasked and never masked to an empty string.
"""

from __future__ import annotations

from typing import Protocol

from logward.masking.models import DataCategory, Obfuscator
from logward.masking.obfuscators import MIN_MASK_LENGTH, partial_mask
from logward.masking.registry import FormatterRegistry, ObfuscatorRegistry


class FieldRule(Protocol):
    """What the field pipeline needs to know about a sensitive field."""

    @property
    def category(self) -> DataCategory: ...

    @property
    def formatter(self) -> str | None: ...

    @property
    def visible_start(self) -> int: ...

    @property
    def visible_end(self) -> int: ...


def resolve_field(
    value: str,
    field: FieldRule,
    *,
    formatters: FormatterRegistry,
    default: Obfuscator,
    mask_char: str = "*",
) -> str:
    """Mask a value matched under a configured field name.

    First applicable tier wins:
      1. the formatter registered under the field's override name;
      2. the formatter registered for the field's category (never for
         ``GENERIC``);
      3. a partial mask, when the field keeps characters visible at either
         end;
      4. the default obfuscator.

    Args:
        value: The raw captured value.
        field: The field's masking rule.
        formatters: Formatter lookup tables.
        default: Terminal fallback obfuscator.
        mask_char: Mask character for the partial-mask tier.

    Returns:
        The masked replacement.
    """
    if field.formatter:
        formatter = formatters.get(field.formatter)
        if formatter is not None:
            return formatter.format(value)

    if field.category is not DataCategory.GENERIC:
        formatter = formatters.get_by_category(field.category)
        if formatter is not None:
            return formatter.format(value)

    if field.visible_start > 0 or field.visible_end > 0:
        return partial_mask(
            value,
            field.visible_start,
            field.visible_end,
            mask_char,
            MIN_MASK_LENGTH,
        )

    return default.obfuscate(value)


def resolve_by_category(
    value: str,
    category: DataCategory,
    *,
    formatters: FormatterRegistry,
    obfuscators: ObfuscatorRegistry,
    default: Obfuscator,
) -> str:
    """Mask a value found by a category's default pattern.

    Tiers: category formatter, then category obfuscator, then *default*.
    """
    formatter = formatters.get_by_category(category)
    if formatter is not None:
        return formatter.format(value)

    obfuscator = obfuscators.get_by_category(category)
    if obfuscator is not None:
        return obfuscator.obfuscate(value)

    return default.obfuscate(value)
