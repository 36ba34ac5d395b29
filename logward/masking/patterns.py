"""Detection pattern compilation.

Turns one sensitive-field declaration into the ordered list of patterns that
recognize its key/value pair in every supported textual shape, and builds the
per-category table used for key-less auto-detection.
"""

from __future__ import annotations

import re
from typing import Iterable

from logward.masking.models import CompiledPattern, DataCategory, PatternShape


class ConfigurationError(Exception):
    """Raised when part of an engine configuration cannot be compiled.

    Attributes:
        errors: The individual per-field failures.  Fields listed here were
            left out of the active pattern set; everything else stays usable.
    """

    def __init__(self, message: str, errors: list[FieldPatternError] | None = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)


class FieldPatternError(ConfigurationError):
    """A sensitive field's custom pattern is not a valid regex.

    Attributes:
        field: Name of the offending field.
        pattern: The pattern text that failed to compile.
    """

    def __init__(self, field: str, pattern: str, reason: str) -> None:
        self.field = field
        self.pattern = pattern
        super().__init__(
            f"Custom pattern for field '{field}' does not compile: {reason} "
            f"(pattern: {pattern!r}). The field was excluded from masking."
        )
        self.errors = [self]


# -----------------------------------------------------------------------
# Shape templates
# -----------------------------------------------------------------------

# ``{key}`` is substituted with the regex-escaped field name.  The value is
# always the last capture group.  Unquoted shapes never start their value
# with a quote, so they cannot re-match the output of a quoted shape, and the
# unquoted assignment leaves ``?key=`` / ``&key=`` to the query shape.
_SHAPE_TEMPLATES: tuple[tuple[PatternShape, str], ...] = (
    # JSON: "key": "value"
    (PatternShape.JSON_QUOTED, r'"{key}"\s*:\s*"([^"]+)"'),
    # JSON: "key": 123 / true / null
    (PatternShape.JSON_UNQUOTED, r'"{key}"\s*:\s*([^"\s,}}\]][^\s,}}\]]*)'),
    # toString: key="value"
    (PatternShape.ASSIGN_DOUBLE_QUOTED, r'{key}\s*=\s*"([^"]+)"'),
    # toString: key='value'
    (PatternShape.ASSIGN_SINGLE_QUOTED, r"{key}\s*=\s*'([^']+)'"),
    # toString: key=value
    (PatternShape.ASSIGN_UNQUOTED, r"""(?<![?&]){key}\s*=\s*([^"'\s,\]}}&][^\s,\]}}&]*)"""),
    # free text: key: "value"
    (PatternShape.COLON_QUOTED, r'{key}\s*:\s*"([^"]+)"'),
    # free text: key: value
    (PatternShape.COLON_UNQUOTED, r'{key}\s*:\s*([^"\s,&\]}}][^\s,&\]}}]*)'),
    # URL: ?key=value or &key=value
    (PatternShape.QUERY_PARAMETER, r"([?&]{key}=)([^&\s#]+)"),
    # URL: /key/value
    (PatternShape.PATH_PARAMETER, r"(/{key}/)([^/?#\s]+)"),
)

SHAPE_ORDER: tuple[PatternShape, ...] = tuple(shape for shape, _ in _SHAPE_TEMPLATES)


def compile_field(
    name: str,
    case_sensitive: bool = False,
    custom_pattern: str | None = None,
) -> list[CompiledPattern]:
    """Compile the detection patterns for one sensitive field.

    Args:
        name: The literal field name.  It is escaped, never interpreted as
            a sub-pattern.
        case_sensitive: Whether the key must match with exact case.
            Case-insensitivity is applied as ``re.IGNORECASE``.
        custom_pattern: Optional extra pattern appended after the built-in
            shapes.  Its last capture group (or the whole match when it has
            no groups) is the value to mask.

    Returns:
        Patterns in fixed shape order, the custom pattern last.

    Raises:
        FieldPatternError: If *custom_pattern* is not a valid regex.
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    key = re.escape(name)

    patterns = [
        CompiledPattern(
            shape=shape,
            regex=re.compile(template.format(key=key), flags),
            field=name,
        )
        for shape, template in _SHAPE_TEMPLATES
    ]

    if custom_pattern:
        try:
            regex = re.compile(custom_pattern, flags)
        except re.error as e:
            raise FieldPatternError(name, custom_pattern, str(e)) from e
        patterns.append(CompiledPattern(shape=PatternShape.CUSTOM, regex=regex, field=name))

    return patterns


def compile_categories(
    categories: Iterable[DataCategory],
) -> dict[DataCategory, CompiledPattern]:
    """Compile each category's default pattern for key-less detection.

    Args:
        categories: Categories to auto-detect.  Iteration order is kept and
            duplicates are ignored.

    Returns:
        Ordered mapping of category to its compiled pattern (value group 0).
    """
    table: dict[DataCategory, CompiledPattern] = {}
    for category in categories:
        if category in table:
            continue
        table[category] = CompiledPattern(
            shape=PatternShape.CATEGORY,
            regex=re.compile(category.default_pattern),
        )
    return table
