"""Data models for the masking engine.

Pure data structures and plugin base classes. No I/O, no external
dependencies.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class DataCategory(str, Enum):
    """Categories of sensitive data the engine can recognize by shape."""

    # Brazilian documents
    CPF = "cpf"
    CNPJ = "cnpj"
    RG = "rg"

    # Contact / personal
    EMAIL = "email"
    PHONE = "phone"
    NAME = "name"
    ADDRESS = "address"
    IP_ADDRESS = "ip_address"

    # Financial
    CREDIT_CARD = "credit_card"
    MONETARY = "monetary"
    BANK_ACCOUNT = "bank_account"
    BANK_AGENCY = "bank_agency"

    # Credentials
    PASSWORD = "password"

    # Anything not categorized. Never used for category lookups.
    GENERIC = "generic"

    @property
    def default_pattern(self) -> str:
        """Regex matching the bare value shape, with no surrounding key."""
        return _DEFAULT_PATTERNS[self]

    @classmethod
    def from_key(cls, key: str | None) -> DataCategory:
        """Look up a category by key, tolerating camelCase and separators.

        ``"creditCard"``, ``"credit_card"`` and ``"CREDIT-CARD"`` all resolve
        to ``CREDIT_CARD``.  Blank or unknown keys resolve to ``GENERIC``.
        """
        if key is None or not key.strip():
            return cls.GENERIC
        normalized = _normalize_key(key)
        for category in cls:
            if _normalize_key(category.value) == normalized:
                return category
        return cls.GENERIC


def _normalize_key(key: str) -> str:
    return re.sub(r"[\s_\-]", "", key).lower()


# Digit shapes are guarded against matching a slice of a longer digit run.
# Quantifiers over overlapping classes are bounded to keep backtracking linear.
_DEFAULT_PATTERNS: dict[DataCategory, str] = {
    DataCategory.CPF: r"(?<!\d)(?:\d{11}|\d{3}\.\d{3}\.\d{3}-\d{2})(?!\d)",
    DataCategory.CNPJ: r"(?<!\d)(?:\d{14}|\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2})(?!\d)",
    DataCategory.RG: r"(?<!\d)\d{7,9}(?!\d)",
    DataCategory.EMAIL: r"[\w.+\-]{1,64}@(?:[\w\-]{1,63}\.){1,8}[A-Za-z]{2,24}\b",
    DataCategory.PHONE: r"(?<!\d)\(?\d{2}\)?\s?\d{4,5}-?\d{4}(?!\d)",
    DataCategory.NAME: r"[A-Za-zÀ-ÿ]{1,64}(?:\s[A-Za-zÀ-ÿ]{1,64}){0,8}",
    DataCategory.ADDRESS: r".+",
    DataCategory.IP_ADDRESS: r"(?<!\d)\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}(?!\d)",
    DataCategory.CREDIT_CARD: r"(?<!\d)\d{4}[\s\-]?\d{4}[\s\-]?\d{4}[\s\-]?\d{4}(?!\d)",
    DataCategory.MONETARY: r"(?<!\d)\d{1,15}(?:[.,]\d{1,15})?(?!\d)",
    DataCategory.BANK_ACCOUNT: r"(?<!\d)\d{5,12}(?!\d)",
    DataCategory.BANK_AGENCY: r"(?<!\d)\d{4,6}(?!\d)",
    DataCategory.PASSWORD: r".+",
    DataCategory.GENERIC: r".+",
}


class PatternShape(str, Enum):
    """Textual shapes a sensitive key/value pair can take in log text."""

    JSON_QUOTED = "json_quoted"
    JSON_UNQUOTED = "json_unquoted"
    ASSIGN_DOUBLE_QUOTED = "assign_double_quoted"
    ASSIGN_SINGLE_QUOTED = "assign_single_quoted"
    ASSIGN_UNQUOTED = "assign_unquoted"
    COLON_QUOTED = "colon_quoted"
    COLON_UNQUOTED = "colon_unquoted"
    QUERY_PARAMETER = "query_parameter"
    PATH_PARAMETER = "path_parameter"
    CUSTOM = "custom"
    CATEGORY = "category"


@dataclass(frozen=True)
class CompiledPattern:
    """One compiled detection pattern.

    The value to mask is always the *last* capture group of ``regex``.
    Patterns with a literal prefix group (query and path shapes) therefore
    place the value in group 2; single-group shapes use group 1; patterns
    without groups (category patterns, group-less custom patterns) use the
    whole match, group 0.

    Attributes:
        shape: Which textual shape this pattern recognizes.
        regex: The compiled regular expression.
        field: The sensitive field name, or ``None`` for category patterns.
    """

    shape: PatternShape
    regex: re.Pattern[str]
    field: str | None = None

    @property
    def value_group(self) -> int:
        """Index of the capture group holding the value to mask."""
        return self.regex.groups


class Formatter(ABC):
    """Format-aware masking transform for one category or name.

    Subclasses implement :meth:`format`.  ``category`` defaults to
    ``GENERIC`` (no category binding) and ``name`` to the class name.
    """

    category: DataCategory = DataCategory.GENERIC

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def format(self, value: str) -> str:
        """Return the masked representation of *value*."""

    def is_valid(self, value: str | None) -> bool:
        return value is not None and bool(value.strip())


class Obfuscator(ABC):
    """Masking transform without format awareness."""

    mask_char: str = "*"

    @abstractmethod
    def obfuscate(self, value: str | None) -> str:
        """Return the masked representation of *value*."""
