"""Built-in formatters: format-aware partial masks per data category.

Each formatter is a small, self-contained string transform.  Input it cannot
interpret (wrong digit count, missing ``@``, blank) collapses to a short run
of mask characters rather than leaking the raw value.
"""

from __future__ import annotations

import re

from logward.masking.models import DataCategory, Formatter

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def _digits(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value)


class CpfFormatter(Formatter):
    """CPF: ``12345678909`` -> ``***456789**``."""

    category = DataCategory.CPF

    def __init__(self, mask_char: str = "*", formatted: bool = False) -> None:
        self.mask_char = mask_char
        self.formatted = formatted

    @property
    def name(self) -> str:
        return "cpf"

    def is_valid(self, value: str | None) -> bool:
        return bool(value) and len(_digits(value)) == 11

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 3
        digits = _digits(value)
        if self.formatted:
            return f"{m * 3}.{digits[3:6]}.{digits[6:9]}-{m * 2}"
        return f"{m * 3}{digits[3:9]}{m * 2}"


class CnpjFormatter(Formatter):
    """CNPJ: ``12345678000190`` -> ``**345678****90``."""

    category = DataCategory.CNPJ

    def __init__(self, mask_char: str = "*", formatted: bool = False) -> None:
        self.mask_char = mask_char
        self.formatted = formatted

    @property
    def name(self) -> str:
        return "cnpj"

    def is_valid(self, value: str | None) -> bool:
        return bool(value) and len(_digits(value)) == 14

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 3
        digits = _digits(value)
        if self.formatted:
            return f"{m * 2}.{digits[2:5]}.{digits[5:8]}/{m * 4}-{digits[12:14]}"
        return f"{m * 2}{digits[2:8]}{m * 4}{digits[12:14]}"


class DocumentFormatter(Formatter):
    """CPF or CNPJ, chosen by length after stripping punctuation.

    ``23456789020`` -> ``234.***.***-20``; a 14-character CNPJ (numeric or
    alphanumeric) keeps its first two and last two characters:
    ``12345678000190`` -> ``12.***.***/***/90``.
    """

    @property
    def name(self) -> str:
        return "document"

    def format(self, value: str) -> str:
        if not self.is_valid(value):
            return "***"
        clean = re.sub(r"[.\-/]", "", value)
        if len(clean) == 11:
            return f"{clean[:3]}.***.***-{clean[9:11]}"
        if len(clean) == 14:
            return f"{clean[:2]}.***.***/***/{clean[12:14]}"
        return "***"


class EmailFormatter(Formatter):
    """Email: ``joao.silva@example.com`` -> ``jo***@exa***.com``.

    The top-level domain is kept; user and domain names keep a short prefix.
    """

    category = DataCategory.EMAIL

    def __init__(
        self,
        visible_user: int = 2,
        visible_domain: int = 3,
        mask_char: str = "*",
    ) -> None:
        self.visible_user = max(1, visible_user)
        self.visible_domain = max(1, visible_domain)
        self.mask_char = mask_char

    @property
    def name(self) -> str:
        return "email"

    def is_valid(self, value: str | None) -> bool:
        if not value or not value.strip():
            return False
        at = value.find("@")
        return 0 < at < len(value) - 1 and value.count("@") == 1

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 3

        user, domain = value.split("@", 1)
        parts = [self._mask_part(user, self.visible_user), "@"]

        dot = domain.rfind(".")
        if dot > 0:
            parts.append(self._mask_part(domain[:dot], self.visible_domain))
            parts.append(domain[dot:])
        else:
            parts.append(m * 3)
        return "".join(parts)

    def _mask_part(self, part: str, visible: int) -> str:
        if len(part) <= visible:
            return self.mask_char * len(part)
        return part[:visible] + self.mask_char * 3


class PhoneFormatter(Formatter):
    """Brazilian phone: ``11987654321`` -> ``(11) *****-4321``."""

    category = DataCategory.PHONE

    def __init__(
        self,
        visible_end: int = 4,
        show_area_code: bool = True,
        mask_char: str = "*",
    ) -> None:
        self.visible_end = max(0, visible_end)
        self.show_area_code = show_area_code
        self.mask_char = mask_char

    @property
    def name(self) -> str:
        return "phone"

    def is_valid(self, value: str | None) -> bool:
        return bool(value) and 10 <= len(_digits(value)) <= 11

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 3

        digits = _digits(value)
        area = digits[:2] if self.show_area_code else m * 2
        number = digits[2:]
        mask_length = max(0, len(number) - self.visible_end)

        result = f"({area}) {m * mask_length}"
        if self.visible_end > 0:
            result += "-" + number[mask_length:]
        return result


class CreditCardFormatter(Formatter):
    """Card number: all digits masked except the last ``visible_end``."""

    category = DataCategory.CREDIT_CARD

    def __init__(
        self,
        visible_end: int = 4,
        mask_char: str = "*",
        formatted: bool = False,
    ) -> None:
        self.visible_end = max(0, min(4, visible_end))
        self.mask_char = mask_char
        self.formatted = formatted

    @property
    def name(self) -> str:
        return "credit_card"

    def is_valid(self, value: str | None) -> bool:
        return bool(value) and 13 <= len(_digits(value)) <= 19

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 4

        digits = _digits(value)
        mask_length = len(digits) - self.visible_end
        visible = digits[mask_length:]

        if self.formatted and len(digits) == 16:
            return f"{m * 4}-{m * 4}-{m * 4}-{visible}"
        return m * mask_length + visible


class NameFormatter(Formatter):
    """Person name: ``JOSE DA SILVA`` -> ``J*** D* S****``.

    With ``preserve_initials=False`` each word keeps its first
    ``visible_per_word`` characters instead.
    """

    category = DataCategory.NAME

    def __init__(
        self,
        visible_per_word: int = 1,
        mask_char: str = "*",
        preserve_initials: bool = True,
    ) -> None:
        self.visible_per_word = max(0, visible_per_word)
        self.mask_char = mask_char
        self.preserve_initials = preserve_initials

    @property
    def name(self) -> str:
        return "name"

    def format(self, value: str) -> str:
        if not self.is_valid(value):
            return self.mask_char * 3
        visible = 1 if self.preserve_initials else self.visible_per_word
        words = []
        for word in value.split():
            keep = min(visible, len(word))
            words.append(word[:keep] + self.mask_char * (len(word) - keep))
        return " ".join(words)


class MonetaryFormatter(Formatter):
    """Monetary amount: ``56789.98`` -> ``*****.**``.

    ``show_magnitude`` keeps the leading digit, ``show_decimals`` keeps the
    fractional part.  Decimal commas are normalized to a dot.
    """

    category = DataCategory.MONETARY

    def __init__(
        self,
        show_magnitude: bool = False,
        show_decimals: bool = False,
        mask_char: str = "*",
    ) -> None:
        self.show_magnitude = show_magnitude
        self.show_decimals = show_decimals
        self.mask_char = mask_char

    @property
    def name(self) -> str:
        return "monetary"

    def is_valid(self, value: str | None) -> bool:
        return bool(value) and bool(re.sub(r"[^0-9.,]", "", value))

    def format(self, value: str) -> str:
        m = self.mask_char
        if not self.is_valid(value):
            return m * 3

        normalized = value.replace(",", ".")
        dot = normalized.rfind(".")
        if dot > 0:
            integer_part, decimal_part = normalized[:dot], normalized[dot:]
        else:
            integer_part, decimal_part = normalized, ""

        integer_digits = _digits(integer_part)
        if self.show_magnitude and integer_digits:
            result = integer_digits[0] + m * (len(integer_digits) - 1)
        else:
            result = m * max(1, len(integer_digits))

        if decimal_part:
            if self.show_decimals:
                result += decimal_part
            else:
                result += "." + m * (len(decimal_part) - 1)
        return result


def default_formatters(mask_char: str = "*") -> list[Formatter]:
    """The built-in category formatters, in registration order."""
    return [
        CpfFormatter(mask_char=mask_char),
        CnpjFormatter(mask_char=mask_char),
        EmailFormatter(mask_char=mask_char),
        CreditCardFormatter(mask_char=mask_char),
        PhoneFormatter(mask_char=mask_char),
        NameFormatter(mask_char=mask_char),
        MonetaryFormatter(mask_char=mask_char),
    ]
