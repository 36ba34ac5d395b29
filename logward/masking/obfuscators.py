"""Obfuscators: masking transforms without format awareness.

Also hosts the partial-mask algorithm and the already-masked heuristic used
by the type pass.
"""

from __future__ import annotations

from logward.masking.models import Obfuscator

# Minimum run of mask characters emitted by a partial mask.
MIN_MASK_LENGTH = 3

# A value counts as already masked when more than this share of its
# characters are the mask character.
ALREADY_MASKED_RATIO = 0.5


def partial_mask(
    value: str,
    visible_start: int,
    visible_end: int,
    mask_char: str = "*",
    min_mask_length: int = MIN_MASK_LENGTH,
) -> str:
    """Mask the middle of *value*, keeping its first and last characters.

    The mask run is never shorter than *min_mask_length*, so short values
    come out longer than they went in: ``partial_mask("abcde", 2, 2)`` is
    ``"ab***de"``.

    Args:
        value: The raw value.
        visible_start: Characters kept at the start.
        visible_end: Characters kept at the end.
        mask_char: Character used for the masked run.
        min_mask_length: Shortest allowed masked run.

    Returns:
        The masked value.  When *value* is no longer than the visible
        window, it is masked completely.
    """
    visible_start = max(0, visible_start)
    visible_end = max(0, visible_end)
    n = len(value)
    total = visible_start + visible_end

    if n <= total:
        return mask_char * max(n, min_mask_length)

    return (
        value[:visible_start]
        + mask_char * max(n - total, min_mask_length)
        + value[n - visible_end:]
    )


def is_already_masked(
    value: str | None,
    mask_char: str = "*",
    ratio: float = ALREADY_MASKED_RATIO,
) -> bool:
    """True if *value* is empty or mostly made of *mask_char*.

    Approximate: legitimate data rich in the mask character is misread as
    masked.  Used only to keep the type pass off field-pass output.
    """
    if not value:
        return True
    return value.count(mask_char) > len(value) * ratio


class DefaultObfuscator(Obfuscator):
    """Replaces any value with a fixed mask, regardless of its length."""

    def __init__(self, mask_char: str = "*", default_mask: str | None = None) -> None:
        self.mask_char = mask_char
        self.default_mask = default_mask or mask_char * MIN_MASK_LENGTH

    def obfuscate(self, value: str | None) -> str:
        return self.default_mask

    def __repr__(self) -> str:
        return f"DefaultObfuscator(mask_char={self.mask_char!r}, default_mask={self.default_mask!r})"


class PartialObfuscator(Obfuscator):
    """Keeps a window of characters at each end and masks the middle."""

    def __init__(
        self,
        visible_start: int = 3,
        visible_end: int = 2,
        mask_char: str = "*",
        min_mask_length: int = MIN_MASK_LENGTH,
    ) -> None:
        self.visible_start = max(0, visible_start)
        self.visible_end = max(0, visible_end)
        self.mask_char = mask_char
        self.min_mask_length = max(1, min_mask_length)

    def obfuscate(self, value: str | None) -> str:
        if not value:
            return self.mask_char * self.min_mask_length
        return partial_mask(
            value,
            self.visible_start,
            self.visible_end,
            self.mask_char,
            self.min_mask_length,
        )

    def __repr__(self) -> str:
        return (
            f"PartialObfuscator(visible_start={self.visible_start}, "
            f"visible_end={self.visible_end}, mask_char={self.mask_char!r})"
        )
