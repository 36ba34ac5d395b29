"""Sensitive to-string rendering from explicit field descriptors.

Objects are rendered either as ``TypeName[a=1, b=***]`` or as a JSON object,
with each sensitive attribute masked through the same formatter registry the
engine uses.  Which attributes are sensitive, and how, is declared by the
caller with :class:`FieldDescriptor`; nothing is discovered at runtime.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from logward.masking.models import DataCategory
from logward.masking.obfuscators import DefaultObfuscator
from logward.masking.registry import FormatterRegistry
from logward.masking.resolution import resolve_field

_MISSING = object()


@dataclass(frozen=True)
class FieldDescriptor:
    """How one attribute is rendered.

    Attributes:
        name: Attribute (or mapping key) name.
        sensitive: Whether the value is masked.
        category: Category used for formatter lookup.
        formatter: Formatter name overriding the category formatter.
        visible_start: Characters kept at the start (partial mask).
        visible_end: Characters kept at the end (partial mask).
        mask: Replacement used when nothing else applies.
        mask_char: Mask character for the partial mask.
    """

    name: str
    sensitive: bool = True
    category: DataCategory = DataCategory.GENERIC
    formatter: str | None = None
    visible_start: int = 0
    visible_end: int = 0
    mask: str = "***"
    mask_char: str = "*"


def sensitive(
    name: str,
    category: DataCategory = DataCategory.GENERIC,
    **options: Any,
) -> FieldDescriptor:
    """Shorthand for a sensitive :class:`FieldDescriptor`."""
    return FieldDescriptor(name=name, category=category, **options)


def plain(name: str) -> FieldDescriptor:
    """Shorthand for a non-sensitive :class:`FieldDescriptor`."""
    return FieldDescriptor(name=name, sensitive=False)


class SensitiveRenderer:
    """Renders objects with declared sensitive attributes masked.

    Args:
        formatters: Registry used for formatter lookups.  Usually the
            engine's own ``formatters``.
    """

    def __init__(self, formatters: FormatterRegistry | None = None) -> None:
        self.formatters = formatters if formatters is not None else FormatterRegistry()

    def mask(self, value: Any, descriptor: FieldDescriptor) -> str:
        """Mask one value according to *descriptor*."""
        if value is None:
            return "null"
        text = str(value)
        if not text:
            return descriptor.mask
        return resolve_field(
            text,
            descriptor,
            formatters=self.formatters,
            default=DefaultObfuscator(descriptor.mask_char, descriptor.mask),
            mask_char=descriptor.mask_char,
        )

    def render(
        self,
        obj: Any,
        fields: Sequence[FieldDescriptor | str],
        *,
        type_name: str | None = None,
        json_format: bool = False,
        include_nulls: bool = False,
        exclude: Iterable[str] = (),
    ) -> str:
        """Render *obj* using *fields*, in the order given.

        Args:
            obj: Object (read with ``getattr``) or mapping (read by key).
            fields: Descriptors; bare strings are non-sensitive names.
            type_name: Prefix of the standard form.  Defaults to the
                object's class name.
            json_format: Render a JSON object instead of ``Type[...]``.
            include_nulls: Render ``None`` values instead of skipping them.
            exclude: Names to leave out.

        Returns:
            The rendered string; ``"null"`` when *obj* is ``None``.
        """
        if obj is None:
            return "null"

        excluded = set(exclude)
        builder = ToStringBuilder(
            type_name or type(obj).__name__,
            json_format=json_format,
            renderer=self,
        )
        for item in fields:
            descriptor = plain(item) if isinstance(item, str) else item
            if descriptor.name in excluded:
                continue
            value = _read(obj, descriptor.name)
            if value is _MISSING:
                continue
            if value is None and not include_nulls:
                continue
            if descriptor.sensitive:
                builder.append_descriptor(descriptor, value)
            else:
                builder.append(descriptor.name, value)
        return builder.build()


class ToStringBuilder:
    """Incremental renderer for hand-written ``__str__``/``__repr__`` methods.

    Example::

        def __repr__(self) -> str:
            return (
                ToStringBuilder("Customer", renderer=renderer)
                .append("id", self.id)
                .append_sensitive("cpf", self.cpf, DataCategory.CPF)
                .append_masked("password", self.password)
                .build()
            )
    """

    def __init__(
        self,
        type_name: str,
        *,
        json_format: bool = False,
        renderer: SensitiveRenderer | None = None,
    ) -> None:
        self._type_name = type_name
        self._json_format = json_format
        self._renderer = renderer if renderer is not None else SensitiveRenderer()
        self._parts: list[str] = []

    def append(self, name: str, value: Any) -> ToStringBuilder:
        if self._json_format:
            self._parts.append(f"{json.dumps(name)}: {_json_value(value)}")
        else:
            self._parts.append(f"{name}={'null' if value is None else value}")
        return self

    def append_sensitive(
        self,
        name: str,
        value: Any,
        category: DataCategory = DataCategory.GENERIC,
    ) -> ToStringBuilder:
        return self.append_descriptor(sensitive(name, category), value)

    def append_descriptor(self, descriptor: FieldDescriptor, value: Any) -> ToStringBuilder:
        if value is None:
            return self.append(descriptor.name, None)
        return self.append(descriptor.name, self._renderer.mask(value, descriptor))

    def append_masked(self, name: str, value: Any, mask: str = "***") -> ToStringBuilder:
        return self.append(name, mask if value is not None else None)

    def build(self) -> str:
        content = ", ".join(self._parts)
        if self._json_format:
            return "{" + content + "}"
        return f"{self._type_name}[{content}]"


def _read(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def _json_value(value: Any) -> str:
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return json.dumps(str(value), ensure_ascii=False)
