"""Formatter and obfuscator registries.

Each registry is dual-keyed: by name (case-insensitive) and by data category.
Writes happen at composition time; reads happen on every match, from any
thread.  Both lookup tables of a registry live in one immutable pair that a
write replaces wholesale, so a reader sees either the old or the new pair,
never a registration applied to one table but not the other.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Generic, Mapping, NamedTuple, TypeVar

from logward.masking.models import DataCategory, Formatter, Obfuscator

T = TypeVar("T")


class _Tables(NamedTuple):
    by_name: Mapping[str, Any]
    by_category: Mapping[DataCategory, Any]


_EMPTY: _Tables = _Tables(MappingProxyType({}), MappingProxyType({}))


class _DualKeyRegistry(Generic[T]):
    """Copy-on-write name/category tables shared by both registries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: _Tables = _EMPTY

    def _publish(self, by_name: dict[str, T], by_category: dict[DataCategory, T]) -> None:
        self._tables = _Tables(MappingProxyType(by_name), MappingProxyType(by_category))

    def _copy(self) -> tuple[dict[str, T], dict[DataCategory, T]]:
        tables = self._tables
        return dict(tables.by_name), dict(tables.by_category)

    def get(self, name: str | None) -> T | None:
        """Look up by name; blank names never match."""
        if name is None or not name.strip():
            return None
        return self._tables.by_name.get(name.lower())

    def get_by_category(self, category: DataCategory) -> T | None:
        return self._tables.by_category.get(category)

    def has(self, key: str | DataCategory) -> bool:
        if isinstance(key, DataCategory):
            return key in self._tables.by_category
        return key is not None and key.lower() in self._tables.by_name

    def names(self) -> list[str]:
        return sorted(self._tables.by_name)

    def categories(self) -> list[DataCategory]:
        return list(self._tables.by_category)

    def clear(self) -> None:
        with self._lock:
            self._tables = _EMPTY

    def __len__(self) -> int:
        return len(self._tables.by_name)


class FormatterRegistry(_DualKeyRegistry[Formatter]):
    """Formatters by name and by category.

    Registering under one key also files the formatter under the other:
    a name registration also binds the formatter's category (unless it is
    ``GENERIC``), and a category registration also binds its name.
    """

    def register(self, key: str | DataCategory, formatter: Formatter) -> None:
        """Register *formatter*, replacing any previous entry for the key."""
        with self._lock:
            by_name, by_category = self._copy()
            if isinstance(key, DataCategory):
                by_category[key] = formatter
                by_name[formatter.name.lower()] = formatter
            else:
                by_name[key.lower()] = formatter
                if formatter.category is not DataCategory.GENERIC:
                    by_category[formatter.category] = formatter
            self._publish(by_name, by_category)

    def unregister(self, key: str | DataCategory) -> None:
        """Remove the entry for *key* and the formatter's paired entry."""
        with self._lock:
            by_name, by_category = self._copy()
            if isinstance(key, DataCategory):
                removed = by_category.pop(key, None)
                if removed is not None and by_name.get(removed.name.lower()) is removed:
                    del by_name[removed.name.lower()]
            else:
                removed = by_name.pop(key.lower(), None)
                if removed is not None and by_category.get(removed.category) is removed:
                    del by_category[removed.category]
            self._publish(by_name, by_category)


class ObfuscatorRegistry(_DualKeyRegistry[Obfuscator]):
    """Obfuscators by name and by category, plus the default obfuscator.

    Unlike formatters, the two tables are independent.
    """

    def __init__(self) -> None:
        super().__init__()
        self._default: Obfuscator | None = None

    @property
    def default(self) -> Obfuscator | None:
        """The terminal fallback obfuscator, if one was set explicitly."""
        return self._default

    def set_default(self, obfuscator: Obfuscator) -> None:
        self._default = obfuscator

    def register(self, key: str | DataCategory, obfuscator: Obfuscator) -> None:
        """Register *obfuscator*, replacing any previous entry for the key."""
        with self._lock:
            by_name, by_category = self._copy()
            if isinstance(key, DataCategory):
                by_category[key] = obfuscator
            else:
                by_name[key.lower()] = obfuscator
            self._publish(by_name, by_category)

    def unregister(self, key: str | DataCategory) -> None:
        with self._lock:
            by_name, by_category = self._copy()
            if isinstance(key, DataCategory):
                by_category.pop(key, None)
            else:
                by_name.pop(key.lower(), None)
            self._publish(by_name, by_category)

    def clear(self) -> None:
        with self._lock:
            self._tables = _EMPTY
            self._default = None
