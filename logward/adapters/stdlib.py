"""Adapters for the standard ``logging`` module.

Two integration points, pick one per handler:

- :class:`MaskingFilter` masks the rendered message of each record before
  any handler formats it.
- :class:`MaskingFormatter` masks the final formatted line, including
  exception tracebacks and anything the format string adds.

Usage::

    engine = EngineBuilder(load_config(Path("logward.yaml"))).with_default_formatters().build()
    handler = logging.StreamHandler()
    handler.setFormatter(MaskingFormatter(engine, "%(levelname)s %(message)s"))
"""

from __future__ import annotations

import logging
from typing import Any

from logward.masking.engine import SanitizationEngine


class MaskingFilter(logging.Filter):
    """Masks ``record.getMessage()`` in place.

    The ``msg % args`` merge happens here, once; the masked result is
    stored as ``record.msg`` and ``record.args`` is cleared so handlers
    downstream do not merge the raw arguments again.
    """

    def __init__(self, engine: SanitizationEngine, name: str = "") -> None:
        super().__init__(name)
        self.engine = engine

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.engine.is_configured:
            return True
        message = record.getMessage()
        masked = self.engine.sanitize(message)
        if masked != message or record.args:
            record.msg = masked
            record.args = None
        return True


class MaskingFormatter(logging.Formatter):
    """Wraps ``logging.Formatter`` and masks everything it produces."""

    def __init__(self, engine: SanitizationEngine, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.engine = engine

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        return self.engine.sanitize(formatted) or formatted


def install_masking(
    engine: SanitizationEngine,
    logger: logging.Logger | None = None,
) -> MaskingFilter:
    """Attach a :class:`MaskingFilter` to every handler of *logger*.

    Handler filters (not logger filters) are used because records logged on
    child loggers only pass through the handlers of their ancestors.  A
    logger without handlers gets the filter on the logger itself.
    Idempotent: handlers that already carry a filter for *engine* are left
    alone.

    Args:
        engine: The engine to mask with.
        logger: Target logger.  Defaults to the root logger.

    Returns:
        The filter instance attached by this call or a previous one.
    """
    target = logger or logging.getLogger()
    masking_filter = MaskingFilter(engine)
    filterers: list[logging.Filterer] = list(target.handlers) or [target]
    for filterer in filterers:
        existing = _find_filter(filterer, engine)
        if existing is None:
            filterer.addFilter(masking_filter)
        else:
            masking_filter = existing
    return masking_filter


def _find_filter(filterer: logging.Filterer, engine: SanitizationEngine) -> MaskingFilter | None:
    for f in filterer.filters:
        if isinstance(f, MaskingFilter) and f.engine is engine:
            return f
    return None
