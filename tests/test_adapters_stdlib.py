"""Tests for the standard-library logging adapters."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from logward.adapters.stdlib import MaskingFilter, MaskingFormatter, install_masking
from logward.masking.builder import EngineBuilder
from logward.masking.engine import SanitizationEngine
from logward.masking.models import DataCategory


class ListHandler(logging.Handler):
    """Keeps formatted records in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.lines.append(self.format(record))


@pytest.fixture
def engine() -> SanitizationEngine:
    return (
        EngineBuilder()
        .with_default_formatters()
        .auto_detect(False)
        .add_field("documento", DataCategory.CPF)
        .add_field("senha")
        .build()
    )


@pytest.fixture
def handler() -> Iterator[ListHandler]:
    yield ListHandler()


@pytest.fixture
def test_logger(handler: ListHandler) -> Iterator[logging.Logger]:
    logger = logging.getLogger("logward.tests.adapters")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.addHandler(handler)
    yield logger
    logger.removeHandler(handler)
    logger.filters.clear()


class TestMaskingFilter:
    def test_masks_merged_message(
        self, engine: SanitizationEngine, handler: ListHandler, test_logger: logging.Logger
    ) -> None:
        handler.addFilter(MaskingFilter(engine))
        test_logger.info("cliente documento=%s senha=%s", "12345678909", "hunter2")
        assert handler.lines == ["cliente documento=***456789** senha=***"]

    def test_record_args_cleared(self, engine: SanitizationEngine) -> None:
        record = logging.LogRecord(
            "x", logging.INFO, __file__, 1, "documento=%s", ("12345678909",), None
        )
        assert MaskingFilter(engine).filter(record)
        assert record.msg == "documento=***456789**"
        assert record.args is None
        assert record.getMessage() == "documento=***456789**"

    def test_clean_message_untouched(self, engine: SanitizationEngine) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "user login ok", None, None)
        MaskingFilter(engine).filter(record)
        assert record.msg == "user login ok"

    def test_unconfigured_engine_passes_through(self) -> None:
        record = logging.LogRecord(
            "x", logging.INFO, __file__, 1, "senha=%s", ("hunter2",), None
        )
        assert MaskingFilter(SanitizationEngine()).filter(record)
        assert record.getMessage() == "senha=hunter2"


class TestMaskingFormatter:
    def test_masks_formatted_line(
        self, engine: SanitizationEngine, handler: ListHandler, test_logger: logging.Logger
    ) -> None:
        handler.setFormatter(MaskingFormatter(engine, "%(levelname)s %(message)s"))
        test_logger.warning("senha=%s", "hunter2")
        assert handler.lines == ["WARNING senha=***"]

    def test_masks_exception_text(
        self, engine: SanitizationEngine, handler: ListHandler, test_logger: logging.Logger
    ) -> None:
        handler.setFormatter(MaskingFormatter(engine, "%(message)s"))
        try:
            raise RuntimeError("login failed for senha=hunter2")
        except RuntimeError:
            test_logger.exception("request failed")
        assert "hunter2" not in handler.lines[0]
        assert "senha=***" in handler.lines[0]


class TestInstallMasking:
    def test_attaches_to_handlers(
        self, engine: SanitizationEngine, handler: ListHandler, test_logger: logging.Logger
    ) -> None:
        installed = install_masking(engine, test_logger)
        assert handler.filters == [installed]
        test_logger.info("documento=12345678909")
        assert handler.lines == ["documento=***456789**"]

    def test_idempotent(
        self, engine: SanitizationEngine, handler: ListHandler, test_logger: logging.Logger
    ) -> None:
        first = install_masking(engine, test_logger)
        second = install_masking(engine, test_logger)
        assert first is second
        assert len(handler.filters) == 1

    def test_logger_without_handlers(self, engine: SanitizationEngine) -> None:
        logger = logging.getLogger("logward.tests.adapters.bare")
        try:
            installed = install_masking(engine, logger)
            assert logger.filters == [installed]
        finally:
            logger.filters.clear()
