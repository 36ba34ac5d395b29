"""Tests for the rich configuration report."""

from __future__ import annotations

import io

from rich.console import Console

from logward.masking.builder import EngineBuilder
from logward.masking.engine import SanitizationEngine
from logward.masking.models import DataCategory
from logward.report import print_categories, print_config_report


def _render(engine: SanitizationEngine) -> str:
    buffer = io.StringIO()
    print_config_report(engine, Console(file=buffer, width=200))
    return buffer.getvalue()


class TestConfigReport:
    def test_registered_override_formatter(self) -> None:
        engine = (
            EngineBuilder()
            .with_default_formatters()
            .auto_detect(False)
            .add_field("cliente", formatter="cpf")
            .build()
        )
        assert "formatter 'cpf'" in _render(engine)

    def test_unregistered_override_shows_effective_rule(self) -> None:
        engine = EngineBuilder().auto_detect(False).add_field("cpf_cliente", formatter="missing").build()
        output = _render(engine)
        assert "formatter 'missing'" not in output
        assert "default mask" in output

    def test_unregistered_override_falls_back_to_category(self) -> None:
        engine = (
            EngineBuilder()
            .with_default_formatters()
            .auto_detect(False)
            .add_field("documento", DataCategory.CPF, formatter="missing")
            .build()
        )
        output = _render(engine)
        assert "formatter 'missing'" not in output
        assert "cpf formatter" in output

    def test_partial_mask_rule(self) -> None:
        engine = EngineBuilder().auto_detect(False).add_field("telefone", visible_start=2, visible_end=3).build()
        assert "partial (2, 3)" in _render(engine)

    def test_unconfigured(self) -> None:
        assert "not configured" in _render(SanitizationEngine())


class TestCategories:
    def test_lists_every_category(self) -> None:
        buffer = io.StringIO()
        print_categories(Console(file=buffer, width=200))
        output = buffer.getvalue()
        for category in DataCategory:
            assert category.value in output
