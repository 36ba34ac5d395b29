"""Rich CLI output for configuration and category listings."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from logward.masking.engine import SanitizationEngine
from logward.masking.models import DataCategory


def print_config_report(engine: SanitizationEngine, console: Console) -> None:
    """Render the active configuration of *engine*.

    Args:
        engine: A configured engine.
        console: Rich console to print to (should be stderr).
    """
    config = engine.config
    if config is None:
        console.print("[#ffcc00]Engine is not configured.[/#ffcc00]")
        return

    state = "[#00ff88]enabled[/#00ff88]" if config.enabled else "[#ffcc00]disabled[/#ffcc00]"
    console.print(
        f"Masking {state} · mask char [bold]{config.mask_char}[/bold] · "
        f"default mask [bold]{config.default_mask}[/bold]",
        highlight=False,
    )

    table = Table(title="Sensitive fields", title_justify="left")
    table.add_column("Field", style="bold")
    table.add_column("Category")
    table.add_column("Rule")
    table.add_column("Patterns", justify="right")

    for field in config.fields:
        patterns = engine.field_patterns(field.name)
        if field.formatter and engine.formatters.has(field.formatter):
            rule = f"formatter '{field.formatter}'"
        elif field.category is not DataCategory.GENERIC and engine.formatters.has(field.category):
            rule = f"{field.category.value} formatter"
        elif field.has_partial_mask:
            rule = f"partial ({field.visible_start}, {field.visible_end})"
        else:
            rule = "default mask"
        count = str(len(patterns)) if patterns else "[red]excluded[/red]"
        table.add_row(field.name, field.category.value, rule, count)
    console.print(table)

    if config.auto_detect:
        detected = ", ".join(c.value for c in engine.category_patterns()) or "none"
        console.print(f"Auto-detect: {detected}", highlight=False)
    else:
        console.print("Auto-detect: [dim]off[/dim]")


def print_categories(console: Console) -> None:
    """Render every data category with its default detection pattern."""
    table = Table(title="Data categories", title_justify="left")
    table.add_column("Category", style="bold")
    table.add_column("Default pattern", overflow="fold")
    for category in DataCategory:
        table.add_row(category.value, category.default_pattern)
    console.print(table)
