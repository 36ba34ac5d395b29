"""Default sensitive-field set, used when no config file is given."""

from __future__ import annotations

from logward.config.schema import EngineConfig, SensitiveFieldConfig
from logward.masking.models import DataCategory

DEFAULT_FIELDS: tuple[tuple[str, DataCategory], ...] = (
    ("documento", DataCategory.CPF),
    ("cpf", DataCategory.CPF),
    ("cnpj", DataCategory.CNPJ),
    ("email", DataCategory.EMAIL),
    ("telefone", DataCategory.PHONE),
    ("phone", DataCategory.PHONE),
    ("nome", DataCategory.NAME),
    ("name", DataCategory.NAME),
    ("renda", DataCategory.MONETARY),
    ("senha", DataCategory.PASSWORD),
    ("password", DataCategory.PASSWORD),
    ("cartao", DataCategory.CREDIT_CARD),
    ("creditCard", DataCategory.CREDIT_CARD),
)


def default_config() -> EngineConfig:
    """An enabled configuration covering the common sensitive field names."""
    return EngineConfig(
        fields=[SensitiveFieldConfig(name=name, category=category) for name, category in DEFAULT_FIELDS],
    )
