"""Pydantic v2 models for logward configuration.

Defines the engine configuration (global switches, mask settings, the
ordered list of sensitive fields and the auto-detected categories), as
loaded from ``logward.yaml`` or built in code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from logward.masking.models import DataCategory

DEFAULT_AUTO_DETECT_CATEGORIES: tuple[DataCategory, ...] = (
    DataCategory.CPF,
    DataCategory.CNPJ,
    DataCategory.EMAIL,
    DataCategory.CREDIT_CARD,
    DataCategory.IP_ADDRESS,
)


def _coerce_category(value: Any) -> Any:
    """Accept any spelling ``DataCategory.from_key`` understands."""
    if isinstance(value, str) and not isinstance(value, DataCategory):
        return DataCategory.from_key(value)
    return value


class SensitiveFieldConfig(BaseModel):
    """One named key whose value must be masked wherever it appears.

    Identity is the name, compared case-insensitively unless
    ``case_sensitive`` is set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str
    category: DataCategory = Field(default=DataCategory.GENERIC, alias="type")
    custom_pattern: str | None = None
    formatter: str | None = None
    case_sensitive: bool = False
    visible_start: int = Field(default=0, ge=0)
    visible_end: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "Sensitive field name must not be blank"
            raise ValueError(msg)
        return v

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, v: Any) -> Any:
        return _coerce_category(v)

    @property
    def key(self) -> str:
        """Identity key: the name, lower-cased unless case sensitive."""
        return self.name if self.case_sensitive else self.name.lower()

    @property
    def has_partial_mask(self) -> bool:
        return self.visible_start > 0 or self.visible_end > 0


class EngineConfig(BaseModel):
    """Complete configuration of a sanitization engine.

    Field order is significant: the field pass runs in declaration order.
    When two fields share an identity, the later declaration replaces the
    earlier one in place.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    mask_char: str = Field(default="*", min_length=1, max_length=1)
    default_mask: str | None = "***"
    auto_detect: bool = True
    fields: list[SensitiveFieldConfig] = Field(default_factory=list)
    auto_detect_categories: list[DataCategory] = Field(
        default_factory=lambda: list(DEFAULT_AUTO_DETECT_CATEGORIES),
    )
    already_masked_ratio: float = Field(default=0.5, gt=0.0, lt=1.0)

    @field_validator("auto_detect_categories", mode="before")
    @classmethod
    def parse_categories(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return [_coerce_category(item) for item in v]
        return v

    @model_validator(mode="after")
    def normalize(self) -> EngineConfig:
        """Fill the default mask, drop duplicate categories and fields."""
        if not self.default_mask:
            self.default_mask = self.mask_char * 3

        seen_categories: list[DataCategory] = []
        for category in self.auto_detect_categories:
            if category not in seen_categories:
                seen_categories.append(category)
        self.auto_detect_categories = seen_categories

        positions: dict[str, int] = {}
        unique_fields: list[SensitiveFieldConfig] = []
        for field in self.fields:
            if field.key in positions:
                unique_fields[positions[field.key]] = field
            else:
                positions[field.key] = len(unique_fields)
                unique_fields.append(field)
        self.fields = unique_fields
        return self

    def get_field(self, name: str) -> SensitiveFieldConfig | None:
        """Find a configured field by name, honoring its case rule."""
        for f in self.fields:
            if f.name == name or (not f.case_sensitive and f.key == name.lower()):
                return f
        return None

    def with_fields(self, *fields: SensitiveFieldConfig) -> EngineConfig:
        """Return a copy with *fields* appended."""
        data = self.model_dump(by_alias=False)
        data["fields"] = [*self.fields, *fields]
        return EngineConfig.model_validate(data)
