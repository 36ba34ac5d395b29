"""Tests for the configuration schema, YAML loader and default config."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from logward.config.defaults import DEFAULT_FIELDS, default_config
from logward.config.loader import ConfigValidationError, load_config, parse_config
from logward.config.schema import (
    DEFAULT_AUTO_DETECT_CATEGORIES,
    EngineConfig,
    SensitiveFieldConfig,
)
from logward.masking.models import DataCategory

FIXTURES = Path(__file__).parent / "fixtures"


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "logward.yaml"
    path.write_text(content, encoding="utf-8")
    return path


# -----------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------


class TestSensitiveFieldConfig:
    def test_defaults(self) -> None:
        field = SensitiveFieldConfig(name="senha")
        assert field.category is DataCategory.GENERIC
        assert field.formatter is None
        assert field.custom_pattern is None
        assert not field.case_sensitive
        assert not field.has_partial_mask

    def test_type_alias_and_spellings(self) -> None:
        assert SensitiveFieldConfig.model_validate({"name": "c", "type": "creditCard"}).category is (
            DataCategory.CREDIT_CARD
        )
        assert SensitiveFieldConfig(name="c", category="CPF").category is DataCategory.CPF  # type: ignore[arg-type]

    def test_unknown_category_is_generic(self) -> None:
        assert SensitiveFieldConfig(name="c", category="passport").category is DataCategory.GENERIC  # type: ignore[arg-type]

    def test_key_honors_case_rule(self) -> None:
        assert SensitiveFieldConfig(name="Documento").key == "documento"
        assert SensitiveFieldConfig(name="Documento", case_sensitive=True).key == "Documento"

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SensitiveFieldConfig(name="  ")

    def test_negative_window_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SensitiveFieldConfig(name="x", visible_start=-1)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SensitiveFieldConfig.model_validate({"name": "x", "visible": 3})

    def test_frozen(self) -> None:
        field = SensitiveFieldConfig(name="x")
        with pytest.raises(ValidationError):
            field.name = "y"  # type: ignore[misc]


class TestEngineConfig:
    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.enabled
        assert config.mask_char == "*"
        assert config.default_mask == "***"
        assert config.auto_detect
        assert config.fields == []
        assert config.auto_detect_categories == list(DEFAULT_AUTO_DETECT_CATEGORIES)
        assert config.already_masked_ratio == 0.5

    def test_default_mask_filled_from_mask_char(self) -> None:
        assert EngineConfig(mask_char="#", default_mask=None).default_mask == "###"
        assert EngineConfig(mask_char="#", default_mask="").default_mask == "###"

    def test_mask_char_single_character(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(mask_char="**")
        with pytest.raises(ValidationError):
            EngineConfig(mask_char="")

    def test_ratio_bounds(self) -> None:
        with pytest.raises(ValidationError):
            EngineConfig(already_masked_ratio=1.0)
        with pytest.raises(ValidationError):
            EngineConfig(already_masked_ratio=0)

    def test_categories_parsed_and_deduplicated(self) -> None:
        config = EngineConfig(auto_detect_categories=["cpf", "CPF", "email"])  # type: ignore[list-item]
        assert config.auto_detect_categories == [DataCategory.CPF, DataCategory.EMAIL]

    def test_duplicate_field_last_wins_in_first_position(self) -> None:
        config = EngineConfig(
            fields=[
                SensitiveFieldConfig(name="documento", category=DataCategory.CPF),
                SensitiveFieldConfig(name="senha"),
                SensitiveFieldConfig(name="DOCUMENTO", category=DataCategory.CNPJ),
            ]
        )
        assert [f.name for f in config.fields] == ["DOCUMENTO", "senha"]
        assert config.fields[0].category is DataCategory.CNPJ

    def test_case_sensitive_fields_are_distinct(self) -> None:
        config = EngineConfig(
            fields=[
                SensitiveFieldConfig(name="Token", case_sensitive=True),
                SensitiveFieldConfig(name="token", case_sensitive=True),
            ]
        )
        assert len(config.fields) == 2

    def test_get_field(self) -> None:
        config = EngineConfig(fields=[SensitiveFieldConfig(name="documento")])
        assert config.get_field("Documento") is config.fields[0]
        assert config.get_field("cpf") is None

    def test_with_fields(self) -> None:
        config = EngineConfig(mask_char="#", fields=[SensitiveFieldConfig(name="a")])
        extended = config.with_fields(SensitiveFieldConfig(name="b"))
        assert [f.name for f in extended.fields] == ["a", "b"]
        assert extended.mask_char == "#"
        assert [f.name for f in config.fields] == ["a"]


# -----------------------------------------------------------------------
# Loader
# -----------------------------------------------------------------------


class TestLoadConfig:
    def test_fixture(self) -> None:
        config = load_config(FIXTURES / "logward.yaml")
        assert not config.auto_detect
        assert [f.name for f in config.fields] == ["telefone", "usuario", "documento"]
        telefone = config.fields[0]
        assert (telefone.visible_start, telefone.visible_end) == (2, 3)
        assert config.fields[2].category is DataCategory.CPF

    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
enabled: true
mask_char: "#"
default_mask: "[MASKED]"
already_masked_ratio: 0.6
auto_detect_categories: [cpf, ip_address]
fields:
  - name: cartao
    category: creditCard
  - name: token
    custom_pattern: 'Bearer\\s+(\\S+)'
    formatter: document
    case_sensitive: true
""",
        )
        config = load_config(path)
        assert config.mask_char == "#"
        assert config.default_mask == "[MASKED]"
        assert config.already_masked_ratio == 0.6
        assert config.auto_detect_categories == [DataCategory.CPF, DataCategory.IP_ADDRESS]
        assert config.fields[0].category is DataCategory.CREDIT_CARD
        token = config.fields[1]
        assert token.custom_pattern == r"Bearer\s+(\S+)"
        assert token.formatter == "document"
        assert token.case_sensitive

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "fields: [\n")
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)
        assert exc_info.value.details[0]["type"] == "yaml_parse_error"
        assert exc_info.value.path == path

    def test_empty_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "")
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)
        assert exc_info.value.details[0]["type"] == "empty_file"
        assert str(path) in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "- name: cpf\n")
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)
        assert exc_info.value.details[0] == {"type": "not_a_mapping", "got": "list"}

    def test_schema_error_message_names_location(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "fields:\n  - name: x\n    visible_start: -2\n")
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)
        message = str(exc_info.value)
        assert "fields → 0 → visible_start" in message
        assert str(path) in message

    def test_bad_custom_pattern_passes_schema(self, tmp_path: Path) -> None:
        # Regex validity is checked when the engine compiles fields.
        config = load_config(FIXTURES / "invalid_pattern.yaml")
        assert config.fields[0].custom_pattern == "Bearer ([unclosed"


class TestParseConfig:
    def test_mapping(self) -> None:
        config = parse_config({"fields": [{"name": "senha", "type": "password"}]})
        assert config.fields[0].category is DataCategory.PASSWORD

    def test_invalid_mapping(self) -> None:
        with pytest.raises(ConfigValidationError, match="<mapping>"):
            parse_config({"mask_char": "**"})


# -----------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------


class TestDefaultConfig:
    def test_fields(self) -> None:
        config = default_config()
        assert len(config.fields) == len(DEFAULT_FIELDS)
        assert config.get_field("documento").category is DataCategory.CPF  # type: ignore[union-attr]
        assert config.get_field("creditcard").category is DataCategory.CREDIT_CARD  # type: ignore[union-attr]
        assert config.auto_detect
