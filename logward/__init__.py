"""logward: masks sensitive values in log text before it is emitted."""

from __future__ import annotations

__version__ = "0.1.0"

from logward.config.schema import EngineConfig, SensitiveFieldConfig  # noqa: E402
from logward.masking.builder import EngineBuilder  # noqa: E402
from logward.masking.engine import SanitizationEngine  # noqa: E402
from logward.masking.models import DataCategory  # noqa: E402
from logward.masking.patterns import ConfigurationError, FieldPatternError  # noqa: E402

__all__ = [
    "ConfigurationError",
    "DataCategory",
    "EngineBuilder",
    "EngineConfig",
    "FieldPatternError",
    "SanitizationEngine",
    "SensitiveFieldConfig",
    "__version__",
]
