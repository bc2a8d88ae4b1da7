"""Config module - declarative retry configuration."""

from .schema import (
    DelayKind,
    RetryConfig,
    RetryOn,
    ValidationError,
    ValidationResult,
)
from .parser import load_config, parse_config, parse_config_data
from .validator import validate_config

__all__ = [
    "DelayKind",
    "RetryConfig",
    "RetryOn",
    "ValidationError",
    "ValidationResult",
    "load_config",
    "parse_config",
    "parse_config_data",
    "validate_config",
]
