"""Retry configuration data models.

Defines dataclasses for declaring a retry policy in YAML or code and
building the matching decision and delay functions.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from ..errors import ConfigError
from ..policy import (
    DelayFn,
    RetryPolicy,
    ShouldRetryFn,
    const_delay,
    exponential_delay,
    linear_delay,
    no_delay,
    retry_all,
    retry_any,
    retry_http_methods,
    retry_status_5xx,
    retry_statuses,
    retry_temporary_err,
    to_retry_policy,
)


class RetryOn(str, Enum):
    """Conditions that trigger a retry."""
    TEMPORARY = "temporary"
    STATUS_5XX = "5xx"
    STATUS = "status"


class DelayKind(str, Enum):
    """Supported delay strategies."""
    NONE = "none"
    CONST = "const"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


VALID_RETRY_ON = {e.value for e in RetryOn}
VALID_DELAYS = {e.value for e in DelayKind}


@dataclass
class RetryConfig:
    """Declarative retry configuration.

    ``retry_on`` conditions are ORed together. When ``methods`` is set, it
    is ANDed with them, so only requests with a listed method are retried.
    """
    max_retries: int = 3
    retry_on: list[str] = field(default_factory=lambda: ["temporary", "5xx"])
    statuses: list[int] = field(default_factory=list)
    methods: Optional[list[str]] = None
    delay: str = "exponential"
    base_delay: float = 1.0
    max_delay: float = 30.0
    prevent_retry_with_body: bool = False

    def __post_init__(self):
        self.delay = self.delay.lower()
        self.retry_on = [r.lower() for r in self.retry_on]
        if self.methods is not None:
            self.methods = [m.upper() for m in self.methods]

    def build_should_retry(self) -> ShouldRetryFn:
        """Build the decision function for this configuration.

        Raises:
            ConfigError: On an unknown ``retry_on`` condition.
        """
        conditions = []
        for name in self.retry_on:
            if name == RetryOn.TEMPORARY:
                conditions.append(retry_temporary_err(self.max_retries))
            elif name == RetryOn.STATUS_5XX:
                conditions.append(retry_status_5xx(self.max_retries))
            elif name == RetryOn.STATUS:
                conditions.append(retry_statuses(self.max_retries, *self.statuses))
            else:
                raise ConfigError(f"Unknown retry condition '{name}'")

        should_retry = retry_any(*conditions)
        if self.methods is not None:
            should_retry = retry_all(
                retry_http_methods(self.max_retries, *self.methods),
                should_retry,
            )
        return should_retry

    def build_delay(self) -> DelayFn:
        """Build the delay function for this configuration.

        Raises:
            ConfigError: On an unknown delay strategy.
        """
        if self.delay == DelayKind.NONE:
            return no_delay()
        if self.delay == DelayKind.CONST:
            return const_delay(self.base_delay)
        if self.delay == DelayKind.LINEAR:
            return linear_delay(self.base_delay)
        if self.delay == DelayKind.EXPONENTIAL:
            return exponential_delay(self.base_delay, self.max_delay)
        raise ConfigError(f"Unknown delay strategy '{self.delay}'")

    def build_policy(self) -> RetryPolicy:
        """Build the retry policy for this configuration."""
        return to_retry_policy(self.build_should_retry(), self.build_delay())

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of config validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def __str__(self) -> str:
        if self.valid:
            msg = "Valid"
            if self.warnings:
                msg += f" ({self.warning_count} warnings)"
            return msg
        return f"Invalid: {self.error_count} errors, {self.warning_count} warnings"
