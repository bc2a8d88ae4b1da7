"""Retry configuration validator.

Validates RetryConfig objects before a policy is built from them.
"""

import math

from .schema import (
    RetryConfig,
    ValidationError,
    ValidationResult,
    VALID_DELAYS,
    VALID_RETRY_ON,
)


def validate_config(config: RetryConfig) -> ValidationResult:
    """Validate a RetryConfig.

    Checks:
    - Retry count and conditions
    - Status codes required by the 'status' condition
    - Delay strategy and its parameters

    Args:
        config: RetryConfig to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    _validate_retries(config, errors, warnings)
    _validate_delay(config, errors, warnings)

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_retries(
    config: RetryConfig,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate retry count, conditions and methods."""
    if not isinstance(config.max_retries, int) or config.max_retries < 0:
        errors.append(ValidationError(
            path="max_retries",
            message=f"max_retries must be a non-negative integer, got {config.max_retries!r}.",
        ))
    elif config.max_retries == 0:
        warnings.append(ValidationError(
            path="max_retries",
            message="max_retries is 0. Requests will never be retried.",
            severity="warning",
        ))

    for i, name in enumerate(config.retry_on):
        if name not in VALID_RETRY_ON:
            errors.append(ValidationError(
                path=f"retry_on[{i}]",
                message=f"Invalid retry condition '{name}'. Must be one of: {', '.join(sorted(VALID_RETRY_ON))}",
            ))

    if not config.retry_on:
        warnings.append(ValidationError(
            path="retry_on",
            message="No retry conditions defined. Requests will never be retried.",
            severity="warning",
        ))

    if "status" in config.retry_on:
        if not config.statuses:
            errors.append(ValidationError(
                path="statuses",
                message="'status' condition requires 'statuses'.",
            ))
        for i, code in enumerate(config.statuses):
            if not isinstance(code, int) or not 100 <= code < 600:
                errors.append(ValidationError(
                    path=f"statuses[{i}]",
                    message=f"Invalid status code {code!r}. Must be an integer in [100, 600).",
                ))

    if config.methods is not None and not config.methods:
        warnings.append(ValidationError(
            path="methods",
            message="Empty 'methods' list. Requests will never be retried.",
            severity="warning",
        ))


def _validate_delay(
    config: RetryConfig,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate delay strategy and parameters."""
    if config.delay not in VALID_DELAYS:
        errors.append(ValidationError(
            path="delay",
            message=f"Invalid delay '{config.delay}'. Must be one of: {', '.join(sorted(VALID_DELAYS))}",
        ))
        return

    if config.base_delay < 0:
        errors.append(ValidationError(
            path="base_delay",
            message=f"base_delay must not be negative, got {config.base_delay}.",
        ))

    if config.delay == "exponential":
        if not math.isfinite(config.max_delay):
            errors.append(ValidationError(
                path="max_delay",
                message=f"max_delay must be finite, got {config.max_delay}.",
            ))
        elif config.max_delay <= 0:
            warnings.append(ValidationError(
                path="max_delay",
                message="max_delay is not positive. Exponential delay will always be 0.",
                severity="warning",
            ))
        elif config.max_delay < config.base_delay:
            warnings.append(ValidationError(
                path="max_delay",
                message=f"max_delay ({config.max_delay}) is below base_delay ({config.base_delay}).",
                severity="warning",
            ))
