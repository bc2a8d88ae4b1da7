"""YAML parser for retry configuration.

Parses YAML files into RetryConfig objects. The settings may sit at the top
level of the document or under a ``retry:`` mapping:

    retry:
      max_retries: 3
      retry_on: [temporary, 5xx]
      methods: [GET, HEAD]
      delay: exponential
      base_delay: 0.5
      max_delay: 10
"""

from pathlib import Path
from typing import Any, Union

import yaml

from ..errors import ConfigError
from .schema import RetryConfig
from .validator import validate_config


def parse_config(file_path: Union[str, Path]) -> RetryConfig:
    """Parse a YAML config file into a RetryConfig object.

    Args:
        file_path: Path to the YAML config file.

    Returns:
        Parsed RetryConfig object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If the YAML is malformed or has invalid field types.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise ConfigError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty config file: {file_path}")

    return parse_config_data(data, source=str(file_path))


def parse_config_data(data: Any, source: str = "<inline>") -> RetryConfig:
    """Parse a RetryConfig from a dictionary (already loaded YAML).

    Args:
        data: Dictionary with config data.
        source: Source identifier for error messages.

    Returns:
        Parsed RetryConfig object.

    Raises:
        ConfigError: If the data is not a mapping or a field has the wrong type.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

    if "retry" in data:
        data = data["retry"]
        if not isinstance(data, dict):
            raise ConfigError(f"'retry' must be a mapping in {source}")

    unknown = sorted(set(data) - set(RetryConfig.__dataclass_fields__))
    if unknown:
        raise ConfigError(f"Unknown field(s) {', '.join(map(str, unknown))} in {source}")

    values: dict[str, Any] = {}

    if "max_retries" in data:
        values["max_retries"] = _int(data["max_retries"], "max_retries", source)
    if "retry_on" in data:
        values["retry_on"] = [str(r) for r in _list(data["retry_on"], "retry_on", source)]
    if "statuses" in data:
        values["statuses"] = [
            _int(code, f"statuses[{i}]", source)
            for i, code in enumerate(_list(data["statuses"], "statuses", source))
        ]
    if "methods" in data and data["methods"] is not None:
        values["methods"] = [str(m) for m in _list(data["methods"], "methods", source)]
    if "delay" in data:
        values["delay"] = str(data["delay"])
    for name in ("base_delay", "max_delay"):
        if name in data:
            values[name] = _float(data[name], name, source)
    if "prevent_retry_with_body" in data:
        value = data["prevent_retry_with_body"]
        if not isinstance(value, bool):
            raise ConfigError(f"'prevent_retry_with_body' must be a boolean in {source}")
        values["prevent_retry_with_body"] = value

    return RetryConfig(**values)


def load_config(file_path: Union[str, Path]) -> RetryConfig:
    """Parse and validate a YAML config file.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If the config is malformed or invalid.
    """
    config = parse_config(file_path)
    validation = validate_config(config)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        raise ConfigError(f"Invalid retry config: {errors_str}")
    return config


def _list(value: Any, name: str, source: str) -> list:
    """Accept a single scalar as a one-element list."""
    if isinstance(value, list):
        return value
    if isinstance(value, (str, int)):
        return [value]
    raise ConfigError(f"'{name}' must be a list in {source}")


def _int(value: Any, name: str, source: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{name}' must be an integer in {source}")
    return value


def _float(value: Any, name: str, source: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{name}' must be a number in {source}")
    return float(value)
