"""CLI entry point for the retrying HTTP client.

Sends one request through the retrying transport and prints a JSON summary:
    retryhttp <url> [options]
    python -m retryhttp.cli <url> [options]
"""

import json
import logging
import sys
import time
from typing import Optional

import click
import requests

from .client import RetryHttpClient
from .config import RetryConfig, load_config, validate_config
from .errors import ConfigError, RequestCancelled
from .policy import Attempt


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("url")
@click.option("-X", "--method", default="GET", show_default=True, help="HTTP method.")
@click.option("-d", "--data", default=None, help="Request body.")
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False), default=None,
    help="YAML retry config file.",
)
@click.option("--retries", type=int, default=None, help="Override max retries.")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Per-attempt timeout in seconds.")
@click.option("--pretty", is_flag=True, help="Pretty print output.")
@click.option("-v", "--verbose", is_flag=True, help="Log retries to stderr.")
def main(
    url: str,
    method: str,
    data: Optional[str],
    config_path: Optional[str],
    retries: Optional[int],
    timeout: float,
    pretty: bool,
    verbose: bool,
):
    """Send a request to URL, retrying per the retry config."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    indent = 2 if pretty else None

    try:
        config = load_config(config_path) if config_path else RetryConfig()
        if retries is not None:
            config.max_retries = retries
            validation = validate_config(config)
            if not validation.valid:
                errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
                raise ConfigError(f"Invalid retry config: {errors_str}")
    except (FileNotFoundError, ConfigError) as e:
        output_error(f"Failed to load config: {e}", indent=indent)
        sys.exit(1)

    retried: list[dict] = []

    def on_retry(attempt: Attempt, delay: float) -> None:
        retried.append({
            "index": attempt.index,
            "status": attempt.status_code,
            "error": repr(attempt.error) if attempt.error is not None else None,
            "delay": round(delay, 3),
        })

    start_time = time.time()
    client = RetryHttpClient.from_config(config, request_timeout=timeout)
    client.adapter.on_retry = on_retry

    try:
        with client:
            response = client.request(method.upper(), url, data=data)
    except RequestCancelled as e:
        output_error(f"Request cancelled: {e}", indent=indent, attempts=e.attempts)
        sys.exit(1)
    except requests.RequestException as e:
        duration_ms = int((time.time() - start_time) * 1000)
        output_error(
            f"Request failed: {e}",
            indent=indent,
            duration_ms=duration_ms,
            retries=retried,
        )
        sys.exit(1)

    duration_ms = int((time.time() - start_time) * 1000)
    success = response.status_code < 400
    output = {
        "success": success,
        "command": "request",
        "data": {
            "method": method.upper(),
            "url": url,
            "status": response.status_code,
            "attempts": len(retried) + 1,
            "retries": retried,
            "duration_ms": duration_ms,
        },
        "message": f"{response.status_code} {response.reason or ''}".strip(),
    }
    click.echo(json.dumps(output, ensure_ascii=False, indent=indent))

    if not success:
        sys.exit(1)


def output_error(message: str, indent: Optional[int] = None, **extra):
    """Output error in JSON format."""
    output = {
        "success": False,
        "command": "request",
        "data": extra or None,
        "message": message,
    }
    click.echo(json.dumps(output, ensure_ascii=False, indent=indent))


if __name__ == "__main__":
    main()
