"""Logging helpers shared by the CLI commands."""

import functools
import logging
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

CLI_LOGGER_NAME = "cfr_analytics.cli"


def get_cli_logger() -> logging.Logger:
    return logging.getLogger(CLI_LOGGER_NAME)


def cli_command(name: str) -> Callable[[F], F]:
    """Log entry and duration of a command at debug level.

    Apply below ``@click.pass_context`` so the wrapped function still
    receives the click context first.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = get_cli_logger()
            logger.debug("Running command %s", name)
            started = time.monotonic()
            try:
                return func(*args, **kwargs)
            finally:
                logger.debug("Command %s finished in %.3fs", name, time.monotonic() - started)

        return wrapper  # type: ignore[return-value]

    return decorator
