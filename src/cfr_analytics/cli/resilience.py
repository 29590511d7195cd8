"""Interrupt handling for CLI commands."""

import functools
from typing import Any, Callable, TypeVar

from cfr_analytics.cli.logging import get_cli_logger
from cfr_analytics.cli.output import emit_error

F = TypeVar("F", bound=Callable[..., Any])


def handle_keyboard_interrupt() -> Callable[[F], F]:
    """Turn Ctrl-C into an error envelope instead of a traceback."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                get_cli_logger().warning("Interrupted by user")
                emit_error(
                    "Command interrupted",
                    code="INTERRUPTED",
                    error_type="interrupted",
                    remediation="Re-run the command to start over",
                )

        return wrapper  # type: ignore[return-value]

    return decorator
