"""Per-invocation CLI context shared between the group and its commands."""

from dataclasses import dataclass

import click

from cfr_analytics.config import AnalyticsConfig


@dataclass
class CLIContext:
    config: AnalyticsConfig
    verbose: bool = False


def get_context(ctx: click.Context) -> CLIContext:
    """Return the CLIContext stored on the root click context."""
    obj = ctx.find_object(CLIContext)
    if obj is None:
        raise click.UsageError("CLI context not initialized")
    return obj
