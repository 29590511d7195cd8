"""Entry point for the ``cfr-analytics`` command."""

from typing import Optional

import click

from cfr_analytics.cli.commands.analysis import analyze_cmd
from cfr_analytics.cli.commands.cfr import (
    download_cmd,
    health_cmd,
    overview_cmd,
    regulation_cmd,
    title_cmd,
)
from cfr_analytics.cli.registry import CLIContext
from cfr_analytics.config import AnalyticsConfig, set_config


@click.group()
@click.option("--api-url", default=None, help="Backend base URL (overrides config).")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a cfr-analytics TOML config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, api_url: Optional[str], config_file: Optional[str], verbose: bool) -> None:
    """CFR analytics client: overview, per-title analysis and site analysis."""
    config = AnalyticsConfig.from_env(config_file)
    if api_url:
        config.api_base_url = api_url.rstrip("/")
    if verbose:
        config.log_level = "DEBUG"
    set_config(config)
    config.setup_logging()
    ctx.obj = CLIContext(config=config, verbose=verbose)


cli.add_command(overview_cmd)
cli.add_command(title_cmd)
cli.add_command(regulation_cmd)
cli.add_command(download_cmd)
cli.add_command(health_cmd)
cli.add_command(analyze_cmd)


if __name__ == "__main__":
    cli()
