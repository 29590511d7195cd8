"""Staged website analysis command."""

import asyncio
from typing import Optional

import click

from cfr_analytics.cli.logging import cli_command, get_cli_logger
from cfr_analytics.cli.output import emit_error, emit_success
from cfr_analytics.cli.registry import get_context
from cfr_analytics.cli.resilience import handle_keyboard_interrupt
from cfr_analytics.clients import SiteAnalysisClient
from cfr_analytics.core.collaborators import NotificationCenter, ViewRouter
from cfr_analytics.core.errors import user_message
from cfr_analytics.core.sequencer import ProgressState, SequencePhase
from cfr_analytics.core.state import AnalysisResultStore
from cfr_analytics.views.analysis import FAILURE_MESSAGE, AnalysisView
from cfr_analytics.views.results import ResultsView

logger = get_cli_logger()


async def _no_delay(_seconds: float) -> None:
    await asyncio.sleep(0)


@click.command("analyze")
@click.option("--url", default=None, help="Site to analyze (default from config).")
@click.option("--no-delay", is_flag=True, help="Skip the simulated stage delays.")
@click.pass_context
@cli_command("analyze")
@handle_keyboard_interrupt()
def analyze_cmd(ctx: click.Context, url: Optional[str], no_delay: bool) -> None:
    """Run the staged website analysis and print the result summary."""
    config = get_context(ctx).config
    if url:
        config.site_url = url

    store = AnalysisResultStore()
    notifier = NotificationCenter()
    view = AnalysisView(
        SiteAnalysisClient(config=config),
        store,
        notifier,
        ViewRouter(),
        config=config,
        sleep_func=_no_delay if no_delay else None,
    )
    results = ResultsView(store)
    stages: list[str] = []

    def log_stage(state: ProgressState) -> None:
        if state.phase is SequencePhase.RUNNING:
            stages.append(state.label)
            logger.info("[%d/%d] %s", state.index + 1, len(config.stages), state.label)

    view.sequencer.subscribe(log_stage)

    async def run() -> Optional[Exception]:
        try:
            await view.start_analysis()
        except Exception as e:
            return e
        return None

    error = asyncio.run(run())
    if error is not None:
        emit_error(
            FAILURE_MESSAGE,
            code="ANALYSIS_FAILED",
            error_type="server",
            details={"reason": user_message(error), "stages": stages},
        )

    emit_success(
        {
            "url": config.site_url,
            "stages": stages,
            "summary": results.summary(),
            "result": store.latest.model_dump(mode="json", by_alias=True) if store.latest else None,
        }
    )
