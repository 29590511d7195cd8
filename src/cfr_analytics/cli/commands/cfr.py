"""Commands backed by the CFR analytics endpoints."""

import asyncio

import click

from cfr_analytics.cli.logging import cli_command, get_cli_logger
from cfr_analytics.cli.output import emit_error, emit_service_error, emit_success
from cfr_analytics.cli.registry import get_context
from cfr_analytics.cli.resilience import handle_keyboard_interrupt
from cfr_analytics.clients import CFRAnalyticsClient, SiteAnalysisClient
from cfr_analytics.config.loader import config_summary
from cfr_analytics.core.collaborators import ViewRouter
from cfr_analytics.core.errors import AnalyticsServiceError
from cfr_analytics.views.dashboard import DashboardView
from cfr_analytics.views.regulation_viewer import RegulationViewerView
from cfr_analytics.views.title_analysis import TitleAnalysisView

logger = get_cli_logger()


@click.command("overview")
@click.pass_context
@cli_command("overview")
@handle_keyboard_interrupt()
def overview_cmd(ctx: click.Context) -> None:
    """Show the dashboard overview of all CFR titles."""
    config = get_context(ctx).config
    view = DashboardView(CFRAnalyticsClient(config=config), ViewRouter(), config=config)
    overview = asyncio.run(view.load_overview())

    if overview is None:
        emit_error(
            view.error_message,
            code="OVERVIEW_UNAVAILABLE",
            error_type="connectivity",
            remediation="Check that the backend is running at " + config.api_base_url,
        )
    emit_success(overview.model_dump(mode="json"))


@click.command("title")
@click.argument("title_number", type=click.IntRange(min=1))
@click.pass_context
@cli_command("title")
@handle_keyboard_interrupt()
def title_cmd(ctx: click.Context, title_number: int) -> None:
    """Analyze CFR title TITLE_NUMBER (base record plus enrichment)."""
    config = get_context(ctx).config
    view = TitleAnalysisView(title_number, CFRAnalyticsClient(config=config), ViewRouter())
    record = asyncio.run(view.load())

    if record is None:
        emit_error(
            view.error_message,
            code="TITLE_UNAVAILABLE",
            error_type="not_found",
            details={"title_number": title_number},
        )
    emit_success(
        {
            "title": record.to_dict(),
            "word_count_vs_average": view.word_count_difference,
            "redundancy_label": view.redundancy,
            "applied": [kind.value for kind in view.applied_kinds],
            "failed": [kind.value for kind in view.failed_kinds],
        }
    )


@click.command("regulation")
@click.argument("title_number", type=click.IntRange(min=1))
@click.argument("part_number")
@click.option("--history", is_flag=True, help="Also fetch the part's version history.")
@click.pass_context
@cli_command("regulation")
@handle_keyboard_interrupt()
def regulation_cmd(ctx: click.Context, title_number: int, part_number: str, history: bool) -> None:
    """Show the text and analytics of PART_NUMBER in CFR title TITLE_NUMBER."""
    config = get_context(ctx).config
    view = RegulationViewerView(
        CFRAnalyticsClient(config=config), title_number=title_number, part_number=part_number
    )
    content = asyncio.run(view.load())
    if content is None:
        emit_error(
            view.error_message,
            code="REGULATION_UNAVAILABLE",
            error_type="not_found",
            details={"title_number": title_number, "part_number": part_number},
        )

    data = {
        "regulation": content.model_dump(mode="json"),
        "complexity": view.complexity,
        "reading_time": view.estimated_reading_time,
        "compliance_burden": view.burden,
    }
    if history:
        if asyncio.run(view.load_history()) is None:
            emit_error(
                view.history_error_message,
                code="HISTORY_UNAVAILABLE",
                error_type="not_found",
                details={"title_number": title_number, "part_number": part_number},
            )
        data["history"] = view.history.model_dump(mode="json")
    emit_success(data)


@click.command("download")
@click.pass_context
@cli_command("download")
@handle_keyboard_interrupt()
def download_cmd(ctx: click.Context) -> None:
    """Trigger a bulk download of CFR data on the backend."""
    config = get_context(ctx).config
    client = CFRAnalyticsClient(config=config)
    try:
        status = asyncio.run(client.trigger_download())
    except AnalyticsServiceError as e:
        logger.error("Download failed: %s", e)
        emit_service_error(e)
    emit_success(status.model_dump(mode="json"))


@click.command("health")
@click.pass_context
@cli_command("health")
@handle_keyboard_interrupt()
def health_cmd(ctx: click.Context) -> None:
    """Check both backend services."""
    config = get_context(ctx).config

    async def check() -> list[bool]:
        results = await asyncio.gather(
            CFRAnalyticsClient(config=config).health_check(),
            SiteAnalysisClient(config=config).health_check(),
        )
        return list(results)

    cfr_ok, site_ok = asyncio.run(check())
    data = {
        "cfr_analytics": cfr_ok,
        "site_analysis": site_ok,
        "config": config_summary(config),
    }
    if not (cfr_ok and site_ok):
        emit_error(
            "One or more analytics services are unhealthy",
            code="UNHEALTHY",
            error_type="connectivity",
            details=data,
        )
    emit_success(data)
