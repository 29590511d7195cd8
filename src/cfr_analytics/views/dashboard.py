"""Dashboard presenter: overview of all titles and the bulk download trigger."""

import asyncio
import logging
from typing import Optional

from cfr_analytics.clients.cfr import CFRAnalyticsClient
from cfr_analytics.config import AnalyticsConfig, get_config
from cfr_analytics.core.collaborators import (
    VIEW_TITLE_ANALYSIS,
    Navigator,
    NotificationLevel,
    Notifier,
)
from cfr_analytics.core.errors import AnalyticsServiceError, user_message
from cfr_analytics.core.resilience import SleepFunc
from cfr_analytics.models.titles import CFROverview, DownloadStatus

logger = logging.getLogger(__name__)


class DashboardView:
    def __init__(
        self,
        client: CFRAnalyticsClient,
        navigator: Navigator,
        notifier: Optional[Notifier] = None,
        *,
        config: Optional[AnalyticsConfig] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self._client = client
        self._navigator = navigator
        self._notifier = notifier
        self._config = config or get_config()
        self._sleep = sleep_func or asyncio.sleep

        self.overview: Optional[CFROverview] = None
        self.is_loading = False
        self.is_downloading = False
        self.error_message = ""
        self.last_download: Optional[DownloadStatus] = None
        self.refresh_task: Optional[asyncio.Task] = None

    async def load_overview(self) -> Optional[CFROverview]:
        self.is_loading = True
        self.error_message = ""
        try:
            self.overview = await self._client.get_overview()
        except AnalyticsServiceError as e:
            logger.error("Failed to load CFR overview: %s", e)
            self.error_message = user_message(e)
        finally:
            self.is_loading = False
        return self.overview

    async def trigger_download(self) -> Optional[DownloadStatus]:
        """Start a bulk download and refresh the overview shortly after.

        The refresh runs as a background task (``refresh_task``) so the
        caller is not held for the refresh delay.
        """
        self.is_downloading = True
        try:
            status = await self._client.trigger_download()
        except AnalyticsServiceError as e:
            logger.error("Download failed: %s", e)
            if self._notifier is not None:
                self._notifier.notify(
                    user_message(e), self._config.error_toast_seconds, NotificationLevel.ERROR
                )
            return None
        finally:
            self.is_downloading = False

        logger.info("Download initiated: %s", status.message or status.status)
        self.last_download = status
        self.refresh_task = asyncio.ensure_future(self._refresh_later())
        return status

    async def _refresh_later(self) -> None:
        await self._sleep(self._config.download_refresh_delay)
        await self.load_overview()

    def view_title(self, title_number: int) -> None:
        logger.info("Viewing CFR Title %s", title_number)
        self._navigator.navigate(VIEW_TITLE_ANALYSIS, title_number=title_number)
