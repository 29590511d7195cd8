"""Website analysis presenter driving the staged progress display."""

import asyncio
import logging
from typing import Optional

from cfr_analytics.clients.site_analysis import SiteAnalysisClient
from cfr_analytics.config import AnalyticsConfig, get_config
from cfr_analytics.core.collaborators import (
    VIEW_RESULTS,
    Navigator,
    NotificationLevel,
    Notifier,
)
from cfr_analytics.core.sequencer import (
    ProgressSequencer,
    ProgressState,
    SequencePhase,
    SleepFunc,
    stages_from_config,
)
from cfr_analytics.core.state import AnalysisResultStore
from cfr_analytics.models.site_analysis import SiteAnalysisResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "eCFR analysis completed successfully!"
FAILURE_MESSAGE = "Analysis failed. Please try again."


class AnalysisView:
    """Binds a :class:`ProgressSequencer` to the site analysis call.

    The flags mirror what the screen shows: ``is_analyzing`` while stages
    run, ``is_completed`` once the result is stored, ``current_step`` and
    ``current_step_index`` for the active stage (-1 when idle).
    """

    def __init__(
        self,
        client: SiteAnalysisClient,
        store: AnalysisResultStore,
        notifier: Notifier,
        navigator: Navigator,
        *,
        config: Optional[AnalyticsConfig] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self._client = client
        self._store = store
        self._notifier = notifier
        self._navigator = navigator
        self._config = config or get_config()

        self.is_analyzing = False
        self.is_completed = False
        self.current_step = ""
        self.current_step_index = -1

        self.sequencer = ProgressSequencer(
            stages_from_config(self._config.stages),
            self._analyze,
            sleep=sleep_func,
        )
        self.sequencer.subscribe(self._on_state, on_error=self._on_error)

    def start_analysis(self) -> "asyncio.Task[SiteAnalysisResult]":
        """Start the staged analysis.

        Raises:
            SequenceInProgressError: If an analysis is already running.
            SequenceNotResetError: If the last analysis completed and
                :meth:`run_new_analysis` has not been called since.
        """
        task = self.sequencer.start()
        task.add_done_callback(_consume_task_error)
        return task

    async def _analyze(self) -> SiteAnalysisResult:
        result = await self._client.analyze_site(self._config.site_url)
        self._store.set(result)
        return result

    def _on_state(self, state: ProgressState) -> None:
        self.current_step = state.label
        self.current_step_index = state.index
        self.is_analyzing = state.phase is SequencePhase.RUNNING
        self.is_completed = state.phase is SequencePhase.COMPLETE
        if state.phase is SequencePhase.COMPLETE:
            self._notifier.notify(
                SUCCESS_MESSAGE, self._config.success_toast_seconds, NotificationLevel.SUCCESS
            )

    def _on_error(self, error: BaseException) -> None:
        logger.error("Analysis failed: %s", error)
        self._notifier.notify(
            FAILURE_MESSAGE, self._config.error_toast_seconds, NotificationLevel.ERROR
        )

    def view_results(self) -> None:
        self._navigator.navigate(VIEW_RESULTS)

    def run_new_analysis(self) -> None:
        self.sequencer.reset()
        self._store.clear()


def _consume_task_error(task: "asyncio.Task[object]") -> None:
    # Failures are reported through the sequencer's error event
    if not task.cancelled():
        task.exception()
