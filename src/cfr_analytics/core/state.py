"""Application-scoped store for the latest site analysis result."""

import logging
from typing import Callable, Generic, Optional, TypeVar

from cfr_analytics.models.site_analysis import SiteAnalysisResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultStore(Generic[T]):
    """Holds one value and pushes it to subscribers.

    A new subscriber receives the current value (possibly None) immediately,
    then every subsequent change.
    """

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._subscribers: list[Callable[[Optional[T]], None]] = []

    @property
    def latest(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T]) -> None:
        self._value = value
        self._publish()

    def clear(self) -> None:
        self.set(None)

    def subscribe(self, callback: Callable[[Optional[T]], None]) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self._value)
            except Exception:
                logger.exception("Result store subscriber failed")


class AnalysisResultStore(ResultStore[SiteAnalysisResult]):
    """Shared between the analysis screen (writer) and results screen (reader)."""
