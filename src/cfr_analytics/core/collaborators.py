"""Navigation and notification collaborators used by the view presenters.

Presenters depend only on the :class:`Navigator` and :class:`Notifier`
protocols. :class:`ViewRouter` and :class:`NotificationCenter` are the
in-process implementations used by the CLI and the tests.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

VIEW_DASHBOARD = "dashboard"
VIEW_TITLE_ANALYSIS = "title-analysis"
VIEW_ANALYSIS = "analysis"
VIEW_RESULTS = "results"
VIEW_REGULATION_VIEWER = "regulation-viewer"

KNOWN_VIEWS = frozenset(
    {VIEW_DASHBOARD, VIEW_TITLE_ANALYSIS, VIEW_ANALYSIS, VIEW_RESULTS, VIEW_REGULATION_VIEWER}
)


class Navigator(Protocol):
    def navigate(self, view: str, **params: Any) -> None: ...


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notifier(Protocol):
    def notify(self, message: str, duration: float, level: NotificationLevel) -> None: ...


class UnknownViewError(ValueError):
    """Raised when navigating to a view the router does not know."""


class ViewRouter:
    """Records navigation requests instead of rendering anything."""

    def __init__(self, initial: str = VIEW_DASHBOARD):
        self.current: Tuple[str, Dict[str, Any]] = (initial, {})
        self.history: List[Tuple[str, Dict[str, Any]]] = [self.current]

    def navigate(self, view: str, **params: Any) -> None:
        if view not in KNOWN_VIEWS:
            raise UnknownViewError(f"Unknown view: {view}")
        logger.debug("Navigating to %s %s", view, params)
        self.current = (view, dict(params))
        self.history.append(self.current)


@dataclass(frozen=True)
class Notification:
    message: str
    duration: float
    level: NotificationLevel
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """Keeps the most recent notifications in memory and logs each one."""

    def __init__(self, max_items: int = 50):
        self._items: Deque[Notification] = deque(maxlen=max_items)

    def notify(
        self,
        message: str,
        duration: float,
        level: NotificationLevel = NotificationLevel.INFO,
    ) -> None:
        note = Notification(message=message, duration=duration, level=NotificationLevel(level))
        self._items.append(note)
        log_level = logging.WARNING if note.level is NotificationLevel.ERROR else logging.INFO
        logger.log(log_level, "Notification (%s, %.1fs): %s", note.level.value, duration, message)

    @property
    def notifications(self) -> List[Notification]:
        return list(self._items)

    @property
    def last(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()
