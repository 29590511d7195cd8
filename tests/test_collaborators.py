"""Tests for the result store, router and notification center."""

import logging

import pytest

from cfr_analytics.core.collaborators import (
    Notification,
    NotificationCenter,
    NotificationLevel,
    UnknownViewError,
    ViewRouter,
)
from cfr_analytics.core.state import AnalysisResultStore
from cfr_analytics.models.site_analysis import SiteAnalysisResult


class TestAnalysisResultStore:
    def test_subscriber_gets_current_value_immediately(self):
        store = AnalysisResultStore()
        seen = []
        store.subscribe(seen.append)
        assert seen == [None]

    def test_set_and_clear_publish(self):
        store = AnalysisResultStore()
        result = SiteAnalysisResult(url="https://www.ecfr.gov/")
        seen = []
        store.subscribe(seen.append)

        store.set(result)
        assert store.latest is result
        store.clear()
        assert store.latest is None
        assert seen == [None, result, None]

    def test_late_subscriber_sees_latest(self):
        store = AnalysisResultStore()
        result = SiteAnalysisResult(url="https://www.ecfr.gov/")
        store.set(result)
        seen = []
        store.subscribe(seen.append)
        assert seen == [result]

    def test_unsubscribe(self):
        store = AnalysisResultStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.set(SiteAnalysisResult(url="x"))
        assert seen == [None]


class TestViewRouter:
    def test_starts_on_dashboard(self):
        router = ViewRouter()
        assert router.current == ("dashboard", {})

    def test_records_navigation(self):
        router = ViewRouter()
        router.navigate("regulation-viewer", title=40)
        assert router.current == ("regulation-viewer", {"title": 40})
        assert len(router.history) == 2

    def test_unknown_view(self):
        with pytest.raises(UnknownViewError):
            ViewRouter().navigate("settings")


class TestNotificationCenter:
    def test_records_and_logs(self, caplog):
        center = NotificationCenter()
        with caplog.at_level(logging.INFO):
            center.notify("Analysis failed. Please try again.", 5.0, NotificationLevel.ERROR)

        note = center.last
        assert isinstance(note, Notification)
        assert note.level is NotificationLevel.ERROR
        assert note.duration == 5.0
        assert "Analysis failed" in caplog.text

    def test_bounded(self):
        center = NotificationCenter(max_items=2)
        for i in range(3):
            center.notify(f"note {i}", 1.0)
        assert [n.message for n in center.notifications] == ["note 1", "note 2"]

    def test_clear(self):
        center = NotificationCenter()
        center.notify("hello", 3.0, "success")
        assert center.last.level is NotificationLevel.SUCCESS
        center.clear()
        assert center.last is None
