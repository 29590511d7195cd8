"""Tests for the headless view presenters."""

import asyncio

import httpx
import pytest

from cfr_analytics.clients import CFRAnalyticsClient, SiteAnalysisClient
from cfr_analytics.config import AnalyticsConfig, StageSetting
from cfr_analytics.core.collaborators import NotificationCenter, NotificationLevel, ViewRouter
from cfr_analytics.core.errors import (
    CONNECTIVITY_MESSAGE,
    SequenceInProgressError,
    SequenceNotResetError,
)
from cfr_analytics.core.state import AnalysisResultStore
from cfr_analytics.models.site_analysis import SiteAnalysisResult
from cfr_analytics.sources import FragmentKind
from cfr_analytics.views import (
    AnalysisView,
    DashboardView,
    RegulationViewerView,
    ResultsView,
    TitleAnalysisView,
)
from cfr_analytics.views.results import format_bytes

from conftest import BASE_URL, make_mock_response, mock_http, no_sleep, route_by_path

OVERVIEW = "/api/cfr/overview"
WORD_COUNT = "/api/mvp/title/40/agencies/word-count"
REDUNDANCY = "/api/mvp/title/40/redundancy-analysis"
CHANGES = "/api/mvp/title/40/historical-changes"


@pytest.fixture
def cfr_client():
    return CFRAnalyticsClient(base_url=BASE_URL, sleep_func=no_sleep)


@pytest.fixture
def router():
    return ViewRouter()


@pytest.fixture
def notifier():
    return NotificationCenter()


class TestDashboardView:
    @pytest.mark.asyncio
    async def test_load_overview(self, cfr_client, router, overview_payload):
        view = DashboardView(cfr_client, router)
        with mock_http(get=make_mock_response(json_data=overview_payload)):
            overview = await view.load_overview()

        assert overview.total_titles == 50
        assert view.overview is overview
        assert view.is_loading is False
        assert view.error_message == ""

    @pytest.mark.asyncio
    async def test_load_overview_failure(self, cfr_client, router):
        view = DashboardView(cfr_client, router)
        with mock_http(get=httpx.ConnectError("refused")):
            assert await view.load_overview() is None

        assert view.error_message == CONNECTIVITY_MESSAGE
        assert view.is_loading is False

    @pytest.mark.asyncio
    async def test_download_refreshes_overview_later(self, cfr_client, router, overview_payload, sleep_calls):
        config = AnalyticsConfig(api_base_url=BASE_URL, download_refresh_delay=2.0)
        view = DashboardView(cfr_client, router, config=config, sleep_func=sleep_calls)
        with mock_http(
            get=make_mock_response(json_data=overview_payload),
            post=make_mock_response(json_data={"status": "started", "message": "Bulk download initiated"}),
        ) as mock_client:
            status = await view.trigger_download()
            assert view.is_downloading is False
            await view.refresh_task

        assert status.status == "started"
        assert sleep_calls.calls == [2.0]
        assert mock_client.get.await_count == 1
        assert view.overview is not None

    @pytest.mark.asyncio
    async def test_download_failure_notifies(self, cfr_client, router, notifier):
        view = DashboardView(cfr_client, router, notifier)
        with mock_http(post=make_mock_response(status_code=500, json_data={"error": "Disk full"})):
            assert await view.trigger_download() is None

        assert view.is_downloading is False
        assert view.refresh_task is None
        assert notifier.last.message == "Disk full"
        assert notifier.last.level is NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_download_malformed_reply_notifies(self, cfr_client, router, notifier):
        view = DashboardView(cfr_client, router, notifier)
        with mock_http(post=make_mock_response(json_data={"status": None})):
            assert await view.trigger_download() is None

        assert view.is_downloading is False
        assert view.refresh_task is None
        assert view.last_download is None
        assert notifier.last.level is NotificationLevel.ERROR

    def test_view_title_navigates(self, cfr_client, router):
        DashboardView(cfr_client, router).view_title(21)
        assert router.current == ("title-analysis", {"title_number": 21})


class TestTitleAnalysisView:
    @pytest.mark.asyncio
    async def test_base_and_all_fragments(self, cfr_client, router, overview_payload):
        routes = {
            OVERVIEW: make_mock_response(json_data=overview_payload),
            WORD_COUNT: make_mock_response(json_data={"totalWords": 127500, "regulationCount": 33}),
            REDUNDANCY: make_mock_response(json_data=[{"deregulationPriorityScore": 8}]),
            CHANGES: make_mock_response(json_data=[{"changeDate": "2020-01-01T00:00:00Z"}]),
        }
        view = TitleAnalysisView(40, cfr_client, router)
        with mock_http(get=route_by_path(routes)):
            record = await view.load()

        assert view.is_loading is False
        assert record.name == "Protection of Environment"
        assert record.word_count == 127500
        assert record.part_count == 33
        assert record.burden_level == "HIGH"
        assert record.redundancy_score == 8
        assert record.deregulation_opportunities == 1
        assert record.recent_changes == 1
        assert record.change_trend == "Decreasing"
        assert view.failed_kinds == []
        assert view.word_count_difference == "+50.0%"
        assert view.redundancy == "High Redundancy"

    @pytest.mark.asyncio
    async def test_one_fragment_fails(self, cfr_client, router, overview_payload):
        routes = {
            OVERVIEW: make_mock_response(json_data=overview_payload),
            WORD_COUNT: make_mock_response(json_data={"totalWords": 20000}),
            REDUNDANCY: make_mock_response(status_code=500),
            CHANGES: make_mock_response(json_data=None),
        }
        view = TitleAnalysisView(40, cfr_client, router)
        with mock_http(get=route_by_path(routes)):
            record = await view.load()

        assert view.is_loading is False
        assert record.word_count == 20000
        assert record.redundancy_score == 0
        assert record.change_trend == "N/A"
        assert view.failed_kinds == [FragmentKind.REDUNDANCY]
        assert view.applied_kinds == [FragmentKind.WORD_COUNT]

    @pytest.mark.asyncio
    async def test_base_failure_exposes_no_record(self, cfr_client, router):
        view = TitleAnalysisView(40, cfr_client, router)
        with mock_http(get=httpx.ConnectError("refused")) as mock_client:
            assert await view.load() is None

        assert view.record is None
        assert view.error_message == CONNECTIVITY_MESSAGE
        assert view.is_loading is False
        # no enrichment requests after the base failed
        assert all(call.args[0].endswith(OVERVIEW) for call in mock_client.get.call_args_list)

    @pytest.mark.asyncio
    async def test_title_not_in_overview(self, cfr_client, router, overview_payload):
        view = TitleAnalysisView(7, cfr_client, router)
        with mock_http(get=make_mock_response(json_data=overview_payload)):
            assert await view.load() is None

        assert view.error_message == "CFR Title 7 not found."
        assert view.is_loading is False

    @pytest.mark.asyncio
    async def test_retry_reloads(self, cfr_client, router, overview_payload):
        view = TitleAnalysisView(40, cfr_client, router)
        with mock_http(get=make_mock_response(status_code=404)):
            await view.load()
        assert view.record is None

        routes = {
            OVERVIEW: make_mock_response(json_data=overview_payload),
            WORD_COUNT: make_mock_response(json_data=None),
            REDUNDANCY: make_mock_response(json_data=[]),
            CHANGES: make_mock_response(json_data=[]),
        }
        with mock_http(get=route_by_path(routes)):
            record = await view.retry()

        assert record is not None
        assert view.error_message == ""
        assert record.word_count == 0

    def test_navigation(self, cfr_client, router):
        view = TitleAnalysisView(40, cfr_client, router)
        view.view_regulation_content()
        assert router.current == ("regulation-viewer", {"title": 40})
        view.go_back()
        assert router.current == ("dashboard", {})

    @pytest.mark.parametrize(
        "value,average,expected",
        [(0, 85000, "N/A"), (100, 0, "N/A"), (85000, 85000, "0.0%"), (42500, 85000, "-50.0%")],
    )
    def test_percentage_difference(self, value, average, expected):
        assert TitleAnalysisView.percentage_difference(value, average) == expected

    @pytest.mark.parametrize("score,label", [(0, "Low Redundancy"), (3, "Low Redundancy"), (6, "Moderate Redundancy"), (7, "High Redundancy")])
    def test_redundancy_label(self, score, label):
        assert TitleAnalysisView.redundancy_label(score) == label


@pytest.fixture
def fast_config():
    return AnalyticsConfig(
        api_base_url=BASE_URL,
        stages=[StageSetting("Fetching", 0.0), StageSetting("Reporting", 0.0)],
    )


class TestAnalysisView:
    def make_view(self, config, notifier, router, store=None):
        return AnalysisView(
            SiteAnalysisClient(config=config),
            store or AnalysisResultStore(),
            notifier,
            router,
            config=config,
            sleep_func=no_sleep,
        )

    @pytest.mark.asyncio
    async def test_successful_analysis(self, fast_config, notifier, router, site_analysis_payload):
        store = AnalysisResultStore()
        view = self.make_view(fast_config, notifier, router, store)
        steps = []
        view.sequencer.subscribe(lambda state: steps.append((view.current_step_index, view.current_step)))

        with mock_http(get=make_mock_response(json_data=site_analysis_payload)):
            result = await view.start_analysis()

        assert steps == [(0, "Fetching"), (1, "Reporting"), (2, "Analysis completed successfully!")]
        assert view.is_completed is True
        assert view.is_analyzing is False
        assert store.latest is result
        assert notifier.last.level is NotificationLevel.SUCCESS
        assert notifier.last.duration == 3.0

    @pytest.mark.asyncio
    async def test_failed_analysis(self, fast_config, notifier, router):
        store = AnalysisResultStore()
        view = self.make_view(fast_config, notifier, router, store)
        with mock_http(get=make_mock_response(status_code=500)):
            task = view.start_analysis()
            with pytest.raises(Exception):
                await task

        assert view.is_analyzing is False
        assert view.is_completed is False
        assert view.current_step_index == -1
        assert store.latest is None
        assert notifier.last.message == "Analysis failed. Please try again."
        assert notifier.last.duration == 5.0

    @pytest.mark.asyncio
    async def test_double_start_rejected(self, fast_config, notifier, router, site_analysis_payload):
        view = self.make_view(fast_config, notifier, router)
        with mock_http(get=make_mock_response(json_data=site_analysis_payload)):
            task = view.start_analysis()
            assert view.is_analyzing is True
            with pytest.raises(SequenceInProgressError):
                view.start_analysis()
            await task

    @pytest.mark.asyncio
    async def test_run_new_analysis_resets(self, fast_config, notifier, router, site_analysis_payload):
        store = AnalysisResultStore()
        view = self.make_view(fast_config, notifier, router, store)
        with mock_http(get=make_mock_response(json_data=site_analysis_payload)):
            await view.start_analysis()

        view.run_new_analysis()
        assert view.is_completed is False
        assert view.current_step_index == -1
        assert view.current_step == ""
        assert store.latest is None

    @pytest.mark.asyncio
    async def test_restart_requires_new_analysis(self, fast_config, notifier, router, site_analysis_payload):
        store = AnalysisResultStore()
        view = self.make_view(fast_config, notifier, router, store)
        with mock_http(get=make_mock_response(json_data=site_analysis_payload)):
            first = await view.start_analysis()
            with pytest.raises(SequenceNotResetError):
                view.start_analysis()
            assert view.is_completed is True
            assert store.latest is first

            view.run_new_analysis()
            second = await view.start_analysis()

        assert store.latest is second
        assert [s.index for s in view.sequencer.history] == [-1, 0, 1, 2]

    def test_view_results(self, fast_config, notifier, router):
        self.make_view(fast_config, notifier, router).view_results()
        assert router.current == ("results", {})


class TestResultsView:
    def test_follows_store(self, site_analysis_payload):
        store = AnalysisResultStore()
        view = ResultsView(store)
        assert view.result is None
        assert view.summary() == {}

        store.set(SiteAnalysisResult.model_validate(site_analysis_payload))
        assert view.summary() == {
            "accessibility": "WCAG AA",
            "performance": "Excellent",
            "usability": "Adequate",
            "compliance": "Limited Compliance",
            "page_size": "1.5 MB",
        }

    def test_close_unsubscribes(self):
        store = AnalysisResultStore()
        view = ResultsView(store)
        view.close()
        store.set(SiteAnalysisResult(url="x"))
        assert view.result is None

    def test_run_new_analysis_navigates(self):
        router = ViewRouter()
        ResultsView(AnalysisResultStore(), router).run_new_analysis()
        assert router.current == ("analysis", {})

    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 Bytes"), (512, "512 Bytes"), (1024, "1 KB"), (1536, "1.5 KB"), (5 * 1024**3, "5 GB")],
    )
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    @pytest.mark.parametrize("level,text", [(0, "Below A"), (3, "AAA"), (9, "Unknown")])
    def test_wcag_level_text(self, level, text):
        assert ResultsView.wcag_level_text(level) == text

    @pytest.mark.parametrize(
        "score,text", [(95, "Excellent"), (80, "Good"), (70, "Fair"), (60, "Needs Improvement"), (10, "Poor")]
    )
    def test_performance_description(self, score, text):
        assert ResultsView.performance_description(score) == text

    def test_usability_and_compliance(self):
        assert ResultsView.usability_description(90) == "Highly Usable"
        assert ResultsView.usability_description(59) == "Poor Usability"
        assert ResultsView.compliance_description(85) == "Mostly Compliant"
        assert ResultsView.compliance_description(0) == "Non-Compliant"


REGULATION = {
    "titleNumber": 40,
    "partNumber": "100",
    "title": "Environmental Protection Standards",
    "content": "PART 100 - STANDARDS\n\n§ 100.1 Purpose and scope.",
    "analytics": {"wordCount": 1247, "complexityScore": 8.2, "downloadedAt": 1700000000000},
}


class TestRegulationViewerView:
    @pytest.mark.asyncio
    async def test_load_content(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        with mock_http(get=make_mock_response(json_data=REGULATION)):
            content = await view.load()

        assert content.title == "Environmental Protection Standards"
        assert view.is_loading is False
        assert view.error_message == ""
        assert view.complexity == "High complexity"
        assert view.deregulation_risk == "High"
        assert view.burden == "moderate"
        assert view.estimated_reading_time == "7 min"

    @pytest.mark.asyncio
    async def test_load_failure_shows_nothing(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        with mock_http(get=httpx.ConnectError("refused")):
            assert await view.load() is None

        assert view.content is None
        assert view.error_message == CONNECTIVITY_MESSAGE
        assert view.is_loading is False

    @pytest.mark.asyncio
    async def test_load_without_part_is_noop(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40)
        with mock_http(get=make_mock_response(json_data=REGULATION)) as mock_client:
            assert await view.load() is None
        assert mock_client.get.await_count == 0
        assert view.can_load is False

    @pytest.mark.asyncio
    async def test_load_history(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        payload = {"titleNumber": 40, "partNumber": "100", "versions": [{"summary": "Initial"}], "changeFrequency": "Rare"}
        with mock_http(get=make_mock_response(json_data=payload)):
            history = await view.load_history()

        assert history.version_count == 1
        assert view.is_loading_history is False

    @pytest.mark.asyncio
    async def test_history_failure(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        with mock_http(get=make_mock_response(status_code=500, json_data={"error": "History unavailable"})):
            assert await view.load_history() is None
        assert view.history_error_message == "History unavailable"

    @pytest.mark.asyncio
    async def test_select_title_clears_part(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        with mock_http(get=make_mock_response(json_data=REGULATION)):
            await view.load()

        view.select_title(21)
        assert (view.title_number, view.part_number) == (21, "")
        assert view.content is None
        assert view.history is None

    @pytest.mark.asyncio
    async def test_export_text(self, cfr_client, router):
        view = RegulationViewerView(cfr_client, router, title_number=40, part_number="100")
        assert view.export_text() is None
        with mock_http(get=make_mock_response(json_data=REGULATION)):
            await view.load()

        filename, text = view.export_text()
        assert filename == "CFR_40_100.txt"
        assert text.startswith("CFR Title 40, Part 100\nEnvironmental Protection Standards")
        assert "- Word Count: 1247" in text
        assert "- Downloaded: 2023-11-14T22:13:20+00:00" in text

    def test_go_back(self, cfr_client, router):
        RegulationViewerView(cfr_client, router, title_number=40).go_back()
        assert router.current == ("title-analysis", {"title_number": 40})

    @pytest.mark.parametrize("score,level", [(9.0, "High"), (8.0, "High"), (6.5, "Medium"), (2.0, "Low")])
    def test_complexity_level(self, score, level):
        assert RegulationViewerView.complexity_level(score) == level

    def test_reading_time_rounds_up(self):
        assert RegulationViewerView.reading_time(201) == "2 min"
        assert RegulationViewerView.reading_time(0) == "0 min"
