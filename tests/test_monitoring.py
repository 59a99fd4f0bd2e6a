"""
Statistics, unknown-rate check and settings tests
"""
import pytest
from loguru import logger

from series_pipeline import config
from series_pipeline.aggregator import normalize_all_events
from series_pipeline.config import PipelineSettings, get_settings, configure_logging
from series_pipeline.monitoring import (
    ClassificationStats,
    check_unknown_rate,
    get_statistics,
    format_statistics_report,
    log_statistics_report,
)


@pytest.fixture
def normalized_events():
    return [
        {
            "eventId": 1,
            "classes": [
                {"id": 1, "name": "Herrer DPF50"},
                {"id": 2, "name": "Damer DPF25"},
            ],
            "series": [
                {"name": "Herrer DPF50", "ranking": "DPF50", "category": "Herrer", "playerCount": 8},
                {"name": "Damer DPF25", "ranking": "DPF25", "category": "Damer"},
            ],
            "unknownSeries": [],
        },
        {
            "eventId": 2,
            "classes": [
                {"id": 3, "name": "Herrer DPF50"},
                {"id": 4, "name": "Finals"},
            ],
            "series": [
                {"name": "Herrer DPF50", "ranking": "DPF50", "category": "Herrer", "playerCount": 12},
            ],
            "unknownSeries": ["Finals"],
        },
    ]


# =============================================================================
# Statistics
# =============================================================================

class TestGetStatistics:
    """Statistics over normalized events"""

    def test_totals(self, normalized_events):
        stats = get_statistics(normalized_events)
        assert stats.total_events == 2
        assert stats.total_classes == 4
        assert stats.total_series == 3
        assert stats.total_unknown_series == 1
        assert stats.total_player_count == 20

    def test_breakdowns(self, normalized_events):
        stats = get_statistics(normalized_events)
        assert stats.by_category == {"Herrer": 2, "Damer": 1}
        assert stats.by_category_player_count == {"Herrer": 20, "Damer": 0}
        assert stats.by_ranking == {"DPF50": 2, "DPF25": 1}
        assert stats.by_series_name == {"Herrer DPF50": 2, "Damer DPF25": 1}
        assert stats.by_series_name_player_count == {"Herrer DPF50": 20, "Damer DPF25": 0}

    def test_unknown_names_deduplicated(self):
        events = [
            {"classes": [{"id": 1, "name": "Finals"}], "unknownSeries": ["Finals"]},
            {"classes": [{"id": 2, "name": "Finals"}, {"id": 3, "name": "Semis"}],
             "unknownSeries": ["Finals", "Semis"]},
        ]
        stats = get_statistics(events)
        assert stats.total_unknown_series == 3
        assert stats.unknown_series_names == ["Finals", "Semis"]
        assert stats.unknown_rate == 1.0

    def test_empty(self):
        stats = get_statistics([])
        assert stats.total_events == 0
        assert stats.unknown_rate == 0.0

    def test_to_dict(self, normalized_events):
        data = get_statistics(normalized_events).to_dict()
        assert data["totalEvents"] == 2
        assert data["unknownSeriesNames"] == ["Finals"]
        assert data["byRankingPlayerCount"] == {"DPF50": 20, "DPF25": 0}

    def test_on_pipeline_output(self, sample_event):
        stats = get_statistics(normalize_all_events([sample_event]))
        assert stats.total_classes == 6
        assert stats.total_series == 5
        assert stats.unknown_series_names == ["Finals"]
        assert stats.total_player_count == 36


# =============================================================================
# Report
# =============================================================================

class TestStatisticsReport:
    """Statistics report lines"""

    def test_report_lines(self, normalized_events):
        lines = format_statistics_report(get_statistics(normalized_events))
        assert "Total events: 2" in lines
        assert "Unknown series entries: 1" in lines
        assert "  Herrer: 2 events / 20 players" in lines
        assert "  - Finals" in lines

    def test_rankings_in_numeric_order(self):
        stats = ClassificationStats(by_ranking={"DPF100": 1, "DPF25": 3, "DPF1000": 2})
        lines = format_statistics_report(stats)
        ranking_lines = [line for line in lines if line.startswith("  DPF")]
        assert [line.split(":")[0].strip() for line in ranking_lines] == ["DPF25", "DPF100", "DPF1000"]

    def test_limits(self):
        stats = ClassificationStats(
            by_series_name={"A": 3, "B": 2, "C": 1},
            unknown_series_names=["x", "y", "z"],
        )
        lines = format_statistics_report(stats, top_series=2, unknown_limit=2)
        assert "  A: 3 events / 0 players" in lines
        assert "  C: 1 events / 0 players" not in lines
        assert "  - z" not in lines
        assert lines[-1] == "  ... and 1 more"

    def test_logged(self, normalized_events, log_messages):
        settings = PipelineSettings(report_top_series=1, report_unknown_limit=5)
        lines = log_statistics_report(get_statistics(normalized_events), settings=settings)
        assert lines == log_messages[-len(lines):]


# =============================================================================
# Unknown-rate check
# =============================================================================

class TestCheckUnknownRate:
    """Unknown-rate threshold check"""

    def test_within_threshold(self):
        stats = ClassificationStats(total_classes=100, total_unknown_series=2)
        assert check_unknown_rate(stats, settings=PipelineSettings(unknown_rate_threshold=0.05)) is None

    def test_at_threshold_is_fine(self):
        stats = ClassificationStats(total_classes=4, total_unknown_series=1)
        assert check_unknown_rate(stats, threshold=0.25) is None

    def test_alert_raised(self, normalized_events, log_messages):
        alert = check_unknown_rate(
            get_statistics(normalized_events),
            settings=PipelineSettings(unknown_rate_threshold=0.05),
        )

        assert alert.unknown_rate == pytest.approx(0.25)
        assert alert.threshold == 0.05
        assert (alert.unknown, alert.total_classes) == (1, 4)
        assert alert.sample_names == ["Finals"]
        assert any("Unknown rate above threshold" in m for m in log_messages)

    def test_explicit_threshold_wins(self, normalized_events):
        stats = get_statistics(normalized_events)
        assert check_unknown_rate(stats, threshold=0.3) is None
        assert check_unknown_rate(stats, threshold=0.1) is not None

    def test_sample_names_capped(self):
        names = [f"Class {i}" for i in range(15)]
        stats = ClassificationStats(total_classes=15, total_unknown_series=15, unknown_series_names=names)
        alert = check_unknown_rate(stats, threshold=0.05)
        assert alert.sample_names == names[:10]

    def test_to_dict(self):
        stats = ClassificationStats(total_classes=10, total_unknown_series=5, unknown_series_names=["Finals"])
        data = check_unknown_rate(stats, threshold=0.1).to_dict()
        assert data["unknownRate"] == 0.5
        assert data["totalClasses"] == 10
        assert data["sampleNames"] == ["Finals"]
        assert "50.0%" in check_unknown_rate(stats, threshold=0.1).message

    def test_no_classes(self):
        assert check_unknown_rate(ClassificationStats(), threshold=0.0) is None


# =============================================================================
# Settings and logging
# =============================================================================

class TestSettings:
    """Pipeline settings"""

    def test_defaults(self, monkeypatch):
        for var in ("SERIES_LOG_LEVEL", "SERIES_UNKNOWN_RATE_THRESHOLD", "SERIES_REPORT_TOP_SERIES"):
            monkeypatch.delenv(var, raising=False)
        settings = PipelineSettings()
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.unknown_rate_threshold == 0.05
        assert settings.report_top_series == 20

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SERIES_REPORT_TOP_SERIES", "5")
        monkeypatch.setenv("series_unknown_rate_threshold", "0.2")
        settings = PipelineSettings()
        assert settings.report_top_series == 5
        assert settings.unknown_rate_threshold == 0.2

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_dotenv_read_on_first_use(self, monkeypatch):
        calls = []
        monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: calls.append(args) or True)
        get_settings.cache_clear()
        try:
            get_settings()
            get_settings()
        finally:
            get_settings.cache_clear()
        assert len(calls) == 1

    def test_configure_logging_file_sink(self, tmp_path):
        log_file = tmp_path / "series.log"
        configure_logging(PipelineSettings(log_level="warning", log_file=str(log_file)))
        try:
            logger.debug("classifier debug line")
        finally:
            logger.remove()
        assert "classifier debug line" in log_file.read_text(encoding="utf-8")
