"""
Classification statistics and unknown-rate check

Tracks how many classes end up in series versus the unknown bucket, so
regressions in the classifier show up as a logged alert instead of
exceptions.
"""

from typing import Dict, Any, List, Optional, Iterable
from datetime import datetime
from loguru import logger
from dataclasses import dataclass, field

from .config import PipelineSettings, get_settings


# ==================== Statistics ====================

@dataclass
class ClassificationStats:
    """Counts over a set of normalized events"""
    total_events: int = 0
    total_classes: int = 0
    total_series: int = 0
    total_unknown_series: int = 0
    total_player_count: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_category_player_count: Dict[str, int] = field(default_factory=dict)
    by_ranking: Dict[str, int] = field(default_factory=dict)
    by_ranking_player_count: Dict[str, int] = field(default_factory=dict)
    by_series_name: Dict[str, int] = field(default_factory=dict)
    by_series_name_player_count: Dict[str, int] = field(default_factory=dict)
    unknown_series_names: List[str] = field(default_factory=list)

    @property
    def unknown_rate(self) -> float:
        """Share of kept classes that produced no series"""
        if self.total_classes == 0:
            return 0.0
        return self.total_unknown_series / self.total_classes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEvents": self.total_events,
            "totalClasses": self.total_classes,
            "totalSeries": self.total_series,
            "totalUnknownSeries": self.total_unknown_series,
            "totalPlayerCount": self.total_player_count,
            "byCategory": dict(self.by_category),
            "byCategoryPlayerCount": dict(self.by_category_player_count),
            "byRanking": dict(self.by_ranking),
            "byRankingPlayerCount": dict(self.by_ranking_player_count),
            "bySeriesName": dict(self.by_series_name),
            "bySeriesNamePlayerCount": dict(self.by_series_name_player_count),
            "unknownSeriesNames": list(self.unknown_series_names),
        }


def _field(item: Any, name: str, attr: str) -> Any:
    """Read a series field from either a wire mapping or a Series model"""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, attr, None)


def _increment(counter: Dict[str, int], key: str, amount: int = 1) -> None:
    counter[key] = counter.get(key, 0) + amount


def get_statistics(events: Iterable[Dict[str, Any]]) -> ClassificationStats:
    """
    Aggregate statistics over normalized events.

    Series counts are per event (a series present in two events counts
    twice); missing player counts add zero.
    """
    stats = ClassificationStats()

    for event in events or []:
        stats.total_events += 1
        stats.total_classes += len(event.get("classes") or [])

        for s in event.get("series") or []:
            name = _field(s, "name", "name")
            category = _field(s, "category", "category")
            ranking = _field(s, "ranking", "ranking")
            player_count = _field(s, "playerCount", "player_count") or 0

            stats.total_series += 1
            stats.total_player_count += player_count
            _increment(stats.by_series_name, name)
            _increment(stats.by_series_name_player_count, name, player_count)

            if category:
                _increment(stats.by_category, category)
                _increment(stats.by_category_player_count, category, player_count)

            if ranking:
                _increment(stats.by_ranking, ranking)
                _increment(stats.by_ranking_player_count, ranking, player_count)

        for name in event.get("unknownSeries") or []:
            stats.total_unknown_series += 1
            if name not in stats.unknown_series_names:
                stats.unknown_series_names.append(name)

    return stats


def _ranking_number(ranking: str) -> int:
    digits = "".join(ch for ch in ranking if ch.isdigit())
    return int(digits) if digits else 0


def format_statistics_report(
    stats: ClassificationStats,
    top_series: int = 20,
    unknown_limit: int = 30,
) -> List[str]:
    """Human-readable summary lines for a normalization run"""
    lines = [
        "=== Normalization Statistics ===",
        f"Total events: {stats.total_events}",
        f"Total classes: {stats.total_classes}",
        f"Total series (unique per event): {stats.total_series}",
        f"Total players: {stats.total_player_count}",
        f"Unknown series entries: {stats.total_unknown_series}",
        "By Category (events / players):",
    ]

    for category, count in sorted(stats.by_category.items(), key=lambda kv: -kv[1]):
        players = stats.by_category_player_count.get(category, 0)
        lines.append(f"  {category}: {count} events / {players} players")

    lines.append("By Ranking (events / players):")
    for ranking, count in sorted(stats.by_ranking.items(), key=lambda kv: _ranking_number(kv[0])):
        players = stats.by_ranking_player_count.get(ranking, 0)
        lines.append(f"  {ranking}: {count} events / {players} players")

    lines.append(f"By Series Name (top {top_series} by events / players):")
    ranked_names = sorted(stats.by_series_name.items(), key=lambda kv: -kv[1])
    for name, count in ranked_names[:top_series]:
        players = stats.by_series_name_player_count.get(name, 0)
        lines.append(f"  {name}: {count} events / {players} players")

    unknown = stats.unknown_series_names
    if unknown:
        lines.append(f"Unknown series ({len(unknown)} unique):")
        lines.extend(f"  - {name}" for name in unknown[:unknown_limit])
        if len(unknown) > unknown_limit:
            lines.append(f"  ... and {len(unknown) - unknown_limit} more")

    return lines


def log_statistics_report(
    stats: ClassificationStats,
    settings: Optional[PipelineSettings] = None,
) -> List[str]:
    """Emit the statistics report through the logger"""
    settings = settings or get_settings()
    lines = format_statistics_report(
        stats,
        top_series=settings.report_top_series,
        unknown_limit=settings.report_unknown_limit,
    )
    for line in lines:
        logger.info(line)
    return lines


# ==================== Quality check ====================

@dataclass
class UnknownRateAlert:
    """Unknown-rate threshold breach for one normalization run"""
    unknown_rate: float
    threshold: float
    unknown: int
    total_classes: int
    sample_names: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def message(self) -> str:
        return (
            f"{self.unknown_rate:.1%} of classes could not be classified "
            f"({self.unknown}/{self.total_classes}, threshold {self.threshold:.1%})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unknownRate": self.unknown_rate,
            "threshold": self.threshold,
            "unknown": self.unknown,
            "totalClasses": self.total_classes,
            "sampleNames": list(self.sample_names),
            "timestamp": self.timestamp.isoformat(),
        }


def check_unknown_rate(
    stats: ClassificationStats,
    threshold: Optional[float] = None,
    settings: Optional[PipelineSettings] = None,
) -> Optional[UnknownRateAlert]:
    """
    Compare the share of unclassified classes against a threshold.

    Returns an alert (and logs a warning) when the rate is above the
    threshold, None otherwise. The threshold defaults to
    settings.unknown_rate_threshold.
    """
    if threshold is None:
        threshold = (settings or get_settings()).unknown_rate_threshold

    rate = stats.unknown_rate
    if rate <= threshold:
        logger.debug(f"Unknown rate {rate:.1%} within threshold {threshold:.1%}")
        return None

    alert = UnknownRateAlert(
        unknown_rate=rate,
        threshold=threshold,
        unknown=stats.total_unknown_series,
        total_classes=stats.total_classes,
        sample_names=stats.unknown_series_names[:10],
    )
    logger.warning(f"Unknown rate above threshold: {alert.message}")
    return alert
