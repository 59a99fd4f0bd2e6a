"""
Series aggregation

- Danish-collated series ordering (category, then numeric ranking)
- Per-event classification with series de-duplication by name
- Corpus-wide collection of unique series
"""
import re
from typing import Optional, List, Dict, Any, Iterable, Union
from pydantic import ValidationError
from loguru import logger

from .schemas import ClassInput, Series
from .normalizer import normalize_class


# =============================================================================
# Ordering
# =============================================================================

# Danish alphabet: ... x y z æ ø å; ä/ö collate as æ/ø
_DANISH_LETTERS = {
    "æ": "{0",
    "ä": "{0",
    "ø": "{1",
    "ö": "{1",
    "å": "{2",
}


def danish_sort_key(text: str):
    """
    Sort key approximating Danish collation.

    Case-insensitive first, with "aa" read as "å" and æ/ø/å after z;
    ties are broken upper case first. Other accented letters (é, ü) are
    not folded onto their base letter and sort after å; category strings
    only use the Danish letters.
    """
    lowered = (text or "").lower().replace("aa", "å")
    primary = "".join(_DANISH_LETTERS.get(ch, ch) for ch in lowered)
    return primary, tuple(not ch.isupper() for ch in (text or ""))


def _ranking_value(ranking: Optional[str]) -> int:
    """Numeric part of a ranking label; missing rankings sort first"""
    if not ranking:
        return 0
    digits = re.sub(r"\D", "", ranking)
    return int(digits) if digits else 0


def sort_series(series: Iterable[Series]) -> List[Series]:
    """Stable sort by category (Danish order), then ranking number ascending"""
    return sorted(
        series,
        key=lambda s: (danish_sort_key(s.category or ""), _ranking_value(s.ranking)),
    )


# =============================================================================
# Merging
# =============================================================================

def _sum_player_counts(current: Optional[int], incoming: Optional[int]) -> Optional[int]:
    """None means unknown, not zero"""
    if incoming is None:
        return current
    if current is None:
        return incoming
    return current + incoming


def _merge_into(accumulator: Dict[str, Series], series: Series) -> None:
    """First occurrence of a name is kept; later ones only add their player count"""
    existing = accumulator.get(series.name)
    if existing is None:
        accumulator[series.name] = series
        return
    accumulator[series.name] = existing.model_copy(
        update={"player_count": _sum_player_counts(existing.player_count, series.player_count)}
    )


def _as_series(item: Union[Series, Dict[str, Any]]) -> Optional[Series]:
    if isinstance(item, Series):
        return item
    try:
        return Series.model_validate(item)
    except ValidationError as e:
        logger.warning(f"Skipping malformed series entry {item!r}: {e.error_count()} error(s)")
        return None


def merge_series_lists(*series_lists: Iterable[Union[Series, Dict[str, Any]]]) -> List[Series]:
    """
    Combine partial series aggregations into one sorted, de-duplicated list.

    Player counts of equal names are summed, so partials produced by
    independent workers can be combined in any order.
    """
    accumulator: Dict[str, Series] = {}
    for series_list in series_lists:
        for item in series_list or []:
            series = _as_series(item)
            if series is not None:
                _merge_into(accumulator, series)
    return sort_series(accumulator.values())


# =============================================================================
# Event aggregation
# =============================================================================

def _coerce_class(raw: Any) -> Optional[ClassInput]:
    if isinstance(raw, ClassInput):
        return raw
    try:
        return ClassInput.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Skipping malformed class entry {raw!r}: {e.error_count()} error(s)")
        return None


def normalize_event_classes(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Classify every class of an event.

    Returns a copy of the event with:
      classes: classes kept after dropping waiting lists
      series: unique series (player counts summed per name), sorted
      unknownSeries: names of classes that produced no series
    A missing or malformed classes field yields empty lists.
    """
    normalized = dict(event) if isinstance(event, dict) else {}

    raw_classes = normalized.get("classes")
    if not isinstance(raw_classes, (list, tuple)):
        normalized.update({"classes": [], "series": [], "unknownSeries": []})
        return normalized

    cleaned_classes = []
    unknown_series = []
    accumulator: Dict[str, Series] = {}

    for raw in raw_classes:
        class_input = _coerce_class(raw)
        if class_input is None:
            continue

        result = normalize_class(class_input)
        if result.normalized_class is None:
            continue

        cleaned_classes.append(result.normalized_class.to_dict())

        if result.is_unknown:
            unknown_series.append(result.normalized_class.name)
            continue

        for series in result.series:
            _merge_into(accumulator, series)

    normalized["classes"] = cleaned_classes
    normalized["series"] = [s.to_dict() for s in sort_series(accumulator.values())]
    normalized["unknownSeries"] = unknown_series
    return normalized


def normalize_all_events(events: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Classify the classes of every event"""
    normalized_events = [normalize_event_classes(event) for event in events or []]
    logger.info(f"Normalized classes for {len(normalized_events)} events")
    return normalized_events


# =============================================================================
# Corpus collection
# =============================================================================

def collect_unique_series(events: Iterable[Dict[str, Any]]) -> List[Series]:
    """
    Unique series across all normalized events.

    Same name -> one series with player counts summed across events.
    """
    series_lists = []
    for event in events or []:
        if not isinstance(event, dict):
            continue
        event_series = event.get("series")
        if isinstance(event_series, (list, tuple)):
            series_lists.append(event_series)
    return merge_series_lists(*series_lists)
