"""
Series classification package

Turns free-text tournament class names into normalized series:
- Extractors: waiting list, gender, youth age, DPF levels
- Normalizer: level resolution cascade and series synthesis
- Aggregator: per-event and corpus-wide series de-duplication
- Monitoring: statistics, report and unknown-rate check
"""

from .schemas import (
    DPF_LEVELS,
    GenderCategory,
    YouthAge,
    ClassInput,
    NormalizedClass,
    Series,
    ClassNameResult,
    ClassNormalization,
)
from .extractors import (
    LevelMatch,
    is_waiting_list,
    extract_gender,
    extract_youth_age,
    extract_dpf_level,
    extract_dpf_levels,
    extract_concatenated_gender_level,
    extract_dash_levels,
    extract_standalone_levels,
)
from .normalizer import (
    DEFAULT_GENDER,
    LEVEL_STRATEGIES,
    resolve_levels,
    normalize_class_name,
    normalize_class,
)
from .aggregator import (
    sort_series,
    merge_series_lists,
    normalize_event_classes,
    normalize_all_events,
    collect_unique_series,
)
from .monitoring import (
    ClassificationStats,
    UnknownRateAlert,
    get_statistics,
    format_statistics_report,
    log_statistics_report,
    check_unknown_rate,
)
from .config import PipelineSettings, get_settings, configure_logging

__all__ = [
    # Schemas
    "DPF_LEVELS",
    "GenderCategory",
    "YouthAge",
    "ClassInput",
    "NormalizedClass",
    "Series",
    "ClassNameResult",
    "ClassNormalization",
    # Extractors
    "LevelMatch",
    "is_waiting_list",
    "extract_gender",
    "extract_youth_age",
    "extract_dpf_level",
    "extract_dpf_levels",
    "extract_concatenated_gender_level",
    "extract_dash_levels",
    "extract_standalone_levels",
    # Normalizer
    "DEFAULT_GENDER",
    "LEVEL_STRATEGIES",
    "resolve_levels",
    "normalize_class_name",
    "normalize_class",
    # Aggregator
    "sort_series",
    "merge_series_lists",
    "normalize_event_classes",
    "normalize_all_events",
    "collect_unique_series",
    # Monitoring
    "ClassificationStats",
    "UnknownRateAlert",
    "get_statistics",
    "format_statistics_report",
    "log_statistics_report",
    "check_unknown_rate",
    # Config
    "PipelineSettings",
    "get_settings",
    "configure_logging",
]
