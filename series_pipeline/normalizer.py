"""
Class name normalization

- Level resolution: ordered cascade of level extraction methods
- Series synthesis: gender/youth age/levels -> Series records
- Per-class normalization with player counts
"""
from typing import Optional, Dict, Any, Callable, Tuple, Union
from loguru import logger

from .schemas import (
    GenderCategory,
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
    extract_dpf_levels,
    extract_concatenated_gender_level,
    extract_dash_levels,
    extract_standalone_levels,
)


# Assumed division when a name carries a level but no gender word
DEFAULT_GENDER = GenderCategory.HERRER


# =============================================================================
# Level resolution cascade
# =============================================================================

def _explicit_dpf(name: str) -> Optional[LevelMatch]:
    levels = extract_dpf_levels(name)
    return LevelMatch(levels=levels, method="dpf_tag") if levels else None


def _dash_range(name: str) -> Optional[LevelMatch]:
    levels = extract_dash_levels(name)
    return LevelMatch(levels=levels, method="dash_range") if levels else None


def _standalone_number(name: str) -> Optional[LevelMatch]:
    levels = extract_standalone_levels(name)
    return LevelMatch(levels=levels, method="standalone") if levels else None


# Priority order; the first method that yields levels wins
LEVEL_STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[LevelMatch]]], ...] = (
    ("dpf_tag", _explicit_dpf),
    ("concatenated", extract_concatenated_gender_level),
    ("dash_range", _dash_range),
    ("standalone", _standalone_number),
)


def resolve_levels(name: str) -> LevelMatch:
    """
    Run the level strategies in order and return the first non-empty match.

    Returns an empty LevelMatch when no strategy finds a level.
    """
    if not isinstance(name, str):
        return LevelMatch()

    for _, strategy in LEVEL_STRATEGIES:
        match = strategy(name)
        if match and match.levels:
            return match
    return LevelMatch()


# =============================================================================
# Series synthesis
# =============================================================================

def normalize_class_name(
    name: str,
    default_gender: GenderCategory = DEFAULT_GENDER,
) -> ClassNameResult:
    """
    Classify a raw class name into zero or more series.

    "Herrer DPF100/60"  -> Herrer DPF100, Herrer DPF60
    "Drenge U14"        -> Drenge U14 (no ranking)
    "Finals"            -> no series
    Waiting lists yield is_waiting_list=True and no series.
    """
    if not isinstance(name, str):
        name = ""

    if is_waiting_list(name):
        return ClassNameResult(is_waiting_list=True)

    gender = extract_gender(name)
    youth_age = extract_youth_age(name)

    resolved = resolve_levels(name)
    if gender is None:
        gender = resolved.gender
    if resolved.levels and gender is None:
        gender = default_gender

    if gender is None:
        return ClassNameResult()

    category = gender.value
    if youth_age:
        category = f"{gender.value} {youth_age.value}"

    series = []
    if resolved.levels:
        for level in resolved.levels:
            series.append(Series(name=f"{category} {level}", ranking=level, category=category))
    elif youth_age:
        series.append(Series(name=category, ranking=None, category=category))

    return ClassNameResult(series=series)


# =============================================================================
# Per-class normalization
# =============================================================================

def normalize_class(
    class_obj: Union[ClassInput, Dict[str, Any]],
    default_gender: GenderCategory = DEFAULT_GENDER,
) -> ClassNormalization:
    """
    Normalize one class record and attach its player count to each series.

    Mappings are validated as ClassInput first; a record that is not a
    class (no string name) raises pydantic's ValidationError.
    """
    if not isinstance(class_obj, ClassInput):
        class_obj = ClassInput.model_validate(class_obj)

    result = normalize_class_name(class_obj.name, default_gender=default_gender)
    if result.is_waiting_list:
        logger.debug(f"Waiting list dropped: {class_obj.name}")
        return ClassNormalization()

    series = [
        s.model_copy(update={"player_count": class_obj.player_count})
        for s in result.series
    ]
    normalized = NormalizedClass(
        id=class_obj.id,
        name=class_obj.name,
        player_count=class_obj.player_count,
    )

    if not series:
        logger.debug(f"Unclassified class: {class_obj.name}")

    return ClassNormalization(
        normalized_class=normalized,
        series=series,
        is_unknown=not series,
    )
