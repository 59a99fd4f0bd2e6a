"""
Class name token extractors

Independent detectors that read a raw class name and pull out one kind of
token: waiting-list marker, gender, youth age and DPF level numbers.
Every extractor works on the raw string and uses a fresh match per call.
"""
import re
from typing import Optional, List
from dataclasses import dataclass, field

from .schemas import DPF_LEVELS, GenderCategory, YouthAge, format_level


# =============================================================================
# Patterns
# =============================================================================

# Word boundaries are ASCII-only: "Damerække" still contains the word "Damer"

WAITING_LIST_PATTERNS = [
    re.compile(r"venteliste", re.IGNORECASE),
    re.compile(r"waiting\s*list", re.IGNORECASE),
]

# First match wins
GENDER_PATTERNS = [
    (re.compile(r"\b(herrer|herre)\b", re.IGNORECASE | re.ASCII), GenderCategory.HERRER),
    (re.compile(r"\b(damer|dame|dames|damespeed|kvinder|kvinde)\b", re.IGNORECASE | re.ASCII), GenderCategory.DAMER),
    (re.compile(r"\bmix\b", re.IGNORECASE | re.ASCII), GenderCategory.MIX),
    (re.compile(r"\bdrenge\b", re.IGNORECASE | re.ASCII), GenderCategory.DRENGE),
    (re.compile(r"\bpiger\b", re.IGNORECASE | re.ASCII), GenderCategory.PIGER),
]

YOUTH_AGE_PATTERN = re.compile(r"\bU(12|14|16|18)\b", re.IGNORECASE | re.ASCII)

# "DPF50", "DPF 25/35/50", "DPF100-60"
DPF_PATTERN = re.compile(r"\bDPF\s*([0-9]+(?:[/-][0-9]+)*)", re.IGNORECASE | re.ASCII)

# "Herre50", "Dame35", "Mix100"
CONCATENATED_GENDER_LEVEL_PATTERN = re.compile(
    r"\b(herrer?|damer?|kvinder?|mix)([0-9]+)\b", re.IGNORECASE | re.ASCII
)

# "(200-100)"
DASH_LEVELS_PATTERN = re.compile(r"\(([0-9]+(?:-[0-9]+)+)\)")

# Longest alternatives first so "100" is never read as "10"
STANDALONE_LEVEL_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(DPF_LEVELS, key=len, reverse=True)) + r")\b", re.ASCII
)


@dataclass(frozen=True)
class LevelMatch:
    """Levels found by one extraction method, with the gender it implies (if any)"""
    levels: List[str] = field(default_factory=list)
    gender: Optional[GenderCategory] = None
    method: Optional[str] = None


def _valid_levels(numbers: List[str]) -> List[str]:
    """Keep numbers that are DPF tiers, in written order"""
    return [format_level(num) for num in numbers if num in DPF_LEVELS]


# =============================================================================
# Token extractors
# =============================================================================

def is_waiting_list(name: str) -> bool:
    """Waiting-list classes: "Dame DPF100 - Venteliste", "waitinglist for DPF25" """
    if not isinstance(name, str):
        return False
    return any(pattern.search(name) for pattern in WAITING_LIST_PATTERNS)


def extract_gender(name: str) -> Optional[GenderCategory]:
    if not isinstance(name, str):
        return None
    for pattern, gender in GENDER_PATTERNS:
        if pattern.search(name):
            return gender
    return None


def extract_youth_age(name: str) -> Optional[YouthAge]:
    """U12/U14/U16/U18 anywhere in the name"""
    if not isinstance(name, str):
        return None
    match = YOUTH_AGE_PATTERN.search(name)
    if match:
        return YouthAge(f"U{match.group(1)}")
    return None


# =============================================================================
# Level extractors
# =============================================================================

def extract_dpf_levels(name: str) -> List[str]:
    """
    All levels from explicit DPF tags.

    "Herrer DPF100/60" -> ["DPF100", "DPF60"]
    Numbers outside the tier set are dropped; written order is kept.
    """
    if not isinstance(name, str):
        return []

    levels = []
    for match in DPF_PATTERN.finditer(name):
        levels.extend(_valid_levels(re.split(r"[/-]", match.group(1))))
    return levels


def extract_concatenated_gender_level(name: str) -> Optional[LevelMatch]:
    """
    Gender word glued to a level: "Herre50 FTM" -> Herrer, ["DPF50"]

    Only the first glued token is considered; it is discarded when the
    number is not a DPF tier.
    """
    if not isinstance(name, str):
        return None

    match = CONCATENATED_GENDER_LEVEL_PATTERN.search(name)
    if not match:
        return None

    gender = GenderCategory.from_prefix(match.group(1))
    number = match.group(2)
    if gender and number in DPF_LEVELS:
        return LevelMatch(levels=[format_level(number)], gender=gender, method="concatenated")
    return None


def extract_dash_levels(name: str) -> List[str]:
    """Dash ranges in parentheses: "Tilmelding, herrer (200-100)" -> ["DPF200", "DPF100"]"""
    if not isinstance(name, str):
        return []

    levels = []
    for match in DASH_LEVELS_PATTERN.finditer(name):
        levels.extend(_valid_levels(match.group(1).split("-")))
    return levels


def extract_standalone_levels(name: str) -> List[str]:
    """
    Bare tier numbers: "HERRE 100" -> ["DPF100"]

    Returns nothing when an explicit DPF tag yields a level, and nothing
    when more than one bare tier number is present (dates, times and
    other numbers make those ambiguous).
    """
    if not isinstance(name, str):
        return []
    if extract_dpf_levels(name):
        return []

    levels = [format_level(match.group(1)) for match in STANDALONE_LEVEL_PATTERN.finditer(name)]
    return levels if len(levels) == 1 else []


def extract_dpf_level(name: str) -> Optional[str]:
    """First DPF level, falling back to a single standalone number"""
    levels = extract_dpf_levels(name)
    if levels:
        return levels[0]
    standalone = extract_standalone_levels(name)
    return standalone[0] if standalone else None
