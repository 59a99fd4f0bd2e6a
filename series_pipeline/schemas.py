"""
Series classification schemas

Pydantic models for the class/series records that flow through the
classifier, plus the gender, youth-age and DPF level vocabularies.
"""

from pydantic import BaseModel, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator
from typing import Optional, List, Dict, Any, Union
from enum import Enum


# ==================== Vocabularies ====================

# Valid DPF ranking tiers, lowest to highest
DPF_LEVELS = ("10", "25", "35", "50", "60", "100", "200", "500", "1000", "2000")


def format_level(number: str) -> str:
    """Render a level number as a ranking label: "50" -> "DPF50" """
    return f"DPF{number}"


class GenderCategory(str, Enum):
    """Gender category of a series"""
    HERRER = "Herrer"
    DAMER = "Damer"
    MIX = "Mix"
    DRENGE = "Drenge"
    PIGER = "Piger"

    @classmethod
    def from_prefix(cls, word: str) -> Optional["GenderCategory"]:
        """Map a gender word glued to a level (herre50, dame35, mix25)"""
        word = word.lower()
        if word.startswith("herre"):
            return cls.HERRER
        elif word.startswith("dame") or word.startswith("kvinde"):
            return cls.DAMER
        elif word == "mix":
            return cls.MIX
        return None


class YouthAge(str, Enum):
    """Youth age bracket"""
    U12 = "U12"
    U14 = "U14"
    U16 = "U16"
    U18 = "U18"


# ==================== Records ====================

class ClassInput(BaseModel):
    """Raw tournament class as published by the event platform"""

    id: Optional[Union[int, str]] = Field(None, description="Class id on the event platform, kept as given")
    name: str = Field(..., description="Free-text class name")
    player_count: Optional[int] = Field(None, alias="playerCount", description="Signed-up players")

    @field_validator("player_count", mode="wrap")
    @classmethod
    def validate_player_count(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Optional[int]:
        """Unreadable player counts ("n/a", 7.5) count as unknown"""
        try:
            return handler(v)
        except ValidationError:
            return None

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"


class NormalizedClass(BaseModel):
    """Class retained in an event after waiting lists are dropped"""

    id: Optional[Union[int, str]] = None
    name: str
    player_count: Optional[int] = Field(None, alias="playerCount")

    class Config:
        frozen = True
        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Series(BaseModel):
    """Normalized competitive division, e.g. "Herrer DPF50" or "Drenge U14" """

    name: str = Field(..., description="Display name, unique within an event and the corpus")
    ranking: Optional[str] = Field(None, description="DPF ranking label")
    category: str = Field(..., description="Gender, optionally followed by youth age")
    player_count: Optional[int] = Field(None, alias="playerCount", description="Aggregated player count")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ClassNameResult(BaseModel):
    """Outcome of classifying a single class name"""

    is_waiting_list: bool = False
    series: List[Series] = Field(default_factory=list)

    class Config:
        frozen = True


class ClassNormalization(BaseModel):
    """Outcome of normalizing a single class record

    normalized_class is None for waiting-list entries, which are dropped
    from the event entirely.
    """

    normalized_class: Optional[NormalizedClass] = None
    series: List[Series] = Field(default_factory=list)
    is_unknown: bool = False

    class Config:
        frozen = True
