"""Core domain models.

Template records come out of the markdown importer or the custom-template
editor and are stored as name-keyed collections. Party configuration and
score results are ephemeral: built per scoring call, never persisted.
Pydantic validates every record at construction.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

TemplateKind = Literal["adversaries", "environments"]

Difficulty = Literal["Easy", "Normal", "Hard", "Deadly"]

ADVERSARY_TYPES = (
    "Minion",
    "Standard",
    "Horde",
    "Skulk",
    "Ranged",
    "Support",
    "Social",
    "Leader",
    "Bruiser",
    "Solo",
)

# Presence of any of these suppresses the "no elites" bonus.
ELITE_TYPES = frozenset({"Bruiser", "Horde", "Leader", "Solo"})

ENVIRONMENT_TYPES = ("Combat", "Social", "Traversal", "Event")

ATTACK_RANGES = ("Melee", "Very Close", "Close", "Far", "Very Far")

MIN_TIER = 1
MAX_TIER = 4


class Feature(BaseModel):
    """A named passive, action, or reaction on a template."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    type: str = Field(min_length=1)  # Passive | Action | Reaction | Action: Countdown | ...
    description: str = Field(min_length=1)


class StandardAttack(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = "Basic Attack"
    range: str = "Melee"
    damage: str = "1d6 phy"  # dice + damage type abbreviation, e.g. "1d12+2 phy"


class AdversaryTemplate(BaseModel):
    """A named monster stat block."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    tier: int = Field(default=1, ge=MIN_TIER, le=MAX_TIER)
    type: str = "Standard"  # one of ADVERSARY_TYPES; unknown values pass through
    description: str = ""
    motives: str = ""
    difficulty: int = 12
    thresholds: tuple[int, int] = (5, 10)  # (major, severe), ordering not enforced
    hp: int = Field(default=3, ge=1)
    stress: int = Field(default=3, ge=1)
    attack_modifier: int = 0
    standard_attack: StandardAttack = Field(default_factory=StandardAttack)
    experience: list[str] = Field(default_factory=list)
    features: list[Feature] = Field(default_factory=list)
    is_custom: bool = False


class EnvironmentTemplate(BaseModel):
    """A named scene modifier."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    type: str = "Combat"  # one of ENVIRONMENT_TYPES
    description: str = ""
    features: list[Feature] = Field(default_factory=list)
    is_custom: bool = False


Template = AdversaryTemplate | EnvironmentTemplate


class SelectionEntry(BaseModel):
    """One adversary template and how many copies are in the encounter."""

    model_config = ConfigDict(frozen=True)

    template: AdversaryTemplate
    count: int = Field(default=1, ge=0)


class PartyConfiguration(BaseModel):
    """The party an encounter is scored against.

    Out-of-range values are clamped rather than rejected so that scoring
    always produces a result.
    """

    model_config = ConfigDict(frozen=True)

    player_count: int = 4
    player_tier: int = 1
    is_high_damage: bool = False

    @field_validator("player_count")
    @classmethod
    def _clamp_player_count(cls, value: int) -> int:
        if value < 1:
            logger.warning("player_count %d is below 1, clamping to 1", value)
            return 1
        return value

    @field_validator("player_tier")
    @classmethod
    def _clamp_player_tier(cls, value: int) -> int:
        clamped = min(max(value, MIN_TIER), MAX_TIER)
        if clamped != value:
            logger.warning("player_tier %d is out of range, clamping to %d", value, clamped)
        return clamped


class SelectionCost(BaseModel):
    total_points: int
    entries: list[str] = Field(default_factory=list)


class DifficultyThresholds(BaseModel):
    easy: int  # anything strictly below is Easy
    normal_max: int
    hard_max: int  # anything strictly above is Deadly


class ScoreResult(BaseModel):
    """Battle Point total, difficulty label, and the narrative behind it."""

    total_points: int
    difficulty: Difficulty
    breakdown: list[str]
    thresholds: DifficultyThresholds
    base: int
    adjusted_base: int
    entries: list[str] = Field(default_factory=list)
