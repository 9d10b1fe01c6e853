"""Typed configuration passed explicitly into scoring and import.

Nothing in the core reads global state: callers build these objects (from
stored settings or defaults) and hand them in.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_PARTY_SIZE = 4

DEFAULT_BATTLE_VALUES: dict[str, int] = {
    "Minion": 0,
    "Standard": 2,
    "Horde": 2,
    "Skulk": 2,
    "Ranged": 2,
    "Support": 1,
    "Social": 1,
    "Leader": 3,
    "Bruiser": 4,
    "Solo": 5,
}

DEFAULT_BATTLE_VALUE = 2


class BattleCalculationConfig(BaseModel):
    """Tunable constants of the difficulty budget."""

    base_multiplier: int = 3
    base_addition: int = 2
    multiple_solos_adjustment: int = -2
    min_solos_for_adjustment: int = Field(default=2, ge=1)
    lower_tier_bonus: int = 1
    no_elites_bonus: int = 1
    high_damage_penalty: int = -2


class BattleValueTable(BaseModel):
    """Point cost per adversary type, with a fallback for unknown types."""

    values: dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_BATTLE_VALUES))
    default: int = DEFAULT_BATTLE_VALUE

    def value_for(self, adversary_type: str) -> int:
        return self.values.get(adversary_type, self.default)


class ImportSettings(BaseModel):
    """Where the template library lives and how politely to fetch it."""

    api_url: str = "https://api.github.com"
    repository: str = "seansbox/daggerheart-srd"
    branch: str = "main"
    adversaries_path: str = "adversaries"
    environments_path: str = "environments"
    retry_attempts: int = Field(default=3, ge=1)
    request_delay_ms: int = Field(default=200, ge=0)
    concurrency: int = Field(default=5, ge=1)
    timeout: float = 30.0
