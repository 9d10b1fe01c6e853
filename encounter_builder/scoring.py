"""Battle Point scoring for encounter selections.

Cost:
  Minion  — grouped into squads sized to the party; each full or partial
            squad costs 1 point: ceil(count / party_count).
  other   — battle value of the type (injected table, default 2) per copy.

Difficulty budget:
  base = base_multiplier * player_count + base_addition

Four independent adjustments, applied and reported in this order:
  1. multiple solos   — at least min_solos_for_adjustment Solo copies
  2. lower tier       — any selected adversary below the party tier
  3. no elites        — non-empty selection without Bruiser/Horde/Leader/Solo
  4. high damage      — party flag

With the adjusted base as target:
  Easy    points <  target - 1
  Normal  target - 1 <= points <= target
  Hard    target < points <= target + 2
  Deadly  points >  target + 2
"""

import logging
import math
from collections.abc import Sequence

from .config import (
    DEFAULT_PARTY_SIZE,
    BattleCalculationConfig,
    BattleValueTable,
)
from .models import (
    ELITE_TYPES,
    Difficulty,
    DifficultyThresholds,
    PartyConfiguration,
    ScoreResult,
    SelectionCost,
    SelectionEntry,
)

logger = logging.getLogger(__name__)


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def _merge_selection(selection: Sequence[SelectionEntry]) -> list[SelectionEntry]:
    """Collapse repeated templates into one entry each, first-seen order.

    Templates are compared by value, so two different templates sharing a
    name stay separate. Entries with a zero count are dropped.
    """
    merged: list[SelectionEntry] = []
    for entry in selection:
        if entry.count <= 0:
            continue
        for i, seen in enumerate(merged):
            if seen.template == entry.template:
                merged[i] = SelectionEntry(
                    template=seen.template, count=seen.count + entry.count
                )
                break
        else:
            merged.append(entry)
    return merged


def compute_selection_cost(
    selection: Sequence[SelectionEntry],
    party_count: int = DEFAULT_PARTY_SIZE,
    battle_values: BattleValueTable | None = None,
) -> SelectionCost:
    """Total Battle Point cost of a selection, with one line per template."""
    table = battle_values or BattleValueTable()
    if party_count < 1:
        logger.warning("party_count %d is below 1, clamping to 1", party_count)
        party_count = 1

    total = 0
    lines: list[str] = []
    for entry in _merge_selection(selection):
        template = entry.template
        if template.type == "Minion":
            cost = math.ceil(entry.count / party_count)
            groups = "group" if cost == 1 else "groups"
            lines.append(
                f"{entry.count}x {template.name} (Minion): {cost} "
                f"({cost} {groups} of up to {party_count})"
            )
        else:
            value = table.value_for(template.type)
            cost = value * entry.count
            lines.append(
                f"{entry.count}x {template.name} ({template.type}): {cost} "
                f"({value} each)"
            )
        total += cost
    return SelectionCost(total_points=total, entries=lines)


def _classify(points: int, thresholds: DifficultyThresholds) -> Difficulty:
    if points < thresholds.easy:
        return "Easy"
    if points <= thresholds.normal_max:
        return "Normal"
    if points <= thresholds.hard_max:
        return "Hard"
    return "Deadly"


def classify_difficulty(
    total_points: int,
    party: PartyConfiguration,
    selection: Sequence[SelectionEntry],
    config: BattleCalculationConfig | None = None,
) -> ScoreResult:
    """Classify a Battle Point total against the party's adjusted budget."""
    config = config or BattleCalculationConfig()
    active = _merge_selection(selection)

    base = config.base_multiplier * party.player_count + config.base_addition
    breakdown = [
        f"Base: ({config.base_multiplier} x {party.player_count} players) "
        f"+ {config.base_addition} = {base}"
    ]
    adjusted = base

    solo_count = sum(e.count for e in active if e.template.type == "Solo")
    if solo_count >= config.min_solos_for_adjustment:
        adjusted += config.multiple_solos_adjustment
        breakdown.append(
            f"{_signed(config.multiple_solos_adjustment)} for {solo_count} Solo adversaries"
        )

    if any(e.template.tier < party.player_tier for e in active):
        adjusted += config.lower_tier_bonus
        breakdown.append(
            f"{_signed(config.lower_tier_bonus)} for adversaries below "
            f"party tier {party.player_tier}"
        )

    if active and not any(e.template.type in ELITE_TYPES for e in active):
        adjusted += config.no_elites_bonus
        breakdown.append(
            f"{_signed(config.no_elites_bonus)} for no Bruisers, Hordes, Leaders, or Solos"
        )

    if party.is_high_damage:
        adjusted += config.high_damage_penalty
        breakdown.append(f"{_signed(config.high_damage_penalty)} for high damage party")

    thresholds = DifficultyThresholds(
        easy=adjusted - 1,
        normal_max=adjusted,
        hard_max=adjusted + 2,
    )
    breakdown.append(f"Target: {adjusted} Battle Points")
    breakdown.append(f"Easy: below {thresholds.easy}")
    breakdown.append(f"Normal: {thresholds.easy}-{thresholds.normal_max}")
    breakdown.append(f"Hard: {thresholds.normal_max + 1}-{thresholds.hard_max}")
    breakdown.append(f"Deadly: {adjusted + 3}+")

    return ScoreResult(
        total_points=total_points,
        difficulty=_classify(total_points, thresholds),
        breakdown=breakdown,
        thresholds=thresholds,
        base=base,
        adjusted_base=adjusted,
    )


def score_encounter(
    selection: Sequence[SelectionEntry],
    party: PartyConfiguration,
    config: BattleCalculationConfig | None = None,
    battle_values: BattleValueTable | None = None,
) -> ScoreResult:
    """Cost a selection for the party and classify the result."""
    cost = compute_selection_cost(selection, party.player_count, battle_values)
    result = classify_difficulty(cost.total_points, party, selection, config)
    return result.model_copy(update={"entries": cost.entries})
