"""Encounter scoring endpoint."""

from fastapi import APIRouter, HTTPException

from backend import storage
from encounter_builder.models import SelectionEntry
from encounter_builder.scoring import score_encounter

from .models import ScoreBody

router = APIRouter()


@router.post("/encounters/score")
async def score(body: ScoreBody):
    """Score a selection of adversaries (by name) against a party."""
    selection: list[SelectionEntry] = []
    missing: list[str] = []
    for item in body.selection:
        template = storage.get_template("adversaries", item.name)
        if template is None:
            missing.append(item.name)
            continue
        selection.append(SelectionEntry(template=template, count=item.count))
    if missing:
        raise HTTPException(404, f"Unknown adversaries: {', '.join(missing)}")

    config = storage.get_config()
    return score_encounter(
        selection,
        body.party,
        storage.battle_config_from(config),
        storage.battle_values_from(config),
    )
