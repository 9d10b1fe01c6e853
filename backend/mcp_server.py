"""FastMCP server exposing encounter scoring and adversary lookup as MCP tools.

Tools:
  - list_adversaries(tier, type, search)  — browse the stored library
  - score_encounter(selection, ...)        — Battle Point score for named adversaries

Reads templates and config through backend.storage; run as __main__ it
initialises storage from DATA_DIR (default ./data).

Usage:
    uv run python -m backend.mcp_server
"""

from mcp.server.fastmcp import FastMCP

from backend import storage
from encounter_builder.library import filter_adversaries
from encounter_builder.models import PartyConfiguration, SelectionEntry
from encounter_builder.scoring import score_encounter as _score

mcp = FastMCP("encounter-builder")


@mcp.tool()
def list_adversaries(tier: int | None = None, type: str | None = None, search: str = "") -> list[dict]:
    """List stored adversaries, optionally filtered by tier, type and a search term."""
    templates = filter_adversaries(
        storage.list_templates("adversaries"), tier=tier, type=type, search=search
    )
    return [t.model_dump(mode="json") for t in templates]


@mcp.tool()
def score_encounter(
    selection: dict[str, int],
    player_count: int = 4,
    player_tier: int = 1,
    is_high_damage: bool = False,
) -> dict:
    """Score adversaries (name -> count) against a party. Unknown names are reported, not scored."""
    entries: list[SelectionEntry] = []
    unknown: list[str] = []
    for name, count in selection.items():
        template = storage.get_template("adversaries", name)
        if template is None:
            unknown.append(name)
            continue
        entries.append(SelectionEntry(template=template, count=count))

    config = storage.get_config()
    party = PartyConfiguration(
        player_count=player_count, player_tier=player_tier, is_high_damage=is_high_damage
    )
    result = _score(
        entries,
        party,
        storage.battle_config_from(config),
        storage.battle_values_from(config),
    )
    return {**result.model_dump(mode="json"), "unknown": unknown}


if __name__ == "__main__":
    import os
    from pathlib import Path

    from dotenv import load_dotenv

    load_dotenv()
    storage.init_storage(Path(os.getenv("DATA_DIR", "data")))
    mcp.run()
