"""Adversary browsing + custom adversary CRUD endpoints."""

from fastapi import APIRouter, HTTPException

from backend import storage
from encounter_builder.library import filter_adversaries
from encounter_builder.models import AdversaryTemplate

router = APIRouter()


@router.get("/adversaries")
async def list_adversaries(
    tier: int | None = None,
    type: str | None = None,
    search: str = "",
    custom: bool | None = None,
):
    """List adversaries (imported merged with custom), filtered and searched."""
    return filter_adversaries(
        storage.list_templates("adversaries"),
        tier=tier, type=type, search=search, custom=custom,
    )


@router.get("/adversaries/{name}")
async def get_adversary(name: str):
    """Get a single adversary by name."""
    template = storage.get_template("adversaries", name)
    if not template:
        raise HTTPException(404, "Adversary not found")
    return template


@router.post("/adversaries", status_code=201)
async def create_adversary(body: AdversaryTemplate):
    """Create a custom adversary (may shadow an imported one)."""
    if storage.get_custom_template("adversaries", body.name):
        raise HTTPException(409, f"Custom adversary '{body.name}' already exists")
    return storage.save_custom_template("adversaries", body)


@router.put("/adversaries/{name}")
async def update_adversary(name: str, body: AdversaryTemplate):
    """Save a custom adversary, renaming it if the body carries a new name."""
    if body.name != name and storage.get_custom_template("adversaries", body.name):
        raise HTTPException(
            409, f"Cannot rename: custom adversary '{body.name}' already exists"
        )
    saved = storage.save_custom_template("adversaries", body)
    if body.name != name and storage.get_custom_template("adversaries", name):
        storage.delete_template("adversaries", name)
    return saved


@router.delete("/adversaries/{name}")
async def delete_adversary(name: str):
    """Delete a custom adversary (revealing the imported one), else the imported one."""
    if not storage.delete_template("adversaries", name):
        raise HTTPException(404, "Adversary not found")
    return {"ok": True}
