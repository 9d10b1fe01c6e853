"""Environment browsing + custom environment CRUD endpoints."""

from fastapi import APIRouter, HTTPException

from backend import storage
from encounter_builder.library import filter_environments
from encounter_builder.models import EnvironmentTemplate

router = APIRouter()


@router.get("/environments")
async def list_environments(
    type: str | None = None,
    search: str = "",
    custom: bool | None = None,
):
    """List environments (imported merged with custom), filtered and searched."""
    return filter_environments(
        storage.list_templates("environments"), type=type, search=search, custom=custom
    )


@router.get("/environments/{name}")
async def get_environment(name: str):
    template = storage.get_template("environments", name)
    if not template:
        raise HTTPException(404, "Environment not found")
    return template


@router.post("/environments", status_code=201)
async def create_environment(body: EnvironmentTemplate):
    if storage.get_custom_template("environments", body.name):
        raise HTTPException(409, f"Custom environment '{body.name}' already exists")
    return storage.save_custom_template("environments", body)


@router.put("/environments/{name}")
async def update_environment(name: str, body: EnvironmentTemplate):
    if body.name != name and storage.get_custom_template("environments", body.name):
        raise HTTPException(
            409, f"Cannot rename: custom environment '{body.name}' already exists"
        )
    saved = storage.save_custom_template("environments", body)
    if body.name != name and storage.get_custom_template("environments", name):
        storage.delete_template("environments", name)
    return saved


@router.delete("/environments/{name}")
async def delete_environment(name: str):
    if not storage.delete_template("environments", name):
        raise HTTPException(404, "Environment not found")
    return {"ok": True}
