"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel, Field

from encounter_builder.models import PartyConfiguration


class SelectionItem(BaseModel):
    name: str
    count: int = Field(default=1, ge=0)


class ScoreBody(BaseModel):
    selection: list[SelectionItem] = Field(default_factory=list)
    party: PartyConfiguration = Field(default_factory=PartyConfiguration)


class ParseBody(BaseModel):
    markdown: str
    file_name: str = ""


class ImportResult(BaseModel):
    kind: str
    attempted: int
    processed: int
    stored: int
    skipped: list[str]
    failures: dict[str, str]
