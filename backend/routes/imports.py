"""Template library import + markdown parse preview endpoints."""

import logging
import os

from fastapi import APIRouter, HTTPException

from backend import storage
from encounter_builder.importer import (
    Fetcher,
    GitHubFetcher,
    ImportFetchError,
    import_templates,
    parse_adversary_markdown,
    parse_environment_markdown,
)
from encounter_builder.models import TemplateKind

from .models import ImportResult, ParseBody

logger = logging.getLogger(__name__)

router = APIRouter()


def build_fetcher() -> GitHubFetcher:
    settings = storage.import_settings_from(storage.get_config())
    return GitHubFetcher(
        repository=settings.repository,
        branch=settings.branch,
        api_url=settings.api_url,
        token=os.getenv("GITHUB_TOKEN", ""),
        timeout=settings.timeout,
    )


async def run_import(kind: TemplateKind, fetcher: Fetcher | None = None) -> ImportResult:
    """Import one kind and replace the stored library if anything parsed.

    Raises ImportFetchError if the directory listing cannot be fetched.
    """
    settings = storage.import_settings_from(storage.get_config())
    summary = await import_templates(kind, fetcher or build_fetcher(), settings)
    stored = 0
    if summary.templates:
        stored = storage.replace_imported_templates(kind, summary.templates)
    else:
        logger.warning("Import of %s produced no templates; keeping existing library", kind)
    return ImportResult(
        kind=kind,
        attempted=summary.attempted,
        processed=summary.processed,
        stored=stored,
        skipped=summary.skipped,
        failures=summary.failures,
    )


@router.post("/import/{kind}/parse")
async def parse_markdown(kind: TemplateKind, body: ParseBody):
    """Parse a single markdown document without storing it."""
    if kind == "adversaries":
        template = parse_adversary_markdown(body.markdown, body.file_name)
    else:
        template = parse_environment_markdown(body.markdown, body.file_name)
    if template is None:
        raise HTTPException(422, "Could not parse markdown")
    return template


@router.post("/import/{kind}")
async def import_library(kind: TemplateKind):
    """Fetch the remote library for one kind and replace the imported collection."""
    try:
        return await run_import(kind)
    except ImportFetchError as e:
        raise HTTPException(502, str(e))
