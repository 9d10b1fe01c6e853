"""Batch import of a template library.

Flow for one kind (adversaries or environments):
  1. List the markdown files in the configured directory (retried).
  2. Split the listing into batches of `concurrency` files.
  3. Within a batch, fetch concurrently with starts staggered by
     request_delay_ms; each fetch is retried with linear backoff and the
     body is handed to the parser.
  4. Pause 2 * request_delay_ms between batches.
  5. Collect parsed records into a name-keyed mapping (later files win on
     name collision).

A file that fails to fetch or parse is recorded in the summary and skipped;
it never aborts the batch. A failed listing propagates.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field

from encounter_builder.config import ImportSettings
from encounter_builder.models import Template, TemplateKind

from .fetch import Fetcher, RemoteFile
from .parser import parse_adversary_markdown, parse_environment_markdown
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

Parser = Callable[[str, str], Template | None]

PARSERS: dict[str, Parser] = {
    "adversaries": parse_adversary_markdown,
    "environments": parse_environment_markdown,
}


class ImportSummary(BaseModel):
    kind: TemplateKind
    attempted: int = 0
    processed: int = 0
    templates: dict[str, Template] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)  # fetched but unparseable
    failures: dict[str, str] = Field(default_factory=dict)  # file name -> fetch error


def _directory_for(kind: TemplateKind, settings: ImportSettings) -> str:
    if kind == "adversaries":
        return settings.adversaries_path
    return settings.environments_path


async def _import_file(
    fetcher: Fetcher,
    remote: RemoteFile,
    parse: Parser,
    settings: ImportSettings,
    stagger: float,
    sleep: Callable[[float], Awaitable[None]],
) -> Template | None:
    if stagger:
        await sleep(stagger)
    text = await retry_with_backoff(
        lambda: fetcher.fetch_text(remote.download_url),
        attempts=settings.retry_attempts,
        base_delay_ms=settings.request_delay_ms,
        sleep=sleep,
    )
    return parse(text, remote.name)


async def import_templates(
    kind: TemplateKind,
    fetcher: Fetcher,
    settings: ImportSettings | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ImportSummary:
    """Fetch and parse every template file of one kind."""
    settings = settings or ImportSettings()
    parse = PARSERS[kind]
    directory = _directory_for(kind, settings)

    files = await retry_with_backoff(
        lambda: fetcher.list_markdown_files(directory),
        attempts=settings.retry_attempts,
        base_delay_ms=settings.request_delay_ms,
        sleep=sleep,
    )
    summary = ImportSummary(kind=kind, attempted=len(files))
    logger.info("Importing %d %s files from '%s'", len(files), kind, directory)

    delay = settings.request_delay_ms / 1000
    batch_count = (len(files) + settings.concurrency - 1) // settings.concurrency
    for index, start in enumerate(range(0, len(files), settings.concurrency)):
        if index and delay:
            await sleep(2 * delay)
        batch = files[start:start + settings.concurrency]
        results = await asyncio.gather(
            *(
                _import_file(fetcher, remote, parse, settings, i * delay, sleep)
                for i, remote in enumerate(batch)
            ),
            return_exceptions=True,
        )
        for remote, result in zip(batch, results):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch %s: %s", remote.name, result)
                summary.failures[remote.name] = str(result)
            elif isinstance(result, BaseException):
                raise result
            elif result is None:
                logger.warning("Skipping unparseable file %s", remote.name)
                summary.skipped.append(remote.name)
            else:
                summary.templates[result.name] = result
                summary.processed += 1
        logger.info("Batch %d/%d done (%d processed so far)", index + 1, batch_count, summary.processed)

    logger.info(
        "Import of %s finished: %d/%d files processed", kind, summary.processed, summary.attempted
    )
    return summary
