"""Template library import.

  parser  — markdown → AdversaryTemplate / EnvironmentTemplate (pure)
  fetch   — GitHub contents client (httpx)
  retry   — linear-backoff retry wrapper around fetches
  batch   — rate-limited batch orchestrator with per-file isolation
"""

from .batch import ImportSummary, import_templates  # noqa: F401
from .fetch import Fetcher, GitHubFetcher, ImportFetchError, RemoteFile  # noqa: F401
from .parser import (  # noqa: F401
    parse_adversary_markdown,
    parse_environment_markdown,
)
from .retry import retry_with_backoff  # noqa: F401
