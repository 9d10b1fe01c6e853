"""Content client — lists and downloads template markdown from GitHub.

The batch importer injects a fetcher matching the protocol:

    async def list_markdown_files(self, path: str) -> list[RemoteFile]: ...
    async def fetch_text(self, url: str) -> str: ...

`GitHubFetcher` is the real implementation, backed by the GitHub contents
API for listings and the raw download URL for bodies. Tests use a stub
fetcher instead.

Every transport and protocol failure surfaces as ImportFetchError, the one
error type the retry wrapper retries on.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class RemoteFile(BaseModel):
    """One markdown file in a remote directory listing."""

    name: str
    path: str
    download_url: str


# ---------------------------------------------------------------------------
# Protocol: every fetcher implementation must match these signatures
# ---------------------------------------------------------------------------

class Fetcher(Protocol):
    async def list_markdown_files(self, path: str) -> list[RemoteFile]: ...

    async def fetch_text(self, url: str) -> str: ...


# ---------------------------------------------------------------------------
# GitHubFetcher: talks to the GitHub contents API
# ---------------------------------------------------------------------------

class GitHubFetcher:
    """Async HTTP client for a GitHub-hosted template library.

    Listing:  GET {api_url}/repos/{repository}/contents/{path}?ref={branch}
              Response: [{"name", "path", "type", "download_url"}, ...]
    Body:     GET {download_url}  (raw markdown)

    Args:
        repository: "owner/name" of the content repository.
        branch:     Git ref to read from. Defaults to "main".
        api_url:    GitHub API base URL.
        token:      Personal access token, or empty string for anonymous
                    (rate-limited) access.
        timeout:    HTTP timeout in seconds. Defaults to 30.
    """

    def __init__(
        self,
        repository: str,
        branch: str = "main",
        api_url: str = "https://api.github.com",
        token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._repository = repository.strip("/")
        self._branch = branch
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        logger.debug("fetch url=%s params=%s", url, params)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                resp = await client.get(url, params=params, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise ImportFetchError(f"Cannot connect to {url}") from e
        except httpx.HTTPStatusError as e:
            raise ImportFetchError(
                f"{url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise ImportFetchError(f"{url} timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise ImportFetchError(f"Request to {url} failed: {e}") from e
        return resp

    def _listing_url(self, path: str) -> str:
        return f"{self._api_url}/repos/{self._repository}/contents/{path.strip('/')}"

    async def list_markdown_files(self, path: str) -> list[RemoteFile]:
        """Return the markdown files directly inside `path`, sorted by name."""
        resp = await self._get(self._listing_url(path), params={"ref": self._branch})
        data: Any = resp.json()
        if not isinstance(data, list):
            raise ImportFetchError(f"Expected a directory listing for '{path}'")

        files = []
        for item in data:
            if not isinstance(item, dict):
                raise ImportFetchError(f"Malformed directory listing entry for '{path}'")
            name = item.get("name", "")
            if item.get("type") != "file" or not name.lower().endswith(".md"):
                continue
            if name.lower() == "readme.md" or not item.get("download_url"):
                continue
            files.append(RemoteFile(
                name=name,
                path=item.get("path", name),
                download_url=item["download_url"],
            ))
        logger.debug("listing path=%s files=%d", path, len(files))
        return sorted(files, key=lambda f: f.name)

    async def fetch_text(self, url: str) -> str:
        resp = await self._get(url)
        return resp.text


# ---------------------------------------------------------------------------
# ImportFetchError: raised for all connection and protocol failures
# ---------------------------------------------------------------------------

class ImportFetchError(RuntimeError):
    """Raised when the content host cannot be reached or returns an error."""
