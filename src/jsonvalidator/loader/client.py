"""Clients that retrieve remote schema documents for ``$ref`` resolution.

The loader only needs ``get(url)`` returning a binary stream; parsing the JSON
is the loader's job. :class:`DefaultSchemaClient` serves ``http``/``https``
through httpx and ``file`` URLs or plain paths from disk.
:class:`DirectorySchemaClient` maps every URL under a base URL onto a local
directory, which is how bundled schema sets are served without network access.
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import BinaryIO, Protocol
from urllib.parse import unquote, urlparse

import httpx

from jsonvalidator.config import settings
from jsonvalidator.errors.exceptions import SchemaError, SchemaFetchError

logger = logging.getLogger(__name__)


class SchemaClient(Protocol):
    def get(self, url: str) -> BinaryIO:
        """Return the raw bytes of the document at ``url``."""
        ...


def load_json(path: Path) -> dict:
    """Load a JSON file and return the parsed document."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Failed to parse JSON text in {path}: {exc}") from exc


class DefaultSchemaClient:
    """Fetches ``http``/``https`` URLs with httpx and reads ``file`` URLs from disk."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
    ) -> None:
        self._http_client = http_client
        self.timeout = settings.http_timeout if timeout is None else timeout
        self.follow_redirects = settings.follow_redirects if follow_redirects is None else follow_redirects

    def get(self, url: str) -> BinaryIO:
        scheme = urlparse(url).scheme
        if scheme in ("http", "https"):
            return self._get_http(url)
        if scheme in ("", "file"):
            return self._get_file(url)
        raise SchemaFetchError(url, f"unsupported URL scheme '{scheme}'")

    def _get_http(self, url: str) -> BinaryIO:
        logger.info("Fetching remote schema %s", url)
        try:
            if self._http_client is not None:
                response = self._http_client.get(url)
            else:
                response = httpx.get(
                    url,
                    timeout=self.timeout,
                    follow_redirects=self.follow_redirects,
                    headers={"User-Agent": settings.user_agent},
                )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Remote schema fetch failed for %s: %s", url, exc)
            raise SchemaFetchError(url, str(exc)) from exc
        return io.BytesIO(response.content)

    def _get_file(self, url: str) -> BinaryIO:
        parsed = urlparse(url)
        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(url)
        try:
            return path.open("rb")
        except OSError as exc:
            logger.warning("Schema file %s could not be opened: %s", path, exc)
            raise SchemaFetchError(url, str(exc)) from exc


class DirectorySchemaClient:
    """Serves URLs under ``base_url`` from ``directory``.

    Handles:
    - ``<base_url>/<relative path>`` -> ``directory/<relative path>``
    - anything else -> the ``fallback`` client, if one is configured
    """

    def __init__(
        self,
        base_url: str,
        directory: str | Path,
        fallback: SchemaClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.directory = Path(directory).resolve()
        self.fallback = fallback

    def get(self, url: str) -> BinaryIO:
        if url.startswith(self.base_url):
            local_rel = url[len(self.base_url):]
            path = (self.directory / local_rel).resolve()
            if not path.is_relative_to(self.directory):
                raise SchemaFetchError(url, "path escapes the schema directory")
            try:
                return path.open("rb")
            except OSError as exc:
                raise SchemaFetchError(url, str(exc)) from exc
        if self.fallback is not None:
            return self.fallback.get(url)
        raise SchemaFetchError(url, f"Unsupported remote schema URI, expected a URL under {self.base_url}")
