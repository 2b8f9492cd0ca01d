"""Resolve image element content into raw image bytes.

An image element's ``content`` can be:

- raw ``bytes`` (used as-is),
- a ``data:`` URI (base64 or percent-encoded payload),
- an ``http(s)://`` URL (fetched with httpx),
- anything else is read as a local file path.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import re
from pathlib import Path
from urllib.parse import unquote_to_bytes

import httpx

from .exceptions import ImageSourceError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_IMAGE_TIMEOUT = 20.0

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^,;]*)(?P<params>(?:;[^,;]*)*),(?P<payload>.*)$", re.DOTALL)
_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def is_data_uri(source: str) -> bool:
    return source.startswith("data:")


def is_url(source: str) -> bool:
    return bool(_URL_RE.match(source))


def decode_data_uri(uri: str) -> bytes:
    """Decode a ``data:`` URI payload.

    Raises ImageSourceError if the URI is malformed.
    """
    m = _DATA_URI_RE.match(uri.strip())
    if not m:
        raise ImageSourceError(f"Malformed data URI: {uri[:40]}...")
    payload = m.group("payload")
    if ";base64" in m.group("params").lower():
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise ImageSourceError(f"Invalid base64 payload in data URI: {exc}") from exc
    return unquote_to_bytes(payload)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class ImageFetcher:
    """Turns image element content into bytes.

    *transport* is handed to :class:`httpx.AsyncClient`; tests pass an
    ``httpx.MockTransport`` here. ``timeout=None`` disables the HTTP timeout.
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_IMAGE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.transport = transport

    # -- public API ----------------------------------------------------------

    async def fetch(self, source: bytes | bytearray | str) -> bytes:
        """Return the image bytes for *source*. Raises ImageSourceError."""
        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise ImageSourceError("Empty image buffer")
            return bytes(source)

        if not isinstance(source, str) or not source.strip():
            raise ImageSourceError(f"Unsupported image source: {type(source).__name__}")

        source = source.strip()
        if is_data_uri(source):
            data = decode_data_uri(source)
        elif is_url(source):
            data = await self._fetch_url(source)
        else:
            data = await self._read_file(source)

        if not data:
            raise ImageSourceError(f"Image source produced no data: {source[:60]}")
        return data

    # -- private -------------------------------------------------------------

    async def _fetch_url(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ImageSourceError(f"Failed to download image {url}: {exc}") from exc

        logger.debug("Downloaded image %s (%d bytes)", url, len(resp.content))
        return resp.content

    @staticmethod
    async def _read_file(path_str: str) -> bytes:
        path = Path(path_str).expanduser()
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ImageSourceError(f"Cannot read image file {path}: {exc}") from exc
