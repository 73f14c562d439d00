"""Web image search and fetch module for the color pipeline.

Architectural role:
    Scrapes an image search results page for full-size image URLs and fetches
    image bytes for collage building and vision prompts.

Retrieval strategy:
    1. GET the Bing image results page for the search term.
    2. Parse `a.iusc` anchors; each carries a JSON `m` attribute whose `murl`
       field is the source image URL.
    3. Keep unique HTTP(S) URLs in page order, capped at the requested count.
    4. Fetch image bodies on demand with retry/backoff, streaming them under
       a size cap so oversized bodies are abandoned mid-download.

Ranking logic:
    None. Result order is the search engine's page order.

Determinism and performance:
    Non-deterministic in practice: result pages change, source hosts fail, and
    transient errors are retried. Callers fetch several images concurrently.
"""

from __future__ import annotations

import asyncio
import base64
import io
import json
import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlparse

import httpx
from bs4 import BeautifulSoup
from PIL import Image

from vibe.errors import FetchError, InvalidImageUrlError


logger = logging.getLogger(__name__)

_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/95.0.4638.69 Safari/537.36"
)


@dataclass(frozen=True)
class ImageSearchConfig:
    """Runtime configuration for `ImageSearchModule`.

    Fields are read from environment variables at import time.

    Relevant environment variables:
        - `IMAGE_SEARCH_TIMEOUT_SECONDS`
        - `IMAGE_SEARCH_RESULTS`
        - `IMAGE_SEARCH_USER_AGENT`
        - `IMAGE_RETRY_ATTEMPTS`
        - `IMAGE_BACKOFF_SECONDS`
        - `IMAGE_MAX_BYTES`
    """

    timeout_seconds: float = float(os.getenv("IMAGE_SEARCH_TIMEOUT_SECONDS", "12"))
    max_results: int = int(os.getenv("IMAGE_SEARCH_RESULTS", "10"))
    user_agent: str = os.getenv("IMAGE_SEARCH_USER_AGENT", _BROWSER_USER_AGENT).strip()
    retry_attempts: int = int(os.getenv("IMAGE_RETRY_ATTEMPTS", "2"))
    backoff_seconds: float = float(os.getenv("IMAGE_BACKOFF_SECONDS", "0.5"))
    max_image_bytes: int = int(os.getenv("IMAGE_MAX_BYTES", str(8 * 1024 * 1024)))


class ImageSearchModule:
    """Image search scraping and image fetching service.

    Failure model:
        - Search failures degrade to an empty result list (logged).
        - Image fetch failures raise `FetchError` / `InvalidImageUrlError` after
          retries so callers can drop individual images.
    """

    _SEARCH_URL = "https://www.bing.com/images/search"
    _RETRY_STATUSES = (429, 500, 502, 503, 504)

    def __init__(
        self,
        config: ImageSearchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the module.

        Args:
            config: Network configuration; defaults to environment settings.
            transport: Optional httpx transport override (used by tests).
        """
        self.config = config or ImageSearchConfig()
        self._transport = transport

    async def search_images(self, term: str, num_results: int | None = None) -> list[str]:
        """Return source image URLs for a search term.

        Args:
            term: Search text (typically extracted keywords).
            num_results: Maximum URL count; defaults to `config.max_results`.

        Returns:
            Unique HTTP(S) image URLs in result-page order.

        Edge cases:
            - Blank term returns `[]` without a request.
            - Transport/status failures are logged and return `[]`.
        """
        if not term or not term.strip():
            return []

        limit = self.config.max_results if num_results is None else num_results
        url = f"{self._SEARCH_URL}?q={quote(term.strip())}&FORM=HDRSC2"

        try:
            response, body = await self._request_with_retry(url)
        except (FetchError, httpx.HTTPError):
            logger.exception("Image search failed for term=%r", term)
            return []

        urls = self.parse_result_page(body.decode(response.encoding or "utf-8", errors="replace"))
        return self._unique_http_urls(urls, limit)

    @staticmethod
    def parse_result_page(html: str) -> list[str]:
        """Extract `murl` values from `a.iusc` anchors of a results page.

        Anchors whose `m` attribute is missing or not valid JSON are skipped.
        """
        soup = BeautifulSoup(html, "html.parser")
        urls: list[str] = []

        for anchor in soup.select("a.iusc"):
            raw = anchor.get("m")
            if not raw:
                continue
            try:
                data = json.loads(raw)
            except ValueError:
                continue
            murl = data.get("murl") if isinstance(data, dict) else None
            if isinstance(murl, str) and murl:
                urls.append(murl)

        return urls

    async def fetch_image_bytes(self, url: str) -> bytes:
        """Fetch one image body.

        Raises:
            InvalidImageUrlError: URL is not HTTP(S).
            FetchError: Status/transport failure after retries, or body larger
                than `config.max_image_bytes`.
        """
        return (await self._fetch_image(url))[0]

    async def fetch_to_data_url(self, url: str) -> str:
        """Return the image at `url` as a base64 `data:` URL.

        `data:` URLs are returned unchanged. The MIME type comes from the
        response `Content-Type` when it names an image, otherwise it is sniffed
        from the bytes, falling back to `image/jpeg`.
        """
        if url.startswith("data:"):
            return url

        data, content_type = await self._fetch_image(url)
        mime = content_type if content_type.startswith("image/") else sniff_mime(data)
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    async def _fetch_image(self, url: str) -> tuple[bytes, str]:
        if not self._is_http_url(url):
            raise InvalidImageUrlError(url)

        try:
            response, data = await self._request_with_retry(url, max_bytes=self.config.max_image_bytes)
        except httpx.HTTPError as exc:
            raise FetchError(f"Error fetching {url}: {exc}") from exc

        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        return data, content_type

    async def _request_with_retry(
        self,
        url: str,
        max_bytes: int | None = None,
    ) -> tuple[httpx.Response, bytes]:
        """GET a URL with retry/backoff for transient failures.

        The body is streamed. With `max_bytes` set, a larger declared
        `Content-Length` is rejected before reading, and reading stops as soon
        as the running total passes the cap.

        Retry policy:
            Retries status codes `429,500,502,503,504` and transport errors up
            to `retry_attempts` using exponential backoff.

        Returns:
            The response (headers, status, encoding) and its body bytes.

        Raises:
            FetchError: Non-success status (after retries for transient ones)
                or body over `max_bytes`.
            httpx.RequestError: Transport failure after retries.
        """
        attempts = max(1, self.config.retry_attempts)
        headers = {"User-Agent": self.config.user_agent}

        for attempt in range(attempts):
            retry = False
            try:
                async with httpx.AsyncClient(
                    timeout=self.config.timeout_seconds,
                    follow_redirects=True,
                    headers=headers,
                    transport=self._transport,
                ) as client:
                    async with client.stream("GET", url) as response:
                        retry = response.status_code in self._RETRY_STATUSES and attempt < attempts - 1
                        if not retry and response.is_success:
                            return response, await self._read_body(response, url, max_bytes)
            except httpx.RequestError:
                if attempt < attempts - 1:
                    await asyncio.sleep(self._backoff(attempt))
                    continue
                raise

            if retry:
                await asyncio.sleep(self._backoff(attempt))
                continue

            raise FetchError(f"Fetch failed for {url}, status: {response.status_code}")

        raise FetchError(f"Request failed without error details for url={url}")

    @staticmethod
    async def _read_body(response: httpx.Response, url: str, max_bytes: int | None) -> bytes:
        """Read a streamed body, aborting once it exceeds `max_bytes`."""
        if max_bytes is not None:
            declared = response.headers.get("content-length", "").strip()
            if declared.isdigit() and int(declared) > max_bytes:
                raise FetchError(f"Image too large ({declared} bytes): {url}")

        chunks: list[bytes] = []
        total = 0
        async for chunk in response.aiter_bytes():
            total += len(chunk)
            if max_bytes is not None and total > max_bytes:
                raise FetchError(f"Image larger than {max_bytes} bytes: {url}")
            chunks.append(chunk)
        return b"".join(chunks)

    def _backoff(self, attempt: int) -> float:
        """Compute exponential backoff delay for a retry attempt."""
        return self.config.backoff_seconds * (2 ** attempt)

    def _unique_http_urls(self, urls: list[str], limit: int) -> list[str]:
        """Filter to unique HTTP(S) URLs, preserving first-seen order."""
        out: list[str] = []
        seen: set[str] = set()

        for url in urls:
            if len(out) >= limit:
                break
            if not self._is_http_url(url) or url in seen:
                continue
            seen.add(url)
            out.append(url)

        return out

    @staticmethod
    def _is_http_url(url: Any) -> bool:
        """Return whether a URL is syntactically valid HTTP(S)."""
        if not isinstance(url, str):
            return False
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def sniff_mime(data: bytes) -> str:
    """Guess an image MIME type from its bytes with Pillow."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            mime = Image.MIME.get(img.format or "")
    except (OSError, ValueError):
        mime = None
    return mime or "image/jpeg"
