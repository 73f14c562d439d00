"""Google Fonts lookup helpers for the font pipeline.

Architectural role:
    Resolves model-chosen font names against the public Google Fonts catalog,
    builds CSS2 API URLs covering every published weight, fetches the resulting
    stylesheet with a fallback font, and condenses it into a short summary the
    model can pick font variables from.

Retrieval strategy:
    1. Fetch catalog metadata once per `GoogleFontsClient` instance.
    2. Look up each font family case-insensitively and list its weight keys.
    3. Build a `family=Name:ital,wght@...` parameter per known family.
    4. GET the primary stylesheet; on any failure GET the fallback one.

Failure handling:
    - Metadata failures raise `RequestFailedError`.
    - Unknown families are skipped when building URLs, so an unknown primary
      font naturally falls through to the fallback stylesheet.
    - A failing fallback raises `FallbackFailedError`.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass

import httpx

from vibe.errors import FallbackFailedError, RequestFailedError


logger = logging.getLogger(__name__)

METADATA_URL = "https://fonts.google.com/metadata/fonts"
CSS2_URL = "https://fonts.googleapis.com/css2"

# Google prefixes the metadata JSON to defeat cross-site script inclusion.
_ANTI_JSON_PREFIX = re.compile(r"^\)\]\}'")

_FONT_FACE_RE = re.compile(
    r"@font-face\s*{[^}]*?font-family:\s*'([^']+)';[^}]*?"
    r"font-style:\s*(\w+);[^}]*?font-weight:\s*(\d+);"
)

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class FontsConfig:
    """Network configuration for `GoogleFontsClient`.

    Relevant environment variables:
        - `FONTS_TIMEOUT_SECONDS`
    """

    timeout_seconds: float = float(os.getenv("FONTS_TIMEOUT_SECONDS", "15"))
    user_agent: str = "Mozilla/5.0"


class GoogleFontsClient:
    """Catalog lookups and stylesheet fetching against Google Fonts."""

    def __init__(
        self,
        config: FontsConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or FontsConfig()
        self._transport = transport
        self._metadata: dict | None = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    async def fetch_metadata(self) -> dict:
        """Return catalog metadata, fetching it on first use.

        Raises:
            RequestFailedError: Fetch failed, non-2xx status, or invalid JSON.
        """
        if self._metadata is not None:
            return self._metadata

        try:
            async with self._client() as client:
                response = await client.get(METADATA_URL)
        except httpx.HTTPError as exc:
            raise RequestFailedError(f"Failed to fetch Google Fonts metadata: {exc}") from exc

        if not response.is_success:
            raise RequestFailedError(
                f"Failed to fetch Google Fonts metadata: {response.status_code}"
            )

        try:
            data = json.loads(_ANTI_JSON_PREFIX.sub("", response.text, count=1))
        except ValueError as exc:
            raise RequestFailedError("Google Fonts metadata is not valid JSON") from exc

        self._metadata = data if isinstance(data, dict) else {}
        return self._metadata

    async def get_font_weights(self, font_name: str) -> list[str] | None:
        """List the published weight keys of a font family.

        Returns:
            Keys such as `["300", "400", "300i italic"]`, or `None` when the
            family is not in the catalog.
        """
        data = await self.fetch_metadata()
        wanted = font_name.strip().lower()

        for font in data.get("familyMetadataList", []):
            if str(font.get("family", "")).lower() == wanted:
                return [
                    f"{key} italic" if "i" in key else key
                    for key in (font.get("fonts") or {})
                ]

        return None

    async def build_google_fonts_url(self, font_names) -> str:
        """Build a CSS2 API URL requesting every weight of the given families.

        Args:
            font_names: One family name or a list of them.

        Returns:
            URL ending in `&display=swap`. Families missing from the catalog are
            left out, so no known family yields `.../css2?&display=swap`.
        """
        names = [font_names] if isinstance(font_names, str) else list(font_names)
        params = []

        for name in names:
            if not name or not name.strip():
                continue
            weights = await self.get_font_weights(name)
            if not weights:
                continue
            params.append(format_family_param(name, weights))

        return f"{CSS2_URL}?{'&'.join(params)}&display=swap"

    async def fetch_google_font_css(self, primary_url: str, fallback_url: str) -> str:
        """Fetch a stylesheet, falling back to a second URL.

        The primary URL wins when the request succeeds with a 2xx status and
        the body mentions `font-family`. Otherwise the fallback is tried under
        the same test.

        Raises:
            FallbackFailedError: The fallback did not produce a stylesheet.
        """
        css = await self._fetch_css(primary_url)
        if css is not None:
            return css

        logger.warning("Primary font stylesheet unusable, trying fallback: %s", fallback_url)
        css = await self._fetch_css(fallback_url)
        if css is None:
            raise FallbackFailedError()
        return css

    async def _fetch_css(self, url: str) -> str | None:
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.HTTPError:
            logger.debug("Stylesheet fetch failed: %s", url, exc_info=True)
            return None

        if not response.is_success:
            return None

        css = response.text
        if not css or "font-family" not in css:
            return None
        return css


def format_family_param(font_name: str, weights: list[str]) -> str:
    """Format one `family=` query parameter for the CSS2 API.

    Example:
        `("Open Sans", ["300", "400", "300i italic"])` ->
        `family=Open+Sans:ital,wght@0,300;0,400;1,300`
    """
    family = re.sub(r"\s+", "+", font_name.strip())

    regular = sorted(
        w for w in (_weight_number(k) for k in weights if "italic" not in k) if w is not None
    )
    italic = sorted(
        w for w in (_weight_number(k) for k in weights if "italic" in k) if w is not None
    )

    pairs = []
    if regular:
        pairs.append("0," + ";0,".join(str(w) for w in regular))
    if italic:
        pairs.append("1," + ";1,".join(str(w) for w in italic))

    if pairs:
        family += f":ital,wght@{';'.join(pairs)}"

    return f"family={family}"


def _weight_number(key: str) -> int | None:
    match = _LEADING_DIGITS.match(key)
    return int(match.group(1)) if match else None


def parse_google_font_css(css_text: str) -> str:
    """Summarize a Google Fonts stylesheet.

    Returns:
        `"Roboto: 100, 400, italic 100 | Lobster: 400"`: one entry per family
        in first-seen order, styles de-duplicated and string-sorted.
    """
    font_map: dict[str, set[str]] = {}

    for family, style, weight in _FONT_FACE_RE.findall(css_text):
        key = f"italic {weight}" if style == "italic" else weight
        font_map.setdefault(family, set()).add(key)

    return " | ".join(
        f"{family}: {', '.join(sorted(styles))}" for family, styles in font_map.items()
    )
