"""Pillow-based palette and collage primitives.

Processing flow (driven by `vibe.image.service`):
    1. `extract_palette` on each source image.
    2. `has_color_outliers` drops images that are extreme in brightness.
    3. `downsample` caps the working size, keeping aspect ratio.
    4. `stretch_to_size` forces a uniform tile size.
    5. `stitch_horizontally` lays tiles left to right on a white canvas.

Buffers:
    Functions take and return encoded image bytes. Resized/stitched output is
    always PNG so tiles keep their alpha channel.

Error handling strategy:
    Decode and processing failures are raised as typed errors
    (`PaletteError`, `MissingMetadataError`, `DownsampleError`,
    `StitchingError`) so the caller can skip a single image.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass

from PIL import Image

from vibe.errors import DownsampleError, MissingMetadataError, PaletteError, StitchingError


# Pillow failures surfaced while decoding or transforming untrusted bytes.
# Corrupt PNG chunk streams raise SyntaxError from `load()`.
_IMAGE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)

# Palette extraction works on a thumbnail; populations are relative.
_PALETTE_SAMPLE_SIZE = (128, 128)


@dataclass(frozen=True)
class Swatch:
    """One dominant color and how many sampled pixels it covers."""

    rgb: tuple[int, int, int]
    population: int

    @property
    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self.rgb)

    @property
    def brightness(self) -> float:
        r, g, b = self.rgb
        return (r + g + b) / 3


def _open(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def _encode_png(img: Image.Image) -> bytes:
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "A" in img.getbands() or "transparency" in img.info else "RGB")
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def extract_palette(data: bytes, max_colors: int = 6) -> list[Swatch]:
    """Extract dominant colors with median-cut quantization.

    Args:
        data: Encoded image bytes.
        max_colors: Upper bound on returned swatches.

    Returns:
        Swatches sorted by population, largest first.

    Raises:
        PaletteError: Image cannot be decoded or yields no colors.
    """
    try:
        img = _open(data).convert("RGB")
        img.thumbnail(_PALETTE_SAMPLE_SIZE)
        quantized = img.quantize(colors=max_colors, method=Image.Quantize.MEDIANCUT)
    except _IMAGE_ERRORS as exc:
        raise PaletteError(f"Error extracting palette: {exc}") from exc

    palette = quantized.getpalette() or []
    counts = quantized.getcolors() or []

    swatches = []
    for population, index in counts:
        rgb = tuple(palette[index * 3:index * 3 + 3])
        if len(rgb) == 3 and population > 0:
            swatches.append(Swatch(rgb=rgb, population=population))

    if not swatches:
        raise PaletteError("No swatches found.")

    swatches.sort(key=lambda s: s.population, reverse=True)
    return swatches


def has_color_outliers(swatches: list[Swatch]) -> bool:
    """Return whether a palette is too extreme to represent a theme.

    An image is an outlier when it has no swatches, when its swatch brightness
    spans more than 200 levels, or when any swatch is nearly black (< 10) or
    nearly white (> 245).
    """
    if not swatches:
        return True

    brightnesses = [s.brightness for s in swatches]
    lowest, highest = min(brightnesses), max(brightnesses)

    if highest - lowest > 200:
        return True
    return lowest < 10 or highest > 245


def downsample(data: bytes, max_dimension: int) -> bytes:
    """Shrink an image so neither side exceeds `max_dimension`.

    Aspect ratio is preserved. Images already within bounds are returned
    unchanged (same bytes, no re-encode).

    Raises:
        MissingMetadataError: Decoded image reports no width/height.
        DownsampleError: Decode or resize failure.
    """
    try:
        img = _open(data)
    except _IMAGE_ERRORS as exc:
        raise DownsampleError(f"Downsample error: {exc}") from exc

    width, height = img.size
    if not width or not height:
        raise MissingMetadataError("Missing metadata (width/height).")

    if width <= max_dimension and height <= max_dimension:
        return data

    scale = min(max_dimension / width, max_dimension / height)
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))

    try:
        return _encode_png(img.resize(new_size, Image.LANCZOS))
    except _IMAGE_ERRORS as exc:
        raise DownsampleError(f"Downsample error: {exc}") from exc


def stretch_to_size(data: bytes, width: int, height: int) -> bytes:
    """Resize to exactly `width` x `height`, ignoring aspect ratio.

    Raises:
        DownsampleError: Decode or resize failure.
    """
    try:
        return _encode_png(_open(data).resize((width, height), Image.LANCZOS))
    except _IMAGE_ERRORS as exc:
        raise DownsampleError(f"Stretch error: {exc}") from exc


def stitch_horizontally(buffers: list[bytes], each_width: int, each_height: int) -> bytes:
    """Place equally sized tiles side by side on a white canvas.

    Tiles that are not `each_width` x `each_height` are resized to fit.

    Returns:
        PNG bytes of size `(each_width * len(buffers), each_height)`.

    Raises:
        StitchingError: No buffers, or any tile fails to decode.
    """
    if not buffers:
        raise StitchingError("No buffers to stitch.")

    try:
        canvas = Image.new(
            "RGBA",
            (each_width * len(buffers), each_height),
            (255, 255, 255, 255),
        )
        left = 0
        for buf in buffers:
            tile = _open(buf).convert("RGBA")
            if tile.size != (each_width, each_height):
                tile = tile.resize((each_width, each_height), Image.LANCZOS)
            canvas.alpha_composite(tile, dest=(left, 0))
            left += each_width
        return _encode_png(canvas)
    except _IMAGE_ERRORS as exc:
        raise StitchingError(f"Stitching error: {exc}") from exc


def to_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
