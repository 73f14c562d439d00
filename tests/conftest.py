from __future__ import annotations

import io
import struct
import zlib

import pytest
from PIL import Image


def png_bytes(size=(64, 64), color=(120, 60, 200)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


def _chunk(cid: bytes, body: bytes) -> bytes:
    return struct.pack(">I", len(body)) + cid + body + struct.pack(">I", zlib.crc32(cid + body))


def broken_png_bytes(size=(64, 64)) -> bytes:
    """PNG that opens fine but whose pixel data continues in an unreadable chunk."""
    width, height = size
    img = Image.frombytes("RGB", size, bytes((i * 37) % 256 for i in range(width * height * 3)))
    out = io.BytesIO()
    img.save(out, format="PNG")
    data = out.getvalue()
    start = data.index(b"IDAT") - 4
    (length,) = struct.unpack(">I", data[start:start + 4])
    payload = data[start + 8:start + 8 + length]
    half = len(payload) // 2
    return (
        data[:start]
        + _chunk(b"IDAT", payload[:half])
        + _chunk(b"\xd6DAT", payload[half:])
        + data[start + 12 + length:]
    )


@pytest.fixture
def make_png():
    return png_bytes


@pytest.fixture
def broken_png() -> bytes:
    return broken_png_bytes()


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
