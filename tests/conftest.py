"""
Shared fixtures for the lyricard tests.

Qt runs on the offscreen platform so the compositor and widget tests work
without a display.
"""

import io
import os
import struct
import zlib

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PIL import Image

from lyricard.core.models import LyricLine


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole test session."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def make_png():
    """Factory for small in-memory PNG images."""

    def _make(color=(255, 0, 0), size=(32, 32), stripe=None):
        img = Image.new("RGB", size, color)
        if stripe is not None:
            stripe_color, stripe_width = stripe
            for x in range(stripe_width):
                for y in range(size[1]):
                    img.putpixel((x, y), stripe_color)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    return _make


@pytest.fixture
def sample_lines():
    return [
        LyricLine(time=0.5, text="First line"),
        LyricLine(time=2.0, text="Second line", translation="第二行"),
        LyricLine(time=4.0, text="Third line"),
    ]


@pytest.fixture
def oversized_png():
    """PNG header declaring 20000x20000 pixels; trips Pillow's decompression bomb guard."""

    def chunk(kind, body):
        return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", zlib.crc32(kind + body))

    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )
