"""
Pytest configuration and shared fixtures for slidepack.
"""

import struct
import sys
import zlib
from pathlib import Path

import pytest
import yaml

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from slidepack.config import set_config
from slidepack.models import CoverConfig, Deck, Slide, SlideLayoutKind


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    return (
        struct.pack(">I", len(payload))
        + kind
        + payload
        + struct.pack(">I", zlib.crc32(kind + payload) & 0xFFFFFFFF)
    )


def make_png(width: int = 2, height: int = 2) -> bytes:
    """A valid RGB PNG filled with one colour."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    row = b"\x00" + b"\x25\x63\xeb" * width
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(row * height))
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Each test starts without a cached global config or SLIDEPACK_* overrides."""
    for var in ("SLIDEPACK_LOG_LEVEL", "SLIDEPACK_VALIDATE_PNG", "SLIDEPACK_OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def q4_deck(png_bytes) -> Deck:
    """Cover "Q4 Review" plus one titleBody slide with two lines."""
    return Deck(
        title="Q4",
        slides=[
            Slide(id="cover", title="Q4 Review", layout=SlideLayoutKind.TITLE, is_cover=True),
            Slide(id="agenda", title="Agenda", body="A\nB", layout=SlideLayoutKind.TITLE_BODY),
        ],
        cover=CoverConfig(name="Jane", date="1 Jan", image_bytes=png_bytes),
    )


@pytest.fixture
def four_slide_deck(png_bytes) -> Deck:
    return Deck(
        title="Quarterly",
        slides=[
            Slide(id="c", title="Quarterly", layout=SlideLayoutKind.TITLE, is_cover=True),
            Slide(id="s2", title="Intro", body="Welcome", layout=SlideLayoutKind.TITLE),
            Slide(id="s3", title="Agenda", body="One\nTwo", layout=SlideLayoutKind.TITLE_BODY),
            Slide(id="s4", title="Numbers", body="a\nb\nc", layout=SlideLayoutKind.TWO_COLUMN),
        ],
        cover=CoverConfig(name="Sam", date="2 Feb", image_bytes=png_bytes),
    )


@pytest.fixture
def deck_file(tmp_path, png_bytes) -> Path:
    """A YAML deck file with a cover.png next to it."""
    folder = tmp_path / "deck"
    folder.mkdir()
    (folder / "cover.png").write_bytes(png_bytes)
    data = {
        "title": "Q4 Review: Sales & Ops",
        "cover": {"name": "Jane", "date": "1 Jan", "image": "cover.png"},
        "slides": [
            {"title": "Q4 Review", "layout": "title"},
            {"title": "Agenda", "layout": "titleBody", "body": "A\nB"},
            {"title": "KPIs", "layout": "twoColumn", "body": "x\ny\nz"},
        ],
    }
    path = folder / "deck.yaml"
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path) -> Path:
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws
