"""
Data models for slide-deck packaging.

A Deck is supplied by the caller (editor, deck file, kernel pipeline),
already validated, and is never mutated while a package is synthesized.
All models are dataclasses with to_dict()/from_dict() so decks can be
persisted as JSON or YAML between kernels.

Wire values for layouts follow the editor: "title", "titleBody",
"twoColumn".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DeckError(Exception):
    """Raised when a deck violates the input contract (no slides, no cover)."""
    pass


def _text(value: Any) -> str:
    """Deck-file scalars (YAML dates, numbers) as text; None as empty."""
    return "" if value is None else str(value)


def _flag(value: Any) -> bool:
    """Strict boolean: real bools, 0/1, or the strings true/false/yes/no."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0", ""):
            return False
        raise ValueError(f"Invalid boolean value: {value!r}")
    return bool(value)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SlideLayoutKind(str, Enum):
    """Body arrangement of a content slide."""
    TITLE = "title"                 # title + optional subtitle
    TITLE_BODY = "titleBody"        # title + one full-width body box
    TWO_COLUMN = "twoColumn"        # title + body lines split in two columns


# ---------------------------------------------------------------------------
# Deck
# ---------------------------------------------------------------------------

@dataclass
class Slide:
    """One slide of the deck. Position in Deck.slides is its order."""
    id: str
    title: str
    body: str = ""                  # newline-delimited lines
    layout: SlideLayoutKind = SlideLayoutKind.TITLE_BODY
    is_cover: bool = False

    def body_lines(self) -> List[str]:
        """Body split on newlines, trimmed, blank lines dropped."""
        return [line.strip() for line in (self.body or "").split("\n") if line.strip()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "layout": self.layout.value,
            "is_cover": self.is_cover,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Slide:
        return cls(
            id=str(d["id"]),
            title=_text(d.get("title")),
            body=_text(d.get("body")),
            layout=SlideLayoutKind(d.get("layout") or SlideLayoutKind.TITLE_BODY.value),
            is_cover=_flag(d.get("is_cover", False)),
        )


@dataclass
class CoverConfig:
    """Cover overlay: presenter name, date and the background PNG bytes."""
    name: str = ""
    date: str = ""
    image_bytes: bytes = b""        # may be empty; stored verbatim as cover.png

    def to_dict(self) -> Dict[str, Any]:
        # Image bytes travel separately (see kernels.deck_load)
        return {"name": self.name, "date": self.date}

    @classmethod
    def from_dict(cls, d: Dict[str, Any], image_bytes: bytes = b"") -> CoverConfig:
        return cls(
            name=_text(d.get("name")),
            date=_text(d.get("date")),
            image_bytes=image_bytes or b"",
        )


@dataclass
class Deck:
    """
    A complete presentation: title, ordered slides, cover overlay.

    Invariants (checked by validate_deck, assumed by the synthesizer):
        - slides[0].is_cover is True, no other slide is a cover
        - at least one slide follows the cover
        - every title is non-blank; every non-cover slide whose layout
          is not TITLE has a non-blank body
    """
    title: str
    slides: List[Slide] = field(default_factory=list)
    cover: CoverConfig = field(default_factory=CoverConfig)

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    @property
    def cover_slide(self) -> Optional[Slide]:
        return self.slides[0] if self.slides else None

    @property
    def content_slides(self) -> List[Slide]:
        return self.slides[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "cover": self.cover.to_dict(),
            "slides": [s.to_dict() for s in self.slides],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], image_bytes: bytes = b"") -> Deck:
        """
        Build a deck from its dictionary form.

        Accepts the deck-file shape: slide ids are optional (filled as
        "slide-<n>"), "is_cover" defaults to True for the first slide
        only, and "layout" defaults to "titleBody".
        """
        slides: List[Slide] = []
        for i, raw in enumerate(d.get("slides") or []):
            raw = dict(raw)
            raw.setdefault("id", f"slide-{i + 1}")
            raw.setdefault("is_cover", i == 0)
            slides.append(Slide.from_dict(raw))
        return cls(
            title=_text(d.get("title")),
            slides=slides,
            cover=CoverConfig.from_dict(d.get("cover") or {}, image_bytes=image_bytes),
        )


@dataclass(frozen=True)
class PackagePart:
    """One file of the OOXML package, built fresh for every synthesis call."""
    path: str                       # archive-relative, forward slashes
    data: bytes


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_deck(deck: Deck) -> List[str]:
    """
    Check the deck invariants the synthesizer relies on.

    Messages use 1-based slide numbers, as shown to the deck author.

    Returns:
        List of error messages (empty if the deck is valid)
    """
    errors: List[str] = []

    if not (deck.title or "").strip():
        errors.append("Presentation title is required.")
    if len(deck.slides) < 2:
        errors.append("Add at least one slide after the cover.")
    if deck.slides and not deck.slides[0].is_cover:
        errors.append("Slide 1 must be the cover slide.")

    for i, slide in enumerate(deck.slides):
        n = i + 1
        if i > 0 and slide.is_cover:
            errors.append(f"Slide {n} is marked as cover; only slide 1 may be the cover.")
        if not (slide.title or "").strip():
            errors.append(f"Slide {n} title is required.")
        if (
            not slide.is_cover
            and slide.layout != SlideLayoutKind.TITLE
            and not (slide.body or "").strip()
        ):
            errors.append(f"Slide {n} body text is required for this layout.")

    return errors


def sample_deck(image_bytes: bytes = b"") -> Deck:
    """The starter deck: a cover and two content slides."""
    return Deck(
        title="Ocean Professional Deck",
        slides=[
            Slide(id="cover", title="Weekly Metrics", layout=SlideLayoutKind.TITLE, is_cover=True),
            Slide(
                id="slide-2",
                title="Agenda",
                body="• Performance highlights\n• Key initiatives\n• Risks & mitigations\n• Next steps",
                layout=SlideLayoutKind.TITLE_BODY,
            ),
            Slide(
                id="slide-3",
                title="KPIs",
                body="Revenue: +18%\nRetention: 96%\nNPS: 54\nPipeline: $3.2M",
                layout=SlideLayoutKind.TWO_COLUMN,
            ),
        ],
        cover=CoverConfig(name="Subrata B", date="24 Dec 2023", image_bytes=image_bytes),
    )
