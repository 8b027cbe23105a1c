"""
Package assembler: Deck -> .pptx bytes.

Renders every part of the presentation package from one deck snapshot,
orders them, and hands them to the store-only archive writer:

    [Content_Types].xml, _rels/.rels
    ppt/presentation.xml (+ rels)
    ppt/theme/theme1.xml
    ppt/slideMasters/slideMaster1.xml (+ rels)
    ppt/slideLayouts/slideLayout1.xml (+ rels)
    ppt/media/cover.png                     raw caller bytes, never re-encoded
    ppt/slides/slide1.xml (+ rels)          cover
    ppt/slides/slideN.xml (+ rels)          content slides, deck order

No disk or network access happens here. The same deck always yields the
same bytes.
"""

from typing import List
import logging
import re

from slidepack import parts, scaffold
from slidepack.archive import ArchiveEntry, zip_store
from slidepack.models import Deck, DeckError, PackagePart
from slidepack.slides import content_slide_xml, cover_slide_xml

logger = logging.getLogger(__name__)

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class CoverImageError(DeckError):
    """Raised when non-empty cover bytes are not a PNG image."""
    pass


def _xml_part(path: str, xml: str) -> PackagePart:
    return PackagePart(path=path, data=xml.encode("utf-8"))


def check_deck(deck: Deck, validate_png: bool = True) -> None:
    """
    Fail fast on structural contract violations.

    Only what would make the package unanchored or mislabelled is
    rejected here; blank titles and bodies degrade to fallbacks.

    Raises:
        DeckError: No slides, or slide 1 is not the cover
        CoverImageError: Cover bytes present but not PNG (validate_png=True)
    """
    if not deck.slides:
        raise DeckError("Deck has no slides: a cover slide is required at position 0")
    if not deck.slides[0].is_cover:
        raise DeckError(
            f"Slide 1 ({deck.slides[0].id!r}) is not the cover slide; the cover must come first"
        )
    image = deck.cover.image_bytes or b""
    if validate_png and image and not image.startswith(PNG_SIGNATURE):
        raise CoverImageError(
            f"Cover image is not a PNG ({len(image)} bytes, starts with {image[:8]!r})"
        )


def collect_parts(deck: Deck, validate_png: bool = True) -> List[PackagePart]:
    """
    Render the full, ordered list of package parts for a deck.

    Args:
        deck: Deck snapshot (slides[0] is the cover)
        validate_png: Reject non-empty cover bytes lacking the PNG signature

    Returns:
        PackagePart list in archive order
    """
    check_deck(deck, validate_png=validate_png)

    slide_count = deck.slide_count
    image = bytes(deck.cover.image_bytes or b"")
    if not image:
        logger.warning("Cover image is empty; storing a zero-length cover.png")

    result = [
        _xml_part(parts.CONTENT_TYPES_PATH, parts.content_types_xml(slide_count)),
        _xml_part(parts.ROOT_RELS_PATH, parts.root_rels_xml()),
        _xml_part(parts.PRESENTATION_PATH, parts.presentation_xml(slide_count)),
        _xml_part(parts.PRESENTATION_RELS_PATH, parts.presentation_rels_xml(slide_count)),
        _xml_part(parts.THEME_PATH, scaffold.theme_xml()),
        _xml_part(parts.SLIDE_MASTER_PATH, scaffold.slide_master_xml()),
        _xml_part(parts.SLIDE_MASTER_RELS_PATH, parts.slide_master_rels_xml()),
        _xml_part(parts.SLIDE_LAYOUT_PATH, scaffold.slide_layout_xml()),
        _xml_part(parts.SLIDE_LAYOUT_RELS_PATH, parts.slide_layout_rels_xml()),
        PackagePart(path=parts.COVER_IMAGE_PATH, data=image),
        _xml_part(parts.slide_path(1), cover_slide_xml(deck.slides[0], deck.cover, deck.title)),
        _xml_part(parts.slide_rels_path(1), parts.cover_slide_rels_xml()),
    ]

    slide_rels = parts.slide_rels_xml()
    for number, slide in enumerate(deck.content_slides, start=2):
        result.append(_xml_part(parts.slide_path(number), content_slide_xml(slide, number)))
        result.append(_xml_part(parts.slide_rels_path(number), slide_rels))

    logger.debug(f"Rendered {len(result)} parts for {slide_count} slides")
    return result


def pack_parts(package_parts: List[PackagePart]) -> bytes:
    """Archive already-rendered parts in the given order."""
    return zip_store(ArchiveEntry(name=p.path, data=p.data) for p in package_parts)


def build_package(deck: Deck, validate_png: bool = True) -> bytes:
    """
    Build the .pptx archive for a deck.

    Args:
        deck: Deck snapshot; not modified
        validate_png: Reject non-empty cover bytes lacking the PNG signature

    Returns:
        Archive bytes (MIME type PPTX_MIME_TYPE)

    Raises:
        DeckError: Empty deck or missing cover; nothing is produced
    """
    package_parts = collect_parts(deck, validate_png=validate_png)
    data = pack_parts(package_parts)
    logger.info(f"Built package: {deck.slide_count} slides, {len(package_parts)} parts, {len(data)} bytes")
    return data


def package_filename(title: str, max_chars: int = 80, default: str = "presentation") -> str:
    """
    Derive a download-safe .pptx file name from a presentation title.

    "Q4 Review: Sales & Ops" -> "q4-review-sales-ops.pptx"
    """
    base = (title or default).strip()[:max_chars]
    base = re.sub(r"[^\w\- ]+", "", base, flags=re.ASCII)
    base = re.sub(r"\s+", "-", base).lower()
    return f"{base or default}.pptx"
