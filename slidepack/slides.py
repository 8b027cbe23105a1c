"""
Slide part markup: the cover slide and content slides.

Slide 1 is always the cover: a full-bleed picture (relationship rId2 ->
media/cover.png) under three white, bold text boxes for the title, the
presenter name and the date.

Slides 2..N share one template: an accent bar along the top edge, a
title box, and a body region chosen by the slide layout:

    title       optional subtitle box (omitted when the body is blank)
    titleBody   one full-width box, one paragraph per non-blank line
    twoColumn   lines split ceil(n/2) left / rest right, two boxes

Positions are given in inches and converted with units.emu().
All text reaches the markup through xmlbuild, which escapes it.
"""

import math
from typing import List, Optional, Sequence

from slidepack.models import CoverConfig, Slide, SlideLayoutKind
from slidepack.parts import COVER_IMAGE_RID
from slidepack.scaffold import MAJOR_FONT
from slidepack.units import SLIDE_HEIGHT_EMU, SLIDE_WIDTH_EMU, emu
from slidepack.xmlbuild import E, Element, PML_NAMESPACES, serialize

# Palette
TEXT_DARK = "111827"
TEXT_LIGHT = "FFFFFF"
ACCENT = "2563EB"
SLIDE_BACKGROUND = "F9FAFB"

# Font sizes in hundredths of a point
COVER_TITLE_SIZE = 3200
COVER_META_SIZE = 1800
TITLE_SIZE = 3800
SUBTITLE_SIZE = 2400

# Cover fallbacks
DEFAULT_COVER_TITLE = "Cover"
NAME_LABEL = "Name :"
DATE_LABEL = "Date :"


# ---------------------------------------------------------------------------
# DrawingML building blocks
# ---------------------------------------------------------------------------

def _group_properties() -> List[Element]:
    """The mandatory non-visual and visual properties of the root shape tree."""
    return [
        E("p:nvGrpSpPr", None,
          E("p:cNvPr", {"id": 1, "name": ""}),
          E("p:cNvGrpSpPr"),
          E("p:nvPr")),
        E("p:grpSpPr", None,
          E("a:xfrm", None,
            E("a:off", {"x": 0, "y": 0}),
            E("a:ext", {"cx": 0, "cy": 0}),
            E("a:chOff", {"x": 0, "y": 0}),
            E("a:chExt", {"cx": 0, "cy": 0}))),
    ]


def _xfrm(x: int, y: int, cx: int, cy: int) -> Element:
    return E("a:xfrm", None, E("a:off", {"x": x, "y": y}), E("a:ext", {"cx": cx, "cy": cy}))


def _rect() -> Element:
    return E("a:prstGeom", {"prst": "rect"}, E("a:avLst"))


def _solid_fill(color: str) -> Element:
    return E("a:solidFill", None, E("a:srgbClr", {"val": color}))


def _styled_run(text: str, size: int, color: str, bold: bool = True) -> Element:
    """A run with explicit size, colour and the heading typeface."""
    props = E("a:rPr", {"lang": "en-US", "b": 1 if bold else 0, "sz": size},
              _solid_fill(color),
              E("a:latin", {"typeface": MAJOR_FONT}))
    return E("a:r", None, props, E("a:t", None, text))


def _plain_run(text: str, size: Optional[int] = None) -> Element:
    attrs = {"lang": "en-US"}
    if size is not None:
        attrs["sz"] = size
    else:
        attrs["dirty"] = 0
    return E("a:r", None, E("a:rPr", attrs), E("a:t", None, text))


def _paragraphs(lines: Sequence[str]) -> List[Element]:
    """One paragraph per line; an empty list still yields one empty paragraph."""
    if not lines:
        lines = [""]
    return [E("a:p", None, _plain_run(line)) for line in lines]


def _text_box(shape_id: int, name: str, x: int, y: int, cx: int, cy: int,
              paragraphs: Sequence[Element]) -> Element:
    return E(
        "p:sp", None,
        E("p:nvSpPr", None,
          E("p:cNvPr", {"id": shape_id, "name": name}),
          E("p:cNvSpPr", {"txBox": 1}),
          E("p:nvPr")),
        E("p:spPr", None, _xfrm(x, y, cx, cy), _rect(), E("a:noFill")),
        E("p:txBody", None,
          E("a:bodyPr", {"wrap": "square"}),
          E("a:lstStyle"),
          *paragraphs),
    )


def _slide(shapes: Sequence[Element], background: Optional[Element] = None) -> str:
    tree = E("p:spTree", None, *_group_properties())
    tree.extend(shapes)
    root = E(
        "p:sld",
        dict(PML_NAMESPACES),
        E("p:cSld", None, background, tree),
        E("p:clrMapOvr", None, E("a:masterClrMapping")),
    )
    return serialize(root)


# ---------------------------------------------------------------------------
# Cover slide
# ---------------------------------------------------------------------------

def cover_texts(slide: Slide, cover: CoverConfig, presentation_title: str = "") -> List[str]:
    """
    Title, name and date lines shown on the cover, with fallbacks applied.

    The title falls back to the presentation title, then to "Cover";
    blank name/date leave the bare "Name :" / "Date :" labels.
    """
    title = (slide.title or "").strip() or (presentation_title or "").strip() or DEFAULT_COVER_TITLE
    name = (cover.name or "").strip()
    date = (cover.date or "").strip()
    return [
        title,
        f"{NAME_LABEL} {name}" if name else NAME_LABEL,
        f"{DATE_LABEL} {date}" if date else DATE_LABEL,
    ]


def cover_slide_xml(slide: Slide, cover: CoverConfig, presentation_title: str = "") -> str:
    """Render slide 1: background picture plus title/name/date overlay."""
    title, name_line, date_line = cover_texts(slide, cover, presentation_title)

    picture = E(
        "p:pic", None,
        E("p:nvPicPr", None,
          E("p:cNvPr", {"id": 2, "name": "Cover Image"}),
          E("p:cNvPicPr"),
          E("p:nvPr")),
        E("p:blipFill", None,
          E("a:blip", {"r:embed": COVER_IMAGE_RID}),
          E("a:stretch", None, E("a:fillRect"))),
        E("p:spPr", None, _xfrm(0, 0, SLIDE_WIDTH_EMU, SLIDE_HEIGHT_EMU), _rect()),
    )

    meta_x, meta_w, meta_h = emu(0.8), emu(6.2), emu(0.45)
    shapes = [
        picture,
        _text_box(10, "Cover Title", emu(0.8), emu(2.1), emu(6.4), emu(0.8),
                  [E("a:p", None, _styled_run(title, COVER_TITLE_SIZE, TEXT_LIGHT))]),
        _text_box(11, "Cover Name", meta_x, emu(2.95), meta_w, meta_h,
                  [E("a:p", None, _styled_run(name_line, COVER_META_SIZE, TEXT_LIGHT))]),
        _text_box(12, "Cover Date", meta_x, emu(3.45), meta_w, meta_h,
                  [E("a:p", None, _styled_run(date_line, COVER_META_SIZE, TEXT_LIGHT))]),
    ]
    return _slide(shapes)


# ---------------------------------------------------------------------------
# Content slides
# ---------------------------------------------------------------------------

def split_columns(lines: Sequence[str]) -> List[List[str]]:
    """Split lines into [left, right]; the left column takes the extra line."""
    half = math.ceil(len(lines) / 2)
    return [list(lines[:half]), list(lines[half:])]


def body_shapes(slide: Slide, number: int) -> List[Element]:
    """Body text boxes for a content slide, according to its layout."""
    body_text = (slide.body or "").strip()
    lines = slide.body_lines()
    body_y, body_h = emu(1.7), emu(5.2)

    if slide.layout == SlideLayoutKind.TITLE:
        if not body_text:
            return []
        return [_text_box(
            3, f"Subtitle {number}", emu(0.7), emu(1.6), emu(11.9), emu(0.9),
            [E("a:p", None, _plain_run(body_text, size=SUBTITLE_SIZE))],
        )]

    if slide.layout == SlideLayoutKind.TWO_COLUMN:
        left, right = split_columns(lines)
        return [
            _text_box(3, f"BodyLeft {number}", emu(0.7), body_y, emu(5.9), body_h, _paragraphs(left)),
            _text_box(4, f"BodyRight {number}", emu(6.9), body_y, emu(5.7), body_h, _paragraphs(right)),
        ]

    if not lines and body_text:
        lines = [body_text]
    return [_text_box(3, f"Body {number}", emu(0.9), body_y, emu(11.3), body_h, _paragraphs(lines))]


def content_slide_xml(slide: Slide, number: int) -> str:
    """
    Render a content slide.

    Args:
        slide: The slide model
        number: 1-based archive slide number (2..N); used for shape names
            and as the "Slide N" fallback title

    Returns:
        Slide part XML
    """
    title = (slide.title or "").strip() or f"Slide {number}"

    background = E("p:bg", None, E("p:bgPr", None, _solid_fill(SLIDE_BACKGROUND), E("a:effectLst")))

    top_bar = E(
        "p:sp", None,
        E("p:nvSpPr", None,
          E("p:cNvPr", {"id": 2, "name": f"TopBar {number}"}),
          E("p:cNvSpPr"),
          E("p:nvPr")),
        E("p:spPr", None,
          _xfrm(0, 0, SLIDE_WIDTH_EMU, emu(0.15)),
          _rect(),
          _solid_fill(ACCENT),
          E("a:ln", None, _solid_fill(ACCENT))),
    )

    title_box = _text_box(
        10, f"Title {number}", emu(0.7), emu(0.6), emu(11.9), emu(0.9),
        [E("a:p", None, _styled_run(title, TITLE_SIZE, TEXT_DARK))],
    )

    return _slide([top_bar, title_box, *body_shapes(slide, number)], background=background)
