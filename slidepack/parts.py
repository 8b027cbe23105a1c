"""
Package-level OOXML parts: content types, relationships, presentation.

Each function is pure (slide count in, XML text out). Relationship ids
and part names are derived from the slide count only, so the parts built
here always agree with each other:

    presentation.xml.rels   rId1..rIdN      -> slides/slide1..N.xml
                            rId(N+1)        -> slideMasters/slideMaster1.xml
                            rId(N+2)        -> theme/theme1.xml
    presentation.xml        sldId 256+n     -> rIdn
                            sldMasterId     -> rId(N+1)
"""

from typing import List, Tuple

from slidepack.units import NOTES_HEIGHT_EMU, NOTES_WIDTH_EMU, SLIDE_HEIGHT_EMU, SLIDE_WIDTH_EMU
from slidepack.xmlbuild import (
    E,
    Element,
    NS_CONTENT_TYPES,
    NS_RELS,
    PML_NAMESPACES,
    serialize,
)

# ---------------------------------------------------------------------------
# Part names (archive paths)
# ---------------------------------------------------------------------------

CONTENT_TYPES_PATH = "[Content_Types].xml"
ROOT_RELS_PATH = "_rels/.rels"
PRESENTATION_PATH = "ppt/presentation.xml"
PRESENTATION_RELS_PATH = "ppt/_rels/presentation.xml.rels"
THEME_PATH = "ppt/theme/theme1.xml"
SLIDE_MASTER_PATH = "ppt/slideMasters/slideMaster1.xml"
SLIDE_MASTER_RELS_PATH = "ppt/slideMasters/_rels/slideMaster1.xml.rels"
SLIDE_LAYOUT_PATH = "ppt/slideLayouts/slideLayout1.xml"
SLIDE_LAYOUT_RELS_PATH = "ppt/slideLayouts/_rels/slideLayout1.xml.rels"
COVER_IMAGE_PATH = "ppt/media/cover.png"


def slide_path(n: int) -> str:
    """Archive path of slide n (1-based)."""
    return f"ppt/slides/slide{n}.xml"


def slide_rels_path(n: int) -> str:
    """Archive path of the relationships part of slide n (1-based)."""
    return f"ppt/slides/_rels/slide{n}.xml.rels"


# ---------------------------------------------------------------------------
# Content and relationship types
# ---------------------------------------------------------------------------

CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"
CT_PNG = "image/png"
CT_PRESENTATION = "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
CT_THEME = "application/vnd.openxmlformats-officedocument.theme+xml"
CT_SLIDE_LAYOUT = "application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"
CT_SLIDE_MASTER = "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"

_REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_OFFICE_DOCUMENT = f"{_REL_BASE}/officeDocument"
REL_SLIDE = f"{_REL_BASE}/slide"
REL_SLIDE_MASTER = f"{_REL_BASE}/slideMaster"
REL_SLIDE_LAYOUT = f"{_REL_BASE}/slideLayout"
REL_THEME = f"{_REL_BASE}/theme"
REL_IMAGE = f"{_REL_BASE}/image"

# Ids inside the presentation part
SLIDE_ID_BASE = 256
SLIDE_MASTER_ID = 2147483648
SLIDE_LAYOUT_ID = 2147483649

# Relationship ids inside slide parts
SLIDE_LAYOUT_RID = "rId1"
COVER_IMAGE_RID = "rId2"


def _relationships(rels: List[Tuple[str, str, str]]) -> str:
    """Render a relationships part from (id, type, target) triples."""
    root = E("Relationships", {"xmlns": NS_RELS})
    for rid, rel_type, target in rels:
        root.append(E("Relationship", {"Id": rid, "Type": rel_type, "Target": target}))
    return serialize(root)


# ---------------------------------------------------------------------------
# [Content_Types].xml
# ---------------------------------------------------------------------------

def content_types_xml(slide_count: int) -> str:
    """Default extensions plus one override per fixed part and per slide."""
    root = E("Types", {"xmlns": NS_CONTENT_TYPES})
    for extension, content_type in (
        ("rels", CT_RELATIONSHIPS),
        ("xml", CT_XML),
        ("png", CT_PNG),
    ):
        root.append(E("Default", {"Extension": extension, "ContentType": content_type}))

    overrides = [
        (PRESENTATION_PATH, CT_PRESENTATION),
        (THEME_PATH, CT_THEME),
        (SLIDE_LAYOUT_PATH, CT_SLIDE_LAYOUT),
        (SLIDE_MASTER_PATH, CT_SLIDE_MASTER),
        (COVER_IMAGE_PATH, CT_PNG),
    ]
    overrides.extend((slide_path(n), CT_SLIDE) for n in range(1, slide_count + 1))

    for part_name, content_type in overrides:
        root.append(E("Override", {"PartName": f"/{part_name}", "ContentType": content_type}))
    return serialize(root)


# ---------------------------------------------------------------------------
# Relationship parts
# ---------------------------------------------------------------------------

def root_rels_xml() -> str:
    """Package root -> presentation part."""
    return _relationships([("rId1", REL_OFFICE_DOCUMENT, PRESENTATION_PATH)])


def presentation_rels_xml(slide_count: int) -> str:
    """Slides first (rId1..rIdN), then master and theme."""
    rels = [
        (f"rId{n}", REL_SLIDE, f"slides/slide{n}.xml")
        for n in range(1, slide_count + 1)
    ]
    rels.append((f"rId{slide_count + 1}", REL_SLIDE_MASTER, "slideMasters/slideMaster1.xml"))
    rels.append((f"rId{slide_count + 2}", REL_THEME, "theme/theme1.xml"))
    return _relationships(rels)


def slide_master_rels_xml() -> str:
    return _relationships([
        ("rId1", REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
        ("rId2", REL_THEME, "../theme/theme1.xml"),
    ])


def slide_layout_rels_xml() -> str:
    return _relationships([("rId1", REL_SLIDE_MASTER, "../slideMasters/slideMaster1.xml")])


def cover_slide_rels_xml() -> str:
    """The cover relates to the shared layout and to the embedded image."""
    return _relationships([
        (SLIDE_LAYOUT_RID, REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
        (COVER_IMAGE_RID, REL_IMAGE, "../media/cover.png"),
    ])


def slide_rels_xml() -> str:
    """Content slides relate only to the shared layout."""
    return _relationships([(SLIDE_LAYOUT_RID, REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")])


# ---------------------------------------------------------------------------
# ppt/presentation.xml
# ---------------------------------------------------------------------------

def presentation_xml(slide_count: int) -> str:
    """Master reference, slide id list, 16:9 canvas and notes size."""
    master_ids = E("p:sldMasterIdLst", None, E("p:sldMasterId", {
        "id": SLIDE_MASTER_ID,
        "r:id": f"rId{slide_count + 1}",
    }))

    slide_ids: Element = E("p:sldIdLst")
    for n in range(1, slide_count + 1):
        slide_ids.append(E("p:sldId", {"id": SLIDE_ID_BASE + n, "r:id": f"rId{n}"}))

    root = E(
        "p:presentation",
        dict(PML_NAMESPACES),
        master_ids,
        slide_ids,
        E("p:sldSz", {"cx": SLIDE_WIDTH_EMU, "cy": SLIDE_HEIGHT_EMU, "type": "screen16x9"}),
        E("p:notesSz", {"cx": NOTES_WIDTH_EMU, "cy": NOTES_HEIGHT_EMU}),
    )
    return serialize(root)
