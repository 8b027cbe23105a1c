"""
Tests for package-level parts and the static scaffolding.
"""

import xml.etree.ElementTree as ET

import pytest

from slidepack import parts, scaffold
from slidepack.xmlbuild import NS_A, NS_CONTENT_TYPES, NS_P, NS_R, NS_RELS

CT = f"{{{NS_CONTENT_TYPES}}}"
REL = f"{{{NS_RELS}}}"
P = f"{{{NS_P}}}"
R = f"{{{NS_R}}}"


def _parse(xml: str) -> ET.Element:
    return ET.fromstring(xml.encode("utf-8"))


def _rels(xml: str):
    return [(r.get("Id"), r.get("Type"), r.get("Target")) for r in _parse(xml).iter(f"{REL}Relationship")]


class TestContentTypes:

    @pytest.mark.parametrize("slide_count", [1, 2, 5])
    def test_one_override_per_slide(self, slide_count):
        root = _parse(parts.content_types_xml(slide_count))
        slide_parts = [
            o.get("PartName") for o in root.iter(f"{CT}Override")
            if o.get("ContentType") == parts.CT_SLIDE
        ]
        assert slide_parts == [f"/ppt/slides/slide{n}.xml" for n in range(1, slide_count + 1)]

    def test_fixed_overrides(self):
        root = _parse(parts.content_types_xml(3))
        overrides = {o.get("PartName"): o.get("ContentType") for o in root.iter(f"{CT}Override")}
        assert overrides["/ppt/presentation.xml"] == parts.CT_PRESENTATION
        assert overrides["/ppt/theme/theme1.xml"] == parts.CT_THEME
        assert overrides["/ppt/slideMasters/slideMaster1.xml"] == parts.CT_SLIDE_MASTER
        assert overrides["/ppt/slideLayouts/slideLayout1.xml"] == parts.CT_SLIDE_LAYOUT
        assert overrides["/ppt/media/cover.png"] == "image/png"
        assert len(overrides) == 5 + 3

    def test_defaults(self):
        root = _parse(parts.content_types_xml(1))
        defaults = {d.get("Extension"): d.get("ContentType") for d in root.iter(f"{CT}Default")}
        assert defaults == {
            "rels": parts.CT_RELATIONSHIPS,
            "xml": "application/xml",
            "png": "image/png",
        }


class TestRelationships:

    def test_root(self):
        assert _rels(parts.root_rels_xml()) == [
            ("rId1", parts.REL_OFFICE_DOCUMENT, "ppt/presentation.xml"),
        ]

    def test_presentation_ids_continue_after_slides(self):
        rels = _rels(parts.presentation_rels_xml(3))
        assert rels == [
            ("rId1", parts.REL_SLIDE, "slides/slide1.xml"),
            ("rId2", parts.REL_SLIDE, "slides/slide2.xml"),
            ("rId3", parts.REL_SLIDE, "slides/slide3.xml"),
            ("rId4", parts.REL_SLIDE_MASTER, "slideMasters/slideMaster1.xml"),
            ("rId5", parts.REL_THEME, "theme/theme1.xml"),
        ]

    def test_cover_slide_has_layout_and_image(self):
        rels = _rels(parts.cover_slide_rels_xml())
        assert ("rId1", parts.REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml") in rels
        assert ("rId2", parts.REL_IMAGE, "../media/cover.png") in rels

    def test_content_slide_has_layout_only(self):
        assert _rels(parts.slide_rels_xml()) == [
            ("rId1", parts.REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
        ]

    def test_master_and_layout(self):
        master = dict((t, target) for _, t, target in _rels(parts.slide_master_rels_xml()))
        assert master[parts.REL_SLIDE_LAYOUT] == "../slideLayouts/slideLayout1.xml"
        assert master[parts.REL_THEME] == "../theme/theme1.xml"
        assert _rels(parts.slide_layout_rels_xml()) == [
            ("rId1", parts.REL_SLIDE_MASTER, "../slideMasters/slideMaster1.xml"),
        ]


class TestPresentation:

    def test_slide_ids(self):
        root = _parse(parts.presentation_xml(4))
        ids = [(int(s.get("id")), s.get(f"{R}id")) for s in root.iter(f"{P}sldId")]
        assert ids == [(257, "rId1"), (258, "rId2"), (259, "rId3"), (260, "rId4")]

    def test_master_reference(self):
        root = _parse(parts.presentation_xml(4))
        master = root.find(f"{P}sldMasterIdLst/{P}sldMasterId")
        assert master.get(f"{R}id") == "rId5"
        assert int(master.get("id")) == parts.SLIDE_MASTER_ID

    def test_canvas(self):
        root = _parse(parts.presentation_xml(2))
        size = root.find(f"{P}sldSz")
        assert (size.get("cx"), size.get("cy")) == ("12192000", "6858000")
        notes = root.find(f"{P}notesSz")
        assert (notes.get("cx"), notes.get("cy")) == ("6858000", "9144000")

    def test_part_paths(self):
        assert parts.slide_path(3) == "ppt/slides/slide3.xml"
        assert parts.slide_rels_path(3) == "ppt/slides/_rels/slide3.xml.rels"


class TestScaffold:

    def test_theme(self):
        root = _parse(scaffold.theme_xml())
        assert root.get("name") == scaffold.THEME_NAME
        elements = root.find(f"{{{NS_A}}}themeElements")
        for child in ("clrScheme", "fontScheme", "fmtScheme"):
            assert elements.find(f"{{{NS_A}}}{child}") is not None

    def test_master_declares_layout_and_color_map(self):
        root = _parse(scaffold.slide_master_xml())
        assert root.find(f"{P}clrMap") is not None
        layout_id = root.find(f"{P}sldLayoutIdLst/{P}sldLayoutId")
        assert int(layout_id.get("id")) == parts.SLIDE_LAYOUT_ID
        assert layout_id.get(f"{R}id") == "rId1"

    def test_layout_id_above_master_id(self):
        assert parts.SLIDE_LAYOUT_ID > parts.SLIDE_MASTER_ID

    def test_layout(self):
        root = _parse(scaffold.slide_layout_xml())
        assert root.find(f"{P}cSld/{P}spTree") is not None
