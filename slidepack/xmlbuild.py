"""
Minimal XML element builder for OOXML parts.

Parts are assembled as small element trees and serialized in one place,
so every attribute value and text node goes through escape_xml(). Call
sites never interpolate user text into markup.

Serialization is compact (no indentation): whitespace between elements
is never significant to OOXML readers, and text runs are emitted
exactly as given.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Union
from xml.sax.saxutils import escape

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

# Namespaces
NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"
NS_CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"

# Root attributes shared by presentation, master, layout and slide parts
PML_NAMESPACES = {"xmlns:a": NS_A, "xmlns:r": NS_R, "xmlns:p": NS_P}

_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# C0 controls other than TAB/LF/CR, and the two non-characters, are not
# allowed anywhere in an XML 1.0 document.
_ILLEGAL_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

Child = Union["Element", str]


def escape_xml(value: Any) -> str:
    """Escape & < > " ' and drop characters XML 1.0 cannot carry."""
    if value is None:
        return ""
    text = _ILLEGAL_XML_CHARS.sub("", str(value))
    return escape(text, _ENTITIES)


class Element:
    """An XML element: tag, ordered attributes, and children (elements or text)."""

    __slots__ = ("tag", "attrs", "children")

    def __init__(self, tag: str, attrs: Optional[Dict[str, Any]] = None, *children: Optional[Child]):
        self.tag = tag
        self.attrs: Dict[str, Any] = dict(attrs or {})
        self.children: List[Child] = []
        self.extend(children)

    def append(self, child: Optional[Child]) -> Element:
        """Append a child; None is ignored so optional parts can be passed inline."""
        if child is not None:
            self.children.append(child)
        return self

    def extend(self, children: Iterable[Optional[Child]]) -> Element:
        for child in children:
            self.append(child)
        return self

    def __repr__(self) -> str:
        return f"<Element {self.tag} attrs={len(self.attrs)} children={len(self.children)}>"


def E(tag: str, attrs: Optional[Dict[str, Any]] = None, *children: Optional[Child]) -> Element:
    """Shorthand constructor: E("a:off", {"x": 0, "y": 0})."""
    return Element(tag, attrs, *children)


def _write(node: Child, out: List[str]) -> None:
    if isinstance(node, str):
        out.append(escape_xml(node))
        return

    out.append("<")
    out.append(node.tag)
    for key, value in node.attrs.items():
        out.append(f' {key}="{escape_xml(value)}"')
    if not node.children:
        out.append("/>")
        return
    out.append(">")
    for child in node.children:
        _write(child, out)
    out.append(f"</{node.tag}>")


def serialize(root: Element, declaration: bool = True) -> str:
    """
    Serialize an element tree to a string.

    Args:
        root: Root element
        declaration: Prefix the standalone UTF-8 XML declaration

    Returns:
        XML text (encode as UTF-8 before storing)
    """
    out: List[str] = []
    if declaration:
        out.append(XML_DECLARATION)
        out.append("\n")
    _write(root, out)
    return "".join(out)
