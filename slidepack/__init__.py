"""
slidepack: slide deck to PowerPoint (.pptx) package synthesizer

Turns an in-memory deck (title, cover overlay, ordered slides) into a
store-only ZIP holding a minimal, conformant PresentationML package.
No third-party office library is involved: every part is rendered here
and archived by a built-in ZIP writer with its own CRC-32.

Core (pure, no I/O):
    crc:        CRC-32 checksum (reflected, polynomial 0xEDB88320)
    archive:    store-only ZIP writer and verifying reader
    xmlbuild:   element tree + escaping serializer
    units:      inches -> EMU, canvas sizes
    parts:      content types, relationships, presentation part
    scaffold:   theme, slide master, slide layout
    slides:     cover and content slide markup
    assembler:  Deck -> ordered parts -> .pptx bytes

Pipeline:
    kernels.deck_load:      deck file + cover image -> workspace (stage 1)
    kernels.package_build:  workspace deck -> output/<slug>.pptx (stage 2)
    cli.slidectl:           build / inspect / sample
"""

__version__ = "0.1.0"

from slidepack.assembler import build_package, collect_parts, package_filename
from slidepack.models import CoverConfig, Deck, DeckError, Slide, SlideLayoutKind

__all__ = [
    "build_package",
    "collect_parts",
    "package_filename",
    "CoverConfig",
    "Deck",
    "DeckError",
    "Slide",
    "SlideLayoutKind",
]
