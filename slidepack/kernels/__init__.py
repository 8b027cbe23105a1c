"""
slidepack kernels

Stage 1: Loading:
    deck_load:      deck file (YAML/JSON) + cover image -> validated deck

Stage 2: Packaging:
    package_build:  deck -> .pptx archive in the workspace output directory
"""

__all__ = []
