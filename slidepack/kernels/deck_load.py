"""
Kernel: deck_load
Stage: 1 (Loading)

Reads a deck file (YAML or JSON) and its cover image into the workspace:

    config["deck_path"]     deck file (required)
    config["cover_image"]   optional image path, overrides the deck's cover.image

The cover image path in the deck file is resolved relative to the deck
file. A missing image is not an error: the package is still built, with
an empty cover.png. A deck that fails validate_deck() fails the kernel.

Deck file shape:

    title: Q4
    cover: {name: Jane, date: 1 Jan, image: cover.png}
    slides:
      - {title: Q4 Review, layout: title}          # first slide = cover
      - {title: Agenda, layout: titleBody, body: "A\\nB"}
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from slidepack.base import Kernel, KernelInput
from slidepack.models import Deck, validate_deck

logger = logging.getLogger(__name__)


def read_deck_file(path: Path) -> Dict[str, Any]:
    """Parse a .json, .yaml or .yml deck file into a dictionary."""
    text = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"Deck file must contain a mapping at top level: {path}")
    return data


def resolve_cover_image(deck_path: Path, deck_data: Dict[str, Any],
                        override: Optional[str] = None) -> Optional[Path]:
    """Cover image path from the override or the deck's cover.image field."""
    if override:
        return Path(override)
    ref = (deck_data.get("cover") or {}).get("image")
    if not ref:
        return None
    p = Path(ref)
    return p if p.is_absolute() else deck_path.parent / p


class DeckLoadKernel(Kernel):
    """Deck file + cover image -> validated deck in the workspace."""

    name = "deck_load"
    version = "1.0.0"
    stage = 1
    description = "Load and validate a deck file and its cover image"

    requires: List[str] = []

    def validate_input(self, input: KernelInput) -> List[str]:
        errors = super().validate_input(input)
        deck_path = input.config.get("deck_path")
        if not deck_path:
            errors.append("Missing config key: deck_path")
        elif not Path(deck_path).is_file():
            errors.append(f"Deck file not found: {deck_path}")
        return errors

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        deck_path = Path(input.config["deck_path"])
        cover_cfg = input.config.get("cover", {})
        warnings: List[str] = []

        deck_data = read_deck_file(deck_path)

        image_path = resolve_cover_image(deck_path, deck_data, input.config.get("cover_image"))
        image_bytes = b""
        if image_path is None:
            warnings.append("No cover image given; cover.png will be empty")
        elif not image_path.is_file():
            warnings.append(f"Cover image not found: {image_path}; cover.png will be empty")
        else:
            image_bytes = image_path.read_bytes()
        for w in warnings:
            logger.warning(f"[{self.name}] {w}")

        deck = Deck.from_dict(deck_data, image_bytes=image_bytes)
        problems = validate_deck(deck)
        if problems:
            raise ValueError("Invalid deck: " + " ".join(problems))

        asset_path = input.workspace / f"stage{self.stage}" / "assets" / cover_cfg.get("image_name", "cover.png")
        asset_path.parent.mkdir(parents=True, exist_ok=True)
        asset_path.write_bytes(image_bytes)

        return {
            "deck": deck.to_dict(),
            "deck_path": str(deck_path),
            "cover_image_source": str(image_path) if image_path else None,
            "cover_image": str(asset_path),
            "cover_image_bytes": len(image_bytes),
            "cover_image_sha256": hashlib.sha256(image_bytes).hexdigest(),
            "slide_count": deck.slide_count,
            "_warnings": warnings,
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        title = data.get("deck", {}).get("title", "")
        return (
            f"Deck '{title}': {data.get('slide_count', 0)} slides, "
            f"cover image {data.get('cover_image_bytes', 0)} bytes"
        )
