"""
Kernel: package_build
Stage: 2 (Packaging)

Rebuilds the Deck persisted by deck_load, synthesizes the .pptx archive
and writes it to {workspace}/{output.directory}/<title-slug>.pptx.

Packaging is deterministic: the reported sha256 only changes when the
deck or the cover image changes.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Dict, List

from slidepack.assembler import collect_parts, pack_parts, package_filename
from slidepack.base import Kernel, KernelInput, load_kernel_data
from slidepack.models import Deck

logger = logging.getLogger(__name__)


class PackageBuildKernel(Kernel):
    """Validated deck -> .pptx file."""

    name = "package_build"
    version = "1.0.0"
    stage = 2
    description = "Synthesize the OOXML presentation package"

    requires: List[str] = ["deck_load"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        loaded = load_kernel_data(input.dependencies["deck_load"])
        if "deck" not in loaded:
            raise ValueError("deck_load output has no deck (did it fail?)")

        image_file = Path(loaded.get("cover_image") or "")
        image_bytes = image_file.read_bytes() if image_file.is_file() else b""
        deck = Deck.from_dict(loaded["deck"], image_bytes=image_bytes)

        validate_png = input.config.get("cover", {}).get("validate_png", True)
        out_cfg = input.config.get("output", {})

        package_parts = collect_parts(deck, validate_png=validate_png)
        data = pack_parts(package_parts)
        part_names = [p.path for p in package_parts]

        filename = input.config.get("output_name") or package_filename(
            deck.title,
            max_chars=out_cfg.get("filename_max_chars", 80),
            default=out_cfg.get("default_basename", "presentation"),
        )
        output_path = input.workspace / out_cfg.get("directory", "output") / filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
        logger.info(f"[{self.name}] Wrote {output_path} ({len(data)} bytes)")

        return {
            "pptx_file": str(output_path),
            "slide_count": deck.slide_count,
            "parts": part_names,
            "size_bytes": len(data),
            "sha256": hashlib.sha256(data).hexdigest(),
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        return (
            f"Package: {data.get('slide_count', 0)} slides, "
            f"{len(data.get('parts', []))} parts, {data.get('size_bytes', 0)} bytes"
        )
