"""
slidectl: CLI for slidepack.

Commands:
    build    Run deck_load -> package_build on a deck file, write the .pptx
    inspect  List and verify the entries of a .pptx archive
    sample   Write the starter deck as YAML
"""

import argparse
import hashlib
import shutil
import sys
from pathlib import Path
from typing import List, Optional

import logging

import yaml

from slidepack.config import get_config, load_config, set_config

logger = logging.getLogger(__name__)

# ANSI color helpers (auto-disabled for non-TTY)
_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(text: str) -> str:
    return _c("1", text)


def _green(text: str) -> str:
    return _c("32", text)


def _yellow(text: str) -> str:
    return _c("33", text)


def _red(text: str) -> str:
    return _c("31", text)


def _cyan(text: str) -> str:
    return _c("36", text)


def _dim(text: str) -> str:
    return _c("2", text)


# ---------------------------------------------------------------------------
# Kernel map (lazy imports)
# ---------------------------------------------------------------------------

_KERNEL_MAP = {
    # Stage 1
    "deck_load": ("slidepack.kernels.deck_load", "DeckLoadKernel"),
    # Stage 2
    "package_build": ("slidepack.kernels.package_build", "PackageBuildKernel"),
}

# Parts every package built by slidepack carries
_REQUIRED_PARTS = (
    "[Content_Types].xml",
    "_rels/.rels",
    "ppt/presentation.xml",
    "ppt/_rels/presentation.xml.rels",
    "ppt/slides/slide1.xml",
)


def _get_kernel(kernel_name: str):
    """Resolve a kernel class by name, or None if unknown."""
    entry = _KERNEL_MAP.get(kernel_name)
    if entry is None:
        return None

    import importlib
    module_path, class_name = entry
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


# ---------------------------------------------------------------------------
# Workspace resolution
# ---------------------------------------------------------------------------

def _resolve_workspace(deck_path: Path, workspace: Optional[Path]) -> Path:
    """Resolve the workspace directory for a deck file.

    Default: <deck dir>/.slidepack/<stem>_<hash12>/
    """
    if workspace:
        return workspace

    h = hashlib.sha256(str(deck_path.resolve()).encode()).hexdigest()[:12]
    return deck_path.parent / ".slidepack" / f"{deck_path.stem}_{h}"


# ---------------------------------------------------------------------------
# Kernel runner
# ---------------------------------------------------------------------------

def _run_kernel(
    kernel_name: str,
    workspace: Path,
    config: dict,
    verbose: bool = False,
):
    """Run a single kernel by name. Returns its KernelOutput, or None."""
    print(f"  [{_cyan(kernel_name)}] ", end="", flush=True)

    from slidepack.base import KernelInput

    kernel_cls = _get_kernel(kernel_name)
    if kernel_cls is None:
        print(_yellow("not found (skipped)"))
        return None

    kernel = kernel_cls()
    if verbose:
        print(_dim(kernel.description))
        print("    ", end="", flush=True)
    deps = _discover_dependencies(kernel.requires, workspace)
    ki = KernelInput(workspace=workspace, config=config, dependencies=deps)

    result = kernel.run(ki)

    if result.success:
        print(_green(result.summary or "done"))
        for w in result.warnings:
            print(f"    {_yellow(w)}")
    else:
        errors = "; ".join(result.errors) if result.errors else "unknown error"
        print(_red(f"FAILED: {errors}"))
        if verbose:
            print(f"    {_dim(str(result.output_file))}")
    return result


def _discover_dependencies(requires: List[str], workspace: Path) -> dict:
    """Find output files from required kernels."""
    deps = {}
    for req in requires:
        for stage in ("stage1", "stage2"):
            candidate = workspace / stage / f"{req}.json"
            if candidate.exists():
                deps[req] = candidate
                break
    return deps


# ---------------------------------------------------------------------------
# Command: build
# ---------------------------------------------------------------------------

def cmd_build(args: argparse.Namespace) -> int:
    """Load a deck file and synthesize its .pptx."""
    deck_path = Path(args.deck).resolve()
    if not deck_path.is_file():
        print(_red(f"Error: Deck file not found: {deck_path}"))
        return 1

    workspace = _resolve_workspace(
        deck_path, Path(args.workspace) if args.workspace else None
    )
    workspace.mkdir(parents=True, exist_ok=True)

    print(_bold(f"slidepack: {deck_path.name}"))
    print(f"Workspace: {_dim(str(workspace))}")
    print()

    config = get_config().to_dict()
    config["deck_path"] = str(deck_path)
    if args.cover_image:
        config["cover_image"] = str(Path(args.cover_image).resolve())
    if args.no_validate_png:
        config["cover"]["validate_png"] = False

    print(_bold("Stage 1: Loading"))
    loaded = _run_kernel("deck_load", workspace, config, args.verbose)
    print()
    if loaded is None or not loaded.success:
        return 1

    print(_bold("Stage 2: Packaging"))
    built = _run_kernel("package_build", workspace, config, args.verbose)
    print()
    if built is None or not built.success:
        return 1

    pptx_file = Path(built.data["pptx_file"])
    if args.output:
        target = Path(args.output)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(pptx_file, target)
        pptx_file = target

    print(_green(f"PPTX: {pptx_file}"))
    size = built.data["size_bytes"]
    print(f"  Size: {_dim(f'{size:,} bytes')}")
    print(f"  SHA256: {_dim(built.data['sha256'][:16])}")
    print(f"Slides: {_bold(str(built.data['slide_count']))}")
    return 0


# ---------------------------------------------------------------------------
# Command: inspect
# ---------------------------------------------------------------------------

def cmd_inspect(args: argparse.Namespace) -> int:
    """List the entries of a .pptx and verify its structure."""
    from slidepack.archive import ArchiveError, read_archive

    pptx_path = Path(args.pptx)
    if not pptx_path.is_file():
        print(_red(f"Error: File not found: {pptx_path}"))
        return 1

    try:
        records = read_archive(pptx_path.read_bytes())
    except ArchiveError as e:
        print(_red(f"Invalid archive: {e}"))
        return 1

    print(_bold(f"slidepack: {pptx_path.name}"))
    print(f"Entries: {_bold(str(len(records)))}")
    print()
    for r in records:
        print(f"  {r.name:<45} {_dim(f'{r.size:>9,} bytes')}  crc={r.crc:08x}")

    names = {r.name for r in records}
    missing = [p for p in _REQUIRED_PARTS if p not in names]
    slides = sorted(n for n in names if n.startswith("ppt/slides/slide") and n.endswith(".xml"))
    print()
    print(f"Slides: {_bold(str(len(slides)))}")
    if missing:
        for p in missing:
            print(_red(f"Missing part: {p}"))
        return 1

    print(_green("OK"))
    return 0


# ---------------------------------------------------------------------------
# Command: sample
# ---------------------------------------------------------------------------

def cmd_sample(args: argparse.Namespace) -> int:
    """Write the starter deck as a YAML deck file."""
    from slidepack.models import sample_deck

    data = sample_deck().to_dict()
    if args.cover_image:
        data["cover"]["image"] = args.cover_image
    text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    if not args.output:
        sys.stdout.write(text)
        return 0

    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(_green(f"Sample deck: {out}"))
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the slidectl argument parser."""
    parser = argparse.ArgumentParser(
        prog="slidectl",
        description="slidepack: deck file to PowerPoint package",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )
    parser.add_argument(
        "--config", default=None, help="Path to slidepack.yaml (default: auto-detect)"
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- build ---
    p_build = sub.add_parser("build", help="Build a .pptx from a deck file")
    p_build.add_argument("deck", help="Deck file (.yaml, .yml or .json)")
    p_build.add_argument("-o", "--output", help="Copy the .pptx to this path")
    p_build.add_argument("-w", "--workspace", help="Workspace directory (default: auto)")
    p_build.add_argument(
        "--cover-image", default=None,
        help="Cover PNG (overrides cover.image in the deck file)"
    )
    p_build.add_argument(
        "--no-validate-png", action="store_true",
        help="Store the cover image without checking the PNG signature"
    )
    p_build.add_argument(
        "--config", default=argparse.SUPPRESS, help="Path to slidepack.yaml (default: auto-detect)"
    )
    p_build.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Verbose output"
    )
    p_build.set_defaults(func=cmd_build)

    # --- inspect ---
    p_inspect = sub.add_parser("inspect", help="List and verify .pptx entries")
    p_inspect.add_argument("pptx", help="Path to a .pptx file")
    p_inspect.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Verbose output"
    )
    p_inspect.set_defaults(func=cmd_inspect)

    # --- sample ---
    p_sample = sub.add_parser("sample", help="Write the starter deck as YAML")
    p_sample.add_argument("-o", "--output", help="Output file (default: stdout)")
    p_sample.add_argument(
        "--cover-image", default=None, help="Value for cover.image in the sample"
    )
    p_sample.set_defaults(func=cmd_sample)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for slidectl."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(_red(f"Error: {e}"))
        return 1
    set_config(config)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=getattr(logging, config.logging.level))

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
