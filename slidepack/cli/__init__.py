"""
slidepack CLI, slidectl command-line interface.

Usage:
    python -m slidepack.cli.slidectl build <deck.yaml>
    python -m slidepack.cli.slidectl inspect <file.pptx>
    python -m slidepack.cli.slidectl sample -o deck.yaml
"""

from slidepack.cli.slidectl import main
