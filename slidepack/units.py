"""
Slide geometry in English Metric Units (EMU).

Every part that positions shapes or declares the canvas takes its numbers
from here.
"""

EMU_PER_INCH = 914400

# 16:9 canvas (13.333 in x 7.5 in)
SLIDE_WIDTH_EMU = 12192000
SLIDE_HEIGHT_EMU = 6858000

# Portrait notes page (7.5 in x 10 in)
NOTES_WIDTH_EMU = 6858000
NOTES_HEIGHT_EMU = 9144000


def emu(inches: float) -> int:
    """Convert inches to whole EMU (rounded to nearest)."""
    return int(round(inches * EMU_PER_INCH))
