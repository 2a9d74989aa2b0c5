"""Layout metrics and colour palettes for rendered screens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..configuration import UserInterfaceStyle

Color = Tuple[int, int, int]

# Navigation bar metrics
NAVIGATION_BAR_HEIGHT: int = 44
LARGE_TITLE_HEIGHT: int = 52
LARGE_TITLE_SIZE_DELTA: int = 18
HAIRLINE_WIDTH: int = 1

# Stack and padding metrics
DEFAULT_PADDING: int = 16
DEFAULT_SPACING: int = 8

# Sheet metrics
SHEET_TOP_OFFSET: int = 10
SHEET_CORNER_RADIUS: int = 10
FORM_SHEET_SIZE: Tuple[int, int] = (540, 620)
DIMMING_ALPHA: int = 102
GRABBER_SIZE: Tuple[int, int] = (36, 5)
GRABBER_TOP: int = 5

# Rendering order for composed scenes
DRAW_ORDER = ("root", "presentations")


@dataclass(frozen=True)
class Palette:
    """System colours for one appearance."""

    background: Color
    label: Color
    separator: Color
    navigation_bar: Color
    sheet_background: Color
    dimming: Color
    grabber: Color


LIGHT_PALETTE = Palette(
    background=(255, 255, 255),
    label=(0, 0, 0),
    separator=(198, 198, 200),
    navigation_bar=(249, 249, 249),
    sheet_background=(255, 255, 255),
    dimming=(0, 0, 0),
    grabber=(196, 196, 198),
)

DARK_PALETTE = Palette(
    background=(0, 0, 0),
    label=(255, 255, 255),
    separator=(56, 56, 58),
    navigation_bar=(18, 18, 18),
    sheet_background=(28, 28, 30),
    dimming=(0, 0, 0),
    grabber=(72, 72, 74),
)


def palette_for(style: UserInterfaceStyle) -> Palette:
    if style is UserInterfaceStyle.DARK:
        return DARK_PALETTE
    return LIGHT_PALETTE
