#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Quadrant Glyphs
===========================================
Copyright (c) 2025 PNGN-Tec LLC

Unicode block elements encoding a 2x2 on/off pattern in one terminal cell.
The foreground color paints the "on" quadrants and the background color the
rest, so a mask and its complement produce complementary glyphs.

Masks are written ((top_left, top_right), (bottom_left, bottom_right)).
"""

from itertools import product
from typing import Dict, Tuple

Mask = Tuple[Tuple[bool, bool], Tuple[bool, bool]]

BLANK = " "
SOLID = "█"

# Bits: TL TR BL BR
QUADRANT_GLYPHS: Dict[int, str] = {
    0b0000: BLANK,
    0b0001: "▗",
    0b0010: "▖",
    0b0011: "▄",
    0b0100: "▝",
    0b0101: "▐",
    0b0110: "▞",
    0b0111: "▟",
    0b1000: "▘",
    0b1001: "▚",
    0b1010: "▌",
    0b1011: "▙",
    0b1100: "▀",
    0b1101: "▜",
    0b1110: "▛",
    0b1111: SOLID,
}

GLYPH_SET = frozenset(QUADRANT_GLYPHS.values())


def mask_bits(mask: Mask) -> int:
    """Pack a 2x2 mask into TL TR BL BR bits"""
    (tl, tr), (bl, br) = mask
    return (bool(tl) << 3) | (bool(tr) << 2) | (bool(bl) << 1) | bool(br)


def bits_mask(bits: int) -> Mask:
    """Inverse of mask_bits"""
    return ((bool(bits & 0b1000), bool(bits & 0b0100)),
            (bool(bits & 0b0010), bool(bits & 0b0001)))


def glyph_for_mask(mask: Mask) -> str:
    """Glyph whose filled quadrants are exactly the True cells of mask"""
    return QUADRANT_GLYPHS[mask_bits(mask)]


def all_masks():
    """Every 2x2 mask, in bit order"""
    for tl, tr, bl, br in product((False, True), repeat=4):
        yield ((tl, tr), (bl, br))


# Reverse lookup, used when painting glyphs back into pixels
GLYPH_MASKS: Dict[str, Mask] = {glyph: bits_mask(bits) for bits, glyph in QUADRANT_GLYPHS.items()}
