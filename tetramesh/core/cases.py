"""Inside/outside classification and the 16-case edge table.

A corner is inside when its density is below the isovalue. The pattern is
packed as a 4-bit integer with p0 as the most significant bit, so the table
row for (p0, p1, p2, p3) = (F, T, F, T) is ``CASE_TABLE[0b0101]``.

Masks list crossing flags in edge order p0p1, p0p2, p0p3, p1p2, p2p3, p3p1.
Complementary patterns share a mask (``CASE_TABLE[i] == CASE_TABLE[15 - i]``).
"""

from typing import Sequence, Tuple

Mask = Tuple[int, int, int, int, int, int]

# Edge order of every mask; pairs are tetrahedron vertex indices
EDGES = (
    ("p01", 0, 1),
    ("p02", 0, 2),
    ("p03", 0, 3),
    ("p12", 1, 2),
    ("p23", 2, 3),
    ("p31", 3, 1),
)

EMPTY_MASK: Mask = (0, 0, 0, 0, 0, 0)

CASE_TABLE: Tuple[Mask, ...] = (
    (0, 0, 0, 0, 0, 0),  # F F F F
    (0, 0, 1, 0, 1, 1),  # F F F T
    (0, 1, 0, 1, 1, 0),  # F F T F
    (0, 1, 1, 1, 0, 1),  # F F T T
    (1, 0, 0, 1, 0, 1),  # F T F F
    (1, 0, 1, 1, 1, 0),  # F T F T
    (1, 1, 0, 0, 1, 1),  # F T T F
    (1, 1, 1, 0, 0, 0),  # F T T T
    (1, 1, 1, 0, 0, 0),  # T F F F
    (1, 1, 0, 0, 1, 1),  # T F F T
    (1, 0, 1, 1, 1, 0),  # T F T F
    (1, 0, 0, 1, 0, 1),  # T F T T
    (0, 1, 1, 1, 0, 1),  # T T F F
    (0, 1, 0, 1, 1, 0),  # T T F T
    (0, 0, 1, 0, 1, 1),  # T T T F
    (0, 0, 0, 0, 0, 0),  # T T T T
)


def inside_flags(densities: Sequence[float], isovalue: float) -> Tuple[bool, bool, bool, bool]:
    """Per-corner inside flags (density < isovalue)."""
    if len(densities) != 4:
        raise ValueError(f"Expected 4 densities, got {len(densities)}")
    return tuple(bool(d < isovalue) for d in densities)


def inside_pattern(densities: Sequence[float], isovalue: float) -> int:
    """4-bit inside pattern, p0 in the high bit."""
    pattern = 0
    for flag in inside_flags(densities, isovalue):
        pattern = (pattern << 1) | int(flag)
    return pattern


def classify(densities: Sequence[float], isovalue: float) -> Mask:
    """Edge-crossing mask for one tetrahedron's corner densities."""
    return CASE_TABLE[inside_pattern(densities, isovalue)]


def mask_to_str(mask: Mask) -> str:
    """Mask as a six-character bit string in edge order, e.g. "001011"."""
    return "".join(str(b) for b in mask)
