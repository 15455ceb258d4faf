"""
Hex coordinate addressing for the Radix Tribes map.

Every hex is identified by an axial coordinate (q, r).  Throughout the game
state the coordinate is stored as a compact text key of the form
``"QQQ.RRR"``: each component is zero padded to three digits and negative
components carry a leading ``-`` (``"-005.012"``).  The text key is the
canonical identity used for garrisons, explored hexes and starting
locations, so encoding and parsing must round-trip losslessly.

Range queries:
--------------
The game measures reach with its own neighbourhood metric rather than true
hex distance: a hex is within ``radius`` of a centre when

    |q - center.q| + |r - center.r| <= 2 * radius

This metric is part of the game balance (scouting and starting visibility)
and is kept as is.
"""

import re
from dataclasses import dataclass

from radix_tribes.domain.errors import MalformedCoordinate

_COORD_PATTERN = re.compile(r"^(-?\d{3,})\.(-?\d{3,})$")


@dataclass(frozen=True)
class HexCoord:
    """
    A hexagonal coordinate using the axial coordinate system.

    Attributes:
        q: Column coordinate (horizontal axis)
        r: Row coordinate (diagonal axis)

    Example:
        >>> HexCoord(q=-5, r=12).key
        '-005.012'
    """

    q: int
    r: int

    def __hash__(self) -> int:
        """Make HexCoord hashable for use in sets and dicts."""
        return hash((self.q, self.r))

    @property
    def key(self) -> str:
        """Canonical text form of this coordinate."""
        return encode_coord(self.q, self.r)


def _encode_component(value: int) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{abs(value):03d}"


def encode_coord(q: int, r: int) -> str:
    """
    Encode an axial coordinate as its canonical text key.

    Args:
        q: Column coordinate
        r: Row coordinate

    Returns:
        The ``"QQQ.RRR"`` key with sign-aware zero padding

    Example:
        >>> encode_coord(0, 0)
        '000.000'
        >>> encode_coord(3, -7)
        '003.-007'
    """
    return f"{_encode_component(q)}.{_encode_component(r)}"


def parse_coord(text: str) -> HexCoord:
    """
    Parse a canonical text key back into an axial coordinate.

    Args:
        text: A key produced by :func:`encode_coord`

    Returns:
        The decoded HexCoord

    Raises:
        MalformedCoordinate: If ``text`` is not a key in canonical form
            (e.g. ``"-000.000"`` or ``"0005.000"``). Core logic never
            substitutes a default coordinate for bad input.

    Example:
        >>> parse_coord("-005.012")
        HexCoord(q=-5, r=12)
    """
    if not isinstance(text, str):
        raise MalformedCoordinate(text)
    match = _COORD_PATTERN.match(text)
    if match is None:
        raise MalformedCoordinate(text)
    coord = HexCoord(q=int(match.group(1)), r=int(match.group(2)))
    # Only the canonical spelling identifies a hex.
    if coord.key != text:
        raise MalformedCoordinate(text)
    return coord


def hexes_in_range(center: HexCoord, radius: int) -> set[str]:
    """
    Find all coordinate keys within ``radius`` of ``center`` (inclusive).

    Uses the game's range metric ``|dq| + |dr| <= 2 * radius``.  The result
    always contains the centre itself and only grows as the radius grows.

    Args:
        center: The centre coordinate
        radius: The range (non-negative)

    Returns:
        A set of coordinate keys

    Raises:
        ValueError: If radius is negative

    Example:
        >>> sorted(hexes_in_range(HexCoord(0, 0), 0))
        ['000.000']
        >>> len(hexes_in_range(HexCoord(0, 0), 1))
        13
    """
    if radius < 0:
        msg = f"Range radius must be non-negative, got {radius}"
        raise ValueError(msg)

    reach = 2 * radius
    keys: set[str] = set()
    for dq in range(-reach, reach + 1):
        span = reach - abs(dq)
        for dr in range(-span, span + 1):
            keys.add(encode_coord(center.q + dq, center.r + dr))
    return keys

