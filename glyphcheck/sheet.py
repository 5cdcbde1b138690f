"""
Sheet structures a pattern pass runs over.

A SystemInfo is the region: it owns the segment graph, the glyph nest,
the scale and its staves. Each Staff indexes its ledgers by line offset
(negative above the staff, positive below), and each bucket of that
index keeps its ledgers ordered by abscissa.
"""

from __future__ import annotations

from bisect import insort
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from glyphcheck.models import Glyph, GlyphNest, Scale, SegmentGraph

if TYPE_CHECKING:
    from glyphcheck.builders import HorizontalsBuilder


@dataclass(eq=False)
class Ledger:
    """A ledger mark, wrapping the horizontal stick glyph it was built from."""

    stick: Glyph
    line_index: int

    @property
    def abscissa(self) -> int:
        return self.stick.bounds.x

    def sort_key(self) -> tuple[int, int]:
        return (self.abscissa, self.stick.id or 0)

    def __repr__(self) -> str:
        return f"Ledger({self.stick!r}, line={self.line_index})"


@dataclass(eq=False)
class Staff:
    """A staff and its ledger index."""

    id: int
    ledger_map: dict[int, list[Ledger]] = field(default_factory=dict)

    def add_ledger(self, ledger: Ledger) -> Ledger:
        """Insert a ledger in its bucket, keeping abscissa order."""
        bucket = self.ledger_map.setdefault(ledger.line_index, [])
        insort(bucket, ledger, key=Ledger.sort_key)
        return ledger

    def ledgers(self) -> Iterator[Ledger]:
        for index in sorted(self.ledger_map):
            yield from self.ledger_map[index]

    def ledger_count(self) -> int:
        return sum(len(bucket) for bucket in self.ledger_map.values())

    def __repr__(self) -> str:
        return f"Staff#{self.id}"


@dataclass(eq=False)
class SystemInfo:
    """
    A system of staves: the region a pattern pass runs over.

    Attributes:
        id: System identifier, used in logs.
        graph: Segment graph of the system.
        nest: Glyph universe of the system.
        scale: Pixel scale of the sheet.
        staves: Staves of the system, top to bottom.
        horizontals_builder: Companion that built the ledgers; None lets
            patterns fall back to a length-based builder.
    """

    id: int
    graph: SegmentGraph
    nest: GlyphNest
    scale: Scale
    staves: list[Staff] = field(default_factory=list)
    horizontals_builder: HorizontalsBuilder | None = None

    @property
    def glyphs(self) -> list[Glyph]:
        return list(self.nest)

    def __repr__(self) -> str:
        return f"System#{self.id}"
