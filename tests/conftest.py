"""
Pytest configuration and fixtures for glyphcheck tests.
"""

from __future__ import annotations

import pytest

from glyphcheck.evaluation import TableEvaluator
from glyphcheck.models import (
    Evaluation,
    Glyph,
    GlyphNest,
    Rectangle,
    Scale,
    Section,
    SegmentGraph,
    Shape,
)
from glyphcheck.sheet import Ledger, Staff, SystemInfo

INTERLINE = 20


class PageBuilder:
    """Builds a one-staff system glyph by glyph."""

    def __init__(self, interline: int = INTERLINE):
        self.graph = SegmentGraph()
        self.nest = GlyphNest(self.graph)
        self.scale = Scale(interline)
        self.staff = Staff(id=1)
        self.system = SystemInfo(
            id=1,
            graph=self.graph,
            nest=self.nest,
            scale=self.scale,
            staves=[self.staff],
        )
        self._next_section_id = 1000

    def section(self, x: int, y: int, width: int, height: int) -> Section:
        section = Section(id=self._next_section_id, bounds=Rectangle(x, y, width, height))
        self._next_section_id += 1
        return self.graph.add(section)

    def glyph(
        self,
        glyph_id: int,
        *boxes: tuple[int, int, int, int],
        shape: Shape | None = None,
        doubt: float = 1.0,
        manual: bool = False,
    ) -> Glyph:
        """Add a glyph made of one section per box."""
        members = [self.section(*box) for box in boxes]
        glyph = Glyph(id=glyph_id, members=members)
        if shape is not None:
            glyph.set_evaluation(Evaluation.manual(shape) if manual else Evaluation(shape, doubt))
        return self.nest.add_glyph(glyph)

    def orphan(self, *box: int) -> Section:
        """Add a section owned by no glyph."""
        return self.section(*box)

    def link(self, a: Glyph | Section, b: Glyph | Section) -> None:
        """Make (the first section of) b a target of (the first section of) a."""
        sa = a.members[0] if isinstance(a, Glyph) else a
        sb = b.members[0] if isinstance(b, Glyph) else b
        sa.targets += (sb.id,)
        sb.sources += (sa.id,)

    def link_opposite(self, a: Glyph, b: Glyph) -> None:
        sa, sb = a.members[0], b.members[0]
        sa.opposites += (sb.id,)
        sb.opposites += (sa.id,)

    def ledger(self, glyph: Glyph, line: int = -1) -> Ledger:
        return self.staff.add_ledger(Ledger(stick=glyph, line_index=line))

    @staticmethod
    def ids(*glyphs: Glyph) -> frozenset[int]:
        """Section ids of the union of glyphs."""
        return frozenset().union(*(glyph.signature for glyph in glyphs))


@pytest.fixture
def page() -> PageBuilder:
    """Return an empty one-staff page, interline 20 pixels."""
    return PageBuilder()


@pytest.fixture
def evaluator() -> TableEvaluator:
    """Return an evaluator that knows nothing yet."""
    return TableEvaluator()
