"""
Neighbor collection over the segment graph.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glyphcheck.models import Glyph, GlyphNest


def collect_neighbors(glyph: Glyph, nest: GlyphNest) -> set[Glyph]:
    """
    Collect the distinct glyphs stuck to a glyph.

    Walks the sources, targets and opposite sections of every member
    section, and keeps their owning glyphs other than glyph itself.

    Args:
        glyph: Glyph to inspect.
        nest: Glyph nest resolving section owners.

    Returns:
        Set of neighboring glyphs, empty for an isolated glyph.
    """
    graph = nest.graph
    neighbors: set[Glyph] = set()

    for section in glyph.members:
        for adjacent in graph.adjacent_sections(section):
            owner = nest.glyph_of(adjacent)
            if owner is not None and owner is not glyph:
                neighbors.add(owner)

    return neighbors
