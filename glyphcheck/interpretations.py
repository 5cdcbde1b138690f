"""
Interpretations forged by pattern passes.

When a pattern repairs a glyph by forging a compound, the compound is
not pushed into the score. It is handed to an InterpretationRegistry,
which keeps it as one more candidate interpretation of the pixels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from glyphcheck.models import Rectangle, Shape

if TYPE_CHECKING:
    from glyphcheck.models import Glyph, GlyphNest

logger = logging.getLogger(__name__)

# Minimum grade for an interpretation to be considered good
GOOD_GRADE = 0.05


@dataclass(eq=False)
class Interpretation:
    """A possible interpretation of a glyph."""

    glyph: Glyph
    shape: Shape
    grade: float  # 0..1, higher is better
    bounds: Rectangle | None = None  # Defaults to the glyph bounds
    origin: str = ""  # Name of the pattern that forged it

    def __post_init__(self) -> None:
        if self.bounds is None:
            self.bounds = self.glyph.bounds

    @property
    def is_good(self) -> bool:
        return self.grade >= GOOD_GRADE

    def is_same_as(self, other: Interpretation) -> bool:
        """Same shape on the same pixel material."""
        return self.shape is other.shape and self.glyph.signature == other.glyph.signature

    @staticmethod
    def by_abscissa(inter: Interpretation) -> int:
        """Sort key: left abscissa."""
        return inter.bounds.x

    @staticmethod
    def by_ordinate(inter: Interpretation) -> int:
        """Sort key: top ordinate."""
        return inter.bounds.y

    def details(self) -> str:
        return f"{self.shape.name} grade={self.grade:.3f} glyph={self.glyph.id}"


@dataclass
class InterpretationRegistry:
    """
    Collects forged interpretations for a system.

    Compound glyphs are registered into the nest, so later passes see them
    as candidates too. The same interpretation is never recorded twice.
    """

    nest: GlyphNest
    interpretations: list[Interpretation] = field(default_factory=list)

    def register(self, compound: Glyph, origin: str = "") -> Interpretation:
        """
        Register a compound glyph as a new interpretation.

        Args:
            compound: Evaluated compound glyph.
            origin: Name of the pattern that forged it.

        Returns:
            The new interpretation, or the identical one already known.
        """
        if compound.evaluation is None:
            raise ValueError(f"Cannot register unevaluated compound {compound!r}")

        glyph = self.nest.register(compound)
        inter = Interpretation(
            glyph=glyph,
            shape=compound.evaluation.shape,
            grade=compound.evaluation.grade,
            origin=origin,
        )

        for known in self.interpretations:
            if known.is_same_as(inter):
                return known

        self.interpretations.append(inter)
        logger.debug("New interpretation %s from %s", inter.details(), origin or "?")
        return inter

    def __len__(self) -> int:
        return len(self.interpretations)
