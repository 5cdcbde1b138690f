"""
Horizontals builders.

The builder that extracted ledgers from horizontal sticks is the judge of
whether a stick is long enough to be a full ledger. Full ledgers justify
themselves and need no neighbor support.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from glyphcheck.models import Glyph, Scale


class HorizontalsBuilder(ABC):
    """Abstract base for the companion in charge of building ledgers."""

    name: str = "base"

    @abstractmethod
    def is_full_ledger(self, glyph: Glyph) -> bool:
        """Report whether the stick is a full-length ledger."""
        pass


class LengthHorizontalsBuilder(HorizontalsBuilder):
    """Full ledgers are sticks at least min_length interline wide."""

    name = "length"

    def __init__(self, scale: Scale, min_length: float = 2.0):
        """Initialize builder.

        Args:
            scale: Sheet scale.
            min_length: Minimum full ledger length, as interline fraction.
        """
        self.min_length_px = scale.to_pixels(min_length)

    def is_full_ledger(self, glyph: Glyph) -> bool:
        return glyph.bounds.width >= self.min_length_px
