"""
Ledger pattern: checks a system for invalid ledgers.

A short ledger must be stuck to a stem, a note or a note head. If it is
not, and is not long enough to be a full ledger, we look for nearby
material that could be forged into a note head the ledger belongs to.
When even that fails, the ledger is a false positive: its stick loses
its shape, its neighbors lose their (possibly biased) evaluations, and
it leaves the staff ledger index.

Example:
    >>> pattern = LedgerPattern(system, evaluator)
    >>> pattern.run()
    2
    >>> pattern.stats.repaired
    1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from glyphcheck.builders import HorizontalsBuilder, LengthHorizontalsBuilder
from glyphcheck.compound import build_compound, stop_point_box
from glyphcheck.config import DEFAULT_CONFIG, LedgerConfig
from glyphcheck.exceptions import MalformedRegionError
from glyphcheck.interpretations import InterpretationRegistry
from glyphcheck.models import ShapeRange
from glyphcheck.patterns.base import GlyphPattern, PatternStats
from glyphcheck.patterns.neighbors import collect_neighbors

if TYPE_CHECKING:
    from glyphcheck.evaluation import ShapeEvaluator
    from glyphcheck.models import Glyph
    from glyphcheck.sheet import Ledger, Staff, SystemInfo

logger = logging.getLogger(__name__)

# Shapes acceptable for a ledger neighbor
LEDGER_NEIGHBORS = ShapeRange.STEMS | ShapeRange.NOTES | ShapeRange.NOTE_HEADS


class LedgerPattern(GlyphPattern):
    """Checks the ledgers of every staff of a system."""

    name = "ledger"

    def __init__(
        self,
        system: SystemInfo,
        evaluator: ShapeEvaluator,
        config: LedgerConfig | None = None,
        registry: InterpretationRegistry | None = None,
        builder: HorizontalsBuilder | None = None,
    ):
        """Initialize pattern.

        Args:
            system: The system to check.
            evaluator: Evaluator for trial compounds.
            config: Pattern parameters (defaults to DEFAULT_CONFIG).
            registry: Receives forged compounds; a fresh one by default.
            builder: Full ledger judge; defaults to the system builder,
                then to a length-based builder.
        """
        super().__init__(system)
        self.config = config or DEFAULT_CONFIG
        self.evaluator = evaluator
        self.registry = registry or InterpretationRegistry(system.nest)
        self.builder = (
            builder
            or system.horizontals_builder
            or LengthHorizontalsBuilder(self.scale, self.config.min_full_ledger_length)
        )

        # Scale-dependent parameters
        self.inter_chunk_dx = self.scale.to_pixels(self.config.inter_chunk_dx)
        self.inter_chunk_dy = self.scale.to_pixels(self.config.inter_chunk_dy)
        self.reference_box = stop_point_box(self.inter_chunk_dx, self.inter_chunk_dy)

    def run(self) -> int:
        """Check every ledger; return the number of ledgers invalidated."""
        self.stats = PatternStats()
        nb = 0

        for staff in self.system.staves:
            ledger_map = staff.ledger_map

            for index in list(ledger_map):
                nb += self._process_bucket(staff, index)

                if not ledger_map[index]:
                    del ledger_map[index]
                    self.stats.buckets_pruned += 1

        if nb:
            logger.info("%r: %d invalid ledger(s)", self.system, nb)

        return nb

    def _process_bucket(self, staff: Staff, index: int) -> int:
        bucket = staff.ledger_map[index]
        material = self._bucket_material(staff, index, bucket)
        removed: set[Ledger] = set()

        for ledger in list(bucket):
            if self._check(ledger, material):
                removed.add(ledger)

        if removed:
            bucket[:] = [ledger for ledger in bucket if ledger not in removed]

        return len(removed)

    def _bucket_material(self, staff: Staff, index: int, bucket: list[Ledger]) -> frozenset[int]:
        """Section ids of every stick in the bucket."""
        material: set[int] = set()
        for ledger in bucket:
            if ledger.stick is None or ledger.stick.id is None:
                raise MalformedRegionError(
                    f"{staff!r} line {index}: ledger without a registered stick ({ledger!r})"
                )
            material.update(ledger.stick.signature)
        return frozenset(material)

    def _check(self, ledger: Ledger, material: frozenset[int]) -> bool:
        """Process one ledger; return True if it was invalidated."""
        glyph = ledger.stick
        manual = glyph.is_manual_shape
        self.stats.checked += 1

        if manual and self.config.manual_policy == "exempt":
            self.stats.exempted += 1
            return False

        neighbors: set[Glyph] = set()
        if not self.is_invalid(glyph, neighbors):
            self.stats.valid += 1
            return False

        # Check if we can forge a ledger-compatible neighbor
        compound = build_compound(
            glyph,
            self.system.glyphs,
            self.evaluator,
            self.system.nest,
            reference_box=self.reference_box,
            desired_shapes=LEDGER_NEIGHBORS,
            max_doubt=self.config.max_doubt,
            is_suitable=lambda candidate: material.isdisjoint(candidate.signature),
            link_dx=self.inter_chunk_dx,
            link_dy=self.inter_chunk_dy,
            max_parts=self.config.max_compound_parts,
        )

        if compound is not None:
            inter = self.registry.register(compound, origin=self.name)
            logger.debug("%r saved by compound %s", ledger, inter.details())
            self.stats.repaired += 1
            return False

        if manual:
            logger.info("Invalid manual ledger %r kept", glyph)
            self.stats.flagged_manual += 1
            return False

        # No convincing neighbor, this is a pseudo ledger
        logger.debug("Invalid ledger %r", glyph)
        self.invalidate(glyph, neighbors)
        self.stats.invalidated += 1
        return True

    def is_invalid(self, glyph: Glyph, neighbors: set[Glyph]) -> bool:
        """
        Check whether a ledger stick lacks any justification.

        Args:
            glyph: The ledger stick.
            neighbors: Filled with the glyphs stuck to the stick.

        Returns:
            True if the stick has no ledger-compatible neighbor and is
            not a full ledger.
        """
        neighbors.update(collect_neighbors(glyph, self.system.nest))

        if any(neighbor.shape in LEDGER_NEIGHBORS for neighbor in neighbors):
            return False

        # Long ledgers need no neighbor
        if self.builder.is_full_ledger(glyph):
            return False

        return True

    def invalidate(self, glyph: Glyph, neighbors: set[Glyph]) -> None:
        """Clear the stick shape and reset evaluations its presence may have biased."""
        glyph.set_shape(None)
        glyph.clear_translations()

        for neighbor in neighbors:
            if not neighbor.is_manual_shape:
                neighbor.reset_evaluation()
                self.stats.neighbors_reset += 1
