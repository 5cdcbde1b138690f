"""
Glyph pattern base class and pass driver.

A glyph pattern checks one system for a specific kind of classifier
mistake and fixes what it can. run() returns the number of
modifications, which callers use to decide whether dependent passes
must run again.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glyphcheck.sheet import SystemInfo

logger = logging.getLogger(__name__)

# Passes after which run_patterns gives up waiting for a fixpoint
DEFAULT_MAX_ITERATIONS = 5


@dataclass
class PatternStats:
    """Statistics for one pattern pass."""

    checked: int = 0
    valid: int = 0
    exempted: int = 0  # Manual glyphs skipped
    flagged_manual: int = 0  # Manual glyphs found invalid but kept
    repaired: int = 0  # A compound was forged
    invalidated: int = 0
    neighbors_reset: int = 0
    buckets_pruned: int = 0


class GlyphPattern(ABC):
    """Abstract base for patterns run on a system."""

    name: str = "base"

    def __init__(self, system: SystemInfo):
        """Initialize pattern.

        Args:
            system: The system to process.
        """
        self.system = system
        self.scale = system.scale
        self.stats = PatternStats()

    @abstractmethod
    def run(self) -> int:
        """Run one pass on the system.

        Returns the number of modifications made.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.system!r})"


@dataclass
class PatternReport:
    """Outcome of run_patterns()."""

    iterations: int = 0
    converged: bool = False
    modifications: dict[str, int] = field(default_factory=dict)

    @property
    def total_modifications(self) -> int:
        return sum(self.modifications.values())


def run_patterns(
    patterns: Sequence[GlyphPattern],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> PatternReport:
    """
    Run patterns repeatedly until a full round modifies nothing.

    Args:
        patterns: Patterns to run, in order, each round.
        max_iterations: Maximum number of rounds.

    Returns:
        PatternReport with per-pattern modification counts.
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

    report = PatternReport()

    while report.iterations < max_iterations:
        report.iterations += 1
        modified = 0

        for pattern in patterns:
            count = pattern.run()
            report.modifications[pattern.name] = report.modifications.get(pattern.name, 0) + count
            modified += count

        if modified == 0:
            report.converged = True
            break

    if not report.converged:
        logger.warning(
            "Patterns still modifying after %d iterations: %s",
            report.iterations,
            report.modifications,
        )

    return report
