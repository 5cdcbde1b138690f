"""
Glyph patterns: passes that detect and fix classifier mistakes.

Example:
    >>> from glyphcheck.patterns import LedgerPattern, run_patterns
    >>> report = run_patterns([LedgerPattern(system, evaluator)])
    >>> report.converged
    True
"""

from glyphcheck.patterns.base import (
    GlyphPattern,
    PatternReport,
    PatternStats,
    run_patterns,
)
from glyphcheck.patterns.ledger import LEDGER_NEIGHBORS, LedgerPattern
from glyphcheck.patterns.neighbors import collect_neighbors

__all__ = [
    # Base
    "GlyphPattern",
    "PatternReport",
    "PatternStats",
    "run_patterns",
    # Ledger
    "LedgerPattern",
    "LEDGER_NEIGHBORS",
    # Neighbors
    "collect_neighbors",
]
