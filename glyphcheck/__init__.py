"""
glyphcheck: Validate and repair glyph classifications of a music score.

Given a page segmented into sections and glyphs, tentatively classified
by a shape evaluator, glyphcheck finds assignments that are geometrically
plausible but structurally impossible. It tries to repair each of them by
forging a better supported compound from nearby material, and otherwise
invalidates the glyph and resets the neighbors it may have biased.

Example:
    >>> import glyphcheck
    >>> pattern = glyphcheck.LedgerPattern(system, evaluator)
    >>> pattern.run()  # Number of ledgers invalidated
    1
    >>> pattern.stats.repaired
    2
"""

from glyphcheck.builders import HorizontalsBuilder, LengthHorizontalsBuilder
from glyphcheck.compound import build_compound, stop_point_box
from glyphcheck.config import (
    PROFILES,
    LedgerConfig,
    get_config,
    load_config,
)
from glyphcheck.evaluation import ShapeEvaluator, TableEvaluator
from glyphcheck.exceptions import (
    ConfigurationError,
    GlyphCheckError,
    MalformedRegionError,
)
from glyphcheck.interpretations import Interpretation, InterpretationRegistry
from glyphcheck.models import (
    # Evaluations
    Evaluation,
    EvaluationOrigin,
    # Glyphs
    Glyph,
    GlyphNest,
    # Geometry
    Point,
    Rectangle,
    Scale,
    # Sections
    Section,
    SegmentGraph,
    # Shapes
    Shape,
    ShapeRange,
)
from glyphcheck.patterns import (
    LEDGER_NEIGHBORS,
    GlyphPattern,
    LedgerPattern,
    PatternReport,
    PatternStats,
    collect_neighbors,
    run_patterns,
)
from glyphcheck.rendering import render_system, save_debug_image
from glyphcheck.sheet import Ledger, Staff, SystemInfo

__version__ = "0.1.0"
__all__ = [
    # Patterns
    "GlyphPattern",
    "LedgerPattern",
    "LEDGER_NEIGHBORS",
    "PatternReport",
    "PatternStats",
    "run_patterns",
    "collect_neighbors",
    "build_compound",
    "stop_point_box",
    # Configuration
    "LedgerConfig",
    "PROFILES",
    "get_config",
    "load_config",
    # Shapes & evaluations
    "Shape",
    "ShapeRange",
    "Evaluation",
    "EvaluationOrigin",
    "ShapeEvaluator",
    "TableEvaluator",
    # Geometry
    "Point",
    "Rectangle",
    "Scale",
    # Segmentation
    "Section",
    "SegmentGraph",
    "Glyph",
    "GlyphNest",
    # Sheet
    "Ledger",
    "Staff",
    "SystemInfo",
    "HorizontalsBuilder",
    "LengthHorizontalsBuilder",
    # Interpretations
    "Interpretation",
    "InterpretationRegistry",
    # Diagnostics
    "render_system",
    "save_debug_image",
    # Exceptions
    "GlyphCheckError",
    "ConfigurationError",
    "MalformedRegionError",
]
