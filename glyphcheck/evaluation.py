"""
Shape evaluators.

An evaluator proposes the best shape for a glyph, with its doubt.
The classifier model itself lives outside this package; evaluators
adapt it to the ShapeEvaluator interface.

Evaluators must be idempotent: evaluating the same pixel material twice
gives the same answer, and evaluating never touches the glyph.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from glyphcheck.models import Evaluation, Shape

if TYPE_CHECKING:
    from glyphcheck.models import Glyph

logger = logging.getLogger(__name__)


class ShapeEvaluator(ABC):
    """Abstract base for shape evaluators."""

    name: str = "base"

    @abstractmethod
    def evaluate(self, glyph: Glyph) -> Evaluation | None:
        """Return the best evaluation for glyph.

        Returns None when no shape at all can be proposed.
        """
        pass


class TableEvaluator(ShapeEvaluator):
    """
    Replays precomputed evaluations keyed by pixel material.

    Each key is the set of section ids of a glyph. Useful to feed the
    patterns with classifier output computed elsewhere, and in tests.

    Example:
        >>> evaluator = TableEvaluator({(7,): (Shape.NOTEHEAD_BLACK, 2.0)})
        >>> evaluator.evaluate(glyph_made_of_section_7).shape
        <Shape.NOTEHEAD_BLACK: 'notehead_black'>
    """

    name = "table"

    def __init__(
        self,
        table: Mapping[Iterable[int], tuple[Shape, float]] | None = None,
        default: tuple[Shape, float] | None = None,
    ):
        """Initialize evaluator.

        Args:
            table: Mapping of section ids to (shape, doubt).
            default: Answer for unknown material; None means no answer.
        """
        self._table: dict[frozenset[int], Evaluation] = {}
        for key, (shape, doubt) in (table or {}).items():
            self.add(key, shape, doubt)
        self.default = Evaluation(*default) if default else None
        self.calls = 0

    def add(self, section_ids: Iterable[int], shape: Shape, doubt: float) -> None:
        self._table[frozenset(section_ids)] = Evaluation(shape, doubt)

    def evaluate(self, glyph: Glyph) -> Evaluation | None:
        self.calls += 1
        return self._table.get(glyph.signature, self.default)
