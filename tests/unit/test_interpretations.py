"""Tests for glyphcheck.interpretations and glyphcheck.evaluation."""

import pytest

from glyphcheck.evaluation import ShapeEvaluator, TableEvaluator
from glyphcheck.interpretations import Interpretation, InterpretationRegistry
from glyphcheck.models import Evaluation, Rectangle, Shape


def make_compound(page, *glyphs, shape=Shape.NOTEHEAD_BLACK, doubt=10.0):
    """Helper to create an evaluated transient compound."""
    compound = page.nest.build_glyph(glyphs)
    compound.set_shape(shape, doubt)
    return compound


class TestTableEvaluator:
    """Tests for TableEvaluator."""

    def test_lookup_by_material(self, page):
        """Evaluations are found by section ids, whatever the glyph object."""
        a = page.glyph(1, (0, 0, 5, 5))
        b = page.glyph(2, (5, 0, 5, 5))
        evaluator = TableEvaluator({page.ids(a, b): (Shape.NOTEHEAD_VOID, 2.5)})

        evaluation = evaluator.evaluate(page.nest.build_glyph([b, a]))

        assert evaluation == Evaluation(Shape.NOTEHEAD_VOID, 2.5)
        assert evaluator.evaluate(a) is None
        assert evaluator.calls == 2

    def test_default_answer(self, page):
        """Unknown material gets the default evaluation."""
        evaluator = TableEvaluator(default=(Shape.NOISE, 50.0))
        assert evaluator.evaluate(page.glyph(1, (0, 0, 5, 5))).shape is Shape.NOISE

    def test_idempotent(self, page):
        """Evaluating twice gives the same answer and leaves the glyph alone."""
        glyph = page.glyph(1, (0, 0, 5, 5), shape=Shape.DOT)
        evaluator = TableEvaluator({page.ids(glyph): (Shape.FLAT, 1.0)})

        assert evaluator.evaluate(glyph) == evaluator.evaluate(glyph)
        assert glyph.shape is Shape.DOT

    def test_is_shape_evaluator(self):
        """TableEvaluator implements the evaluator interface."""
        assert isinstance(TableEvaluator(), ShapeEvaluator)


class TestInterpretation:
    """Tests for Interpretation."""

    def test_bounds_default_to_glyph(self, page):
        """Without explicit bounds, the glyph bounds are used."""
        glyph = page.glyph(1, (3, 4, 5, 6))
        inter = Interpretation(glyph, Shape.DOT, 0.5)
        assert inter.bounds == Rectangle(3, 4, 5, 6)

    def test_is_good(self, page):
        """Good interpretations have a decent grade."""
        glyph = page.glyph(1, (0, 0, 5, 5))
        assert Interpretation(glyph, Shape.DOT, 0.5).is_good
        assert not Interpretation(glyph, Shape.DOT, 0.01).is_good

    def test_sort_keys(self, page):
        """Interpretations sort by abscissa or ordinate."""
        left_low = Interpretation(page.glyph(1, (0, 50, 5, 5)), Shape.DOT, 0.5)
        right_high = Interpretation(page.glyph(2, (30, 10, 5, 5)), Shape.DOT, 0.5)
        inters = [right_high, left_low]

        assert sorted(inters, key=Interpretation.by_abscissa) == [left_low, right_high]
        assert sorted(inters, key=Interpretation.by_ordinate) == [right_high, left_low]

    def test_is_same_as(self, page):
        """Same shape on the same material."""
        a = page.glyph(1, (0, 0, 5, 5))
        first = Interpretation(page.nest.build_glyph([a]), Shape.DOT, 0.5)
        same = Interpretation(page.nest.build_glyph([a]), Shape.DOT, 0.9)
        other = Interpretation(page.nest.build_glyph([a]), Shape.FLAT, 0.5)

        assert first.is_same_as(same)
        assert not first.is_same_as(other)


class TestInterpretationRegistry:
    """Tests for InterpretationRegistry."""

    def test_register(self, page):
        """Registering adds the compound to the nest."""
        a = page.glyph(1, (0, 0, 5, 5))
        b = page.glyph(2, (5, 0, 5, 5))
        registry = InterpretationRegistry(page.nest)

        inter = registry.register(make_compound(page, a, b), origin="ledger")

        assert inter.glyph in page.nest
        assert inter.shape is Shape.NOTEHEAD_BLACK
        assert inter.grade == pytest.approx(1 / 11)
        assert inter.origin == "ledger"
        assert len(registry) == 1

    def test_no_duplicates(self, page):
        """The same compound forged twice is recorded once."""
        a = page.glyph(1, (0, 0, 5, 5))
        b = page.glyph(2, (5, 0, 5, 5))
        registry = InterpretationRegistry(page.nest)

        first = registry.register(make_compound(page, a, b))
        second = registry.register(make_compound(page, b, a))

        assert second is first
        assert len(registry) == 1
        assert len(page.nest) == 3

    def test_unevaluated_rejected(self, page):
        """Compounds must carry an evaluation."""
        registry = InterpretationRegistry(page.nest)
        compound = page.nest.build_glyph([page.glyph(1, (0, 0, 5, 5))])

        with pytest.raises(ValueError, match="unevaluated"):
            registry.register(compound)
