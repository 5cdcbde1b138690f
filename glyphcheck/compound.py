"""
Compound forging.

Given a seed glyph, try to synthesize from the pixel material around it
a compound glyph whose best shape is one of the desired shapes, with a
doubt no higher than a given threshold.

The search is driven by three caller-supplied pieces:
- reference_box: computes the search window from the seed
- is_suitable: rejects candidates that must not take part in a merge
- desired_shapes: the shapes a compound may be accepted as

Candidates in the window are merged with the seed in connected groups:
a candidate can join only if it touches the seed or a member already
merged (adjacent sections, or bounds less than link_dx pixels apart
horizontally and link_dy vertically). Every group is evaluated, and the
best acceptable one wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Iterator
from dataclasses import dataclass

from glyphcheck.evaluation import ShapeEvaluator
from glyphcheck.models import (
    Evaluation,
    EvaluationOrigin,
    Glyph,
    GlyphNest,
    Rectangle,
    Shape,
)

logger = logging.getLogger(__name__)

# Attachment key of the search window recorded on the seed
WINDOW_ATTACHMENT = "compound_window"


@dataclass
class CompoundTrial:
    """One evaluated merge of the seed with some candidates."""

    parts: tuple[Glyph, ...]  # Candidates merged with the seed
    glyph: Glyph  # Transient merged glyph
    evaluation: Evaluation

    def rank(self) -> tuple[float, int, int, tuple[int, ...]]:
        """Lowest doubt first, then largest material, then fewest parts."""
        return (
            self.evaluation.doubt,
            -self.glyph.weight,
            len(self.parts),
            tuple(sorted(part.id or 0 for part in self.parts)),
        )


def stop_point_box(dx: int, dy: int) -> Callable[[Glyph], Rectangle]:
    """
    Window factory: dx pixels to the right of the seed stop point,
    dy pixels above and below it.
    """

    def reference_box(seed: Glyph) -> Rectangle:
        stop = seed.stop_point
        return Rectangle(int(round(stop.x)), int(round(stop.y)), dx, 0).grow(0, dy)

    return reference_box


def touches(a: Glyph, b: Glyph, dx: int = 0, dy: int = 0) -> bool:
    """Report whether two glyphs are close enough to be merged together."""
    if a.bounds.grow(dx, dy).intersects(b.bounds):
        return True

    b_ids = b.signature
    return any(
        section_id in b_ids for section in a.members for section_id in section.adjacent_ids()
    )


def _connected_groups(
    seed_links: set[int],
    links: dict[int, set[int]],
    max_parts: int,
) -> Iterator[frozenset[int]]:
    """
    Enumerate connected groups of candidate indices, smallest first.

    A group is connected when each member is linked to the seed or to
    another member of the group.
    """
    level = {frozenset([index]) for index in seed_links}
    size = 1

    while level:
        yield from sorted(level, key=sorted)
        if size >= max_parts:
            return

        next_level: set[frozenset[int]] = set()
        for group in level:
            reach = set(seed_links)
            for index in group:
                reach |= links[index]
            for index in reach - group:
                next_level.add(group | {index})

        level = next_level
        size += 1


def build_compound(
    seed: Glyph,
    candidates: Iterable[Glyph],
    evaluator: ShapeEvaluator,
    nest: GlyphNest,
    *,
    reference_box: Callable[[Glyph], Rectangle],
    desired_shapes: Collection[Shape],
    max_doubt: float,
    is_suitable: Callable[[Glyph], bool] | None = None,
    link_dx: int = 0,
    link_dy: int = 0,
    max_parts: int = 3,
) -> Glyph | None:
    """
    Try to forge a compound around the seed.

    Args:
        seed: Glyph to start from.
        candidates: Glyph universe to pick merge candidates from.
        evaluator: Evaluator used on every trial merge.
        nest: Glyph nest, used to build trial merges.
        reference_box: Computes the search window from the seed.
        desired_shapes: Shapes a compound may be accepted as.
        max_doubt: Maximum doubt for an acceptable compound.
        is_suitable: Candidate filter; None accepts every candidate.
        link_dx: Horizontal pixel gap still considered as touching.
        link_dy: Vertical pixel gap still considered as touching.
        max_parts: Maximum number of candidates in one merge.

    Returns:
        The winning compound glyph (transient, not registered), evaluated
        with its shape and max_doubt as doubt. None if nothing qualifies.
    """
    box = reference_box(seed)
    seed.add_attachment(WINDOW_ATTACHMENT, box)

    if box.is_empty():
        logger.debug("%r: degenerate search window %s", seed, box)
        return None

    pool = sorted(
        (
            glyph
            for glyph in candidates
            if glyph is not seed
            and glyph.bounds.intersects(box)
            and (is_suitable is None or is_suitable(glyph))
        ),
        key=lambda glyph: glyph.id or 0,
    )

    if not pool:
        logger.debug("%r: no candidate in window %s", seed, box)
        return None

    seed_links = {i for i, glyph in enumerate(pool) if touches(seed, glyph, link_dx, link_dy)}
    links: dict[int, set[int]] = {i: set() for i in range(len(pool))}
    for i, a in enumerate(pool):
        for j in range(i + 1, len(pool)):
            if touches(a, pool[j], link_dx, link_dy):
                links[i].add(j)
                links[j].add(i)

    best: CompoundTrial | None = None
    tried = 0

    for group in _connected_groups(seed_links, links, max_parts):
        parts = tuple(pool[index] for index in sorted(group))
        glyph = nest.build_glyph((seed, *parts))
        evaluation = evaluator.evaluate(glyph)
        tried += 1

        if evaluation is None:
            continue
        if evaluation.shape not in desired_shapes or evaluation.doubt > max_doubt:
            continue

        trial = CompoundTrial(parts, glyph, evaluation)
        if best is None or trial.rank() < best.rank():
            best = trial

    logger.debug(
        "%r: %d candidates in window, %d trials, best=%s",
        seed,
        len(pool),
        tried,
        best.evaluation if best else None,
    )

    if best is None:
        return None

    compound = best.glyph
    compound.set_evaluation(
        Evaluation(best.evaluation.shape, max_doubt, EvaluationOrigin.ALGORITHM)
    )
    return compound
