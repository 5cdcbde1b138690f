"""
Data models for glyphcheck.

These models describe a segmented page as the pattern passes see it:
- Shape / ShapeRange: the closed shape vocabulary
- Evaluation: a (shape, doubt) pair with its origin
- Point / Rectangle: integer pixel geometry
- Section / SegmentGraph: adjacency-graph nodes built by segmentation
- Glyph / GlyphNest: pixel groups made of sections, and their universe
- Scale: interline-based unit conversion
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)


# =============================================================================
# SHAPES
# =============================================================================


class Shape(Enum):
    """Closed vocabulary of glyph shapes."""

    # Lines
    LEDGER = "ledger"
    COMBINING_STEM = "combining_stem"
    THICK_BARLINE = "thick_barline"
    THIN_BARLINE = "thin_barline"

    # Note heads (need a stem)
    NOTEHEAD_BLACK = "notehead_black"
    NOTEHEAD_VOID = "notehead_void"
    NOTEHEAD_BLACK_2 = "notehead_black_2"
    NOTEHEAD_VOID_2 = "notehead_void_2"

    # Notes (stemless)
    BREVE = "breve"
    WHOLE_NOTE = "whole_note"
    WHOLE_NOTE_2 = "whole_note_2"

    # Grace notes
    GRACE_NOTE_SLASH = "grace_note_slash"
    GRACE_NOTE_NO_SLASH = "grace_note_no_slash"

    # Others
    SHARP = "sharp"
    FLAT = "flat"
    NATURAL = "natural"
    DOT = "dot"
    QUARTER_REST = "quarter_rest"
    WHOLE_REST = "whole_rest"
    G_CLEF = "g_clef"
    F_CLEF = "f_clef"
    SLUR = "slur"
    CLUTTER = "clutter"
    NOISE = "noise"


class ShapeRange:
    """Named groups of shapes, computed once."""

    STEMS = frozenset({Shape.COMBINING_STEM})
    NOTE_HEADS = frozenset(
        {
            Shape.NOTEHEAD_BLACK,
            Shape.NOTEHEAD_VOID,
            Shape.NOTEHEAD_BLACK_2,
            Shape.NOTEHEAD_VOID_2,
        }
    )
    NOTES = frozenset({Shape.BREVE, Shape.WHOLE_NOTE, Shape.WHOLE_NOTE_2})
    GRACE_NOTES = frozenset({Shape.GRACE_NOTE_SLASH, Shape.GRACE_NOTE_NO_SLASH})
    ACCIDENTALS = frozenset({Shape.SHARP, Shape.FLAT, Shape.NATURAL})


# =============================================================================
# EVALUATIONS
# =============================================================================


class EvaluationOrigin(Enum):
    """Who assigned an evaluation."""

    MANUAL = "manual"
    ALGORITHM = "algorithm"


@dataclass(frozen=True)
class Evaluation:
    """
    A shape assignment with its doubt.

    Doubt is lower-is-better. Evaluations sort by doubt only.
    """

    shape: Shape
    doubt: float
    origin: EvaluationOrigin = EvaluationOrigin.ALGORITHM

    def __lt__(self, other: Evaluation) -> bool:
        return self.doubt < other.doubt

    @property
    def grade(self) -> float:
        """Complement of doubt, in (0, 1], higher is better."""
        return 1.0 / (1.0 + max(self.doubt, 0.0))

    @property
    def is_manual(self) -> bool:
        return self.origin is EvaluationOrigin.MANUAL

    @classmethod
    def manual(cls, shape: Shape) -> Evaluation:
        """Evaluation assigned by a human, with no doubt."""
        return cls(shape, 0.0, EvaluationOrigin.MANUAL)


# =============================================================================
# GEOMETRY
# =============================================================================


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Rectangle:
    """Integer pixel rectangle; right and bottom edges are exclusive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return max(self.width, 0) * max(self.height, 0)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def grow(self, dx: int, dy: int) -> Rectangle:
        """Return a copy extended by dx on left and right, dy on top and bottom."""
        return Rectangle(self.x - dx, self.y - dy, self.width + 2 * dx, self.height + 2 * dy)

    def intersects(self, other: Rectangle) -> bool:
        if self.is_empty() or other.is_empty():
            return False
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains_point(self, point: Point) -> bool:
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom

    def union(self, other: Rectangle) -> Rectangle:
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rectangle(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)

    @classmethod
    def enclosing(cls, boxes: Iterable[Rectangle]) -> Rectangle:
        result = cls(0, 0, 0, 0)
        for box in boxes:
            result = result.union(box)
        return result


# =============================================================================
# SECTIONS
# =============================================================================


@dataclass(eq=False)
class Section:
    """
    A node of the segment graph.

    Adjacency is stored as section ids. The owning glyph, if any, is
    referenced by id and resolved through the GlyphNest.
    """

    id: int
    bounds: Rectangle
    weight: int = 0  # Pixel count; defaults to the bounds area
    sources: tuple[int, ...] = ()
    targets: tuple[int, ...] = ()
    opposites: tuple[int, ...] = ()
    glyph_id: int | None = None

    def __post_init__(self) -> None:
        if self.weight <= 0:
            self.weight = self.bounds.area

    def adjacent_ids(self) -> Iterator[int]:
        """Ids of source, target and opposite sections, in that order."""
        yield from self.sources
        yield from self.targets
        yield from self.opposites

    def __repr__(self) -> str:
        return f"Section#{self.id}"


class SegmentGraph:
    """Section lookup by id. Adjacency is immutable once segmentation is done."""

    def __init__(self, sections: Iterable[Section] = ()) -> None:
        self._sections: dict[int, Section] = {}
        for section in sections:
            self.add(section)

    def add(self, section: Section) -> Section:
        if section.id in self._sections:
            raise ValueError(f"Duplicate section id {section.id}")
        self._sections[section.id] = section
        return section

    def get(self, section_id: int) -> Section | None:
        return self._sections.get(section_id)

    def __getitem__(self, section_id: int) -> Section:
        return self._sections[section_id]

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections.values())

    def __len__(self) -> int:
        return len(self._sections)

    def adjacent_sections(self, section: Section) -> Iterator[Section]:
        """Sections linked to section as source, target or opposite."""
        for section_id in section.adjacent_ids():
            adjacent = self._sections.get(section_id)
            if adjacent is None:
                logger.warning("%r refers to unknown section id %d", section, section_id)
                continue
            yield adjacent


# =============================================================================
# GLYPHS
# =============================================================================


@dataclass(eq=False)
class Glyph:
    """
    A group of sections with an optional shape evaluation.

    Glyphs hash by identity. A glyph with id None is a transient merge
    built during compound search and not (yet) part of any nest.
    """

    id: int | None
    members: list[Section] = field(default_factory=list)
    evaluation: Evaluation | None = None
    to_reclassify: bool = False
    translations: list[Any] = field(default_factory=list)
    attachments: dict[str, Rectangle] = field(default_factory=dict)

    @property
    def shape(self) -> Shape | None:
        return self.evaluation.shape if self.evaluation else None

    @property
    def doubt(self) -> float | None:
        return self.evaluation.doubt if self.evaluation else None

    @property
    def is_manual_shape(self) -> bool:
        return self.evaluation is not None and self.evaluation.is_manual

    @property
    def bounds(self) -> Rectangle:
        return Rectangle.enclosing(section.bounds for section in self.members)

    @property
    def weight(self) -> int:
        return sum(section.weight for section in self.members)

    @property
    def stop_point(self) -> Point:
        """Trailing reference point: the right end of the glyph, at mid-height."""
        box = self.bounds
        return Point(float(box.right), box.y + box.height / 2)

    @property
    def signature(self) -> frozenset[int]:
        """Identity of the pixel material: the ids of member sections."""
        return frozenset(section.id for section in self.members)

    def set_evaluation(self, evaluation: Evaluation | None) -> None:
        self.evaluation = evaluation
        self.to_reclassify = False

    def set_shape(
        self,
        shape: Shape | None,
        doubt: float = 0.0,
        origin: EvaluationOrigin = EvaluationOrigin.ALGORITHM,
    ) -> None:
        """Assign a shape, or clear it when shape is None."""
        self.set_evaluation(Evaluation(shape, doubt, origin) if shape is not None else None)

    def reset_evaluation(self) -> None:
        """Discard shape and doubt, and mark the glyph for re-classification."""
        self.evaluation = None
        self.to_reclassify = True

    def clear_translations(self) -> None:
        self.translations.clear()

    def add_attachment(self, key: str, box: Rectangle) -> None:
        """Record a debug rectangle on this glyph."""
        self.attachments[key] = box

    def __repr__(self) -> str:
        shape = self.shape.name if self.shape else None
        return f"Glyph#{self.id}({shape})"


class GlyphNest:
    """
    The glyph universe of a system.

    Segmentation adds glyphs with add_glyph(), which also points member
    sections back to their glyph. Compound search builds transient merges
    with build_glyph(); register() turns such a merge into a nest glyph.
    """

    def __init__(self, graph: SegmentGraph) -> None:
        self.graph = graph
        self._glyphs: dict[int, Glyph] = {}
        self._by_signature: dict[frozenset[int], Glyph] = {}
        self._next_id = 1

    def _allocate_id(self, glyph: Glyph) -> int:
        if glyph.id is None:
            glyph.id = self._next_id
        elif glyph.id in self._glyphs:
            raise ValueError(f"Duplicate glyph id {glyph.id}")
        self._next_id = max(self._next_id, glyph.id + 1)
        return glyph.id

    def add_glyph(self, glyph: Glyph) -> Glyph:
        """Add a segmentation glyph and make its sections point to it."""
        self._allocate_id(glyph)
        self._glyphs[glyph.id] = glyph
        self._by_signature[glyph.signature] = glyph
        for section in glyph.members:
            section.glyph_id = glyph.id
        return glyph

    def register(self, glyph: Glyph) -> Glyph:
        """
        Register a compound as an independent glyph.

        Sections keep pointing to their original glyphs. If a glyph with
        the same pixel material is already known, that glyph is returned.
        """
        existing = self._by_signature.get(glyph.signature)
        if existing is not None:
            if existing.evaluation is None and glyph.evaluation is not None:
                existing.set_evaluation(glyph.evaluation)
            return existing

        self._allocate_id(glyph)
        self._glyphs[glyph.id] = glyph
        self._by_signature[glyph.signature] = glyph
        logger.debug("Registered %r from sections %s", glyph, sorted(glyph.signature))
        return glyph

    def build_glyph(self, parts: Iterable[Glyph]) -> Glyph:
        """Merge parts into a transient glyph (id None, not registered)."""
        members: dict[int, Section] = {}
        for part in parts:
            for section in part.members:
                members.setdefault(section.id, section)
        return Glyph(id=None, members=[members[key] for key in sorted(members)])

    def get(self, glyph_id: int) -> Glyph | None:
        return self._glyphs.get(glyph_id)

    def glyph_of(self, section: Section) -> Glyph | None:
        """Owning glyph of a section, if any."""
        if section.glyph_id is None:
            return None
        glyph = self._glyphs.get(section.glyph_id)
        if glyph is None:
            logger.warning("%r refers to unknown glyph id %d", section, section.glyph_id)
        return glyph

    def __iter__(self) -> Iterator[Glyph]:
        return iter(list(self._glyphs.values()))

    def __len__(self) -> int:
        return len(self._glyphs)

    def __contains__(self, glyph: object) -> bool:
        return isinstance(glyph, Glyph) and self._glyphs.get(glyph.id) is glyph


# =============================================================================
# SCALE
# =============================================================================


@dataclass(frozen=True)
class Scale:
    """Converts interline fractions into pixels."""

    interline: int

    def __post_init__(self):
        if self.interline <= 0:
            raise ValueError(f"interline must be > 0, got {self.interline}")

    def to_pixels(self, fraction: float) -> int:
        return int(round(fraction * self.interline))
