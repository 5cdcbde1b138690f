"""
Debug rendering of a system.

Sections are painted filled, colored by the state of their glyph, and
glyph attachments (such as compound search windows) are outlined on top.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from glyphcheck.models import Rectangle

if TYPE_CHECKING:
    from glyphcheck.models import Glyph
    from glyphcheck.sheet import SystemInfo

logger = logging.getLogger(__name__)

# Colors (RGB)
BACKGROUND = (255, 255, 255)
ORPHAN_COLOR = (170, 170, 170)  # Section without glyph
UNKNOWN_COLOR = (40, 40, 40)  # Glyph without shape
SHAPED_COLOR = (0, 90, 200)
MANUAL_COLOR = (0, 150, 60)
RECLASSIFY_COLOR = (230, 140, 0)
ATTACHMENT_COLOR = (220, 0, 0)

DEFAULT_MARGIN = 10


def _glyph_color(glyph: Glyph | None) -> tuple[int, int, int]:
    if glyph is None:
        return ORPHAN_COLOR
    if glyph.is_manual_shape:
        return MANUAL_COLOR
    if glyph.to_reclassify:
        return RECLASSIFY_COLOR
    if glyph.shape is None:
        return UNKNOWN_COLOR
    return SHAPED_COLOR


def _draw_box(draw: ImageDraw.ImageDraw, box: Rectangle, origin: tuple[int, int], **kwargs):
    ox, oy = origin
    draw.rectangle(
        [box.x - ox, box.y - oy, box.right - 1 - ox, box.bottom - 1 - oy],
        **kwargs,
    )


def render_system(system: SystemInfo, margin: int = DEFAULT_MARGIN) -> Image.Image:
    """
    Render a system to an RGB image.

    Args:
        system: System to render.
        margin: Blank pixels around the material.

    Returns:
        PIL Image covering every section and attachment of the system.
    """
    boxes = [section.bounds for section in system.graph]
    for glyph in system.nest:
        boxes.extend(glyph.attachments.values())

    extent = Rectangle.enclosing(boxes)
    if extent.is_empty():
        return Image.new("RGB", (2 * margin or 1, 2 * margin or 1), BACKGROUND)

    origin = (extent.x - margin, extent.y - margin)
    image = Image.new("RGB", (extent.width + 2 * margin, extent.height + 2 * margin), BACKGROUND)
    draw = ImageDraw.Draw(image)

    for section in system.graph:
        if section.bounds.is_empty():
            continue
        color = _glyph_color(system.nest.glyph_of(section))
        _draw_box(draw, section.bounds, origin, fill=color)

    for glyph in system.nest:
        for box in glyph.attachments.values():
            if box.is_empty():
                continue
            _draw_box(draw, box, origin, outline=ATTACHMENT_COLOR)

    return image


def save_debug_image(system: SystemInfo, path: str | Path, margin: int = DEFAULT_MARGIN) -> Path:
    """Render a system and save it to path (format from the extension)."""
    path = Path(path)
    render_system(system, margin).save(path)
    logger.debug("Saved debug image of %r to %s", system, path)
    return path
