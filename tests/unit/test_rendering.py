"""Tests for debug rendering."""

from PIL import Image

from glyphcheck.models import Rectangle, Shape
from glyphcheck.rendering import (
    ATTACHMENT_COLOR,
    BACKGROUND,
    MANUAL_COLOR,
    ORPHAN_COLOR,
    RECLASSIFY_COLOR,
    SHAPED_COLOR,
    render_system,
    save_debug_image,
)


class TestRenderSystem:
    """Tests for render_system()."""

    def test_empty_system(self, page):
        """An empty system renders a small blank image."""
        image = render_system(page.system)
        assert image.size == (20, 20)
        assert image.getpixel((5, 5)) == BACKGROUND

    def test_size_covers_material(self, page):
        """The image spans every section plus the margin."""
        page.glyph(1, (100, 200, 20, 4))
        page.glyph(2, (150, 190, 10, 30))

        image = render_system(page.system, margin=5)

        assert image.size == (60 + 10, 30 + 10)

    def test_section_colors(self, page):
        """Sections are colored by the state of their glyph."""
        page.glyph(1, (0, 0, 10, 10), shape=Shape.LEDGER)
        page.glyph(2, (20, 0, 10, 10), shape=Shape.DOT, manual=True)
        reset = page.glyph(3, (40, 0, 10, 10), shape=Shape.SHARP)
        reset.reset_evaluation()
        page.orphan(60, 0, 10, 10)

        image = render_system(page.system, margin=0)

        assert image.getpixel((5, 5)) == SHAPED_COLOR
        assert image.getpixel((25, 5)) == MANUAL_COLOR
        assert image.getpixel((45, 5)) == RECLASSIFY_COLOR
        assert image.getpixel((65, 5)) == ORPHAN_COLOR
        assert image.getpixel((15, 5)) == BACKGROUND

    def test_attachments_outlined(self, page):
        """Attachments are drawn as outlines."""
        glyph = page.glyph(1, (0, 0, 4, 4))
        glyph.add_attachment("compound_window", Rectangle(10, 0, 10, 10))

        image = render_system(page.system, margin=0)

        assert image.size == (20, 10)
        assert image.getpixel((10, 0)) == ATTACHMENT_COLOR
        assert image.getpixel((15, 5)) == BACKGROUND


class TestSaveDebugImage:
    """Tests for save_debug_image()."""

    def test_writes_png(self, page, tmp_path):
        """The rendered system is saved to disk."""
        page.glyph(1, (0, 0, 10, 10), shape=Shape.LEDGER)

        path = save_debug_image(page.system, tmp_path / "system.png")

        assert path.exists()
        with Image.open(path) as image:
            assert image.size == (30, 30)
