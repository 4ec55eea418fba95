"""Tests for the grid atlas generator."""

import numpy as np
import pytest
from PIL import Image

from spriteforge.assets import SpriteSheet
from spriteforge.atlas import GridAtlasGenerator, composite_over
from spriteforge.document import Layer
from spriteforge.exceptions import PackingError

from conftest import RED, png_bytes


class TestCompositeOver:
    """Tests for source-over compositing."""

    def test_opaque_source_replaces(self):
        dst = np.zeros((1, 1, 4), dtype=np.uint8)
        src = np.array([[[10, 20, 30, 255]]], dtype=np.uint8)

        composite_over(dst, src)

        assert dst[0, 0].tolist() == [10, 20, 30, 255]

    def test_half_opacity_over_opaque(self):
        dst = np.array([[[0, 0, 255, 255]]], dtype=np.uint8)
        src = np.array([[[255, 0, 0, 255]]], dtype=np.uint8)

        composite_over(dst, src, opacity=0.5)

        assert dst[0, 0].tolist() == [128, 0, 128, 255]

    def test_transparent_source_keeps_destination(self):
        dst = np.array([[[1, 2, 3, 200]]], dtype=np.uint8)
        src = np.zeros((1, 1, 4), dtype=np.uint8)

        composite_over(dst, src)

        assert dst[0, 0].tolist() == [1, 2, 3, 200]


class TestGridAtlasGenerator:
    """Tests for GridAtlasGenerator."""

    def test_generates_sheet_and_sprites(self, context, store):
        body = context.document.get_group_by_name('Body')
        path = context.atlas_path_for(body)

        sprites = GridAtlasGenerator().generate(context, body.content_layers(), path)

        assert [s.name for s in sprites] == ['hero_Body_0', 'hero_Body_1', 'hero_Body_2']
        assert [(s.x, s.y) for s in sprites] == [(0, 0), (4, 0), (8, 0)]
        assert all(s.width == 4 and s.height == 4 for s in sprites)

        with Image.open(store.resolve(path)) as image:
            assert image.size == (12, 4)
            assert image.convert('RGBA').getpixel((9, 1)) == RED

        sheet = store.load_at(f"{path}.json", SpriteSheet)
        assert sheet is not None
        assert len(sheet.sprites) == 3

    def test_layer_opacity_applied(self, context, store):
        shadow = context.document.get_group_by_name('Shadow')
        path = context.atlas_path_for(shadow)

        GridAtlasGenerator().generate(context, shadow.content_layers(), path)

        with Image.open(store.resolve(path)) as image:
            assert image.convert('RGBA').getpixel((0, 0)) == (0, 0, 0, 128)

    def test_wraps_at_max_size(self, context):
        body = context.document.get_group_by_name('Body')

        sprites = GridAtlasGenerator(max_size=8).generate(
            context, body.content_layers(), context.atlas_path_for(body)
        )

        assert [(s.x, s.y) for s in sprites] == [(0, 0), (4, 0), (0, 4)]

    def test_oversized(self, context):
        body = context.document.get_group_by_name('Body')

        with pytest.raises(PackingError):
            GridAtlasGenerator(max_size=2).generate(
                context, body.content_layers(), context.atlas_path_for(body)
            )

    def test_no_layers(self, context):
        with pytest.raises(PackingError):
            GridAtlasGenerator().generate(context, [], 'Generated/Atlas/empty.png')

    def test_hidden_layers_skipped(self, context, store, png_factory):
        layer = Layer(index=0, name='Hidden', visible=False,
                      cels=[{"frame": 0, "imageData": png_factory(RED)}])

        GridAtlasGenerator().generate(context, [layer], 'Generated/Atlas/hidden.png')

        with Image.open(store.resolve('Generated/Atlas/hidden.png')) as image:
            assert image.convert('RGBA').getpixel((0, 0)) == (0, 0, 0, 0)

    def test_cel_offset_clipped_to_cell(self, context, store, png_factory):
        """Cels are placed at their offset and cut at the cell border."""
        layer = Layer(index=0, name='Offset',
                      cels=[{"frame": 0, "x": 2, "y": 2, "imageData": png_factory(RED)}])

        GridAtlasGenerator().generate(context, [layer], 'Generated/Atlas/offset.png')

        with Image.open(store.resolve('Generated/Atlas/offset.png')) as image:
            rgba = image.convert('RGBA')
            assert rgba.getpixel((1, 1)) == (0, 0, 0, 0)
            assert rgba.getpixel((3, 3)) == RED
            # Frame 1 has no cel
            assert rgba.getpixel((7, 3)) == (0, 0, 0, 0)

    def test_cel_file_relative_to_source(self, context, store, tmp_path):
        (tmp_path / "cels").mkdir()
        (tmp_path / "cels" / "body.png").write_bytes(png_bytes(RED))
        layer = Layer(index=0, name='File', cels=[{"frame": 2, "imageFile": "cels/body.png"}])

        GridAtlasGenerator().generate(context, [layer], 'Generated/Atlas/file.png')

        with Image.open(store.resolve('Generated/Atlas/file.png')) as image:
            assert image.convert('RGBA').getpixel((8, 0)) == RED

    def test_undecodable_cel(self, context):
        layer = Layer(index=0, name='Broken', cels=[{"frame": 0, "imageData": "bm90IGFuIGltYWdl"}])

        with pytest.raises(PackingError, match="Broken"):
            GridAtlasGenerator().generate(context, [layer], 'Generated/Atlas/broken.png')

    def test_missing_cel_file(self, context):
        layer = Layer(index=0, name='Missing', cels=[{"frame": 0, "imageFile": "nowhere.png"}])

        with pytest.raises(PackingError):
            GridAtlasGenerator().generate(context, [layer], 'Generated/Atlas/missing.png')

    def test_sheet_identity_kept(self, context, store):
        body = context.document.get_group_by_name('Body')
        path = context.atlas_path_for(body)
        generator = GridAtlasGenerator()

        generator.generate(context, body.content_layers(), path)
        first = store.load_at(f"{path}.json", SpriteSheet).guid
        generator.generate(context, body.content_layers(), path)

        assert store.load_at(f"{path}.json", SpriteSheet).guid == first
