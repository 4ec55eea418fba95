"""
Atlas generation.

An AtlasGenerator turns the content layers of one group into an atlas
image plus one Sprite per frame id. The pipeline only depends on the
interface; GridAtlasGenerator is the reference implementation:

- every frame is composited (bottom layer first, layer opacity applied)
  into a cell of the document's canvas size
- cells are laid out row by row, wrapping at ``max_size``
- the sheet is written as PNG, sprite rects go to a ``<atlas>.json``
  SpriteSheet asset next to it

No packing heuristics (trimming, rotation, bin packing) are applied.
"""

import base64
import binascii
import io
import logging
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from spriteforge.assets import Sprite, SpriteSheet
from spriteforge.config import settings
from spriteforge.document import Cel, Layer
from spriteforge.exceptions import PackingError

if TYPE_CHECKING:
    from spriteforge.pipeline.context import ImportContext

logger = logging.getLogger(__name__)


class AtlasGenerator(ABC):
    """Packs per-frame images of a set of layers into an atlas."""

    @abstractmethod
    def generate(self, context: 'ImportContext', layers: list[Layer], output_path: str) -> list[Sprite]:
        """
        Generate an atlas.

        Args:
            context: Import context (document, store, source location)
            layers: Content layers to composite, in declared order
            output_path: Asset path of the atlas image

        Returns:
            One sprite per frame, indexed by frame id

        Raises:
            PackingError: If the input is empty or does not fit
        """
        pass


def composite_over(dst: np.ndarray, src: np.ndarray, opacity: float = 1.0) -> None:
    """
    Composite an RGBA uint8 image over another in place (source-over).

    Args:
        dst: Destination RGBA array, modified in place
        src: Source RGBA array of the same shape
        opacity: Extra source opacity (0.0-1.0)
    """
    src_a = src[..., 3:4].astype(np.float32) / 255.0 * opacity
    dst_a = dst[..., 3:4].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)

    src_rgb = src[..., :3].astype(np.float32)
    dst_rgb = dst[..., :3].astype(np.float32)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (src_rgb * src_a + dst_rgb * dst_a * (1.0 - src_a)) / safe_a

    dst[..., :3] = np.clip(out_rgb + 0.5, 0, 255).astype(np.uint8)
    dst[..., 3:4] = np.clip(out_a * 255.0 + 0.5, 0, 255).astype(np.uint8)


class GridAtlasGenerator(AtlasGenerator):
    """Lays one composited cell per frame on a grid."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.MAX_ATLAS_SIZE

    def generate(self, context: 'ImportContext', layers: list[Layer], output_path: str) -> list[Sprite]:
        document = context.document
        if not layers:
            raise PackingError(f"No content layers for atlas {output_path}")

        cell_w, cell_h = document.width, document.height
        frame_count = len(document.frames)

        columns = max(1, min(frame_count, self.max_size // cell_w))
        rows = math.ceil(frame_count / columns)
        sheet_w, sheet_h = columns * cell_w, rows * cell_h
        if sheet_w > self.max_size or sheet_h > self.max_size:
            raise PackingError(
                f"Atlas {output_path} needs {sheet_w}x{sheet_h} pixels, "
                f"limit is {self.max_size}x{self.max_size}"
            )

        sheet = np.zeros((sheet_h, sheet_w, 4), dtype=np.uint8)
        visible = sorted((layer for layer in layers if layer.visible), key=lambda layer: layer.index)
        atlas_name = Path(output_path).stem

        sprites: list[Optional[Sprite]] = [None] * frame_count
        for frame_index, frame in enumerate(document.frames):
            cell = self._render_frame(context, visible, frame_index, cell_w, cell_h)

            # Cells are placed in frame id order
            col, row = frame.id % columns, frame.id // columns
            x, y = col * cell_w, row * cell_h
            sheet[y:y + cell_h, x:x + cell_w] = cell
            sprites[frame.id] = Sprite(
                name=f"{atlas_name}_{frame.id}",
                atlas=output_path,
                x=x,
                y=y,
                width=cell_w,
                height=cell_h,
            )

        self._save(context, sheet, output_path, sprites)
        logger.debug(f"Generated atlas {output_path} ({sheet_w}x{sheet_h}, {frame_count} sprites)")
        return sprites

    def _render_frame(self, context: 'ImportContext', layers: list[Layer],
                      frame_index: int, width: int, height: int) -> np.ndarray:
        cell = np.zeros((height, width, 4), dtype=np.uint8)
        for layer in layers:
            cel = layer.get_cel(frame_index)
            if cel is None:
                continue
            pixels = self._decode_cel(context, layer, cel)

            # Clip the cel rect to the cell
            x0, y0 = max(cel.x, 0), max(cel.y, 0)
            x1 = min(cel.x + pixels.shape[1], width)
            y1 = min(cel.y + pixels.shape[0], height)
            if x1 <= x0 or y1 <= y0:
                continue
            src = pixels[y0 - cel.y:y1 - cel.y, x0 - cel.x:x1 - cel.x]
            region = cell[y0:y1, x0:x1]
            composite_over(region, src, layer.opacity)
        return cell

    @staticmethod
    def _decode_cel(context: 'ImportContext', layer: Layer, cel: Cel) -> np.ndarray:
        try:
            if cel.image_data:
                data = cel.image_data
                if data.startswith('data:'):
                    data = data.split(',', 1)[1]
                source = io.BytesIO(base64.b64decode(data, validate=True))
            elif cel.image_file:
                source = context.source_directory / cel.image_file
            else:
                raise PackingError(f"Cel {cel.frame} of layer {layer.name} has no image")

            with Image.open(source) as image:
                return np.array(image.convert('RGBA'), dtype=np.uint8)
        except (OSError, ValueError, binascii.Error, UnidentifiedImageError) as e:
            raise PackingError(f"Can't decode cel {cel.frame} of layer {layer.name}: {e}") from e

    @staticmethod
    def _save(context: 'ImportContext', sheet: np.ndarray, output_path: str,
              sprites: list[Sprite]) -> None:
        store = context.store
        file_path = store.resolve(output_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(sheet).save(file_path, format='PNG')

        # Keep the identity of an existing sheet
        meta_path = f"{output_path}.json"
        existing = store.load_at(meta_path, SpriteSheet)
        meta = SpriteSheet(atlas=output_path, width=sheet.shape[1], height=sheet.shape[0], sprites=sprites)
        if existing is not None:
            meta.guid = existing.guid
        store.create(meta, meta_path)
