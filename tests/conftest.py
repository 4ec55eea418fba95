"""
Pytest fixtures for SpriteForge tests
"""

import base64
import io
import json
from pathlib import Path

import pytest
from PIL import Image

from spriteforge.assets import JsonAssetStore, Sprite
from spriteforge.atlas import AtlasGenerator
from spriteforge.config import ImportSettings
from spriteforge.document import SourceDocument
from spriteforge.pipeline import ImportContext
from spriteforge.processors import ProcessorRegistry
from spriteforge.processors.event import EventProcessor
from spriteforge.progress import ProgressSink

RED = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)


def png_bytes(color, size=(4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGBA', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


def png_base64(color, size=(4, 4)) -> str:
    return base64.b64encode(png_bytes(color, size)).decode('ascii')


class FakeAtlasGenerator(AtlasGenerator):
    """Returns sprite rects without rendering anything."""

    def __init__(self):
        self.calls = []

    def generate(self, context, layers, output_path):
        self.calls.append((output_path, [layer.name for layer in layers]))
        document = context.document
        stem = Path(output_path).stem
        return [
            Sprite(name=f"{stem}_{frame.id}", atlas=output_path,
                   width=document.width, height=document.height)
            for frame in document.frames
        ]


class RecordingProgressSink(ProgressSink):
    """Remembers every progress event."""

    def __init__(self):
        self.events = []

    def begin(self, title, label, fraction):
        self.events.append(('begin', title, label, fraction))

    def end(self):
        self.events.append(('end',))

    @property
    def labels(self):
        return [event[2] for event in self.events if event[0] == 'begin']


@pytest.fixture
def png_factory():
    """Returns a function creating base64 PNG data of a solid color."""
    return png_base64


@pytest.fixture
def document_data() -> dict:
    """
    A small hero document:

    - 3 frames (100, 150, 100 ms), 4x4 pixels
    - tags: walk (0-2, loop), attack (1-2)
    - groups: Sprites (root, no layers) > Body, Shadow
    - an @event("footstep") meta layer with a cel on frame 1
    """
    return {
        "_version": 1,
        "name": "hero",
        "width": 4,
        "height": 4,
        "frames": [
            {"id": 0, "duration": 100},
            {"id": 1, "duration": 150},
            {"id": 2, "duration": 100},
        ],
        "frameTags": [
            {"name": "walk", "from": 0, "to": 2, "properties": ["loop"]},
            {"name": "attack", "from": 1, "to": 2},
        ],
        "groups": [
            {"index": 0, "name": "Sprites", "parent": None, "layers": []},
            {
                "index": 1,
                "name": "Body",
                "parent": 0,
                "layers": [
                    {
                        "index": 0,
                        "name": "Body",
                        "cels": [{"frame": i, "imageData": png_base64(RED)} for i in range(3)],
                    },
                    {
                        "index": 2,
                        "name": '@event("footstep")',
                        "cels": [{"frame": 1}],
                    },
                ],
            },
            {
                "index": 2,
                "name": "Shadow",
                "parent": 0,
                "layers": [
                    {
                        "index": 1,
                        "name": "Shadow",
                        "opacity": 0.5,
                        "cels": [{"frame": i, "imageData": png_base64(BLACK)} for i in range(3)],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def document(document_data) -> SourceDocument:
    return SourceDocument.from_api_dict(document_data)


@pytest.fixture
def source_file(tmp_path, document_data) -> Path:
    """The hero document written to hero.json."""
    path = tmp_path / "hero.json"
    path.write_text(json.dumps(document_data), encoding='utf-8')
    return path


@pytest.fixture
def output_root(tmp_path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def store(output_root) -> JsonAssetStore:
    return JsonAssetStore(output_root)


@pytest.fixture
def import_settings() -> ImportSettings:
    return ImportSettings(clip_frame_rate=30.0)


@pytest.fixture
def context(tmp_path, document, store, import_settings) -> ImportContext:
    """Import context of hero.json with sprites of every content group."""
    ctx = ImportContext(settings=import_settings, store=store, source_path=tmp_path / "hero.json")
    ctx.document = document
    ctx.resolve_output_paths()

    generator = FakeAtlasGenerator()
    for group in document.content_groups():
        atlas_path = ctx.atlas_path_for(group)
        ctx.sprites[group.name] = generator.generate(ctx, group.content_layers(), atlas_path)
        ctx.atlas_paths[group.name] = atlas_path
    return ctx


@pytest.fixture
def registry() -> ProcessorRegistry:
    """A refreshed registry holding the built-in event processor only."""
    reg = ProcessorRegistry()
    reg.register(EventProcessor)
    reg.refresh()
    return reg


@pytest.fixture
def progress() -> RecordingProgressSink:
    return RecordingProgressSink()


@pytest.fixture
def fake_atlas() -> FakeAtlasGenerator:
    return FakeAtlasGenerator()
