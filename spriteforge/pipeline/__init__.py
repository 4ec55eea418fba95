"""
Import pipeline.

    from spriteforge.pipeline import Importer

    result = Importer().run("hero.json", ImportSettings())
    if not result:
        print(result.error)
"""

from .context import ImportContext
from .timing import build_keyframes, clip_duration_ms
from .clips import generate_clips, bind_sprite_track
from .graph import generate_graph, populate_state_table
from .scene import generate_scene
from .importer import Importer, ImportResult, import_file

__all__ = [
    'ImportContext',
    'build_keyframes',
    'clip_duration_ms',
    'generate_clips',
    'bind_sprite_track',
    'generate_graph',
    'populate_state_table',
    'generate_scene',
    'Importer',
    'ImportResult',
    'import_file',
]
