"""
Source Document Models

Pydantic models for the parsed sprite-sheet document an import consumes.

Hierarchy:
    SourceDocument
    ├── Frame (id, duration in ms)
    ├── FrameTag (name, inclusive frame range, properties)
    └── Group (tree via parent index)
        └── Layer (content or meta)
            └── Cel (pixels on one frame)
"""

from .frame import Frame, FrameTag
from .layer import Cel, Layer, LayerKind, parse_meta_name
from .group import Group
from .document import SourceDocument

__all__ = [
    'Frame',
    'FrameTag',
    'Cel',
    'Layer',
    'LayerKind',
    'parse_meta_name',
    'Group',
    'SourceDocument',
]
