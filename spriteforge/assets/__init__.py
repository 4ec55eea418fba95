"""
Generated Assets

Pydantic models for everything an import produces, and the store that
persists them.
"""

from .models import (
    Asset,
    Sprite,
    SpriteSheet,
    WrapMode,
    Keyframe,
    SpriteCurve,
    ClipEvent,
    MotionClip,
    Transition,
    GraphState,
    StateMachine,
    GraphLayer,
    AnimationGraph,
    Vector3,
    SpriteRendererComponent,
    AnimatorComponent,
    SceneNode,
    SceneTemplate,
)
from .store import AssetStore, JsonAssetStore, normalize_path

__all__ = [
    # Base
    'Asset',
    # Atlas
    'Sprite',
    'SpriteSheet',
    # Clips
    'WrapMode',
    'Keyframe',
    'SpriteCurve',
    'ClipEvent',
    'MotionClip',
    # Graph
    'Transition',
    'GraphState',
    'StateMachine',
    'GraphLayer',
    'AnimationGraph',
    # Scene
    'Vector3',
    'SpriteRendererComponent',
    'AnimatorComponent',
    'SceneNode',
    'SceneTemplate',
    # Store
    'AssetStore',
    'JsonAssetStore',
    'normalize_path',
]
