"""
Meta-layer processors.

Built-in processors:
    event    Adds clip events on the frames the layer covers

Custom processors subclass MetaLayerProcessor and register with
``@register_processor("action")``; call ``processor_registry.refresh()``
after registering classes outside of an import.
"""

from .base import MetaLayerProcessor
from .registry import (
    ProcessorRegistry,
    processor_registry,
    register_processor,
    load_builtin_processors,
)

load_builtin_processors()

__all__ = [
    'MetaLayerProcessor',
    'ProcessorRegistry',
    'processor_registry',
    'register_processor',
    'load_builtin_processors',
]
