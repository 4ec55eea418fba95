"""Event processor.

A meta layer named ``@event("footstep")`` or ``@event("hit", 2)`` adds a
timeline event to every clip on each frame where the layer has pixels.
The first parameter is the function name, the optional second one is
passed along with the event.
"""

import logging
from typing import TYPE_CHECKING

from spriteforge.assets import ClipEvent
from spriteforge.document import Layer

from .base import MetaLayerProcessor
from .registry import register_processor

if TYPE_CHECKING:
    from spriteforge.pipeline.context import ImportContext

logger = logging.getLogger(__name__)


@register_processor("event")
class EventProcessor(MetaLayerProcessor):
    """Adds clip events for the frames a meta layer covers."""

    def process(self, context: 'ImportContext', layer: Layer) -> None:
        if not layer.parameters:
            logger.warning(f"Event layer {layer.name} has no function name, ignored")
            return

        function_name = str(layer.parameters[0])
        parameter = layer.parameters[1] if len(layer.parameters) > 1 else None
        frames = context.document.frames

        for tag, clip in context.clips.items():
            added = 0
            elapsed = 0
            for frame_index in tag.frame_indices:
                if layer.has_cel(frame_index):
                    clip.add_event(ClipEvent(
                        time=elapsed / 1000.0,
                        function_name=function_name,
                        parameter=parameter,
                    ))
                    added += 1
                elapsed += frames[frame_index].duration

            if added:
                context.store.mark_dirty(clip)
