"""Motion clip synthesis.

One clip per frame tag, stored at ``<clip dir>/<file stem>_<tag>.anim``.
Existing clips are updated in place: their timeline events are cleared
(processors add them again), loop settings follow the tag, and the sprite
track of every content group is replaced. Tracks for other paths are left
untouched.
"""

import logging

from spriteforge.assets import MotionClip, Sprite

from .context import ImportContext
from .timing import build_keyframes

logger = logging.getLogger(__name__)


def generate_clips(context: ImportContext) -> None:
    """Create or refresh the clip of every frame tag."""
    document = context.document
    store = context.store

    for tag in document.frame_tags:
        clip_path = context.clip_path_for(tag)
        clip = store.load_at(clip_path, MotionClip)

        if clip is None:
            clip = MotionClip(
                name=f"{context.file_stem}_{tag.name}",
                frame_rate=context.settings.clip_frame_rate,
            )
            store.create(clip, clip_path)
            logger.debug(f"Created clip {clip_path}")
        else:
            clip.clear_events()

        clip.set_looping(tag.loop)
        store.mark_dirty(clip)

        context.clips[tag] = clip
        context.clip_paths[tag] = clip_path

    for group in document.content_groups():
        bind_sprite_track(context, document.group_path(group), context.sprites[group.name])


def bind_sprite_track(context: ImportContext, path: str, sprites: list[Sprite]) -> None:
    """
    Write the sprite track of one scene path into every clip.

    Args:
        context: Import context with clips generated
        path: Scene path of the animated node, relative to the scene root
        sprites: Sprites of the group, indexed by frame id
    """
    document = context.document
    for tag, clip in context.clips.items():
        frames = document.tag_frames(tag)
        keyframes = build_keyframes(
            [frame.duration for frame in frames],
            [sprites[frame.id].name for frame in frames],
            clip.frame_rate,
        )
        clip.set_sprite_curve(path, keyframes)
