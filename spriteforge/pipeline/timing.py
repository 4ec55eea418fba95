"""
Keyframe timing.

Frame durations are integer milliseconds; clip times are seconds. A tag
covering frames with durations [100, 150, 100] played at 30 fps becomes:

    t=0.0     sprite of frame 0
    t=0.1     sprite of frame 1
    t=0.25    sprite of frame 2
    t=0.3167  sprite of frame 2   (0.35 - 1/30)

The closing keyframe sits one output frame before the end of the last
frame. Without it the last frame would be shown for a single tick before a
looping clip wraps around.
"""

from typing import Sequence

from spriteforge.assets import Keyframe

MS_PER_SECOND = 1000.0


def clip_duration_ms(durations: Sequence[int]) -> int:
    """Total duration of a frame range in milliseconds."""
    return sum(durations)


def build_keyframes(durations: Sequence[int], sprites: Sequence[str], frame_rate: float) -> list[Keyframe]:
    """
    Build the sprite keyframes of one frame range.

    Args:
        durations: Millisecond durations of the frames, in order
        sprites: Sprite of each frame, aligned with durations
        frame_rate: Playback rate of the clip (frames per second)

    Returns:
        One keyframe per frame plus the closing keyframe; always at least two

    Raises:
        ValueError: If the range is empty, misaligned or the rate is not positive
    """
    if not durations:
        raise ValueError("Cannot build keyframes for an empty frame range")
    if len(durations) != len(sprites):
        raise ValueError(f"Got {len(durations)} durations but {len(sprites)} sprites")
    if frame_rate <= 0:
        raise ValueError(f"Frame rate must be positive, got {frame_rate}")

    keyframes = []
    elapsed = 0
    for duration, sprite in zip(durations, sprites):
        keyframes.append(Keyframe(time=elapsed / MS_PER_SECOND, sprite=sprite))
        elapsed += duration

    # Never earlier than the last frame's own key
    closing = max(elapsed / MS_PER_SECOND - 1.0 / frame_rate, keyframes[-1].time)
    keyframes.append(Keyframe(time=closing, sprite=sprites[-1]))
    return keyframes
