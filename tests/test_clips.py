"""Tests for motion clip synthesis."""

import pytest

from spriteforge.assets import ClipEvent, Keyframe, MotionClip, WrapMode
from spriteforge.pipeline import generate_clips


def times(curve):
    return [k.time for k in curve.keyframes]


class TestGenerateClips:
    """Tests for generate_clips."""

    def test_one_clip_per_tag(self, context, store):
        generate_clips(context)

        assert [tag.name for tag in context.clips] == ['walk', 'attack']
        assert list(context.clip_paths.values()) == [
            'Generated/Clips/hero_walk.anim',
            'Generated/Clips/hero_attack.anim',
        ]
        assert store.resolve('Generated/Clips/hero_walk.anim').is_file()

    def test_walk_timing(self, context):
        """[100, 150, 100] ms at 30 fps, bound at the group's scene path."""
        generate_clips(context)
        walk = context.clips[context.document.get_tag('walk')]

        curve = walk.get_curve('Sprites/Body')
        assert times(curve) == pytest.approx([0.0, 0.1, 0.25, 0.35 - 1 / 30])
        assert [k.sprite for k in curve.keyframes] == [
            'hero_Body_0', 'hero_Body_1', 'hero_Body_2', 'hero_Body_2',
        ]
        assert walk.frame_rate == 30.0
        assert walk.length == pytest.approx(0.35 - 1 / 30)

    def test_track_per_content_group(self, context):
        generate_clips(context)
        attack = context.clips[context.document.get_tag('attack')]

        assert sorted(c.path for c in attack.curves) == ['Sprites/Body', 'Sprites/Shadow']
        shadow = attack.get_curve('Sprites/Shadow')
        assert [k.sprite for k in shadow.keyframes] == [
            'hero_Shadow_1', 'hero_Shadow_2', 'hero_Shadow_2',
        ]
        assert times(shadow) == pytest.approx([0.0, 0.15, 0.25 - 1 / 30])

    def test_loop_settings(self, context):
        generate_clips(context)
        walk = context.clips[context.document.get_tag('walk')]
        attack = context.clips[context.document.get_tag('attack')]

        assert walk.wrap_mode == WrapMode.LOOP
        assert walk.loop_time and walk.loop_blend
        assert attack.wrap_mode == WrapMode.CLAMP
        assert not attack.loop_time and not attack.loop_blend

    def test_clips_marked_dirty(self, context, store):
        generate_clips(context)

        assert all(store.is_dirty(clip) for clip in context.clips.values())

    def test_existing_clip_updated_in_place(self, context, store):
        """Existing clips keep identity, frame rate and foreign tracks; events are cleared."""
        existing = MotionClip(name='custom', frame_rate=12.0)
        existing.set_looping(True)
        existing.set_sprite_curve('Sprites/Cape', [Keyframe(time=0.0, sprite='cape_0')])
        existing.set_sprite_curve('Sprites/Body', [Keyframe(time=5.0, sprite='stale')])
        existing.add_event(ClipEvent(time=0.0, function_name='old'))
        store.create(existing, 'Generated/Clips/hero_attack.anim')

        generate_clips(context)
        attack = context.clips[context.document.get_tag('attack')]

        assert attack is existing
        assert attack.name == 'custom'
        assert attack.frame_rate == 12.0
        assert attack.events == []
        assert attack.wrap_mode == WrapMode.CLAMP
        assert attack.get_curve('Sprites/Cape').keyframes[0].sprite == 'cape_0'
        assert times(attack.get_curve('Sprites/Body')) == pytest.approx([0.0, 0.15, 0.25 - 1 / 12])
        assert len(attack.curves) == 3

    def test_rerun_does_not_duplicate_tracks(self, context):
        generate_clips(context)
        generate_clips(context)
        walk = context.clips[context.document.get_tag('walk')]

        assert len(walk.curves) == 2
        assert len(walk.get_curve('Sprites/Body').keyframes) == 4
