"""Tests for the built-in event processor."""

import pytest

from spriteforge.document import Layer
from spriteforge.pipeline import generate_clips


class TestEventProcessor:
    """Tests for @event meta layers."""

    def test_events_on_covered_frames(self, context, registry, store):
        generate_clips(context)
        store.flush()

        registry.dispatch(context, context.document.meta_layers())

        walk = context.clips[context.document.get_tag('walk')]
        attack = context.clips[context.document.get_tag('attack')]
        # The layer has a cel on frame 1: 100 ms into walk, first frame of attack
        assert [(e.time, e.function_name) for e in walk.events] == [(pytest.approx(0.1), 'footstep')]
        assert [(e.time, e.function_name) for e in attack.events] == [(0.0, 'footstep')]
        assert walk.events[0].parameter is None
        assert store.is_dirty(walk)

    def test_parameter_passed(self, context, registry):
        generate_clips(context)
        layer = Layer(index=9, name='@event("hit", 2)', cels=[{"frame": 0}, {"frame": 2}])

        registry.dispatch(context, [layer])

        walk = context.clips[context.document.get_tag('walk')]
        assert [e.time for e in walk.events] == pytest.approx([0.0, 0.25])
        assert all(e.function_name == 'hit' and e.parameter == 2 for e in walk.events)

    def test_events_sorted_by_time(self, context, registry):
        generate_clips(context)
        late = Layer(index=8, name='@event("b")', cels=[{"frame": 2}])
        early = Layer(index=9, name='@event("a")', cels=[{"frame": 0}])

        registry.dispatch(context, [late, early])

        walk = context.clips[context.document.get_tag('walk')]
        assert [e.function_name for e in walk.events] == ['a', 'b']

    def test_no_function_name(self, context, registry, caplog):
        generate_clips(context)

        registry.dispatch(context, [Layer(index=9, name='@event', cels=[{"frame": 0}])])

        assert all(clip.events == [] for clip in context.clips.values())
        assert 'has no function name' in caplog.text

    def test_reimport_does_not_accumulate(self, context, registry):
        """Clip synthesis clears events, so a second pass adds them once."""
        for _ in range(2):
            generate_clips(context)
            registry.dispatch(context, context.document.meta_layers())

        walk = context.clips[context.document.get_tag('walk')]
        assert len(walk.events) == 1
