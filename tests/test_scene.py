"""Tests for scene template synthesis."""

import pytest

from spriteforge.assets import AnimatorComponent, SceneTemplate, Sprite, SpriteRendererComponent
from spriteforge.config import ImportSettings
from spriteforge.pipeline import ImportContext, generate_scene
from spriteforge.pipeline.scene import DEPTH_STEP


class TestGenerateScene:
    """Tests for generate_scene."""

    def test_hierarchy_mirrors_groups(self, context):
        generate_scene(context)
        root = context.root_node

        assert root.name == 'hero'
        assert [c.name for c in root.children] == ['Sprites']
        assert [c.name for c in root.find('Sprites').children] == ['Body', 'Shadow']
        assert set(context.nodes) == {'Sprites', 'Body', 'Shadow'}
        assert context.nodes['Body'] is root.find('Sprites/Body')

    def test_animator_on_root(self, context):
        generate_scene(context)

        animator = context.root_node.get_component(AnimatorComponent)
        assert animator.controller == 'Generated/Controllers/hero.controller'

    def test_renderers_on_content_groups(self, context):
        generate_scene(context)
        nodes = context.nodes

        assert nodes['Sprites'].get_component(SpriteRendererComponent) is None
        body = nodes['Body'].get_component(SpriteRendererComponent)
        assert body.sprite == 'hero_Body_0'
        assert body.sorting_order == 1
        assert nodes['Shadow'].get_component(SpriteRendererComponent).sorting_order == 2

    def test_sorting_settings(self, tmp_path, document, store):
        settings = ImportSettings(sprites_sort_in_layer=3, order_in_layer_interval=10)
        context = ImportContext(settings=settings, store=store, source_path=tmp_path / 'hero.json')
        context.document = document
        context.resolve_output_paths()
        # Only the first sprite of a group is used
        context.sprites = {'Body': [Sprite(name='b0')], 'Shadow': [Sprite(name='s0')]}

        generate_scene(context)

        shadow = context.nodes['Shadow'].get_component(SpriteRendererComponent)
        assert shadow.sorting_layer_id == 3
        assert shadow.sorting_order == 20
        assert shadow.sprite == 's0'

    def test_depth_by_group_index(self, context):
        generate_scene(context)

        assert context.nodes['Body'].position.z == pytest.approx(-1 * DEPTH_STEP)
        assert context.nodes['Shadow'].position.z == pytest.approx(-2 * DEPTH_STEP)
        assert context.nodes['Sprites'].position.z == 0.0

    def test_template_saved(self, context, store):
        generate_scene(context)

        template = store.load_at('Generated/Prefabs/hero.prefab', SceneTemplate)
        assert template is context.template
        assert template.root.find('Sprites/Shadow') is not None

    def test_template_identity_kept(self, context):
        generate_scene(context)
        first = context.template.guid

        generate_scene(context)

        assert context.template.guid == first

    def test_controller_unset_when_skipped(self, context):
        context.graph_path = None

        generate_scene(context)

        assert context.root_node.get_component(AnimatorComponent).controller is None
