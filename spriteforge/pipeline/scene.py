"""Scene template synthesis.

Builds a node hierarchy mirroring the group tree:

    <file stem>            AnimatorComponent -> animation graph
    └── <root group>
        └── <child group>  SpriteRendererComponent (content groups only)

Content groups are pushed back by DEPTH_STEP per group index so no two
renderers share a depth. The tree is saved as a template; the in-memory
tree is transient and dropped when the import ends.
"""

import logging

from spriteforge.assets import AnimatorComponent, SceneNode, SpriteRendererComponent

from .context import ImportContext

logger = logging.getLogger(__name__)

DEPTH_STEP = 0.01


def generate_scene(context: ImportContext) -> None:
    """Build the node tree of the document and save it as a template."""
    document = context.document
    settings = context.settings

    root = SceneNode(name=context.file_stem)
    root.add_component(AnimatorComponent(controller=context.graph_path))
    context.root_node = root

    # Group names are unique and parents come first (checked on parse)
    for group in document.groups:
        node = SceneNode(name=group.name)
        if group.is_root():
            root.add_child(node)
        else:
            parent_group = document.get_group(group.parent)
            context.nodes[parent_group.name].add_child(node)
        context.nodes[group.name] = node

        if group.has_content():
            node.add_component(SpriteRendererComponent(
                sprite=context.sprites[group.name][0].name,
                sorting_layer_id=settings.sprites_sort_in_layer,
                sorting_order=group.index * settings.order_in_layer_interval,
            ))
            node.position.z = -group.index * DEPTH_STEP

    context.template = context.store.save_as_template_and_link(root, context.prefab_path)
    logger.debug(f"Saved scene template {context.prefab_path} ({len(context.nodes)} nodes)")
