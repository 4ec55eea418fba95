"""
Group - container organizing layers into a tree.

Groups reference their parent by index (null = root level). Every group
with content layers gets its own atlas, a sprite track in each clip and a
renderable scene node.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .layer import Layer


class Group(BaseModel):
    """
    Layer group.

    Serialization format:
    {
        "index": 1,
        "name": "Body",
        "parent": 0,
        "layers": [...]
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )

    index: int = Field(ge=0)
    name: str = Field(min_length=1)

    # Hierarchy (null = root level)
    parent: Optional[int] = Field(default=None)

    layers: list[Layer] = Field(default_factory=list)

    def is_root(self) -> bool:
        """Check if this group sits at the root level."""
        return self.parent is None

    def content_layers(self) -> list[Layer]:
        """Layers contributing pixels, in declared order."""
        return [layer for layer in self.layers if layer.is_content()]

    def meta_layers(self) -> list[Layer]:
        """Meta layers, in declared order."""
        return [layer for layer in self.layers if layer.is_meta()]

    def has_content(self) -> bool:
        """Check if this group carries at least one content layer."""
        return any(layer.is_content() for layer in self.layers)
