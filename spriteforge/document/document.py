"""
SourceDocument - the parsed sprite-sheet document an import works on.

A document contains:
- Canvas dimensions
- Frames (ordered, each with a millisecond duration)
- Frame tags (named frame ranges, one motion clip each)
- Groups (a tree via parent indices, each owning ordered layers)

The model is immutable once validated. Structural checks (tag ranges,
unique names, parent references) run on validation so a malformed document
never reaches the pipeline.
"""

from typing import Any, ClassVar, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .frame import Frame, FrameTag
from .group import Group
from .layer import Layer


class SourceDocument(BaseModel):
    """
    Source document model.

    Serialization format:
    {
        "_version": 1,
        "name": "hero",
        "width": 32,
        "height": 32,
        "frames": [{"id": 0, "duration": 100}, ...],
        "frameTags": [{"name": "walk", "from": 0, "to": 2, "properties": ["loop"]}],
        "groups": [{"index": 0, "name": "Sprites", "parent": null, "layers": [...]}]
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        frozen=True,
    )

    # Serialization version
    VERSION: ClassVar[int] = 1

    version: int = Field(default=1, alias='_version')
    name: str = Field(default='Untitled')

    # Canvas (every frame cell has this size)
    width: int = Field(default=32, ge=1)
    height: int = Field(default=32, ge=1)

    frames: list[Frame] = Field(default_factory=list)
    frame_tags: list[FrameTag] = Field(default_factory=list, alias='frameTags')
    groups: list[Group] = Field(default_factory=list)

    @model_validator(mode='after')
    def _check_structure(self) -> 'SourceDocument':
        if not self.frames:
            raise ValueError("Document has no frames")

        frame_count = len(self.frames)
        # Sprite lists are indexed by frame id
        frame_ids = sorted(frame.id for frame in self.frames)
        if frame_ids != list(range(frame_count)):
            raise ValueError(f"Frame ids must be 0..{frame_count - 1} without gaps, got {frame_ids}")

        tag_names: set[str] = set()
        for tag in self.frame_tags:
            if tag.to_frame >= frame_count:
                raise ValueError(
                    f"Frame tag '{tag.name}' ends at frame {tag.to_frame}, "
                    f"document has {frame_count} frames"
                )
            if tag.name in tag_names:
                raise ValueError(f"Duplicate frame tag name: {tag.name}")
            tag_names.add(tag.name)

        seen_indices: set[int] = set()
        seen_names: set[str] = set()
        for group in self.groups:
            if group.index in seen_indices:
                raise ValueError(f"Duplicate group index: {group.index}")
            if group.name in seen_names:
                raise ValueError(f"Duplicate group name: {group.name}")
            # Parents are declared before their children
            if group.parent is not None and group.parent not in seen_indices:
                raise ValueError(
                    f"Group '{group.name}' references parent {group.parent} "
                    f"which is not declared before it"
                )
            seen_indices.add(group.index)
            seen_names.add(group.name)

        layer_indices = [layer.index for layer in self.layers]
        if len(layer_indices) != len(set(layer_indices)):
            raise ValueError("Duplicate layer index")

        return self

    # --- Lookups ---

    @property
    def layers(self) -> list[Layer]:
        """All layers of all groups, ordered by layer index."""
        return sorted(
            (layer for group in self.groups for layer in group.layers),
            key=lambda layer: layer.index,
        )

    def meta_layers(self) -> list[Layer]:
        """All meta layers, ordered by layer index."""
        return [layer for layer in self.layers if layer.is_meta()]

    def content_groups(self) -> Iterator[Group]:
        """Groups carrying content layers, in declared order."""
        return (group for group in self.groups if group.has_content())

    def get_group(self, index: int) -> Optional[Group]:
        """
        Get a group by its index.

        Args:
            index: Group index (not the list position)

        Returns:
            Group or None if not found
        """
        for group in self.groups:
            if group.index == index:
                return group
        return None

    def get_group_by_name(self, name: str) -> Optional[Group]:
        """Get a group by name."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def get_tag(self, name: str) -> Optional[FrameTag]:
        """Get a frame tag by name."""
        for tag in self.frame_tags:
            if tag.name == name:
                return tag
        return None

    def group_path(self, group: Group) -> str:
        """
        Get the scene path of a group relative to the scene root.

        The path is built from group names so it stays the same across
        imports, e.g. 'Sprites/Body/Arm'.

        Args:
            group: Group of this document

        Returns:
            Slash-separated path of group names
        """
        names = [group.name]
        current = group
        while current.parent is not None:
            current = self.get_group(current.parent)
            names.append(current.name)
        return '/'.join(reversed(names))

    def tag_frames(self, tag: FrameTag) -> list[Frame]:
        """Frames covered by a tag, in order."""
        return [self.frames[i] for i in tag.frame_indices]

    def tag_durations(self, tag: FrameTag) -> list[int]:
        """Millisecond durations of the frames covered by a tag."""
        return [frame.duration for frame in self.tag_frames(tag)]

    # --- Serialization ---

    def to_api_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary.

        Returns:
            Dict with camelCase keys
        """
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def migrate(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Migrate serialized data from older versions.

        Args:
            data: Serialized document data

        Returns:
            Migrated data at current version
        """
        version = data.get('_version', 0)
        if not isinstance(version, int):
            # Left to validation
            return data

        # v0 -> v1: tags were called "tags", groups had no explicit index
        if version < 1:
            if 'frameTags' not in data and 'tags' in data:
                data['frameTags'] = data.pop('tags')
            groups = data.get('groups')
            for position, group in enumerate(groups if isinstance(groups, list) else []):
                if isinstance(group, dict):
                    group.setdefault('index', position)
            data['_version'] = 1

        return data

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> 'SourceDocument':
        """
        Create a SourceDocument from a serialized dictionary.

        Args:
            data: Serialized document data

        Returns:
            SourceDocument instance
        """
        data = cls.migrate(dict(data))
        return cls.model_validate(data)
