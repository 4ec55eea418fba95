"""
Layer - content and meta layers of a source document.

Content layers contribute pixels to their group's atlas. Meta layers carry
an action name and drive a registered MetaLayerProcessor at the end of an
import.

A layer named like ``@event("footstep", 2)`` without an explicit kind is a
meta layer: the action name is the text between ``@`` and ``(``, the
comma-separated values in parentheses become its parameters.
"""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


META_PREFIX = '@'


class LayerKind(str, Enum):
    """Layer kind identifiers."""
    CONTENT = "content"
    META = "meta"


class Cel(BaseModel):
    """Pixels of one layer on one frame."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )

    frame: int = Field(ge=0)  # frame index
    x: int = Field(default=0)
    y: int = Field(default=0)
    image_file: Optional[str] = Field(default=None, alias='imageFile')
    image_data: Optional[str] = Field(default=None, alias='imageData')  # Base64-encoded PNG


def parse_meta_name(name: str) -> tuple[str, list[Any]]:
    """
    Split a meta layer name into action name and parameters.

    Args:
        name: Layer name, e.g. '@event("footstep", 2)'

    Returns:
        Tuple of (action name, parameters), e.g. ('event', ['footstep', 2])
    """
    body = name[len(META_PREFIX):] if name.startswith(META_PREFIX) else name
    if '(' not in body:
        return body.strip(), []

    action, _, rest = body.partition('(')
    rest = rest.rsplit(')', 1)[0]

    parameters: list[Any] = []
    for token in rest.split(','):
        token = token.strip()
        if not token:
            continue
        try:
            parameters.append(json.loads(token))
        except json.JSONDecodeError:
            parameters.append(token.strip('\'"'))
    return action.strip(), parameters


class Layer(BaseModel):
    """
    Source layer.

    Serialization format:
    {
        "index": 0,
        "name": "Body",
        "kind": "content",
        "actionName": null,
        "parameters": [],
        "opacity": 1.0,
        "visible": true,
        "cels": [{"frame": 0, "x": 0, "y": 0, "imageFile": "body_0.png"}]
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        frozen=True,
        use_enum_values=False,
    )

    index: int = Field(ge=0)
    name: str = Field(default='Layer')
    kind: LayerKind = Field(default=LayerKind.CONTENT)

    # Meta layers only
    action_name: Optional[str] = Field(default=None, alias='actionName')
    parameters: list[Any] = Field(default_factory=list)

    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = Field(default=True)

    cels: list[Cel] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def _derive_meta(cls, data: Any) -> Any:
        """Turn '@action(...)' names into meta layers unless a kind is given."""
        if not isinstance(data, dict):
            return data
        name = data.get('name', '')
        if 'kind' in data or not isinstance(name, str) or not name.startswith(META_PREFIX):
            return data
        action, parameters = parse_meta_name(name)
        data = dict(data)
        data['kind'] = LayerKind.META
        if 'actionName' not in data and 'action_name' not in data:
            data['actionName'] = action
        data.setdefault('parameters', parameters)
        return data

    @model_validator(mode='after')
    def _check_action(self) -> 'Layer':
        if self.kind == LayerKind.META and not self.action_name:
            raise ValueError(f"Meta layer '{self.name}' has no action name")
        return self

    def is_meta(self) -> bool:
        """Check if this is a meta layer."""
        return self.kind == LayerKind.META

    def is_content(self) -> bool:
        """Check if this layer contributes pixels."""
        return self.kind == LayerKind.CONTENT

    def get_cel(self, frame_index: int) -> Optional[Cel]:
        """
        Get the cel of this layer on a frame.

        Args:
            frame_index: Frame index

        Returns:
            Cel or None if the layer is empty on that frame
        """
        for cel in self.cels:
            if cel.frame == frame_index:
                return cel
        return None

    def has_cel(self, frame_index: int) -> bool:
        """Check if the layer has pixels on a frame."""
        return self.get_cel(frame_index) is not None
