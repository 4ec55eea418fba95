"""
Frames and frame tags.

- Frame: one animation frame with an integer id and a duration in milliseconds
- FrameTag: a named, inclusive frame range that becomes one motion clip
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Frame(BaseModel):
    """Single frame of the source document."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )

    id: int = Field(ge=0)
    duration: int = Field(default=100, gt=0)  # milliseconds


class FrameTag(BaseModel):
    """
    Named frame range.

    Serialization format:
    {
        "name": "walk",
        "from": 0,
        "to": 2,
        "properties": ["loop"]
    }

    Tags are frozen so they can key the clip mapping of an import.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )

    LOOP_PROPERTY: ClassVar[str] = 'loop'

    name: str = Field(min_length=1)
    from_frame: int = Field(ge=0, alias='from')
    to_frame: int = Field(ge=0, alias='to')
    properties: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator('properties', mode='before')
    @classmethod
    def _split_properties(cls, value: Any) -> Any:
        # "loop, pingpong" is accepted as well as ["loop", "pingpong"]
        if isinstance(value, str):
            return tuple(p.strip() for p in value.split(',') if p.strip())
        return value

    @model_validator(mode='after')
    def _check_range(self) -> 'FrameTag':
        if self.from_frame > self.to_frame:
            raise ValueError(
                f"Frame tag '{self.name}' has an empty range ({self.from_frame} > {self.to_frame})"
            )
        return self

    @property
    def loop(self) -> bool:
        """True if the tag carries the loop property."""
        return self.LOOP_PROPERTY in self.properties

    @property
    def frame_indices(self) -> range:
        """Frame indices covered by this tag, in order."""
        return range(self.from_frame, self.to_frame + 1)

    @property
    def frame_count(self) -> int:
        """Number of frames covered by this tag."""
        return self.to_frame - self.from_frame + 1
