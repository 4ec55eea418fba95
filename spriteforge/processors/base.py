"""Base class for meta-layer processors."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from spriteforge.document import Layer

if TYPE_CHECKING:
    from spriteforge.pipeline.context import ImportContext


class MetaLayerProcessor(ABC):
    """Base class for all meta-layer processors.

    A processor handles the meta layers whose action name equals its
    ``action_name``. Processors run after atlases, clips, the graph and the
    scene template exist, in ascending ``execution_order``, and may read or
    modify anything on the import context.

    Subclasses must have a constructor without arguments; the registry
    instantiates them on refresh.
    """

    # ClassVar metadata
    action_name: ClassVar[str] = ""
    execution_order: ClassVar[int] = 0

    @abstractmethod
    def process(self, context: 'ImportContext', layer: Layer) -> None:
        """Handle one meta layer.

        Args:
            context: Import context of the running import
            layer: The meta layer
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(action_name={self.action_name!r}, execution_order={self.execution_order})"
