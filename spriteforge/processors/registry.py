"""Meta-layer processor registry.

Processor classes are collected in a registration table (the
``register_processor`` decorator or ``ProcessorRegistry.register``).
``refresh()`` instantiates every concrete class in the table and indexes
the instances by action name.
"""

import inspect
import logging
from typing import TYPE_CHECKING, Iterable, Optional, Type

from spriteforge.document import Layer
from spriteforge.exceptions import (
    DuplicateProcessorName,
    ImportIssue,
    ProcessorConstructionError,
    ProcessorMissing,
)

from .base import MetaLayerProcessor

if TYPE_CHECKING:
    from spriteforge.pipeline.context import ImportContext

logger = logging.getLogger(__name__)


class ProcessorRegistry:
    """Registration table and action-name index of meta-layer processors."""

    def __init__(self):
        self._candidates: list[Type[MetaLayerProcessor]] = []
        self._processors: dict[str, MetaLayerProcessor] = {}
        self._refreshed = False
        # Anomalies found by the last refresh()
        self.issues: list[ImportIssue] = []

    # ------------------------------------------------------------------
    # Registration table
    # ------------------------------------------------------------------

    def register(self, cls: Type[MetaLayerProcessor]) -> Type[MetaLayerProcessor]:
        """Add a processor class to the table. Usable as a class decorator."""
        if cls not in self._candidates:
            self._candidates.append(cls)
            # Index is stale until the next refresh()
            self._refreshed = False
        return cls

    def unregister(self, cls: Type[MetaLayerProcessor]) -> None:
        """Remove a processor class from the table."""
        if cls in self._candidates:
            self._candidates.remove(cls)
            self._refreshed = False

    @property
    def candidates(self) -> list[Type[MetaLayerProcessor]]:
        return list(self._candidates)

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    @property
    def is_refreshed(self) -> bool:
        return self._refreshed

    def refresh(self) -> None:
        """Rebuild the action-name index from the registration table.

        Abstract classes are skipped. A class that fails to construct is
        logged and skipped; of two instances with the same action name the
        first one registered is kept.
        """
        self._processors.clear()
        self.issues = []

        for cls in self._candidates:
            if inspect.isabstract(cls):
                continue
            try:
                instance = self._instantiate(cls)
            except ProcessorConstructionError as e:
                self._report(e, exc_info=e.cause)
                continue

            if instance.action_name in self._processors:
                self._report(DuplicateProcessorName(instance.action_name, instance))
            else:
                self._processors[instance.action_name] = instance

        self._refreshed = True
        logger.debug(f"Found {len(self._processors)} meta layer processor(s)")

    @staticmethod
    def _instantiate(cls: Type[MetaLayerProcessor]) -> MetaLayerProcessor:
        try:
            return cls()
        except Exception as e:
            raise ProcessorConstructionError(cls, e) from e

    def _report(self, issue: ImportIssue, exc_info: Optional[BaseException] = None) -> None:
        logger.log(issue.level, str(issue), exc_info=exc_info)
        self.issues.append(issue)

    def get(self, action_name: str) -> Optional[MetaLayerProcessor]:
        """Get the processor for an action name."""
        return self._processors.get(action_name)

    def __contains__(self, action_name: str) -> bool:
        return action_name in self._processors

    def __len__(self) -> int:
        return len(self._processors)

    @property
    def action_names(self) -> list[str]:
        return list(self._processors)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, context: 'ImportContext', layers: Iterable[Layer]) -> None:
        """
        Run the matching processor for every meta layer.

        Layers are processed in ascending execution order of their processor
        (layers without a processor count as 0); the sort is stable, so
        layers with equal order keep their given order. Layers without a
        processor are reported and skipped.

        Args:
            context: Import context of the running import
            layers: Layers to dispatch; non-meta layers are ignored
        """
        pairs = [
            (layer, self._processors.get(layer.action_name))
            for layer in layers
            if layer.is_meta()
        ]
        pairs.sort(key=lambda pair: pair[1].execution_order if pair[1] is not None else 0)

        for layer, processor in pairs:
            if processor is None:
                context.report(ProcessorMissing(layer.name, layer.action_name))
                continue
            logger.debug(f"Processing meta layer {layer.name} with {processor!r}")
            processor.process(context, layer)


# Global processor registry
processor_registry = ProcessorRegistry()


def register_processor(action_name: str, execution_order: int = 0):
    """Decorator to register a processor class in the global registry.

    Sets action_name and execution_order on the class.

    Example:
        @register_processor("pivot", execution_order=-10)
        class PivotProcessor(MetaLayerProcessor):
            def process(self, context, layer):
                ...
    """

    def decorator(cls: Type[MetaLayerProcessor]):
        cls.action_name = action_name
        cls.execution_order = execution_order
        return processor_registry.register(cls)

    return decorator


def load_builtin_processors():
    """Import all built-in processor modules to trigger registration."""
    from . import event  # noqa: F401
