"""Import stages and progress reporting.

A ProgressSink receives one ``begin`` per stage transition and exactly one
``end`` when the run is over. ``progress_scope`` guarantees the ``end`` on
every exit path.

Example:
    with progress_scope(sink, "Importing hero.json") as report:
        report(Stage.LOAD_FILE)
        ...
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Import stages, in execution order."""
    LOAD_FILE = "LoadFile"
    GENERATE_ATLAS = "GenerateAtlas"
    GENERATE_CLIPS = "GenerateClips"
    GENERATE_CONTROLLER = "GenerateController"
    GENERATE_PREFAB = "GeneratePrefab"
    INVOKE_META_LAYER_PROCESSOR = "InvokeMetaLayerProcessor"

    @property
    def index(self) -> int:
        return list(Stage).index(self)

    @property
    def progress(self) -> float:
        """Fraction of the import done when this stage starts."""
        return self.index / len(Stage)

    @property
    def display_name(self) -> str:
        return self.value


class ProgressSink(ABC):
    """Receiver of progress events."""

    @abstractmethod
    def begin(self, title: str, label: str, fraction: float) -> None:
        """Show or update the progress indicator."""
        pass

    @abstractmethod
    def end(self) -> None:
        """Clear the progress indicator."""
        pass


class LoggingProgressSink(ProgressSink):
    """Reports progress to the log."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def begin(self, title: str, label: str, fraction: float) -> None:
        logger.log(self.level, f"{title}: {label} ({fraction:.0%})")

    def end(self) -> None:
        logger.log(logging.DEBUG, "Progress cleared")


class NullProgressSink(ProgressSink):
    """Discards progress events."""

    def begin(self, title: str, label: str, fraction: float) -> None:
        pass

    def end(self) -> None:
        pass


@contextmanager
def progress_scope(sink: ProgressSink, title: str) -> Iterator[Callable[[Stage], None]]:
    """
    Acquire the progress indicator for the duration of a block.

    Args:
        sink: Progress sink
        title: Title shown with every stage

    Yields:
        Callable reporting a stage transition
    """
    def report(stage: Stage) -> None:
        sink.begin(title, stage.display_name, stage.progress)

    try:
        yield report
    finally:
        sink.end()
