"""Exception classes for the import pipeline.

Fatal errors (ParseError, PackingError) end an import run. ImportIssue
subclasses describe anomalies the pipeline recovers from; they are logged at
their ``level`` and collected on the import context or processor registry
instead of being raised past the component that detected them.
"""

import logging


class SpriteForgeError(Exception):
    """Base exception for spriteforge errors."""

    pass


class ParseError(SpriteForgeError):
    """Raised when a source document is malformed."""

    pass


class PackingError(SpriteForgeError):
    """Raised when an atlas cannot be generated (empty or oversized input)."""

    pass


class ImportIssue(SpriteForgeError):
    """A recovered anomaly. Never aborts a run."""

    level: int = logging.WARNING


class ProcessorConstructionError(ImportIssue):
    """A registered processor class could not be instantiated."""

    level = logging.ERROR

    def __init__(self, processor_class: type, cause: BaseException):
        self.processor_class = processor_class
        self.cause = cause
        super().__init__(f"Can't instantiate meta processor {processor_class.__name__}: {cause}")


class DuplicateProcessorName(ImportIssue):
    """Two processors declare the same action name; the first one is kept."""

    level = logging.ERROR

    def __init__(self, action_name: str, rejected: object):
        self.action_name = action_name
        self.rejected = rejected
        super().__init__(f"Duplicate processor with name {action_name}: {type(rejected).__name__}")


class ProcessorMissing(ImportIssue):
    """No processor is registered for a meta layer's action name."""

    def __init__(self, layer_name: str, action_name: str):
        self.layer_name = layer_name
        self.action_name = action_name
        super().__init__(f"No processor for meta layer {layer_name} (action '{action_name}')")


class DuplicateStateName(ImportIssue):
    """A state name occurs more than once in an animation graph."""

    def __init__(self, state_name: str):
        self.state_name = state_name
        super().__init__(
            f"Duplicate state with name {state_name} in animation graph. "
            f"Only the first one found is updated."
        )


class NoGraphOutputConfigured(ImportIssue):
    """Graph generation was skipped because no output path is configured."""

    def __init__(self):
        super().__init__("No animation graph output specified. Graph generation will be ignored")
