"""
SpriteForge - Imports layered, frame-based sprite documents into animation assets
"""

from .config import ControllerPolicy, ImportSettings, Settings, settings
from .exceptions import SpriteForgeError, ParseError, PackingError, ImportIssue
from .document import SourceDocument
from .processors import MetaLayerProcessor, processor_registry, register_processor
from .pipeline import Importer, ImportResult, import_file

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ControllerPolicy",
    "ImportSettings",
    "Settings",
    "settings",
    # Errors
    "SpriteForgeError",
    "ParseError",
    "PackingError",
    "ImportIssue",
    # Source model
    "SourceDocument",
    # Extension points
    "MetaLayerProcessor",
    "processor_registry",
    "register_processor",
    # Import
    "Importer",
    "ImportResult",
    "import_file",
]
