"""Spriteforge source formats.

This module contains the parser interface and the JSON/package parser.
"""

from .json_document import DocumentParser, JsonDocumentParser, PACKAGE_FORMAT

__all__ = [
    'DocumentParser',
    'JsonDocumentParser',
    'PACKAGE_FORMAT',
]
