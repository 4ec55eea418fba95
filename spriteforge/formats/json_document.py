"""
Source document parsers.

Two containers are understood by JsonDocumentParser:
- Plain JSON: the serialized SourceDocument; cel images are referenced by
  ``imageFile`` paths relative to the source file, or inlined as base64
  ``imageData``.
- Package (ZIP archive):
  - content.json: {"format": "spriteforge", "document": {...}}
  - cels/*.png: cel images referenced by ``imageFile``, inlined on load

Any malformed input raises ParseError.
"""

import base64
import io
import json
import logging
from abc import ABC, abstractmethod
from typing import Any
from zipfile import BadZipFile, ZipFile

from pydantic import ValidationError

from spriteforge.document import SourceDocument
from spriteforge.exceptions import ParseError

logger = logging.getLogger(__name__)

ZIP_MAGIC = b'PK\x03\x04'
PACKAGE_FORMAT = 'spriteforge'


class DocumentParser(ABC):
    """Turns raw source bytes into a SourceDocument."""

    @abstractmethod
    def parse(self, data: bytes) -> SourceDocument:
        """
        Parse a source document.

        Args:
            data: Raw file content

        Returns:
            Validated SourceDocument

        Raises:
            ParseError: If the content is malformed
        """
        pass


class JsonDocumentParser(DocumentParser):
    """Parser for JSON documents and ZIP document packages."""

    def parse(self, data: bytes) -> SourceDocument:
        if data.startswith(ZIP_MAGIC):
            doc_data = self._read_package(data)
        else:
            doc_data = self._read_json(data)

        if not isinstance(doc_data, dict):
            raise ParseError(f"Expected a JSON object, got {type(doc_data).__name__}")

        try:
            return SourceDocument.from_api_dict(doc_data)
        except (ValidationError, TypeError) as e:
            raise ParseError(f"Invalid source document: {e}") from e

    @staticmethod
    def _read_json(data: bytes) -> Any:
        try:
            return json.loads(data.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Invalid JSON document: {e}") from e

    def _read_package(self, data: bytes) -> dict[str, Any]:
        try:
            with ZipFile(io.BytesIO(data), 'r') as zip_file:
                try:
                    content = self._read_json(zip_file.read('content.json'))
                except KeyError:
                    raise ParseError('Invalid package: missing content.json')

                if not isinstance(content, dict) or content.get('format') != PACKAGE_FORMAT:
                    raise ParseError('Invalid package format: not a spriteforge document')

                doc_data = content.get('document', {})
                if not isinstance(doc_data, dict):
                    raise ParseError('Invalid package: document is not an object')
                self._inline_cels(zip_file, doc_data)
                return doc_data
        except BadZipFile as e:
            raise ParseError(f"Invalid package archive: {e}") from e

    @staticmethod
    def _inline_cels(zip_file: ZipFile, doc_data: dict[str, Any]) -> None:
        """Replace imageFile references with base64 imageData read from the archive."""
        cels = [
            cel
            for group in _objects(doc_data.get('groups'))
            for layer in _objects(group.get('layers'))
            for cel in _objects(layer.get('cels'))
        ]
        for cel in cels:
            image_file = cel.get('imageFile')
            if not image_file:
                continue
            try:
                file_data = zip_file.read(image_file)
            except KeyError:
                # Not in the archive, leave the reference for the file system
                logger.debug(f"Cel image {image_file} not found in package")
                continue
            cel['imageData'] = base64.b64encode(file_data).decode('ascii')
            del cel['imageFile']


def _objects(value: Any) -> list[dict[str, Any]]:
    """Dict entries of a JSON list. Anything else is left to validation."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
