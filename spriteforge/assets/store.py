"""
Persistent asset store.

The pipeline never touches the file system for generated assets directly;
it locates, creates and marks assets through an AssetStore:

- load_at(path, model) -> asset or None
- create(asset, path): persist a new asset right away
- mark_dirty(asset): schedule a modified asset for the next flush()
- save_as_template_and_link(node, path): persist a node tree as a template,
  keeping the identity of a template already saved at that path

JsonAssetStore keeps one instance per path (identity map), so two
look-ups of the same path within a run return the same object.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional, TypeVar, Union

from pydantic import ValidationError

from .models import Asset, SceneNode, SceneTemplate

logger = logging.getLogger(__name__)

AssetT = TypeVar('AssetT', bound=Asset)


def normalize_path(path: Union[str, Path]) -> str:
    """Normalize an asset path to forward slashes without './' prefixes."""
    return PurePosixPath(str(path).replace('\\', '/')).as_posix()


class AssetStore(ABC):
    """Interface of the persistent asset store."""

    @abstractmethod
    def load_at(self, path: str, model: type[AssetT]) -> Optional[AssetT]:
        """
        Load the asset stored at a path.

        Args:
            path: Asset path
            model: Expected asset class

        Returns:
            The asset, or None if nothing of that type is stored there
        """
        pass

    @abstractmethod
    def create(self, asset: Asset, path: str) -> None:
        """Persist a new asset at a path, replacing whatever was there."""
        pass

    @abstractmethod
    def mark_dirty(self, asset: Asset) -> None:
        """Schedule a modified asset for saving."""
        pass

    @abstractmethod
    def flush(self) -> list[str]:
        """
        Save all dirty assets.

        Returns:
            Paths that were written
        """
        pass

    @abstractmethod
    def save_as_template_and_link(self, node: SceneNode, path: str) -> SceneTemplate:
        """
        Persist a node tree as a reusable template.

        Saving again to the same path updates the existing template instead
        of creating a new identity.

        Args:
            node: Root node of the tree
            path: Template path

        Returns:
            The saved template
        """
        pass

    @abstractmethod
    def resolve(self, path: str) -> Path:
        """Map an asset path to a file system path."""
        pass

    def ensure_directory(self, path: str) -> Path:
        """Create an asset directory (and parents) if missing."""
        directory = self.resolve(path)
        directory.mkdir(parents=True, exist_ok=True)
        return directory


class JsonAssetStore(AssetStore):
    """Asset store persisting assets as JSON files below a root directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self._assets: dict[str, Asset] = {}
        self._dirty: set[str] = set()

    def resolve(self, path: str) -> Path:
        return self.root / normalize_path(path)

    def exists(self, path: str) -> bool:
        """Check if an asset is stored at a path."""
        key = normalize_path(path)
        return key in self._assets or self.resolve(key).is_file()

    def path_of(self, asset: Asset) -> Optional[str]:
        """Get the path an asset instance is stored at."""
        for key, stored in self._assets.items():
            if stored is asset:
                return key
        return None

    def load_at(self, path: str, model: type[AssetT]) -> Optional[AssetT]:
        key = normalize_path(path)

        asset = self._assets.get(key)
        if asset is None:
            asset = self._read(key, model)
            if asset is None:
                return None
            self._assets[key] = asset

        if not isinstance(asset, model):
            logger.warning(f"Asset at {key} is a {asset.type_name}, expected {model.__name__}")
            return None
        return asset

    def _read(self, key: str, model: type[AssetT]) -> Optional[AssetT]:
        file_path = self.resolve(key)
        if not file_path.is_file():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Can't read asset {key}: {e}")
            return None

        if isinstance(data, dict) and data.get('_type', model.__name__) != model.__name__:
            logger.warning(f"Asset at {key} is a {data.get('_type')}, expected {model.__name__}")
            return None

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid asset {key}: {e}")
            return None

    def _write(self, key: str, asset: Asset) -> None:
        file_path = self.resolve(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(asset.to_api_dict(), f, indent=2)

    def create(self, asset: Asset, path: str) -> None:
        key = normalize_path(path)
        self._assets[key] = asset
        self._dirty.discard(key)
        self._write(key, asset)
        logger.debug(f"Created {asset.type_name} at {key}")

    def mark_dirty(self, asset: Asset) -> None:
        key = self.path_of(asset)
        if key is None:
            raise ValueError(f"{asset.type_name} {asset.guid} is not managed by this store")
        self._dirty.add(key)

    def is_dirty(self, asset: Asset) -> bool:
        """Check if an asset waits for the next flush."""
        return self.path_of(asset) in self._dirty

    def flush(self) -> list[str]:
        written = []
        for key in sorted(self._dirty):
            self._write(key, self._assets[key])
            written.append(key)
        self._dirty.clear()
        if written:
            logger.debug(f"Saved {len(written)} asset(s)")
        return written

    def save_as_template_and_link(self, node: SceneNode, path: str) -> SceneTemplate:
        key = normalize_path(path)
        existing = self.load_at(key, SceneTemplate)

        template = SceneTemplate(root=node.model_copy(deep=True))
        if existing is not None:
            template.guid = existing.guid

        self.create(template, key)
        return template
