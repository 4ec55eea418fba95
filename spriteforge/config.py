"""Application and import configuration."""

import json
from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Clip defaults
    DEFAULT_FRAME_RATE: float = 60.0  # Playback rate for newly created clips

    # Atlas limits
    MAX_ATLAS_SIZE: int = 4096  # Max atlas edge length in pixels

    # Asset store root (all output directories are relative to it)
    OUTPUT_ROOT: Path = Path(".")

    model_config = {"env_prefix": "SPRITEFORGE_"}


settings = Settings()


class ControllerPolicy(str, Enum):
    """What to do with the animation graph of an import."""
    CREATE_OR_OVERRIDE = "create_or_override"
    SKIP = "skip"


class ImportSettings(BaseModel):
    """
    Per-import options.

    Accepts both snake_case and camelCase keys so settings files written by
    other tools load unchanged:
    {
        "atlasOutputDirectory": "Generated/Atlas",
        "clipOutputDirectory": "Generated/Clips",
        "controllerPolicy": "create_or_override",
        "animControllerOutputPath": "Generated/Controllers",
        "generatePrefab": true,
        "prefabsDirectory": "Generated/Prefabs",
        "spritesSortInLayer": 0,
        "orderInLayerInterval": 1
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra='ignore',
        use_enum_values=False,
    )

    atlas_output_directory: str = Field(default='Generated/Atlas', alias='atlasOutputDirectory')
    clip_output_directory: str = Field(default='Generated/Clips', alias='clipOutputDirectory')

    controller_policy: ControllerPolicy = Field(
        default=ControllerPolicy.CREATE_OR_OVERRIDE, alias='controllerPolicy'
    )
    anim_controller_output_path: str = Field(
        default='Generated/Controllers', alias='animControllerOutputPath'
    )

    generate_prefab: bool = Field(default=True, alias='generatePrefab')
    prefabs_directory: str = Field(default='Generated/Prefabs', alias='prefabsDirectory')

    # Renderer sorting
    sprites_sort_in_layer: int = Field(default=0, alias='spritesSortInLayer')
    order_in_layer_interval: int = Field(default=1, ge=0, alias='orderInLayerInterval')

    # Only applied to clips created by the import; existing clips keep their rate
    clip_frame_rate: float = Field(
        default_factory=lambda: settings.DEFAULT_FRAME_RATE, gt=0, alias='clipFrameRate'
    )

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ImportSettings':
        """
        Load import settings from a JSON file.

        Args:
            path: Settings file path

        Returns:
            ImportSettings instance
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.model_validate(data)
