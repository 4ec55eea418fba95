"""Import context - the unit of work of one import run.

The context is created by the importer, passed to every stage and to every
meta-layer processor, and disposed when the run ends. Nothing keeps a
reference to it afterwards.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from spriteforge.assets import (
    AnimationGraph,
    AssetStore,
    MotionClip,
    SceneNode,
    SceneTemplate,
    Sprite,
)
from spriteforge.config import ControllerPolicy, ImportSettings
from spriteforge.document import FrameTag, Group, SourceDocument
from spriteforge.exceptions import ImportIssue

logger = logging.getLogger(__name__)


@dataclass
class ImportContext:
    """Shared, mutable state of one import run."""

    settings: ImportSettings
    store: AssetStore
    source_path: Path

    document: SourceDocument | None = None

    # Output locations (asset paths, resolved by the store)
    atlas_directory: str = ''
    clip_directory: str = ''
    graph_path: str | None = None
    prefab_path: str = ''

    # Group name -> sprites, indexed by frame id
    sprites: dict[str, list[Sprite]] = field(default_factory=dict)
    atlas_paths: dict[str, str] = field(default_factory=dict)

    # One clip per frame tag
    clips: dict[FrameTag, MotionClip] = field(default_factory=dict)
    clip_paths: dict[FrameTag, str] = field(default_factory=dict)

    graph: AnimationGraph | None = None

    # Transient scene hierarchy; group name -> node
    root_node: SceneNode | None = None
    nodes: dict[str, SceneNode] = field(default_factory=dict)
    template: SceneTemplate | None = None

    # Recovered anomalies of this run
    issues: list[ImportIssue] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        return self.source_path.name

    @property
    def file_stem(self) -> str:
        return self.source_path.stem

    @property
    def source_directory(self) -> Path:
        return self.source_path.parent

    def resolve_output_paths(self) -> None:
        """Derive output locations from the settings and the source name."""
        settings = self.settings
        self.atlas_directory = settings.atlas_output_directory
        self.clip_directory = settings.clip_output_directory
        self.prefab_path = f"{settings.prefabs_directory}/{self.file_stem}.prefab"

        if settings.controller_policy == ControllerPolicy.CREATE_OR_OVERRIDE:
            self.graph_path = f"{settings.anim_controller_output_path}/{self.file_stem}.controller"
        else:
            self.graph_path = None

    def atlas_path_for(self, group: Group) -> str:
        return f"{self.atlas_directory}/{self.file_stem}_{group.name}.png"

    def clip_path_for(self, tag: FrameTag) -> str:
        return f"{self.clip_directory}/{self.file_stem}_{tag.name}.anim"

    def report(self, issue: ImportIssue) -> None:
        """
        Record a recovered anomaly and log it at its level.

        Args:
            issue: The anomaly
        """
        logger.log(issue.level, str(issue))
        self.issues.append(issue)

    def dispose(self) -> None:
        """Destroy the transient scene hierarchy and drop derived state."""
        self.root_node = None
        self.nodes.clear()
        self.clips.clear()
        self.sprites.clear()
        self.graph = None
        self.template = None
