"""Import orchestration.

Runs the stages of one import in order:

    LoadFile -> GenerateAtlas -> GenerateClips -> GenerateController
             -> GeneratePrefab (optional) -> InvokeMetaLayerProcessor

Any exception raised by a stage ends the run. It is logged once here and
reported through ImportResult; artifacts written by earlier stages stay
(there is no rollback). The progress indicator is cleared, modified assets
are saved and the transient scene tree is destroyed on every exit path.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Union

from spriteforge.assets import AssetStore, JsonAssetStore
from spriteforge.atlas import AtlasGenerator, GridAtlasGenerator
from spriteforge.config import ImportSettings, settings
from spriteforge.exceptions import ImportIssue
from spriteforge.formats import DocumentParser, JsonDocumentParser
from spriteforge.processors import ProcessorRegistry, processor_registry
from spriteforge.progress import LoggingProgressSink, ProgressSink, Stage, progress_scope

from .clips import generate_clips
from .context import ImportContext
from .graph import generate_graph
from .scene import generate_scene

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of one import. Truthy on success."""

    source_path: Path
    success: bool = False
    error: Exception | None = None
    issues: list[ImportIssue] = field(default_factory=list)
    atlas_paths: list[str] = field(default_factory=list)
    clip_paths: list[str] = field(default_factory=list)
    graph_path: str | None = None
    prefab_path: str | None = None
    saved_paths: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success

    @property
    def warnings(self) -> list[ImportIssue]:
        return [issue for issue in self.issues if issue.level < logging.ERROR]


class Importer:
    """Runs imports against one asset store."""

    def __init__(
        self,
        store: Optional[AssetStore] = None,
        parser: Optional[DocumentParser] = None,
        atlas_generator: Optional[AtlasGenerator] = None,
        progress: Optional[ProgressSink] = None,
        registry: Optional[ProcessorRegistry] = None,
    ):
        self.store = store if store is not None else JsonAssetStore(settings.OUTPUT_ROOT)
        self.parser = parser or JsonDocumentParser()
        self.atlas_generator = atlas_generator or GridAtlasGenerator()
        self.progress = progress or LoggingProgressSink()
        self.registry = registry if registry is not None else processor_registry

    def run(self, source_path: Union[str, Path],
            import_settings: Optional[ImportSettings] = None) -> ImportResult:
        """
        Import one source document.

        Args:
            source_path: Location of the source document
            import_settings: Output options (defaults if omitted)

        Returns:
            ImportResult; never raises for failures inside the stages
        """
        source_path = Path(source_path)
        if not self.registry.is_refreshed:
            self.registry.refresh()

        context = ImportContext(
            settings=import_settings or ImportSettings(),
            store=self.store,
            source_path=source_path,
        )
        result = ImportResult(source_path=source_path)

        with progress_scope(self.progress, f"Importing {context.file_name}") as report:
            try:
                self._run_stages(context, report)
                result.success = True
            except Exception as e:
                logger.exception(f"Import of {source_path} failed: {e}")
                result.error = e
            finally:
                self._finish(context, result)

        if result.success:
            logger.info(
                f"Imported {context.file_name}: {len(result.clip_paths)} clip(s), "
                f"{len(result.issues)} issue(s)"
            )
        return result

    def _run_stages(self, context: ImportContext, report: Callable[[Stage], None]) -> None:
        store = self.store

        report(Stage.LOAD_FILE)
        context.document = self.parser.parse(context.source_path.read_bytes())
        context.resolve_output_paths()

        # Create paths in advance
        store.ensure_directory(context.atlas_directory)
        store.ensure_directory(context.clip_directory)
        if context.graph_path is not None:
            store.ensure_directory(str(PurePosixPath(context.graph_path).parent))
        if context.settings.generate_prefab:
            store.ensure_directory(context.settings.prefabs_directory)

        report(Stage.GENERATE_ATLAS)
        for group in context.document.content_groups():
            atlas_path = context.atlas_path_for(group)
            context.sprites[group.name] = self.atlas_generator.generate(
                context, group.content_layers(), atlas_path
            )
            context.atlas_paths[group.name] = atlas_path

        report(Stage.GENERATE_CLIPS)
        generate_clips(context)

        report(Stage.GENERATE_CONTROLLER)
        generate_graph(context)

        if context.settings.generate_prefab:
            report(Stage.GENERATE_PREFAB)
            generate_scene(context)

        report(Stage.INVOKE_META_LAYER_PROCESSOR)
        self.registry.dispatch(context, context.document.meta_layers())

    def _finish(self, context: ImportContext, result: ImportResult) -> None:
        try:
            try:
                result.saved_paths = self.store.flush()
            except Exception as e:
                logger.exception(f"Saving assets of {context.file_name} failed: {e}")
                result.success = False
                result.error = result.error or e

            result.issues = list(context.issues)
            result.atlas_paths = list(context.atlas_paths.values())
            result.clip_paths = list(context.clip_paths.values())
            result.graph_path = context.graph_path if context.graph is not None else None
            result.prefab_path = context.prefab_path if context.template is not None else None
        finally:
            context.dispose()


def import_file(source_path: Union[str, Path],
                import_settings: Optional[ImportSettings] = None,
                **importer_options) -> ImportResult:
    """
    Import one source document with a fresh Importer.

    Args:
        source_path: Location of the source document
        import_settings: Output options
        **importer_options: Passed to Importer (store, parser, ...)

    Returns:
        ImportResult
    """
    return Importer(**importer_options).run(source_path, import_settings)
