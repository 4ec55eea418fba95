"""Command line interface.

    spriteforge import hero.json --settings import.json
    spriteforge processors --plugin mygame.processors
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from spriteforge.config import ControllerPolicy, ImportSettings, settings
from spriteforge.pipeline import Importer
from spriteforge.processors import processor_registry
from spriteforge.assets import JsonAssetStore

logger = logging.getLogger(__name__)


def _common_options(subcommand: bool) -> argparse.ArgumentParser:
    """Options accepted before and after the subcommand name."""
    # Subcommands must not reset values given before their name
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS if subcommand else None)
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help=f"Log debug output (default level: {settings.LOG_LEVEL}, env: SPRITEFORGE_LOG_LEVEL)"
    )
    common.add_argument(
        "--plugin",
        action="append",
        metavar="MODULE",
        help="Import a module that registers additional meta layer processors"
    )
    if not subcommand:
        common.set_defaults(verbose=False, plugin=[])
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spriteforge",
        description="Import layered sprite documents into animation assets",
        parents=[_common_options(subcommand=False)],
    )
    commands = parser.add_subparsers(dest="command", required=True)
    common = _common_options(subcommand=True)

    import_cmd = commands.add_parser("import", help="Import a source document", parents=[common])
    import_cmd.add_argument("source", type=Path, help="Source document (.json or package)")
    import_cmd.add_argument(
        "--settings", "-s",
        type=Path,
        default=None,
        help="Import settings file (JSON)"
    )
    import_cmd.add_argument(
        "--output-root", "-o",
        type=Path,
        default=None,
        help=f"Asset store root (default: {settings.OUTPUT_ROOT}, env: SPRITEFORGE_OUTPUT_ROOT)"
    )
    import_cmd.add_argument(
        "--no-prefab",
        action="store_true",
        help="Do not generate a prefab"
    )
    import_cmd.add_argument(
        "--skip-controller",
        action="store_true",
        help="Do not create or update the animator controller"
    )

    commands.add_parser("processors", help="List registered meta layer processors", parents=[common])
    return parser


def _load_plugins(modules: Sequence[str]) -> None:
    for name in modules:
        importlib.import_module(name)
        logger.debug(f"Loaded plugin {name}")


def _run_import(args: argparse.Namespace) -> int:
    try:
        import_settings = ImportSettings.load(args.settings) if args.settings else ImportSettings()
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Cannot read import settings {args.settings}: {e}")
        return 1

    overrides = {}
    if args.no_prefab:
        overrides["generate_prefab"] = False
    if args.skip_controller:
        overrides["controller_policy"] = ControllerPolicy.SKIP
    if overrides:
        import_settings = import_settings.model_copy(update=overrides)

    # CLI args > env vars > defaults (via settings)
    output_root = args.output_root or settings.OUTPUT_ROOT
    importer = Importer(store=JsonAssetStore(output_root))
    result = importer.run(args.source, import_settings)

    for issue in result.issues:
        print(f"[SpriteForge] {logging.getLevelName(issue.level)}: {issue}")
    if not result:
        print(f"[SpriteForge] Import of {args.source} failed: {result.error}", file=sys.stderr)
        return 1

    for path in result.saved_paths:
        print(f"[SpriteForge] Wrote {path}")
    return 0


def _list_processors() -> int:
    processor_registry.refresh()
    for issue in processor_registry.issues:
        print(f"[SpriteForge] {logging.getLevelName(issue.level)}: {issue}")
    for name in sorted(processor_registry.action_names):
        processor = processor_registry.get(name)
        print(f"{name:<20} order={processor.execution_order:<5} {type(processor).__qualname__}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line interface. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        _load_plugins(args.plugin)
    except ImportError as e:
        logger.error(f"Cannot load plugin: {e}")
        return 1

    if args.command == "import":
        return _run_import(args)
    return _list_processors()
