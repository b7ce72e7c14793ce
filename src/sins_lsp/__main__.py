"""
Command line entry point for sins-lsp.

Usage:
    python -m sins_lsp <workspace>                    Show index and cache statistics
    python -m sins_lsp <workspace> unit/a.unit ...    Validate documents
    python -m sins_lsp <workspace> --language fr ...  Use another localization language
    python -m sins_lsp <workspace> --schemas DIR ...   Validate against the game JSON schemas
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .references.models import DiagnosticSeverity
from .schema.document import path_to_uri
from .service import ReferenceService
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sins-lsp",
        description="Check cross-file references in Sins of a Solar Empire II mod data.",
    )
    parser.add_argument("workspace", nargs="?", help="Mod or game data folder (default: configured workspace)")
    parser.add_argument("files", nargs="*", help="Documents to validate")
    parser.add_argument("--language", help="Localization language code (default: configured language)")
    parser.add_argument("--schemas", help="Game JSON schema directory (default: configured schemas path)")
    parser.add_argument("--profile", default="default", help="Settings profile")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(service: ReferenceService, workspace: Path, files: List[str], language: str) -> int:
    """Rebuild the workspace, then validate `files` or print statistics."""
    await service.rebuild(workspace, language)

    if not files:
        for name, count in service.statistics().items():
            print(f"{name}: {count}")
        return EXIT_OK

    exit_code = EXIT_OK
    for file_name in files:
        path = Path(file_name)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            print(f"{file_name}: error: {e}")
            exit_code = EXIT_DIAGNOSTICS
            continue

        diagnostics = await service.validate_document(path_to_uri(str(path)), text) or []
        for diagnostic in diagnostics:
            start = diagnostic.range.start
            severity = diagnostic.severity.name.lower()
            print(f"{file_name}:{start.line + 1}:{start.character + 1}: {severity}: {diagnostic.message}")
            if diagnostic.severity == DiagnosticSeverity.ERROR:
                exit_code = EXIT_DIAGNOSTICS
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    try:
        settings = AppSettings(args.profile)
    except ConfigError as e:
        setup_logging()
        logger.error(f"Cannot load settings: {e}")
        return EXIT_CONFIG_ERROR
    setup_logging(settings)
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    workspace = Path(args.workspace) if args.workspace else settings.workspace_path
    if workspace is None:
        logger.error("No workspace given and none configured")
        return EXIT_CONFIG_ERROR
    if not workspace.is_dir():
        logger.error(f"Workspace is not a directory: {workspace}")
        return EXIT_CONFIG_ERROR

    validation = settings.validate()
    for warning in validation.warnings:
        logger.warning(f"  {warning}")
    if args.workspace is None and not validation.is_valid:
        logger.error("Configuration validation failed:")
        for error in validation.errors:
            logger.error(f"  {error}")
        return EXIT_CONFIG_ERROR

    schemas_path = Path(args.schemas) if args.schemas else None
    if schemas_path is not None and not schemas_path.is_dir():
        logger.error(f"Schemas path is not a directory: {schemas_path}")
        return EXIT_CONFIG_ERROR

    service = ReferenceService(settings, schemas_path=schemas_path)
    try:
        return asyncio.run(run(service, workspace, args.files, args.language or settings.language))
    except Exception:
        logger.exception("Unhandled exception in main")
        return EXIT_DIAGNOSTICS
    finally:
        service.shutdown()


if __name__ == "__main__":
    sys.exit(main())
