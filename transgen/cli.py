"""Command-line entry point for transgen.

Loads a schema document, runs a language generator and writes the
resulting files under an output directory.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .codegen import (
    ConfigError,
    GenerationResult,
    RegistryError,
    generate_code,
    get_generator,
    list_all_language_info,
)
from .logging_config import get_logger, setup_logging
from .utils import SchemaLoaderError, load_schema

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transgen",
        description="Generate types and binary codecs from a schema document",
    )
    parser.add_argument("schema", nargs="?", help="Schema document (JSON file)")
    parser.add_argument("--url", help="Fetch the schema document from a URL instead")
    parser.add_argument(
        "--language",
        "-l",
        default="python",
        help="Target language (use --list-languages to see options)",
    )
    parser.add_argument(
        "--output", "-o", default=".", metavar="DIR", help="Output directory (default: .)"
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument("--name", help="Override the namespace name of the schema")
    parser.add_argument("--version", dest="schema_version", help="Override the schema version")
    parser.add_argument(
        "--dry-run", action="store_true", help="List the files without writing them"
    )
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages and exit"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


class CLIHandler:
    """Handle command-line operations for code generation."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def run(self, args: Any) -> int:
        """Run the requested operation.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        if args.list_languages:
            self._print_languages()
            return 0

        if not args.schema and not args.url:
            self.console.print("❌ [red]No schema document given[/red]")
            return 1

        try:
            document = load_schema(file_path=args.schema, url=args.url)
            generator = get_generator(
                args.language,
                args.name or document.name,
                args.schema_version or document.version,
                args.config,
            )
        except (FileNotFoundError, SchemaLoaderError, RegistryError, ConfigError) as e:
            logger.error("%s", e)
            self.console.print(f"❌ [red]{e}[/red]")
            return 1

        result = generate_code(generator, document.declarations)
        if not result.success:
            self.console.print(f"❌ [red]{result.error_message}[/red]")
            return 1

        for warning in result.warnings:
            self.console.print(f"⚠️  [yellow]{warning}[/yellow]")

        if not args.dry_run:
            try:
                write_files(result, Path(args.output))
            except OSError as e:
                logger.error("Failed to write output: %s", e)
                self.console.print(f"❌ [red]Failed to write output: {e}[/red]")
                return 1

        self._print_summary(result, Path(args.output), args.dry_run)
        return 0

    def _print_languages(self) -> None:
        table = Table(title="Supported languages", box=box.SIMPLE)
        table.add_column("Language", style="cyan")
        table.add_column("Aliases")
        table.add_column("Extension")

        for language, info in list_all_language_info().items():
            table.add_row(language, ", ".join(info["aliases"]), info["file_extension"])

        self.console.print(table)

    def _print_summary(self, result: GenerationResult, output: Path, dry_run: bool) -> None:
        table = Table(box=box.SIMPLE)
        table.add_column("File", style="cyan")
        table.add_column("Lines", justify="right")

        for path, content in sorted(result.files.items()):
            table.add_row(path, str(len(content.splitlines())))

        self.console.print(table)
        verb = "Would write" if dry_run else "Wrote"
        self.console.print(
            f"✅ {verb} {len(result.files)} file(s) for "
            f"{result.metadata['declaration_count']} declaration(s) to {output}"
        )


def write_files(result: GenerationResult, output_dir: Path) -> None:
    """Write every generated file below ``output_dir``."""
    for relative_path, content in result.files.items():
        path = output_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug("Wrote %s", path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return CLIHandler().run(args)


if __name__ == "__main__":
    raise SystemExit(main())
