#!/usr/bin/env python3
"""Command-line interface for Function Point Analysis with modular exporters."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from analysis import FPAnalysis, load_model, save_model
from config import get_config_manager
from logger import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpa-helper",
        description="Function Point Helper - Size a system from its SQL schema or a saved model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schema.sql                          # Markdown report on stdout
  %(prog)s schema.sql --save-model model.json  # Seed and save a model document
  %(prog)s model.json --format fpa-json --output scored.json
  %(prog)s --list-formats                      # Show available formats
        """
    )

    # Positional arguments
    parser.add_argument(
        'source',
        nargs='?',
        help='SQL file to extract Logical Files from, or a .json model document'
    )

    # Export options
    parser.add_argument(
        '--format', '-f',
        help='Export format (use --list-formats to see available)'
    )

    parser.add_argument(
        '--output', '-o',
        help='Output file path (default: stdout)'
    )

    parser.add_argument(
        '--save-model',
        help='Also write the evaluated model document to this path'
    )

    parser.add_argument(
        '--compact',
        action='store_true',
        help='Use compact output format where supported'
    )

    parser.add_argument(
        '--include-attributes',
        action='store_true',
        help='List every data element in report formats'
    )

    # Information
    parser.add_argument(
        '--list-formats',
        action='store_true',
        help='List available export formats'
    )

    parser.add_argument(
        '--format-info',
        help='Show detailed information about a specific format'
    )

    # Verbosity
    parser.add_argument(
        '--log-level',
        help='Logging level (DEBUG, INFO, WARNING, ERROR)'
    )

    parser.add_argument(
        '--log-file',
        help='Append detailed logs to this file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_manager = get_config_manager()
    config = config_manager.load_config()

    log_level = args.log_level or ("DEBUG" if args.verbose else config.log_level)
    setup_logging(log_level, args.log_file)

    # Handle format listing
    if args.list_formats:
        list_formats()
        return 0

    if args.format_info:
        return show_format_info(args.format_info)

    # Validate required arguments
    if not args.source:
        parser.error("A SQL file or model document is required")

    source_path = Path(args.source).resolve()
    if not source_path.is_file():
        print(f"Error: Source file '{source_path}' does not exist", file=sys.stderr)
        return 1

    try:
        store = load_source(source_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        print(f"Error reading '{source_path}': {e}", file=sys.stderr)
        return 1

    if source_path.suffix.lower() == ".json":
        config_manager.update_model_file(str(source_path))
    else:
        config_manager.update_sql_file(str(source_path))

    summary = store.evaluate()
    if args.verbose:
        print(
            f"Found {len(summary.logical_files)} logical files, "
            f"{len(summary.elementary_processes)} elementary processes, {summary.total} FP",
            file=sys.stderr,
        )

    if args.save_model:
        try:
            saved = save_model(store, args.save_model)
        except OSError as e:
            print(f"Error saving model: {e}", file=sys.stderr)
            return 1
        config_manager.update_model_file(str(saved))
        if args.verbose:
            print(f"Model saved to: {saved}", file=sys.stderr)

    format_id = args.format or config.output_format
    status = handle_single_export(store, format_id, args, source_path)
    if status == 0:
        config_manager.update_output(args.output, format_id)
    return status


def load_source(source_path: Path) -> FPAnalysis:
    """Build a store from a model document or from SQL text."""
    logger.debug("Loading %s", source_path)
    if source_path.suffix.lower() == ".json":
        return load_model(source_path)

    store = FPAnalysis()
    store.extract_schema(source_path.read_text(encoding='utf-8'))
    return store


def list_formats() -> None:
    """List all available export formats."""
    from exporters import list_available_formats, get_exporter

    formats = list_available_formats()

    if not formats:
        print("No export formats available")
        return

    print("Available export formats:")
    print()

    for format_id in formats:
        exporter = get_exporter(format_id)
        if exporter:
            print(f"  {format_id}")
            print(f"    MIME Type: {exporter.mimetype()}")
            print(f"    Human Readable: {exporter.is_human_readable()}")
            print(f"    Lossless: {exporter.is_lossless()}")
            print()


def show_format_info(format_id: str) -> int:
    """Show detailed information about a specific format."""
    from exporters import get_exporter

    exporter = get_exporter(format_id)
    if not exporter:
        print(f"Error: Unknown format '{format_id}'", file=sys.stderr)
        print("\nUse --list-formats to see available formats", file=sys.stderr)
        return 1

    print(f"Format: {format_id}")
    print(f"MIME Type: {exporter.mimetype()}")
    print(f"Human Readable: {exporter.is_human_readable()}")
    print(f"Lossless: {exporter.is_lossless()}")

    print()
    print("Example usage:")
    print(f"  fpa-helper schema.sql --format {format_id} --output report.out")
    return 0


def handle_single_export(store: FPAnalysis, format_id: str, args, source_path: Path) -> int:
    """Render the evaluated model with one exporter."""
    from exporters import get_exporter

    exporter = get_exporter(format_id)
    if not exporter:
        print(f"Error: Unknown format '{format_id}'", file=sys.stderr)
        print("\nUse --list-formats to see available formats", file=sys.stderr)
        return 1

    options = {
        'compact': args.compact,
        'include_attributes': args.include_attributes,
        'source': source_path.name,
        'title': f"Function Point Analysis: {source_path.stem}",
    }

    try:
        export_data = exporter.render(store.export_model(), options)
    except ValueError as e:
        print(f"Error during export: {e}", file=sys.stderr)
        return 1

    if not args.output:
        if isinstance(export_data, bytes):
            export_data = export_data.decode('utf-8')
        sys.stdout.write(export_data)
        if not export_data.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    output_path = Path(args.output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if isinstance(export_data, str):
            output_path.write_text(export_data, encoding='utf-8')
        else:
            output_path.write_bytes(export_data)
    except OSError as e:
        print(f"Error writing '{output_path}': {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Exported to: {output_path}", file=sys.stderr)
        print(f"Size: {output_path.stat().st_size:,} bytes", file=sys.stderr)
    else:
        print(str(output_path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
