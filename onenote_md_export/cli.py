"""CLI entry point for the OneNote to Markdown exporter."""

import argparse
import logging
import sys

from onenote_md_export.converter.pandoc import PandocConverter
from onenote_md_export.exporter.markdown import MarkdownWriter
from onenote_md_export.exporter.notebook_exporter import NotebookExporter
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.service.errors import NoteServiceError
from onenote_md_export.service.onenote import OneNoteApp
from onenote_md_export.settings import ExportSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onenote-md-export",
        description="Export OneNote notebooks to Markdown",
    )
    parser.add_argument(
        "-n",
        "--notebook",
        default="",
        help="Title of the notebook to export (default: all open notebooks)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the notebooks open in OneNote and exit",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="Exports",
        help="Output directory for Markdown files",
    )
    parser.add_argument(
        "--section-filter",
        default="",
        help="Only export sections whose path contains this text",
    )
    parser.add_argument(
        "--page-filter",
        default="",
        help="Only export pages whose title contains this text",
    )
    parser.add_argument(
        "--keep-temp-files",
        action="store_true",
        help="Keep the .docx file published by OneNote next to each page",
    )
    parser.add_argument(
        "--keep-html-highlighting",
        action="store_true",
        help="Keep highlighted text as [span] markers",
    )
    parser.add_argument(
        "--hex-highlighting-to-yellow",
        action="store_true",
        help="Convert custom highlight colors to yellow",
    )
    parser.add_argument(
        "--no-image-references",
        action="store_true",
        help="Keep the <img> tags produced by pandoc instead of Markdown image links",
    )
    parser.add_argument(
        "--keep-onenote-header",
        action="store_true",
        help="Keep the title, date and time OneNote puts at the top of each page",
    )
    parser.add_argument(
        "--keep-quotation-blocks",
        action="store_true",
        help="Keep the quotation blocks pandoc produces for indented text",
    )
    parser.add_argument(
        "--max-file-length",
        type=int,
        default=50,
        help="Maximum length of page file names",
    )
    parser.add_argument(
        "--pandoc",
        default="pandoc",
        help="Path of the pandoc executable",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging and keep intermediate files",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> ExportSettings:
    return ExportSettings(
        export_folder=args.output,
        debug=args.debug,
        keep_onenote_temp_files=args.keep_temp_files,
        keep_html_highlighting=args.keep_html_highlighting,
        convert_hex_highlighting_to_yellow=args.hex_highlighting_to_yellow,
        post_processing_md_img_ref=not args.no_image_references,
        post_processing_remove_onenote_header=not args.keep_onenote_header,
        post_processing_remove_quotation_blocks=not args.keep_quotation_blocks,
        md_max_file_length=args.max_file_length,
        pandoc_path=args.pandoc,
    )


def select_notebooks(notebooks: list[Notebook], title: str) -> list[Notebook]:
    """Notebooks matching ``title`` (case-insensitive), or all when empty."""
    if not title:
        return list(notebooks)
    return [nb for nb in notebooks if nb.title.lower() == title.lower()]


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the onenote-md-export CLI."""
    args = build_parser().parse_args(argv)

    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    settings = settings_from_args(args)

    try:
        service = OneNoteApp()
        notebooks = service.get_notebooks()
    except NoteServiceError as e:
        print(f"Error: cannot connect to OneNote: {e}", file=sys.stderr)
        return 1

    if args.list:
        for nb in notebooks:
            print(nb.title)
        return 0

    selected = select_notebooks(notebooks, args.notebook)
    if not selected:
        print(f"No notebook named '{args.notebook}' is open in OneNote", file=sys.stderr)
        return 1

    exporter = NotebookExporter(
        service,
        PandocConverter(settings.pandoc_path),
        MarkdownWriter(settings),
        settings,
    )

    total_pages = 0
    errors: list[str] = []

    for notebook in selected:
        print(f"\nExporting notebook: {notebook.title}")
        result = exporter.export_notebook(
            notebook, args.section_filter, args.page_filter
        )
        if not result.succeeded:
            errors.append(f"  {notebook.title}: {result.error_message}")
            continue

        total_pages += len(result.exported_pages)
        print(f"  -> {len(result.exported_pages)} page(s) exported to {notebook.export_folder}")
        for outcome in result.failed_pages:
            errors.append(f"  {notebook.title}: page '{outcome.page.title}': {outcome.message}")

    # Summary
    print(f"\n{'=' * 50}")
    print("Export complete:")
    print(f"  Pages exported: {total_pages}")
    print(f"  Output:         {settings.export_folder}")

    if errors:
        print(f"\n  Errors ({len(errors)}):")
        for err in errors:
            print(f"  {err}")
        return 2 if total_pages == 0 else 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
