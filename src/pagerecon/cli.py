#!/usr/bin/env python
"""
Command-line interface for pagerecon.

Usage:
    pagerecon --input <pdf_docx_or_url> --output <output_dir> [options]

Examples:
    # Convert a PDF to every output format
    pagerecon --input resume.pdf --output ./output --format all

    # Convert a remote DOCX
    pagerecon --input https://example.com/cv.docx --output ./output
"""

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import List

from . import __version__
from .config import SUPPORTED_FILE_TYPES, get_config
from .exceptions import PageReconError

logger = logging.getLogger("pagerecon")

ALL_FORMATS = ["html", "markdown", "json", "text"]


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="pagerecon - Rebuild structured HTML from PDF and DOCX documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Convert a PDF and export all formats:
    pagerecon --input resume.pdf --output ./output --format all

  Convert a file whose extension does not reveal its type:
    pagerecon --input ./download.bin --output ./output --type pdf

  Merge runs that are up to 3 units apart vertically:
    pagerecon --input resume.pdf --output ./output --tolerance 3
        """
    )

    # Required arguments
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input PDF/DOCX file or http(s) URL"
    )

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output directory for generated files"
    )

    # Optional arguments
    parser.add_argument(
        "--type", "-t",
        dest="file_type",
        choices=list(SUPPORTED_FILE_TYPES),
        default=None,
        help="Input type (default: detected from the extension)"
    )

    parser.add_argument(
        "--format", "-f",
        nargs="+",
        default=["html"],
        choices=ALL_FORMATS + ["all"],
        help="Output format(s) (default: html)"
    )

    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Vertical tolerance for grouping runs into lines (default: 2)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Re-raise errors with a traceback"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def _resolve_formats(formats: List[str]) -> List[str]:
    if "all" in formats:
        return list(ALL_FORMATS)
    return formats


async def run_pipeline(args) -> int:
    """Run the conversion for one input."""
    from .converter import check_file_type, convert_bytes_to_html, convert_document, extract_text
    from .utils.export import DocumentExporter, HtmlExporter, standalone_page
    from .utils.io import detect_input_type, ensure_dir, fetch_bytes, is_url, load_bytes

    start_time = time.time()
    source = args.input
    file_type = check_file_type(args.file_type or detect_input_type(source))
    logger.info(f"Input type: {file_type}")

    config = get_config()
    if args.tolerance is not None:
        config.lines.y_tolerance = args.tolerance

    output_dir = ensure_dir(args.output)

    if is_url(source):
        data = await asyncio.to_thread(
            fetch_bytes, source, config.fetch.timeout, config.fetch.user_agent
        )
        stem = Path(source.split("?", 1)[0]).stem or "document"
    else:
        data = load_bytes(source)
        stem = Path(source).stem

    formats = _resolve_formats(args.format)
    written = {}

    if file_type == "pdf" and any(f in formats for f in ("html", "markdown", "json")):
        document = await convert_document(data, file_type, source_file=source, config=config)
        exporter = DocumentExporter(
            output_dir, stem, html_exporter=HtmlExporter.from_config(config.html)
        )
        wanted = [f for f in formats if f in ("markdown", "json")]
        if "html" in formats:
            wanted += ["html", "fragment"]
        written.update(exporter.export(document, wanted))
        if not args.quiet:
            _print_metrics(document)
    elif "html" in formats:
        html = await convert_bytes_to_html(data, file_type, config=config)
        path = output_dir / f"{stem}.html"
        path.write_text(standalone_page(html, title=stem), encoding="utf-8")
        written["html"] = path
        skipped = [f for f in formats if f in ("markdown", "json")]
        if skipped:
            logger.warning(f"Formats {skipped} are only available for PDF input")

    if "text" in formats:
        path = output_dir / f"{stem}.txt"
        path.write_text(await extract_text(data, file_type), encoding="utf-8")
        written["text"] = path

    for fmt, path in written.items():
        logger.info(f"Exported {fmt}: {path}")

    if not args.quiet:
        print(f"Converted {source} in {time.time() - start_time:.2f}s")
        for fmt, path in written.items():
            print(f"  {fmt}: {path}")

    return 0


def _print_metrics(document) -> None:
    metrics = document.metrics
    print("\n" + "=" * 60)
    print("PAGE RECONSTRUCTION COMPLETE")
    print("=" * 60)
    print(f"Title: {document.title or '-'}")
    print(f"Pages processed: {metrics.pages_processed}")
    print(f"Lines: {metrics.lines_total} (blank skipped: {metrics.blank_lines_skipped})")
    for role, count in sorted(metrics.lines_by_role.items()):
        print(f"  {role}: {count}")
    print(f"Tables: {metrics.tables_total} ({metrics.table_rows_total} rows)")
    print(f"Mean baseline font size: {metrics.mean_baseline_font_size:.1f}")
    print("=" * 60)


def main():
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        exit_code = asyncio.run(run_pipeline(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except PageReconError as e:
        logger.error(str(e))
        if args.debug:
            raise
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
