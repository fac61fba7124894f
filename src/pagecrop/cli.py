"""CLI entry point for PageCrop."""

from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError

from pagecrop import __version__, logger
from pagecrop.dependencies import ensure_cli_dependencies
from pagecrop.document import SourceDocument, load_document_file
from pagecrop.exceptions import PackageError, SelectionError
from pagecrop.logging import configure_logging
from pagecrop.processing.page_ranges import commit_page_ranges
from pagecrop.rebuild import crop_document, remove_pages
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.models import CropRequest, RebuildResult, SelectionRect

_SELECTION_PARTS = 4


def _selection_from_cli(value: str) -> SelectionRect:
    """Convert `--selection X,Y,W,H` into a pixel-space rectangle.

    Args:
        value (str): Comma-separated pixel values.

    Raises:
        argparse.ArgumentTypeError: If the value is not four non-negative numbers.

    Returns:
        SelectionRect: Selection in display pixels.
    """
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != _SELECTION_PARTS:
        raise argparse.ArgumentTypeError("--selection must be X,Y,WIDTH,HEIGHT")  # noqa: TRY003
    try:
        x, y, width, height = (float(part) for part in parts)
        return SelectionRect(x=x, y=y, width=width, height=height)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--selection values must be non-negative numbers") from exc  # noqa: TRY003


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pagecrop")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    crop_parser = subparsers.add_parser("crop", help="Crop a rectangular region out of one or all pages")
    crop_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    crop_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    crop_parser.add_argument(
        "--selection",
        required=True,
        type=_selection_from_cli,
        help="Selection in display pixels: X,Y,WIDTH,HEIGHT (origin top-left)",
    )
    crop_parser.add_argument("--scale", type=float, default=None, help="Display scale the selection was drawn at")
    scope = crop_parser.add_mutually_exclusive_group()
    scope.add_argument("--page", type=int, default=None, dest="page", help="Crop only this 1-based page")
    scope.add_argument("--all-pages", action="store_true", dest="all_pages", help="Crop every page (default)")

    remove_parser = subparsers.add_parser("remove", help="Remove pages from a PDF")
    remove_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    remove_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    remove_parser.add_argument("--pages", required=True, help='Pages to remove, e.g. "2,4-6"')

    info_parser = subparsers.add_parser("info", help="Show page count, page sizes and paper formats")
    info_parser.add_argument("--input", required=True, type=Path, dest="input_path")

    return parser


def _build_crop_request(args: argparse.Namespace, settings: Settings) -> CropRequest:
    """Build crop request from CLI arguments.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Raises:
        SelectionError: If the scale or page is out of range.

    Returns:
        CropRequest: Request object.
    """
    scale = args.scale if args.scale is not None else settings.default_scale
    page = getattr(args, "page", None)
    try:
        return CropRequest(
            selection=args.selection,
            display_scale=scale,
            current_page=page if page is not None else 1,
            crop_all_pages=page is None,
        )
    except ValidationError as exc:
        details = "; ".join(f"{'.'.join(map(str, error['loc']))}: {error['msg']}" for error in exc.errors())
        raise SelectionError(message=f"Invalid crop request: {details}", offending_value=page) from exc


def _run_command(args: argparse.Namespace, settings: Settings) -> RebuildResult | None:
    """Dispatch a parsed subcommand.

    Returns:
        RebuildResult | None: Result for rebuild commands, None for `info`.
    """
    source = load_document_file(args.input_path)
    if args.command == "info":
        _print_info(source)
        return None
    if args.command == "crop":
        return crop_document(source, _build_crop_request(args, settings), settings)
    pages = commit_page_ranges(args.pages, source.page_count)
    return remove_pages(source, pages, settings)


def _print_info(source: SourceDocument) -> None:
    print(f"{source.name}: {source.page_count} page(s)")  # noqa: T201
    for page_number in range(1, source.page_count + 1):
        size = source.page_size(page_number)
        print(  # noqa: T201
            f"  page {page_number}: {size.width:g} x {size.height:g} pt, {source.paper_format(page_number)}",
        )


def persist_result(result: RebuildResult, output_path: Path) -> None:
    """Write a rebuilt document to disk."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.data)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in {"crop", "remove", "info"}:
        parser.print_help()
        return 0

    ensure_cli_dependencies(args.command)

    try:
        result = _run_command(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130

    if result is None:
        return 0

    output_path = args.output_path or args.input_path.with_name(result.file_name)
    persist_result(result, output_path)
    logger.info(
        "Document written",
        extra={"output_path": str(output_path), "pages": result.retained_page_count, "bytes": result.byte_length},
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
