"""CLI entry point for the return map renderer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from returnmap.charts.return_map import save_return_map_png
from returnmap.config import GEOGRAPHIES, DisplayMode, HighlightMode, RenderInput
from returnmap.data.loader import DatasetLoadError
from returnmap.reports.html import write_html
from returnmap.runner import load_return_map

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="returnmap",
        description="Return map layout and color-scaling engine",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render", help="Render a return map to HTML (and optionally PNG)"
    )
    render_parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data"),
        help="Root folder holding one subfolder per geography (default: data)",
    )
    render_parser.add_argument(
        "--geography",
        choices=sorted(GEOGRAPHIES),
        default="br",
        help="Geography to render (default: br)",
    )
    render_parser.add_argument(
        "--mode",
        choices=[m.value for m in DisplayMode],
        default=DisplayMode.STACKED.value,
        help="Display mode (default: stacked)",
    )
    render_parser.add_argument(
        "--highlight",
        choices=[m.value for m in HighlightMode],
        default=HighlightMode.CLASS.value,
        help="Card highlight mode (default: class)",
    )
    render_parser.add_argument(
        "--reference",
        default=None,
        help="Reference asset id for asset mode (default: first asset)",
    )
    render_parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/return_map.html"),
        help="Output HTML path (default: output/return_map.html)",
    )
    render_parser.add_argument(
        "--png",
        type=Path,
        default=None,
        help="Also write a PNG chart to this path",
    )
    render_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def run_render(args: argparse.Namespace) -> None:
    """Execute the render command.

    Args:
        args: Parsed CLI arguments.
    """
    render_input = RenderInput(
        geography=args.geography,
        display_mode=DisplayMode(args.mode),
        highlight_mode=HighlightMode(args.highlight),
        reference_asset_id=args.reference,
    )

    try:
        return_map = load_return_map(args.data_dir, render_input)
    except DatasetLoadError as exc:
        logger.error(
            "Could not load %s data from %s: %s",
            args.geography, args.data_dir, exc,
        )
        sys.exit(1)

    write_html(return_map, args.output)
    if args.png is not None:
        save_return_map_png(return_map, args.png)

    logger.info(
        "Rendered %d assets x %d columns",
        len(return_map.dataset.assets),
        len(return_map.dataset.columns),
    )


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "render":
        run_render(args)
    else:
        logger.error("Unknown command: %s", args.command)
        sys.exit(1)


if __name__ == "__main__":
    main()
