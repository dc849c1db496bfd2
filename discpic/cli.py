"""Command-line entry point: burn, list-presets and visualize subcommands."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from discpic.burn import burn_image
from discpic.burning import BurningError
from discpic.images import ImageLoadError
from discpic.presets import list_presets
from discpic.visualize_cmd import visualize_track

VERSION = "1.0.0"


def _run_burn(args: argparse.Namespace) -> None:
    burn_image(
        args.input,
        args.output,
        args.type,
        args.tr0,
        args.dtr,
        args.r0,
        args.mix_colors,
        args.preset,
        args.parallel,
    )


def _run_list_presets(args: argparse.Namespace) -> None:
    list_presets()


def _run_visualize(args: argparse.Namespace) -> None:
    visualize_track(
        args.track, args.output, args.type, args.tr0, args.dtr, args.r0, args.preset
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="discpic",
        description=(
            "Burn visible pictures onto CD and DVD surfaces by converting images "
            "to audio tracks that create patterns when burned."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    commands = parser.add_subparsers(dest="command")

    burn = commands.add_parser("burn", help="Convert image to burnable audio track")
    burn.add_argument("-i", "--input", required=True, help="Input image file")
    burn.add_argument("-o", "--output", default="track.raw", help="Output audio track file")
    burn.add_argument("-t", "--type", default="cd", help="Disc type: cd or dvd")
    burn.add_argument("--tr0", type=float, default=0.0,
                      help="Initial track parameter (use preset if 0)")
    burn.add_argument("--dtr", type=float, default=0.0,
                      help="Track delta parameter (use preset if 0)")
    burn.add_argument("--r0", type=float, default=24.5, help="Initial radius parameter")
    burn.add_argument("--mix-colors", action="store_true", help="Use random color mixing")
    burn.add_argument("-p", "--preset", default="", help="Use disc preset (see list-presets)")
    burn.add_argument("-j", "--parallel", action=argparse.BooleanOptionalAction, default=True,
                      help="Use multi-threaded conversion")
    burn.set_defaults(handler=_run_burn)

    presets = commands.add_parser("list-presets", help="List available disc presets")
    presets.set_defaults(handler=_run_list_presets)

    visualize = commands.add_parser(
        "visualize", help="Visualize how a raw track will look on disc"
    )
    visualize.add_argument("-t", "--track", required=True, help="Raw track file to visualize")
    visualize.add_argument("-o", "--output", default="disc_preview.png",
                           help="Output PNG image file")
    visualize.add_argument("-d", "--type", default="cd", help="Disc type: cd or dvd")
    visualize.add_argument("--tr0", type=float, default=0.0,
                           help="Initial track parameter (use preset if 0)")
    visualize.add_argument("--dtr", type=float, default=0.0,
                           help="Track delta parameter (use preset if 0)")
    visualize.add_argument("--r0", type=float, default=24.5, help="Initial radius parameter")
    visualize.add_argument("-p", "--preset", default="",
                           help="Use disc preset (see list-presets)")
    visualize.set_defaults(handler=_run_visualize)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0
    try:
        handler(args)
    except (ValueError, OSError, ImageLoadError, BurningError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())