import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from comic_format.config import config_from_env
from comic_format.core import ComicFormatter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Format comic strips into square, watermarked images."
    )
    parser.add_argument("input", type=Path, help="Input file or directory.")
    parser.add_argument("output", type=Path, help="Output file or directory.")
    parser.add_argument("watermark", help="Watermark text to add to each image.")
    parser.add_argument(
        "--icon",
        type=Path,
        default=os.environ.get("COMIC_FORMAT_ICON"),
        help="Branding icon placed in the empty part of the square "
        "(defaults to $COMIC_FORMAT_ICON).",
    )
    parser.add_argument(
        "-s",
        "--sort-name",
        action="store_true",
        help="Sort input files by name before converting.",
    )
    parser.add_argument(
        "-t",
        "--twothirds-adjust",
        type=float,
        default=0.0,
        help="Adjust x-position of the 2/3rds cutoff, as percent of comic width.",
    )
    parser.add_argument(
        "--final-width",
        type=int,
        default=None,
        help="Width of the output images, in pixels.",
    )
    parser.add_argument(
        "--font",
        default=None,
        help="TrueType font used for the watermark text.",
    )
    args = parser.parse_args(argv)
    if args.icon is None:
        parser.error("an icon is required: pass --icon or set COMIC_FORMAT_ICON")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    # Load COMIC_FORMAT_* settings from a local .env file if present.
    load_dotenv()

    args = parse_args(argv)

    try:
        config = config_from_env()
        if args.twothirds_adjust:
            config = config.with_twothirds_adjust(args.twothirds_adjust)
        if args.final_width is not None:
            config = replace(config, final_width=args.final_width)
        if args.font:
            config = replace(config, font_path=args.font)

        formatter = ComicFormatter(
            icon_path=args.icon,
            watermark=args.watermark,
            config=config,
            sort_name=args.sort_name,
        )
    except (ValueError, OSError) as exc:
        print(f"❌ {exc}")
        return 2

    report = formatter.run(args.input, args.output)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
