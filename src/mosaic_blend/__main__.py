import argparse
import logging
import sys
from typing import Optional

from mosaic_blend.api.loader import cover_fit, decode, is_remote
from mosaic_blend.api.mosaic import make_config, mosaic_blend_sync
from mosaic_blend.constants import IMAGE_FORMATS, BlendMode, ReturnType
from mosaic_blend.exceptions import MosaicError
from mosaic_blend.version import __version__

logger = logging.getLogger("mosaic_blend")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="mosaic-blend command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    compose_parser = subparsers.add_parser("compose", help="Blend sources into a mosaic")
    compose_parser.add_argument("output_file", help="Output image file")
    compose_parser.add_argument("sources", nargs="+", help="Image paths or URLs")
    compose_parser.add_argument("--size", type=int, default=1024, help="Output side length.")
    compose_parser.add_argument("--block", type=int, default=64, help="Tile side length.")
    compose_parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    compose_parser.add_argument(
        "--patches", type=int, default=5, help="Overlay patches per source."
    )
    compose_parser.add_argument(
        "--patch-size",
        type=int,
        nargs=2,
        default=(96, 320),
        metavar=("MIN", "MAX"),
        help="Overlay patch side range.",
    )
    compose_parser.add_argument(
        "--blend-mode",
        default=BlendMode.OVERLAY.value,
        choices=[mode.value for mode in BlendMode],
        help="Overlay blend mode.",
    )
    compose_parser.add_argument("--alpha", type=float, default=0.6, help="Overlay opacity.")
    compose_parser.add_argument(
        "--format",
        dest="image_format",
        default=None,
        choices=sorted(IMAGE_FORMATS),
        help="Output format. Guessed from the output file name by default.",
    )

    show_parser = subparsers.add_parser("show", help="Show the cover-fit of sources")
    show_parser.add_argument("sources", nargs="+", help="Image paths")
    show_parser.add_argument("--size", type=int, default=1024, help="Output side length.")

    return parser.parse_args(argv)


def guess_format(filename: str) -> str:
    extension = filename.rsplit(".", 1)[-1].lower()
    extension = "jpeg" if extension == "jpg" else extension
    return extension if extension in IMAGE_FORMATS else "png"


def compose(args: argparse.Namespace) -> None:
    config = make_config(
        size=args.size,
        block=args.block,
        seed=args.seed,
        overlay_patches_per_image=args.patches,
        overlay_size_range=tuple(args.patch_size),
        overlay_blend_mode=args.blend_mode,
        overlay_alpha=args.alpha,
        return_type=ReturnType.BLOB,
        image_format=args.image_format or guess_format(args.output_file),
    )
    logger.debug("Composing %d sources with %r" % (len(args.sources), config))
    data = mosaic_blend_sync(args.sources, config)
    with open(args.output_file, "wb") as f:
        f.write(data)
    logger.info("Wrote %s" % args.output_file)


def show(args: argparse.Namespace) -> None:
    for source in args.sources:
        if is_remote(source):
            print("%s: remote source, skipped" % source)
            continue
        with open(source, "rb") as f:
            image = decode(f.read())
        fit = cover_fit(image.width, image.height, args.size)
        print(
            "%s: %dx%d scale=%g dx=%g dy=%g"
            % (source, image.width, image.height, fit.scale, fit.dx, fit.dy)
        )


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    try:
        if args.command == "compose":
            compose(args)
        elif args.command == "show":
            show(args)
    except (MosaicError, OSError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    sys.exit(main())
