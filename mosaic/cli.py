"""Command line entry point: render a mosaic from files or from the CDN."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from .config import MosaicConfig
from .engine import MosaicEngine
from .errors import MosaicError
from .fetch import FetchConfig, ImageFetcher, ImageSize

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INTERNAL = 1
EXIT_USAGE = 2


def _load_files(paths: Sequence[str]) -> List[Image.Image]:
    images: List[Image.Image] = []
    for p in paths:
        with Image.open(p) as im:
            im.load()
            images.append(im.copy())
    return images


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mosaic", description="Combine 1-4 post images into one blurred-backdrop mosaic PNG.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-step timings and geometry")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-o", "--output", required=True, help="Path of the PNG to write")
    common.add_argument("--blur-radius", type=float, default=None, help="Backdrop blur radius (default: 50)")
    common.add_argument("--workers", type=int, default=None, help="Threads used for tile scaling (default: 1)")

    render = sub.add_parser("render", parents=[common], help="Render local image files")
    render.add_argument("files", nargs="+", help="Input images in placement order")

    fetch = sub.add_parser("fetch", parents=[common], help="Fetch a post's images from the CDN and render them")
    fetch.add_argument("did", help="Author DID (e.g., did:plc:abc123)")
    fetch.add_argument("image_ids", nargs="+", help="Image ids in placement order")
    fetch.add_argument("--size", choices=[s.value for s in ImageSize], default=ImageSize.FULLSIZE.value, help="CDN rendition to fetch")
    fetch.add_argument("--timeout", type=float, default=5.0, help="Per-request timeout in seconds")
    return parser


def _config_from_args(args: argparse.Namespace) -> MosaicConfig:
    base = MosaicConfig.from_env()
    return MosaicConfig(
        blur_radius=base.blur_radius if args.blur_radius is None else args.blur_radius,
        canvas_multipliers=base.canvas_multipliers,
        image_format=base.image_format,
        workers=base.workers if args.workers is None else args.workers,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = MosaicEngine(_config_from_args(args))
    except ValueError as exc:
        parser.error(str(exc))

    try:
        if args.command == "render":
            images = _load_files(args.files)
        else:
            with ImageFetcher(FetchConfig(timeout=args.timeout)) as fetcher:
                images = fetcher.fetch_images(args.did, args.image_ids, ImageSize(args.size))
        thumbnail = engine.generate_combined_thumbnail(images)
    except OSError as exc:
        logger.error("Could not read input image: %s", exc)
        return EXIT_USAGE
    except MosaicError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE if exc.client_error else EXIT_INTERNAL

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(thumbnail.to_bytes())
    print(f"{thumbnail.width}x{thumbnail.height}, {len(thumbnail)} bytes -> {out_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
