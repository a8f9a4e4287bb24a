#!/usr/bin/env python3
"""CLI for content-aware image shrinking."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from seam_shrink import CarvingSession, SeamCarvingError, energy, grayscale, visualize_energy
from seam_shrink.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shrink an image by removing low-energy seams"
    )
    parser.add_argument("input", type=str, help="Input image path")
    parser.add_argument("-o", "--output", type=str, help="Output image path")
    parser.add_argument(
        "-c", "--cols", type=int, default=0,
        help="Number of columns to remove"
    )
    parser.add_argument(
        "-r", "--rows", type=int, default=0,
        help="Number of rows to remove"
    )
    parser.add_argument(
        "--mark-seams", type=str, metavar="PATH",
        help="Save the original image with the removed seams drawn on it"
    )
    parser.add_argument(
        "--visualize-energy", type=str, metavar="PATH",
        help="Save a colorized energy map of the input"
    )
    parser.add_argument(
        "-w", "--workers", type=int,
        help="Worker threads per parallel phase"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide progress bars"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Validate input
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        with Image.open(input_path) as img:
            image = np.array(img.convert("L" if img.mode in ("L", "1") else "RGB"))
    except (UnidentifiedImageError, OSError) as e:
        print(f"Error: Cannot read image {args.input}: {e}", file=sys.stderr)
        return 1

    session = CarvingSession(
        max_workers=args.workers,
        show_progress=False if args.no_progress else None,
    )

    try:
        if args.visualize_energy:
            vis = visualize_energy(energy(grayscale(image, args.workers), args.workers))
            Image.fromarray(vis).save(args.visualize_energy)
            print(f"Energy map saved to: {args.visualize_energy}")

        session.load_image(image)
        plan = session.plan_seams(args.rows, args.cols, overlay=bool(args.mark_seams))
        carved = session.commit()
    except SeamCarvingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.mark_seams:
        Image.fromarray(plan.overlay).save(args.mark_seams)
        print(f"Seam overlay saved to: {args.mark_seams}")

    output_path = args.output or f"{input_path.stem}_carved.png"
    Image.fromarray(carved).save(output_path)

    print(f"Carved: {args.input}")
    print(f"  Original: {image.shape[1]}x{image.shape[0]}")
    print(f"  Carved: {carved.shape[1]}x{carved.shape[0]}")
    print(f"  Seams: {len(plan.vertical_seams)} vertical, {len(plan.horizontal_seams)} horizontal")
    print(f"  Saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
