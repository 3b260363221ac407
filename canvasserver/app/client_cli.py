from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

from ..client import CanvasClient
from ..config import DEFAULT_PORT, DEFAULT_SOCKET_TIMEOUT
from ..logger import make_logger, set_level
from ..rendering import grid_to_image, image_to_grid, load_image

log = make_logger("client")

DEFAULT_SIZE = (320, 240)


def parse_size(value: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a (width, height) pair."""
    try:
        width_text, height_text = value.lower().split("x", 1)
        width, height = int(width_text), int(height_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Size must look like 320x240, got {value!r}") from None
    if not (0 < width <= 0xFFFF and 0 < height <= 0xFFFF):
        raise argparse.ArgumentTypeError(f"Size out of range: {value}")
    return width, height


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Canvas Client: upload or download images the way the TFT display does."
    )
    parser.add_argument("action", choices=("upload", "download"), help="Transfer direction")
    parser.add_argument("path", help="Image to upload, or file to write the download to")
    parser.add_argument("-s", "--slot", type=int, required=True, help="Slot number (0-255)")
    parser.add_argument("--size", type=parse_size, default=DEFAULT_SIZE, help="Canvas size as WIDTHxHEIGHT")
    parser.add_argument("--host", default="127.0.0.1", help="Server address")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="Server port")
    parser.add_argument("--timeout", type=float, default=DEFAULT_SOCKET_TIMEOUT, help="Socket timeout in seconds")
    parser.add_argument("--ack-every", type=int, default=0, metavar="N", help="Must match the server's --ack-every")
    parser.add_argument("--no-dither", action="store_true", help="Map colors without Floyd-Steinberg dithering")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def upload(client: CanvasClient, args: argparse.Namespace) -> int:
    width, height = args.size
    grid = image_to_grid(load_image(args.path, width, height), dither=not args.no_dither)
    stats = client.upload(args.slot, grid)
    log.info(
        "Uploaded %s to slot %d (%d compressed rows, %d raw rows, %d bytes)",
        args.path,
        args.slot,
        stats.compressed_rows,
        stats.raw_rows,
        stats.bytes_sent,
    )
    return 0


def download(client: CanvasClient, args: argparse.Namespace) -> int:
    width, height = args.size
    grid = client.download(args.slot, width, height)
    grid_to_image(grid).save(args.path)
    log.info("Downloaded slot %d to %s", args.slot, args.path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_level(verbose=args.verbose)
    client = CanvasClient(args.host, args.port, args.timeout, args.ack_every)
    try:
        if args.action == "upload":
            return upload(client, args)
        return download(client, args)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
