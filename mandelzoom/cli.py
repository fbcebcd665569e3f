"""
Batch renderer: one fixed view to a grayscale image file.

    mandelzoom-render FILE PIXELS UPPERLEFT LOWERRIGHT
    mandelzoom-render mandel.png 1000x750 -1.20,0.35 -1,0.20

Arguments are positional only. Coordinates like -1.20,0.35 start with a
minus sign, so they are read straight from argv rather than through an
option parser.
"""

import logging
import os
import sys

from .compute import DEFAULT_LIMIT
from .geometry import Bounds, Viewport
from .logging_config import setup_logging
from .output import write_image
from .renderer import render, worker_count

logger = logging.getLogger(__name__)


def parse_pair(s, separator, kind=float):
    """
    Parse the string `s` as a coordinate pair, like "400x600" or "1.0,0.5".

    `s` must have the form <left><separator><right>, where both sides parse
    with `kind`. Whitespace and digit-grouping underscores are rejected,
    although Python number parsing would accept them.

    Returns:
        (left, right) on success, None if `s` does not have that form.
    """
    if any(ch.isspace() or ch == "_" for ch in s):
        return None
    index = s.find(separator)
    if index == -1:
        return None
    try:
        return kind(s[:index]), kind(s[index + 1:])
    except ValueError:
        return None


def parse_complex(s):
    """Parse a pair of floats separated by a comma as a complex number."""
    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    return complex(*pair)


def print_usage(prog, stream=None):
    stream = stream or sys.stderr
    print("Usage: mandelzoom-render FILE PIXELS UPPERLEFT LOWERRIGHT", file=stream)
    print(f"Example: {prog} mandel.png 1000x750 -1.20,0.35 -1,0.20", file=stream)


def main(argv=None):
    """Entry point for the mandelzoom-render command."""
    if argv is None:
        argv = sys.argv
    prog = os.path.basename(argv[0]) if argv else "mandelzoom-render"

    if len(argv) != 5:
        print_usage(prog)
        sys.exit(1)

    filename, pixels_arg, upper_left_arg, lower_right_arg = argv[1:]

    pair = parse_pair(pixels_arg, "x", int)
    if pair is None:
        sys.exit(f"error parsing image dimensions: {pixels_arg!r}")
    bounds = Bounds(*pair)
    if not bounds.is_valid():
        sys.exit(f"image dimensions must be positive: {pixels_arg!r}")

    upper_left = parse_complex(upper_left_arg)
    if upper_left is None:
        sys.exit(f"error parsing upper left corner point: {upper_left_arg!r}")
    lower_right = parse_complex(lower_right_arg)
    if lower_right is None:
        sys.exit(f"error parsing lower right corner point: {lower_right_arg!r}")

    viewport = Viewport(upper_left, lower_right)
    if not viewport.is_well_formed():
        sys.exit(
            "corners must be finite, with upper left left of and above lower right: "
            f"{upper_left_arg} {lower_right_arg}"
        )

    setup_logging(logging.INFO)
    logger.info(
        "Rendering %dx%d from %s to %s on %d threads",
        bounds.width, bounds.height, upper_left, lower_right, worker_count(),
    )
    buffer = render(bounds, viewport, DEFAULT_LIMIT)

    try:
        write_image(filename, buffer)
    except (OSError, ValueError) as exc:
        sys.exit(f"error writing image file {filename!r}: {exc}")
    logger.info("Saved %s", filename)


if __name__ == "__main__":
    main()
