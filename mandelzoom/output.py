"""Writing rendered frames to image files."""

import logging
import os
from datetime import datetime

from PIL import Image

logger = logging.getLogger(__name__)


def write_image(filename, buffer):
    """
    Save `buffer` as an 8-bit grayscale image.

    The format follows the file extension (e.g. .png). Errors opening or
    writing the file (OSError) and unknown extensions (ValueError) are left
    to the caller.
    """
    image = Image.fromarray(buffer.image)
    image.save(filename)
    logger.debug("Wrote %dx%d image to %s", buffer.width, buffer.height, filename)


def snapshot_filename(directory=None):
    """Timestamped PNG path for a saved frame, e.g. mandelzoom_20240101_120000.png."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(directory or os.getcwd(), f"mandelzoom_{timestamp}.png")
