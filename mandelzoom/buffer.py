"""Grayscale pixel raster written by the band renderer."""

import numpy as np

from .geometry import Bounds


class PixelBuffer:
    """
    One byte per pixel, row-major, top row first.

    The raster is zero-filled on construction and only ever written by the
    renderer, one exclusive band slice per worker. Once a render returns, the
    buffer is treated as read-only; the next render builds a new buffer.
    """

    def __init__(self, bounds):
        self.bounds = Bounds(*bounds)
        self.pixels = np.zeros(self.bounds.area, dtype=np.uint8)

    @property
    def width(self):
        return self.bounds.width

    @property
    def height(self):
        return self.bounds.height

    @property
    def image(self):
        """2D (height, width) view of the raster."""
        return self.pixels.reshape(self.bounds.height, self.bounds.width)

    def band_view(self, band):
        """Writable view onto the rows owned by `band` (no copy)."""
        return self.pixels[band.start:band.stop]

    def __len__(self):
        return self.pixels.shape[0]

    def __repr__(self):
        return f"PixelBuffer({self.bounds.width}x{self.bounds.height})"
