"""
Escape-time computation functions using Numba JIT compilation.

This module contains the performance-critical kernels. They work on plain
floats and flat uint8 arrays so they can run in nopython mode and release
the GIL, which lets the band renderer drive them from several threads at
once:
- Pixel to complex-plane mapping
- Escape-time membership test (z² + c, bailout radius 2)
- Grayscale intensity derivation
- Band rendering into an exclusive slice of the raster
"""

import numpy as np
from numba import jit


DEFAULT_LIMIT = 255     # Fits every escape count into one byte
NO_ESCAPE = -1          # Kernel sentinel for "did not escape within the limit"
BAILOUT_SQUARED = 4.0   # |z|² above this means the orbit diverges


@jit(nopython=True, nogil=True, cache=True)
def map_pixel(width, height, column, row, ul_re, ul_im, lr_re, lr_im):
    """
    Map a (column, row) pixel to a point on the complex plane.

    Returns:
        (re, im) of the point
    """
    span_re = lr_re - ul_re
    span_im = ul_im - lr_im
    re = ul_re + column * span_re / width
    # Rows grow downward while the imaginary axis grows upward
    im = ul_im - row * span_im / height
    return re, im


@jit(nopython=True, nogil=True, cache=True)
def escape_count(cr, ci, limit):
    """
    Iterate z² + c from z = 0 for at most `limit` steps.

    Returns:
        0-based index of the first iteration where |z|² > 4, or NO_ESCAPE
        if the orbit stayed bounded for the whole budget.
    """
    zr = 0.0
    zi = 0.0
    for i in range(limit):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > BAILOUT_SQUARED:
            return i
    return NO_ESCAPE


@jit(nopython=True, nogil=True, cache=True)
def intensity(count):
    """Grayscale level for an escape count: black inside, brighter when faster."""
    if count == NO_ESCAPE:
        return 0
    return max(0, 255 - count)


@jit(nopython=True, nogil=True, cache=True)
def render_band(pixels, width, height, ul_re, ul_im, lr_re, lr_im, limit):
    """
    Render a rectangle of the set into a flat buffer of grayscale pixels.

    Args:
        pixels: 1D uint8 array of width * height entries, row-major,
                modified in place
        width, height: Dimensions of the rectangle in pixels
        ul_re, ul_im: Complex point at the upper-left corner
        lr_re, lr_im: Complex point at the lower-right corner
        limit: Iteration budget per pixel
    """
    for row in range(height):
        offset = row * width
        for column in range(width):
            cr, ci = map_pixel(width, height, column, row, ul_re, ul_im, lr_re, lr_im)
            pixels[offset + column] = intensity(escape_count(cr, ci, limit))


def escape_time(point, limit=DEFAULT_LIMIT):
    """
    Decide whether `point` appears to be in the Mandelbrot set.

    Returns:
        The number of iterations it took the orbit to leave the circle of
        radius two, or None if it did not leave within `limit` iterations
        (the point is likely a member).
    """
    count = escape_count(float(point.real), float(point.imag), int(limit))
    if count == NO_ESCAPE:
        return None
    return int(count)


def warmup_jit():
    """
    Warm up JIT compilation with a tiny render.

    Call this once at startup to compile the kernels before the first real
    frame, so the UI does not stall on first use.
    """
    dummy = np.zeros(16, dtype=np.uint8)
    render_band(dummy, 4, 4, -2.0, 1.0, 1.0, -1.0, 8)
