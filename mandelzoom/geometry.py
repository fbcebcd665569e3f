"""
Pixel and complex-plane geometry.

Bounds describe the image in pixels, a Viewport describes the rectangle of
the complex plane the image covers. Both are immutable: zooming or resetting
replaces the viewport instead of editing it.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

from .compute import map_pixel


class Bounds(NamedTuple):
    """Image size in pixels."""

    width: int
    height: int

    @property
    def area(self):
        return self.width * self.height

    @property
    def aspect(self):
        return self.width / self.height

    def is_valid(self):
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Viewport:
    """
    Rectangle of the complex plane mapped onto the image.

    `upper_left` has the smaller real part and the larger imaginary part,
    following image convention (row index grows downward).
    """

    upper_left: complex
    lower_right: complex

    @property
    def span_re(self):
        return self.lower_right.real - self.upper_left.real

    @property
    def span_im(self):
        return self.upper_left.imag - self.lower_right.imag

    def is_well_formed(self):
        """Finite corners with upper_left strictly above and left of lower_right."""
        corners = (self.upper_left.real, self.upper_left.imag,
                   self.lower_right.real, self.lower_right.imag)
        if not all(math.isfinite(value) for value in corners):
            return False
        return self.span_re > 0 and self.span_im > 0


def pixel_to_point(bounds, pixel, viewport):
    """
    Given the (column, row) of a pixel, return the corresponding complex point.

    `bounds` gives the width and height of the image; `viewport` the area of
    the complex plane the image covers. Pixels on the far edges (column ==
    width or row == height) map onto the lower-right corner itself.
    """
    column, row = pixel
    ul, lr = viewport.upper_left, viewport.lower_right
    re, im = map_pixel(bounds[0], bounds[1], column, row,
                       ul.real, ul.imag, lr.real, lr.imag)
    return complex(re, im)
