"""
Mandelbrot Set Zoom Package

Renders the Mandelbrot set as a grayscale image, splitting the picture
into horizontal bands that are computed in parallel by Numba kernels.
Two front ends share the engine: a batch renderer that writes one view
to an image file, and a Pygame viewer that zooms into a dragged rectangle.

Quick Start:
    from mandelzoom import Viewport, render
    frame = render((800, 600), Viewport(-2.5 + 1.5j, 1.0 - 1.5j))

Or from command line:
    mandelzoom-render mandel.png 1000x750 -1.20,0.35 -1,0.20
    python -m mandelzoom

Package Structure:
    - compute.py: JIT-compiled mapping, escape-time and band kernels
    - geometry.py: Bounds, Viewport and pixel to complex-plane mapping
    - buffer.py: The grayscale PixelBuffer
    - renderer.py: Band partitioning, parallel render, background rendering
    - controller.py: Rubber-band zoom state machine
    - output.py: Image file output
    - cli.py: Batch renderer entry point
    - app.py: Interactive viewer and event loop

Controls:
    - Drag: Select a rectangle (locked to the window's aspect) to zoom into
    - R: Reset to the initial view
    - S: Save the current frame
    - ESC: Quit
"""

from .buffer import PixelBuffer
from .compute import DEFAULT_LIMIT, escape_time
from .controller import ViewportZoomController
from .geometry import Bounds, Viewport, pixel_to_point
from .renderer import Band, BackgroundRenderer, plan_bands, render

__version__ = "1.0.0"
__all__ = [
    "Band",
    "BackgroundRenderer",
    "Bounds",
    "DEFAULT_LIMIT",
    "PixelBuffer",
    "Viewport",
    "ViewportZoomController",
    "escape_time",
    "pixel_to_point",
    "plan_bands",
    "render",
]
