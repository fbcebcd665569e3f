"""
Band-parallel Mandelbrot renderer.

The image is split into consecutive horizontal bands, one per worker thread.
Each band owns an exclusive slice of the PixelBuffer, so the workers write
without any locking; render() joins them all before returning.

BackgroundRenderer wraps render() for the interactive app:
- Rendering runs on a background thread so the UI stays responsive
- Every submission gets a generation number; a finished render that has
  been superseded by a newer submission is dropped instead of displayed
"""

import logging
import os
import threading
import time
from dataclasses import dataclass

from .buffer import PixelBuffer
from .compute import DEFAULT_LIMIT, render_band
from .geometry import Bounds, Viewport, pixel_to_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Band:
    """Rows [top, top + height) of the image and the sub-viewport they cover."""

    top: int
    height: int
    width: int
    viewport: Viewport

    @property
    def bottom(self):
        return self.top + self.height

    @property
    def start(self):
        """Offset of the band's first pixel in the flat raster."""
        return self.top * self.width

    @property
    def stop(self):
        return self.bottom * self.width

    @property
    def bounds(self):
        return Bounds(self.width, self.height)


def worker_count(workers=None):
    """Number of render threads: the requested count, else one per CPU."""
    if workers is None:
        workers = os.cpu_count() or 1
    return max(1, int(workers))


def plan_bands(bounds, viewport, workers):
    """
    Partition the image rows into at most `workers` consecutive bands.

    Every band but the last has ceil(height / workers) rows. The plan is
    checked to cover every row exactly once before it is returned.
    """
    width, height = bounds
    rows_per_band = (height + workers - 1) // workers

    bands = []
    for top in range(0, height, rows_per_band):
        band_height = min(rows_per_band, height - top)
        upper_left = pixel_to_point(bounds, (0, top), viewport)
        lower_right = pixel_to_point(bounds, (width, top + band_height), viewport)
        bands.append(Band(top, band_height, width, Viewport(upper_left, lower_right)))

    _check_partition(bands, height)
    return bands


def _check_partition(bands, height):
    next_row = 0
    for band in bands:
        assert band.top == next_row, f"band at row {band.top} leaves a gap or overlap at row {next_row}"
        assert band.height > 0, f"empty band at row {band.top}"
        next_row = band.bottom
    assert next_row == height, f"bands cover {next_row} of {height} rows"


def _render_into(pixels, band, limit, errors):
    ul, lr = band.viewport.upper_left, band.viewport.lower_right
    try:
        render_band(pixels, band.width, band.height,
                    ul.real, ul.imag, lr.real, lr.imag, limit)
    except Exception as exc:
        errors.append(exc)


def render(bounds, viewport, limit=DEFAULT_LIMIT, workers=None):
    """
    Render `viewport` into a new PixelBuffer of size `bounds`.

    Spawns one thread per band and blocks until all of them finish, so the
    caller only ever sees a complete image.

    Args:
        bounds: (width, height) of the image in pixels, both positive
        viewport: Area of the complex plane to render
        limit: Iteration budget per pixel
        workers: Thread count (default: number of CPUs)

    Returns:
        The filled PixelBuffer
    """
    bounds = Bounds(*bounds)
    buffer = PixelBuffer(bounds)
    assert len(buffer) == bounds.width * bounds.height

    started = time.perf_counter()
    bands = plan_bands(bounds, viewport, worker_count(workers))

    errors = []
    threads = [
        threading.Thread(
            target=_render_into,
            args=(buffer.band_view(band), band, int(limit), errors),
            name=f"mandelzoom-band-{i}",
        )
        for i, band in enumerate(bands)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]

    logger.debug(
        "Rendered %dx%d in %d bands (%.1f ms)",
        bounds.width, bounds.height, len(bands),
        (time.perf_counter() - started) * 1000.0,
    )
    return buffer


class BackgroundRenderer:
    """
    Runs render() off the UI thread.

    Usage:
        renderer = BackgroundRenderer((800, 600))
        renderer.compute_async(viewport)

        # In your game loop:
        frame, viewport = renderer.get_result()
        if frame is not None:
            display(frame)

    Only the newest submission is ever published. A render that finishes
    after a newer one has been submitted is discarded. A failed render is
    logged, drops any queued request and is reported once by take_error().
    """

    def __init__(self, bounds, limit=DEFAULT_LIMIT, workers=None):
        self.bounds = Bounds(*bounds)
        self.limit = limit
        self.workers = workers

        self.generation = 0
        self.pending = None  # (generation, viewport) waiting to be rendered
        self.computing = False
        self.result_ready = False
        self.frame = None
        self.frame_viewport = None
        self.error = None
        self.lock = threading.Lock()
        self._idle = threading.Event()
        self._idle.set()

    def compute_async(self, viewport):
        """
        Queue a render of `viewport` and start the worker thread if needed.

        Returns:
            The generation number assigned to this request
        """
        with self.lock:
            self.generation += 1
            self.pending = (self.generation, viewport)
            if not self.computing:
                self.computing = True
                self._idle.clear()
                thread = threading.Thread(target=self._compute_thread, name="mandelzoom-render")
                thread.daemon = True
                thread.start()
            return self.generation

    def _compute_thread(self):
        """Render pending requests until none is left."""
        while True:
            with self.lock:
                job = self.pending
                self.pending = None
                if job is None:
                    self.computing = False
                    self._idle.set()
                    return

            generation, viewport = job
            try:
                frame = render(self.bounds, viewport, self.limit, self.workers)
            except Exception as exc:
                logger.exception("Render of generation %d failed", generation)
                with self.lock:
                    self.error = exc
                    self.pending = None
                    self.computing = False
                    self._idle.set()
                return

            with self.lock:
                if generation == self.generation:
                    self.frame = frame
                    self.frame_viewport = viewport
                    self.result_ready = True
                else:
                    logger.debug("Dropping stale render %d (latest is %d)", generation, self.generation)

    @property
    def busy(self):
        with self.lock:
            return self.computing

    def wait_idle(self, timeout=None):
        """Block until no render is in flight. Returns False on timeout."""
        return self._idle.wait(timeout)

    def get_result(self):
        """
        Get the latest render result if ready.

        Returns:
            Tuple of (PixelBuffer, viewport) once per finished render,
            (None, None) otherwise.
        """
        with self.lock:
            if self.result_ready:
                self.result_ready = False
                return self.frame, self.frame_viewport
        return None, None

    def take_error(self):
        """Return the exception of the last failed render once, else None."""
        with self.lock:
            error, self.error = self.error, None
            return error
