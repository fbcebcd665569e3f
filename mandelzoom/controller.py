"""
Rubber-band zoom state machine for the interactive viewer.

Pointer gestures move the controller through explicit states, each one
carrying only the data valid in that phase:

    Idle --down--> Selecting --move--> Selecting --up--> ZoomPending
    ZoomPending --process--> Idle   (new viewport, re-render)
    any --reset--> Resetting --process--> Idle   (initial viewport)

The selection rectangle is locked to the image's aspect ratio, so a zoom
never distorts the picture.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .compute import DEFAULT_LIMIT
from .geometry import Bounds, Viewport, pixel_to_point
from .renderer import render

logger = logging.getLogger(__name__)

Pixel = Tuple[float, float]


@dataclass(frozen=True)
class ZoomRequest:
    """A finished drag, from the press position to the aspect-locked end."""

    start: Pixel
    end: Pixel

    def rectangle(self):
        """Normalized (left, top, right, bottom) in whole pixels."""
        (x0, y0), (x1, y1) = self.start, self.end
        return (
            round(min(x0, x1)), round(min(y0, y1)),
            round(max(x0, x1)), round(max(y0, y1)),
        )

    def is_degenerate(self):
        left, top, right, bottom = self.rectangle()
        return right <= left or bottom <= top


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selecting:
    start: Pixel
    end: Optional[Pixel] = None


@dataclass(frozen=True)
class ZoomPending:
    request: ZoomRequest


@dataclass(frozen=True)
class Resetting:
    pass


def constrain_to_aspect(start, pointer, ratio):
    """
    Move `pointer` so the rectangle from `start` has width / height == ratio.

    The longer drag axis wins; the other one is derived from it.
    """
    x0, y0 = start
    x1, y1 = pointer
    if abs(x1 - x0) > abs(y1 - y0):
        return x1, y0 + (x1 - x0) / ratio
    return x0 + ratio * (y1 - y0), y1


def zoom_viewport(bounds, viewport, request):
    """Viewport covered by the request rectangle, relative to `viewport`."""
    left, top, right, bottom = request.rectangle()
    upper_left = pixel_to_point(bounds, (left, top), viewport)
    lower_right = pixel_to_point(bounds, (right, bottom), viewport)
    return Viewport(upper_left, lower_right)


class ViewportZoomController:
    """
    Turns pointer gestures into new viewports and re-renders.

    Event handlers only record state; process() does the work, so the app
    calls it once per frame. By default each new viewport is rendered
    synchronously into `frame`. Pass `on_viewport` to hand the viewport to
    someone else instead (e.g. BackgroundRenderer.compute_async); that
    caller then reports each frame it puts on screen through
    frame_displayed().

    `viewport` is the newest requested view, `displayed_viewport` the one
    on screen. Zoom rectangles are drawn on the screen, so they are mapped
    against `displayed_viewport`.
    """

    def __init__(self, bounds, viewport, on_viewport=None, limit=DEFAULT_LIMIT, workers=None):
        self.bounds = Bounds(*bounds)
        self.initial_viewport = viewport
        self.viewport = viewport
        self.displayed_viewport = viewport
        self.limit = limit
        self.workers = workers
        self.state = Idle()
        self.frame = None
        self._on_viewport = on_viewport or self._render_now

    @property
    def selection(self):
        """(start, end) of the rectangle being dragged, or None."""
        if isinstance(self.state, Selecting) and self.state.end is not None:
            return self.state.start, self.state.end
        return None

    @property
    def selection_rectangle(self):
        """(left, top, right, bottom) the current drag would zoom into, or None."""
        selection = self.selection
        if selection is None:
            return None
        return ZoomRequest(*selection).rectangle()

    def pointer_down(self, pixel):
        if isinstance(self.state, Idle):
            self.state = Selecting(start=tuple(pixel))

    def pointer_move(self, pixel):
        if isinstance(self.state, Selecting):
            end = constrain_to_aspect(self.state.start, pixel, self.bounds.aspect)
            self.state = Selecting(start=self.state.start, end=end)

    def pointer_up(self):
        if not isinstance(self.state, Selecting):
            return
        if self.state.end is None:
            # Click without a drag
            self.state = Idle()
            return
        self.state = ZoomPending(ZoomRequest(self.state.start, self.state.end))

    def reset(self):
        self.state = Resetting()

    def process(self):
        """
        Apply a pending zoom or reset.

        Returns:
            The new viewport if one was produced, else None
        """
        state = self.state
        if isinstance(state, ZoomPending):
            self.state = Idle()
            if state.request.is_degenerate():
                logger.info("Ignoring zero-area zoom rectangle %s", state.request.rectangle())
                return None
            viewport = zoom_viewport(self.bounds, self.displayed_viewport, state.request)
            logger.info("Zooming to %s .. %s", viewport.upper_left, viewport.lower_right)
        elif isinstance(state, Resetting):
            self.state = Idle()
            viewport = self.initial_viewport
            logger.info("Resetting view")
        else:
            return None

        self.viewport = viewport
        self._on_viewport(viewport)
        return viewport

    def _render_now(self, viewport):
        # Single reference assignment, readers never see a partial frame
        self.frame = render(self.bounds, viewport, self.limit, self.workers)
        self.displayed_viewport = viewport

    def frame_displayed(self, viewport):
        """Record that the frame for `viewport` is now on screen."""
        self.displayed_viewport = viewport
