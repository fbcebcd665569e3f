"""
Main application module for the interactive Mandelbrot viewer.

Contains the MandelzoomApp class which handles:
- Window setup and main loop
- User input (rubber-band zoom, keyboard)
- Hand-off between the zoom controller and the background renderer
- Display of the grayscale frame and the selection rectangle
"""

import logging

import numpy as np
import pygame

from .compute import DEFAULT_LIMIT, warmup_jit
from .controller import ViewportZoomController
from .geometry import Bounds, Viewport
from .logging_config import setup_logging
from .output import snapshot_filename, write_image
from .renderer import BackgroundRenderer, render

logger = logging.getLogger(__name__)


class MandelzoomApp:
    """
    Main application class for the Mandelbrot viewer.

    Handles the pygame window and event loop. Gestures go to the
    ViewportZoomController; every viewport it produces is rendered on a
    BackgroundRenderer and swapped onto the screen when complete.
    """

    # Default configuration
    DEFAULT_WIDTH = 1500
    DEFAULT_HEIGHT = 1125
    DEFAULT_LIMIT = DEFAULT_LIMIT
    DEFAULT_VIEWPORT = Viewport(complex(-1.20, 0.35), complex(-1.0, 0.20))

    SELECTION_COLOR = (0, 255, 0)
    SELECTION_BORDER = 2  # Pixels

    CAPTION = "Mandelbrot Set - Drag to zoom, R to reset, S to save, ESC to quit"

    def __init__(self, width=None, height=None, limit=None, viewport=None):
        """
        Initialize the application.

        Args:
            width: Window width in pixels (default 1500)
            height: Window height in pixels (default 1125)
            limit: Iteration limit per pixel (default 255)
            viewport: Initial view, also the target of a reset
        """
        self.bounds = Bounds(width or self.DEFAULT_WIDTH, height or self.DEFAULT_HEIGHT)
        self.limit = limit or self.DEFAULT_LIMIT
        self.initial_viewport = viewport or self.DEFAULT_VIEWPORT

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Components
        self.renderer = None
        self.controller = None

        # Display state
        self.frame = None
        self.surface = None

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)

            self.controller.process()
            self._check_render_result()
            self._draw()

            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(self.bounds, pygame.DOUBLEBUF)
        self.clock = pygame.time.Clock()

    def _init_components(self):
        """Create the renderer and the zoom controller."""
        self.renderer = BackgroundRenderer(self.bounds, self.limit)
        self.controller = ViewportZoomController(
            self.bounds,
            self.initial_viewport,
            on_viewport=self._request_render,
            limit=self.limit,
        )

    def _warmup_and_initial_render(self):
        """Warm up JIT and do initial render."""
        self._set_caption("Compiling (first run only)...")
        warmup_jit()

        self._show_frame(render(self.bounds, self.initial_viewport, self.limit))
        self._set_caption(self.CAPTION)

    def _set_caption(self, caption):
        if self.screen is not None:
            pygame.display.set_caption(caption)

    def handle_event(self, event):
        """Route one pygame event to the controller or the app."""
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.controller.pointer_down(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self.controller.pointer_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.controller.pointer_up()
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event)

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_r:
            self.controller.reset()
        elif event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_s:
            self._save_frame()

    def _request_render(self, viewport):
        self.renderer.compute_async(viewport)
        self._set_caption("Computing...")

    def _save_frame(self):
        """Save the displayed frame as a grayscale PNG in the working directory."""
        if self.frame is None:
            return
        filename = snapshot_filename()
        try:
            write_image(filename, self.frame)
        except (OSError, ValueError) as exc:
            logger.error("Could not save %s: %s", filename, exc)
            return
        logger.info("Frame saved to: %s", filename)
        self._set_caption(f"Saved: {filename}")

    def _check_render_result(self):
        """Swap in the background render once it has completed."""
        error = self.renderer.take_error()
        if error is not None:
            self._set_caption(f"Render failed: {error}")

        frame, viewport = self.renderer.get_result()
        if frame is not None:
            self._show_frame(frame)
            self.controller.frame_displayed(viewport)
            self._set_caption(self.CAPTION)

    def _show_frame(self, frame):
        # Grayscale to RGB; surfarray expects (width, height, 3)
        rgb = np.repeat(frame.image[:, :, np.newaxis], 3, axis=2)
        self.surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        self.frame = frame

    def _draw(self):
        """Draw the current frame and the selection rectangle."""
        self.screen.fill((0, 0, 0))
        if self.surface is not None:
            self.screen.blit(self.surface, (0, 0))

        rectangle = self.controller.selection_rectangle
        if rectangle is not None:
            left, top, right, bottom = rectangle
            rect = pygame.Rect(left, top, right - left, bottom - top)
            pygame.draw.rect(self.screen, self.SELECTION_COLOR, rect, self.SELECTION_BORDER)

        pygame.display.flip()


def run(width=None, height=None, limit=None):
    """
    Run the Mandelbrot viewer.

    Args:
        width: Window width (default 1500)
        height: Window height (default 1125)
        limit: Iteration limit (default 255)
    """
    setup_logging(logging.INFO)
    app = MandelzoomApp(width, height, limit)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
