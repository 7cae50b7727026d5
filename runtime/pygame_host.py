"""
fishtank module: runtime/pygame_host.py

Pygame stand-in for a browser page:
- one resizable window, one "viewport" Canvas element
- resize notifications fan out to listeners between frames
- frame callbacks run once per display frame (FrameQueue)
- present() shows the canvas, scaled down to the window when its backing
  buffer is denser than the window
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional, Tuple

import pygame

import config
from render import colors
from render.canvas import Canvas
from runtime.scheduler import FrameCallback, FrameQueue

log = logging.getLogger(__name__)


class PygameHost:
    def __init__(
        self,
        size: Tuple[int, int] = (config.SCREEN_W, config.SCREEN_H),
        fps: int = config.FPS,
        title: str = config.WINDOW_TITLE,
        device_scale: Optional[float] = config.DEVICE_SCALE,
        element_id: str = config.VIEWPORT_ELEMENT_ID,
    ):
        self.size = size
        self.fps = fps
        self.title = title
        self.device_scale_override = device_scale
        self.element_id = element_id

        self.frames = FrameQueue()
        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.running = False
        self._elements: Dict[str, Canvas] = {}
        self._resize_listeners: List[Callable[[], None]] = []

    # ---- lifecycle ----

    def open(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)
        pygame.display.set_caption(self.title)
        self.clock = pygame.time.Clock()
        self._elements[self.element_id] = Canvas()
        self.running = True
        log.info("opened %dx%d window %r", self.size[0], self.size[1], self.title)

    def close(self) -> None:
        self.running = False
        self._elements.clear()
        pygame.quit()

    # ---- page-like surface ----

    def get_element(self, element_id: str) -> Optional[Canvas]:
        return self._elements.get(element_id)

    def inner_size(self) -> Tuple[int, int]:
        if self.screen is None:
            return self.size
        return pygame.display.get_window_size()

    @property
    def device_pixel_ratio(self) -> Optional[float]:
        if self.device_scale_override is not None:
            return self.device_scale_override
        if self.screen is None:
            return None
        win_w, _ = pygame.display.get_window_size()
        surf_w, _ = self.screen.get_size()
        if win_w <= 0:
            return None
        return surf_w / win_w

    def add_resize_listener(self, callback: Callable[[], None]) -> None:
        self._resize_listeners.append(callback)

    def request_frame(self, callback: FrameCallback) -> int:
        return self.frames.request_frame(callback)

    def cancel_frame(self, handle: int) -> None:
        self.frames.cancel_frame(handle)

    # ---- main loop ----

    def _pump_events(self) -> None:
        resized = False
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self.running = False
            elif e.type == pygame.VIDEORESIZE:
                resized = True
        if resized and self.running:
            self.screen = pygame.display.get_surface()
            log.debug("window resized to %s", self.inner_size())
            for callback in list(self._resize_listeners):
                callback()

    def present(self) -> None:
        if self.screen is None:
            return
        self.screen.fill(colors.BG)
        canvas = self.get_element(self.element_id)
        if canvas is not None and canvas.width > 0 and canvas.height > 0:
            target = self.screen.get_size()
            frame = canvas.to_pygame()
            if frame.get_size() != target and target[0] > 0 and target[1] > 0:
                frame = pygame.transform.smoothscale(frame, target)
            # cairo pixels are alpha-premultiplied
            self.screen.blit(frame, (0, 0), special_flags=pygame.BLEND_PREMULTIPLIED)
        pygame.display.flip()

    def run(self, max_frames: Optional[int] = None) -> int:
        """Drive frames until the window closes (or max_frames). Returns frames shown."""
        shown = 0
        while self.running:
            self._pump_events()
            if not self.running:
                break
            self.frames.run_frame(float(pygame.time.get_ticks()))
            self.present()
            shown += 1
            if max_frames is not None and shown >= max_frames:
                break
            self.clock.tick(self.fps)
        return shown

    def save_screenshot(self, path: str) -> None:
        if self.screen is None:
            raise RuntimeError("host is not open")
        pygame.image.save(self.screen, path)
        log.info("saved screenshot to %s", path)
