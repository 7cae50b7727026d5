"""Shared fixtures: headless SDL, a recording drawing context, a fake host page."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from render.canvas import Canvas
from runtime.scheduler import ManualScheduler


class RecordingContext:
    """Stands in for CanvasContext; records every call in order."""

    def __init__(self):
        self.calls = []
        self.depth = 0
        self._styles = {"fill_style": None, "stroke_style": None, "line_width": 1.0}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args):
            self.calls.append((name, args))
            if name == "save":
                self.depth += 1
            elif name == "restore":
                self.depth -= 1

        return record

    def _set_style(self, name, value):
        self._styles[name] = value
        self.calls.append((name, (value,)))

    fill_style = property(lambda self: self._styles["fill_style"],
                          lambda self, v: self._set_style("fill_style", v))
    stroke_style = property(lambda self: self._styles["stroke_style"],
                            lambda self, v: self._set_style("stroke_style", v))
    line_width = property(lambda self: self._styles["line_width"],
                          lambda self, v: self._set_style("line_width", v))

    def names(self):
        return [c[0] for c in self.calls]

    def first(self, name):
        return next(args for n, args in self.calls if n == name)


class FakeHost:
    """Page-like host with a fixed window size and a manual frame clock."""

    def __init__(self, size=(800, 600), ratio=None, element_id="viewport", with_canvas=True):
        self.size = size
        self.device_pixel_ratio = ratio
        self.elements = {element_id: Canvas()} if with_canvas else {}
        self.listeners = []
        self.scheduler = ManualScheduler()

    def get_element(self, element_id):
        return self.elements.get(element_id)

    def inner_size(self):
        return self.size

    def add_resize_listener(self, callback):
        self.listeners.append(callback)

    def fire_resize(self, size=None, ratio=None):
        if size is not None:
            self.size = size
        if ratio is not None:
            self.device_pixel_ratio = ratio
        for cb in list(self.listeners):
            cb()

    def request_frame(self, callback):
        return self.scheduler.request_frame(callback)

    def cancel_frame(self, handle):
        self.scheduler.cancel_frame(handle)


@pytest.fixture
def recording_ctx():
    return RecordingContext()


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def hidpi_host():
    return FakeHost(size=(800, 600), ratio=2)
