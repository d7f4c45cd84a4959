"""
Renderer Collaborators

Modes never touch pixels. They emit primitives in canvas coordinates:

    fill_rect(x, y, w, h, color)
    line(x0, y0, x1, y1, color, width)
    point(x, y, radius, color)
    text(x, y, string, color)

bracketed by begin_frame(state) / end_frame(). Two implementations live
here:

- CommandRecorder: keeps the command list per frame (tests, debugging)
- RasterRenderer: numpy RGB canvas for headless snapshots, with the
  same downsample-blur-upsample bloom as the live viewer

mode_blend is applied at begin_frame: the previous frame's output is
kept at mode_blend strength instead of being cleared, which gives the
trail/blend between consecutive frames and across mode switches.
"""

from abc import ABC, abstractmethod
from collections import namedtuple

import numpy as np
from scipy.ndimage import gaussian_filter
from PIL import Image


BACKGROUND = (6, 6, 10)

DrawCommand = namedtuple("DrawCommand", ["kind", "args"])


class Renderer(ABC):

    @abstractmethod
    def begin_frame(self, state):
        """Start a frame (clears or blends the previous output)."""

    @abstractmethod
    def fill_rect(self, x, y, w, h, color):
        pass

    @abstractmethod
    def line(self, x0, y0, x1, y1, color, width=1.0):
        pass

    @abstractmethod
    def point(self, x, y, radius, color):
        pass

    @abstractmethod
    def text(self, x, y, string, color):
        pass

    @abstractmethod
    def end_frame(self):
        """Finish the frame."""


class CommandRecorder(Renderer):
    """Records the ordered primitive list for each frame."""

    def __init__(self):
        self.commands = []
        self.previous = []
        self.blend = 0.0
        self.frames = 0

    def begin_frame(self, state):
        self.previous = self.commands
        self.commands = []
        self.blend = state.params.mode_blend

    def fill_rect(self, x, y, w, h, color):
        self.commands.append(DrawCommand("rect", (x, y, w, h, tuple(color))))

    def line(self, x0, y0, x1, y1, color, width=1.0):
        self.commands.append(DrawCommand("line", (x0, y0, x1, y1, tuple(color), width)))

    def point(self, x, y, radius, color):
        self.commands.append(DrawCommand("point", (x, y, radius, tuple(color))))

    def text(self, x, y, string, color):
        self.commands.append(DrawCommand("text", (x, y, string, tuple(color))))

    def end_frame(self):
        self.frames += 1

    def of_kind(self, kind):
        return [c for c in self.commands if c.kind == kind]


class RasterRenderer(Renderer):
    """Headless float32 RGB canvas."""

    def __init__(self, width, height, bloom=0.0, bloom_sigma=12):
        self.width = int(width)
        self.height = int(height)
        self.bloom = bloom
        self.bloom_sigma = bloom_sigma
        self.canvas = np.zeros((self.height, self.width, 3), dtype=np.float32)
        self.canvas[:] = BACKGROUND
        self.labels = []
        self.image = self.canvas.astype(np.uint8)

    def begin_frame(self, state):
        if (state.viewport_width, state.viewport_height) != (self.width, self.height):
            self.width, self.height = state.viewport_width, state.viewport_height
            self.canvas = np.zeros((self.height, self.width, 3), dtype=np.float32)
        blend = state.params.mode_blend
        bg = np.asarray(BACKGROUND, dtype=np.float32)
        # Keep blend * previous output, fill the rest with background
        self.canvas *= blend
        self.canvas += bg * (1.0 - blend)
        self.labels = []

    def fill_rect(self, x, y, w, h, color):
        x0 = max(0, int(round(x)))
        y0 = max(0, int(round(y)))
        x1 = min(self.width, int(round(x + w)))
        y1 = min(self.height, int(round(y + h)))
        if x1 > x0 and y1 > y0:
            self.canvas[y0:y1, x0:x1] = color

    def point(self, x, y, radius, color):
        r = max(0.5, float(radius))
        x0, x1 = max(0, int(x - r)), min(self.width, int(x + r) + 1)
        y0, y1 = max(0, int(y - r)), min(self.height, int(y + r) + 1)
        if x1 <= x0 or y1 <= y0:
            return
        Y, X = np.ogrid[y0:y1, x0:x1]
        mask = (X - x) ** 2 + (Y - y) ** 2 <= r * r
        self.canvas[y0:y1, x0:x1][mask] = color

    def line(self, x0, y0, x1, y1, color, width=1.0):
        steps = int(max(abs(x1 - x0), abs(y1 - y0), 1))
        ts = np.linspace(0.0, 1.0, steps + 1)
        xs = x0 + (x1 - x0) * ts
        ys = y0 + (y1 - y0) * ts
        if width <= 1.5:
            xi = np.round(xs).astype(np.intp)
            yi = np.round(ys).astype(np.intp)
            keep = (xi >= 0) & (xi < self.width) & (yi >= 0) & (yi < self.height)
            self.canvas[yi[keep], xi[keep]] = color
        else:
            for px, py in zip(xs, ys):
                self.point(px, py, width / 2.0, color)

    def text(self, x, y, string, color):
        # No font rasterisation headless; overlay text is kept for inspection
        self.labels.append((x, y, string))

    def end_frame(self):
        rgb = self.canvas
        if self.bloom > 0:
            rgb = self._apply_bloom(rgb)
        self.image = np.clip(rgb, 0, 255).astype(np.uint8)
        return self.image

    def _apply_bloom(self, rgb):
        """Colored glow via 4x downsample-blur-upsample additive blend."""
        h, w = rgb.shape[:2]
        factor = 4
        small = rgb[::factor, ::factor, :]
        sigma = max(1.0, self.bloom_sigma / factor)
        glow = gaussian_filter(small, [sigma, sigma, 0])
        glow = np.repeat(np.repeat(glow, factor, axis=0), factor, axis=1)[:h, :w, :]
        return rgb + glow * self.bloom

    def save(self, path):
        Image.fromarray(self.image).save(path)
        return path
