"""
Interactive Pygame Viewer for the Prime Modes

Hosts the engine in a pygame window with a side panel for the global
params (speed, zoom, prime emphasis, line thickness, mode blend, audio)
and the active mode's own sliders.

Controls:
  1-8         Switch mode
  SPACE       Pause / Resume
  R           Re-initialise current mode
  A           Toggle audio reactivity
  TAB         Toggle control panel
  H           Toggle HUD / debug overlay
  S           Save screenshot
  Q / ESC     Quit
"""

import math
import os
import time
import numpy as np
import pygame

from .engine import Engine, MODE_CLASSES
from .errors import ConfigurationError
from .presets import MODE_ORDER, PRESETS
from .primes import PrimeOracle
from .renderer import Renderer
from .smoothing import SmoothedParameter, SmoothedParams
from .state import GlobalState
from .controls import ControlPanel, THEME


PANEL_WIDTH = 300
MAX_DT = 0.1  # cap dt to avoid jumps after a stall
MIN_CANVAS = 64

GLOBAL_SLIDERS = [
    {"key": "speed", "label": "Speed", "min": 0.05, "max": 4.0, "fmt": ".2f"},
    {"key": "zoom", "label": "Zoom", "min": 0.25, "max": 3.0, "fmt": ".2f"},
    {"key": "prime_emphasis", "label": "Prime emphasis", "min": 0.01, "max": 1.0, "fmt": ".2f"},
    {"key": "line_thickness", "label": "Line thickness", "min": 0.5, "max": 6.0, "fmt": ".1f"},
    {"key": "mode_blend", "label": "Mode blend", "min": 0.0, "max": 0.95, "fmt": ".2f"},
]


class PygameRenderer(Renderer):
    """Draws primitives onto a persistent canvas surface.

    begin_frame fades the previous frame by mode_blend instead of
    clearing it outright.
    """

    def __init__(self, width, height, font=None):
        self.surface = pygame.Surface((width, height))
        self.surface.fill(THEME["bg"])
        self._fade = pygame.Surface((width, height))
        self._fade.fill(THEME["bg"])
        self.font = font

    def begin_frame(self, state):
        size = (state.viewport_width, state.viewport_height)
        if self.surface.get_size() != size:
            self.surface = pygame.Surface(size)
            self._fade = pygame.Surface(size)
            self._fade.fill(THEME["bg"])
        self._fade.set_alpha(int(round((1.0 - state.params.mode_blend) * 255)))
        self.surface.blit(self._fade, (0, 0))

    def fill_rect(self, x, y, w, h, color):
        self.surface.fill(color, pygame.Rect(int(x), int(y), max(1, math.ceil(w)), max(1, math.ceil(h))))

    def line(self, x0, y0, x1, y1, color, width=1.0):
        pygame.draw.line(self.surface, color, (x0, y0), (x1, y1), max(1, int(round(width))))

    def point(self, x, y, radius, color):
        pygame.draw.circle(self.surface, color, (int(x), int(y)), max(1, int(round(radius))))

    def text(self, x, y, string, color):
        if self.font is not None:
            self.surface.blit(self.font.render(string, True, color), (x, y))

    def end_frame(self):
        return self.surface


class AudioPulse:
    """Stand-in for the audio collaborator: a smoothed synthetic beat."""

    def __init__(self, bpm=96.0):
        self.bpm = bpm
        self.level = SmoothedParameter(0.0, time_constant=0.08)

    def update(self, t, dt):
        beat = (t * self.bpm / 60.0) % 1.0
        self.level.set_target(max(0.0, 1.0 - beat * 4.0))
        return self.level.update(dt)


class Viewer:
    def __init__(self, width=900, height=900, start_mode="automaton", max_n=10000):
        self.canvas_w = width
        self.canvas_h = height
        self.panel_visible = True
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []

        self.state = GlobalState(width, height)
        self.oracle = PrimeOracle(max_n)
        self.engine = Engine(self.state, self.oracle)
        self.engine.start(MODE_ORDER.index(start_mode))

        self.smoothed = SmoothedParams(self.state.params, [s["key"] for s in GLOBAL_SLIDERS])
        self.audio = AudioPulse()

        # Built after pygame.init in run()
        self.panel = None
        self.sliders = {}
        self.mode_buttons = None
        self.renderer = None

    @property
    def total_w(self):
        return self.canvas_w + (PANEL_WIDTH if self.panel_visible else 0)

    def resize(self, window_w, window_h):
        """Fit the canvas to a new window size, keeping room for the panel."""
        panel = PANEL_WIDTH if self.panel_visible else 0
        self.canvas_w = max(MIN_CANVAS, window_w - panel)
        self.canvas_h = max(MIN_CANVAS, window_h)
        self.state.resize(self.canvas_w, self.canvas_h)
        if self.panel is not None:
            self._build_panel()

    def _build_panel(self):
        panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)
        self.sliders = {}

        panel.add_section("MODES")
        names = [PRESETS[k]["name"] for k in MODE_ORDER]
        self.mode_buttons = panel.add_mode_grid(
            names, selected=self.engine.current_index, on_select=self._on_mode_select)

        panel.add_section("GLOBAL")
        for sdef in GLOBAL_SLIDERS:
            key = sdef["key"]
            self.sliders[key] = panel.add_slider(
                sdef["label"], sdef["min"], sdef["max"], getattr(self.state.params, key),
                fmt=sdef["fmt"], on_change=self._make_global_callback(key))
        panel.add_toggle("Audio reactive", self.state.params.audio_reactive,
                         on_change=self._on_audio_toggle)

        mode = self.engine.active_mode
        slider_defs = type(mode).get_slider_defs()
        if slider_defs:
            panel.add_section(slider_defs[0]["section"])
            params = mode.get_params()
            for sdef in slider_defs:
                key = sdef["key"]
                self.sliders[key] = panel.add_slider(
                    sdef["label"], sdef["min"], sdef["max"], params.get(key, sdef["default"]),
                    fmt=sdef["fmt"], step=sdef.get("step"),
                    on_change=self._make_mode_callback(key))
        self.panel = panel

    def _make_global_callback(self, key):
        def callback(val):
            self.smoothed.set_target(key, val)
        return callback

    def _make_mode_callback(self, key):
        """Mode params apply on re-init, so a drag restarts the mode."""
        def callback(val):
            mode = self.engine.active_mode
            if isinstance(mode.default_params.get(key), int):
                val = int(round(val))
            try:
                mode.set_params(**{key: val})
            except ConfigurationError as exc:
                print(f"[PM] Rejected: {exc}")
                return
            self.engine.reset_mode()
        return callback

    def _on_mode_select(self, idx):
        self._switch(idx)

    def _on_audio_toggle(self, value):
        self.state.params.set(audio_reactive=value)

    def _switch(self, idx):
        self.engine.switch_mode(idx)
        print(f"[PM] Mode {idx + 1}: {self.engine.active_mode.mode_label}")
        if self.panel is not None:
            self._build_panel()

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return
        stats = self.engine.stats
        mode = self.engine.active_mode
        line = (f"{self.engine.current_index + 1}. {mode.mode_label}  |  "
                f"Frame: {stats['frame']:,}  |  t: {stats['t']:.1f}s  |  FPS: {fps:.0f}")
        if self.state.params.audio_reactive:
            line += f"  |  Audio: {self.state.audio_level:.2f}"
        if self.paused:
            line = "[PAUSED]  " + line

        bg = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg.fill((0, 0, 0, 140))
        screen.blit(bg, (0, 0))
        screen.blit(self.hud_font.render(line, True, (210, 215, 225)), (10, 6))

        if self.engine.halted and self.engine.last_error:
            mode_id, phase, exc = self.engine.last_error
            msg = f"{mode_id} halted in {phase}: {exc}"
            screen.blit(self.hud_font.render(msg, True, THEME["error"]), (10, 30))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"pm_{self.engine.active_mode.mode_id}_{timestamp}.png")
        pygame.image.save(self.renderer.surface, path)
        print(f"[PM] Screenshot saved: {path}")

    def run(self):
        """Main viewer loop."""
        pygame.init()
        screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
        pygame.display.set_caption("Prime Modes")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("menlo", 12)
        self.renderer = PygameRenderer(self.canvas_w, self.canvas_h, self.hud_font)
        self._build_panel()

        last_time = time.time()
        while self.running:
            now = time.time()
            dt = min(now - last_time, MAX_DT)
            last_time = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    screen = self._handle_keydown(event, screen)
                elif event.type == pygame.VIDEORESIZE:
                    self.resize(event.w, event.h)
                elif self.panel_visible and self.panel:
                    self.panel.handle_event(event)

            if not self.paused:
                self.smoothed.update(dt)
                self.state.set_audio_level(self.audio.update(self.state.t, dt))
                self.engine.tick(dt, self.renderer)
                if self.mode_buttons is not None:
                    self.mode_buttons.halted = (
                        self.engine.current_index if self.engine.halted else None)

            screen.fill(THEME["bg"])
            screen.blit(self.renderer.surface, (0, 0))

            self.fps_history.append(max(dt, 1e-3))
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            self._draw_hud(screen, 1.0 / float(np.mean(self.fps_history)))

            if self.panel_visible and self.panel:
                self.panel.draw(screen, self.panel_font)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_r:
            self.engine.reset_mode()
        elif key == pygame.K_a:
            self._on_audio_toggle(not self.state.params.audio_reactive)
            self._build_panel()
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud
        elif key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
            screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
        elif key == pygame.K_s:
            self._save_screenshot()
        elif pygame.K_1 <= key <= pygame.K_8:
            idx = key - pygame.K_1
            if idx < len(MODE_CLASSES):
                self._switch(idx)
        else:
            self.engine.handle_input(pygame.key.name(key))
        return screen
