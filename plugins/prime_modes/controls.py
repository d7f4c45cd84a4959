"""
UI Controls for the Prime Modes Viewer

Dark-themed widgets drawn directly with pygame: sliders for the global
and per-mode params, a toggle for audio reactivity and a numbered grid
of the eight modes. Accent colors come from the base-60 palette.
"""

import pygame

from .palette import color_for_state


THEME = {
    "bg": (6, 6, 10),
    "panel": (22, 22, 30),
    "track": (50, 50, 65),
    "track_fill": color_for_state(6, True, 0.6),
    "handle": (200, 205, 220),
    "handle_active": (255, 255, 255),
    "text": (180, 185, 195),
    "text_bright": (230, 235, 245),
    "text_dim": (100, 105, 115),
    "button": (40, 42, 55),
    "button_active": color_for_state(6, False, 0.0),
    "divider": (40, 40, 55),
    "error": (240, 90, 80),
}


class Slider:
    """Horizontal slider with label and value readout."""

    height = 36

    def __init__(self, x, y, width, label, min_val, max_val, value,
                 fmt=".2f", step=None, on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.label = label
        self.min_val = min_val
        self.max_val = max_val
        self.value = value
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.dragging = False
        self.track_x = x + 8
        self.track_w = width - 16
        self.track_y = y + 22

    def _val_to_x(self, val):
        frac = (val - self.min_val) / (self.max_val - self.min_val)
        return self.track_x + frac * self.track_w

    def _x_to_val(self, px):
        frac = max(0.0, min(1.0, (px - self.track_x) / self.track_w))
        val = self.min_val + frac * (self.max_val - self.min_val)
        if self.step:
            val = round(val / self.step) * self.step
        return val

    def _drag_to(self, mx):
        self.value = self._x_to_val(mx)
        if self.on_change:
            self.on_change(self.value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            if (self.track_x - 4 <= mx <= self.track_x + self.track_w + 4 and
                    abs(my - self.track_y) <= 12):
                self.dragging = True
                self._drag_to(mx)
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self._drag_to(event.pos[0])
            return True
        return False

    def set_value(self, val):
        self.value = max(self.min_val, min(self.max_val, val))

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]), (self.x + 8, self.y + 2))
        val_surf = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        surface.blit(val_surf, (self.x + self.width - val_surf.get_width() - 8, self.y + 2))

        pygame.draw.rect(surface, THEME["track"],
                         pygame.Rect(self.track_x, self.track_y - 2, self.track_w, 4),
                         border_radius=2)
        hx = self._val_to_x(self.value)
        pygame.draw.rect(surface, THEME["track_fill"],
                         pygame.Rect(self.track_x, self.track_y - 2, hx - self.track_x, 4),
                         border_radius=2)
        color = THEME["handle_active"] if self.dragging else THEME["handle"]
        pygame.draw.circle(surface, color, (int(hx), self.track_y), 7)


class Toggle:
    """Checkbox with label."""

    height = 26

    def __init__(self, x, y, label, value=False, on_change=None):
        self.rect = pygame.Rect(x + 8, y + 4, 16, 16)
        self.x = x
        self.y = y
        self.label = label
        self.value = value
        self.on_change = on_change

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.value = not self.value
                if self.on_change:
                    self.on_change(self.value)
                return True
        return False

    def draw(self, surface, font):
        pygame.draw.rect(surface, THEME["track"], self.rect, border_radius=3)
        if self.value:
            pygame.draw.rect(surface, THEME["track_fill"], self.rect.inflate(-6, -6),
                             border_radius=2)
        surface.blit(font.render(self.label, True, THEME["text"]),
                     (self.rect.right + 8, self.y + 5))


class ModeGrid:
    """Two-column grid of mode buttons labelled with their number keys.

    A halted mode keeps its slot but is outlined in the error color.
    """

    columns = 2
    btn_height = 24
    gap = 4

    def __init__(self, x, y, width, labels, selected=0, on_select=None):
        self.labels = [f"{n} {label}" for n, label in enumerate(labels, start=1)]
        self.selected = selected
        self.halted = None
        self.on_select = on_select
        bw = (width - self.gap * (self.columns - 1)) // self.columns
        self.rects = [
            pygame.Rect(x + (k % self.columns) * (bw + self.gap),
                        y + (k // self.columns) * (self.btn_height + self.gap),
                        bw, self.btn_height)
            for k in range(len(labels))
        ]
        rows = -(-len(labels) // self.columns)
        self.total_height = rows * (self.btn_height + self.gap) - self.gap

    def handle_event(self, event):
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        for k, rect in enumerate(self.rects):
            if rect.collidepoint(event.pos):
                self.selected = k
                if self.on_select:
                    self.on_select(k)
                return True
        return False

    def draw(self, surface, font):
        for k, (rect, label) in enumerate(zip(self.rects, self.labels)):
            active = k == self.selected
            pygame.draw.rect(surface, THEME["button_active"] if active else THEME["button"],
                             rect, border_radius=4)
            if k == self.halted:
                pygame.draw.rect(surface, THEME["error"], rect, width=2, border_radius=4)
            text = font.render(label, True, THEME["text_bright"] if active else THEME["text"])
            surface.blit(text, (rect.x + 6, rect.y + (rect.height - text.get_height()) // 2))


class SectionHeader:

    height = 24

    def __init__(self, x, y, width, title):
        self.x = x
        self.y = y
        self.width = width
        self.title = title

    def draw(self, surface, font):
        pygame.draw.line(surface, THEME["divider"],
                         (self.x + 8, self.y + 8), (self.x + self.width - 8, self.y + 8))
        surface.blit(font.render(self.title, True, THEME["text_dim"]), (self.x + 8, self.y + 12))


class ControlPanel:
    """Side panel: stacks widgets vertically and routes mouse events."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.surface = pygame.Surface((width, height))
        self._cursor_y = 8

    def _add(self, widget, height):
        self.widgets.append(widget)
        self._cursor_y += height
        return widget

    def add_section(self, title):
        return self._add(SectionHeader(0, self._cursor_y, self.width, title),
                         SectionHeader.height + 4)

    def add_slider(self, label, min_val, max_val, value, fmt=".2f", step=None, on_change=None):
        return self._add(Slider(0, self._cursor_y, self.width, label, min_val, max_val,
                                value, fmt, step, on_change), Slider.height + 6)

    def add_toggle(self, label, value=False, on_change=None):
        return self._add(Toggle(0, self._cursor_y, label, value, on_change), Toggle.height + 4)

    def add_mode_grid(self, labels, selected=0, on_select=None):
        grid = ModeGrid(8, self._cursor_y, self.width - 16, labels, selected, on_select)
        return self._add(grid, grid.total_height + 8)

    def handle_event(self, event):
        """Process events in panel-local coordinates."""
        if hasattr(event, "pos"):
            local = (event.pos[0] - self.x, event.pos[1] - self.y)
            if not (0 <= local[0] <= self.width and 0 <= local[1] <= self.height):
                if event.type == pygame.MOUSEBUTTONUP:
                    for widget in self.widgets:
                        if isinstance(widget, Slider):
                            widget.dragging = False
                return False
            event = pygame.event.Event(event.type, {**event.__dict__, "pos": local})
        for widget in self.widgets:
            if hasattr(widget, "handle_event") and widget.handle_event(event):
                return True
        return False

    def draw(self, target_surface, font):
        self.surface.fill(THEME["panel"])
        pygame.draw.line(self.surface, THEME["divider"], (0, 0), (0, self.height))
        for widget in self.widgets:
            widget.draw(self.surface, font)
        target_surface.blit(self.surface, (self.x, self.y))
