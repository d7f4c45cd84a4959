"""
Ulam Spiral Mode

Integers 1..side^2 laid out on a square spiral from the center cell.
Primes light up along the diagonals. A reveal front sweeps outward
with time and restarts once the whole square is shown.
"""

from .mode_base import Mode
from .palette import color_for_state, dim
from .transforms import grid_to_canvas


def spiral_coords(count):
    """(col, row) offsets from the center for n = 1..count, in order."""
    coords = []
    x = y = 0
    dx, dy = 1, 0
    run = 1
    while len(coords) < count:
        for _ in range(2):
            for _ in range(run):
                if len(coords) >= count:
                    return coords
                coords.append((x, y))
                x += dx
                y += dy
            dx, dy = -dy, dx
        run += 1
    return coords


class UlamSpiral(Mode):

    mode_id = "ulam"
    mode_label = "Ulam Spiral"
    default_params = {
        "side": 61,
        "reveal_rate": 400.0,   # integers per second
        "show_composites": True,
    }

    def validate(self, params):
        self.require(params, "side", lambda v: int(v) == v and v > 0 and v % 2 == 1, "a positive odd integer")
        self.require(params, "reveal_rate", lambda v: v > 0, "> 0")

    def init(self, state):
        self.validate(self.params)
        side = int(self.params["side"])
        self.require_oracle(side * side, f"side={side}")
        self.count = side * side
        self.coords = spiral_coords(self.count)
        self.revealed = 0.0
        self.generation = 0
        self.initialized = True

    def update(self, dt, state):
        self.revealed += self.params["reveal_rate"] * dt * state.params.speed
        if self.revealed > self.count:
            self.revealed %= self.count
            self.generation += 1

    def draw(self, state, renderer):
        side = int(self.params["side"])
        cell = min(state.viewport_width, state.viewport_height) / side * state.params.zoom
        cx, cy = state.center
        origin = (cx - cell / 2.0, cy - cell / 2.0)
        emphasis = state.params.prime_emphasis
        shown = int(self.revealed)
        for n in range(1, shown + 1):
            i, j = self.coords[n - 1]
            x, y = grid_to_canvas(i, j, cell, origin)
            if self.oracle.is_prime(n):
                renderer.fill_rect(x, y, cell, cell, color_for_state(n, True, emphasis))
            elif self.params["show_composites"]:
                renderer.fill_rect(x, y, cell, cell, dim(color_for_state(n, False, emphasis), 0.15))
