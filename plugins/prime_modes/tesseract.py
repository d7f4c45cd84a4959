"""
Tesseract Mode - rotating 4D hypercube

The 16 vertices of {-1, 1}^4 are enumerated once, in
itertools.product order, so a vertex index means the same corner on
every frame. 32 edges join vertices that differ in exactly one
coordinate.

Three angles (XW, YW, ZW planes) accumulate with dt, the global speed
and the audio level, and wrap modulo 2*pi. Projection goes through
transforms.project_4d (XW, then YW, then ZW, then 4D->3D->2D).

Prime-indexed vertices, and edges whose index sum or XOR is prime, are
drawn with the global prime emphasis.
"""

import itertools
import math

from .mode_base import Mode
from .palette import color_for_state
from .transforms import project_4d


TWO_PI = 2.0 * math.pi
MIN_DEPTH = 2.0 * math.sqrt(2.0)

VERTICES = tuple(itertools.product((-1, 1), repeat=4))
EDGES = tuple(
    (i, j)
    for i, j in itertools.combinations(range(len(VERTICES)), 2)
    if sum(a != b for a, b in zip(VERTICES[i], VERTICES[j])) == 1
)
# Largest value the draw pass asks the oracle about
MAX_INDEX_SUM = max(i + j for i, j in EDGES)


class Tesseract(Mode):

    mode_id = "tesseract"
    mode_label = "Tesseract"
    default_params = {
        "rotation_speed_xw": 0.7,
        "rotation_speed_yw": 0.45,
        "rotation_speed_zw": 0.3,
        "depth": 4.0,
        "scale": 0.22,          # fraction of the shorter viewport side
        "vertex_radius": 4.0,
    }

    def __init__(self, oracle, **params):
        super().__init__(oracle, **params)
        self.vertices = ()
        self.edges = ()
        self.rot_xw = 0.0
        self.rot_yw = 0.0
        self.rot_zw = 0.0

    def validate(self, params):
        # Rotated vertices have |p| = 2, so z + w peaks at 2*sqrt(2)
        self.require(params, "depth", lambda v: v > MIN_DEPTH, f"> {MIN_DEPTH:.3f}")
        self.require(params, "scale", lambda v: v > 0, "> 0")
        self.require(params, "vertex_radius", lambda v: v >= 0, ">= 0")
        for key in ("rotation_speed_xw", "rotation_speed_yw", "rotation_speed_zw"):
            self.require(params, key, math.isfinite, "finite")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(MAX_INDEX_SUM, "edge index sums")
        self.vertices = VERTICES
        self.edges = EDGES
        self.rot_xw = 0.0
        self.rot_yw = 0.0
        self.rot_zw = 0.0
        self.generation = 0
        self.initialized = True

    @property
    def angles(self):
        return (self.rot_xw, self.rot_yw, self.rot_zw)

    def update(self, dt, state):
        k = dt * state.params.speed * (1.0 + state.audio_level)
        self.rot_xw = (self.rot_xw + self.params["rotation_speed_xw"] * k) % TWO_PI
        self.rot_yw = (self.rot_yw + self.params["rotation_speed_yw"] * k) % TWO_PI
        self.rot_zw = (self.rot_zw + self.params["rotation_speed_zw"] * k) % TWO_PI
        self.generation += 1

    def projected_vertices(self, state):
        """Canvas positions of the 16 vertices for the current angles."""
        cx, cy = state.center
        scale = (self.params["scale"] * min(state.viewport_width, state.viewport_height)
                 * state.params.zoom)
        out = []
        for v in self.vertices:
            px, py = project_4d(v, self.rot_xw, self.rot_yw, self.rot_zw,
                                self.params["depth"], scale)
            out.append((cx + px, cy + py))
        return out

    def draw(self, state, renderer):
        pts = self.projected_vertices(state)
        emphasis = state.params.prime_emphasis
        is_prime = self.oracle.is_prime

        for i, j in self.edges:
            lit = is_prime(i + j) or is_prime(i ^ j)
            color = color_for_state((i + j) * 2, lit, emphasis)
            width = state.params.line_thickness * (1.0 + emphasis if lit else 1.0)
            renderer.line(pts[i][0], pts[i][1], pts[j][0], pts[j][1], color, width)

        for idx, (x, y) in enumerate(pts):
            lit = is_prime(idx)
            color = color_for_state(idx * 4, lit, emphasis)
            r = self.params["vertex_radius"] * (1.0 + emphasis if lit else 1.0)
            renderer.point(x, y, r, color)

    @property
    def stats(self):
        return {
            "generation": self.generation,
            "rot_xw": self.rot_xw,
            "rot_yw": self.rot_yw,
            "rot_zw": self.rot_zw,
        }

    @classmethod
    def get_slider_defs(cls):
        return [
            {"key": "rotation_speed_xw", "label": "XW speed", "section": "TESSERACT",
             "min": 0.0, "max": 2.0, "default": 0.7, "fmt": ".2f"},
            {"key": "rotation_speed_yw", "label": "YW speed", "section": "TESSERACT",
             "min": 0.0, "max": 2.0, "default": 0.45, "fmt": ".2f"},
            {"key": "rotation_speed_zw", "label": "ZW speed", "section": "TESSERACT",
             "min": 0.0, "max": 2.0, "default": 0.3, "fmt": ".2f"},
        ]
