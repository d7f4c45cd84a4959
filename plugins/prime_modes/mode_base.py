"""
Abstract Base Class for Visualization Modes

Every mode (cellular automaton, tesseract, spirals, ...) implements this
interface so the engine can schedule any of them interchangeably:

    validate(params)         range-check params (set_params and init)
    init(state)              (re)build all private state from params
    update(dt, state)        advance private state by one frame
    draw(state, renderer)    emit drawing commands for the current state
    handle_input(key, state) optional; return True if the key was used

Modes read the shared GlobalState and PrimeOracle but write only their
own attributes.
"""

from abc import ABC, abstractmethod

from .errors import ConfigurationError


class Mode(ABC):
    """Base class for visualization modes."""

    mode_id = ""     # e.g. "automaton", "tesseract"
    mode_label = ""  # e.g. "Prime Automaton", "Tesseract"
    default_params = {}

    def __init__(self, oracle, **params):
        self.oracle = oracle
        self.params = dict(self.default_params)
        self.set_params(**params)
        self.initialized = False  # True once init completes; the engine clears it before each init
        self.generation = 0

    @abstractmethod
    def init(self, state):
        """Fully (re)populate private state. Must be idempotent."""

    @abstractmethod
    def update(self, dt, state):
        """Advance one frame."""

    @abstractmethod
    def draw(self, state, renderer):
        """Emit drawing commands to the renderer."""

    def handle_input(self, key, state):
        return False

    def set_params(self, **params):
        """Validate and update mode parameters. Takes effect on the next init.

        Values some modes read live (speeds, thresholds) are range-checked
        here too, so a bad slider value is rejected before it lands.
        """
        for key in params:
            if key not in self.default_params:
                raise ConfigurationError(f"{self.mode_id}: unknown parameter {key!r}")
        candidate = dict(self.params, **params)
        self.validate(candidate)
        self.params = candidate

    def get_params(self):
        return dict(self.params)

    def validate(self, params):
        """Raise ConfigurationError for out-of-range params. Override per mode."""

    def require(self, params, key, ok, expected):
        if not ok(params[key]):
            raise ConfigurationError(
                f"{self.mode_id}: {key} must be {expected}, got {params[key]!r}")

    def require_oracle(self, highest, what):
        """Fail at init when the mode would query past the sieve."""
        if highest > self.oracle.max_n:
            raise ConfigurationError(
                f"{self.mode_id}: {what} needs primes up to {highest}, "
                f"oracle covers {self.oracle.max_n}")

    @property
    def stats(self):
        return {"generation": self.generation}

    @classmethod
    def get_slider_defs(cls):
        """Return list of slider definitions for the control panel.

        Each entry is a dict:
            {"key": "steps_per_frame", "label": "Steps/frame", "section": "AUTOMATON",
             "min": 1, "max": 8, "default": 1, "fmt": ".0f", "step": 1}
        """
        return []

    def __repr__(self):
        return f"<{type(self).__name__} {self.mode_id}>"
