"""
Engine - mode registry, lifecycle and per-frame scheduling

Lifecycle of the active slot:

    UNINITIALIZED --start/switch--> PENDING_INIT --tick: init()--> ACTIVE
    ACTIVE --switch(k)--> PENDING_INIT
    any --init/update/draw raises--> HALTED --switch(k)--> PENDING_INIT

One tick:

    state.advance(dt)                    t += dt, frame += 1
    mode.init(state)                     only if a switch is pending
    mode.update(dt, state)
    mode.draw(state, renderer)

Only one mode runs per tick. A mode that raises, or that writes the
clock fields of GlobalState, is halted and its error recorded; the
engine and the other modes carry on and stay switchable.
"""

import enum
import logging

from .automaton import PrimeAutomaton
from .tesseract import Tesseract
from .ulam import UlamSpiral
from .phyllotaxis import Phyllotaxis
from .sacks import SacksSpiral
from .dial import SexagesimalDial
from .modular import ModularCircle
from .harmonics import PrimeHarmonics
from .presets import MODE_ORDER, PRESETS, preset_params
from .primes import PrimeOracle
from .errors import ConfigurationError


logger = logging.getLogger(__name__)

# Mode class registry
MODE_CLASSES = {
    "automaton": PrimeAutomaton,
    "tesseract": Tesseract,
    "ulam": UlamSpiral,
    "phyllotaxis": Phyllotaxis,
    "sacks": SacksSpiral,
    "dial": SexagesimalDial,
    "modular": ModularCircle,
    "harmonics": PrimeHarmonics,
}

MODE_COUNT = len(MODE_ORDER)
DEFAULT_MAX_N = 10000


class EngineStatus(enum.Enum):
    UNINITIALIZED = "uninitialized"
    PENDING_INIT = "pending_init"
    ACTIVE = "active"
    HALTED = "halted"


class ModeTimeWriteError(RuntimeError):
    """A mode wrote GlobalState.t / frame / dt."""


def build_registry(oracle):
    """Instantiate the eight modes from presets, in MODE_ORDER."""
    modes = []
    for key in MODE_ORDER:
        cls = MODE_CLASSES[PRESETS[key]["mode"]]
        modes.append(cls(oracle, **preset_params(key)))
    return modes


class Engine:

    def __init__(self, state, oracle=None, modes=None):
        self.state = state
        self.oracle = oracle if oracle is not None else PrimeOracle(DEFAULT_MAX_N)
        self.modes = list(modes) if modes is not None else build_registry(self.oracle)
        self._validate_registry()
        self.current_index = 0
        self.status = EngineStatus.UNINITIALIZED
        self.errors = {}
        self.last_error = None

    def _validate_registry(self):
        if len(self.modes) != MODE_COUNT:
            raise ConfigurationError(
                f"registry must hold exactly {MODE_COUNT} modes, got {len(self.modes)}")
        ids = [m.mode_id for m in self.modes]
        if any(not i for i in ids) or len(set(ids)) != len(ids):
            raise ConfigurationError(f"mode ids must be unique and non-empty: {ids}")

    @property
    def active_mode(self):
        return self.modes[self.current_index]

    @property
    def mode_ids(self):
        return [m.mode_id for m in self.modes]

    @property
    def halted(self):
        return self.status is EngineStatus.HALTED

    def start(self, index=0):
        self.switch_mode(index)

    def switch_mode(self, index):
        """Make mode `index` active; it is initialised before its next update."""
        if not 0 <= index < len(self.modes):
            raise IndexError(f"mode index {index} outside [0, {len(self.modes)})")
        self.current_index = index
        self.status = EngineStatus.PENDING_INIT
        logger.info("switch -> %s (%d)", self.modes[index].mode_id, index)

    def switch_mode_by_id(self, mode_id):
        self.switch_mode(self.mode_ids.index(mode_id))

    def reset_mode(self):
        """Re-initialise the active mode on the next tick."""
        self.switch_mode(self.current_index)

    def _halt(self, phase, exc):
        mode = self.active_mode
        self.status = EngineStatus.HALTED
        self.errors[mode.mode_id] = exc
        self.last_error = (mode.mode_id, phase, exc)
        logger.error("mode %s halted in %s: %s", mode.mode_id, phase, exc, exc_info=exc)

    def _call(self, phase, fn, *args):
        """Run one mode hook; halt the mode on error or a clock write."""
        clock = self.state.time_fields()
        try:
            fn(*args)
        except Exception as exc:
            self.state.restore_time_fields(clock)
            self._halt(phase, exc)
            return False
        if self.state.time_fields() != clock:
            self.state.restore_time_fields(clock)
            self._halt(phase, ModeTimeWriteError(
                f"{self.active_mode.mode_id} modified GlobalState time fields in {phase}"))
            return False
        return True

    def tick(self, dt, renderer=None):
        """Advance one frame: clock, pending init, update, draw."""
        if dt < 0:
            raise ConfigurationError(f"dt must be >= 0, got {dt}")
        if self.status is EngineStatus.UNINITIALIZED:
            self.start(0)

        self.state.advance(dt)
        mode = self.active_mode

        if self.status is EngineStatus.PENDING_INIT:
            # Stays False if init raises part way through
            mode.initialized = False
            if self._call("init", mode.init, self.state):
                self.errors.pop(mode.mode_id, None)
                self.status = EngineStatus.ACTIVE
                logger.info("mode %s initialised", mode.mode_id)

        if self.status is EngineStatus.ACTIVE:
            self._call("update", mode.update, dt, self.state)

        if renderer is not None:
            renderer.begin_frame(self.state)
            if self.status is EngineStatus.ACTIVE:
                self._call("draw", mode.draw, self.state, renderer)
            renderer.end_frame()

    def run(self, frames, dt=1.0 / 60.0, renderer=None):
        for _ in range(frames):
            self.tick(dt, renderer)
        return self

    def handle_input(self, key):
        """Forward a key to the active mode; True if consumed."""
        if self.status is not EngineStatus.ACTIVE:
            return False
        consumed = False

        def _dispatch():
            nonlocal consumed
            consumed = bool(self.active_mode.handle_input(key, self.state))

        self._call("input", _dispatch)
        return consumed

    @property
    def stats(self):
        mode = self.active_mode
        out = {
            "mode": mode.mode_id,
            "index": self.current_index,
            "status": self.status.value,
            "frame": self.state.frame,
            "t": self.state.t,
        }
        if mode.initialized:
            out.update(mode.stats)
        return out
