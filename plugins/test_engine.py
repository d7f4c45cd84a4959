#!/usr/bin/env python3
"""
Tests for the engine: registry, mode lifecycle, error isolation.
"""

import numpy as np
import pytest

from prime_modes.engine import Engine, EngineStatus, ModeTimeWriteError, MODE_COUNT
from prime_modes.errors import ConfigurationError
from prime_modes.mode_base import Mode
from prime_modes.presets import MODE_ORDER
from prime_modes.primes import PrimeOracle
from prime_modes.renderer import CommandRecorder, RasterRenderer, BACKGROUND
from prime_modes.state import GlobalState


ORACLE = PrimeOracle(10000)


class CountingMode(Mode):
    """Records every hook call into a shared event log."""

    def __init__(self, oracle, mode_id, log, fail_in=None, touch_clock=False):
        self.mode_id = mode_id
        super().__init__(oracle)
        self.log = log
        self.fail_in = fail_in
        self.touch_clock = touch_clock

    def _hook(self, phase, state):
        self.log.append((self.mode_id, phase))
        if self.fail_in == phase:
            raise RuntimeError(f"{self.mode_id} broke in {phase}")
        if self.touch_clock and phase == "update":
            state.t = 0.0

    def init(self, state):
        self._hook("init", state)
        self.initialized = True

    def update(self, dt, state):
        self._hook("update", state)

    def draw(self, state, renderer):
        self._hook("draw", state)
        renderer.point(1, 1, 1, (255, 255, 255))

    def handle_input(self, key, state):
        self._hook("input", state)
        return key == "x"


def counting_engine(overrides=None):
    log = []
    modes = []
    for k in range(MODE_COUNT):
        kw = (overrides or {}).get(k, {})
        modes.append(CountingMode(ORACLE, f"m{k}", log, **kw))
    return Engine(GlobalState(100, 100), ORACLE, modes), log


def test_registry_must_hold_eight_modes():
    log = []
    seven = [CountingMode(ORACLE, f"m{k}", log) for k in range(7)]
    with pytest.raises(ConfigurationError):
        Engine(GlobalState(), ORACLE, seven)
    dupes = [CountingMode(ORACLE, "same", log) for _ in range(8)]
    with pytest.raises(ConfigurationError):
        Engine(GlobalState(), ORACLE, dupes)

    engine = Engine(GlobalState(), ORACLE)
    assert engine.mode_ids == MODE_ORDER
    assert len(engine.modes) == 8


def test_init_runs_once_before_first_update():
    engine, log = counting_engine()
    rec = CommandRecorder()
    engine.run(3, renderer=rec)
    assert log == [("m0", "init"), ("m0", "update"), ("m0", "draw")] + \
                  [("m0", "update"), ("m0", "draw")] * 2
    assert engine.status is EngineStatus.ACTIVE

    del log[:]
    engine.switch_mode(5)
    assert engine.status is EngineStatus.PENDING_INIT
    engine.tick(1 / 60)
    engine.tick(1 / 60)
    assert log == [("m5", "init"), ("m5", "update"), ("m5", "update")]


def test_only_active_mode_runs():
    engine, log = counting_engine()
    engine.start(2)
    engine.run(10)
    assert {m for m, _ in log} == {"m2"}


def test_switch_out_of_range():
    engine, _ = counting_engine()
    for bad in (-1, 8, 100):
        with pytest.raises(IndexError):
            engine.switch_mode(bad)
    with pytest.raises(ConfigurationError):
        engine.tick(-0.1)


def test_clock_advances_once_per_tick():
    engine, _ = counting_engine()
    engine.run(30, dt=0.5)
    assert engine.state.frame == 30
    assert engine.state.t == pytest.approx(15.0)
    assert engine.state.dt == 0.5


def test_failing_mode_is_isolated():
    engine, log = counting_engine({3: {"fail_in": "update"}})
    engine.start(3)
    engine.run(4)
    assert engine.halted
    mode_id, phase, exc = engine.last_error
    assert (mode_id, phase) == ("m3", "update")
    assert isinstance(exc, RuntimeError)
    assert "m3" in engine.errors
    # Halted: no further hooks, but the clock keeps going
    assert log == [("m3", "init"), ("m3", "update")]
    assert engine.state.frame == 4

    # Other modes stay switchable and run normally
    engine.switch_mode(4)
    engine.run(2)
    assert engine.status is EngineStatus.ACTIVE
    assert log[-3:] == [("m4", "init"), ("m4", "update"), ("m4", "update")]


def test_failing_init_never_updates():
    engine, log = counting_engine({0: {"fail_in": "init"}})
    engine.run(3, renderer=CommandRecorder())
    assert log == [("m0", "init")]
    assert engine.last_error[1] == "init"


def test_clock_write_halts_mode():
    engine, log = counting_engine({1: {"touch_clock": True}})
    engine.start(1)
    engine.run(3, dt=1.0)
    assert engine.halted
    assert isinstance(engine.errors["m1"], ModeTimeWriteError)
    # The write was rolled back
    assert engine.state.t == pytest.approx(3.0)


def test_reentry_reproduces_seed():
    engine = Engine(GlobalState(200, 200), ORACLE)
    engine.start(0)
    engine.tick(1 / 60)
    first = engine.active_mode.grid
    engine.run(20)
    assert not (engine.active_mode.grid == first).all()

    engine.switch_mode(1)
    engine.run(5)
    engine.switch_mode_by_id("automaton")
    engine.tick(1 / 60)
    assert (engine.active_mode.grid == first).all()


def test_every_mode_draws():
    engine = Engine(GlobalState(320, 240), ORACLE)
    rec = CommandRecorder()
    for idx in range(MODE_COUNT):
        engine.switch_mode(idx)
        engine.run(3, renderer=rec)
        assert engine.status is EngineStatus.ACTIVE, engine.last_error
        assert rec.commands, MODE_ORDER[idx]
        assert engine.stats["mode"] == MODE_ORDER[idx]


def test_mode_blend_reaches_renderer():
    engine, _ = counting_engine()
    engine.state.params.set(mode_blend=0.5)
    rec = CommandRecorder()
    engine.run(2, renderer=rec)
    assert rec.blend == 0.5
    assert rec.frames == 2
    assert len(rec.previous) == len(rec.commands) == 1


def test_raster_snapshot(tmp_path):
    state = GlobalState(160, 120)
    engine = Engine(state, ORACLE)
    engine.switch_mode_by_id("tesseract")
    raster = RasterRenderer(160, 120, bloom=0.3)
    engine.run(5, renderer=raster)
    img = raster.image
    assert img.shape == (120, 160, 3) and img.dtype == np.uint8
    assert (img != np.array(BACKGROUND, dtype=np.uint8)).any()
    path = raster.save(str(tmp_path / "tesseract.png"))
    assert (tmp_path / "tesseract.png").exists() and path.endswith(".png")


def test_halted_mode_can_be_reset():
    engine = Engine(GlobalState(200, 200), ORACLE)
    engine.switch_mode_by_id("ulam")
    # Valid on its own, but 101^2 is past the sieve
    engine.active_mode.set_params(side=101)
    engine.tick(1 / 60)
    assert engine.halted and engine.last_error[1] == "init"
    assert isinstance(engine.errors["ulam"], ConfigurationError)
    assert not engine.active_mode.initialized
    assert "generation" not in engine.stats

    engine.active_mode.set_params(side=31)
    engine.reset_mode()
    engine.tick(1 / 60)
    assert engine.status is EngineStatus.ACTIVE
    assert "ulam" not in engine.errors
    assert engine.stats["generation"] == 0


def test_small_sieve_fails_at_init():
    engine = Engine(GlobalState(200, 200), PrimeOracle(500))
    outcome = {}
    for idx in range(MODE_COUNT):
        engine.switch_mode(idx)
        engine.run(2, renderer=CommandRecorder())
        outcome[engine.active_mode.mode_id] = engine.last_error[1] if engine.halted else None
    # Every mode that would query past 500 is stopped before it draws
    assert outcome == {
        "automaton": None,
        "tesseract": None,
        "ulam": "init",        # 61^2
        "phyllotaxis": "init",  # 800 points
        "sacks": "init",       # limit 3000
        "dial": None,
        "modular": None,
        "harmonics": None,
    }
    for mode_id in ("ulam", "phyllotaxis", "sacks"):
        assert isinstance(engine.errors[mode_id], ConfigurationError)


def test_handle_input():
    engine, log = counting_engine({6: {"fail_in": "input"}})
    assert engine.handle_input("x") is False   # nothing active yet
    engine.tick(1 / 60)
    assert engine.handle_input("x") is True
    assert engine.handle_input("y") is False
    assert log[-2:] == [("m0", "input"), ("m0", "input")]

    engine.switch_mode(6)
    engine.tick(1 / 60)
    assert engine.handle_input("x") is False
    assert engine.halted
    assert engine.last_error[:2] == ("m6", "input")
    # Halted modes get no further input
    del log[:]
    assert engine.handle_input("x") is False
    assert log == []


if __name__ == "__main__":
    print("\n=== Engine ===\n")
    test_registry_must_hold_eight_modes()
    test_init_runs_once_before_first_update()
    test_only_active_mode_runs()
    test_switch_out_of_range()
    test_clock_advances_once_per_tick()
    test_failing_mode_is_isolated()
    test_failing_init_never_updates()
    test_clock_write_halts_mode()
    test_reentry_reproduces_seed()
    test_every_mode_draws()
    test_mode_blend_reaches_renderer()
    test_halted_mode_can_be_reset()
    test_small_sieve_fails_at_init()
    test_handle_input()
    print("✓ All tests passed!\n")
