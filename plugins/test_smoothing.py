#!/usr/bin/env python3
"""
Test script for smoothed globals and the shared state.

Verifies:
1. SmoothedParameter drift behavior
2. SmoothedParams pushes eased values into GlobalParams
3. GlobalParams / GlobalState validation and audio gating
4. Viewer integration of smoothing system and window resize
"""

import pytest

from prime_modes.errors import ConfigurationError
from prime_modes.smoothing import SmoothedParameter, SmoothedParams
from prime_modes.state import GlobalParams, GlobalState


def test_smoothed_parameter():
    """Test EMA drift over time."""
    print("Testing SmoothedParameter...")
    sp = SmoothedParameter(1.0, time_constant=2.0)
    sp.set_target(2.0)

    # After 1 frame at 60fps
    sp.update(1/60)
    val_1frame = sp.get_value()
    assert abs(val_1frame - 1.0) < 0.02, f"Should barely move after 1 frame: {val_1frame}"

    # After ~10 seconds (600 frames)
    for _ in range(599):
        sp.update(1/60)
    val_10s = sp.get_value()
    assert abs(val_10s - 2.0) < 0.02, f"Should be near target after 10s: {val_10s}"

    # dt <= 0 leaves it alone
    assert sp.update(0) == val_10s

    # Test snap
    sp.snap(0.5)
    assert sp.get_value() == 0.5, "Snap should set value immediately"
    assert sp.target == 0.5, "Snap should set target too"

    print("  ✓ SmoothedParameter working correctly")


def test_smoothed_params_drive_globals():
    print("Testing SmoothedParams...")
    params = GlobalParams()
    smoothed = SmoothedParams(params, ["speed", "mode_blend"], time_constant=0.5)
    smoothed.set_target("speed", 3.0)
    smoothed.set_target("mode_blend", 0.8)

    smoothed.update(1/60)
    assert 1.0 < params.speed < 1.2, f"speed should ease in: {params.speed}"

    for _ in range(600):
        smoothed.update(1/60)
    assert params.speed == pytest.approx(3.0, abs=1e-3)
    assert params.mode_blend == pytest.approx(0.8, abs=1e-3)

    params.set(speed=0.25)
    smoothed.snap_all()
    assert smoothed.values["speed"].get_value() == 0.25

    print("  ✓ SmoothedParams working correctly")


def test_global_params_validation():
    params = GlobalParams(speed=2, zoom=1.5)
    assert params.speed == 2.0 and isinstance(params.speed, float)
    for bad in ({"speed": 0}, {"zoom": -1}, {"prime_emphasis": 0},
                {"line_thickness": -0.1}, {"mode_blend": 1.5}, {"glow": 1}):
        with pytest.raises(ConfigurationError):
            params.set(**bad)
    # A rejected change leaves the previous values in place
    assert params.speed == 2.0
    assert params.as_dict()["zoom"] == 1.5


def test_global_state_clock_and_viewport():
    state = GlobalState(800, 400)
    assert state.aspect_ratio == 2.0
    assert state.center == (400.0, 200.0)
    state.advance(0.25)
    state.advance(0.25)
    assert state.time_fields() == (0.5, 2, 0.25)
    with pytest.raises(ConfigurationError):
        state.advance(-1)
    with pytest.raises(ConfigurationError):
        state.resize(0, 100)

    saved = state.time_fields()
    state.t = 99.0
    state.restore_time_fields(saved)
    assert state.t == 0.5


def test_audio_level_gating():
    state = GlobalState()
    assert state.audio_level == 0.0
    state.set_audio_level(0.7)
    assert state.audio_level == 0.0, "ignored while audio_reactive is off"
    state.params.set(audio_reactive=True)
    assert state.audio_level == 0.7
    state.set_audio_level(None)
    assert state.audio_level == 0.0
    state.set_audio_level(-3)
    assert state.audio_level == 0.0


def test_viewer_integration():
    """Test that viewer correctly integrates smoothing."""
    pytest.importorskip("pygame")
    print("Testing Viewer integration...")
    from prime_modes.viewer import Viewer

    viewer = Viewer(width=320, height=320, start_mode="tesseract", max_n=1000)
    assert viewer.engine.active_mode.mode_id == "tesseract"
    assert "speed" in viewer.smoothed.values, "speed should have smoothed param"

    # Slider callback sets the target, not GlobalParams directly
    callback = viewer._make_global_callback("speed")
    callback(2.5)
    assert viewer.state.params.speed == 1.0, "value moves only on update()"
    assert viewer.smoothed.values["speed"].target == 2.5, "Target should be set immediately"

    viewer.smoothed.update(0.5)
    assert viewer.state.params.speed > 1.0

    print("  ✓ Viewer integration working correctly")


def test_viewer_resize_tracks_window():
    pytest.importorskip("pygame")
    from prime_modes.viewer import Viewer, PANEL_WIDTH, MIN_CANVAS

    viewer = Viewer(width=320, height=320, start_mode="dial", max_n=1000)
    viewer.resize(PANEL_WIDTH + 500, 400)
    assert (viewer.canvas_w, viewer.canvas_h) == (500, 400)
    assert (viewer.state.viewport_width, viewer.state.viewport_height) == (500, 400)
    assert viewer.state.center == (250.0, 200.0)

    viewer.panel_visible = False
    viewer.resize(10, 10)
    assert viewer.state.viewport_width == MIN_CANVAS


if __name__ == "__main__":
    print("\n=== Testing Smoothed Globals and Shared State ===\n")

    test_smoothed_parameter()
    test_smoothed_params_drive_globals()
    test_global_params_validation()
    test_global_state_clock_and_viewport()
    test_audio_level_gating()
    test_viewer_integration()
    test_viewer_resize_tracks_window()

    print("\n✓ All tests passed!\n")
