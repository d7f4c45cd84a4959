"""
Prime Modes Viewer - Entry Point

Usage:
    python -m prime_modes [mode] [--window WxH] [--max-n N] [--snap N]

Examples:
    python -m prime_modes
    python -m prime_modes tesseract
    python -m prime_modes ulam --window 1200x1200
    python -m prime_modes all --snap 240

Modes (keys 1-8 in the viewer):
    automaton, tesseract, ulam, phyllotaxis, sacks, dial, modular, harmonics

Use --list to see descriptions.
"""

import os
import sys

from .presets import MODE_ORDER, list_modes


def snap(mode_key, width, height, frames, max_n):
    """Headless mode: run N frames per mode, save a PNG, exit."""
    from .engine import Engine
    from .primes import PrimeOracle
    from .renderer import RasterRenderer
    from .state import GlobalState

    screenshots_dir = os.path.join(os.getcwd(), "screenshots")
    os.makedirs(screenshots_dir, exist_ok=True)

    oracle = PrimeOracle(max_n)
    keys = [mode_key] if mode_key != "all" else MODE_ORDER
    for key in keys:
        state = GlobalState(width, height)
        engine = Engine(state, oracle)
        engine.start(MODE_ORDER.index(key))
        renderer = RasterRenderer(width, height, bloom=0.35)

        print(f"  {key}: running {frames} frames...", end="", flush=True)
        engine.run(frames, 1.0 / 60.0, renderer)
        if engine.halted:
            mode_id, phase, exc = engine.last_error
            print(f" halted in {phase}: {exc}")
            continue

        path = renderer.save(os.path.join(screenshots_dir, f"pm_{key}.png"))
        renderer.save(os.path.join(screenshots_dir, "latest.png"))
        print(f" saved: {path}")


def main():
    mode = "automaton"
    win_w, win_h = 900, 900
    max_n = 10000
    snap_frames = 0

    args = sys.argv[1:]
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--max-n" and i + 1 < len(args):
            max_n = int(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_frames = int(args[i + 1])
            i += 2
        elif arg == "--list":
            print("\nAvailable modes:")
            for n, (key, name, desc) in enumerate(list_modes(), start=1):
                print(f"  {n}. {key:12s} {name:18s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in MODE_ORDER or arg == "all":
            mode = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available modes")
            return

    if snap_frames > 0:
        print(f"Headless snap mode: {mode} @ {win_w}x{win_h}, {snap_frames} frames")
        snap(mode, win_w, win_h, snap_frames, max_n)
        return

    if mode == "all":
        mode = MODE_ORDER[0]

    # pygame is only needed for the interactive window
    from .viewer import Viewer

    print("Starting Prime Modes Viewer")
    print(f"  Mode: {mode}")
    print(f"  Window: {win_w}x{win_h}")
    print(f"  Sieve: [0, {max_n}]")
    print()

    viewer = Viewer(width=win_w, height=win_h, start_mode=mode, max_n=max_n)
    viewer.run()


if __name__ == "__main__":
    main()
