"""
EMA-Smoothed Parameters

Slider moves and the synthetic audio pulse drift toward their target
instead of snapping, so a global param change eases in over a second
or two. Smoothing is frame-rate independent via delta-time.
"""

import math


class SmoothedParameter:
    """EMA wrapper for a single numeric parameter.

    Time constant controls the "feel":
    - tau=1.0s: responsive but smooth
    - tau=2.0s: dreamy drift
    """

    def __init__(self, initial_value, time_constant=1.0):
        self.target = initial_value
        self.current = initial_value
        self.tau = time_constant

    def set_target(self, new_target):
        self.target = new_target

    def update(self, dt):
        """Advance EMA by delta-time.

        alpha = 1 - exp(-dt / tau)
        current += alpha * (target - current)
        """
        if dt <= 0:
            return self.current
        alpha = 1.0 - math.exp(-dt / self.tau)
        self.current += alpha * (self.target - self.current)
        return self.current

    def get_value(self):
        return self.current

    def snap(self, value):
        """Immediately set both target and current (for reset)."""
        self.target = value
        self.current = value


class SmoothedParams:
    """A named group of SmoothedParameters pushed into GlobalParams each frame."""

    def __init__(self, params, keys, time_constant=1.0):
        self.params = params
        self.values = {k: SmoothedParameter(getattr(params, k), time_constant) for k in keys}

    def set_target(self, key, value):
        self.values[key].set_target(value)

    def update(self, dt):
        self.params.set(**{k: sp.update(dt) for k, sp in self.values.items()})

    def snap_all(self):
        for key, sp in self.values.items():
            sp.snap(getattr(self.params, key))
