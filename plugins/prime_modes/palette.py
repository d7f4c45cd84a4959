"""
Base-60 Palette

Maps integer states onto a 60-step hue wheel (6 degrees per state) and
boosts saturation/brightness of prime states by the global prime
emphasis. With emphasis 0 a prime and a non-prime state of the same
value get exactly the same color.

Colors are (r, g, b) uint8 tuples. For per-cell work there is a
(60, 2, 3) lookup table indexed [state, is_prime].
"""

import colorsys
import numpy as np


STATES = 60
DEGREES_PER_STATE = 360 // STATES

# Baseline saturation/value, and the headroom a fully emphasised prime gets
BASE_SATURATION = 0.55
BASE_VALUE = 0.55
PRIME_SATURATION_BOOST = 0.45
PRIME_VALUE_BOOST = 0.45


def mod60(n):
    """True modulo 60 (never negative). Works on ints and numpy arrays."""
    return ((n % STATES) + STATES) % STATES


def state_to_hue(n):
    """Hue in degrees [0, 360) for a base-60 state."""
    return mod60(n) * DEGREES_PER_STATE


def hsv_to_rgb(hue_deg, saturation, value):
    r, g, b = colorsys.hsv_to_rgb((hue_deg % 360) / 360.0, saturation, value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def _clamp_unit(x):
    return max(0.0, min(1.0, float(x)))


def color_for_state(n, is_prime, emphasis):
    """Color for state n; primes brighten monotonically with emphasis."""
    boost = _clamp_unit(emphasis) if is_prime else 0.0
    saturation = BASE_SATURATION + PRIME_SATURATION_BOOST * boost
    value = BASE_VALUE + PRIME_VALUE_BOOST * boost
    return hsv_to_rgb(state_to_hue(n), saturation, value)


def build_state_lut(emphasis):
    """(60, 2, 3) uint8 table: lut[state, 0] plain, lut[state, 1] prime."""
    lut = np.zeros((STATES, 2, 3), dtype=np.uint8)
    for s in range(STATES):
        lut[s, 0] = color_for_state(s, False, emphasis)
        lut[s, 1] = color_for_state(s, True, emphasis)
    return lut


def dim(color, factor):
    """Scale a color toward black (factor in [0, 1])."""
    f = _clamp_unit(factor)
    return tuple(int(c * f) for c in color)
