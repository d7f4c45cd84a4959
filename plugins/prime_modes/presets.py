"""
Mode Registry Presets

The ordered list of the eight modes (keys 1-8 in the viewer) and the
parameter overrides each one starts with. The "mode" field names the
mode class; every other key except name/description is passed to the
mode constructor.
"""

PRESETS = {
    "automaton": {
        "mode": "automaton",
        "name": "Prime Automaton",
        "description": "Base-60 cells step up on prime neighbor sums, down otherwise",
        "width": 64, "height": 64,
        "steps_per_frame": 1,
        "prime_neighbor_threshold": 3,
        "seed_pattern": "linear",
    },
    "tesseract": {
        "mode": "tesseract",
        "name": "Tesseract",
        "description": "4D hypercube turning in the XW, YW and ZW planes",
        "rotation_speed_xw": 0.7,
        "rotation_speed_yw": 0.45,
        "rotation_speed_zw": 0.3,
        "depth": 4.0,
    },
    "ulam": {
        "mode": "ulam",
        "name": "Ulam Spiral",
        "description": "Square spiral of integers with primes lit",
        "side": 61,
        "reveal_rate": 400.0,
    },
    "phyllotaxis": {
        "mode": "phyllotaxis",
        "name": "Phyllotaxis",
        "description": "Golden-angle seed head, prime seeds enlarged",
        "points": 800,
    },
    "sacks": {
        "mode": "sacks",
        "name": "Sacks Spiral",
        "description": "One turn per square number; primes trace curves",
        "limit": 3000,
    },
    "dial": {
        "mode": "dial",
        "name": "Sexagesimal Dial",
        "description": "60-tick odometer with base-60 digit hands",
        "rate": 12.0,
    },
    "modular": {
        "mode": "modular",
        "name": "Modular Circle",
        "description": "Times-table chords mod 60 with a drifting multiplier",
        "start_multiplier": 2.0,
        "drift": 0.08,
    },
    "harmonics": {
        "mode": "harmonics",
        "name": "Prime Harmonics",
        "description": "Lissajous curves over consecutive prime ratios",
        "max_prime": 31,
        "hold": 6.0,
    },
}

MODE_ORDER = [
    "automaton",
    "tesseract",
    "ulam",
    "phyllotaxis",
    "sacks",
    "dial",
    "modular",
    "harmonics",
]

_META_KEYS = ("mode", "name", "description")


def get_preset(key):
    return PRESETS.get(key)


def preset_params(key):
    """Constructor overrides for a preset (metadata stripped)."""
    return {k: v for k, v in PRESETS[key].items() if k not in _META_KEYS}


def list_modes():
    """Return list of (key, name, description) in registry order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"]) for k in MODE_ORDER]
