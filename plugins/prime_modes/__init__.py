"""
Prime Modes - eight generative scenes over one prime/base-60 substrate.

The headless core (oracle, palette, transforms, state, modes, engine,
renderers) has no pygame dependency; viewer.py and controls.py do.
"""

from .errors import PrimeModesError, PrimeRangeError, PrimeNotFoundError, ConfigurationError
from .primes import PrimeOracle
from .state import GlobalState, GlobalParams
from .engine import Engine, EngineStatus, MODE_CLASSES
from .renderer import CommandRecorder, RasterRenderer
