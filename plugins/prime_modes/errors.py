"""
Error types shared by the oracle, the transforms, the modes and the engine.
"""


class PrimeModesError(Exception):
    """Base class for all visualizer errors."""


class PrimeRangeError(PrimeModesError, IndexError):
    """Prime oracle queried outside [0, max_n]."""


class PrimeNotFoundError(PrimeRangeError):
    """No prime exists in the requested direction below the sieve ceiling."""


class ConfigurationError(PrimeModesError, ValueError):
    """Invalid dimensions or parameters, raised before any frame runs."""
