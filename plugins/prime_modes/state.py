"""
Global State - the one shared context passed into every mode call

Single writer per field:
  t, frame, dt              Engine only (advance)
  viewport_width/height     host window (resize)
  params, audio level       UI / audio collaborator
Modes read all of it and write none of it.
"""

from .errors import ConfigurationError


class GlobalParams:
    """Tunable parameters shared by all modes."""

    _POSITIVE = ("speed", "zoom", "prime_emphasis", "line_thickness")

    def __init__(self, speed=1.0, zoom=1.0, prime_emphasis=0.6,
                 line_thickness=1.5, mode_blend=0.0, audio_reactive=False):
        self.speed = 1.0
        self.zoom = 1.0
        self.prime_emphasis = 0.6
        self.line_thickness = 1.5
        self.mode_blend = 0.0
        self.audio_reactive = False
        self.set(speed=speed, zoom=zoom, prime_emphasis=prime_emphasis,
                 line_thickness=line_thickness, mode_blend=mode_blend,
                 audio_reactive=audio_reactive)

    def set(self, **params):
        """Validate and apply a batch of parameter changes."""
        for key, val in params.items():
            if key in self._POSITIVE:
                val = float(val)
                if not val > 0:
                    raise ConfigurationError(f"{key} must be > 0, got {val}")
            elif key == "mode_blend":
                val = float(val)
                if not 0.0 <= val <= 1.0:
                    raise ConfigurationError(f"mode_blend must be in [0, 1], got {val}")
            elif key == "audio_reactive":
                val = bool(val)
            else:
                raise ConfigurationError(f"unknown global parameter: {key}")
            setattr(self, key, val)

    def as_dict(self):
        return {
            "speed": self.speed,
            "zoom": self.zoom,
            "prime_emphasis": self.prime_emphasis,
            "line_thickness": self.line_thickness,
            "mode_blend": self.mode_blend,
            "audio_reactive": self.audio_reactive,
        }


class GlobalState:

    def __init__(self, viewport_width=900, viewport_height=900, params=None):
        self.t = 0.0
        self.frame = 0
        self.dt = 0.0
        self.viewport_width = 1
        self.viewport_height = 1
        self.resize(viewport_width, viewport_height)
        self.params = params if params is not None else GlobalParams()
        self._audio_level = None

    @property
    def aspect_ratio(self):
        return self.viewport_width / self.viewport_height

    @property
    def center(self):
        return (self.viewport_width / 2.0, self.viewport_height / 2.0)

    def resize(self, width, height):
        if int(width) <= 0 or int(height) <= 0:
            raise ConfigurationError(f"viewport must be positive, got {width}x{height}")
        self.viewport_width = int(width)
        self.viewport_height = int(height)

    def advance(self, dt):
        """Advance the clock by one frame. Called by the Engine only."""
        if dt < 0:
            raise ConfigurationError(f"dt must be >= 0, got {dt}")
        self.dt = float(dt)
        self.t += self.dt
        self.frame += 1

    def time_fields(self):
        return (self.t, self.frame, self.dt)

    def restore_time_fields(self, fields):
        self.t, self.frame, self.dt = fields

    def set_audio_level(self, level):
        """Latest reactive level from the audio collaborator, or None."""
        self._audio_level = None if level is None else max(0.0, float(level))

    @property
    def audio_level(self):
        """Reactive level; 0.0 when audio is off or nothing was supplied."""
        if not self.params.audio_reactive or self._audio_level is None:
            return 0.0
        return self._audio_level
