"""
Run configuration for the Buddhabrot renderer.

Everything is validated up front; a run either starts with a consistent
configuration or raises ``ConfigurationError`` before any sampling.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from buddhascope.core.complex import ComplexPoint
from buddhascope.core.errors import ConfigurationError
from buddhascope.core.viewport import Viewport

NORMALIZATION_MODES = ("shared", "per_channel")
CHANNEL_NAMES = ("red", "green", "blue")

# Per-pixel sample multiplier used when no explicit sample count is given.
SAMPLES_PER_PIXEL = 100


@dataclass
class ChannelParams:
    """One channel's accumulation parameters."""
    name: str
    iterations: int
    samples: int


def default_channels(width: int, height: int, samples_per_pixel: int = SAMPLES_PER_PIXEL) -> List[ChannelParams]:
    samples = width * height * samples_per_pixel
    return [
        ChannelParams("red", 200, samples),
        ChannelParams("green", 200, samples),
        ChannelParams("blue", 800, samples),
    ]


@dataclass
class BuddhabrotConfig:
    """Complete description of a render."""
    width: int = 200
    height: int = 200
    viewport: Viewport = field(
        default_factory=lambda: Viewport(ComplexPoint(-2.0, -2.0), ComplexPoint(2.0, 2.0))
    )
    channels: List[ChannelParams] = field(default_factory=list)

    # "shared": every channel is divided by the single maximum carried across
    # all three passes. "per_channel": each by its own maximum.
    normalization: str = "shared"
    output_scale: float = 1.0

    # Sampling
    seed: Optional[int] = None
    workers: int = 1
    batch_size: int = 65536

    def __post_init__(self):
        if not self.channels:
            self.channels = default_channels(self.width, self.height)

    def validate(self) -> "BuddhabrotConfig":
        """Raise ``ConfigurationError`` on the first inconsistency found."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if not isinstance(self.viewport, Viewport):
            raise ConfigurationError("viewport must be a Viewport")
        if len(self.channels) != len(CHANNEL_NAMES):
            raise ConfigurationError(
                f"Expected {len(CHANNEL_NAMES)} channels, got {len(self.channels)}"
            )
        names = [ch.name for ch in self.channels]
        if names != list(CHANNEL_NAMES):
            raise ConfigurationError(
                f"Channels must be named {list(CHANNEL_NAMES)} in that order, got {names}"
            )
        for ch in self.channels:
            if ch.iterations <= 0:
                raise ConfigurationError(
                    f"{ch.name}: iteration budget must be positive, got {ch.iterations}"
                )
            if ch.samples < 0:
                raise ConfigurationError(
                    f"{ch.name}: sample count must be non-negative, got {ch.samples}"
                )
        if self.normalization not in NORMALIZATION_MODES:
            raise ConfigurationError(
                f"Unknown normalization mode {self.normalization!r}, "
                f"expected one of {NORMALIZATION_MODES}"
            )
        if self.output_scale <= 0:
            raise ConfigurationError(f"output_scale must be positive, got {self.output_scale}")
        if self.workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {self.workers}")
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        return self

    def channel(self, name: str) -> ChannelParams:
        for ch in self.channels:
            if ch.name == name:
                return ch
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        min_r, min_i, max_r, max_i = self.viewport.as_tuple()
        return {
            "width": self.width,
            "height": self.height,
            "viewport": {"min_r": min_r, "min_i": min_i, "max_r": max_r, "max_i": max_i},
            "channels": [
                {"name": ch.name, "iterations": ch.iterations, "samples": ch.samples}
                for ch in self.channels
            ],
            "normalization": self.normalization,
            "output_scale": self.output_scale,
            "seed": self.seed,
            "workers": self.workers,
        }


# width, height, (red, green, blue) iterations, samples per pixel
PROFILES: Dict[str, Dict[str, Any]] = {
    "preview": {"width": 200, "height": 200, "iterations": (50, 50, 200), "samples_per_pixel": 10},
    "standard": {"width": 200, "height": 200, "iterations": (200, 200, 800), "samples_per_pixel": 100},
    "high": {"width": 800, "height": 800, "iterations": (500, 1000, 5000), "samples_per_pixel": 200},
}


def from_profile(name: str, **overrides) -> BuddhabrotConfig:
    """
    Build a config from a named profile.

    Recognized overrides: ``width``, ``height``, ``samples_per_pixel``,
    ``samples``, ``iterations`` (3-tuple) and any ``BuddhabrotConfig`` field.
    """
    if name not in PROFILES:
        raise ConfigurationError(f"Unknown profile {name!r}, expected one of {sorted(PROFILES)}")
    p = dict(PROFILES[name])
    for key in ("width", "height", "iterations", "samples_per_pixel"):
        if overrides.get(key) is not None:
            p[key] = overrides.pop(key)
        else:
            overrides.pop(key, None)

    samples = overrides.pop("samples", None)
    unknown = set(overrides) - {f.name for f in fields(BuddhabrotConfig)}
    if unknown:
        raise ConfigurationError(f"Unknown config overrides: {sorted(unknown)}")

    if samples is None:
        samples = p["width"] * p["height"] * p["samples_per_pixel"]

    channels = [
        ChannelParams(ch_name, iters, samples)
        for ch_name, iters in zip(CHANNEL_NAMES, p["iterations"])
    ]
    cfg = BuddhabrotConfig(width=p["width"], height=p["height"], channels=channels)
    return replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
