"""Monte Carlo Buddhabrot density renderer."""

from buddhascope.config import BuddhabrotConfig, ChannelParams, from_profile
from buddhascope.core.errors import ConfigurationError
from buddhascope.pipeline import BuddhabrotPipeline, RenderResult

__version__ = "0.1.0"
__all__ = [
    "BuddhabrotConfig",
    "ChannelParams",
    "from_profile",
    "ConfigurationError",
    "BuddhabrotPipeline",
    "RenderResult",
]
