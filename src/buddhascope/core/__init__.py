"""Sampling and accumulation engine."""

from buddhascope.core.accumulator import ChannelResult, DensityGrid, accumulate
from buddhascope.core.complex import ComplexPoint
from buddhascope.core.errors import ConfigurationError
from buddhascope.core.normalizer import normalize
from buddhascope.core.trajectory import generate_trajectory
from buddhascope.core.viewport import Viewport, col_from_imaginary, row_from_real

__all__ = [
    "ChannelResult",
    "DensityGrid",
    "accumulate",
    "ComplexPoint",
    "ConfigurationError",
    "normalize",
    "generate_trajectory",
    "Viewport",
    "col_from_imaginary",
    "row_from_real",
]
