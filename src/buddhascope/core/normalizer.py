"""Rescaling of raw visit counts into a bounded output range."""

import numpy as np

from buddhascope.core.accumulator import DensityGrid
from buddhascope.core.errors import ConfigurationError


def normalize(grid: DensityGrid, max_value: float, output_scale: float = 1.0) -> np.ndarray:
    """
    Linearly map counts onto [0, output_scale].

    Args:
        grid: Finished density grid.
        max_value: Count that maps to ``output_scale``.
        output_scale: Upper end of the output range.

    Returns:
        (H, W) float32 array. All zeros when ``max_value`` is 0.
    """
    if max_value < 0:
        raise ConfigurationError(f"max_value must be non-negative, got {max_value}")
    if output_scale <= 0:
        raise ConfigurationError(f"output_scale must be positive, got {output_scale}")

    if max_value == 0:
        return np.zeros(grid.shape, dtype=np.float32)

    out = grid.counts.astype(np.float64) * output_scale / max_value
    return np.clip(out, 0.0, output_scale).astype(np.float32)
