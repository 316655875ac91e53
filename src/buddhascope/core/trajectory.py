"""
Escape-time trajectory generation for z <- z^2 + c.

``generate_trajectory`` is the readable reference. ``escape_length`` and
``replay_and_bin`` are its compiled twins used by the accumulator; they
perform the same floating point operations in the same order, so both paths
agree exactly.
"""

import math

import numba
import numpy as np

from buddhascope.core.complex import ComplexPoint
from buddhascope.core.errors import ConfigurationError

# Compared against the squared magnitude.
ESCAPE_THRESHOLD = 2.0


def generate_trajectory(c: ComplexPoint, budget: int) -> list[ComplexPoint]:
    """
    Iterate c from z = 0 and return its orbit if it escapes.

    Args:
        c: Candidate point.
        budget: Maximum number of iterations (> 0).

    Returns:
        Every iterate up to and including the first one whose squared
        magnitude exceeds ``ESCAPE_THRESHOLD``, or an empty list when the
        candidate is still bounded after ``budget`` iterations.
    """
    if budget <= 0:
        raise ConfigurationError(f"Iteration budget must be positive, got {budget}")

    z = ComplexPoint()
    n = 0
    points = []
    while n < budget and z.sq_magnitude() <= ESCAPE_THRESHOLD:
        z = z * z + c
        n += 1
        points.append(z)

    # Still bounded: presumed inside the set, contributes nothing.
    if n == budget:
        return []
    return points


@numba.njit(cache=True, nogil=True)
def escape_length(cr: float, ci: float, budget: int) -> int:
    """Orbit length for c = (cr, ci), or 0 when it does not escape."""
    zr = 0.0
    zi = 0.0
    n = 0
    while n < budget and zr * zr + zi * zi <= ESCAPE_THRESHOLD:
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci
        n += 1
    if n == budget:
        return 0
    return n


@numba.njit(cache=True, nogil=True)
def replay_and_bin(
    cr: float,
    ci: float,
    length: int,
    counts: np.ndarray,
    min_r: float,
    max_r: float,
    min_i: float,
    max_i: float,
) -> None:
    """Re-run the first ``length`` iterates of c and bin those in the viewport."""
    H = counts.shape[0]
    W = counts.shape[1]
    row_scale = H / (max_r - min_r)
    col_scale = W / (max_i - min_i)
    zr = 0.0
    zi = 0.0
    for _ in range(length):
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci
        if zr < min_r or zr > max_r or zi < min_i or zi > max_i:
            continue
        row = min(int(math.floor((zr - min_r) * row_scale)), H - 1)
        col = min(int(math.floor((zi - min_i) * col_scale)), W - 1)
        counts[row, col] += 1
