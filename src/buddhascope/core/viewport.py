"""
Viewport geometry and plane-to-grid coordinate mapping.

Rows follow the real axis and columns follow the imaginary axis, so a grid
of shape (height, width) spans [min_r, max_r] top to bottom and
[min_i, max_i] left to right.
"""

import math
from dataclasses import dataclass

from buddhascope.core.complex import ComplexPoint
from buddhascope.core.errors import ConfigurationError


@dataclass(frozen=True)
class Viewport:
    """Rectangular region of the complex plane bounded by two corners."""

    minimum: ComplexPoint
    maximum: ComplexPoint

    def __post_init__(self):
        for name in ("r", "i"):
            lo = getattr(self.minimum, name)
            hi = getattr(self.maximum, name)
            if not (math.isfinite(lo) and math.isfinite(hi)):
                raise ConfigurationError(f"Viewport bounds must be finite, got {lo}..{hi}")
            if hi <= lo:
                raise ConfigurationError(
                    f"Degenerate viewport: {name}-span {lo}..{hi} must be strictly positive"
                )

    @classmethod
    def from_bounds(cls, min_r: float, min_i: float, max_r: float, max_i: float) -> "Viewport":
        return cls(ComplexPoint(float(min_r), float(min_i)), ComplexPoint(float(max_r), float(max_i)))

    @property
    def real_span(self) -> float:
        return self.maximum.r - self.minimum.r

    @property
    def imag_span(self) -> float:
        return self.maximum.i - self.minimum.i

    def contains(self, point: ComplexPoint) -> bool:
        """Closed-interval membership test on both axes."""
        return (
            self.minimum.r <= point.r <= self.maximum.r
            and self.minimum.i <= point.i <= self.maximum.i
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        """(min_r, min_i, max_r, max_i)"""
        return (self.minimum.r, self.minimum.i, self.maximum.r, self.maximum.i)


def row_from_real(real: float, min_r: float, max_r: float, height: int) -> int:
    """
    Map a real coordinate to a grid row.

    The lower bound maps to 0. Values on the upper bound are clamped to the
    last row; anything strictly inside maps below ``height``.
    """
    row = int(math.floor((real - min_r) * (height / (max_r - min_r))))
    return min(row, height - 1)


def col_from_imaginary(imag: float, min_i: float, max_i: float, width: int) -> int:
    """Map an imaginary coordinate to a grid column (see ``row_from_real``)."""
    col = int(math.floor((imag - min_i) * (width / (max_i - min_i))))
    return min(col, width - 1)

