"""
Complex arithmetic for the escape-time iteration.

A small immutable value type rather than Python's ``complex`` so that the
reference trajectory spells out exactly the operations the compiled kernel
performs.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComplexPoint:
    """A point (r, i) on the complex plane."""

    r: float = 0.0
    i: float = 0.0

    def __add__(self, other: "ComplexPoint") -> "ComplexPoint":
        return add(self, other)

    def __mul__(self, other: "ComplexPoint") -> "ComplexPoint":
        return multiply(self, other)

    def sq_magnitude(self) -> float:
        return sq_magnitude(self)

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexPoint":
        return cls(float(value.real), float(value.imag))

    def to_complex(self) -> complex:
        return complex(self.r, self.i)


def add(a: ComplexPoint, b: ComplexPoint) -> ComplexPoint:
    return ComplexPoint(a.r + b.r, a.i + b.i)


def multiply(a: ComplexPoint, b: ComplexPoint) -> ComplexPoint:
    # (a + bi)(c + di) = (ac - bd) + (ad + bc)i
    return ComplexPoint(a.r * b.r - a.i * b.i, a.r * b.i + a.i * b.r)


def sq_magnitude(a: ComplexPoint) -> float:
    return a.r * a.r + a.i * a.i
