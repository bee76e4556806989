"""
Two dimensional vectors used as element positions.

Instance methods mutate the receiver and return it so calls chain:

    v = Vector2d(3, 4).normalize().scale(10)

The same methods called on the class copy their first argument and leave
every argument untouched:

    w = Vector2d.normalize(v)   # v is unchanged

Degenerate input is not patched: normalizing a zero vector yields NaN
components unless ``strict=True`` is passed.
"""

from __future__ import annotations

import functools
import math
import random
import types
from dataclasses import dataclass
from typing import Any, Iterator


class DegenerateVectorError(ValueError):
    """Raised by strict operations that need a direction from a zero vector."""


class copy_on_class:
    """Mutating method that copies its first argument when called on the class."""

    def __init__(self, func):
        self.func = func
        functools.update_wrapper(self, func)

    def __get__(self, instance, owner=None):
        if instance is not None:
            return types.MethodType(self.func, instance)

        @functools.wraps(self.func)
        def copying(v: "Vector2d", *args, **kwargs):
            return self.func(v.copy(), *args, **kwargs)

        return copying


def json_number(value: float) -> Any:
    """Format a component the way a JavaScript renderer prints it.

    Integral floats become ints (``0`` rather than ``0.0``) and non-finite
    values become ``None`` since JSON has no NaN or Infinity.
    """
    if not math.isfinite(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class Vector2d:
    """A mutable 2D point/vector with value equality."""

    x: float = 0.0
    y: float = 0.0

    # -- arithmetic ----------------------------------------------------------

    @copy_on_class
    def add(self, v: Vector2d) -> Vector2d:
        """Add ``v`` to this vector."""
        self.x += v.x
        self.y += v.y
        return self

    @copy_on_class
    def sub(self, v: Vector2d) -> Vector2d:
        """Subtract ``v`` from this vector."""
        self.x -= v.x
        self.y -= v.y
        return self

    def dot(self, v: Vector2d) -> float:
        return self.x * v.x + self.y * v.y

    @copy_on_class
    def scale(self, n: float) -> Vector2d:
        """Multiply both components by ``n``."""
        self.x *= n
        self.y *= n
        return self

    def mag(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.mag_sq())

    def mag_sq(self) -> float:
        """Squared length; prefer this for comparisons."""
        return self.x ** 2 + self.y ** 2

    @copy_on_class
    def normalize(self, strict: bool = False) -> Vector2d:
        """
        Scale to length one.

        A zero vector has no direction. By default the result is NaN in both
        components, matching IEEE division; with ``strict`` a
        DegenerateVectorError is raised and the vector is left as is.
        """
        m = self.mag()
        if m == 0:
            if strict:
                raise DegenerateVectorError("Cannot normalize a zero-length vector")
            return self.scale(math.inf)
        return self.scale(1 / m)

    @copy_on_class
    def set_mag(self, n: float, strict: bool = False) -> Vector2d:
        """Keep the direction, set the length to ``n``."""
        return self.normalize(strict=strict).scale(n)

    @copy_on_class
    def rotate(self, angle: float) -> Vector2d:
        """Rotate by ``angle`` radians through polar form."""
        r = self.mag()
        v = Vector2d.from_angle(self.angle() + angle).scale(r)
        self.x = v.x
        self.y = v.y
        return self

    def set(self, x: float, y: float) -> Vector2d:
        self.x = x
        self.y = y
        return self

    def copy(self) -> Vector2d:
        return Vector2d(self.x, self.y)

    def angle(self) -> float:
        """Direction in radians, in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    # -- constructors --------------------------------------------------------

    @staticmethod
    def from_angle(angle: float) -> Vector2d:
        """Unit vector pointing at ``angle`` radians."""
        return Vector2d(math.cos(angle), math.sin(angle))

    @staticmethod
    def random() -> Vector2d:
        """Unit vector at a uniformly random angle in [0, 2pi)."""
        return Vector2d.from_angle(random.random() * math.tau)

    @staticmethod
    def from_polar(o: float, r: float) -> Vector2d:
        """Vector of length ``r`` rotated ``o`` radians."""
        return Vector2d.from_angle(o).scale(r)

    @classmethod
    def from_value(cls, value: Any) -> Vector2d:
        """
        Coerce a position given in config or YAML.

        Accepts a Vector2d (copied), an ``[x, y]`` pair, or an ``{x, y}``
        mapping with missing components defaulting to 0.
        """
        if isinstance(value, Vector2d):
            return value.copy()
        if isinstance(value, dict):
            return cls(float(value.get("x", 0)), float(value.get("y", 0)))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(float(value[0]), float(value[1]))
        raise ValueError(f"Cannot read a position from {value!r}")

    # -- serialization -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {"x": json_number(self.x), "y": json_number(self.y)}

    # -- operators -----------------------------------------------------------

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vector2d) -> Vector2d:
        return Vector2d.add(self, other)

    def __sub__(self, other: Vector2d) -> Vector2d:
        return Vector2d.sub(self, other)

    def __mul__(self, n: float) -> Vector2d:
        return Vector2d.scale(self, n)

    def __rmul__(self, n: float) -> Vector2d:
        return Vector2d.scale(self, n)

    def __neg__(self) -> Vector2d:
        return Vector2d.scale(self, -1)

    def __iadd__(self, other: Vector2d) -> Vector2d:
        return self.add(other)

    def __isub__(self, other: Vector2d) -> Vector2d:
        return self.sub(other)

    def __imul__(self, n: float) -> Vector2d:
        return self.scale(n)
