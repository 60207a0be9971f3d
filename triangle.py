# triangle.py

import math
import numpy as np
from numpy.typing import NDArray
from transform import PlaneCoord, to_pixel_coord

class DegenerateTriangleError(ValueError):
    """A triangle edge has no length, so it has no direction to take a
    normal from."""

class EdgeFunction:
    """
    Signed distance to the infinite line through a and b.

    The normal is the unit tangent (b - a) rotated by +90 degrees:
        n = (-(b.y - a.y), b.x - a.x) / |b - a|
    and the value at u is (u - a) . n. The magnitude is the distance from u
    to the line, the sign says which side of the line u is on.
    """
    __slots__ = ("origin", "normal")

    def __init__(self, a: PlaneCoord, b: PlaneCoord):
        tx = b.x - a.x
        ty = b.y - a.y
        t_norm = math.sqrt(tx * tx + ty * ty)
        if t_norm == 0 or not math.isfinite(t_norm):
            raise DegenerateTriangleError(f"Edge from {a} to {b} has no length")
        self.origin = a
        self.normal = PlaneCoord(-ty / t_norm, tx / t_norm)

    def evaluate(self, u: PlaneCoord) -> float:
        return (u.x - self.origin.x) * self.normal.x + (u.y - self.origin.y) * self.normal.y

    def evaluate_grid(self, X: NDArray[np.float64], Y: NDArray[np.float64]) -> NDArray[np.float64]:
        return (X - self.origin.x) * self.normal.x + (Y - self.origin.y) * self.normal.y

    def __call__(self, u: PlaneCoord) -> float:
        return self.evaluate(u)

class Triangle:
    """
    Three normalized vertices and a normalized (r, g, b) color.

    Coverage is the minimum of the three edge functions a->b, b->c, c->a.
    For a winding like the default scene triangle it is positive inside,
    zero on the boundary and negative outside. Reversing the winding flips
    every edge so nothing is positive any more.
    """
    def __init__(self, a: PlaneCoord, b: PlaneCoord, c: PlaneCoord, color=(1.0, 1.0, 1.0)):
        self.vertices: tuple[PlaneCoord, PlaneCoord, PlaneCoord] = (a, b, c)

        self.color: NDArray[np.float64]  # (3,) in [0, 1]
        self.color = np.array(color, dtype=np.float64)
        if self.color.shape != (3,):
            raise ValueError(f"Color must be an (r, g, b) triple, got {color!r}")
        if np.any(self.color < 0.0) or np.any(self.color > 1.0):
            raise ValueError(f"Color channels must be within [0, 1], got {color!r}")
        self.color.setflags(write=False)

        self.edges = (EdgeFunction(a, b), EdgeFunction(b, c), EdgeFunction(c, a))

    @property
    def centroid(self) -> PlaneCoord:
        a, b, c = self.vertices
        return PlaneCoord((a.x + b.x + c.x) / 3.0, (a.y + b.y + c.y) / 3.0)

    def coverage(self, u: PlaneCoord) -> float:
        ab, bc, ca = self.edges
        return min(ab(u), bc(u), ca(u))

    def coverage_grid(self, X: NDArray[np.float64], Y: NDArray[np.float64]) -> NDArray[np.float64]:
        ab, bc, ca = self.edges
        return np.minimum(np.minimum(ab.evaluate_grid(X, Y), bc.evaluate_grid(X, Y)), ca.evaluate_grid(X, Y))

    def reversed(self) -> "Triangle":
        """Same triangle wound the other way (a, c, b)."""
        a, b, c = self.vertices
        return Triangle(a, c, b, color=self.color)

    def validate(self, width: int, height: int) -> None:
        """Reject triangles with two vertices on the same pixel of a width x height image."""
        pixels = [to_pixel_coord(v, width, height) for v in self.vertices]
        for i in range(3):
            j = (i + 1) % 3
            if pixels[i] == pixels[j]:
                raise DegenerateTriangleError(
                    f"Vertices {self.vertices[i]} and {self.vertices[j]} both land on pixel ({pixels[i].x}, {pixels[i].y})")
