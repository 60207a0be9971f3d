# transform.py

# Conversions between normalized device coordinates (both axes in [-1, 1])
# and the pixel grid. Row 0 is the top of the image so +y points down in
# both spaces.

import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass

@dataclass(frozen=True, slots=True)
class PixelCoord:
    """Integer (x, y) cell of the image grid."""
    x: int
    y: int

@dataclass(frozen=True, slots=True)
class PlaneCoord:
    """Real valued (x, y) point. Either normalized ([-1,1]) or denormalized
    ([0, dim-1]) depending on where it is used."""
    x: float
    y: float

def _check_dims(width: int, height: int) -> None:
    # (dim - 1) is a divisor below, a single row/column has no extent
    if width < 2 or height < 2:
        raise ValueError(f"Image must be at least 2x2 pixels, got {width}x{height}")

def _to_denormalized(value, dim: int):
    return (value + 1.0) * (dim - 1) / 2.0

def _to_normalized(value, dim: int):
    return value * 2.0 / (dim - 1) - 1.0

def normalized_to_denormalized(coord: PlaneCoord, width: int, height: int) -> PlaneCoord:
    """Map [-1,1] x [-1,1] onto [0, width-1] x [0, height-1]."""
    _check_dims(width, height)
    return PlaneCoord(_to_denormalized(coord.x, width), _to_denormalized(coord.y, height))

def pixel_to_normalized(coord: PixelCoord | PlaneCoord, width: int, height: int) -> PlaneCoord:
    """Inverse of normalized_to_denormalized. Accepts integer pixels or
    fractional pixel positions."""
    _check_dims(width, height)
    return PlaneCoord(_to_normalized(coord.x, width), _to_normalized(coord.y, height))

def to_pixel_coord(coord: PlaneCoord, width: int, height: int, round_nearest=False) -> PixelCoord:
    """
    Find the pixel a normalized point falls on.

    The default truncates toward zero, so (0, 0) lands on ((w-1)//2, (h-1)//2).
    With round_nearest a half pixel bias is added before truncating.
    The result is not clamped; points off the image give out of range pixels.
    """
    denorm = normalized_to_denormalized(coord, width, height)
    bias = 0.5 if round_nearest else 0.0
    return PixelCoord(int(denorm.x + bias), int(denorm.y + bias))

def pixel_grid(width: int, height: int, row_start: int = 0, row_end: int | None = None) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Normalized coordinates of every pixel in rows [row_start, row_end).

    Returns (X, Y), each of shape (rows, width). The arithmetic is the same as
    pixel_to_normalized so the values match it bit for bit.
    """
    _check_dims(width, height)
    if row_end is None:
        row_end = height
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row band [{row_start}, {row_end}) is outside 0..{height}")
    xs = _to_normalized(np.arange(width, dtype=np.float64), width)
    ys = _to_normalized(np.arange(row_start, row_end, dtype=np.float64), height)
    X, Y = np.meshgrid(xs, ys)
    return X, Y
