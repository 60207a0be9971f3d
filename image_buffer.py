# image_buffer.py

import numpy as np
from numpy.typing import NDArray
from transform import PixelCoord

class ImageBuffer:
    """
    Fixed size RGB raster, (height, width, 3) uint8, row-major with the
    origin at the top left. Created black and written in place.

    Indexing takes a PixelCoord or an (x, y) tuple and is bounds checked,
    unlike indexing `pixels` directly where negative values wrap around.
    """
    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.pixels: NDArray[np.uint8]  # (H, W, 3)
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def is_bounded(self, coord: PixelCoord | tuple[int, int]) -> bool:
        x, y = _unpack(coord)
        return 0 <= x < self.width and 0 <= y < self.height

    def _checked(self, coord) -> tuple[int, int]:
        if not self.is_bounded(coord):
            raise IndexError(f"Pixel {coord} is outside the {self.width}x{self.height} image")
        return _unpack(coord)

    def __getitem__(self, coord: PixelCoord | tuple[int, int]) -> tuple[int, int, int]:
        x, y = self._checked(coord)
        r, g, b = self.pixels[y, x]
        return (int(r), int(g), int(b))

    def __setitem__(self, coord: PixelCoord | tuple[int, int], color) -> None:
        x, y = self._checked(coord)
        self.pixels[y, x] = _saturate(color)

    def fill(self, color) -> None:
        self.pixels[:] = _saturate(color)

    def tobytes(self) -> bytes:
        """Raw R, G, B bytes, top row first, left to right."""
        return self.pixels.tobytes(order="C")

def _unpack(coord) -> tuple[int, int]:
    if isinstance(coord, PixelCoord):
        return coord.x, coord.y
    x, y = coord
    return int(x), int(y)

def _saturate(color) -> NDArray[np.uint8]:
    rgb = np.asarray(color, dtype=np.float64)
    if rgb.shape != (3,):
        raise ValueError(f"Color must be an (r, g, b) triple, got {color!r}")
    return np.clip(rgb, 0, 255).astype(np.uint8)
