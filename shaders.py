# shaders.py

import math
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from typing import Callable
from profiler import Profiler

SHADING_BANDED = "banded"
SHADING_COVERAGE = "coverage"

def pixel_width(width: int, height: int) -> float:
    """Half width of the anti-aliasing band in plane units: the reciprocal of
    the image diagonal measured in pixels."""
    return 1.0 / math.sqrt(height * height + width * width)

@dataclass(slots=True)
class FragmentInput:
    """Everything a fragment shader gets for one band of rows."""
    signed_distance: NDArray[np.float64]  # (H, W)
    """Minimum edge value per pixel. Positive inside, negative outside."""
    background: NDArray[np.uint8]         # (H, W, 3)
    """What is currently in the image buffer under these pixels."""
    color: NDArray[np.float64]            # (3,)
    """Target color, normalized to [0, 1]."""
    pixel_width: float

@dataclass(slots=True)
class FragmentOutput:
    rgb: NDArray[np.uint8]          # (H, W, 3)
    update_mask: NDArray[np.bool_]  # (H, W) which pixels to write back

def to_channel_bytes(rgb: NDArray[np.float64]) -> NDArray[np.uint8]:
    # Clip first, a plain astype would wrap around
    return np.clip(rgb, 0, 255).astype(np.uint8)

@Profiler.timed()
def banded_fragment_shader(f: FragmentInput) -> FragmentOutput:
    """
    Hard fill with a thin gray seam.

    * d > pw: full target color.
    * -pw < d <= pw: gray level 128 + trunc(d * 128), tinted by the target.
    * Everything else is left alone.
    """
    d = f.signed_distance
    pw = f.pixel_width
    inside = d > pw
    band = ~inside & (d > -pw)

    rgb = np.empty(d.shape + (3,), dtype=np.float64)
    rgb[inside] = f.color * 255.0
    intensity = 128.0 + np.trunc(d[band] * 128.0)
    rgb[band] = intensity[:, np.newaxis] * f.color
    rgb[~(inside | band)] = f.background[~(inside | band)]
    return FragmentOutput(to_channel_bytes(rgb), inside | band)

@Profiler.timed()
def coverage_fragment_shader(f: FragmentInput) -> FragmentOutput:
    """
    Blend the target color over the background by coverage.

    coverage = clamp(d / (2 * pw) + 0.5, 0, 1), which is 0 below -pw, 1 above
    +pw and linear in between. Pixels with zero coverage keep their value.
    """
    coverage = np.clip(f.signed_distance / (2.0 * f.pixel_width) + 0.5, 0.0, 1.0)
    c = coverage[..., np.newaxis]
    rgb = f.background.astype(np.float64) * (1.0 - c) + (f.color * 255.0) * c
    return FragmentOutput(to_channel_bytes(rgb), coverage > 0.0)

FRAGMENT_SHADERS: dict[str, Callable[[FragmentInput], FragmentOutput]] = {
    SHADING_BANDED: banded_fragment_shader,
    SHADING_COVERAGE: coverage_fragment_shader,
}

def get_fragment_shader(policy: str) -> Callable[[FragmentInput], FragmentOutput]:
    try:
        return FRAGMENT_SHADERS[policy]
    except KeyError:
        raise ValueError(f"Unknown shading policy {policy!r}, expected one of {sorted(FRAGMENT_SHADERS)}") from None
