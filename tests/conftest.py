import matplotlib

# No display during tests
matplotlib.use("Agg")

import pytest

import profiler
from config import global_config
from transform import PlaneCoord
from triangle import Triangle


@pytest.fixture(autouse=True)
def _clean_globals():
    yield
    global_config.reset_defaults()
    profiler.enabled_profiler = False
    profiler._profile_accumulators.clear()


@pytest.fixture
def scene_triangle():
    return Triangle(PlaneCoord(0.0, -0.5), PlaneCoord(0.5, 0.0), PlaneCoord(-0.5, 0.5))


@pytest.fixture
def is_background():
    def check(pixels, x, y, background=(0, 0, 0)):
        return tuple(int(c) for c in pixels[y, x]) == tuple(background)
    return check
