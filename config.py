# config.py

from typing import Callable, Generic, Optional, TypeVar

from shaders import FRAGMENT_SHADERS, SHADING_COVERAGE
from transform import PlaneCoord

T = TypeVar('T')

class ConfigEntry(Generic[T]):
    def __init__(self, default_val: T, name=None, mutable=True, validator: Optional[Callable[[T], None]] = None):
        self._mutable = True  # Allow it to be mutable at the start
        if name is None:
            name = f"UnnamedConfigEntry_{id(self)}"
        self.name = name
        self._validator = validator
        self.val = default_val
        self._mutable = mutable  # Then decide whether to remain mutable

    @property
    def val(self) -> T:
        return self._val

    @val.setter
    def val(self, new_val: T):
        if not self._mutable:
            raise AttributeError(f"{self.name} is immutable")
        if self._validator is not None:
            self._validator(new_val)
        self._val = new_val

def _image_dimension(value: int) -> None:
    # The normalized <-> pixel mapping divides by (dim - 1)
    if not isinstance(value, int) or value < 2:
        raise ValueError(f"Image dimensions must be integers >= 2, got {value!r}")

def _shading_policy(value: str) -> None:
    if value not in FRAGMENT_SHADERS:
        raise ValueError(f"Unknown shading policy {value!r}, expected one of {sorted(FRAGMENT_SHADERS)}")

def _worker_count(value: int) -> None:
    if not isinstance(value, int) or value < 1:
        raise ValueError(f"worker_count must be a positive integer, got {value!r}")

class Config:
    def __init__(self):
        # Everything the renderer needs is set here. There are no command line
        # arguments or environment variables.

        # === Output settings ===
        # These are fixed at startup. Renderer() and main() read them once.
        self.image_width = ConfigEntry(203, name="image_width", mutable=False, validator=_image_dimension)
        self.image_height = ConfigEntry(203, name="image_height", mutable=False, validator=_image_dimension)
        self.output_path = ConfigEntry("output", name="output_path", mutable=False)

        # === Scene ===
        # Vertices are normalized device coordinates, +y is down.
        self.triangle_vertices = ConfigEntry(
            (PlaneCoord(0.0, -0.5), PlaneCoord(0.5, 0.0), PlaneCoord(-0.5, 0.5)),
            name="triangle_vertices")
        self.triangle_color = ConfigEntry((1.0, 1.0, 1.0), name="triangle_color")  # normalized RGB
        self.background_color = ConfigEntry((0, 0, 0), name="background_color")  # 0-255 RGB

        # === Rendering toggles ===
        self.shading_policy = ConfigEntry(SHADING_COVERAGE, name="shading_policy", validator=_shading_policy)
        self.worker_count = ConfigEntry(1, name="worker_count", validator=_worker_count)  # >1 splits rows across threads

        # === Debug ===
        self.show_preview = ConfigEntry(False, name="show_preview")  # matplotlib window after writing
        self.enable_profiler = ConfigEntry(False, name="enable_profiler")

    def reset_defaults(self):
        """Resets all configs to their default values."""
        self.__init__()  # Simple way to restore defaults


# Global instance
global_config = Config()
