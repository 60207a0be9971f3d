#!/usr/bin/python
# render.py

# Renders a single anti-aliased triangle into an RGB buffer and writes it out
# as a binary PPM file.
# Each triangle edge becomes a signed distance function. The minimum of the
# three is the distance to the triangle's boundary (positive inside), and the
# fragment shader turns that into a color. Pixels close to an edge get a
# partial color instead of a hard step.
#
# Settings live in config.py. There are no command line arguments.

import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Tuple

import numpy as np
from numpy.typing import NDArray

import debug
import profiler
from profiler import Profiler
from config import global_config
from image_buffer import ImageBuffer
from ppm import PPMWriteError, write_ppm
from shaders import FragmentInput, get_fragment_shader, pixel_width
from transform import PlaneCoord, pixel_grid, to_pixel_coord
from triangle import DegenerateTriangleError, EdgeFunction, Triangle

render_config = global_config

# ========== Common Colors ==========
COLOR_BLACK = (0, 0, 0)
COLOR_WHITE = (255, 255, 255)

SignedDistanceFn = Callable[[NDArray[np.float64], NDArray[np.float64]], NDArray[np.float64]]

class Renderer:
    def __init__(self, width=None, height=None, shading_policy=None, worker_count=None, background=None) -> None:
        self.width = width if width is not None else render_config.image_width.val
        self.height = height if height is not None else render_config.image_height.val
        policy = shading_policy if shading_policy is not None else render_config.shading_policy.val
        self.fragment_shader = get_fragment_shader(policy)
        self.worker_count = worker_count if worker_count is not None else render_config.worker_count.val
        if self.worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {self.worker_count}")
        self.background = background if background is not None else render_config.background_color.val
        # Half width of the anti-aliasing band, in normalized units
        self.pixel_width = pixel_width(self.width, self.height)
        self.create_empty_rgb_buffer()

    def create_empty_rgb_buffer(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2 pixels, got {self.width}x{self.height}")
        self.image = ImageBuffer(self.width, self.height)
        self.image.fill(self.background)

    def draw_point(self, coord: PlaneCoord, color: Tuple[int, int, int] = COLOR_WHITE) -> None:
        """Set the single pixel under a normalized point. Raises IndexError off the image."""
        self.image[to_pixel_coord(coord, self.width, self.height)] = color

    @Profiler.timed()
    def draw_half_space(self, a: PlaneCoord, b: PlaneCoord, color=(1.0, 1.0, 1.0)) -> None:
        """Shade everything on the positive side of the line a->b."""
        edge = EdgeFunction(a, b)
        self.rasterize(edge.evaluate_grid, np.array(color, dtype=np.float64))

    @Profiler.timed()
    def draw_triangle(self, triangle: Triangle) -> None:
        triangle.validate(self.width, self.height)
        self.rasterize(triangle.coverage_grid, triangle.color)

    def row_bands(self) -> list[Tuple[int, int]]:
        """Split the rows into worker_count contiguous, non-overlapping bands."""
        bands = min(self.worker_count, self.height)
        edges = np.linspace(0, self.height, bands + 1).astype(int)
        return [(int(start), int(end)) for start, end in zip(edges[:-1], edges[1:]) if end > start]

    def rasterize(self, signed_distance: SignedDistanceFn, color: NDArray[np.float64]) -> None:
        bands = self.row_bands()
        if len(bands) == 1:
            self._rasterize_rows(signed_distance, color, *bands[0])
            return
        # Rows are independent and the bands don't overlap, so the workers
        # never touch the same part of the buffer.
        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            futures = [pool.submit(self._rasterize_rows, signed_distance, color, start, end) for start, end in bands]
            for future in futures:
                future.result()  # re-raise anything a worker hit

    def _rasterize_rows(self, signed_distance: SignedDistanceFn, color: NDArray[np.float64], row_start: int, row_end: int) -> None:
        X, Y = pixel_grid(self.width, self.height, row_start, row_end)
        distance = signed_distance(X, Y)
        sub_rgb = self.image.pixels[row_start:row_end]  # view, writes land in the image
        fragment = self.fragment_shader(FragmentInput(distance, sub_rgb, color, self.pixel_width))
        sub_rgb[fragment.update_mask] = fragment.rgb[fragment.update_mask]

def main() -> int:
    """Render the configured triangle and write it out. Returns the exit status."""
    profiler.enabled_profiler = render_config.enable_profiler.val
    output_path = render_config.output_path.val
    try:
        Profiler.profile_accumulate_start("main: render")
        renderer = Renderer()
        triangle = Triangle(*render_config.triangle_vertices.val, color=render_config.triangle_color.val)
        renderer.draw_triangle(triangle)
        Profiler.profile_accumulate_end("main: render")

        Profiler.profile_accumulate_start("main: write")
        write_ppm(renderer.image, output_path)
        Profiler.profile_accumulate_end("main: write")
    except DegenerateTriangleError as why:
        print(f"Refusing to render a degenerate triangle: {why}", file=sys.stderr)
        return 1
    except PPMWriteError as why:
        print(f"Failed to write image to {output_path}: {why}", file=sys.stderr)
        return 1

    Profiler.profile_accumulate_report()
    if render_config.show_preview.val:
        debug.draw_array(renderer.image.pixels, title=str(output_path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
