import numpy as np
import pytest

import render
from config import ConfigEntry, global_config
from ppm import encode_ppm, ppm_header
from transform import PlaneCoord, to_pixel_coord
from triangle import DegenerateTriangleError, Triangle

WIDTH = 203
HEIGHT = 203


def _render(triangle, **kwargs):
    renderer = render.Renderer(width=WIDTH, height=HEIGHT, **kwargs)
    renderer.draw_triangle(triangle)
    return renderer


def test_defaults_come_from_config():
    renderer = render.Renderer()
    assert (renderer.width, renderer.height) == (203, 203)
    assert renderer.fragment_shader is render.get_fragment_shader("coverage")
    assert not renderer.image.pixels.any()


@pytest.mark.parametrize("policy", ["coverage", "banded"])
def test_centroid_is_painted_and_far_pixels_stay_black(scene_triangle, is_background, policy):
    pixels = _render(scene_triangle, shading_policy=policy).image.pixels
    center = to_pixel_coord(scene_triangle.centroid, WIDTH, HEIGHT)
    assert pixels[center.y, center.x].tolist() == [255, 255, 255]
    for x, y in [(0, 0), (WIDTH - 1, 0), (0, HEIGHT - 1), (WIDTH - 1, HEIGHT - 1), (5, 100)]:
        assert is_background(pixels, x, y)


def test_coverage_policy_produces_partial_edge_pixels(scene_triangle):
    pixels = _render(scene_triangle, shading_policy="coverage").image.pixels
    red = pixels[..., 0]
    assert np.any((red > 0) & (red < 255))


def test_triangle_color_is_used(scene_triangle):
    a, b, c = scene_triangle.vertices
    pixels = _render(Triangle(a, b, c, color=(1.0, 0.0, 0.5))).image.pixels
    assert pixels[HEIGHT // 2, WIDTH // 2].tolist() == [255, 0, 127]


def test_rendering_is_deterministic(scene_triangle):
    first = encode_ppm(_render(scene_triangle).image)
    second = encode_ppm(_render(scene_triangle).image)
    assert first == second


def test_reversed_winding_changes_coverage(scene_triangle, is_background):
    forward = _render(scene_triangle).image.pixels
    flipped = _render(scene_triangle.reversed()).image.pixels
    assert not np.array_equal(forward, flipped)
    center = to_pixel_coord(scene_triangle.centroid, WIDTH, HEIGHT)
    assert is_background(flipped, center.x, center.y)


@pytest.mark.parametrize("workers", [2, 4, 7])
def test_row_bands_match_sequential_output(scene_triangle, workers):
    sequential = _render(scene_triangle, worker_count=1).image.pixels
    parallel = _render(scene_triangle, worker_count=workers).image.pixels
    assert np.array_equal(sequential, parallel)


def test_row_bands_cover_every_row_once():
    renderer = render.Renderer(width=10, height=10, worker_count=4)
    bands = renderer.row_bands()
    rows = [row for start, end in bands for row in range(start, end)]
    assert rows == list(range(10))


def test_degenerate_triangle_is_rejected_before_drawing():
    tri = Triangle(PlaneCoord(0.0, 0.0), PlaneCoord(0.001, 0.001), PlaneCoord(0.5, 0.5))
    renderer = render.Renderer(width=WIDTH, height=HEIGHT)
    with pytest.raises(DegenerateTriangleError):
        renderer.draw_triangle(tri)
    assert not renderer.image.pixels.any()


def test_background_is_kept_outside(scene_triangle):
    pixels = _render(scene_triangle, background=(10, 20, 30)).image.pixels
    assert pixels[0, 0].tolist() == [10, 20, 30]


def test_draw_point():
    renderer = render.Renderer(width=WIDTH, height=HEIGHT)
    renderer.draw_point(PlaneCoord(0.0, 0.0))
    assert renderer.image[(101, 101)] == (255, 255, 255)
    assert renderer.image.pixels.sum() == 255 * 3
    with pytest.raises(IndexError):
        renderer.draw_point(PlaneCoord(1.5, 0.0))


def test_draw_half_space_fills_positive_side():
    renderer = render.Renderer(width=WIDTH, height=HEIGHT)
    # Line x = 0 pointing down, positive side is x < 0
    renderer.draw_half_space(PlaneCoord(0.0, -1.0), PlaneCoord(0.0, 1.0))
    pixels = renderer.image.pixels
    assert pixels[50, 0].tolist() == [255, 255, 255]
    assert pixels[50, WIDTH - 1].tolist() == [0, 0, 0]
    assert np.all(pixels[:, :100] == 255)
    assert not pixels[:, 102:].any()


def test_main_writes_configured_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "output"
    monkeypatch.setattr(global_config, "output_path", ConfigEntry(str(path), mutable=False))
    assert render.main() == 0

    data = path.read_bytes()
    header = ppm_header(WIDTH, HEIGHT)
    assert data.startswith(b"P6\n203 203\n255\n")
    assert len(data) == len(header) + WIDTH * HEIGHT * 3
    assert f"Successfully wrote to {path}." in capsys.readouterr().out


def test_main_reports_io_failure(tmp_path, monkeypatch, capsys):
    path = tmp_path / "no_such_dir" / "output"
    monkeypatch.setattr(global_config, "output_path", ConfigEntry(str(path), mutable=False))
    assert render.main() == 1
    assert str(path) in capsys.readouterr().err


def test_main_reports_degenerate_triangle(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(global_config, "output_path", ConfigEntry(str(tmp_path / "output"), mutable=False))
    point = PlaneCoord(0.25, 0.25)
    global_config.triangle_vertices.val = (point, point, PlaneCoord(0.0, 0.5))
    assert render.main() == 1
    assert "degenerate" in capsys.readouterr().err
    assert not (tmp_path / "output").exists()


def test_main_prints_profile_when_enabled(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(global_config, "output_path", ConfigEntry(str(tmp_path / "output"), mutable=False))
    global_config.enable_profiler.val = True
    assert render.main() == 0
    out = capsys.readouterr().out
    assert "main: render" in out
    assert "f:draw_triangle" in out


def test_main_shows_preview_when_enabled(tmp_path, monkeypatch):
    monkeypatch.setattr(global_config, "output_path", ConfigEntry(str(tmp_path / "output"), mutable=False))
    global_config.show_preview.val = True
    shown = []
    monkeypatch.setattr(render.debug, "draw_array", lambda image, title=None: shown.append((image.shape, title)))
    assert render.main() == 0
    assert shown == [((HEIGHT, WIDTH, 3), str(tmp_path / "output"))]
