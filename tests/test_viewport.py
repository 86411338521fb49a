import pytest

from fractalviz import HEIGHT, WIDTH, Direction, ViewportState, pan, pixel_to_complex, zoom_at
from fractalviz.viewport import DEFAULT_ORIGIN_IMAG, DEFAULT_ORIGIN_REAL, DEFAULT_ZOOM, plane_axes


def test_defaults():
    viewport = ViewportState()
    assert viewport.zoom == 100.0
    assert viewport.origin_real == -3.0
    assert viewport.origin_imag == 3.0


def test_canvas_center_maps_to_origin():
    assert pixel_to_complex(ViewportState(), 300, 300) == (0.0, 0.0)


def test_top_left_pixel_and_flipped_imaginary_axis():
    viewport = ViewportState()
    assert pixel_to_complex(viewport, 0, 0) == (-3.0, -3.0)
    _, imag_top = pixel_to_complex(viewport, 0, 0)
    _, imag_bottom = pixel_to_complex(viewport, 0, HEIGHT - 1)
    assert imag_bottom > imag_top


def test_mapping_is_defined_outside_canvas():
    assert pixel_to_complex(ViewportState(), -100, 900) == (-4.0, 6.0)


def test_plane_axes_agree_with_pixel_mapping():
    viewport = ViewportState(zoom=250.0, origin_real=-1.3, origin_imag=0.4)
    xs, ys = plane_axes(viewport)
    assert xs.shape == (WIDTH,)
    assert ys.shape == (HEIGHT,)
    for px, py in [(0, 0), (17, 420), (599, 599)]:
        assert (xs[px], ys[py]) == pixel_to_complex(viewport, px, py)


@pytest.mark.parametrize(
    "direction, real, imag",
    [
        (Direction.UP, -3.0, 4.0),
        (Direction.DOWN, -3.0, 2.0),
        (Direction.LEFT, -4.0, 3.0),
        (Direction.RIGHT, -2.0, 3.0),
    ],
)
def test_pan_moves_a_sixth_of_the_view(direction, real, imag):
    viewport = ViewportState()
    pan(viewport, direction)
    assert viewport.origin_real == pytest.approx(real)
    assert viewport.origin_imag == pytest.approx(imag)
    assert viewport.zoom == DEFAULT_ZOOM


def test_pan_step_scales_with_zoom():
    viewport = ViewportState(zoom=1200.0)
    pan(viewport, Direction.RIGHT)
    assert viewport.origin_real == pytest.approx(DEFAULT_ORIGIN_REAL + WIDTH / 1200.0 / 6)


@pytest.mark.parametrize(
    "forward, back",
    [(Direction.UP, Direction.DOWN), (Direction.LEFT, Direction.RIGHT)],
)
def test_pan_is_reversible(forward, back):
    viewport = ViewportState(zoom=3.7e4, origin_real=-0.7436, origin_imag=-0.1318)
    before = (viewport.origin_real, viewport.origin_imag)
    pan(viewport, forward)
    pan(viewport, back)
    assert viewport.origin_real == pytest.approx(before[0], abs=1e-12)
    assert viewport.origin_imag == pytest.approx(before[1], abs=1e-12)


def test_zoom_at_center_with_same_zoom_is_identity():
    viewport = ViewportState()
    zoom_at(viewport, WIDTH // 2, HEIGHT // 2, viewport.zoom)
    assert viewport.zoom == DEFAULT_ZOOM
    assert viewport.origin_real == pytest.approx(DEFAULT_ORIGIN_REAL)
    assert viewport.origin_imag == pytest.approx(DEFAULT_ORIGIN_IMAG)


def test_zoom_at_centers_the_clicked_point():
    viewport = ViewportState()
    target = pixel_to_complex(viewport, 150, 450)
    zoom_at(viewport, 150, 450, viewport.zoom * 2)
    assert viewport.zoom == 200.0
    center = pixel_to_complex(viewport, WIDTH // 2, HEIGHT // 2)
    assert center == pytest.approx(target)


def test_zoom_in_then_out_at_center_restores_view():
    viewport = ViewportState()
    zoom_at(viewport, 300, 300, viewport.zoom * 2)
    zoom_at(viewport, 300, 300, viewport.zoom / 2)
    assert viewport.zoom == DEFAULT_ZOOM
    assert viewport.origin_real == pytest.approx(DEFAULT_ORIGIN_REAL)
    assert viewport.origin_imag == pytest.approx(DEFAULT_ORIGIN_IMAG)


def test_zoom_uses_old_zoom_for_shift_and_new_zoom_for_recentering():
    viewport = ViewportState()
    zoom_at(viewport, 0, 0, 50.0)
    # +0/100 then -300/50
    assert viewport.origin_real == pytest.approx(-9.0)
    assert viewport.origin_imag == pytest.approx(9.0)


def test_zoom_is_not_clamped():
    viewport = ViewportState()
    for _ in range(60):
        zoom_at(viewport, 300, 300, viewport.zoom * 2)
    assert viewport.zoom == DEFAULT_ZOOM * 2 ** 60


@pytest.mark.parametrize("bad_zoom", [0.0, -1.0, float("nan")])
def test_zoom_rejects_non_positive_zoom(bad_zoom):
    viewport = ViewportState()
    with pytest.raises(ValueError):
        zoom_at(viewport, 10, 10, bad_zoom)
    assert viewport == ViewportState()


def test_reset_and_visible_bounds():
    viewport = ViewportState(zoom=5.0, origin_real=1.0, origin_imag=1.0)
    viewport.reset()
    assert viewport == ViewportState()
    real_min, real_max, imag_min, imag_max = viewport.visible_bounds()
    assert (real_min, imag_min) == (-3.0, -3.0)
    assert real_max == pytest.approx(2.99)
    assert imag_max == pytest.approx(2.99)
