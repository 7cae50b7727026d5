"""Canvas-style context over cairo surfaces (pixel-level checks).

Run:
    pytest tests/test_canvas.py -v
"""

import math

import pygame
import pytest

from render.canvas import IDENTITY, Canvas


@pytest.fixture
def canvas():
    return Canvas(200, 100)


def _solid(canvas, color=(10, 20, 30)):
    ctx = canvas.get_context()
    ctx.fill_style = color
    ctx.fill_rect(0, 0, canvas.width, canvas.height)


def test_default_canvas_size():
    c = Canvas()
    assert (c.width, c.height) == (300, 150)
    assert c.to_pygame().get_size() == (300, 150)


def test_get_context_is_stable(canvas):
    assert canvas.get_context() is canvas.get_context()


def test_buffer_resize_resets_state(canvas):
    ctx = canvas.get_context()
    ctx.scale(2, 2)
    ctx.fill_style = "red"
    ctx.save()
    canvas.width = 400
    assert ctx.get_transform() == IDENTITY
    assert ctx.fill_style == "#000000"
    assert (canvas.surface.get_width(), canvas.surface.get_height()) == (400, 100)
    # the old save() no longer pairs with anything
    ctx.restore()
    assert ctx.get_transform() == IDENTITY


def test_buffer_resize_clears_pixels(canvas):
    _solid(canvas)
    canvas.height = 100
    assert canvas.to_pygame().get_at((5, 5)).a == 0


def test_negative_buffer_size_clamps(canvas):
    canvas.height = -5
    assert canvas.height == 0
    assert canvas.to_pygame().get_size() == (200, 0)


def test_fill_circle_under_scale(canvas):
    ctx = canvas.get_context()
    ctx.scale(2, 2)
    ctx.begin_path()
    ctx.arc(50, 25, 4, 0, 2 * math.pi)
    ctx.fill_style = "#ff0000"
    ctx.fill()

    s = canvas.to_pygame()
    assert tuple(s.get_at((100, 50))) == (255, 0, 0, 255)
    assert s.get_at((100 + 6, 50)).a == 255  # radius is 8 device px
    assert s.get_at((100 + 12, 50)).a == 0
    assert s.get_at((0, 0)).a == 0


def test_fill_keeps_path_for_stroke(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(50, 50, 20, 0, 2 * math.pi)
    ctx.fill_style = "#0000ff"
    ctx.fill()
    ctx.stroke_style = "#ffffff"
    ctx.line_width = 4
    ctx.stroke()
    s = canvas.to_pygame()
    assert tuple(s.get_at((50, 50)))[:3] == (0, 0, 255)
    assert tuple(s.get_at((70, 50)))[:3] == (255, 255, 255)


def test_path_points_capture_transform_at_add_time(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.translate(10, 20)
    ctx.move_to(0, 0)
    ctx.translate(100, 100)
    ctx.line_to(0, 0)
    assert ctx.path_points() == [[(10.0, 20.0), (110.0, 120.0)]]


def test_rotate_then_translate(canvas):
    ctx = canvas.get_context()
    ctx.translate(50, 50)
    ctx.rotate(math.pi / 2)
    ctx.begin_path()
    ctx.move_to(0, 0)
    ctx.line_to(10, 0)
    (x, y) = ctx.path_points()[0][-1]
    assert x == pytest.approx(50.0, abs=0.01)
    assert y == pytest.approx(60.0, abs=0.01)


def test_save_restore_round_trip(canvas):
    ctx = canvas.get_context()
    ctx.fill_style = "blue"
    ctx.line_width = 3
    ctx.save()
    ctx.translate(5, 5)
    ctx.fill_style = "red"
    ctx.line_width = 7
    ctx.restore()
    assert ctx.get_transform() == IDENTITY
    assert ctx.fill_style == "blue"
    assert ctx.line_width == 3


def test_unbalanced_restore_is_harmless(canvas):
    ctx = canvas.get_context()
    ctx.restore()
    assert ctx.get_transform() == IDENTITY


@pytest.mark.parametrize("bad", [0, -1, float("nan"), float("inf")])
def test_line_width_ignores_junk(canvas, bad):
    ctx = canvas.get_context()
    ctx.line_width = 2
    ctx.line_width = bad
    assert ctx.line_width == 2


@pytest.mark.parametrize("call, args", [
    ("translate", (float("nan"), 0.0)),
    ("rotate", (float("inf"),)),
    ("scale", (0.0, 1.0)),
    ("set_transform", (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)),
])
def test_unusable_transforms_are_ignored(canvas, call, args):
    ctx = canvas.get_context()
    ctx.translate(3, 4)
    getattr(ctx, call)(*args)
    assert ctx.get_transform() == (1.0, 0.0, 0.0, 1.0, 3.0, 4.0)
    # the context keeps working afterwards
    ctx.begin_path()
    ctx.arc(20, 20, 5, 0, 2 * math.pi)
    ctx.fill_style = "red"
    ctx.fill()
    assert canvas.to_pygame().get_at((23, 24)).a == 255


def test_non_finite_path_arguments_are_ignored(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.move_to(1, 1)
    ctx.line_to(float("nan"), 5)
    ctx.arc(float("inf"), 0, 3, 0, math.pi)
    ctx.line_to(4, 1)
    assert ctx.path_points() == [[(1.0, 1.0), (4.0, 1.0)]]


def test_arc_half_turn_ends_opposite(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(0, 0, 10, 0, math.pi)
    pts = ctx.path_points()[0]
    assert pts[0] == pytest.approx((10.0, 0.0), abs=0.01)
    assert pts[-1][0] == pytest.approx(-10.0, abs=0.01)
    assert pts[-1][1] == pytest.approx(0.0, abs=0.01)
    # clockwise in screen space: passes through +y
    assert max(p[1] for p in pts) == pytest.approx(10.0, abs=0.5)


def test_anticlockwise_arc_goes_the_other_way(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(0, 0, 10, 0, math.pi, True)
    pts = ctx.path_points()[0]
    assert min(p[1] for p in pts) == pytest.approx(-10.0, abs=0.5)


def test_ellipse_radii_and_rotation(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.ellipse(100, 50, 40, 10, math.pi / 2, 0, 2 * math.pi)
    pts = ctx.path_points()[0]
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    # rotated a quarter turn: tall and narrow
    assert max(ys) - min(ys) == pytest.approx(80.0, abs=0.5)
    assert max(xs) - min(xs) == pytest.approx(20.0, abs=0.5)


@pytest.mark.parametrize("radius", [0, -3, -1e9])
def test_degenerate_radius_does_not_raise(canvas, radius):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(20, 20, radius, 0, 2 * math.pi)
    ctx.ellipse(20, 20, radius, radius * 0.6, 0, 0, 2 * math.pi)
    ctx.fill_style = "red"
    ctx.fill()
    ctx.stroke()
    for p in ctx.path_points()[0]:
        assert p == pytest.approx((20.0, 20.0))


def test_quadratic_curve_without_current_point(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.quadratic_curve_to(5, 5, 10, 0)
    pts = ctx.path_points()[0]
    assert pts[0] == (5.0, 5.0)
    assert pts[-1] == pytest.approx((10.0, 0.0), abs=0.01)


def test_quadratic_curve_apex(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.move_to(0, 0)
    ctx.quadratic_curve_to(10, 20, 20, 0)
    pts = ctx.path_points()[0]
    # B(0.5) = 0.25*P0 + 0.5*C + 0.25*P1 = (10, 10), the curve's extreme
    assert max(p[1] for p in pts) == pytest.approx(10.0, abs=0.2)
    assert pts[-1] == pytest.approx((20.0, 0.0), abs=0.01)


def test_close_path_starts_next_subpath_at_origin(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.move_to(1, 1)
    ctx.line_to(5, 1)
    ctx.line_to(5, 5)
    ctx.close_path()
    ctx.line_to(9, 9)
    first, second = ctx.path_points()
    assert first == [(1.0, 1.0), (5.0, 1.0), (5.0, 5.0)]
    assert second == [(1.0, 1.0), (9.0, 9.0)]


def test_overlapping_subpaths_fill_nonzero(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(50, 50, 30, 0, 2 * math.pi)
    ctx.arc(50, 50, 10, 0, 2 * math.pi, True)
    ctx.fill_style = "red"
    ctx.fill()
    s = canvas.to_pygame()
    assert s.get_at((50, 50 + 20)).a == 255
    # opposite winding cancels out
    assert s.get_at((50, 50)).a == 0


def test_stroke_draws_outline_only(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.move_to(10, 10)
    ctx.line_to(90, 10)
    ctx.line_to(90, 90)
    ctx.line_to(10, 90)
    ctx.close_path()
    ctx.stroke_style = "#00ff00"
    ctx.line_width = 2
    ctx.stroke()
    s = canvas.to_pygame()
    assert any(tuple(s.get_at((50, y)))[:3] == (0, 255, 0) for y in (9, 10, 11))
    assert s.get_at((50, 50)).a == 0


def test_stroke_width_follows_scale(canvas):
    ctx = canvas.get_context()
    ctx.scale(3, 3)
    ctx.begin_path()
    ctx.move_to(0, 10)
    ctx.line_to(60, 10)
    ctx.line_width = 2
    ctx.stroke_style = "white"
    ctx.stroke()
    s = canvas.to_pygame()
    # 2 logical px -> 6 device px around y = 30
    column = [s.get_at((90, y)).a for y in range(20, 41)]
    assert column.count(255) >= 5
    assert s.get_at((90, 30)).a == 255
    assert s.get_at((90, 40)).a == 0


def test_fill_unknown_color_raises(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.arc(10, 10, 5, 0, 2 * math.pi)
    ctx.fill_style = "not-a-color"
    with pytest.raises(ValueError):
        ctx.fill()


def test_fill_rect_leaves_path_alone(canvas):
    ctx = canvas.get_context()
    ctx.begin_path()
    ctx.move_to(1, 1)
    ctx.line_to(2, 2)
    ctx.fill_style = "red"
    ctx.fill_rect(0, 0, 10, 10)
    assert ctx.path_points() == [[(1.0, 1.0), (2.0, 2.0)]]
    assert tuple(canvas.to_pygame().get_at((5, 5))) == (255, 0, 0, 255)


def test_clear_rect_axis_aligned(canvas):
    _solid(canvas)
    ctx = canvas.get_context()
    ctx.scale(2, 2)
    ctx.clear_rect(0, 0, 10, 10)
    s = canvas.to_pygame()
    assert s.get_at((0, 0)).a == 0
    assert s.get_at((19, 19)).a == 0
    assert s.get_at((21, 21)).a == 255


def test_clear_rect_rotated(canvas):
    _solid(canvas)
    ctx = canvas.get_context()
    ctx.translate(100, 50)
    ctx.rotate(math.pi / 4)
    ctx.clear_rect(-10, -10, 20, 20)
    s = canvas.to_pygame()
    assert s.get_at((100, 50)).a == 0
    assert s.get_at((0, 0)).a == 255


def test_to_pygame_channel_order(canvas):
    _solid(canvas, (10, 20, 30))
    px = canvas.to_pygame().get_at((3, 3))
    assert (px.r, px.g, px.b, px.a) == (10, 20, 30, 255)


def test_to_pygame_is_a_copy(canvas):
    before = canvas.to_pygame()
    _solid(canvas)
    assert before.get_at((3, 3)).a == 0
    assert isinstance(before, pygame.Surface)
