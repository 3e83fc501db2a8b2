import math

import pytest

from mathmesh.spline import (
    evaluate_catmullrom,
    polyline_tangents,
    prepare_loop,
    sample_catmullrom,
)
from mathmesh.vec import length, sub


def _close(a, b, tol=1e-9):
    assert length(sub(a, b)) <= tol


SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


def test_open_curve_hits_end_points():
    samples = sample_catmullrom(SQUARE, 13, closed=False)
    assert len(samples) == 13
    _close(samples[0], SQUARE[0])
    _close(samples[-1], SQUARE[-1])


def test_curve_interpolates_control_points():
    for i, ctrl in enumerate(SQUARE):
        _close(evaluate_catmullrom(SQUARE, i / len(SQUARE), closed=True), ctrl)


def test_closed_curve_returns_to_start():
    _close(evaluate_catmullrom(SQUARE, 1.0, closed=True), SQUARE[0])
    samples = sample_catmullrom(SQUARE, 16, closed=True)
    assert len(samples) == 16
    _close(samples[0], SQUARE[0])
    # the start is not repeated at the end
    assert length(sub(samples[-1], samples[0])) > 1e-3


def test_sample_needs_two_samples():
    with pytest.raises(ValueError):
        sample_catmullrom(SQUARE, 1)
    with pytest.raises(ValueError):
        sample_catmullrom([(0, 0, 0)], 4)


def test_evaluate_empty():
    with pytest.raises(ValueError):
        evaluate_catmullrom([], 0.5)


def test_prepare_loop_drops_duplicates():
    loop = prepare_loop([(0, 0, 0), (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 0)])
    assert loop == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)]


def test_polyline_tangents_on_circle():
    pts = [(math.cos(a), math.sin(a), 0.0)
           for a in (2 * math.pi * k / 12 for k in range(12))]
    for p, t in zip(pts, polyline_tangents(pts, closed=True)):
        # tangent of a circle is perpendicular to its radius
        assert abs(p[0] * t[0] + p[1] * t[1]) < 1e-9
        assert length(t) == pytest.approx(1.0)


def test_polyline_tangents_degenerate():
    tangents = polyline_tangents([(0, 0, 0), (0, 0, 0)])
    assert tangents == [None, None]
