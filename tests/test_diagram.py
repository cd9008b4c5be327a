"""Tests for Moody diagram coordinate mapping and curve sampling."""
import math

import pygame
import pytest

import config
from moody.diagram import (
    MoodyDiagram, curve_points, f_to_v, in_range, indicator_position, laminar_line, map_log,
    re_to_u, spread_labels,
)
from moody.flow_state import ROUGHNESS_CURVES, model_frictions, resolve


class TestMapLog:
    def test_endpoints_and_clamping(self):
        assert map_log(10, 10, 1000, 0, 1) == 0
        assert map_log(1000, 10, 1000, 0, 1) == 1
        assert map_log(1, 10, 1000, 0, 1) == 0
        assert map_log(1e6, 10, 1000, 0, 1) == 1

    def test_log_midpoint(self):
        assert map_log(100, 10, 1000, 0, 1) == pytest.approx(0.5)

    def test_reversed_target(self):
        assert map_log(100, 10, 1000, 30, 5) == pytest.approx(17.5)


class TestAxes:
    def test_re_axis(self):
        assert re_to_u(config.Reynolds.MIN) == 0
        assert re_to_u(config.Reynolds.MAX) == 1

    def test_f_axis_top_is_large_friction(self):
        lo, hi = config.Diagram.F_RANGE
        assert f_to_v(hi) == 0
        assert f_to_v(lo) == 1
        assert f_to_v(0.01) < f_to_v(0.005)

    def test_indicator_inside(self):
        pos = indicator_position(2000, 0.008)
        assert pos is not None
        u, v = pos
        assert 0 <= u <= 1 and 0 <= v <= 1

    def test_indicator_outside_or_nan(self):
        assert indicator_position(2000, 0.1) is None
        assert indicator_position(1e5, math.nan) is None
        assert not in_range(0.001)


class TestCurves:
    def test_smooth_curve_sampled_everywhere(self):
        smooth = ROUGHNESS_CURVES[-1]
        assert len(curve_points(smooth, 50)) == 50

    def test_rough_curve_drops_points_out_of_range(self):
        points = curve_points(ROUGHNESS_CURVES[0], 50)
        assert all(0 <= v <= 1 for _, v in points)

    def test_points_are_normalized(self):
        for curve in ROUGHNESS_CURVES:
            for u, v in curve_points(curve, 40):
                assert 0 <= u <= 1 and 0 <= v <= 1

    def test_laminar_line(self):
        (u0, v0), (u1, v1) = laminar_line()
        assert u0 == 0 and u1 > u0
        assert v1 > v0 # 16/Re 는 Re 가 커질수록 감소


class TestSpreadLabels:
    def test_minimum_spacing(self):
        ys = spread_labels([100, 101, 105, 200], 12)
        assert ys == [100, 112, 124, 200]

    def test_sorted_output(self):
        assert spread_labels([50, 10], 12) == [10, 50]


class TestDraw:
    def test_draws_without_error(self):
        surface = pygame.Surface((520, 400))
        flow = resolve(1e5, 0.001)
        results = model_frictions(flow, {"colebrook": True, "igt": True, "aga": True})
        MoodyDiagram().draw(surface, surface.get_rect(), flow, results)
        assert surface.get_at((5, 5))[:3] == config.Color.PANEL
