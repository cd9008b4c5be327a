"""Tests for regime classification and the dual-track flow state."""
import math

import numpy as np
import pytest

import config
from moody.correlation import aga_friction, swamee_jain
from moody.flow_state import (
    ROUGHNESS_CURVES, Regime, classify, clamp_reynolds, friction_contribution, igt_friction,
    model_frictions, resolve, snap_roughness,
)


class TestClassify:
    @pytest.mark.parametrize("re", [1000, 1500, 2000, 2300])
    @pytest.mark.parametrize("rho", [0.0, 0.00045, 0.05])
    def test_laminar_independent_of_roughness(self, re, rho):
        result = classify(re, rho)
        assert result.regime is Regime.LAMINAR
        assert result.friction == pytest.approx(16.0 / re)

    def test_continuous_at_laminar_seam(self):
        below = classify(2300, 0.001).friction
        above = classify(2300 + 1e-3, 0.001).friction
        assert above == pytest.approx(below, rel=1e-6)

    def test_transition_blend(self):
        re = 3150
        blend = (re - 2300) / 1700
        expected = 16.0 / re * (1 - blend) + swamee_jain(4000, 0.001) * blend
        result = classify(re, 0.001)
        assert result.regime is Regime.TRANSITION
        assert result.friction == pytest.approx(expected)

    def test_transition_meets_turbulent_branch(self):
        near = classify(4000 - 1e-6, 0.0).friction
        assert near == pytest.approx(swamee_jain(4000, 0.0), rel=1e-6)

    def test_smooth_pipe_never_fully_turbulent(self):
        for re in np.logspace(np.log10(4000), np.log10(config.Reynolds.MAX), 30):
            assert classify(float(re), 0.0).regime is Regime.PARTIALLY_TURBULENT

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            classify(0, 0.001)
        with pytest.raises(ValueError):
            classify(1e5, -1e-4)

    def test_threshold_override(self):
        # 5% 기준이면 완전 난류, 2% 기준이면 아직 부분 난류
        assert classify(15e6, 0.00045).regime is Regime.FULLY_TURBULENT
        assert classify(15e6, 0.00045, threshold=0.02).regime is Regime.PARTIALLY_TURBULENT

    def test_darcy_property(self):
        result = classify(2000, 0.0)
        assert result.darcy == pytest.approx(4 * result.friction)


class TestScenarios:
    def test_laminar_preset(self):
        result = classify(2000, 0.0)
        assert result.regime is Regime.LAMINAR
        assert result.friction == pytest.approx(0.008)

    def test_partially_turbulent_preset(self):
        result = classify(20000, 0.00045)
        assert result.regime is Regime.PARTIALLY_TURBULENT
        assert result.friction == pytest.approx(swamee_jain(20000, 0.00045))

    def test_fully_turbulent_preset(self):
        result = classify(15e6, 0.00045)
        assert result.regime is Regime.FULLY_TURBULENT
        assert result.friction == pytest.approx(aga_friction(0.00045))

    def test_fully_turbulent_is_re_independent(self):
        a = classify(15e6, 0.00045)
        b = classify(config.Reynolds.MAX, 0.00045)
        assert b.regime is Regime.FULLY_TURBULENT
        assert a.friction == b.friction


class TestIGT:
    @pytest.mark.parametrize("re", [4000, 1e5, 1e6, 3e7])
    def test_matches_smooth_classification(self, re):
        assert igt_friction(re) == classify(re, 0.0).friction


class TestContribution:
    def test_laminar_is_all_viscosity(self):
        assert friction_contribution(2000, 0.01) == (100.0, 0.0)

    def test_smooth_is_all_viscosity(self):
        assert friction_contribution(1e6, 0.0) == (100.0, 0.0)

    def test_sums_to_hundred(self):
        c = friction_contribution(1e5, 0.001)
        assert c.viscosity + c.roughness == pytest.approx(100.0)
        assert 0 < c.roughness < 100

    def test_transition_scaled_by_blend(self):
        rho = 0.001
        full = (rho / 3.7) / ((rho / 3.7) + 5.74 / 3000**0.9) * 100
        assert friction_contribution(3000, rho).roughness == pytest.approx(full * 700 / 1700)

    def test_roughness_share_grows_with_re(self):
        assert friction_contribution(1e7, 0.001).roughness > friction_contribution(1e4, 0.001).roughness


class TestSnap:
    def test_catalog_order_and_size(self):
        assert len(ROUGHNESS_CURVES) == 13
        assert ROUGHNESS_CURVES[0].value == 0.05
        assert ROUGHNESS_CURVES[-1].value == 0.0
        assert ROUGHNESS_CURVES[-1].label == "Smooth"

    @pytest.mark.parametrize("rho", [0.0, 3e-5, 0.00045, 0.0011, 0.007, 0.033, 0.2])
    def test_nearest_catalog_value(self, rho):
        curve = snap_roughness(rho)
        assert curve in ROUGHNESS_CURVES
        best = min(abs(c.value - rho) for c in ROUGHNESS_CURVES)
        assert abs(curve.value - rho) == best

    def test_tie_goes_to_first_entry(self):
        assert snap_roughness(0.00005).id == "curve-0_0001"

    def test_exact_value(self):
        assert snap_roughness(0.002).id == "curve-0_002"


class TestResolve:
    def test_dual_track(self):
        flow = resolve(20000, 0.00045)
        assert flow.curve.value == 0.0005
        assert flow.physics.friction == pytest.approx(swamee_jain(20000, 0.00045))
        assert flow.diagram.friction == pytest.approx(swamee_jain(20000, 0.0005))
        assert flow.regime is flow.physics.regime

    def test_clamp_reynolds(self):
        assert clamp_reynolds(10) == config.Reynolds.MIN
        assert clamp_reynolds(1e9) == config.Reynolds.MAX
        assert clamp_reynolds(5e4) == 5e4


class TestModelFrictions:
    ALL = {"colebrook": True, "igt": True, "aga": True}

    def test_laminar_only_colebrook(self):
        results = model_frictions(resolve(2000, 0.001), self.ALL)
        assert [r.key for r in results] == ["colebrook"]
        assert results[0].friction == pytest.approx(0.008)

    def test_turbulent_all_models(self):
        flow = resolve(1e5, 0.001)
        results = {r.key: r for r in model_frictions(flow, self.ALL)}
        assert set(results) == {"colebrook", "igt", "aga"}
        assert results["colebrook"].friction == flow.diagram.friction
        assert results["igt"].friction == igt_friction(1e5)
        assert results["aga"].friction == aga_friction(flow.curve.value)
        assert results["aga"].darcy == pytest.approx(4 * results["aga"].friction)

    def test_smooth_pipe_skips_aga(self):
        results = model_frictions(resolve(1e5, 0.0), self.ALL)
        assert "aga" not in [r.key for r in results]
        assert all(math.isfinite(r.friction) for r in results)

    def test_inactive_models_hidden(self):
        results = model_frictions(resolve(1e5, 0.001), config.DEFAULT_MODELS)
        assert [r.key for r in results] == ["colebrook"]
