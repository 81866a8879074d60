"""
Tests for the eclipse geometry and the cached illumination estimate.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from solar_torque.orbital.eclipse_calculator import (
    EclipseCalculator,
    IlluminationEstimator,
    IlluminationState,
)
from solar_torque.config.spacecraft_config import IlluminationConfig
from solar_torque.exceptions import DegenerateInputError


AU = 1.495978707e11
R_EARTH = 6378137.0
R_ORBIT = 7.0e6
SUN = np.array([1.0, 0.0, 0.0])
EARTH_ANGLE = np.arcsin(R_EARTH / R_ORBIT)
SUN_ANGLE = np.arcsin(6.96340e8 / AU)


def position_at(angle):
    """Position on the night side, `angle` away from the anti-Sun direction"""
    return R_ORBIT * np.array([-np.cos(angle), np.sin(angle), 0.0])


SUNLIT = np.array([R_ORBIT, 0.0, 0.0])
UMBRA = np.array([-R_ORBIT, 0.0, 0.0])
PENUMBRA = position_at(EARTH_ANGLE)


class TestEclipseCalculator:
    """Test the geometric shadow function"""

    def test_full_sun(self):
        calc = EclipseCalculator()
        assert calc.shadow_factor(SUNLIT, SUN, AU) == 1.0

    def test_umbra(self):
        calc = EclipseCalculator()
        assert calc.shadow_factor(UMBRA, SUN, AU) == 0.0

    def test_penumbra_is_partial(self):
        """Earth limb through the middle of the Sun disk hides about half of it"""
        calc = EclipseCalculator()
        psi = calc.shadow_factor(PENUMBRA, SUN, AU)
        assert 0.0 < psi < 1.0
        assert 0.4 < psi < 0.6

    def test_exit_from_shadow_is_monotonic(self):
        calc = EclipseCalculator()
        angles = EARTH_ANGLE + SUN_ANGLE * np.linspace(-1.5, 1.5, 13)
        psis = np.array([calc.shadow_factor(position_at(a), SUN, AU) for a in angles])

        assert psis[0] == 0.0
        assert psis[-1] == 1.0
        assert np.all(np.diff(psis) >= -1e-12)

    def test_resolution_converges(self):
        coarse = EclipseCalculator(resolution=50).shadow_factor(PENUMBRA, SUN, AU)
        fine = EclipseCalculator(resolution=2000).shadow_factor(PENUMBRA, SUN, AU)
        assert abs(coarse - fine) < 0.02

    def test_angular_geometry(self):
        calc = EclipseCalculator()
        sun_radius, earth_radius, separation = calc.angular_geometry(UMBRA, SUN, AU)

        assert earth_radius == pytest.approx(EARTH_ANGLE)
        assert sun_radius == pytest.approx(SUN_ANGLE, rel=1e-4)
        assert separation == pytest.approx(0.0, abs=1e-6)

    def test_atmosphere_widens_shadow(self):
        plain = EclipseCalculator().shadow_factor(PENUMBRA, SUN, AU)
        refracted = EclipseCalculator(use_atmosphere=True).shadow_factor(PENUMBRA, SUN, AU)
        assert refracted < plain

    def test_degenerate_inputs(self):
        calc = EclipseCalculator()
        with pytest.raises(DegenerateInputError):
            calc.shadow_factor(np.zeros(3), SUN, AU)
        with pytest.raises(DegenerateInputError):
            calc.shadow_factor(SUNLIT, np.zeros(3), AU)
        with pytest.raises(DegenerateInputError):
            calc.shadow_factor(SUNLIT, SUN, 0.0)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            EclipseCalculator(resolution=0)

    def test_classify(self):
        assert EclipseCalculator.classify(1.0) == "none"
        assert EclipseCalculator.classify(0.0) == "umbra"
        assert EclipseCalculator.classify(0.3) == "penumbra"


def _recompute_steps(estimator, position, steps):
    """Steps at which the estimator evaluated the shadow function"""
    state = IlluminationState()
    recomputed = []
    for step in steps:
        evaluations = state.evaluations
        _, state = estimator.evaluate(state, position, SUN, AU, step)
        if state.evaluations > evaluations:
            recomputed.append(step)
    return recomputed


class TestIlluminationEstimator:
    """Test the re-evaluation schedule"""

    def test_full_sun_schedule(self):
        estimator = IlluminationEstimator()
        assert _recompute_steps(estimator, SUNLIT, range(1, 26)) == [1, 2, 20]

    def test_umbra_schedule(self):
        estimator = IlluminationEstimator()
        assert _recompute_steps(estimator, UMBRA, range(1, 42)) == [1, 2, 20, 40]

    def test_penumbra_schedule(self):
        estimator = IlluminationEstimator()
        assert _recompute_steps(estimator, PENUMBRA, range(1, 21)) == [1, 4, 8, 12, 16, 20]

    def test_penumbra_start_skips_second_startup_step(self):
        estimator = IlluminationEstimator()
        state = IlluminationState()

        _, state = estimator.evaluate(state, PENUMBRA, SUN, AU, 1)
        assert 0.0 < state.psi < 1.0
        assert not estimator.needs_update(state, 2)
        assert estimator.needs_update(state, 4)

    def test_penumbra_settling_to_full_sun(self):
        """Leaving penumbra switches from the 4-step to the 20-step cadence"""
        estimator = IlluminationEstimator()
        state = IlluminationState()
        recomputed = []
        psi_by_step = {}

        for step in range(1, 42):
            position = PENUMBRA if step < 10 else SUNLIT
            evaluations = state.evaluations
            psi, state = estimator.evaluate(state, position, SUN, AU, step)
            psi_by_step[step] = psi
            if state.evaluations > evaluations:
                recomputed.append(step)

        assert recomputed == [1, 4, 8, 12, 20, 40]
        # Partial value is held until the step-12 re-evaluation
        assert 0.0 < psi_by_step[11] < 1.0
        assert psi_by_step[12] == 1.0

    def test_full_sun_entering_penumbra(self):
        """Penumbra is picked up at the next 20-step re-evaluation, then tracked every 4 steps"""
        estimator = IlluminationEstimator()
        state = IlluminationState()
        recomputed = []

        for step in range(1, 30):
            position = SUNLIT if step < 3 else PENUMBRA
            evaluations = state.evaluations
            _, state = estimator.evaluate(state, position, SUN, AU, step)
            if state.evaluations > evaluations:
                recomputed.append(step)

        assert recomputed == [1, 2, 20, 24, 28]
        assert 0.0 < state.psi < 1.0

    def test_cached_value_reused(self):
        """Between scheduled steps the old value is kept even if the geometry changed"""
        estimator = IlluminationEstimator()
        state = IlluminationState()
        psi, state = estimator.evaluate(state, SUNLIT, SUN, AU, 1)
        assert psi == 1.0

        psi, state = estimator.evaluate(state, UMBRA, SUN, AU, 3)
        assert psi == 1.0
        assert state.step == 3
        assert state.evaluations == 1

        psi, state = estimator.evaluate(state, UMBRA, SUN, AU, 20)
        assert psi == 0.0
        assert state.previous_psi == 1.0
        assert state.evaluations == 2

    def test_state_is_not_mutated(self):
        estimator = IlluminationEstimator()
        initial = IlluminationState()
        _, updated = estimator.evaluate(initial, SUNLIT, SUN, AU, 1)

        assert not initial.is_initialized
        assert initial.evaluations == 0
        assert updated.is_initialized

    def test_uninitialized_state_always_evaluates(self):
        estimator = IlluminationEstimator()
        psi, state = estimator.evaluate(IlluminationState(), SUNLIT, SUN, AU, 7)
        assert psi == 1.0
        assert state.evaluations == 1

    def test_independent_satellites(self):
        estimator = IlluminationEstimator()
        sat_a, sat_b = IlluminationState(), IlluminationState()
        for step in range(1, 6):
            psi_a, sat_a = estimator.evaluate(sat_a, SUNLIT, SUN, AU, step)
            psi_b, sat_b = estimator.evaluate(sat_b, UMBRA, SUN, AU, step)

        assert psi_a == 1.0
        assert psi_b == 0.0

    def test_from_config(self):
        config = IlluminationConfig(resolution=100, stable_interval=10, penumbra_interval=2)
        estimator = IlluminationEstimator.from_config(config)

        assert estimator.calculator.resolution == 100
        assert _recompute_steps(estimator, SUNLIT, range(1, 21)) == [1, 2, 10, 20]
