"""
Integration tests for the solar radiation torque model interface.

Usage:
    python -m pytest tests/test_model.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from solar_torque.main import SolarTorqueModel
from solar_torque.torque.radiation_torque import SolarRadiationTorque
from solar_torque.exceptions import DegenerateInputError


AU = 1.495978707e11
SUN = np.array([1.0, 0.0, 0.0])
SUNLIT = np.array([7.0e6, 0.0, 0.0])
UMBRA = np.array([-7.0e6, 0.0, 0.0])
ATTITUDE = np.array([
    [0.0, 1.0, 0.0],
    [-0.6, 0.0, 0.8],
    [0.8, 0.0, 0.6],
])


@pytest.fixture
def model():
    model = SolarTorqueModel(log_level="DEBUG")
    assert model.create_from_template("Reference_Box")
    return model


def test_model_initialization():
    model = SolarTorqueModel()
    assert not model.is_initialized
    assert model.get_configuration_info() == {"status": "No configuration loaded"}
    assert not model.validate_configuration()["valid"]


def test_compute_before_configuration():
    model = SolarTorqueModel()
    with pytest.raises(ValueError):
        model.compute_torque(model.new_state(), np.eye(3), SUNLIT, SUN, AU, 1)


def test_unknown_template():
    model = SolarTorqueModel()
    assert not model.create_from_template("Hubble")
    assert not model.is_initialized


def test_load_missing_config(tmp_path):
    model = SolarTorqueModel()
    assert not model.load_config(str(tmp_path / "missing.yaml"))


def test_load_config_file(tmp_path):
    model = SolarTorqueModel()
    config = model.config_manager.create_from_template("PocketQube_1P")
    path = tmp_path / "pq.yaml"
    model.config_manager.save_config(config, str(path), format="yaml")

    assert model.load_config(str(path))
    assert model.is_initialized
    assert model.get_configuration_info()["name"] == "PocketQube_1P"


def test_templates_listed():
    templates = SolarTorqueModel().list_available_templates()
    assert "PocketQube_1P" in templates


class TestComputeTorque:
    """Test per-step torque evaluation"""

    def test_sunlit_torque(self, model):
        state = model.new_state()
        torque, state = model.compute_torque(state, ATTITUDE, SUNLIT, SUN, AU, 1)

        expected = SolarRadiationTorque.from_config(model.config).torque(ATTITUDE, SUN, 1.0, AU)
        np.testing.assert_allclose(torque, expected, rtol=1e-12)
        assert np.linalg.norm(torque) > 0
        assert state.psi == 1.0

    def test_eclipse_gives_zero_torque(self, model):
        state = model.new_state()
        torque, state = model.compute_torque(state, ATTITUDE, UMBRA, SUN, AU, 1)

        assert np.array_equal(torque, np.zeros(3))
        assert state.psi == 0.0

    def test_center_of_mass_update(self, model):
        state = model.new_state()
        nominal, state = model.compute_torque(state, ATTITUDE, SUNLIT, SUN, AU, 1)
        shifted, state = model.compute_torque(
            state, ATTITUDE, SUNLIT, SUN, AU, 2, center_of_mass=(0.0, -0.03, 0.0)
        )
        assert not np.allclose(nominal, shifted)

    def test_degenerate_input_raises(self, model):
        with pytest.raises(DegenerateInputError):
            model.compute_torque(model.new_state(), ATTITUDE, np.zeros(3), SUN, AU, 1)

    def test_satellites_keep_separate_states(self, model):
        sat_a, sat_b = model.new_state(), model.new_state()
        for step in range(1, 4):
            torque_a, sat_a = model.compute_torque(sat_a, ATTITUDE, SUNLIT, SUN, AU, step)
            torque_b, sat_b = model.compute_torque(sat_b, ATTITUDE, UMBRA, SUN, AU, step)

        assert np.linalg.norm(torque_a) > 0
        assert np.array_equal(torque_b, np.zeros(3))


class TestTorqueHistory:
    """Test evaluation of step sequences"""

    def test_recompute_schedule_in_full_sun(self, model):
        n = 25
        result = model.compute_torque_history(
            np.repeat(ATTITUDE[None], n, axis=0),
            np.tile(SUNLIT, (n, 1)),
            np.tile(SUN, (n, 1)),
            AU
        )

        assert np.flatnonzero(result['recomputed']).tolist() == [0, 1, 19]
        assert np.all(result['shadow_factors'] == 1.0)
        assert result['torques'].shape == (n, 3)
        assert result['final_state'].evaluations == 3
        np.testing.assert_allclose(result['torques'], np.tile(result['torques'][0], (n, 1)))

    def test_entering_shadow_is_seen_at_next_scheduled_step(self, model):
        n = 20
        positions = np.tile(SUNLIT, (n, 1))
        positions[5:] = UMBRA
        result = model.compute_torque_history(
            np.repeat(ATTITUDE[None], n, axis=0),
            positions,
            np.tile(SUN, (n, 1)),
            np.full(n, AU)
        )

        # Cached full sun until the step-20 re-evaluation
        assert np.all(result['shadow_factors'][:19] == 1.0)
        assert result['shadow_factors'][19] == 0.0
        assert np.array_equal(result['torques'][19], np.zeros(3))
