"""
Solar Radiation Torque Model - Main Interface

This module provides the main interface for the solar radiation torque model.
It ties the illumination estimate and the surface torque model to a validated
spacecraft configuration and runs them once per simulation step.

Usage:
    from solar_torque.main import SolarTorqueModel

    model = SolarTorqueModel()
    model.create_from_template('PocketQube_1P')
    state = model.new_state()
    torque, state = model.compute_torque(state, C_I2B, r_I, s_I, d, step)
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple, Any
import logging

from .config.spacecraft_config import SpacecraftConfig, SpacecraftConfigManager
from .orbital.eclipse_calculator import IlluminationEstimator, IlluminationState
from .torque.radiation_torque import SolarRadiationTorque
from .exceptions import SolarTorqueError


# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SolarTorqueModel:
    """
    Main interface for solar radiation torque computation.

    The model itself holds no per-satellite state: every simulated satellite
    owns its IlluminationState, obtained from new_state() and threaded through
    compute_torque().
    """

    def __init__(self, config: Optional[SpacecraftConfig] = None,
                 log_level: str = "INFO"):
        """
        Initialize solar radiation torque model

        Args:
            config: Spacecraft configuration
            log_level: Logging level
        """
        logger.setLevel(getattr(logging, log_level.upper()))

        self.config = config
        self.config_manager = SpacecraftConfigManager()

        # Configured when a configuration is loaded
        self.estimator: Optional[IlluminationEstimator] = None
        self.torque_model: Optional[SolarRadiationTorque] = None

        self.is_initialized = False

        if config:
            self._configure_modules()

    def load_config(self, filepath: str) -> bool:
        """
        Load spacecraft configuration from file

        Args:
            filepath: Path to JSON or YAML configuration file

        Returns:
            True if successful
        """
        try:
            logger.info(f"Loading configuration from {filepath}")
            self.config = self.config_manager.load_config(filepath)
            self._configure_modules()
            logger.info("Configuration loaded successfully")
            return True

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def create_from_template(self, template_name: str, **kwargs) -> bool:
        """
        Create configuration from predefined template

        Args:
            template_name: Name of template
            **kwargs: Configuration overrides

        Returns:
            True if successful
        """
        try:
            logger.info(f"Creating configuration from template: {template_name}")
            self.config = self.config_manager.create_from_template(template_name, **kwargs)
            self._configure_modules()
            logger.info("Configuration created successfully")
            return True

        except ValueError as e:
            logger.error(f"Failed to create configuration: {e}")
            return False

    def _configure_modules(self):
        """Configure illumination and torque modules from the current configuration"""
        if not self.config:
            raise ValueError("No configuration loaded")

        self.estimator = IlluminationEstimator.from_config(
            self.config.illumination, self.config.environment
        )
        self.torque_model = SolarRadiationTorque.from_config(self.config)
        self.is_initialized = True

        logger.info(f"Torque model configured for {self.config.name}")

    def new_state(self) -> IlluminationState:
        """Fresh illumination state for one simulated satellite"""
        return IlluminationState()

    def compute_torque(self, state: IlluminationState, attitude: np.ndarray,
                       position: np.ndarray, sun_direction: np.ndarray,
                       sun_distance: float, step: int,
                       center_of_mass: Optional[Sequence[float]] = None
                       ) -> Tuple[np.ndarray, IlluminationState]:
        """
        Solar radiation torque for one simulation step

        Args:
            state: Illumination state of this satellite from the previous step
            attitude: Rotation matrix from ECI to body frame
            position: Satellite position in ECI frame (m)
            sun_direction: Unit vector towards the Sun in ECI frame
            sun_distance: Earth to Sun distance (m)
            step: Simulation step index
            center_of_mass: Optional centre of mass overriding the configuration

        Returns:
            Tuple of (torque in body frame [N*m], updated illumination state)
        """
        if not self.is_initialized:
            raise ValueError("Model not initialized. Load a configuration first.")

        try:
            psi, state = self.estimator.evaluate(state, position, sun_direction, sun_distance, step)
            torque = self.torque_model.torque(
                attitude, sun_direction, psi, sun_distance, center_of_mass=center_of_mass
            )

        except SolarTorqueError as e:
            logger.error(f"Torque computation failed at step {step}: {e}")
            raise

        return torque, state

    def compute_torque_history(self, attitudes: np.ndarray, positions: np.ndarray,
                               sun_directions: np.ndarray, sun_distances,
                               start_step: int = 1,
                               state: Optional[IlluminationState] = None) -> Dict[str, Any]:
        """
        Torques for a sequence of consecutive steps of one satellite

        Args:
            attitudes: Rotation matrices, shape (N, 3, 3)
            positions: ECI positions (m), shape (N, 3)
            sun_directions: ECI Sun unit vectors, shape (N, 3)
            sun_distances: Earth to Sun distances (m), scalar or shape (N,)
            start_step: Step index of the first sample
            state: Illumination state to continue from

        Returns:
            Dictionary with torques (N, 3), shadow factors (N,),
            recomputation flags (N,) and the final illumination state
        """
        attitudes = np.asarray(attitudes, dtype=float)
        positions = np.asarray(positions, dtype=float)
        sun_directions = np.asarray(sun_directions, dtype=float)
        n_steps = len(positions)
        distances = np.broadcast_to(np.asarray(sun_distances, dtype=float), (n_steps,))

        state = state or self.new_state()
        torques = np.zeros((n_steps, 3))
        shadow_factors = np.zeros(n_steps)
        recomputed = np.zeros(n_steps, dtype=bool)

        logger.debug(f"Computing torque history for {n_steps} steps")

        for i in range(n_steps):
            evaluations = state.evaluations
            torques[i], state = self.compute_torque(
                state, attitudes[i], positions[i], sun_directions[i],
                distances[i], start_step + i
            )
            shadow_factors[i] = state.psi
            recomputed[i] = state.evaluations > evaluations

        return {
            'torques': torques,
            'shadow_factors': shadow_factors,
            'recomputed': recomputed,
            'final_state': state
        }

    def validate_configuration(self) -> Dict[str, Any]:
        """
        Validate current configuration

        Returns:
            Validation results
        """
        if not self.config:
            return {"valid": False, "error": "No configuration loaded"}

        return self.config_manager.validate_design(self.config)

    def list_available_templates(self) -> List[str]:
        """List available spacecraft templates"""
        return self.config_manager.list_templates()

    def get_configuration_info(self) -> Dict[str, Any]:
        """
        Get current configuration information

        Returns:
            Configuration summary
        """
        if not self.config:
            return {"status": "No configuration loaded"}

        return self.config_manager.generate_config_summary(self.config)
