"""
Solar Radiation Torque Model
============================

Per-step solar radiation pressure torque for a box satellite with a
mounting plate, for use inside attitude dynamics simulations.

Main Components:
- Eclipse geometry and cached illumination estimate
- Surface selection and radiation pressure force law
- Spacecraft configuration and templates

Usage:
    >>> from solar_torque.main import SolarTorqueModel
    >>> model = SolarTorqueModel()
    >>> model.create_from_template('PocketQube_1P')
    >>> state = model.new_state()
    >>> torque, state = model.compute_torque(state, C_I2B, r_I, s_I, d, step=1)
"""

__version__ = "1.0.0"

from .exceptions import SolarTorqueError, InvalidGeometryError, DegenerateInputError
from .orbital import EclipseCalculator, IlluminationEstimator, IlluminationState
from .torque import SolarRadiationTorque, compute_solar_torque, surface_torque

__all__ = [
    "SolarTorqueError",
    "InvalidGeometryError",
    "DegenerateInputError",
    "EclipseCalculator",
    "IlluminationEstimator",
    "IlluminationState",
    "SolarRadiationTorque",
    "compute_solar_torque",
    "surface_torque",
]
