#!/usr/bin/env python3
"""
Basic Usage Example for the Solar Radiation Torque Model

This example evaluates the solar radiation torque on a PocketQube over one
circular orbit with a fixed inertial attitude, passing through Earth's shadow.
"""

import sys
from pathlib import Path

import numpy as np

# Add the src directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from solar_torque.main import SolarTorqueModel
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AU = 1.495978707e11
R_ORBIT = 6378137.0 + 500e3
PERIOD = 2 * np.pi * np.sqrt(R_ORBIT**3 / 3.986004418e14)


def main():
    """Main example function"""
    print("=" * 60)
    print("Solar Radiation Torque Model - Basic Usage Example")
    print("=" * 60)

    model = SolarTorqueModel()
    if not model.create_from_template("PocketQube_1P"):
        print("Failed to create configuration")
        return

    validation = model.validate_configuration()
    for warning in validation['warnings']:
        print(f"   - {warning}")

    # Equatorial orbit, Sun in the x-z plane 53 deg above the orbit plane, body axes aligned with ECI
    times = np.arange(0.0, PERIOD, 10.0)
    angles = 2 * np.pi * times / PERIOD
    positions = R_ORBIT * np.column_stack([np.cos(angles), np.sin(angles), np.zeros_like(angles)])
    n = len(times)
    attitudes = np.repeat(np.eye(3)[None], n, axis=0)
    sun = np.tile(np.array([0.6, 0.0, 0.8]), (n, 1))

    result = model.compute_torque_history(attitudes, positions, sun, AU)

    torques = result['torques']
    shadow = result['shadow_factors']
    print(f"\nSteps evaluated:          {n}")
    print(f"Shadow evaluations:       {result['final_state'].evaluations}")
    print(f"Fraction of orbit in sun: {np.mean(shadow > 0):.2f}")
    print(f"Peak torque magnitude:    {np.max(np.linalg.norm(torques, axis=1)):.3e} N*m")


if __name__ == "__main__":
    main()
