"""
Orbital Geometry Module

This module provides the eclipse geometry and the cached illumination
estimate used by the torque model.
"""

from .eclipse_calculator import EclipseCalculator, IlluminationEstimator, IlluminationState

__all__ = ["EclipseCalculator", "IlluminationEstimator", "IlluminationState"]
