"""
Torque Module

This module provides the spacecraft surface description and the solar
radiation pressure force and torque calculations.
"""

from .surfaces import Face, Panel, SurfaceDescriptor, build_surface, select_faces
from .radiation_torque import (
    SolarRadiationTorque,
    compute_solar_torque,
    panel_force,
    surface_torque,
)

__all__ = [
    "Face",
    "Panel",
    "SurfaceDescriptor",
    "build_surface",
    "select_faces",
    "SolarRadiationTorque",
    "compute_solar_torque",
    "panel_force",
    "surface_torque",
]
