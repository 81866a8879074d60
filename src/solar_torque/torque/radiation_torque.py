"""
Solar Radiation Torque Module

This module calculates the torque exerted on the spacecraft by solar radiation
pressure. Every Sun-facing rectangle receives a force made of an absorbed part
along the Sun line and specular / diffuse reflected parts along the surface
normal; the torque follows from the rectangle centroid relative to the centre
of mass.

References:
- "Spacecraft Attitude Determination and Control" - Wertz, ch. 17
- "Spacecraft Dynamics and Control" - Sidi
"""

import numpy as np
from typing import Optional, Sequence
from pydantic import ValidationError

from ..config.spacecraft_config import (
    EnvironmentConfig,
    GeometryConfig,
    MaterialConfig,
    MaterialProperties,
    SpacecraftConfig,
)
from ..exceptions import DegenerateInputError, InvalidGeometryError
from .surfaces import Face, SurfaceDescriptor, build_surface, select_faces


def panel_force(normal: np.ndarray, sun_body: np.ndarray, area: float,
                material: MaterialProperties, solar_pressure: float) -> np.ndarray:
    """
    Radiation pressure force on a flat rectangle

    F = -P * A * cos(theta) * [2 * (gamma/3 + beta*cos(theta)) * n + (1 - beta) * s]

    Args:
        normal: Outward unit normal of the rectangle (body frame)
        sun_body: Sun direction in body frame
        area: Rectangle area (m^2)
        material: Blended reflection coefficients
        solar_pressure: Solar radiation pressure at the current distance (N/m^2)

    Returns:
        Force vector in body frame (N)
    """
    n = np.asarray(normal, dtype=float)
    s = np.asarray(sun_body, dtype=float)

    norms = np.linalg.norm(s) * np.linalg.norm(n)
    if norms == 0.0:
        raise DegenerateInputError("Sun direction and surface normal must be non-zero")

    # Angle between normal and sunrays
    cos_theta = np.dot(s, n) / norms
    beta, gamma = material.specular, material.diffuse

    return -solar_pressure * area * cos_theta * (
        2 * (gamma / 3 + beta * cos_theta) * n + (1 - beta) * s
    )


def descriptor_torque(surface: SurfaceDescriptor, sun_body: np.ndarray,
                      center_of_mass: Sequence[float], material: MaterialProperties,
                      solar_pressure: float) -> np.ndarray:
    """Sum of r x F over the rectangles of a face, r taken from the centre of mass"""
    com = np.asarray(center_of_mass, dtype=float)
    torque = np.zeros(3)
    for panel in surface.panels:
        force = panel_force(surface.normal, sun_body, panel.area, material, solar_pressure)
        torque += np.cross(np.asarray(panel.centroid) - com, force)
    return torque


def surface_torque(normal: np.ndarray, sun_body: np.ndarray, geometry: GeometryConfig,
                   material: MaterialProperties, solar_pressure: float) -> np.ndarray:
    """
    Solar radiation torque on one face of the spacecraft

    Args:
        normal: Canonical face normal, a unit vector along +/-x, +/-y or +/-z
        sun_body: Sun direction in body frame
        geometry: Body and plate dimensions with centre of mass
        material: Blended reflection coefficients
        solar_pressure: Solar radiation pressure at the current distance (N/m^2)

    Returns:
        Torque vector in body frame (N*m)

    Raises:
        InvalidGeometryError: normal is not a canonical face normal
    """
    face = Face.from_normal(normal)
    surface = build_surface(face, sun_body, geometry)
    return descriptor_torque(surface, sun_body, geometry.center_of_mass_m, material, solar_pressure)


def compute_solar_torque(attitude: np.ndarray, sun_direction: np.ndarray, shadow_factor: float,
                         geometry: GeometryConfig, material: MaterialConfig,
                         solar_pressure: float) -> np.ndarray:
    """
    Solar radiation torque on the whole spacecraft

    Args:
        attitude: Rotation matrix from inertial to body frame
        sun_direction: Unit vector towards the Sun in inertial frame
        shadow_factor: Fraction of sunlight received (0-1)
        geometry: Body and plate dimensions with centre of mass
        material: Surface material configuration
        solar_pressure: Solar radiation pressure at the current distance (N/m^2)

    Returns:
        Torque vector in body frame (N*m)
    """
    # In Earth's shadow, no use to do further computation
    if shadow_factor == 0:
        return np.zeros(3)

    sun_body = np.asarray(attitude, dtype=float) @ np.asarray(sun_direction, dtype=float)
    properties = material.blend()

    torque = np.zeros(3)
    for face in select_faces(sun_body):
        surface = build_surface(face, sun_body, geometry)
        torque += descriptor_torque(
            surface, sun_body, geometry.center_of_mass_m, properties, solar_pressure
        )

    return shadow_factor * torque


class SolarRadiationTorque:
    """
    Solar radiation torque bound to a spacecraft configuration.

    Scales the solar pressure with the Sun distance and accepts a centre of
    mass that differs from the configured one (e.g. after propellant use).
    """

    def __init__(self, geometry: GeometryConfig, material: Optional[MaterialConfig] = None,
                 environment: Optional[EnvironmentConfig] = None):
        """
        Initialize solar radiation torque model

        Args:
            geometry: Body and plate dimensions
            material: Surface material configuration
            environment: Solar pressure and astronomical constants
        """
        self.geometry = geometry
        self.material = material or MaterialConfig()
        self.environment = environment or EnvironmentConfig()

    @classmethod
    def from_config(cls, config: SpacecraftConfig) -> "SolarRadiationTorque":
        return cls(config.geometry, config.material, config.environment)

    def torque(self, attitude: np.ndarray, sun_direction: np.ndarray, shadow_factor: float,
               sun_distance_m: float,
               center_of_mass: Optional[Sequence[float]] = None) -> np.ndarray:
        """
        Torque for the current step

        Args:
            attitude: Rotation matrix from inertial to body frame
            sun_direction: Unit vector towards the Sun in inertial frame
            shadow_factor: Fraction of sunlight received (0-1)
            sun_distance_m: Earth to Sun distance (m)
            center_of_mass: Optional centre of mass overriding the configured one

        Returns:
            Torque vector in body frame (N*m)
        """
        if shadow_factor == 0:
            return np.zeros(3)
        if sun_distance_m <= 0:
            raise DegenerateInputError("Sun distance must be positive")

        geometry = self.geometry
        if center_of_mass is not None:
            try:
                geometry = GeometryConfig.model_validate({
                    **geometry.model_dump(),
                    "center_of_mass_m": np.asarray(center_of_mass, dtype=float).tolist()
                })
            except ValidationError as e:
                raise InvalidGeometryError(f"Invalid centre of mass {center_of_mass}: {e}") from e

        return compute_solar_torque(
            attitude, sun_direction, shadow_factor, geometry, self.material,
            self.environment.solar_pressure(sun_distance_m)
        )
