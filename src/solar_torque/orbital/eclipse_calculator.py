"""
Eclipse Calculator Module

This module decides how much direct sunlight reaches a satellite. It handles
full sunlight, umbral (total) and penumbral (partial) eclipse conditions by
comparing the apparent disks of the Earth and the Sun as seen from the
satellite, and re-evaluates the shadow factor on an adaptive step schedule.

References:
- "Fundamentals of Astrodynamics and Applications" by Vallado
- "Satellite Orbits: Models, Methods and Applications" by Montenbruck & Gill
- "Space Mission Analysis and Design" by Larson & Wertz
"""

import numpy as np
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass, replace
import logging

from ..config.spacecraft_config import EnvironmentConfig, IlluminationConfig
from ..exceptions import DegenerateInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IlluminationState:
    """Shadow factor cache carried between simulation steps (one per satellite)"""
    psi: Optional[float] = None           # Last computed shadow factor (0-1)
    previous_psi: Optional[float] = None  # Shadow factor before the last recomputation
    step: int = 0                         # Last step index seen
    evaluations: int = 0                  # Number of shadow function evaluations

    @property
    def is_initialized(self) -> bool:
        return self.psi is not None


class EclipseCalculator:
    """
    Geometric shadow function for a satellite near the Earth.

    Features:
    - Umbral and penumbral shadow geometry
    - Strip integration of the occulted Sun disk
    - Optional atmospheric refraction margin on the Earth limb
    """

    # Atmospheric refraction correction (degrees)
    ATMOSPHERIC_REFRACTION = 0.5667  # degrees at horizon

    def __init__(self, environment: Optional[EnvironmentConfig] = None,
                 resolution: int = 50, use_atmosphere: bool = False):
        """
        Initialize eclipse calculator

        Args:
            environment: Earth and Sun radii
            resolution: Number of strips used across the Sun disk
            use_atmosphere: Include atmospheric refraction effects
        """
        if resolution < 1:
            raise ValueError("resolution must be at least 1")

        self.environment = environment or EnvironmentConfig()
        self.resolution = resolution
        self.use_atmosphere = use_atmosphere

    def shadow_factor(self, position: np.ndarray, sun_direction: np.ndarray,
                      sun_distance: float) -> float:
        """
        Fraction of the Sun disk visible from the satellite

        Args:
            position: Satellite position in ECI coordinates (m)
            sun_direction: Unit vector from the Earth to the Sun in ECI coordinates
            sun_distance: Earth to Sun distance (m)

        Returns:
            Shadow factor: 1 in full sun, 0 in umbra, in between in penumbra
        """
        sun_radius, earth_radius, separation = self.angular_geometry(
            position, sun_direction, sun_distance
        )
        return self._visible_fraction(sun_radius, earth_radius, separation)

    def angular_geometry(self, position: np.ndarray, sun_direction: np.ndarray,
                         sun_distance: float) -> Tuple[float, float, float]:
        """
        Apparent radii of the Sun and Earth disks and their separation

        Returns:
            Tuple of (sun_angular_radius, earth_angular_radius, separation) in radians
        """
        r_sat = np.asarray(position, dtype=float)
        s_hat = np.asarray(sun_direction, dtype=float)

        r_sat_mag = np.linalg.norm(r_sat)
        s_mag = np.linalg.norm(s_hat)
        if r_sat_mag == 0.0:
            raise DegenerateInputError("Satellite position must be non-zero")
        if s_mag == 0.0:
            raise DegenerateInputError("Sun direction must be non-zero")
        if sun_distance <= 0.0:
            raise DegenerateInputError("Sun distance must be positive")

        # Vector from satellite to Sun
        r_sat_to_sun = sun_distance * s_hat / s_mag - r_sat
        r_sat_to_sun_mag = np.linalg.norm(r_sat_to_sun)

        sun_angular_radius = np.arcsin(min(self.environment.sun_radius_m / r_sat_to_sun_mag, 1.0))
        earth_angular_radius = np.arcsin(min(self.environment.earth_radius_m / r_sat_mag, 1.0))

        if self.use_atmosphere:
            earth_angular_radius += np.radians(self.ATMOSPHERIC_REFRACTION)

        # Angle between the Earth centre and Sun centre directions
        cos_separation = np.dot(-r_sat, r_sat_to_sun) / (r_sat_mag * r_sat_to_sun_mag)
        separation = np.arccos(np.clip(cos_separation, -1.0, 1.0))

        return float(sun_angular_radius), float(earth_angular_radius), float(separation)

    def _visible_fraction(self, sun_radius: float, earth_radius: float,
                          separation: float) -> float:
        """
        Uncovered share of the Sun disk

        The Sun disk is cut into strips perpendicular to the line joining the
        disk centres. Within a strip both chords are centred on that line, so
        the covered chord is the shorter of the two.
        """
        if separation >= sun_radius + earth_radius:
            return 1.0
        if separation <= earth_radius - sun_radius:
            return 0.0

        edges = np.linspace(-sun_radius, sun_radius, self.resolution + 1)
        offsets = 0.5 * (edges[:-1] + edges[1:])

        sun_chords = np.sqrt(sun_radius**2 - offsets**2)
        # Earth centre at the origin, Sun centre at `separation`
        earth_chords = np.sqrt(np.clip(earth_radius**2 - (separation + offsets)**2, 0.0, None))
        covered = np.minimum(sun_chords, earth_chords)

        fraction = 1.0 - covered.sum() / sun_chords.sum()
        return float(np.clip(fraction, 0.0, 1.0))

    @staticmethod
    def classify(psi: float) -> str:
        """Eclipse type for a shadow factor: "none", "penumbra" or "umbra" """
        if psi >= 1.0:
            return "none"
        if psi <= 0.0:
            return "umbra"
        return "penumbra"


class IlluminationEstimator:
    """
    Shadow factor with adaptive re-evaluation.

    The shadow function is only recomputed on a coarse schedule while the
    satellite is in full sun or full shadow, and on a fine schedule while it
    crosses the penumbra. In between the cached value is reused.
    """

    def __init__(self, calculator: Optional[EclipseCalculator] = None,
                 stable_interval: int = 20, penumbra_interval: int = 4,
                 startup_steps: Sequence[int] = (1, 2)):
        """
        Initialize illumination estimator

        Args:
            calculator: Geometric shadow function
            stable_interval: Steps between updates in full sun or umbra
            penumbra_interval: Steps between updates in penumbra
            startup_steps: Steps that always trigger an update in full sun or umbra
        """
        self.calculator = calculator or EclipseCalculator()
        self.stable_interval = stable_interval
        self.penumbra_interval = penumbra_interval
        self.startup_steps = tuple(startup_steps)

    @classmethod
    def from_config(cls, illumination: IlluminationConfig,
                    environment: Optional[EnvironmentConfig] = None) -> "IlluminationEstimator":
        """Build an estimator from configuration"""
        calculator = EclipseCalculator(
            environment=environment,
            resolution=illumination.resolution,
            use_atmosphere=illumination.use_atmosphere
        )
        return cls(
            calculator,
            stable_interval=illumination.stable_interval,
            penumbra_interval=illumination.penumbra_interval,
            startup_steps=illumination.startup_steps
        )

    def needs_update(self, state: IlluminationState, step: int) -> bool:
        """Whether the shadow function has to be evaluated at this step"""
        if not state.is_initialized:
            return True

        if state.psi == 0.0 or state.psi == 1.0:
            return step % self.stable_interval == 0 or step in self.startup_steps

        return step % self.penumbra_interval == 0

    def evaluate(self, state: IlluminationState, position: np.ndarray,
                 sun_direction: np.ndarray, sun_distance: float,
                 step: int) -> Tuple[float, IlluminationState]:
        """
        Shadow factor for the current step

        Args:
            state: Illumination state from the previous step
            position: Satellite position in ECI coordinates (m)
            sun_direction: Unit vector from the Earth to the Sun in ECI coordinates
            sun_distance: Earth to Sun distance (m)
            step: Monotonically increasing simulation step index

        Returns:
            Tuple of (shadow factor, updated illumination state)
        """
        if not self.needs_update(state, step):
            return state.psi, replace(state, step=step)

        psi = self.calculator.shadow_factor(position, sun_direction, sun_distance)

        if state.is_initialized and self.calculator.classify(psi) != self.calculator.classify(state.psi):
            logger.debug(
                f"Step {step}: eclipse state {self.calculator.classify(state.psi)} -> "
                f"{self.calculator.classify(psi)} (psi={psi:.4f})"
            )

        new_state = IlluminationState(
            psi=psi,
            previous_psi=state.psi,
            step=step,
            evaluations=state.evaluations + 1
        )
        return psi, new_state
