"""
Spacecraft Surface Module

Describes the Sun-facing surfaces of a box body with a mounting plate on its
-y end. Each canonical face is built into a set of flat rectangles (panels)
with an area and a centroid in the geometric body frame, whose origin is the
centre of the body box.

Plate layout: the plate spans y in [-body_y/2 - plate_y, -body_y/2] and
overhangs the body in x and z, so the plate rim facing +y stays exposed
around the body.
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass
from enum import Enum

from ..config.spacecraft_config import GeometryConfig
from ..exceptions import DegenerateInputError, InvalidGeometryError


class Face(Enum):
    """Canonical outward face normals of the body"""
    PLUS_X = (1.0, 0.0, 0.0)
    MINUS_X = (-1.0, 0.0, 0.0)
    PLUS_Y = (0.0, 1.0, 0.0)
    MINUS_Y = (0.0, -1.0, 0.0)
    PLUS_Z = (0.0, 0.0, 1.0)
    MINUS_Z = (0.0, 0.0, -1.0)

    @property
    def normal(self) -> np.ndarray:
        return np.array(self.value)

    @classmethod
    def from_normal(cls, normal: np.ndarray) -> "Face":
        """
        Face for a surface normal

        Raises:
            InvalidGeometryError: normal is not one of the six unit body axes
        """
        n = np.asarray(normal, dtype=float).reshape(-1)
        if n.shape != (3,):
            raise InvalidGeometryError(f"Surface normal must have 3 components, got {n.shape[0]}")
        if not np.any(n):
            raise DegenerateInputError("Surface normal must be non-zero")

        for face in cls:
            if np.allclose(n, face.value, rtol=0.0, atol=1e-12):
                return face

        raise InvalidGeometryError(
            f"No valid normal vector given: {n.tolist()}. "
            "Provide a unit vector along +/-x, +/-y or +/-z"
        )


@dataclass(frozen=True)
class Panel:
    """Flat rectangle of a face"""
    area: float                            # m^2
    centroid: Tuple[float, float, float]   # m, geometric body frame


@dataclass(frozen=True)
class SurfaceDescriptor:
    """Sun-facing face and the rectangles it is made of"""
    face: Face
    panels: Tuple[Panel, ...]

    @property
    def normal(self) -> np.ndarray:
        return self.face.normal

    @property
    def total_area(self) -> float:
        return sum(panel.area for panel in self.panels)


def _sign(value: float) -> float:
    """Sign with zero mapped to +1"""
    return 1.0 if value >= 0 else -1.0


def select_faces(sun_body: np.ndarray) -> Tuple[Face, Face, Face]:
    """
    Illuminated face on each body axis

    Args:
        sun_body: Sun direction in body frame

    Returns:
        Faces for the x, y and z axes, in that order
    """
    sx, sy, sz = (_sign(c) for c in sun_body)
    return (
        Face.PLUS_X if sx > 0 else Face.MINUS_X,
        Face.PLUS_Y if sy > 0 else Face.MINUS_Y,
        Face.PLUS_Z if sz > 0 else Face.MINUS_Z,
    )


def build_surface(face: Face, sun_body: np.ndarray, geometry: GeometryConfig) -> SurfaceDescriptor:
    """
    Panels of a face

    Args:
        face: Canonical face
        sun_body: Sun direction in body frame (selects the lit plate rims on +y)
        geometry: Body and plate dimensions

    Returns:
        SurfaceDescriptor with the face's rectangles
    """
    bx, by, bz = geometry.body_x_m, geometry.body_y_m, geometry.body_z_m
    px, py, pz = geometry.plate_x_m, geometry.plate_y_m, geometry.plate_z_m
    plate_mid_y = -by / 2 - py / 2

    if face in (Face.PLUS_X, Face.MINUS_X):
        side = face.value[0]
        panels = (
            Panel(area=by * bz, centroid=(side * bx / 2, 0.0, 0.0)),
            Panel(area=py * pz, centroid=(side * px / 2, plate_mid_y, 0.0)),
        )

    elif face is Face.PLUS_Y:
        # Only the rims on the Sun side of the body are lit
        dir_x = _sign(sun_body[0])
        dir_z = _sign(sun_body[2])
        panels = (
            Panel(area=bx * bz, centroid=(0.0, by / 2, 0.0)),
            Panel(area=(px - bx) / 2 * pz, centroid=(dir_x * (bx + px) / 4, -by / 2, 0.0)),
            Panel(area=(pz - bz) / 2 * bx, centroid=(0.0, -by / 2, dir_z * (bz + pz) / 4)),
        )

    elif face is Face.MINUS_Y:
        panels = (
            Panel(area=px * pz, centroid=(0.0, -by / 2 - py, 0.0)),
        )

    else:
        side = face.value[2]
        panels = (
            Panel(area=bx * by, centroid=(0.0, 0.0, side * bz / 2)),
            Panel(area=px * py, centroid=(0.0, plate_mid_y, side * pz / 2)),
        )

    return SurfaceDescriptor(face=face, panels=panels)
