"""
Exceptions raised by the solar radiation torque model.
"""


class SolarTorqueError(ValueError):
    """Base class for torque computation failures"""


class InvalidGeometryError(SolarTorqueError):
    """A surface normal outside the six canonical body axes was supplied"""


class DegenerateInputError(SolarTorqueError):
    """Zero-length vector or non-positive distance passed to the model"""
