"""
Configuration Module

This module provides the spacecraft configuration schemas, templates
and file loading for the torque model.
"""

from .spacecraft_config import (
    SpacecraftConfig,
    SpacecraftConfigManager,
    GeometryConfig,
    MaterialConfig,
    MaterialPreset,
    MaterialProperties,
    EnvironmentConfig,
    IlluminationConfig,
)

__all__ = [
    "SpacecraftConfig",
    "SpacecraftConfigManager",
    "GeometryConfig",
    "MaterialConfig",
    "MaterialPreset",
    "MaterialProperties",
    "EnvironmentConfig",
    "IlluminationConfig",
]
