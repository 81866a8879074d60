"""
Spacecraft Configuration Module

This module handles spacecraft configuration, validation, and management for the
solar radiation torque model. It provides structured configuration schemas for the
body geometry, surface materials, illumination schedule and environment constants,
plus preset templates for typical small satellites.

References:
- Pydantic configuration management
- "Spacecraft Attitude Determination and Control" - Wertz
- CubeSat / PocketQube design specifications
"""

import json
import yaml
from typing import Dict, List, Optional, Tuple, Any
from dataclasses import dataclass
from pathlib import Path

try:
    from pydantic import (
        BaseModel, ConfigDict, Field, FiniteFloat, PositiveInt, field_validator, model_validator
    )
except ImportError:
    raise ImportError("Pydantic required for configuration management. Install with: pip install pydantic")


@dataclass(frozen=True)
class MaterialProperties:
    """Blended reflection coefficients shared by all surfaces"""
    specular: float  # beta, specular reflection coefficient (0-1)
    diffuse: float   # gamma, diffuse reflection coefficient (0-1)


class MaterialPreset(BaseModel):
    """Reflection coefficients of a single surface material"""
    name: str = Field(..., description="Material name")
    specular: float = Field(..., ge=0, le=1, description="Specular reflection coefficient")
    diffuse: float = Field(..., ge=0, le=1, description="Diffuse reflection coefficient")


class MaterialConfig(BaseModel):
    """Surface material configuration"""
    solar_cell_coverage: float = Field(0.8, ge=0, le=1, description="Fraction of the outer surface covered in solar cells")
    structure: MaterialPreset = Field(
        default_factory=lambda: MaterialPreset(name="aluminium", specular=0.825, diffuse=0.64),
        description="Structural material"
    )
    solar_cell: MaterialPreset = Field(
        default_factory=lambda: MaterialPreset(name="solar_cell", specular=0.05, diffuse=0.05),
        description="Solar cell coating"
    )

    def blend(self) -> MaterialProperties:
        """
        Area-weighted blend of the solar cell and structure coefficients

        Returns:
            MaterialProperties applied to every surface
        """
        coverage = self.solar_cell_coverage
        specular = coverage * self.solar_cell.specular + (1 - coverage) * self.structure.specular
        diffuse = coverage * self.solar_cell.diffuse + (1 - coverage) * self.structure.diffuse
        return MaterialProperties(specular=specular, diffuse=diffuse)


class GeometryConfig(BaseModel):
    """Body box and attached plate dimensions"""
    body_x_m: float = Field(..., gt=0, description="Body edge length along x")
    body_y_m: float = Field(..., gt=0, description="Body edge length along y")
    body_z_m: float = Field(..., gt=0, description="Body edge length along z")
    plate_x_m: float = Field(..., gt=0, description="Plate edge length along x")
    plate_y_m: float = Field(..., gt=0, description="Plate thickness along y")
    plate_z_m: float = Field(..., gt=0, description="Plate edge length along z")
    center_of_mass_m: Tuple[FiniteFloat, FiniteFloat, FiniteFloat] = Field(
        (0.0, 0.0, 0.0), description="Centre of mass relative to the body box centre"
    )

    @model_validator(mode="after")
    def validate_plate_overhang(self):
        """The plate must cover the -y end of the body"""
        if self.plate_x_m < self.body_x_m:
            raise ValueError("plate_x_m must be at least body_x_m")
        if self.plate_z_m < self.body_z_m:
            raise ValueError("plate_z_m must be at least body_z_m")
        return self


class EnvironmentConfig(BaseModel):
    """Physical constants of the Sun-Earth environment"""
    solar_pressure_1au_n_m2: float = Field(4.56e-6, gt=0, description="Solar radiation pressure at 1 AU")
    astronomical_unit_m: float = Field(1.495978707e11, gt=0, description="Astronomical unit")
    earth_radius_m: float = Field(6378137.0, gt=0, description="Earth equatorial radius")
    sun_radius_m: float = Field(6.96340e8, gt=0, description="Solar radius")

    def solar_pressure(self, sun_distance_m: float) -> float:
        """Solar radiation pressure scaled to the current Sun distance"""
        return self.solar_pressure_1au_n_m2 * (self.astronomical_unit_m / sun_distance_m) ** 2


class IlluminationConfig(BaseModel):
    """Shadow function evaluation settings"""
    resolution: int = Field(50, ge=1, description="Strips used to approximate the penumbra fraction")
    stable_interval: int = Field(20, ge=1, description="Steps between re-evaluations in full sun or shadow")
    penumbra_interval: int = Field(4, ge=1, description="Steps between re-evaluations in penumbra")
    startup_steps: List[PositiveInt] = Field(default=[1, 2], description="Steps that always re-evaluate")
    use_atmosphere: bool = Field(False, description="Widen the Earth disk by atmospheric refraction")

    @field_validator('penumbra_interval')
    @classmethod
    def validate_penumbra_interval(cls, v, info):
        stable = info.data.get('stable_interval')
        if stable is not None and v > stable:
            raise ValueError("penumbra_interval should not exceed stable_interval")
        return v


class SpacecraftConfig(BaseModel):
    """Complete torque model configuration"""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Spacecraft name")
    description: Optional[str] = Field(None, description="Spacecraft description")
    geometry: GeometryConfig
    material: MaterialConfig = Field(default_factory=MaterialConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    illumination: IlluminationConfig = Field(default_factory=IlluminationConfig)
    version: str = Field("1.0", description="Configuration version")


class SpacecraftConfigManager:
    """
    Spacecraft configuration management system.

    Features:
    - JSON/YAML configuration loading and validation
    - Pre-defined spacecraft templates
    - Design sanity checks
    """

    def __init__(self):
        """Initialize spacecraft configuration manager"""
        self.config: Optional[SpacecraftConfig] = None
        self.templates = self._load_default_templates()

    def load_config(self, filepath: str) -> SpacecraftConfig:
        """
        Load configuration from file

        Args:
            filepath: Path to configuration file

        Returns:
            Validated spacecraft configuration
        """
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        try:
            with open(path, 'r') as f:
                if path.suffix.lower() in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)

            self.config = SpacecraftConfig(**data)
            return self.config

        except Exception as e:
            raise ValueError(f"Error loading configuration: {e}") from e

    def save_config(self, config: SpacecraftConfig, filepath: str, format: str = "json"):
        """
        Save configuration to file

        Args:
            config: Configuration to save
            filepath: Output file path
            format: Output format ("json" or "yaml")
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = config.model_dump(mode="json")

        with open(path, 'w') as f:
            if format.lower() in ['yaml', 'yml']:
                yaml.safe_dump(data, f, default_flow_style=False, indent=2)
            else:
                json.dump(data, f, indent=2)

    def create_from_template(self, template_name: str, **kwargs) -> SpacecraftConfig:
        """
        Create configuration from predefined template

        Args:
            template_name: Name of template
            **kwargs: Parameters to override

        Returns:
            Validated spacecraft configuration
        """
        if template_name not in self.templates:
            raise ValueError(f"Template not found: {template_name}")

        template_data = json.loads(json.dumps(self.templates[template_name]))
        self._deep_update(template_data, kwargs)

        return SpacecraftConfig(**template_data)

    def validate_config(self, config_data: Dict) -> SpacecraftConfig:
        """Validate a raw configuration dictionary"""
        return SpacecraftConfig(**config_data)

    def get_config_schema(self) -> Dict:
        """JSON schema of the configuration"""
        return SpacecraftConfig.model_json_schema()

    def list_templates(self) -> List[str]:
        """List available template names"""
        return list(self.templates.keys())

    def _load_default_templates(self) -> Dict[str, Dict]:
        """Load default spacecraft templates"""
        return {
            "PocketQube_1P": {
                "name": "PocketQube_1P",
                "description": "Single unit PocketQube on a sliding backplate",
                "geometry": {
                    "body_x_m": 0.05,
                    "body_y_m": 0.05,
                    "body_z_m": 0.05,
                    "plate_x_m": 0.058,
                    "plate_y_m": 0.0016,
                    "plate_z_m": 0.064,
                    "center_of_mass_m": [0.0, -0.002, 0.0]
                },
                "material": {
                    "solar_cell_coverage": 0.8
                }
            },

            "PocketQube_3P": {
                "name": "PocketQube_3P",
                "description": "Three unit PocketQube on a sliding backplate",
                "geometry": {
                    "body_x_m": 0.05,
                    "body_y_m": 0.1784,
                    "body_z_m": 0.05,
                    "plate_x_m": 0.058,
                    "plate_y_m": 0.0016,
                    "plate_z_m": 0.064,
                    "center_of_mass_m": [0.0, -0.01, 0.0]
                },
                "material": {
                    "solar_cell_coverage": 0.8
                }
            },

            "Reference_Box": {
                "name": "Reference_Box",
                "description": "Box satellite with a mounting plate, used for verification",
                "geometry": {
                    "body_x_m": 0.3,
                    "body_y_m": 0.3,
                    "body_z_m": 0.2,
                    "plate_x_m": 0.4,
                    "plate_y_m": 0.01,
                    "plate_z_m": 0.3,
                    "center_of_mass_m": [0.0, 0.01, 0.0]
                },
                "material": {
                    "solar_cell_coverage": 0.5
                }
            }
        }

    def _deep_update(self, base_dict: Dict, update_dict: Dict):
        """Deep update dictionary"""
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def generate_config_summary(self, config: SpacecraftConfig) -> Dict[str, Any]:
        """
        Generate configuration summary

        Args:
            config: Spacecraft configuration

        Returns:
            Configuration summary dictionary
        """
        materials = config.material.blend()
        geometry = config.geometry
        return {
            'name': config.name,
            'description': config.description,
            'body_dimensions_m': [geometry.body_x_m, geometry.body_y_m, geometry.body_z_m],
            'plate_dimensions_m': [geometry.plate_x_m, geometry.plate_y_m, geometry.plate_z_m],
            'center_of_mass_m': list(geometry.center_of_mass_m),
            'materials': {
                'solar_cell_coverage': config.material.solar_cell_coverage,
                'specular': materials.specular,
                'diffuse': materials.diffuse
            },
            'illumination': {
                'resolution': config.illumination.resolution,
                'stable_interval': config.illumination.stable_interval,
                'penumbra_interval': config.illumination.penumbra_interval
            },
            'solar_pressure_1au_n_m2': config.environment.solar_pressure_1au_n_m2
        }

    def validate_design(self, config: SpacecraftConfig) -> Dict[str, Any]:
        """
        Check a configuration for physically questionable choices

        Args:
            config: Spacecraft configuration

        Returns:
            Warnings and recommendations
        """
        warnings = []
        recommendations = []
        geometry = config.geometry
        cx, cy, cz = geometry.center_of_mass_m

        y_min = -geometry.body_y_m / 2 - geometry.plate_y_m
        if (abs(cx) > geometry.plate_x_m / 2 or abs(cz) > geometry.plate_z_m / 2
                or cy < y_min or cy > geometry.body_y_m / 2):
            warnings.append("Centre of mass lies outside the spacecraft envelope")
            recommendations.append("Check the centre of mass reference point (body box centre)")

        if config.material.solar_cell_coverage in (0.0, 1.0):
            warnings.append("Solar cell coverage of 0 or 1 ignores one of the material presets")

        if geometry.plate_y_m > min(geometry.body_x_m, geometry.body_y_m, geometry.body_z_m):
            warnings.append("Plate thicker than the smallest body edge")
            recommendations.append("The plate edge area model assumes a thin plate")

        return {
            "valid": True,
            "warnings": warnings,
            "recommendations": recommendations
        }
