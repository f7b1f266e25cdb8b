"""Built-in catalog tables.

This module provides:
- Material properties for common laser-cut stock
- Kerf profiles and capabilities per machine family
- Structural limits by material category and thickness
- Dimensional limits by precision tier
- Tested power/speed settings per material
- Material recommendations by design intent

Values are reference figures for CO2 laser cutters and are advisory only.
"""

from __future__ import annotations

from kerfwise.domain.value_objects import (
    CompensationMode,
    DimensionalLimits,
    KerfProperties,
    MachineCapabilities,
    MachineType,
    MaterialCategory,
    MaterialProperties,
    PrecisionTier,
    StructuralLimits,
    TemperatureRange,
    ValueRange,
)

from .models import CatalogSnapshot, MachineSettings, PowerSetting

DEFAULT_MATERIAL = "plywood-3mm"
DEFAULT_MACHINE = "glowforge-basic"
DEFAULT_PRECISION = PrecisionTier.STANDARD


def _material(
    key: str,
    name: str,
    category: MaterialCategory,
    thickness: float,
    density: float,
    tensile_strength: float,
    elastic_modulus: float,
    kerf_width: float,
    heat_affected_zone: float,
    char_depth: float,
    min_feature_size: float,
    min_hole_size: float,
    min_slot_width: float,
    max_aspect_ratio: float,
    thermal_expansion: float,
    temp_range: tuple[float, float],
    fits: tuple[float, float, float],
) -> MaterialProperties:
    press, loose, sliding = fits
    return MaterialProperties(
        key=key,
        name=name,
        category=category,
        thickness=thickness,
        density=density,
        tensile_strength=tensile_strength,
        elastic_modulus=elastic_modulus,
        kerf_width=kerf_width,
        heat_affected_zone=heat_affected_zone,
        char_depth=char_depth,
        min_feature_size=min_feature_size,
        min_hole_size=min_hole_size,
        min_slot_width=min_slot_width,
        max_aspect_ratio=max_aspect_ratio,
        thermal_expansion=thermal_expansion,
        operating_temp_range=TemperatureRange(*temp_range),
        press_fit_tolerance=press,
        loose_fit_tolerance=loose,
        sliding_fit_tolerance=sliding,
    )


# Density kg/m^3, tensile MPa, modulus GPa, lengths mm, expansion per degree C
MATERIALS: dict[str, MaterialProperties] = {
    m.key: m
    for m in (
        _material(
            "plywood-3mm", "Plywood 3mm", MaterialCategory.WOOD, 3, 600, 40, 9,
            0.1, 0.2, 0.05, 0.3, 1.5, 0.4, 20, 5e-6, (-20, 60), (-0.05, 0.15, 0.25),
        ),
        _material(
            "plywood-6mm", "Plywood 6mm", MaterialCategory.WOOD, 6, 600, 50, 10,
            0.15, 0.3, 0.1, 0.5, 2.0, 0.6, 15, 5e-6, (-20, 60), (-0.1, 0.2, 0.3),
        ),
        _material(
            "hardwood-maple-3mm", "Maple Hardwood 3mm", MaterialCategory.WOOD, 3, 750, 100, 12,
            0.08, 0.15, 0.03, 0.25, 1.2, 0.3, 25, 4e-6, (-20, 60), (-0.03, 0.12, 0.2),
        ),
        _material(
            "acrylic-3mm", "Acrylic 3mm", MaterialCategory.ACRYLIC, 3, 1180, 70, 3.2,
            0.12, 0.1, 0.0, 0.4, 1.8, 0.5, 12, 70e-6, (-40, 80), (-0.08, 0.18, 0.28),
        ),
        _material(
            "acrylic-6mm", "Acrylic 6mm", MaterialCategory.ACRYLIC, 6, 1180, 70, 3.2,
            0.18, 0.15, 0.0, 0.6, 2.5, 0.8, 10, 70e-6, (-40, 80), (-0.12, 0.22, 0.32),
        ),
        _material(
            "cardboard-3mm", "Cardboard 3mm", MaterialCategory.PAPER, 3, 700, 5, 0.5,
            0.05, 0.3, 0.1, 0.5, 2.0, 0.6, 5, 6e-6, (-20, 40), (-0.15, 0.3, 0.5),
        ),
        _material(
            "felt-3mm", "Felt 3mm", MaterialCategory.FABRIC, 3, 200, 2, 0.1,
            0.2, 0.5, 0.2, 1.0, 3.0, 1.5, 3, 10e-6, (-20, 50), (-0.5, 0.8, 1.0),
        ),
    )
}


KERF_PROFILES: dict[str, KerfProperties] = {
    "glowforge-basic": KerfProperties(
        width=0.1, variation=0.02, compensation=CompensationMode.CENTER, corner_effect=0.05
    ),
    "glowforge-pro": KerfProperties(
        width=0.08, variation=0.015, compensation=CompensationMode.CENTER, corner_effect=0.04
    ),
    "generic-co2": KerfProperties(
        width=0.12, variation=0.03, compensation=CompensationMode.CENTER, corner_effect=0.06
    ),
}


# Key: "<category>-<thickness>mm", see MaterialProperties.structural_key
STRUCTURAL_LIMITS: dict[str, StructuralLimits] = {
    "wood-3mm": StructuralLimits(120, 40, 1.0, 3.0, 2.0),
    "wood-6mm": StructuralLimits(200, 70, 2.0, 4.0, 2.0),
    "acrylic-3mm": StructuralLimits(80, 25, 1.5, 4.0, 3.0),
    "acrylic-6mm": StructuralLimits(150, 50, 2.5, 6.0, 3.0),
    # Sheet goods with little stiffness; spans are for self-supporting panels
    "paper-3mm": StructuralLimits(60, 20, 2.0, 5.0, 3.0),
    "fabric-3mm": StructuralLimits(30, 10, 3.0, 6.0, 4.0),
}


DIMENSIONAL_LIMITS: dict[str, DimensionalLimits] = {
    PrecisionTier.HIGH_PRECISION.value: DimensionalLimits(0.2, 0.1, 1000, 0.05),
    PrecisionTier.STANDARD.value: DimensionalLimits(0.3, 0.2, 500, 0.1),
    PrecisionTier.QUICK.value: DimensionalLimits(0.5, 0.5, 300, 0.2),
}


_GLOWFORGE = MachineCapabilities(
    machine_type=MachineType.LASER,
    work_area_width=279,
    work_area_height=508,
    max_thickness=25,
    min_feature_resolution=0.025,
    power_range=ValueRange(1, 100),
    speed_range=ValueRange(100, 7000),
    acceleration_x=20000,
    acceleration_y=20000,
)

MACHINES: dict[str, MachineCapabilities] = {
    "glowforge-basic": _GLOWFORGE,
    "glowforge-pro": _GLOWFORGE,
    "generic-co2": MachineCapabilities(
        machine_type=MachineType.LASER,
        work_area_width=600,
        work_area_height=400,
        max_thickness=10,
        min_feature_resolution=0.05,
        power_range=ValueRange(5, 100),
        speed_range=ValueRange(50, 5000),
        acceleration_x=10000,
        acceleration_y=10000,
    ),
}


def _settings(
    cut: tuple[float, float, int], score: tuple[float, float], engrave: tuple[float, float]
) -> MachineSettings:
    return MachineSettings(
        cut=PowerSetting(*cut),
        score=PowerSetting(*score),
        engrave=PowerSetting(*engrave),
    )


# Tested on Glowforge Pro: (power %, speed, passes)
MACHINE_SETTINGS: dict[str, MachineSettings] = {
    "plywood-3mm": _settings((75, 180, 1), (25, 500), (60, 1000)),
    "plywood-6mm": _settings((90, 120, 1), (30, 450), (70, 900)),
    "acrylic-3mm": _settings((65, 200, 1), (20, 600), (50, 1200)),
    "acrylic-6mm": _settings((85, 140, 1), (25, 550), (60, 1000)),
    "cardboard-3mm": _settings((35, 400, 1), (15, 800), (25, 1500)),
    "felt-3mm": _settings((45, 300, 1), (20, 600), (30, 1200)),
}


DESIGN_INTENTS: dict[str, tuple[str, ...]] = {
    "decorative": ("plywood-3mm", "acrylic-3mm", "cardboard-3mm"),
    "structural": ("plywood-6mm", "hardwood-maple-3mm", "acrylic-6mm"),
    "mechanical": ("hardwood-maple-3mm", "acrylic-6mm", "plywood-6mm"),
    "artistic": ("felt-3mm", "cardboard-3mm", "acrylic-3mm"),
}


def builtin_snapshot() -> CatalogSnapshot:
    """Snapshot of the built-in tables."""
    return CatalogSnapshot(
        materials=MATERIALS,
        kerf_profiles=KERF_PROFILES,
        structural_limits=STRUCTURAL_LIMITS,
        dimensional_limits=DIMENSIONAL_LIMITS,
        machines=MACHINES,
        machine_settings=MACHINE_SETTINGS,
        intents=DESIGN_INTENTS,
        default_material=DEFAULT_MATERIAL,
    )
