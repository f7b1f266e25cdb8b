"""Adapters converting validated configuration into domain objects.

This module turns the Pydantic configuration models into the immutable
domain records used by the catalog, the validator and the nesting optimizer.
Domain validation still applies: a record the domain rejects raises
InvalidInputError.
"""

from __future__ import annotations

import logging

from kerfwise.application.config.schemas import (
    BeamFeatureConfig,
    CantileverFeatureConfig,
    CatalogConfig,
    CurveFeatureConfig,
    FeatureConfig,
    HoleFeatureConfig,
    JointFeatureConfig,
    LineFeatureConfig,
    MachineConfig,
    MaterialConfig,
    NestingJobConfig,
    PathConfig,
    PowerSettingConfig,
    SlotFeatureConfig,
)
from kerfwise.domain.services.catalog import (
    CatalogSnapshot,
    MachineSettings,
    MaterialCatalog,
    PowerSetting,
    builtin_snapshot,
)
from kerfwise.domain.services.nesting import CostModel
from kerfwise.domain.value_objects import (
    BeamFeature,
    CantileverFeature,
    CurveFeature,
    DimensionalLimits,
    GeometricFeature,
    HoleFeature,
    JointFeature,
    KerfProperties,
    LineFeature,
    MachineCapabilities,
    MaterialProperties,
    MaterialSheet,
    NestingOptions,
    PartShape,
    Path,
    SlotFeature,
    StructuralLimits,
    TemperatureRange,
    ValueRange,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Catalog
# =============================================================================


def _material(key: str, config: MaterialConfig) -> MaterialProperties:
    return MaterialProperties(
        key=key,
        name=config.name,
        category=config.category,
        thickness=config.thickness,
        density=config.density,
        tensile_strength=config.tensile_strength,
        elastic_modulus=config.elastic_modulus,
        kerf_width=config.kerf_width,
        heat_affected_zone=config.heat_affected_zone,
        char_depth=config.char_depth,
        min_feature_size=config.min_feature_size,
        min_hole_size=config.min_hole_size,
        min_slot_width=config.min_slot_width,
        max_aspect_ratio=config.max_aspect_ratio,
        thermal_expansion=config.thermal_expansion,
        operating_temp_range=TemperatureRange(
            config.operating_temp_range.min, config.operating_temp_range.max
        ),
        press_fit_tolerance=config.press_fit_tolerance,
        loose_fit_tolerance=config.loose_fit_tolerance,
        sliding_fit_tolerance=config.sliding_fit_tolerance,
    )


def _machine(config: MachineConfig) -> MachineCapabilities:
    return MachineCapabilities(
        machine_type=config.machine_type,
        work_area_width=config.work_area_width,
        work_area_height=config.work_area_height,
        max_thickness=config.max_thickness,
        min_feature_resolution=config.min_feature_resolution,
        power_range=ValueRange(config.power_range.min, config.power_range.max),
        speed_range=ValueRange(config.speed_range.min, config.speed_range.max),
        acceleration_x=config.acceleration_x,
        acceleration_y=config.acceleration_y,
    )


def _power(config: PowerSettingConfig) -> PowerSetting:
    return PowerSetting(power=config.power, speed=config.speed, passes=config.passes)


def snapshot_from_config(
    config: CatalogConfig, base: CatalogSnapshot | None = None
) -> CatalogSnapshot:
    """Build a catalog snapshot from a catalog override file.

    Args:
        config: Validated catalog configuration.
        base: Snapshot merged over in "merge" mode. Uses the built-in tables
            if not provided.

    Returns:
        The merged or replacement snapshot.
    """
    tables = {
        "materials": {key: _material(key, m) for key, m in config.materials.items()},
        "kerf_profiles": {
            key: KerfProperties(
                width=k.width,
                variation=k.variation,
                compensation=k.compensation,
                corner_effect=k.corner_effect,
            )
            for key, k in config.kerf_profiles.items()
        },
        "structural_limits": {
            key: StructuralLimits(**s.model_dump()) for key, s in config.structural_limits.items()
        },
        "dimensional_limits": {
            tier.value: DimensionalLimits(**d.model_dump())
            for tier, d in config.dimensional_limits.items()
        },
        "machines": {key: _machine(m) for key, m in config.machines.items()},
        "machine_settings": {
            key: MachineSettings(
                cut=_power(s.cut), score=_power(s.score), engrave=_power(s.engrave)
            )
            for key, s in config.machine_settings.items()
        },
        "intents": {intent.lower(): tuple(keys) for intent, keys in config.intents.items()},
    }

    if config.mode == "replace":
        logger.info("Replacing catalog with %d materials", len(tables["materials"]))
        return CatalogSnapshot(**tables, default_material=config.default_material or "")

    base = base or builtin_snapshot()
    logger.info(
        "Merging %d materials and %d machines into catalog",
        len(tables["materials"]),
        len(tables["machines"]),
    )
    return base.merged_with(**tables, default_material=config.default_material)


def catalog_from_config(
    config: CatalogConfig, base: CatalogSnapshot | None = None
) -> MaterialCatalog:
    """Build a MaterialCatalog from a catalog override file."""
    return MaterialCatalog(snapshot_from_config(config, base))


# =============================================================================
# Designs
# =============================================================================


def feature_from_config(config: FeatureConfig) -> GeometricFeature:
    """Convert one feature entry into a domain feature."""
    if isinstance(config, LineFeatureConfig):
        return LineFeature.between(*config.start, *config.end)
    if isinstance(config, CurveFeatureConfig):
        return CurveFeature.arc(*config.center, config.radius, config.sweep_degrees)
    if isinstance(config, HoleFeatureConfig):
        return HoleFeature.at(*config.center, config.diameter)
    if isinstance(config, JointFeatureConfig):
        return JointFeature.at(
            config.x, config.y, config.length, config.width, config.fit, config.horizontal
        )
    rect_types = {
        SlotFeatureConfig: SlotFeature,
        BeamFeatureConfig: BeamFeature,
        CantileverFeatureConfig: CantileverFeature,
    }
    feature_type = rect_types[type(config)]
    return feature_type.at(config.x, config.y, config.length, config.width, config.horizontal)


def features_from_config(configs: list[FeatureConfig]) -> list[GeometricFeature]:
    """Convert feature entries in order."""
    return [feature_from_config(c) for c in configs]


def paths_from_config(configs: list[PathConfig]) -> list[Path]:
    """Convert path entries in order."""
    return [Path.from_coords(c.points, closed=c.closed) for c in configs]


# =============================================================================
# Nesting jobs
# =============================================================================


def parts_from_job(job: NestingJobConfig) -> list[PartShape]:
    return [
        PartShape(**{**part.model_dump(), "name": part.name or part.id})
        for part in job.parts
    ]


def sheets_from_job(job: NestingJobConfig) -> list[MaterialSheet]:
    return [
        MaterialSheet(**{**sheet.model_dump(), "name": sheet.name or sheet.id})
        for sheet in job.sheets
    ]


def options_from_job(job: NestingJobConfig) -> NestingOptions:
    return NestingOptions(**job.options.model_dump())


def cost_model_from_job(job: NestingJobConfig) -> CostModel:
    return CostModel(**job.cost.model_dump())
