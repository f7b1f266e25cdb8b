"""Data models for the material catalog.

This module contains the machine settings records, the material choice
request/report pair and the immutable CatalogSnapshot that backs a
MaterialCatalog.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.value_objects import (
    DimensionalLimits,
    KerfProperties,
    MachineCapabilities,
    MaterialProperties,
    StructuralLimits,
)


@dataclass(frozen=True)
class PowerSetting:
    """Laser power/speed/pass triple for one operation.

    Attributes:
        power: Power in percent (0-100).
        speed: Head speed in machine units.
        passes: Number of passes.
    """

    power: float
    speed: float
    passes: int = 1

    def __post_init__(self) -> None:
        if not 0 <= self.power <= 100:
            raise InvalidInputError("Power must be between 0 and 100 percent")
        if self.speed <= 0:
            raise InvalidInputError("Speed must be positive")
        if self.passes < 1:
            raise InvalidInputError("Passes must be at least 1")


@dataclass(frozen=True)
class MachineSettings:
    """Recommended settings for cutting, scoring and engraving a material."""

    cut: PowerSetting
    score: PowerSetting
    engrave: PowerSetting


@dataclass(frozen=True)
class MaterialRequirements:
    """What a design asks of its material.

    Attributes:
        max_span: Longest unsupported span in the design (mm), if known.
        min_feature: Smallest feature the design needs (mm), if known.
        needs_flexibility: The part must bend without breaking.
        needs_transparency: The part must let light through.
        outdoor_use: The part will be exposed to weather.
    """

    max_span: float | None = None
    min_feature: float | None = None
    needs_flexibility: bool = False
    needs_transparency: bool = False
    outdoor_use: bool = False


@dataclass(frozen=True)
class MaterialChoiceReport:
    """Result of checking a material against design requirements."""

    is_valid: bool
    issues: tuple[str, ...] = ()
    alternatives: tuple[str, ...] = ()


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CatalogSnapshot:
    """One immutable generation of every catalog table.

    Readers hold a reference to a snapshot; reloading replaces the whole
    snapshot, so a record is never observed half-updated.

    Attributes:
        materials: Material key to properties.
        kerf_profiles: Machine key to kerf profile.
        structural_limits: "<category>-<thickness>mm" to structural limits.
        dimensional_limits: Precision tier value to dimensional limits.
        machines: Machine key to capabilities.
        machine_settings: Material key to power settings.
        intents: Design intent to ordered material keys.
        default_material: Material returned for unknown intents and used as
            the machine settings fallback.
    """

    materials: Mapping[str, MaterialProperties]
    kerf_profiles: Mapping[str, KerfProperties]
    structural_limits: Mapping[str, StructuralLimits]
    dimensional_limits: Mapping[str, DimensionalLimits]
    machines: Mapping[str, MachineCapabilities]
    machine_settings: Mapping[str, MachineSettings] = field(
        default_factory=lambda: MappingProxyType({})
    )
    intents: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    default_material: str = ""

    def __post_init__(self) -> None:
        # Wrap in read-only proxies; frozen dataclass needs object.__setattr__
        for name in (
            "materials",
            "kerf_profiles",
            "structural_limits",
            "dimensional_limits",
            "machines",
            "machine_settings",
        ):
            object.__setattr__(self, name, _freeze(getattr(self, name)))
        object.__setattr__(
            self,
            "intents",
            _freeze({k: tuple(v) for k, v in self.intents.items()}),
        )
        if self.default_material and self.default_material not in self.materials:
            raise InvalidInputError(
                f"Default material '{self.default_material}' is not in the materials table"
            )

    def merged_with(
        self,
        *,
        materials: Mapping[str, MaterialProperties] | None = None,
        kerf_profiles: Mapping[str, KerfProperties] | None = None,
        structural_limits: Mapping[str, StructuralLimits] | None = None,
        dimensional_limits: Mapping[str, DimensionalLimits] | None = None,
        machines: Mapping[str, MachineCapabilities] | None = None,
        machine_settings: Mapping[str, MachineSettings] | None = None,
        intents: Mapping[str, tuple[str, ...]] | None = None,
        default_material: str | None = None,
    ) -> CatalogSnapshot:
        """New snapshot with the given records added or replaced."""
        return CatalogSnapshot(
            materials={**self.materials, **(materials or {})},
            kerf_profiles={**self.kerf_profiles, **(kerf_profiles or {})},
            structural_limits={**self.structural_limits, **(structural_limits or {})},
            dimensional_limits={**self.dimensional_limits, **(dimensional_limits or {})},
            machines={**self.machines, **(machines or {})},
            machine_settings={**self.machine_settings, **(machine_settings or {})},
            intents={**self.intents, **(intents or {})},
            default_material=(
                self.default_material if default_material is None else default_material
            ),
        )
