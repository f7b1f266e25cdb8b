"""MaterialCatalog service.

This module provides the MaterialCatalog class, the single entry point for
material, machine and constraint lookups. A catalog wraps one immutable
CatalogSnapshot; reload() swaps the snapshot reference, so concurrent readers
always see a complete generation of every table.
"""

from __future__ import annotations

import logging

from kerfwise.domain.errors import (
    CatalogError,
    UnknownMachineError,
    UnknownMaterialError,
    UnknownPrecisionError,
)
from kerfwise.domain.value_objects import (
    ManufacturingConstraints,
    MaterialCategory,
    MaterialProperties,
    PrecisionTier,
    StructuralLimits,
)

from .models import (
    CatalogSnapshot,
    MachineSettings,
    MaterialChoiceReport,
    MaterialRequirements,
)
from .tables import DEFAULT_MACHINE, DEFAULT_MATERIAL, builtin_snapshot

logger = logging.getLogger(__name__)


# Material families that do not survive weather exposure
_NOT_WEATHER_RESISTANT = (MaterialCategory.PAPER, MaterialCategory.FABRIC)

_SPAN_ALTERNATIVES = ("plywood-6mm", "hardwood-maple-3mm")
_FEATURE_ALTERNATIVES = ("hardwood-maple-3mm", "acrylic-3mm")
_TRANSPARENT_ALTERNATIVES = ("acrylic-3mm", "acrylic-6mm")
_FLEXIBLE_ALTERNATIVES = ("felt-3mm", "cardboard-3mm")
_OUTDOOR_ALTERNATIVES = ("acrylic-3mm", "acrylic-6mm")


class MaterialCatalog:
    """Lookup service over material, machine and constraint tables.

    Example:
        >>> catalog = MaterialCatalog()
        >>> constraints = catalog.resolve_constraints("acrylic-3mm")
        >>> constraints.material.min_hole_size
        1.8
    """

    def __init__(self, snapshot: CatalogSnapshot | None = None) -> None:
        """Initialize the catalog.

        Args:
            snapshot: Tables to serve. Uses the built-in tables if not provided.
        """
        self._snapshot = snapshot or builtin_snapshot()
        self._warn_on_inconsistent_records(self._snapshot)

    @property
    def snapshot(self) -> CatalogSnapshot:
        """The snapshot currently being served."""
        return self._snapshot

    def reload(self, snapshot: CatalogSnapshot) -> None:
        """Replace every table at once.

        Args:
            snapshot: New generation of the tables.
        """
        self._warn_on_inconsistent_records(snapshot)
        # Single reference assignment; readers holding the old snapshot keep it
        self._snapshot = snapshot
        logger.info(
            "Catalog reloaded: %d materials, %d machines",
            len(snapshot.materials),
            len(snapshot.machines),
        )

    # --- Lookups ---

    def material_keys(self) -> list[str]:
        """All material keys, sorted."""
        return sorted(self._snapshot.materials)

    def machine_keys(self) -> list[str]:
        """Machine keys that have both a kerf profile and capabilities, sorted."""
        snapshot = self._snapshot
        return sorted(k for k in snapshot.kerf_profiles if k in snapshot.machines)

    def material(self, key: str) -> MaterialProperties:
        """Properties of one material.

        Raises:
            UnknownMaterialError: If the key is not in the catalog.
        """
        try:
            return self._snapshot.materials[key]
        except KeyError:
            raise UnknownMaterialError(key) from None

    def resolve_constraints(
        self,
        material_key: str,
        machine_key: str = DEFAULT_MACHINE,
        precision: PrecisionTier | str = PrecisionTier.STANDARD,
    ) -> ManufacturingConstraints:
        """Build the constraint bundle for a material, machine and precision tier.

        Args:
            material_key: Catalog key of the material.
            machine_key: Machine family providing kerf and capabilities.
            precision: Precision tier selecting the dimensional limits.

        Returns:
            ManufacturingConstraints for the triple.

        Raises:
            UnknownMaterialError: If the material key is absent.
            UnknownMachineError: If the machine has no kerf profile or capabilities.
            UnknownPrecisionError: If the tier has no dimensional limits.
            CatalogError: If no structural limits exist for the material's category.
        """
        snapshot = self._snapshot
        material = self.material(material_key)

        kerf = snapshot.kerf_profiles.get(machine_key)
        machine = snapshot.machines.get(machine_key)
        if kerf is None or machine is None:
            raise UnknownMachineError(machine_key)

        try:
            tier = PrecisionTier(precision)
        except ValueError:
            raise UnknownPrecisionError(str(precision)) from None
        dimensional = snapshot.dimensional_limits.get(tier.value)
        if dimensional is None:
            raise UnknownPrecisionError(tier.value)

        structural = self._structural_limits(material)

        logger.debug(
            "Resolved constraints for %s on %s (%s)", material_key, machine_key, tier.value
        )
        return ManufacturingConstraints(
            material=material,
            kerf=kerf,
            structural=structural,
            dimensional=dimensional,
            machine=machine,
            machine_key=machine_key,
            precision=tier,
        )

    def _structural_limits(self, material: MaterialProperties) -> StructuralLimits:
        """Structural limits for a material, falling back to the nearest thickness."""
        table = self._snapshot.structural_limits
        key = material.structural_key
        if key in table:
            return table[key]

        prefix = f"{material.category.value}-"
        candidates: list[tuple[float, str]] = []
        for candidate in table:
            if not (candidate.startswith(prefix) and candidate.endswith("mm")):
                continue
            try:
                thickness = float(candidate[len(prefix):-2])
            except ValueError:
                continue
            candidates.append((thickness, candidate))

        if not candidates:
            raise CatalogError(
                f"No structural limits for category '{material.category.value}'",
                key=key,
                table="structural_limits",
            )

        # Closest thickness; ties go to the thinner, more conservative entry
        _, closest = min(candidates, key=lambda c: (abs(c[0] - material.thickness), c[0]))
        logger.warning(
            "No structural limits for %s, using nearest thickness entry %s",
            key,
            closest,
        )
        return table[closest]

    # --- Advice ---

    def recommend_materials(self, intent: str) -> list[str]:
        """Materials suited to a design intent, best first.

        Args:
            intent: One of decorative, structural, mechanical, artistic.

        Returns:
            Ordered material keys; the default material for unknown intents.
        """
        keys = self._snapshot.intents.get(intent.lower())
        if keys is None:
            logger.debug("Unknown design intent '%s', recommending default", intent)
            return [self._snapshot.default_material or DEFAULT_MATERIAL]
        return list(keys)

    def validate_material_choice(
        self,
        material_key: str,
        requirements: MaterialRequirements,
    ) -> MaterialChoiceReport:
        """Check a material against what a design needs.

        Unknown materials produce an invalid report rather than an error, so
        the result can be shown next to the user's selection.

        Args:
            material_key: Catalog key of the chosen material.
            requirements: Design requirements to check.

        Returns:
            MaterialChoiceReport with issues and de-duplicated alternatives.
        """
        snapshot = self._snapshot
        material = snapshot.materials.get(material_key)
        if material is None:
            return MaterialChoiceReport(
                is_valid=False,
                issues=(f"Unknown material: {material_key}",),
                alternatives=(snapshot.default_material or DEFAULT_MATERIAL,),
            )

        issues: list[str] = []
        alternatives: list[str] = []

        if requirements.max_span is not None:
            try:
                structural = self._structural_limits(material)
            except CatalogError as exc:
                issues.append(f"Span cannot be checked: {exc}")
            else:
                if requirements.max_span > structural.max_span_without_support:
                    issues.append(
                        f"Design span {requirements.max_span:g}mm exceeds material limit "
                        f"{structural.max_span_without_support:g}mm"
                    )
                    alternatives.extend(_SPAN_ALTERNATIVES)

        if (
            requirements.min_feature is not None
            and requirements.min_feature < material.min_feature_size
        ):
            issues.append(
                f"Required feature size {requirements.min_feature:g}mm below material "
                f"capability {material.min_feature_size:g}mm"
            )
            alternatives.extend(_FEATURE_ALTERNATIVES)

        if requirements.needs_transparency and material.category != MaterialCategory.ACRYLIC:
            issues.append("Design requires transparency but material is opaque")
            alternatives.extend(_TRANSPARENT_ALTERNATIVES)

        if requirements.needs_flexibility and material.category == MaterialCategory.ACRYLIC:
            issues.append("Design requires flexibility but acrylic is brittle")
            alternatives.extend(_FLEXIBLE_ALTERNATIVES)

        if requirements.outdoor_use and material.category in _NOT_WEATHER_RESISTANT:
            issues.append(
                f"Design is for outdoor use but {material.category.value} "
                "is not weather resistant"
            )
            alternatives.extend(_OUTDOOR_ALTERNATIVES)

        # Ordered de-duplication, never suggest the material being checked
        distinct = tuple(
            key
            for key in dict.fromkeys(alternatives)
            if key != material_key and key in snapshot.materials
        )
        return MaterialChoiceReport(
            is_valid=not issues, issues=tuple(issues), alternatives=distinct
        )

    def machine_settings(
        self,
        material_key: str,
        fallback: str | None = DEFAULT_MATERIAL,
    ) -> MachineSettings:
        """Tested cut/score/engrave settings for a material.

        Args:
            material_key: Catalog key of the material.
            fallback: Material whose settings are used when the key has none.
                None disables the fallback.

        Returns:
            MachineSettings for the material or its fallback.

        Raises:
            UnknownMaterialError: If there are no settings and no usable fallback.
        """
        table = self._snapshot.machine_settings
        settings = table.get(material_key)
        if settings is not None:
            return settings

        if fallback is None or fallback not in table:
            raise UnknownMaterialError(material_key)

        logger.warning(
            "No machine settings for %s, using settings for %s", material_key, fallback
        )
        return table[fallback]

    # --- Internals ---

    @staticmethod
    def _warn_on_inconsistent_records(snapshot: CatalogSnapshot) -> None:
        for key, material in snapshot.materials.items():
            if material.min_feature_size > material.min_hole_size:
                logger.warning(
                    "Material %s: min feature size %.2fmm exceeds min hole size %.2fmm",
                    key,
                    material.min_feature_size,
                    material.min_hole_size,
                )


def default_catalog() -> MaterialCatalog:
    """Catalog serving the built-in tables."""
    return MaterialCatalog(builtin_snapshot())
