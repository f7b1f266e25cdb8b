"""Error taxonomy for the kerfwise core.

Lookup failures against the material catalog and structurally malformed
inputs are raised immediately. Design-quality findings (undersized features,
excessive spans, unplaceable parts) are never raised; they are returned as
data on ValidationResult and NestingResult.
"""

from __future__ import annotations


class KerfwiseError(Exception):
    """Base class for all errors raised by kerfwise."""


class CatalogError(KerfwiseError, LookupError):
    """A catalog lookup could not be resolved.

    Attributes:
        key: The key that failed to resolve.
        table: Name of the catalog table that was searched.
    """

    def __init__(self, message: str, key: str = "", table: str = "") -> None:
        self.key = key
        self.table = table
        super().__init__(message)


class UnknownMaterialError(CatalogError):
    """Material key is absent from the catalog."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown material: {key}", key=key, table="materials")


class UnknownMachineError(CatalogError):
    """Machine key has no kerf profile or capability record."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown machine: {key}", key=key, table="machines")


class UnknownPrecisionError(CatalogError):
    """Precision tier has no dimensional limits record."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Unknown precision tier: {key}", key=key, table="dimensional_limits"
        )


class InvalidInputError(KerfwiseError, ValueError):
    """Geometry, part or sheet records are structurally malformed.

    Raised for negative or zero dimensions, empty required fields and
    out-of-range enumerations. Subclasses ValueError so callers that treat
    bad values generically keep working.
    """
