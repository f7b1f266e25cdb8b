"""Configuration file loader with error handling.

This module loads and validates the JSON input files: catalog overrides,
designs and nesting jobs. File system errors, JSON syntax errors and Pydantic
validation errors are all reported as ConfigError with an error_type and,
for validation failures, one detail per offending field.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from kerfwise.application.config.schemas import CatalogConfig, DesignConfig, NestingJobConfig

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class ConfigError(Exception):
    """An input file could not be read, parsed or validated.

    Attributes:
        message: Summary shown to the user.
        error_type: One of file_not_found, permission_denied, file_read_error,
            json_parse or validation.
        path: File being loaded, when there is one.
        details: Line and column for JSON errors, one entry per field for
            validation errors.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)


def json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a path such as ``parts[0].width``."""
    text = ""
    for segment in loc:
        text += f"[{segment}]" if isinstance(segment, int) else f".{segment}"
    return text.lstrip(".")


def _field_errors(error: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _validation_report(model: type[BaseModel], details: list[dict[str, Any]]) -> str:
    count = len(details)
    lines = [f"{model.__name__}: {count} invalid field{'s' if count != 1 else ''}"]
    for detail in details:
        value = detail["value"]
        # Whole objects are too noisy to echo back
        shown = "" if value is None or isinstance(value, (dict, list)) else f" (got: {value!r})"
        lines.append(f"  - {detail['path'] or '<root>'}: {detail['message']}{shown}")
    return "\n".join(lines)


def _read_json(path: Path) -> Any:
    """Read and parse a JSON file, mapping failures to ConfigError."""
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in config file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )


def _validate(model: type[ConfigT], data: Any, path: Path | None = None) -> ConfigT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = _field_errors(e)
        raise ConfigError(
            message=_validation_report(model, details),
            error_type="validation",
            path=path,
            details=details,
        )


def load_catalog_config(path: Path) -> CatalogConfig:
    """Load and validate a catalog override file.

    Args:
        path: Path to the JSON file.

    Returns:
        A validated CatalogConfig.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    return _validate(CatalogConfig, _read_json(path), path)


def load_design_config(path: Path) -> DesignConfig:
    """Load and validate a design file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    return _validate(DesignConfig, _read_json(path), path)


def load_nesting_job(path: Path) -> NestingJobConfig:
    """Load and validate a nesting job file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    return _validate(NestingJobConfig, _read_json(path), path)


def load_config_from_dict(model: type[ConfigT], data: dict[str, Any]) -> ConfigT:
    """Validate configuration data that did not come from a file.

    Args:
        model: Schema class to validate against.
        data: Parsed configuration data.

    Returns:
        A validated model instance.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(model, data)
