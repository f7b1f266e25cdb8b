"""Infrastructure layer: rendering, file export and text formatting."""

from .dxf_exporter import LAYERS, NestingDxfExporter
from .formatters import (
    ConstraintsFormatter,
    JsonExporter,
    MachineSettingsFormatter,
    MaterialChoiceFormatter,
    MaterialListFormatter,
    NestingReportFormatter,
    ValidationReportFormatter,
)
from .layout_renderer import NestingLayoutRenderer

__all__ = [
    "ConstraintsFormatter",
    "JsonExporter",
    "LAYERS",
    "MachineSettingsFormatter",
    "MaterialChoiceFormatter",
    "MaterialListFormatter",
    "NestingDxfExporter",
    "NestingLayoutRenderer",
    "NestingReportFormatter",
    "ValidationReportFormatter",
]
