"""DXF format exporter for nesting results.

Generates 2D DXF files (R2010 format) for the laser cutter. Sheets are laid
out side by side along X, each with its outline, the placed part outlines and
a label per part. Coordinates are millimetres with Y pointing up, so part
positions (measured from the sheet's top-left corner) are flipped.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import ezdxf
from ezdxf import units

from kerfwise.domain.value_objects import NestingResult, PlacedPart, SheetLayout

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

logger = logging.getLogger(__name__)


# Layer configuration for DXF output
LAYERS = {
    "SHEETS": {"color": 8},  # Gray - stock sheet outlines
    "PARTS": {"color": 1},  # Red - part cut lines
    "LABELS": {"color": 5},  # Blue - part labels
}


class NestingDxfExporter:
    """Exports nesting results to DXF format.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
        sheet_spacing: Gap between consecutive sheets along X, in mm.
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(self, sheet_spacing: float = 50.0, label_parts: bool = True) -> None:
        if sheet_spacing < 0:
            raise ValueError("Sheet spacing must be non-negative")
        self.sheet_spacing = sheet_spacing
        self.label_parts = label_parts

    def export(self, result: NestingResult, path: Path) -> None:
        """Export a nesting result to a DXF file.

        Args:
            result: The nesting result to export.
            path: Path where the DXF file will be saved.
        """
        if not result.sheets:
            logger.warning("No sheets to export")
            return
        doc = self._build_document(result)
        doc.saveas(path)
        logger.info("Exported %d sheets to %s", len(result.sheets), path)

    def export_string(self, result: NestingResult) -> str:
        """Export a nesting result as a DXF string.

        Returns:
            DXF file content, or an empty string when no sheet was used.
        """
        if not result.sheets:
            return ""
        doc = self._build_document(result)
        stream = StringIO()
        doc.write(stream)
        return stream.getvalue()

    def _build_document(self, result: NestingResult) -> Drawing:
        doc = ezdxf.new("R2010")
        doc.units = units.MM
        for name, props in LAYERS.items():
            doc.layers.add(name, color=props["color"])

        msp = doc.modelspace()
        offset_x = 0.0
        for layout in result.sheets:
            self._draw_sheet(msp, layout, offset_x)
            offset_x += layout.sheet.width + self.sheet_spacing
        return doc

    def _draw_sheet(self, msp: Modelspace, layout: SheetLayout, offset_x: float) -> None:
        """Draw one sheet outline and its parts."""
        sheet = layout.sheet
        msp.add_lwpolyline(
            self._rectangle(offset_x, 0.0, sheet.width, sheet.height),
            close=True,
            dxfattribs={"layer": "SHEETS"},
        )
        for placed in layout.placed_parts:
            x = offset_x + placed.x
            y = sheet.height - placed.bottom_edge
            msp.add_lwpolyline(
                self._rectangle(x, y, placed.width, placed.height),
                close=True,
                dxfattribs={"layer": "PARTS"},
            )
            if self.label_parts:
                self._draw_label(msp, placed, x, y)

    def _draw_label(self, msp: Modelspace, placed: PlacedPart, x: float, y: float) -> None:
        """Centre the instance id inside the part outline."""
        # 8% of the smaller side, kept between 2 and 20 mm
        text_height = max(2.0, min(20.0, min(placed.width, placed.height) * 0.08))
        msp.add_mtext(
            placed.instance_id,
            dxfattribs={
                "layer": "LABELS",
                "char_height": text_height,
                "insert": (x + placed.width / 2, y + placed.height / 2),
                "attachment_point": 5,  # MIDDLE_CENTER
            },
        )

    @staticmethod
    def _rectangle(x: float, y: float, width: float, height: float) -> list[tuple[float, float]]:
        return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
