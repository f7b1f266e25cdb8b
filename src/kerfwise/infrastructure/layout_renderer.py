"""Nesting layout rendering.

This module provides SVG rendering of nesting results showing each sheet,
its margin, the placed parts labelled by part id, the waste strips and a
summary of the run.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from kerfwise.domain.value_objects import NestingResult, PlacedPart, SheetLayout

TITLE = "Material Nesting Layout"
FONT = "Arial, sans-serif"


class NestingLayoutRenderer:
    """Renders nesting results in SVG format.

    Sheets are stacked vertically below a title block, each with its own
    header line. A summary block and a legend follow the last sheet.

    Attributes:
        scale: Pixels per millimetre (default 1.0).
        part_fill: Fill color for placed parts.
        part_stroke: Stroke color for part and sheet outlines.
        sheet_fill: Fill color for the sheet background.
        waste_fill: Fill color for waste strips.
        text_color: Color for labels.
        show_dimensions: Whether to print part dimensions under the label.
    """

    title_height = 40
    header_height = 24
    sheet_spacing = 20
    summary_line_height = 18
    legend_height = 30

    def __init__(
        self,
        scale: float = 1.0,
        part_fill: str = "#ADD8E6",  # Light blue
        part_stroke: str = "#000000",
        sheet_fill: str = "#F5DEB3",  # Wheat
        waste_fill: str = "#D3D3D3",  # Light gray
        text_color: str = "#000000",
        show_dimensions: bool = True,
    ) -> None:
        if scale <= 0:
            raise ValueError("Scale must be positive")
        self.scale = scale
        self.part_fill = part_fill
        self.part_stroke = part_stroke
        self.sheet_fill = sheet_fill
        self.waste_fill = waste_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions

    def render(self, result: NestingResult) -> str:
        """Generate a single SVG with all sheets stacked vertically.

        Args:
            result: Nesting result to draw.

        Returns:
            SVG document as a string.
        """
        summary_lines = self._summary_lines(result)
        summary_height = (len(summary_lines) + 1) * self.summary_line_height

        sheets_height = sum(
            layout.sheet.height * self.scale + self.header_height + self.sheet_spacing
            for layout in result.sheets
        )
        widest = max((layout.sheet.width for layout in result.sheets), default=200.0)
        svg_width = max(widest * self.scale, 320.0)
        svg_height = self.title_height + sheets_height + summary_height + self.legend_height

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{svg_height:g}" '
            f'fill="white"/>',
            f'  <text x="10" y="{self.title_height - 14}" font-family="{FONT}" '
            f'font-size="18" font-weight="bold" fill="{self.text_color}">{TITLE}</text>',
        ]

        y_offset = float(self.title_height)
        total_sheets = len(result.sheets)
        for layout in result.sheets:
            parts.append(f'  <g class="sheet" transform="translate(0, {y_offset:g})">')
            parts.append(self._render_sheet(layout, total_sheets))
            parts.append("  </g>")
            y_offset += layout.sheet.height * self.scale + self.header_height + self.sheet_spacing

        if not result.sheets:
            parts.append(
                f'  <text x="10" y="{y_offset + 14:g}" font-family="{FONT}" '
                f'font-size="12" fill="{self.text_color}">No sheets used</text>'
            )
            y_offset += self.sheet_spacing

        parts.append(self._render_summary(summary_lines, y_offset))
        y_offset += summary_height
        parts.append(self._render_legend(y_offset))
        parts.append("</svg>")
        return "\n".join(parts)

    def _render_sheet(self, layout: SheetLayout, total_sheets: int) -> str:
        """Render one sheet: header, outline, usable area, waste and parts."""
        sheet = layout.sheet
        top = self.header_height
        width = sheet.width * self.scale
        height = sheet.height * self.scale

        header = (
            f"Sheet {layout.sheet_index + 1} of {total_sheets} - {sheet.name} "
            f"({sheet.width:g} x {sheet.height:g} mm) - "
            f"{layout.utilization:.1f}% utilized"
        )
        svg = [
            f'    <text x="4" y="{top - 7}" font-family="{FONT}" font-size="12" '
            f'fill="{self.text_color}">{escape(header)}</text>',
            f'    <rect class="sheet-outline" x="0" y="{top}" width="{width:g}" '
            f'height="{height:g}" fill="{self.sheet_fill}" stroke="{self.part_stroke}" '
            f'stroke-width="2"/>',
        ]
        if sheet.margin > 0:
            m = sheet.margin * self.scale
            svg.append(
                f'    <rect x="{m:g}" y="{top + m:g}" '
                f'width="{sheet.usable_width * self.scale:g}" '
                f'height="{sheet.usable_height * self.scale:g}" '
                f'fill="none" stroke="#999999" stroke-dasharray="5,5"/>'
            )
        svg.extend(self._render_waste(layout, top))
        for placed in layout.placed_parts:
            svg.append(self._render_part(placed, top))
        return "\n".join(svg)

    def _render_part(self, placed: PlacedPart, top: float) -> str:
        """Render a placed part as a rect with its part id centred inside."""
        x = placed.x * self.scale
        y = top + placed.y * self.scale
        w = placed.width * self.scale
        h = placed.height * self.scale
        rect = (
            f'      <rect class="part" x="{x:g}" y="{y:g}" width="{w:g}" height="{h:g}" '
            f'fill="{self.part_fill}" stroke="{self.part_stroke}"/>'
        )

        font_size = min(12.0, min(w, h) / 4)
        if font_size < 4:
            # Too small for text
            return f'    <g data-instance="{escape(placed.instance_id)}">\n{rect}\n    </g>'

        cx = x + w / 2
        cy = y + h / 2
        svg = [
            f'    <g data-instance="{escape(placed.instance_id)}">',
            rect,
            f'      <text x="{cx:g}" y="{cy:g}" text-anchor="middle" '
            f'font-family="{FONT}" font-size="{font_size:g}" '
            f'fill="{self.text_color}">{escape(placed.part_id)}</text>',
        ]
        if self.show_dimensions:
            dims = f"{placed.width:g} x {placed.height:g}"
            if placed.rotation:
                dims += f" ({placed.rotation:g}°)"
            svg.append(
                f'      <text x="{cx:g}" y="{cy + font_size + 2:g}" text-anchor="middle" '
                f'font-family="{FONT}" font-size="{font_size * 0.8:g}" '
                f'fill="{self.text_color}">{escape(dims)}</text>'
            )
        svg.append("    </g>")
        return "\n".join(svg)

    def _render_waste(self, layout: SheetLayout, top: float) -> list[str]:
        """Waste strips below and to the right of the placed parts.

        The strips approximate the offcut; gaps between parts are not drawn.
        """
        sheet = layout.sheet
        if not layout.placed_parts:
            return []
        margin = sheet.margin
        max_x = max(p.right_edge for p in layout.placed_parts)
        max_y = max(p.bottom_edge for p in layout.placed_parts)
        inner_right = sheet.width - margin
        inner_bottom = sheet.height - margin

        strips: list[str] = []
        if inner_bottom - max_y > 1:
            strips.append(
                self._waste_rect(margin, max_y, sheet.usable_width, inner_bottom - max_y, top)
            )
        if inner_right - max_x > 1:
            strips.append(
                self._waste_rect(max_x, margin, inner_right - max_x, max_y - margin, top)
            )
        return strips

    def _waste_rect(self, x: float, y: float, w: float, h: float, top: float) -> str:
        return (
            f'    <rect class="waste" x="{x * self.scale:g}" y="{top + y * self.scale:g}" '
            f'width="{w * self.scale:g}" height="{h * self.scale:g}" '
            f'fill="{self.waste_fill}" stroke="none"/>'
        )

    def _summary_lines(self, result: NestingResult) -> list[str]:
        summary = result.summary
        return [
            f"Parts placed: {summary.parts_placed} of {summary.total_parts}",
            f"Sheets used: {summary.sheets_used}",
            f"Efficiency: {result.metrics.efficiency:.1f}%",
            f"Material cost: {summary.total_material_cost:.2f}",
            f"Waste area: {summary.total_waste_area:g} mm²",
        ]

    def _render_summary(self, lines: list[str], y_offset: float) -> str:
        svg = ['  <g class="summary">']
        for index, line in enumerate(lines):
            y = y_offset + (index + 1) * self.summary_line_height
            svg.append(
                f'    <text x="10" y="{y:g}" font-family="{FONT}" font-size="12" '
                f'fill="{self.text_color}">{escape(line)}</text>'
            )
        svg.append("  </g>")
        return "\n".join(svg)

    def _render_legend(self, y_offset: float) -> str:
        """Legend with swatches for placed parts and waste."""
        swatch = 14
        y = y_offset + 6
        entries = [("Placed Parts", self.part_fill, 10), ("Waste Area", self.waste_fill, 140)]
        svg = ['  <g class="legend">']
        for label, color, x in entries:
            svg.append(
                f'    <rect x="{x}" y="{y:g}" width="{swatch}" height="{swatch}" '
                f'fill="{color}" stroke="{self.part_stroke}"/>'
            )
            svg.append(
                f'    <text x="{x + swatch + 6}" y="{y + swatch - 3:g}" font-family="{FONT}" '
                f'font-size="11" fill="{self.text_color}">{label}</text>'
            )
        svg.append("  </g>")
        return "\n".join(svg)
