"""Protocols for collaborators of the nesting optimizer.

By depending on protocols rather than concrete implementations, the domain
layer stays free of rendering and file-format code.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kerfwise.domain.value_objects import NestingResult


@runtime_checkable
class LayoutRenderer(Protocol):
    """Renders a nesting result to a vector drawing.

    The optimizer calls render() with a complete result (visualization still
    empty) and stores the returned text as the result's visualization.

    Example:
        ```python
        class SvgRenderer:
            def render(self, result: NestingResult) -> str:
                return "<svg>...</svg>"

        optimizer = MaterialNestingOptimizer(renderer=SvgRenderer())
        ```
    """

    @abstractmethod
    def render(self, result: NestingResult) -> str:
        """Render the layout.

        Args:
            result: Nesting result to draw.

        Returns:
            The drawing as text.
        """
        ...


@runtime_checkable
class NestingExporter(Protocol):
    """Writes a nesting result to a file format.

    Attributes:
        format_name: Human-readable name for the export format (e.g., "dxf").
        file_extension: File extension without leading dot (e.g., "dxf").
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, result: NestingResult, path: Path) -> None:
        """Export a nesting result to a file.

        Args:
            result: The nesting result to export.
            path: Path where the file will be saved.
        """
        ...

    @abstractmethod
    def export_string(self, result: NestingResult) -> str:
        """Export a nesting result as a string."""
        ...
