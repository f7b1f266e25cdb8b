"""Contracts module - protocols for cross-layer collaboration.

Example:
    ```python
    from kerfwise.contracts import LayoutRenderer

    def describe(renderer: LayoutRenderer, result: NestingResult) -> str:
        return renderer.render(result)
    ```
"""

from .protocols import (
    LayoutRenderer as LayoutRenderer,
    NestingExporter as NestingExporter,
)

__all__ = [
    "LayoutRenderer",
    "NestingExporter",
]
