"""Column width calculation for terminal tables."""

from __future__ import annotations


class TableCalculator:
    """Calculates column widths from the widest cell in each column.

    Each width has ``padding`` added. When ``max_width`` exceeds the padding,
    no column is wider than ``max_width``, padding included.
    """

    def __init__(self, padding: int = 0, max_width: int = 0) -> None:
        self.padding = padding
        self.max_width = max_width
        self._cell_sizes_by_col: list[list[int]] = []

    def add_row_sizes(self, *args: int) -> None:
        """Register a row whose cells have the given visual sizes."""
        while len(self._cell_sizes_by_col) < len(args):
            self._cell_sizes_by_col.append([])
        for column, size in zip(self._cell_sizes_by_col, args):
            column.append(size)

    def column_widths(self) -> list[int]:
        """Return the width of every column seen so far."""
        cap = self.max_width - self.padding
        widths = []
        for sizes in self._cell_sizes_by_col:
            width = max(sizes, default=0)
            if cap > 0 and width > cap:
                width = cap
            widths.append(width + self.padding)
        return widths