"""
Decoration Renderer - Run Tracking

Merges underline and strikeout cells into one rectangle per run.

A run is a span of cells on one line that share a decoration flag and a
foreground color, with no column gaps. Runs are closed as soon as a cell
breaks them and flushed by finalize() at the end of the pass.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from term_types import Cell, DecorationKind, FontMetrics, SizeInfo, Rect, RGB
from .core import create_rect


class Rects:
    """Rects for underline, strikeout and more

    One instance per rendering pass:

        rects = Rects(metrics, size)
        for cell in cells:
            rects.update(cell)
        output = rects.finalize()
    """

    def __init__(self, metrics: FontMetrics, size: SizeInfo):
        self.metrics = metrics
        self.size = size

        self._inner: List[Tuple[Rect, RGB]] = []
        self._last_starts: Dict[DecorationKind, Optional[Cell]] = {
            kind: None for kind in DecorationKind
        }
        self._last_cell: Optional[Cell] = None
        self._finalized = False

    def update(self, cell: Cell) -> None:
        """Update the open runs with the next cell in traversal order"""
        self._check_open()

        for kind, start in self._last_starts.items():
            if start is not None:
                last_cell = self._last_cell

                # Run continues on this cell
                if (cell.line == start.line
                        and cell.has_flag(kind)
                        and cell.fg == start.fg
                        and cell.column == last_cell.column + 1):
                    continue

                self._inner.append(
                    create_rect(start, last_cell, kind, self.metrics, self.size)
                )

            # Start a new run if the flag is present
            self._last_starts[kind] = cell if cell.has_flag(kind) else None

        self._last_cell = cell

    def push(self, rect: Rect, color: RGB) -> None:
        """Add a rectangle that bypasses run merging (cursor, selection)"""
        self._check_open()
        self._inner.append((rect, color))

    def finalize(self) -> List[Tuple[Rect, RGB]]:
        """Flush runs still open and return every accumulated rectangle

        Open runs end at the last processed cell.
        """
        self._check_open()

        for kind, start in self._last_starts.items():
            if start is not None:
                self._inner.append(
                    create_rect(start, self._last_cell, kind, self.metrics, self.size)
                )
                self._last_starts[kind] = None

        self._finalized = True
        return self._inner

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Rects already finalized; create a new instance per pass")


def collect_rects(
    cells: Iterable[Cell],
    metrics: FontMetrics,
    size: SizeInfo,
    extra: Iterable[Tuple[Rect, RGB]] = ()
) -> List[Tuple[Rect, RGB]]:
    """Run one complete pass over a cell stream

    Args:
        cells: Cells in row-major, column-ascending order
        metrics: Font metrics for decoration placement
        size: Cell and padding dimensions
        extra: Rectangles to append unmerged (cursor, selection)

    Returns:
        List of (rect, color) tuples, extras first
    """
    rects = Rects(metrics, size)

    for rect, color in extra:
        rects.push(rect, color)

    for cell in cells:
        rects.update(cell)

    return rects.finalize()
