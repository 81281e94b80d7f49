"""
Grid Core - Functional Core

Pure functions turning scene data into cell streams and decoration rectangles.
No side effects, no I/O - only calculations and data processing.

All functions take data as input and return transformed data.
File I/O is handled by grid_shell.py.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Iterable, Iterator

from term_types import (
    Cell,
    FontMetrics,
    SizeInfo,
    Rect,
    RGB,
    DEFAULT_FONT_METRICS,
    DEFAULT_SIZE_INFO,
    dict_to_cell,
    dict_to_font_metrics,
    dict_to_size_info,
    size_info_to_dict,
    validate_cell,
    validate_color,
)
from decoration_renderer.core import create_cursor_rect, create_selection_rects
from decoration_renderer.rects import collect_rects


DEFAULT_COLUMNS = 80


@dataclass(frozen=True)
class Scene:
    """Everything needed for one decoration pass

    Attributes:
        cells: Cells in traversal order
        metrics: Font metrics
        size: Grid geometry
        extra: Rectangles appended without merging (cursor, selection)
        background: Clear color for the paint layer
    """
    cells: List[Cell]
    metrics: FontMetrics
    size: SizeInfo
    extra: List[Tuple[Rect, RGB]] = field(default_factory=list)
    background: RGB = (0, 0, 0)


# ============================================================================
# Cell Streams
# ============================================================================

def cells_from_rows(rows: Iterable[Iterable[Dict[str, Any]]]) -> Iterator[Cell]:
    """Yield Cells from per-line cell descriptions

    Pure function: the row index becomes the cell line.

    Args:
        rows: One list of cell dictionaries per line

    Yields:
        Cell instances in row-major order
    """
    for line, row in enumerate(rows):
        for data in row:
            yield dict_to_cell(data, line=line)


def validate_cell_order(cells: List[Cell]) -> bool:
    """Check cells are row-major with strictly ascending columns per line

    Returns:
        True if valid, raises ValueError if invalid
    """
    previous = None
    for index, cell in enumerate(cells):
        validate_cell(cell)
        if previous is not None:
            if cell.line < previous.line:
                raise ValueError(
                    f"Cell {index} on line {cell.line} follows line {previous.line}"
                )
            if cell.line == previous.line and cell.column <= previous.column:
                raise ValueError(
                    f"Cell {index} column {cell.column} does not follow column "
                    f"{previous.column} on line {cell.line}"
                )
        previous = cell
    return True


# ============================================================================
# Scene Processing
# ============================================================================

def grid_columns(size: SizeInfo, data: Dict[str, Any]) -> int:
    """Number of grid columns, from the scene or the window width"""
    if 'columns' in data:
        return int(data['columns'])
    if size.width:
        return max(int((size.width - 2 * size.padding_x) // size.cell_width), 1)
    return DEFAULT_COLUMNS


def apply_size_overrides(data: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of scene data with size fields replaced

    Missing size sections start from DEFAULT_SIZE_INFO.
    """
    base = data['size'] if 'size' in data else size_info_to_dict(DEFAULT_SIZE_INFO)
    return {**data, 'size': {**base, **overrides}}


def process_scene_data(data: Dict[str, Any]) -> Scene:
    """Build a validated Scene from decoded scene data

    Pure function: processes the loaded dictionary, no file I/O.
    Metrics and size are validated here so a broken scene fails before
    any cell is processed.

    Args:
        data: Scene dictionary with 'cells' or 'rows', optional 'size',
              'metrics', 'cursor', 'selection', 'background', 'columns'

    Returns:
        Scene ready for build_scene_rects

    Raises:
        ValueError: If any part of the scene is invalid
    """
    size = dict_to_size_info(data['size']) if 'size' in data else DEFAULT_SIZE_INFO
    metrics = dict_to_font_metrics(data['metrics']) if 'metrics' in data else DEFAULT_FONT_METRICS

    if 'cells' in data and 'rows' in data:
        raise ValueError("Scene must define either 'cells' or 'rows', not both")

    if 'rows' in data:
        cells = list(cells_from_rows(data['rows']))
    else:
        cells = [dict_to_cell(item) for item in data.get('cells', [])]
    validate_cell_order(cells)

    extra = []

    cursor = data.get('cursor')
    if cursor is not None:
        if not isinstance(cursor, dict):
            raise ValueError(f"Scene cursor must be an object, got {cursor!r}")
        color = tuple(cursor.get('color', (255, 255, 255)))
        validate_color(color)
        extra.append(create_cursor_rect(
            cursor['line'],
            cursor['column'],
            size,
            color,
            style=cursor.get('style', 'block')
        ))

    selection = data.get('selection')
    if selection is not None:
        if not isinstance(selection, dict):
            raise ValueError(f"Scene selection must be an object, got {selection!r}")
        color = tuple(selection.get('color', (68, 68, 68)))
        validate_color(color)
        extra.extend(create_selection_rects(
            tuple(selection['start']),
            tuple(selection['end']),
            grid_columns(size, data),
            size,
            color
        ))

    background = tuple(data.get('background', (0, 0, 0)))
    validate_color(background)

    return Scene(
        cells=cells,
        metrics=metrics,
        size=size,
        extra=extra,
        background=background
    )


def build_scene_rects(scene: Scene) -> List[Tuple[Rect, RGB]]:
    """Run the decoration pass for a scene

    Returns:
        List of (rect, color) tuples: appended rectangles, then decorations
    """
    return collect_rects(scene.cells, scene.metrics, scene.size, extra=scene.extra)
