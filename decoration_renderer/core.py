"""
Decoration Renderer - Functional Core

Pure functions for data transformations.
No side effects, no GPU operations - only calculations.

Follows functional core, imperative shell pattern:
- This module: Pure transformations (testable, predictable)
- shell.py: GPU operations (side effects)
"""

import math
import numpy as np
from typing import Tuple, List

from term_types import Cell, DecorationKind, FontMetrics, SizeInfo, Rect, RGB


# ============================================================================
# Pixel Snapping
# ============================================================================

def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero (unlike round())

    Examples:
        >>> round_half_away(2.5)
        3.0
        >>> round_half_away(-2.5)
        -3.0
    """
    return math.copysign(math.floor(abs(value) + 0.5), value)


# ============================================================================
# Decoration Geometry
# ============================================================================

def create_rect(
    start: Cell,
    end: Cell,
    kind: DecorationKind,
    metrics: FontMetrics,
    size: SizeInfo
) -> Tuple[Rect, RGB]:
    """Create the rectangle spanning from the left of `start` to the right of `end`

    Pure function: same inputs always give the same rectangle.

    Args:
        start: First cell of the run (left edge, line, color)
        end: Last cell of the run (right edge)
        kind: Decoration being drawn
        metrics: Font metrics providing position and thickness
        size: Cell and padding dimensions in pixels

    Returns:
        (rect, color) with y and height snapped to whole pixels
    """
    start_x = start.column * size.cell_width
    end_x = (end.column + 1) * size.cell_width
    width = end_x - start_x

    position, height = metrics.metric_for(kind)

    # Make sure lines are always visible
    height = max(height, 1.0)

    cell_bottom = (start.line + 1) * size.cell_height
    baseline = cell_bottom + metrics.descent

    y = baseline - position - height / 2.0
    max_y = cell_bottom - height
    if y > max_y:
        y = max_y

    rect = Rect(
        x=start_x + size.padding_x,
        y=round_half_away(y) + size.padding_y,
        width=width,
        height=round_half_away(height)
    )

    return rect, start.fg


# ============================================================================
# Cursor and Selection Rectangles
# ============================================================================

CURSOR_STYLES = ('block', 'underline', 'beam')


def create_cursor_rect(
    line: int,
    column: int,
    size: SizeInfo,
    color: RGB,
    style: str = 'block',
    thickness: float = 2.0
) -> Tuple[Rect, RGB]:
    """Create cursor rectangle for the append path

    Args:
        line, column: Cursor position in the grid
        size: Cell and padding dimensions in pixels
        color: Cursor color
        style: 'block' (whole cell), 'underline' (bottom stroke) or 'beam' (left stroke)
        thickness: Stroke thickness for underline and beam styles

    Returns:
        (rect, color) tuple

    Raises:
        ValueError: If style is unknown
    """
    x = column * size.cell_width + size.padding_x
    y = line * size.cell_height + size.padding_y

    if style == 'block':
        rect = Rect(x, y, size.cell_width, size.cell_height)
    elif style == 'underline':
        rect = Rect(x, y + size.cell_height - thickness, size.cell_width, thickness)
    elif style == 'beam':
        rect = Rect(x, y, thickness, size.cell_height)
    else:
        raise ValueError(f"Unknown cursor style {style!r}, expected one of {CURSOR_STYLES}")

    return rect, color


def create_selection_rects(
    start: Tuple[int, int],
    end: Tuple[int, int],
    columns: int,
    size: SizeInfo,
    color: RGB
) -> List[Tuple[Rect, RGB]]:
    """Create one highlight rectangle per selected line

    Selection runs in reading order from `start` to `end` (inclusive),
    wrapping to the full row width on intermediate lines.

    Args:
        start: (line, column) where the selection begins
        end: (line, column) where the selection ends
        columns: Number of columns in the grid
        size: Cell and padding dimensions in pixels
        color: Highlight color

    Returns:
        List of (rect, color) tuples, top line first
    """
    if end < start:
        start, end = end, start

    (start_line, start_col), (end_line, end_col) = start, end
    rects = []

    for line in range(start_line, end_line + 1):
        first = start_col if line == start_line else 0
        last = end_col if line == end_line else columns - 1

        rects.append((
            Rect(
                x=first * size.cell_width + size.padding_x,
                y=line * size.cell_height + size.padding_y,
                width=(last - first + 1) * size.cell_width,
                height=size.cell_height
            ),
            color
        ))

    return rects


# ============================================================================
# Color and Coordinate System Transformations
# ============================================================================

def color_to_float(color: RGB) -> Tuple[float, float, float]:
    """Convert 0-255 RGB to 0.0-1.0 RGB for the GPU"""
    return tuple(c / 255.0 for c in color)


def rect_to_normalized(
    rect: Rect, screen_width: int, screen_height: int
) -> Tuple[float, float, float, float]:
    """Convert pixel-space top-left rectangle to OpenGL normalized coordinates

    Args:
        rect: Rectangle in pixels, origin at top-left, y increasing downward
        screen_width, screen_height: Viewport size in pixels

    Returns:
        (x, y, width, height) with (x, y) the bottom-left corner in -1..1 space
    """
    x = rect.x / screen_width * 2.0 - 1.0
    top = 1.0 - rect.y / screen_height * 2.0
    width = rect.width / screen_width * 2.0
    height = rect.height / screen_height * 2.0

    # In bottom-left system, y increases upward
    return (x, top - height, width, height)


def rect_to_pixel_box(rect: Rect) -> Tuple[int, int, int, int]:
    """Inclusive integer pixel box (x1, y1, x2, y2) covered by a rectangle

    Fractional edges are expanded to the pixels they touch.
    """
    x1 = int(math.floor(rect.x))
    y1 = int(math.floor(rect.y))
    x2 = int(math.ceil(rect.x + rect.width)) - 1
    y2 = int(math.ceil(rect.y + rect.height)) - 1
    return (x1, y1, x2, y2)


def batch_rect_data(
    rects: List[Tuple[Rect, RGB]],
    screen_width: int,
    screen_height: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Batch rectangles into numpy arrays for GPU upload

    Args:
        rects: List of (rect, color) tuples in pixel space
        screen_width, screen_height: Viewport size in pixels

    Returns:
        (colors, rects) - numpy arrays ready for GPU buffers
        - colors: (N, 3) float32 array
        - rects: (N, 4) float32 array
    """
    colors = np.array(
        [color_to_float(color) for _, color in rects], dtype='f4'
    ).reshape(-1, 3)
    coords = np.array(
        [rect_to_normalized(rect, screen_width, screen_height) for rect, _ in rects],
        dtype='f4'
    ).reshape(-1, 4)

    return colors, coords
