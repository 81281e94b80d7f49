"""
Decoration Raster - Functional Core

Pure functions for drawing decoration rectangles on the CPU with PIL.
No GPU context, no file I/O.

Used when no OpenGL context is available and by tests as a pixel reference
for the ModernGL shell.
"""

from typing import List, Tuple, Optional
import numpy as np  # type: ignore
from PIL import Image, ImageDraw  # type: ignore

from term_types import Rect, RGB
from .core import rect_to_pixel_box


# ============================================================================
# Canvas Operations
# ============================================================================

def create_canvas(
    width: int,
    height: int,
    background: Optional[RGB] = None
) -> Image.Image:
    """
    Create RGB canvas for drawing.

    Pure function - allocates new image.

    Args:
        width: Canvas width in pixels
        height: Canvas height in pixels
        background: Fill color (R, G, B). None for black.

    Returns:
        PIL Image in RGB mode

    Examples:
        >>> create_canvas(100, 50).size
        (100, 50)
    """
    return Image.new('RGB', (width, height), tuple(background) if background else (0, 0, 0))


# ============================================================================
# Drawing Primitives
# ============================================================================

def draw_rects(
    draw: ImageDraw.ImageDraw,
    rects: List[Tuple[Rect, RGB]]
) -> int:
    """
    Draw filled rectangles in list order.

    Modifies draw object but has no other side effects.

    Args:
        draw: PIL ImageDraw object to draw on
        rects: List of (rect, color) tuples in pixel space

    Returns:
        Number of rectangles that covered at least one pixel

    Notes:
        - Later rectangles paint over earlier ones
        - Zero-area rectangles are skipped
    """
    drawn = 0
    for rect, color in rects:
        x1, y1, x2, y2 = rect_to_pixel_box(rect)
        if x2 < x1 or y2 < y1:
            continue
        draw.rectangle((x1, y1, x2, y2), fill=tuple(color))
        drawn += 1
    return drawn


def rasterize_rects(
    rects: List[Tuple[Rect, RGB]],
    width: int,
    height: int,
    background: Optional[RGB] = None
) -> np.ndarray:
    """
    Render rectangles to an RGB array.

    Pure function - returns a new array.

    Args:
        rects: List of (rect, color) tuples in pixel space
        width, height: Output size in pixels
        background: Background color, black by default

    Returns:
        RGB numpy array (height, width, 3), dtype uint8
    """
    canvas = create_canvas(width, height, background)
    draw_rects(ImageDraw.Draw(canvas), rects)
    return np.array(canvas)
