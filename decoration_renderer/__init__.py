"""
Decoration Renderer Package

Underline and strikeout rectangles for terminal grids, using functional
core, imperative shell pattern.

Modules:
- core: Pure geometry (decoration, cursor, selection rectangles, GPU batching)
- rects: Run tracking that merges decorated cells into rectangles
- raster: CPU drawing with PIL
- shell: GPU operations and I/O (imperative side effects)
"""

from .core import (
    # Pixel snapping
    round_half_away,

    # Decoration geometry
    create_rect,

    # Append-path rectangles
    create_cursor_rect,
    create_selection_rects,

    # Coordinate transformations
    color_to_float,
    rect_to_normalized,
    rect_to_pixel_box,
    batch_rect_data,
)

from .rects import (
    Rects,
    collect_rects,
)

from .raster import (
    create_canvas,
    draw_rects,
    rasterize_rects,
)

from .shell import (
    ModernGLContext,
    render_rects,
    read_framebuffer,
    save_frame,
    render_rects_to_array,
    render_rects_to_file,
)

__all__ = [
    # Core
    'round_half_away',
    'create_rect',
    'create_cursor_rect',
    'create_selection_rects',
    'color_to_float',
    'rect_to_normalized',
    'rect_to_pixel_box',
    'batch_rect_data',

    # Run tracking
    'Rects',
    'collect_rects',

    # Raster
    'create_canvas',
    'draw_rects',
    'rasterize_rects',

    # Shell
    'ModernGLContext',
    'render_rects',
    'read_framebuffer',
    'save_frame',
    'render_rects_to_array',
    'render_rects_to_file',
]
