"""
Terminal Cell Types - Shared Contract

Defines the data contract between grid traversal, font metrics and the
decoration renderer. Traversal code produces Cells, the font layer provides
FontMetrics, the window provides SizeInfo, and the renderer returns Rects.

Type Hierarchy:
    Flags (per-cell render attributes) → DecorationKind (line-style subset)
    Cell → consumed by decoration_renderer.rects.Rects
    Rect → produced by decoration_renderer.core.create_rect
"""

import math
from dataclasses import dataclass, fields
from enum import Enum, IntFlag
from typing import Tuple, Dict, Any, Optional


RGB = Tuple[int, int, int]


class Flags(IntFlag):
    """Render attributes of a single grid cell"""
    INVERSE = 0b00_0000_0001
    BOLD = 0b00_0000_0010
    ITALIC = 0b00_0000_0100
    UNDERLINE = 0b00_0000_1000
    WRAPLINE = 0b00_0001_0000
    WIDE_CHAR = 0b00_0010_0000
    WIDE_CHAR_SPACER = 0b00_0100_0000
    DIM = 0b00_1000_0000
    HIDDEN = 0b01_0000_0000
    STRIKEOUT = 0b10_0000_0000


class DecorationKind(Enum):
    """Line-style decorations drawn as rectangles

    Each member carries its cell flag and the names of the FontMetrics
    fields holding its (position, thickness) pair.
    """
    UNDERLINE = (Flags.UNDERLINE, 'underline_position', 'underline_thickness')
    STRIKEOUT = (Flags.STRIKEOUT, 'strikeout_position', 'strikeout_thickness')

    def __init__(self, flag: Flags, position_field: str, thickness_field: str):
        self.flag = flag
        self.position_field = position_field
        self.thickness_field = thickness_field


@dataclass(frozen=True)
class Cell:
    """One renderable grid position

    Attributes:
        line: Row index in the visible grid
        column: Column index within the row
        fg: Resolved foreground color (0-255 per channel)
        flags: Active render attributes
    """
    line: int
    column: int
    fg: RGB
    flags: Flags = Flags(0)

    def has_flag(self, kind: DecorationKind) -> bool:
        return bool(self.flags & kind.flag)


@dataclass(frozen=True)
class FontMetrics:
    """Font metrics used for decoration placement

    Positions are distances above the baseline (negative = below).
    Descent is normally negative: the baseline sits above the cell bottom.
    """
    descent: float
    underline_position: float
    underline_thickness: float
    strikeout_position: float
    strikeout_thickness: float

    def metric_for(self, kind: DecorationKind) -> Tuple[float, float]:
        """Return (offset, thickness) for a decoration kind"""
        return (getattr(self, kind.position_field), getattr(self, kind.thickness_field))


@dataclass(frozen=True)
class SizeInfo:
    """Grid geometry in pixels

    Attributes:
        cell_width, cell_height: Size of one cell
        padding_x, padding_y: Offset of the grid inside the window
        width, height: Window size (only needed by the paint layer)
    """
    cell_width: float
    cell_height: float
    padding_x: float = 0.0
    padding_y: float = 0.0
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel space, top-left origin"""
    x: float
    y: float
    width: float
    height: float


# Every decoration must resolve to real metric fields
_METRIC_FIELDS = {f.name for f in fields(FontMetrics)}
for _kind in DecorationKind:
    if not {_kind.position_field, _kind.thickness_field} <= _METRIC_FIELDS:
        raise TypeError(f"{_kind} refers to unknown FontMetrics fields")
del _kind


# ============================================================================
# Conversion Functions
# ============================================================================

def flags_from_names(names) -> Flags:
    """Convert a list of flag names (e.g. ["underline", "bold"]) to Flags

    Raises:
        ValueError: If a name is not a known flag
    """
    result = Flags(0)
    for name in names:
        if not isinstance(name, str):
            raise ValueError(f"Unknown cell flag: {name!r}")
        try:
            result |= Flags[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown cell flag: {name!r}")
    return result


def flags_to_names(flags: Flags) -> list:
    return [flag.name.lower() for flag in Flags if flags & flag]


def cell_to_dict(cell: Cell) -> Dict[str, Any]:
    """Convert Cell to dictionary format (scene file layout)"""
    return {
        'line': cell.line,
        'column': cell.column,
        'fg': list(cell.fg),
        'flags': flags_to_names(cell.flags)
    }


def dict_to_cell(data: Dict[str, Any], line: Optional[int] = None) -> Cell:
    """Convert dictionary to Cell

    Args:
        data: Dictionary with cell fields
        line: Line index to use when the dictionary has none

    Returns:
        Cell instance
    """
    return Cell(
        line=data['line'] if 'line' in data else line,
        column=data['column'],
        fg=tuple(data.get('fg', (255, 255, 255))),
        flags=flags_from_names(data.get('flags', []))
    )


def dict_to_font_metrics(data: Dict[str, Any]) -> FontMetrics:
    """Convert dictionary to FontMetrics, validating every field

    Raises:
        ValueError: If a metric is missing or not a finite number
    """
    missing = [name for name in sorted(_METRIC_FIELDS) if name not in data]
    if missing:
        raise ValueError(f"Font metrics missing fields: {', '.join(missing)}")

    metrics = FontMetrics(**{name: data[name] for name in _METRIC_FIELDS})
    validate_font_metrics(metrics)
    return metrics


def dict_to_size_info(data: Dict[str, Any]) -> SizeInfo:
    """Convert dictionary to SizeInfo

    Raises:
        ValueError: If cell dimensions are missing or invalid
    """
    if 'cell_width' not in data or 'cell_height' not in data:
        raise ValueError("Size info requires cell_width and cell_height")

    size = SizeInfo(
        cell_width=float(data['cell_width']),
        cell_height=float(data['cell_height']),
        padding_x=float(data.get('padding_x', 0.0)),
        padding_y=float(data.get('padding_y', 0.0)),
        width=int(data.get('width', 0)),
        height=int(data.get('height', 0))
    )
    validate_size_info(size)
    return size


def size_info_to_dict(size: SizeInfo) -> Dict[str, Any]:
    return {
        'cell_width': size.cell_width,
        'cell_height': size.cell_height,
        'padding_x': size.padding_x,
        'padding_y': size.padding_y,
        'width': size.width,
        'height': size.height
    }


def rect_to_dict(rect: Rect, color: RGB) -> Dict[str, Any]:
    return {
        'x': rect.x,
        'y': rect.y,
        'width': rect.width,
        'height': rect.height,
        'color': tuple(color)
    }


# ============================================================================
# Validation Functions
# ============================================================================

def validate_color(color: RGB) -> bool:
    """Validate an RGB tuple

    Returns:
        True if valid, raises ValueError if invalid
    """
    if len(color) != 3:
        raise ValueError(f"Color must be RGB tuple, got {color}")

    if not all(0 <= c <= 255 for c in color):
        raise ValueError(f"Color values must be in range [0, 255], got {color}")

    return True


def validate_cell(cell: Cell) -> bool:
    """Validate Cell fields

    Returns:
        True if valid, raises ValueError if invalid
    """
    if cell.line is None or cell.line < 0:
        raise ValueError(f"Cell line {cell.line} must be non-negative")

    if cell.column < 0:
        raise ValueError(f"Cell column {cell.column} must be non-negative")

    validate_color(cell.fg)
    return True


def validate_font_metrics(metrics: FontMetrics) -> bool:
    """Validate that every decoration has usable metrics

    Returns:
        True if valid, raises ValueError if invalid
    """
    for name in sorted(_METRIC_FIELDS):
        value = getattr(metrics, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Font metric {name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ValueError(f"Font metric {name} must be finite, got {value}")

    for kind in DecorationKind:
        _, thickness = metrics.metric_for(kind)
        if thickness < 0:
            raise ValueError(f"{kind.name.lower()} thickness {thickness} must be non-negative")

    return True


def validate_size_info(size: SizeInfo) -> bool:
    """Validate SizeInfo fields

    Returns:
        True if valid, raises ValueError if invalid
    """
    if size.cell_width <= 0 or size.cell_height <= 0:
        raise ValueError(
            f"Cell size must be positive, got {size.cell_width}x{size.cell_height}"
        )

    if size.padding_x < 0 or size.padding_y < 0:
        raise ValueError(f"Padding must be non-negative, got ({size.padding_x}, {size.padding_y})")

    if size.width < 0 or size.height < 0:
        raise ValueError(f"Window size must be non-negative, got {size.width}x{size.height}")

    return True


# ============================================================================
# Defaults
# ============================================================================

# Metrics of a typical 11pt monospace face; overridden by scene files
DEFAULT_FONT_METRICS = FontMetrics(
    descent=-4.0,
    underline_position=-2.0,
    underline_thickness=1.0,
    strikeout_position=5.0,
    strikeout_thickness=1.0
)

DEFAULT_SIZE_INFO = SizeInfo(
    cell_width=8.0,
    cell_height=16.0,
    padding_x=2.0,
    padding_y=2.0,
    width=644,
    height=388
)
