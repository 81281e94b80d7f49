"""
Tests for Grid Core - Functional Core

Tests scene data processing without any file I/O.
"""

import pytest

from term_types import Cell, Flags, Rect, DEFAULT_FONT_METRICS, DEFAULT_SIZE_INFO
from grid_core import (
    Scene,
    cells_from_rows,
    validate_cell_order,
    grid_columns,
    apply_size_overrides,
    process_scene_data,
    build_scene_rects,
)


SIZE = {'cell_width': 8, 'cell_height': 16, 'padding_x': 2, 'padding_y': 3}
METRICS = {
    'descent': -4.0,
    'underline_position': -2.0,
    'underline_thickness': 1.0,
    'strikeout_position': 5.0,
    'strikeout_thickness': 1.0,
}


class TestCellStreams:
    """Building and checking cell streams"""

    def test_cells_from_rows(self):
        rows = [
            [{'column': 0, 'flags': ['underline']}, {'column': 1}],
            [],
            [{'column': 3, 'fg': [255, 0, 0]}],
        ]

        cells = list(cells_from_rows(rows))

        assert cells == [
            Cell(line=0, column=0, fg=(255, 255, 255), flags=Flags.UNDERLINE),
            Cell(line=0, column=1, fg=(255, 255, 255)),
            Cell(line=2, column=3, fg=(255, 0, 0)),
        ]

    def test_valid_order(self):
        cells = [
            Cell(line=0, column=0, fg=(0, 0, 0)),
            Cell(line=0, column=4, fg=(0, 0, 0)),
            Cell(line=1, column=0, fg=(0, 0, 0)),
        ]

        assert validate_cell_order(cells) is True

    def test_columns_must_ascend(self):
        cells = [Cell(line=0, column=3, fg=(0, 0, 0)), Cell(line=0, column=3, fg=(0, 0, 0))]

        with pytest.raises(ValueError, match="column"):
            validate_cell_order(cells)

    def test_lines_must_not_go_back(self):
        cells = [Cell(line=1, column=0, fg=(0, 0, 0)), Cell(line=0, column=5, fg=(0, 0, 0))]

        with pytest.raises(ValueError, match="line"):
            validate_cell_order(cells)


class TestProcessSceneData:
    """Scene dictionary to Scene"""

    def test_defaults(self):
        scene = process_scene_data({})

        assert scene == Scene(cells=[], metrics=DEFAULT_FONT_METRICS, size=DEFAULT_SIZE_INFO)

    def test_cells_and_metrics(self):
        scene = process_scene_data({
            'size': SIZE,
            'metrics': METRICS,
            'cells': [{'line': 0, 'column': 0, 'flags': ['strikeout']}],
            'background': [1, 2, 3],
        })

        assert scene.size.padding_y == 3.0
        assert scene.metrics.strikeout_position == 5.0
        assert scene.cells[0].flags == Flags.STRIKEOUT
        assert scene.background == (1, 2, 3)

    def test_cells_and_rows_conflict(self):
        with pytest.raises(ValueError):
            process_scene_data({'cells': [], 'rows': []})

    def test_invalid_metrics_fail_before_cells(self):
        """Metric table problems surface at load time"""
        with pytest.raises(ValueError, match="underline_thickness"):
            process_scene_data({
                'metrics': {k: v for k, v in METRICS.items() if k != 'underline_thickness'},
                'cells': [{'line': 0, 'column': 0, 'flags': ['underline']}],
            })

    def test_out_of_order_cells(self):
        with pytest.raises(ValueError):
            process_scene_data({'cells': [
                {'line': 0, 'column': 2},
                {'line': 0, 'column': 1},
            ]})

    def test_cursor_becomes_extra_rect(self):
        scene = process_scene_data({
            'size': SIZE,
            'cursor': {'line': 1, 'column': 2, 'color': [255, 0, 0]},
        })

        assert scene.extra == [(Rect(x=18.0, y=19.0, width=8.0, height=16.0), (255, 0, 0))]

    def test_selection_uses_columns(self):
        scene = process_scene_data({
            'size': SIZE,
            'columns': 10,
            'selection': {'start': [0, 8], 'end': [1, 1]},
        })

        assert [rect.width for rect, _ in scene.extra] == [16.0, 16.0]

    def test_invalid_cursor_color(self):
        with pytest.raises(ValueError):
            process_scene_data({'cursor': {'line': 0, 'column': 0, 'color': [300, 0, 0]}})

    @pytest.mark.parametrize("key", ['cursor', 'selection'])
    def test_cursor_and_selection_must_be_objects(self, key):
        with pytest.raises(ValueError, match=key):
            process_scene_data({key: [0, 1]})


class TestGridColumns:

    def test_explicit(self):
        assert grid_columns(DEFAULT_SIZE_INFO, {'columns': 132}) == 132

    def test_from_window_width(self):
        # (644 - 2 * 2) / 8 = 80
        assert grid_columns(DEFAULT_SIZE_INFO, {}) == 80


class TestSizeOverrides:

    def test_overrides_replace_fields(self):
        data = apply_size_overrides({'size': SIZE}, {'cell_width': 10.0})

        assert data['size']['cell_width'] == 10.0
        assert data['size']['cell_height'] == 16
        assert SIZE['cell_width'] == 8  # Input untouched

    def test_overrides_without_size_section(self):
        data = apply_size_overrides({}, {'padding_x': 0.0})

        assert data['size']['cell_width'] == DEFAULT_SIZE_INFO.cell_width
        assert data['size']['padding_x'] == 0.0


class TestBuildSceneRects:
    """Complete pass from scene data to rectangles"""

    def test_rows_with_decorations_and_cursor(self):
        scene = process_scene_data({
            'size': SIZE,
            'metrics': METRICS,
            'rows': [
                [{'column': c, 'flags': ['underline']} for c in range(4)],
                [{'column': 0, 'flags': ['strikeout']}, {'column': 2, 'flags': ['strikeout']}],
            ],
            'cursor': {'line': 1, 'column': 5, 'style': 'beam'},
        })

        rects = build_scene_rects(scene)

        assert [rect for rect, _ in rects] == [
            Rect(x=42.0, y=19.0, width=2.0, height=16.0),   # Cursor first
            Rect(x=2.0, y=17.0, width=32.0, height=1.0),    # Underline, line 0
            Rect(x=2.0, y=26.0, width=8.0, height=1.0),     # Strikeout, line 1, column 0
            Rect(x=18.0, y=26.0, width=8.0, height=1.0),    # Column gap splits the run
        ]
