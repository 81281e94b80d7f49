#!/usr/bin/env python3
"""
Terminal Decoration Renderer

Renders the underline, strikeout, cursor and selection rectangles of a
terminal scene file to a PNG image.

Usage:
    python render_decorations.py scene.json                     # Print rectangle summary
    python render_decorations.py scene.json -o out.png          # CPU rendering (PIL)
    python render_decorations.py scene.json -o out.png --use-moderngl
    python render_decorations.py scene.json --print-rects       # List every rectangle
"""

import argparse
import math
import sys
from typing import List, Tuple

from PIL import Image  # type: ignore

from term_types import Rect, RGB, rect_to_dict
from grid_core import Scene, build_scene_rects
from grid_shell import parse_scene_file
from decoration_renderer.raster import rasterize_rects


def output_size(scene: Scene) -> Tuple[int, int]:
    """Window size of the scene, derived from cells and appended rects when not given

    The derived size covers every cell plus any cursor or selection
    rectangle, with padding on both sides.
    """
    size = scene.size
    if size.width and size.height:
        return size.width, size.height

    lines = max((cell.line for cell in scene.cells), default=0) + 1
    columns = max((cell.column for cell in scene.cells), default=0) + 1
    width = columns * size.cell_width + 2 * size.padding_x
    height = lines * size.cell_height + 2 * size.padding_y

    # Appended rects are already offset by the leading padding
    for rect, _ in scene.extra:
        width = max(width, rect.x + rect.width + size.padding_x)
        height = max(height, rect.y + rect.height + size.padding_y)

    return int(math.ceil(width)), int(math.ceil(height))


def print_rects(rects: List[Tuple[Rect, RGB]]) -> None:
    print(f"{'#':>4} {'x':>9} {'y':>9} {'width':>9} {'height':>7}  color")
    for index, (rect, color) in enumerate(rects):
        data = rect_to_dict(rect, color)
        print(f"{index:>4} {data['x']:>9.2f} {data['y']:>9.2f} "
              f"{data['width']:>9.2f} {data['height']:>7.2f}  {data['color']}")


def render_scene(
    scene: Scene,
    output_path: str,
    use_moderngl: bool = False,
    timing: bool = False
) -> List[Tuple[Rect, RGB]]:
    """Run the decoration pass and write the image

    Side effects:
    - Writes image to output_path
    - Creates a GPU context when use_moderngl is set
    """
    rects = build_scene_rects(scene)
    width, height = output_size(scene)

    if use_moderngl:
        from decoration_renderer.shell import ModernGLContext, render_rects, save_frame

        with ModernGLContext(width, height, enable_timing=timing) as ctx:
            render_rects(ctx, rects, scene.background)
            save_frame(ctx, output_path)
            if timing:
                ctx.print_timing_summary()
    else:
        frame = rasterize_rects(rects, width, height, scene.background)
        Image.fromarray(frame).save(output_path)

    return rects


def main():
    parser = argparse.ArgumentParser(
        description='Render terminal text decorations (underline, strikeout) from a scene file',
        epilog="""
Examples:
  python render_decorations.py scene.json                    # Summary only
  python render_decorations.py scene.json -o out.png         # CPU rendering
  python render_decorations.py scene.json -o out.png --use-moderngl
        """
    )
    parser.add_argument('scene', help='Path to JSON scene file')
    parser.add_argument('-o', '--output', default=None,
                        help='Output PNG path (omit to only print a summary)')
    parser.add_argument('--cell-width', type=float, default=None,
                        help='Override cell width in pixels')
    parser.add_argument('--cell-height', type=float, default=None,
                        help='Override cell height in pixels')
    parser.add_argument('--padding', type=float, default=None,
                        help='Override horizontal and vertical padding in pixels')
    parser.add_argument('--use-moderngl', action='store_true',
                        help='Render with the GPU (ModernGL) instead of PIL')
    parser.add_argument('--print-rects', action='store_true',
                        help='Print every rectangle')
    parser.add_argument('--timing', action='store_true',
                        help='Print GPU timing summary (with --use-moderngl)')

    args = parser.parse_args()

    overrides = {}
    if args.cell_width is not None:
        overrides['cell_width'] = args.cell_width
    if args.cell_height is not None:
        overrides['cell_height'] = args.cell_height
    if args.padding is not None:
        overrides['padding_x'] = args.padding
        overrides['padding_y'] = args.padding

    try:
        scene = parse_scene_file(args.scene, size_overrides=overrides)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    if args.output:
        rects = render_scene(scene, args.output, args.use_moderngl, args.timing)
        print(f"Rendered {len(rects)} rectangles to {args.output}")
    else:
        rects = build_scene_rects(scene)
        print(f"{len(scene.cells)} cells -> {len(rects)} rectangles "
              f"({len(scene.extra)} appended)")

    if args.print_rects:
        print_rects(rects)

    return 0


if __name__ == '__main__':
    sys.exit(main())
