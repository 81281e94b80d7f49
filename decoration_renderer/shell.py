"""
Decoration Renderer - Imperative Shell

Handles all GPU operations and side effects.
Uses pure functions from core for calculations.

Follows functional core, imperative shell pattern:
- core.py: Pure transformations (testable, predictable)
- This module: GPU operations (side effects, resources, I/O)
"""

import moderngl
import numpy as np
from PIL import Image
from typing import List, Dict, Tuple, Optional
import time
from collections import defaultdict
from contextlib import contextmanager

from term_types import Rect, RGB
from .core import batch_rect_data, color_to_float


# ============================================================================
# Performance Timing Utilities
# ============================================================================

class RenderTimings:
    """Wall-clock samples per render phase, in seconds"""

    def __init__(self):
        self.samples: Dict[str, List[float]] = defaultdict(list)

    def record(self, phase: str, seconds: float):
        self.samples[phase].append(seconds)

    def get_summary(self) -> Dict[str, Dict[str, float]]:
        """Per phase: number of samples and their sum in milliseconds"""
        return {
            phase: {'count': len(seconds), 'total_ms': sum(seconds) * 1000.0}
            for phase, seconds in self.samples.items()
        }


@contextmanager
def time_operation(timings: Optional[RenderTimings], phase: str):
    """Record how long the body takes under `phase`; no-op when timings is None"""
    if timings is None:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        timings.record(phase, time.perf_counter() - start)


# ============================================================================
# Shader Source Code
# ============================================================================

# Solid instanced rectangles, no blending effects
RECT_VERTEX_SHADER = """
#version 330

in vec2 in_position;      // Vertex position (0-1 quad)
in vec3 in_color;         // Per-instance color
in vec4 in_rect;          // Per-instance: x, y, width, height (normalized coords)

out vec3 v_color;

void main() {
    vec2 pos = in_rect.xy + in_position * in_rect.zw;
    gl_Position = vec4(pos, 0.0, 1.0);
    v_color = in_color;
}
"""

RECT_FRAGMENT_SHADER = """
#version 330

in vec3 v_color;
out vec4 f_color;

void main() {
    f_color = vec4(v_color, 1.0);
}
"""


# ============================================================================
# GPU Context and Resource Management
# ============================================================================

class ModernGLContext:
    """GPU rendering context for decoration rectangles

    Owns a standalone OpenGL context, an output framebuffer and the
    rectangle shader program. This is an imperative shell - handles GPU
    resources and side effects.
    """

    def __init__(
        self,
        width: int = 644,
        height: int = 388,
        enable_timing: bool = False
    ):
        """Initialize GPU context and resources

        Side effects:
        - Creates OpenGL context
        - Allocates GPU memory for the output framebuffer
        - Compiles the rectangle shader program

        Args:
            width: Frame width in pixels
            height: Frame height in pixels
            enable_timing: Record per-operation timings
        """
        self.width = width
        self.height = height

        self.timings = RenderTimings() if enable_timing else None

        # Create standalone OpenGL context (no window required)
        self.ctx = moderngl.create_standalone_context()

        self.fbo = self.ctx.simple_framebuffer((width, height))

        self.rect_prog = self.ctx.program(
            vertex_shader=RECT_VERTEX_SHADER,
            fragment_shader=RECT_FRAGMENT_SHADER
        )

        # Unit quad shared by every instance
        quad_vertices = np.array([
            [0, 0],  # Bottom-left
            [1, 0],  # Bottom-right
            [0, 1],  # Top-left
            [1, 1],  # Top-right
        ], dtype='f4')
        self.quad_vbo = self.ctx.buffer(quad_vertices.tobytes())

    def get_timing_summary(self) -> Dict[str, Dict[str, float]]:
        """Per-phase sample count and total milliseconds (empty when timing is off)"""
        if self.timings is None:
            return {}
        return self.timings.get_summary()

    def print_timing_summary(self):
        """Print one line per render phase, in the order phases first ran"""
        summary = self.get_timing_summary()
        if not summary:
            print("Timing: no data (pass enable_timing=True)")
            return

        print(f"Timing ({self.width}x{self.height}):")
        for phase, stats in summary.items():
            print(f"  {phase:<20} {stats['total_ms']:8.3f} ms  x{stats['count']}")

    def cleanup(self):
        """Release GPU resources

        Side effects:
        - Frees GPU memory for buffers and the framebuffer
        - Destroys OpenGL context
        """
        self.quad_vbo.release()
        self.fbo.release()
        self.rect_prog.release()
        self.ctx.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()


# ============================================================================
# GPU Rendering Operations
# ============================================================================

def render_rects(
    ctx: ModernGLContext,
    rects: List[Tuple[Rect, RGB]],
    background: RGB = (0, 0, 0)
) -> None:
    """Clear the framebuffer and draw rectangles in one instanced call

    Side effects:
    - Renders to output framebuffer
    - Uploads data to GPU
    - Allocates/deallocates GPU buffers

    Args:
        ctx: ModernGL context
        rects: List of (rect, color) tuples in pixel space
        background: Clear color (0-255 per channel)
    """
    with time_operation(ctx.timings, 'render_rects_total'):
        ctx.fbo.use()
        ctx.ctx.clear(*color_to_float(background))

        if not rects:
            return

        with time_operation(ctx.timings, 'prepare_data'):
            # Use functional core to prepare data (pure function)
            colors, coords = batch_rect_data(rects, ctx.width, ctx.height)

        with time_operation(ctx.timings, 'gpu_upload'):
            color_vbo = ctx.ctx.buffer(colors.tobytes())
            rect_vbo = ctx.ctx.buffer(coords.tobytes())

            vao = ctx.ctx.vertex_array(
                ctx.rect_prog,
                [
                    (ctx.quad_vbo, '2f', 'in_position'),      # Per-vertex
                    (color_vbo, '3f/i', 'in_color'),          # Per-instance
                    (rect_vbo, '4f/i', 'in_rect'),            # Per-instance
                ]
            )

        with time_operation(ctx.timings, 'render'):
            vao.render(moderngl.TRIANGLE_STRIP, vertices=4, instances=len(rects))

        with time_operation(ctx.timings, 'cleanup'):
            vao.release()
            color_vbo.release()
            rect_vbo.release()


def read_framebuffer(ctx: ModernGLContext) -> np.ndarray:
    """Read current framebuffer contents (synchronous)

    Side effects:
    - Reads from GPU memory
    - Allocates CPU memory for result

    Args:
        ctx: ModernGL context

    Returns:
        RGB numpy array (height, width, 3)
    """
    with time_operation(ctx.timings, 'read_framebuffer'):
        raw = ctx.fbo.read(components=3)
        img = np.frombuffer(raw, dtype='u1').reshape((ctx.height, ctx.width, 3))

        # Flip vertically (OpenGL origin is bottom-left, images are top-left)
        return np.flip(img, axis=0).copy()


def save_frame(ctx: ModernGLContext, filepath: str) -> None:
    """Save current framebuffer to image file

    Side effects:
    - Reads from GPU
    - Writes to filesystem
    """
    Image.fromarray(read_framebuffer(ctx)).save(filepath)


# ============================================================================
# High-Level Rendering Functions
# ============================================================================

def render_rects_to_array(
    rects: List[Tuple[Rect, RGB]],
    width: int,
    height: int,
    background: RGB = (0, 0, 0)
) -> np.ndarray:
    """High-level function: Render rectangles and read them back

    Side effects:
    - Creates and releases a GPU context

    Returns:
        RGB numpy array (height, width, 3)
    """
    with ModernGLContext(width, height) as ctx:
        render_rects(ctx, rects, background)
        return read_framebuffer(ctx)


def render_rects_to_file(
    rects: List[Tuple[Rect, RGB]],
    output_path: str,
    width: int,
    height: int,
    background: RGB = (0, 0, 0)
) -> None:
    """High-level function: Render rectangles and save to file

    Side effects:
    - Creates GPU context
    - Writes to filesystem
    - Cleans up GPU resources
    """
    with ModernGLContext(width, height) as ctx:
        render_rects(ctx, rects, background)
        save_frame(ctx, output_path)
