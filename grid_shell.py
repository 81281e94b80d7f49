"""
Grid Shell - Imperative Shell

Handles file I/O and side effects for scene files.
Loads JSON scene files and delegates to pure functions in grid_core.py.

This is the "shell" that wraps the functional "core".
"""

import json
from typing import Any, Dict, List, Tuple
from pathlib import Path

from term_types import Rect, RGB
from grid_core import Scene, apply_size_overrides, process_scene_data, build_scene_rects


# ============================================================================
# File Loading (Imperative Shell)
# ============================================================================

def load_scene_file(scene_path: str) -> Dict[str, Any]:
    """Load scene file from disk

    Imperative shell: performs file I/O.

    Args:
        scene_path: Path to JSON scene file

    Returns:
        Decoded scene dictionary

    Raises:
        FileNotFoundError: If scene file doesn't exist
        ValueError: If file isn't valid JSON or isn't a JSON object
    """
    path = Path(scene_path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse scene file: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Scene file must contain a JSON object, got {type(data).__name__}")

    return data


# ============================================================================
# High-Level Parsing (Shell wrapping Core)
# ============================================================================

def parse_scene_file(scene_path: str, size_overrides: Dict[str, Any] = None) -> Scene:
    """Parse scene file into a validated Scene

    Imperative shell: loads file, then delegates to pure functions.

    Args:
        scene_path: Path to JSON scene file
        size_overrides: Size fields replacing the file's values (e.g. from CLI flags)

    Raises:
        FileNotFoundError: If scene file doesn't exist
        ValueError: If scene contents are invalid
    """
    # IMPERATIVE: Load file from disk
    data = load_scene_file(scene_path)

    # FUNCTIONAL: Process the loaded data
    try:
        if size_overrides:
            data = apply_size_overrides(data, size_overrides)
        return process_scene_data(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid scene file {scene_path}: {e!r}")


def scene_file_to_rects(scene_path: str) -> Tuple[Scene, List[Tuple[Rect, RGB]]]:
    """Parse scene file and run the decoration pass

    Returns:
        (scene, rects) tuple
    """
    scene = parse_scene_file(scene_path)
    return scene, build_scene_rects(scene)


# ============================================================================
# Convenience Functions
# ============================================================================

def validate_scene_file(scene_path: str) -> bool:
    """Check if a file is a valid scene file

    Imperative shell: performs file I/O.

    Returns:
        True if valid scene file, False otherwise
    """
    try:
        parse_scene_file(scene_path)
        return True
    except (FileNotFoundError, ValueError):
        return False
