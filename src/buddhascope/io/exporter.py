"""
Presentation hand-off.

Turns three normalized channel grids into the interleaved vertex array a
point-sprite renderer consumes, or into an RGB image written with Pillow,
plus a JSON sidecar describing how the image was produced.
"""

import json
from pathlib import Path
from typing import Any, Union

import numpy as np
from PIL import Image

from buddhascope.pipeline import RenderResult

VERTEX_COLUMNS = ("x", "y", "r", "g", "b")


def _check_shapes(red: np.ndarray, green: np.ndarray, blue: np.ndarray):
    if not (red.shape == green.shape == blue.shape) or red.ndim != 2:
        raise ValueError(
            f"Channel grids must share one 2D shape, got {red.shape}, {green.shape}, {blue.shape}"
        )


def build_vertices(red: np.ndarray, green: np.ndarray, blue: np.ndarray) -> np.ndarray:
    """
    Build one (x, y, r, g, b) vertex per cell, in row-major order.

    Display coordinates are in [-1, 1]: ``x = -(col * 2 / W - 1)`` and
    ``y = -(row * 2 / H - 1)``.

    Returns:
        (H * W, 5) float32 array.
    """
    _check_shapes(red, green, blue)
    h, w = red.shape
    rows, cols = np.meshgrid(np.arange(h), np.arange(w), indexing="ij")

    vertices = np.empty((h * w, len(VERTEX_COLUMNS)), dtype=np.float32)
    vertices[:, 0] = -(cols.ravel() * 2.0 / w - 1.0)
    vertices[:, 1] = -(rows.ravel() * 2.0 / h - 1.0)
    vertices[:, 2] = red.ravel()
    vertices[:, 3] = green.ravel()
    vertices[:, 4] = blue.ravel()
    return vertices


def to_rgb_image(
    red: np.ndarray,
    green: np.ndarray,
    blue: np.ndarray,
    output_scale: float = 1.0,
) -> np.ndarray:
    """
    Stack normalized channels into an (H, W, 3) uint8 image.

    Row 0 is the top of the image and column 0 its right edge, the same
    placement the vertex transform produces on screen.
    """
    _check_shapes(red, green, blue)
    rgb = np.stack([red, green, blue], axis=-1).astype(np.float32) / output_scale
    rgb = np.clip(rgb, 0.0, 1.0)[:, ::-1]
    return (rgb * 255).round().astype(np.uint8)


def result_channels(result: RenderResult) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    return (
        result.normalized["red"],
        result.normalized["green"],
        result.normalized["blue"],
    )


def save_image(result: RenderResult, path: Union[str, Path]) -> Path:
    """Write the render as an 8-bit RGB image (format from the suffix)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = to_rgb_image(*result_channels(result), output_scale=result.config.output_scale)
    Image.fromarray(frame).save(path)
    return path


def build_metadata(result: RenderResult) -> dict[str, Any]:
    """JSON-ready description of a finished render."""
    meta = result.config.to_dict()
    meta["channels"] = [
        {
            "name": ch.name,
            "iterations": ch.iterations,
            "samples": ch.samples,
            "max_count": ch.grid.max(),
            "total_count": ch.grid.total(),
            "running_max": ch.running_max,
            "normalized_by": result.max_values[ch.name],
        }
        for ch in result.channels
    ]
    return meta


def export(result: RenderResult, path: Union[str, Path]) -> dict[str, Path]:
    """
    Write the image and a ``.json`` metadata sidecar next to it.

    Returns:
        Dict with ``image`` and ``metadata`` paths.
    """
    image_path = save_image(result, path)
    meta_path = image_path.with_suffix(".json")
    with open(meta_path, "w") as f:
        json.dump(build_metadata(result), f, indent=2)
    return {"image": image_path, "metadata": meta_path}


def save_vertices(result: RenderResult, path: Union[str, Path]) -> Path:
    """Dump the vertex array as ``.npy``."""
    path = Path(path)
    if path.suffix != ".npy":
        path = path.with_suffix(".npy")
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, build_vertices(*result_channels(result)))
    return path
