# terrain_generator/mesh_export.py

"""
================================================================================
MESH EXPORT
================================================================================
Turns a height field and its normal field into Wavefront OBJ mesh data and
writes it to disk, along with optional side outputs (a generation config
"birth certificate" and a grayscale preview image).

Data Contract:
---------------
- Inputs:
    - height_map: An N x N float array indexed [x, z].
    - normals: The matching (N, N, 3) normal field.
- Outputs:
    - Mesh.vertices: (N*N, 3) positions (x, height, z), z outer / x inner.
    - Mesh.normals: (N*N, 3) normals in the same order.
    - Mesh.faces: (2*N*(N-1), 3) 1-based indices. Vertex index == normal index.
- Side Effects: The write_* / save_* functions write files. Failures raise
  ExportError and never touch the height data.
- Invariants: Every face index lies in [1, N*N].
================================================================================
"""

import json
import logging
from typing import NamedTuple

import numpy as np
from PIL import Image

from . import config as DEFAULTS
from .errors import ExportError, InputValidationError

logger = logging.getLogger(__name__)


class Mesh(NamedTuple):
    vertices: np.ndarray
    normals: np.ndarray
    faces: np.ndarray


def build_mesh(height_map: np.ndarray, normals: np.ndarray) -> Mesh:
    heights = np.asarray(height_map, dtype=np.float64)
    normals = np.asarray(normals, dtype=np.float64)
    size = heights.shape[0]
    if heights.shape != (size, size) or normals.shape != (size, size, 3):
        raise InputValidationError(
            f"Expected an N x N height map and N x N x 3 normals, got {heights.shape} and {normals.shape}"
        )

    # Vertices and normals: z is the outer loop, so walk the transposed grids.
    x_grid, z_grid = np.meshgrid(np.arange(size), np.arange(size))
    vertices = np.column_stack((x_grid.ravel(), heights.T.ravel(), z_grid.ravel()))
    vertex_normals = np.transpose(normals, (1, 0, 2)).reshape(-1, 3)

    # Two triangles per quad, z in [0, N), x in [0, N-1).
    z_idx, x_idx = np.meshgrid(np.arange(size), np.arange(size - 1), indexing='ij')
    top_left = z_idx * size + x_idx + 1
    top_right = top_left + 1
    # The row below is clamped to the grid, so the last row yields
    # degenerate triangles instead of indices past the final vertex.
    lower_z = np.minimum(z_idx + 1, size - 1)
    bottom_left = lower_z * size + x_idx + 1
    bottom_right = bottom_left + 1

    first = np.stack([top_left, bottom_left, top_right], axis=-1)
    second = np.stack([top_right, bottom_left, bottom_right], axis=-1)
    faces = np.stack([first, second], axis=2).reshape(-1, 3)

    return Mesh(vertices, vertex_normals, faces)


def write_obj(path: str, mesh: Mesh):
    """Writes `v`, `vn` and `f v//vn` lines in that order."""
    float_fmt = DEFAULTS.OBJ_FLOAT_FORMAT
    try:
        with open(path, 'w') as f:
            np.savetxt(f, mesh.vertices, fmt=f"v %d {float_fmt} %d")
            np.savetxt(f, mesh.normals, fmt=f"vn {float_fmt} {float_fmt} {float_fmt}")
            # Each vertex index is paired with the identical normal index.
            np.savetxt(f, np.repeat(mesh.faces, 2, axis=1), fmt="f %d//%d %d//%d %d//%d")
    except OSError as e:
        raise ExportError(f"Failed to write mesh to '{path}': {e}") from e

    logger.info(
        f"Wrote {len(mesh.vertices)} vertices, {len(mesh.normals)} normals and "
        f"{len(mesh.faces)} faces to '{path}'."
    )


def write_generation_config(path: str, settings: dict):
    """Saves the settings that produced a terrain so it can be regenerated."""
    try:
        with open(path, 'w') as f:
            json.dump(settings, f, indent=4)
    except OSError as e:
        raise ExportError(f"Failed to write generation config to '{path}': {e}") from e
    logger.info(f"Saved generation config to '{path}'.")


def get_elevation_gray_array(height_map: np.ndarray) -> np.ndarray:
    """
    Normalizes heights to [0, 255] grayscale. The result is laid out
    (z, x) so that image rows run along z. A flat field is all black.
    """
    heights = np.asarray(height_map, dtype=np.float64)
    low, high = heights.min(), heights.max()
    if high > low:
        normalized = (heights - low) / (high - low)
    else:
        normalized = np.zeros_like(heights)
    gray_values = (normalized * 255).astype(np.uint8)
    return np.ascontiguousarray(gray_values.T)


def save_heightmap_preview(path: str, height_map: np.ndarray):
    img = Image.fromarray(get_elevation_gray_array(height_map))
    try:
        img.save(path, 'PNG')
    except OSError as e:
        raise ExportError(f"Failed to write preview image to '{path}': {e}") from e
    logger.info(f"Saved heightmap preview to '{path}'.")
