# terrain_generator/normals.py

"""
================================================================================
SURFACE NORMAL ESTIMATION
================================================================================
Per-cell surface normals for a height field, from central differences of the
four axis neighbours.

Data Contract:
---------------
- Inputs:
    - height_map: An N x N float array indexed [x, z].
- Outputs:
    - An (N, N, 3) float array of unit normals. A cell whose cross product
      has zero length keeps the zero vector.
- Side Effects: None.
- Invariants: Neighbours outside the grid are replaced by the cell's own
  height (zero gradient at the boundary), so nothing outside the grid is read.
================================================================================
"""

import numpy as np
from numba import njit

from .errors import InputValidationError


@njit
def calculate_normals(height_map):
    """
    T_x = (1, hR - hL, 0) and T_z = (0, hU - hD, 1); the normal is T_x x T_z
    normalized to unit length.
    """
    size = height_map.shape[0]
    normals = np.zeros((size, size, 3))

    for x in range(size):
        for z in range(size):
            h = height_map[x, z]
            height_l = height_map[x - 1, z] if x > 0 else h
            height_r = height_map[x + 1, z] if x < size - 1 else h
            height_d = height_map[x, z - 1] if z > 0 else h
            height_u = height_map[x, z + 1] if z < size - 1 else h

            # Tangent vectors along x and z
            ax, ay, az = 1.0, height_r - height_l, 0.0
            bx, by, bz = 0.0, height_u - height_d, 1.0

            nx = ay * bz - az * by
            ny = az * bx - ax * bz
            nz = ax * by - ay * bx

            length = np.sqrt(nx * nx + ny * ny + nz * nz)
            if length != 0.0:
                nx /= length
                ny /= length
                nz /= length

            normals[x, z, 0] = nx
            normals[x, z, 1] = ny
            normals[x, z, 2] = nz

    return normals


def estimate_normals(height_map: np.ndarray) -> np.ndarray:
    """Normal field for any square array-like of heights."""
    heights = np.ascontiguousarray(height_map, dtype=np.float64)
    if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
        raise InputValidationError(f"Height map must be square, got shape {heights.shape}")
    return calculate_normals(heights)
