# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC TERRAIN.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Noise Generation ---
# A fixed default keeps runs reproducible. Pass seed=None for a fresh
# permutation on every run.
DEFAULT_SEED = 1337

# Number of entries in the gradient table and in one half of the
# permutation table. Lattice coordinates are hashed modulo this value.
GRADIENT_TABLE_SIZE = 256

# Multiplier that brings the summed simplex contributions into ~[-1, 1].
NOISE_OUTPUT_SCALE = 70.0

# Squared radius of influence of a simplex corner.
SIMPLEX_CORNER_RADIUS_SQ = 0.5

# --- Height Field ---
GRID_SIZE = 256      # Cells along one side of the square grid
NOISE_SCALE = 50.0   # Spatial frequency: larger values give smaller features
ROUGHNESS = 0.5      # Amplitude multiplier applied to the raw noise

# --- Editing ---
# Height delta applied at the centre of an elevate/depress edit per unit
# of strength. The effect falls off linearly to zero at the edit radius.
EDIT_STEP = 0.1

# --- Export ---
DEFAULT_OUTPUT_FILENAME = "fractal_terrain.obj"
GENERATION_CONFIG_SUFFIX = ".generation_config.json"
OBJ_FLOAT_FORMAT = "%.6f"
