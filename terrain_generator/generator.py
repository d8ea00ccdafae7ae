# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main TerrainGenerator class, responsible for creating
a height field from noise, routing edits to it and exporting the result.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'size', 'scale'
      and 'roughness'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - NumPy arrays of heights and normals, and files written on save.
- Side Effects: Logs messages using the provided logger. Edits mutate the
  owned height grid.
- Invariants: Given the same seed and configuration, the generated terrain
  is deterministic. A rejected edit or a failed save leaves the terrain
  unchanged.
================================================================================
"""

import logging
import os
import time

import numpy as np

from . import config as DEFAULTS
from . import mesh_export
from . import normals as normal_estimation
from .editor import EditCommand, TerrainEditor
from .heightmap import HeightGrid
from .noise import NoiseField


class TerrainGenerator:
    """
    Owns one noise field, one height grid and the editor that mutates it.
    This class is backend-only and does not handle any user interaction.
    """
    def __init__(self, config: dict, logger: logging.Logger, permutation_table: np.ndarray = None):
        """
        Initializes the terrain generator and generates the height field.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one will be generated from the seed.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'size': self.user_config.get('size', DEFAULTS.GRID_SIZE),
            'scale': self.user_config.get('scale', DEFAULTS.NOISE_SCALE),
            'roughness': self.user_config.get('roughness', DEFAULTS.ROUGHNESS),
            'edit_step': self.user_config.get('edit_step', DEFAULTS.EDIT_STEP),
        }
        self.seed = self.settings['seed']

        # --- Initialize Noise ---
        if permutation_table is not None:
            self.noise_field = NoiseField(self.seed, permutation_table=permutation_table)
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self.logger.debug("No permutation table provided, generating new one from seed.")
            self.noise_field = NoiseField(self.seed)

        # --- Expose the permutation table so a run can be reproduced ---
        self.permutation_table = self.noise_field.permutation_table

        # --- Generate the height field ---
        start_time = time.perf_counter()
        self.grid = HeightGrid.generate(
            self.noise_field,
            self.settings['size'],
            self.settings['scale'],
            self.settings['roughness'],
        )
        self.editor = TerrainEditor(self.grid, edit_step=self.settings['edit_step'])
        elapsed = time.perf_counter() - start_time

        self._normals = None
        self._normals_revision = None

        seed_label = self.seed if self.seed is not None else "random"
        self.logger.info(f"TerrainGenerator initialized with seed: {seed_label}")
        stats = self.grid.statistics()
        self.logger.info(
            f"Generated {self.grid.size}x{self.grid.size} height field in {elapsed:.2f} seconds "
            f"(min {stats['min']:.3f}, max {stats['max']:.3f}, mean {stats['mean']:.3f})"
        )

    @property
    def size(self) -> int:
        return self.grid.size

    @property
    def heights(self) -> np.ndarray:
        return self.grid.heights

    def apply(self, command: EditCommand) -> int:
        """Applies a validated edit. Raises InputValidationError on bad input."""
        return self.editor.apply(command)

    def elevate(self, cx: int, cz: int, radius: float, strength: float) -> int:
        return self.editor.elevate(cx, cz, radius, strength)

    def depress(self, cx: int, cz: int, radius: float, strength: float) -> int:
        return self.editor.depress(cx, cz, radius, strength)

    def flatten(self, cx: int, cz: int, radius: float) -> int:
        return self.editor.flatten(cx, cz, radius)

    def get_normals(self) -> np.ndarray:
        """
        The normal field for the current heights. Recomputed only when the
        grid has been edited since the last call.
        """
        if self._normals is None or self._normals_revision != self.grid.revision:
            revision = self.grid.revision
            self._normals = normal_estimation.estimate_normals(self.editor.snapshot())
            self._normals_revision = revision
            self.logger.debug(f"Recomputed normals for grid revision {revision}.")
        return self._normals

    def build_mesh(self) -> mesh_export.Mesh:
        heights = self.editor.snapshot()
        normals = normal_estimation.estimate_normals(heights)
        return mesh_export.build_mesh(heights, normals)

    def save(self, output_path: str, preview_path: str = None) -> str:
        """
        Exports the terrain as an OBJ file, writes the generation config next
        to it and optionally a grayscale preview. Raises ExportError on failure.

        Returns:
            str: The path of the written OBJ file.
        """
        start_time = time.perf_counter()
        self.logger.info(f"Exporting terrain to '{output_path}'...")

        # The sidecar goes first so a failed save never leaves an OBJ behind.
        root, _ = os.path.splitext(output_path)
        mesh_export.write_generation_config(root + DEFAULTS.GENERATION_CONFIG_SUFFIX, self.settings)

        mesh = self.build_mesh()
        mesh_export.write_obj(output_path, mesh)

        if preview_path:
            mesh_export.save_heightmap_preview(preview_path, self.editor.snapshot())

        self.logger.info(f"Export complete in {time.perf_counter() - start_time:.2f} seconds.")
        return output_path
