"""End-to-end tests for TerrainGenerator."""

import json
import logging
import math

import numpy as np
import pytest

from terrain_generator import config as DEFAULTS
from terrain_generator import EditCommand, EditKind, ExportError, InputValidationError, TerrainGenerator

logger = logging.getLogger("test_generator")


def small_generator(**overrides):
    config = {'size': 16, 'seed': 42}
    config.update(overrides)
    return TerrainGenerator(config=config, logger=logger)


def test_defaults_are_applied():
    generator = TerrainGenerator(config={'size': 8}, logger=logger)
    assert generator.settings == {
        'seed': DEFAULTS.DEFAULT_SEED,
        'size': 8,
        'scale': DEFAULTS.NOISE_SCALE,
        'roughness': DEFAULTS.ROUGHNESS,
        'edit_step': DEFAULTS.EDIT_STEP,
    }
    assert generator.size == 8


def test_same_config_is_deterministic():
    a = small_generator()
    b = small_generator()
    np.testing.assert_array_equal(a.heights, b.heights)


def test_unseeded_generator_still_produces_bounded_terrain():
    generator = small_generator(seed=None, roughness=1.0)
    assert generator.seed is None
    assert np.all(np.abs(generator.heights) <= 1.05)


def test_end_to_end_scenario(tmp_path):
    generator = TerrainGenerator(
        config={'size': 4, 'scale': 50.0, 'roughness': 0.5},
        logger=logger,
        permutation_table=np.arange(256),
    )
    before = np.array(generator.heights)

    generator.elevate(1, 1, 2, 1.0)
    after = np.array(generator.heights)

    assert after[1, 1] - before[1, 1] == pytest.approx(0.1, abs=1e-12)
    assert math.hypot(3 - 1, 3 - 1) > 2
    assert after[3, 3] == before[3, 3]

    mesh = generator.build_mesh()
    assert len(mesh.faces) == 2 * 4 * 3 == 24

    path = tmp_path / "scenario.obj"
    generator.save(str(path))
    face_lines = [l for l in path.read_text().splitlines() if l.startswith("f ")]
    assert len(face_lines) == 24


def test_apply_command():
    generator = small_generator()
    before = generator.heights[3, 3]
    touched = generator.apply(EditCommand(EditKind.DEPRESS, 3, 3, 2, 5.0))
    assert touched > 0
    assert generator.heights[3, 3] == pytest.approx(before - 0.5)


def test_custom_edit_step():
    generator = small_generator(edit_step=0.25)
    before = generator.heights[8, 8]
    generator.elevate(8, 8, 3, 2.0)
    assert generator.heights[8, 8] == pytest.approx(before + 0.5)


def test_rejected_edit_leaves_terrain_unchanged():
    generator = small_generator()
    before = np.array(generator.heights)
    with pytest.raises(InputValidationError):
        generator.flatten(16, 0, 3)
    with pytest.raises(InputValidationError):
        generator.elevate(1, 1, 0, 1.0)
    np.testing.assert_array_equal(generator.heights, before)


def test_normals_recomputed_after_edit():
    generator = small_generator()
    first = generator.get_normals()
    assert generator.get_normals() is first

    generator.elevate(8, 8, 4, 10.0)
    second = generator.get_normals()
    assert second is not first
    assert not np.array_equal(first[7, 8], second[7, 8])


def test_save_writes_obj_config_and_preview(tmp_path):
    generator = small_generator()
    obj_path = tmp_path / "terrain.obj"
    preview_path = tmp_path / "terrain.png"

    result = generator.save(str(obj_path), preview_path=str(preview_path))

    assert result == str(obj_path)
    assert obj_path.exists()
    assert preview_path.exists()
    sidecar = tmp_path / "terrain.generation_config.json"
    assert json.loads(sidecar.read_text())['seed'] == 42


def test_failed_save_keeps_terrain(tmp_path):
    generator = small_generator()
    generator.elevate(2, 2, 2, 1.0)
    before = np.array(generator.heights)

    with pytest.raises(ExportError):
        generator.save(str(tmp_path / "no_such_dir" / "terrain.obj"))

    np.testing.assert_array_equal(generator.heights, before)
    # The session can retry after a failure.
    generator.save(str(tmp_path / "terrain.obj"))


def test_failed_config_write_leaves_no_mesh(tmp_path):
    generator = small_generator()
    # A directory where the sidecar file should go makes that write fail.
    (tmp_path / "terrain.generation_config.json").mkdir()
    obj_path = tmp_path / "terrain.obj"

    with pytest.raises(ExportError):
        generator.save(str(obj_path))

    assert not obj_path.exists()


def test_invalid_size_rejected():
    with pytest.raises(InputValidationError):
        TerrainGenerator(config={'size': 0}, logger=logger)


def test_logs_initialization(caplog):
    with caplog.at_level(logging.INFO, logger="test_generator"):
        small_generator(seed=5)
    assert "TerrainGenerator initialized with seed: 5" in caplog.text
