"""Tests for the command-line entry point."""

import io
import json
import logging

import pytest

from terrain_generator.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def run_cli(args, script="4\n"):
    stdout = io.StringIO()
    code = main(args, stdin=io.StringIO(script), stdout=stdout)
    return code, stdout.getvalue()


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.output == "fractal_terrain.obj"
    assert args.seed is None
    assert args.random_seed is False


def test_parser_rejects_seed_with_random_seed():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--seed", "1", "--random-seed"])


def test_generate_edit_and_save(tmp_path):
    output = tmp_path / "out" / "terrain.obj"
    preview = tmp_path / "terrain.png"
    code, text = run_cli(
        ["--size", "8", "--seed", "3", "--output", str(output),
         "--preview", str(preview), "--log-dir", str(tmp_path / "logs")],
        script="1\n4\n4\n3\n2.0\n3\n4\n4\n2\n4\n",
    )

    assert code == 0
    assert "Terrain saved as" in text
    assert output.exists()
    assert preview.exists()
    assert (tmp_path / "logs" / "terrain_generator.log").exists()

    lines = output.read_text().splitlines()
    assert sum(1 for l in lines if l.startswith("f ")) == 2 * 8 * 7


def test_config_file_and_overrides(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "terrain_generation_parameters": {"size": 6, "seed": 10, "roughness": 2.0}
    }))
    output = tmp_path / "terrain.obj"

    code, _ = run_cli(
        ["--config", str(config_path), "--size", "5", "--output", str(output),
         "--log-dir", str(tmp_path / "logs")]
    )

    assert code == 0
    sidecar = json.loads((tmp_path / "terrain.generation_config.json").read_text())
    assert sidecar["size"] == 5
    assert sidecar["seed"] == 10
    assert sidecar["roughness"] == 2.0


def test_random_seed_flag(tmp_path):
    output = tmp_path / "terrain.obj"
    code, _ = run_cli(
        ["--size", "4", "--random-seed", "--output", str(output), "--log-dir", str(tmp_path / "logs")]
    )
    assert code == 0
    sidecar = json.loads((tmp_path / "terrain.generation_config.json").read_text())
    assert sidecar["seed"] is None


def test_missing_config_file(tmp_path):
    code, _ = run_cli(
        ["--config", str(tmp_path / "nope.json"), "--log-dir", str(tmp_path / "logs")]
    )
    assert code == 1


def test_invalid_size(tmp_path):
    code, text = run_cli(["--size", "0", "--log-dir", str(tmp_path / "logs")])
    assert code == 1
    assert "Could not generate terrain" in text


def test_output_directory_under_a_regular_file(tmp_path):
    blocker = tmp_path / "afile"
    blocker.write_text("not a directory")
    output = blocker / "sub" / "terrain.obj"

    code, text = run_cli(
        ["--size", "4", "--output", str(output), "--log-dir", str(tmp_path / "logs")]
    )

    assert code == 1
    assert "Could not create output directory" in text
    assert blocker.read_text() == "not a directory"


def test_input_ending_without_save(tmp_path):
    output = tmp_path / "terrain.obj"
    code, _ = run_cli(
        ["--size", "4", "--output", str(output), "--log-dir", str(tmp_path / "logs")],
        script="",
    )
    assert code == 1
    assert not output.exists()
