"""Tests for the bar-race CLI."""

from pathlib import Path

from typer.testing import CliRunner
from bar_race.cli import app

runner = CliRunner()

SAMPLE_CSV = (
    "Entity,Year,Value,region\n"
    'Nauru,2000,"10,000",Oceania\n'
    'Tuvalu,2000,"9,000",Oceania\n'
    'Nauru,2001,"11,000",Oceania\n'
    'Tuvalu,2001,"12,000",Oceania\n'
    'World,2001,"6,000,000,000",\n'
)


def output_of(result) -> str:
    """Combined output with rich line wrapping undone."""
    return " ".join((result.stdout + result.stderr).split())


def write_sample(tmp_path: Path, content: str = SAMPLE_CSV) -> Path:
    path = tmp_path / "population.csv"
    path.write_text(content, encoding="utf-8")
    return path


def test_missing_data_file_argument():
    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "Data file is required" in output_of(result)


def test_nonexistent_data_file(tmp_path):
    result = runner.invoke(app, [str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "not found" in output_of(result)


def test_dataset_without_usable_rows(tmp_path):
    path = write_sample(tmp_path, "Entity,Year,Value\nWorld,2000,5\n")

    result = runner.invoke(app, [str(path)])

    assert result.exit_code == 1
    assert "No usable frames" in output_of(result)


def test_unsupported_output_format(tmp_path):
    path = write_sample(tmp_path)

    result = runner.invoke(app, [str(path), "-o", str(tmp_path / "race.mp4")])

    assert result.exit_code == 1
    assert "Unsupported output format" in output_of(result)


def test_invalid_category_fallback(tmp_path):
    path = write_sample(tmp_path)

    result = runner.invoke(app, [str(path), "--category-fallback", "bucket"])

    assert result.exit_code == 1
    assert "Invalid configuration" in output_of(result)


def test_writes_svg_and_prints_rankings(tmp_path):
    path = write_sample(tmp_path)
    out = tmp_path / "race.svg"

    result = runner.invoke(app, [str(path), "-o", str(out), "--top-k", "1"])

    assert result.exit_code == 0, result.stdout + result.stderr
    assert "2 periods" in result.stdout
    assert "Nauru" in result.stdout
    assert out.read_bytes().startswith(b"<?xml")


def test_writes_gif_next_to_data_by_default(tmp_path, monkeypatch):
    path = write_sample(tmp_path)
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, [str(path), "--max-frame", "3"])

    assert result.exit_code == 0, result.stdout + result.stderr
    assert (tmp_path / "population-race.gif").read_bytes().startswith(b"GIF89")


def test_live_playback_in_terminal(tmp_path):
    path = write_sample(tmp_path)

    result = runner.invoke(app, [str(path), "--live", "0.3", "--interval", "20"])

    assert result.exit_code == 0, output_of(result)
    assert "Tuvalu" in result.stdout
    assert not list(tmp_path.glob("*.gif"))


def test_save_failure_is_reported(tmp_path):
    path = write_sample(tmp_path)
    out = tmp_path / "missing-dir" / "race.svg"

    result = runner.invoke(app, [str(path), "-o", str(out), "--max-frame", "2"])

    assert result.exit_code == 1
    assert "Failed to save file" in output_of(result)
