import json

from typer.testing import CliRunner

from exmatch.__main__ import app


runner = CliRunner()


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "--plain" in result.stdout
    for command in ["normalize", "classify", "match", "resolve", "videos", "search", "quota", "report"]:
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.stdout


def test_json_and_plain_are_mutually_exclusive() -> None:
    result = runner.invoke(app, ["--json", "--plain", "report", "--help"])
    assert result.exit_code == 2
    assert "mutually exclusive" in result.stdout


def test_normalize_json_output() -> None:
    result = runner.invoke(app, ["--json", "normalize", "Light treadmill jogging"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["normalized"] == "treadmill jogging"
    assert payload["contexts"] == ["cardio"]
    assert payload["slug"] == "light-treadmill-jogging"


def test_classify_plain_output() -> None:
    result = runner.invoke(app, ["--plain", "classify", "Overhead Triceps Stretch"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "Overhead Triceps Stretch\tflexibility"

    result = runner.invoke(app, ["--plain", "classify", "Barbell Row", "--slot", "warmup"])
    assert result.stdout.strip() == "Barbell Row\twarmup"
