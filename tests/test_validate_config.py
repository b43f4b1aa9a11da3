"""Tests for ``scripts/validate_config.py``."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "validate_config.py"


@pytest.fixture(scope="module")
def validate_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("validate_config", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_valid_config(
    validate_script: ModuleType, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg_path = write_json(tmp_path / "job.json", {"inputDir": "/in", "outputDir": "/out"})
    assert validate_script.main([str(cfg_path)]) == 0
    assert capsys.readouterr().out.strip() == "OK: configuration is valid."


def test_schema_errors_are_listed(
    validate_script: ModuleType, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg_path = write_json(tmp_path / "job.json", {"chunkSize": -1, "reportName": 3})
    assert validate_script.main([str(cfg_path)]) == 1
    err = capsys.readouterr().err
    assert "CONFIG VALIDATION ERRORS:" in err
    assert "$.chunkSize" in err
    assert "$.reportName" in err


def test_semantic_error(
    validate_script: ModuleType, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg_path = write_json(tmp_path / "job.json", {"inputDir": "/same", "outputDir": "/same"})
    assert validate_script.main([str(cfg_path)]) == 1
    assert "CONFIG ERROR: inputDir and outputDir must differ" in capsys.readouterr().err


def test_missing_file(
    validate_script: ModuleType, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert validate_script.main([str(tmp_path / "nope.json")]) == 2
    assert "file not found" in capsys.readouterr().err


def test_usage(validate_script: ModuleType, capsys: pytest.CaptureFixture[str]) -> None:
    assert validate_script.main([]) == 2
    assert "Usage:" in capsys.readouterr().err
