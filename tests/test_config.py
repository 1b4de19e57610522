from __future__ import annotations

from pathlib import Path

import pytest

from pipeline.config import Settings
from pipeline.core import DEFAULT_OUTPUT_DIR, DEFAULT_PROJECT, DEFAULT_SCHEME
from pipeline.wiring import load_settings


def test_defaults_when_environment_is_empty() -> None:
    s = Settings.from_env({})
    assert s.project == DEFAULT_PROJECT
    assert s.scheme == DEFAULT_SCHEME
    assert s.output_dir == DEFAULT_OUTPUT_DIR
    assert s.scratch_root is None
    assert s.build_timeout_seconds == 1800
    assert s.log_level == "WARNING"


def test_environment_values_are_parsed() -> None:
    s = Settings.from_env(
        {
            "DIMENSIONS_PROJECT": "/work/dimensions.xcodeproj",
            "DIMENSIONS_SCHEME": "measure",
            "DIMENSIONS_OUTPUT_DIR": "/work/data",
            "DIMENSIONS_SCRATCH_ROOT": "/tmp/scratch",
            "DIMENSIONS_BUILD_TIMEOUT": "0",
            "DIMENSIONS_EXTRACT_TIMEOUT": "60",
            "DIMENSIONS_LOG_LEVEL": "debug",
        }
    )
    assert s.project == Path("/work/dimensions.xcodeproj")
    assert s.scheme == "measure"
    assert s.output_dir == Path("/work/data")
    assert s.scratch_root == Path("/tmp/scratch")
    assert s.build_timeout_seconds == 0
    assert s.extract_timeout_seconds == 60
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"DIMENSIONS_BUILD_TIMEOUT": "soon"},
        {"DIMENSIONS_BUILD_TIMEOUT": "-5"},
        {"DIMENSIONS_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_environment_values_raise(env) -> None:
    with pytest.raises(ValueError, match="DIMENSIONS_"):
        Settings.from_env(env)


def test_overrides_skip_none_and_coerce_paths() -> None:
    s = Settings().with_overrides(output_dir="out", scheme=None, build_timeout_seconds=10)
    assert s.output_dir == Path("out")
    assert s.scheme == DEFAULT_SCHEME
    assert s.build_timeout_seconds == 10

    with pytest.raises(TypeError):
        Settings().with_overrides(colour="blue")


def test_dotenv_does_not_override_exported_values(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text('DIMENSIONS_SCHEME="from-dotenv"\nDIMENSIONS_OUTPUT_DIR=/from/dotenv\n', encoding="utf-8")
    monkeypatch.setenv("DIMENSIONS_OUTPUT_DIR", "/from/shell")
    # Registered first so monkeypatch also removes the value load_dotenv adds.
    monkeypatch.setenv("DIMENSIONS_SCHEME", "placeholder")
    monkeypatch.delenv("DIMENSIONS_SCHEME")

    s = load_settings(dotenv_path=env_file, build_timeout_seconds=42)

    assert s.scheme == "from-dotenv"
    assert s.output_dir == Path("/from/shell")
    assert s.build_timeout_seconds == 42
