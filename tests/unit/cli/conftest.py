"""Fixtures for CLI tests."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from handbrake.cli import main
from handbrake.executor import HandBrakeCLI


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the data directory at tmp_path and leave logging alone."""
    for var in (
        "HBPY_CONFIG_PATH",
        "HBPY_HANDBRAKE_CLI",
        "HBPY_OVERWRITE",
        "HBPY_ATOMIC",
        "HBPY_TEMP_DIR",
        "HBPY_TRACE",
        "HBPY_TIMEOUT",
        "HBPY_LOG_LEVEL",
        "HBPY_LOG_FILE",
        "HBPY_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("HBPY_DATA_DIR", str(data_dir))
    monkeypatch.setattr("handbrake.cli._logging_configured", True)
    return data_dir


@pytest.fixture
def invoke():
    """Run the CLI with HandBrakeCLI backed by the given runner."""

    def _invoke(args: list[str], runner=None):
        obj = {}
        if runner is not None:
            obj["cli"] = HandBrakeCLI(runner=runner)
        return CliRunner().invoke(main, args, obj=obj)

    return _invoke
