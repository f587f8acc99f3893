"""Tests for buildview.config.BuildViewConfig."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from buildview.config import BuildViewConfig, ColorConfig

ENV_VARS = (
    "BUILDVIEW_COMMAND",
    "BUILDVIEW_FOLLOW",
    "BUILDVIEW_MAX_LINES",
    "BUILDVIEW_ASCII",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv() away from any .env in the working tree
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self) -> None:
        config = BuildViewConfig.load()
        assert config.build.command == "make"
        assert config.build.cwd is None
        assert config.build.max_lines == 50_000
        assert config.build.follow_output is True
        assert config.view.ascii_indicator is False
        assert config.colors.status_bar_text == "black"
        assert config.colors.status_bar_background == "cyan"
        assert config.colors.modal_content_text == "white"
        assert config.colors.modal_content_background == "blue"
        assert config.diagnostics.patterns == []

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = BuildViewConfig.load(str(tmp_path / "nope.json"))
        assert config.build.command == "make"


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class TestLoad:
    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "buildview.json"
        path.write_text(
            json.dumps(
                {
                    "build": {"command": "cargo build", "follow_output": False},
                    "colors": {"modal_content_background": "#1e1e2e"},
                    "diagnostics": {"patterns": [r"at (?P<file>\S+) line (?P<line>\d+)"]},
                }
            )
        )
        config = BuildViewConfig.load(str(path))
        assert config.build.command == "cargo build"
        assert config.build.follow_output is False
        assert config.colors.modal_content_background == "#1e1e2e"
        assert len(config.diagnostics.patterns) == 1

    def test_env_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "buildview.json"
        path.write_text(json.dumps({"build": {"command": "make all"}}))
        monkeypatch.setenv("BUILDVIEW_COMMAND", "ninja")
        monkeypatch.setenv("BUILDVIEW_MAX_LINES", "100")
        monkeypatch.setenv("BUILDVIEW_ASCII", "yes")
        config = BuildViewConfig.load(str(path))
        assert config.build.command == "ninja"
        assert config.build.max_lines == 100
        assert config.view.ascii_indicator is True

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("0", False), ("false", False), ("1", True), ("TRUE", True), ("on", True)],
    )
    def test_follow_flag(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("BUILDVIEW_FOLLOW", value)
        assert BuildViewConfig.load().build.follow_output is expected


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_invalid_color(self) -> None:
        with pytest.raises(ValidationError):
            ColorConfig(status_bar_text="not-a-color")

    def test_hex_and_named_colors(self) -> None:
        colors = ColorConfig(status_bar_text="#ff0000", modal_content_text="bright_white")
        assert colors.status_bar_text == "#ff0000"

    def test_max_lines_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BuildViewConfig.model_validate({"build": {"max_lines": 0}})

    def test_spinner_interval_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BuildViewConfig.model_validate({"view": {"spinner_interval": 0}})
