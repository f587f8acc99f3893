"""Configuration: pydantic models for buildview settings."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator
from rich.color import Color, ColorParseError


class BuildConfig(BaseModel):
    """How the build is run."""

    command: str = Field(default="make", description="Shell command to run")
    cwd: str | None = Field(
        default=None, description="Working directory (default: current directory)"
    )
    max_lines: int = Field(
        default=50_000, ge=1, description="Output lines kept in memory"
    )
    follow_output: bool = Field(
        default=True,
        description="Select the newest line whenever output arrives",
    )


class ViewConfig(BaseModel):
    """Modal appearance."""

    spinner_interval: float = Field(
        default=0.15, gt=0, description="Seconds between spinner frames"
    )
    ascii_indicator: bool = Field(
        default=False,
        description="Use '>' instead of '▶' for the selected row",
    )


class ColorConfig(BaseModel):
    """Color pairs, as rich color names ("black", "bright_cyan", "#1e1e2e")."""

    status_bar_text: str = Field(default="black")
    status_bar_background: str = Field(default="cyan")
    modal_content_text: str = Field(default="white")
    modal_content_background: str = Field(default="blue")

    @field_validator("*")
    @classmethod
    def _check_color(cls, value: str) -> str:
        try:
            Color.parse(value)
        except ColorParseError as e:
            raise ValueError(str(e)) from e
        return value


class DiagnosticsConfig(BaseModel):
    """Diagnostic location parsing and source loading."""

    patterns: list[str] = Field(
        default_factory=list,
        description=(
            "Extra regexes tried before the built-in ones. Each needs "
            "'file' and 'line' named groups and may have 'col'."
        ),
    )
    max_file_bytes: int = Field(
        default=8 * 1024 * 1024,
        gt=0,
        description="Refuse to open source files larger than this",
    )


class BuildViewConfig(BaseModel):
    """Top-level buildview configuration."""

    build: BuildConfig = Field(default_factory=BuildConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)
    colors: ColorConfig = Field(default_factory=ColorConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)

    @classmethod
    def load(cls, config_path: str | None = None) -> BuildViewConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            BUILDVIEW_COMMAND    - Build command
            BUILDVIEW_FOLLOW     - Follow new output (1/0, true/false, yes/no)
            BUILDVIEW_MAX_LINES  - Output lines kept in memory
            BUILDVIEW_ASCII      - ASCII selection indicator (1/0)
        """
        # Load .env file if present.
        try:
            from dotenv import load_dotenv

            load_dotenv(override=True)
        except ImportError:
            pass

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            import json

            with open(config_path) as f:
                config_data = json.load(f)

        build = config_data.get("build", {})
        view = config_data.get("view", {})

        env_command = os.environ.get("BUILDVIEW_COMMAND")
        if env_command:
            build["command"] = env_command

        env_follow = os.environ.get("BUILDVIEW_FOLLOW")
        if env_follow:
            build["follow_output"] = _env_flag(env_follow)

        env_max_lines = os.environ.get("BUILDVIEW_MAX_LINES")
        if env_max_lines:
            build["max_lines"] = int(env_max_lines)

        env_ascii = os.environ.get("BUILDVIEW_ASCII")
        if env_ascii:
            view["ascii_indicator"] = _env_flag(env_ascii)

        if build:
            config_data["build"] = build
        if view:
            config_data["view"] = view

        return cls.model_validate(config_data)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
