from __future__ import annotations

import codecs
import os
import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_ENV_VAR = "MD_RENDER_CONFIG"
PROJECT_CONFIG_NAME = ".md-render.yaml"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


class RenderConfigError(RuntimeError):
    pass


class NewlineMode(StrEnum):
    keep = "keep"
    lf = "lf"
    crlf = "crlf"


class RenderSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    encoding: Annotated[str, Field(min_length=1)] = "utf-8"
    output_suffix: Annotated[str, Field(min_length=2, pattern=r"^\.[^/\\]+$")] = ".html"
    newline: NewlineMode = NewlineMode.keep

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {value}") from exc
        return value

    def apply_newlines(self, text: str) -> str:
        """Rewrite line breaks of rendered output according to ``newline``."""
        match self.newline:
            case NewlineMode.lf:
                return _LINE_BREAK_RE.sub("\n", text)
            case NewlineMode.crlf:
                return _LINE_BREAK_RE.sub("\r\n", text)
            case _:
                return text


@dataclass(frozen=True)
class LoadedSettings:
    settings: RenderSettings
    source: str


def user_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "md-render" / "config.yaml"


def find_config_path(*, cwd: Path | None = None) -> Path:
    """Locate the settings file used when ``--config`` is not given.

    ``$MD_RENDER_CONFIG`` wins, then a ``.md-render.yaml`` in the working
    directory, then the per-user file. The returned path may not exist.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    project_file = (cwd if cwd is not None else Path.cwd()) / PROJECT_CONFIG_NAME
    if project_file.is_file():
        return project_file
    return user_config_path()


def load_render_settings(*, path: Path | None = None, overrides: dict[str, Any] | None = None) -> LoadedSettings:
    config_path = path if path is not None else find_config_path()
    data = _load_yaml_mapping(config_path)
    source = str(config_path) if data else "defaults"

    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        settings = RenderSettings.model_validate(data)
    except ValidationError as exc:
        raise RenderConfigError(f"Invalid md-render settings from {source}: {exc}") from exc
    return LoadedSettings(settings=settings, source=source)


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise RenderConfigError(f"Invalid YAML at {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise RenderConfigError(f"Expected mapping YAML at {path}")
    return dict(loaded)
