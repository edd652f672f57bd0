from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.svg.renderer import SvgStyle
from domain.models import LayoutConfig

DEFAULT_CONFIG_PATH = Path("config/diagram.yaml")
CONFIG_PATH_ENV = "AUTOMATON_DIAGRAM_CONFIG_PATH"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class DiagramSettings(BaseModel):
    radius: PositiveFloat = 10.0
    gap: float = Field(default=10.0, ge=0)
    arrow_size: PositiveFloat = 4.0
    margin: float = Field(default=8.0, ge=0)
    pixel_rate: PositiveFloat = 3.0
    initial_fill: str = "blue"
    normal_fill: str = "white"
    stroke: str = "black"

    @field_validator("initial_fill", "normal_fill", "stroke", mode="before")
    @classmethod
    def normalize_color(cls, value: object) -> str:
        normalized = str(value or "").strip()
        if not normalized:
            msg = "diagram colours must not be empty"
            raise ValueError(msg)
        return normalized

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            radius=self.radius,
            gap=self.gap,
            arrow_size=self.arrow_size,
            margin=self.margin,
            pixel_rate=self.pixel_rate,
        )

    def to_svg_style(self) -> SvgStyle:
        return SvgStyle(
            initial_fill=self.initial_fill,
            normal_fill=self.normal_fill,
            stroke=self.stroke,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AUTOMATON_DIAGRAM_", env_nested_delimiter="__")

    diagram: DiagramSettings = DiagramSettings()
    output_dir: Path = Path("data/diagrams")
    log_level: str = "WARNING"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return parse_log_level(value) if value else "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Keyword arguments, then environment, then the diagram YAML file.
        yaml_sources: tuple[PydanticBaseSettingsSource, ...] = ()
        if cls._yaml_path:
            yaml_sources = (YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path),)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings, *yaml_sources)


def parse_log_level(value: object) -> str:
    level = str(value).strip().upper()
    if level not in logging.getLevelNamesMapping():
        msg = f"Unknown log level {value!r}; expected one of {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)
    return level


def resolve_config_path(config_path: Path | None = None) -> tuple[Path | None, str]:
    """Pick the diagram YAML file and describe where the choice came from."""
    if config_path is not None:
        return config_path, "--config option"
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path), CONFIG_PATH_ENV
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH, "default location"
    return None, "built-in defaults"


def load_settings(config_path: Path | None = None) -> AppSettings:
    resolved_path, origin = resolve_config_path(config_path)
    if resolved_path is not None and not resolved_path.is_file():
        msg = f"Diagram config file not found: {resolved_path} (set by {origin})"
        raise FileNotFoundError(msg)

    previous = AppSettings._yaml_path
    AppSettings._yaml_path = resolved_path
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
