from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.ids.generators import SequentialElementIdGenerator, UuidElementIdGenerator
from domain.models import (
    DEFAULT_GRID,
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    GridDimensions,
    LayoutState,
    Viewport,
    ViewportConfig,
)
from domain.ports.ids import ElementIdGenerator

DEFAULT_CONFIG_PATH = Path("config/layout/app.yaml")


class GridSettings(BaseModel):
    cols: int = Field(ge=MIN_COLS, le=MAX_COLS)
    rows: int = Field(ge=MIN_ROWS, le=MAX_ROWS)

    def to_dimensions(self) -> GridDimensions:
        return GridDimensions(cols=self.cols, rows=self.rows)


def _default_grid(viewport: Viewport) -> GridSettings:
    dimensions = DEFAULT_GRID[viewport]
    return GridSettings(cols=dimensions.cols, rows=dimensions.rows)


class LayoutSettings(BaseModel):
    title: str = "Grid Layout Maker"
    default_viewport: Viewport = Viewport.DESKTOP
    desktop_container_width: Literal[12, 6, 4] = 12
    tablet_container_width: Literal[8, 4] = 8
    desktop_grid: GridSettings = Field(default_factory=lambda: _default_grid(Viewport.DESKTOP))
    tablet_grid: GridSettings = Field(default_factory=lambda: _default_grid(Viewport.TABLET))
    mobile_grid: GridSettings = Field(default_factory=lambda: _default_grid(Viewport.MOBILE))
    id_strategy: Literal["uuid", "sequential"] = "uuid"
    id_prefix: str = "el"
    log_level: str = "info"

    @field_validator("id_strategy", "log_level", mode="before")
    @classmethod
    def normalize_lowercase(cls, value: object) -> str:
        return str(value).strip().lower()

    def initial_state(self) -> LayoutState:
        return LayoutState(
            viewport=self.default_viewport,
            viewport_config=ViewportConfig(
                desktop_container_width=self.desktop_container_width,
                tablet_container_width=self.tablet_container_width,
            ),
            grid={
                Viewport.DESKTOP: self.desktop_grid.to_dimensions(),
                Viewport.TABLET: self.tablet_grid.to_dimensions(),
                Viewport.MOBILE: self.mobile_grid.to_dimensions(),
            },
            elements=(),
        )

    def build_id_generator(self) -> ElementIdGenerator:
        if self.id_strategy == "sequential":
            return SequentialElementIdGenerator(prefix=self.id_prefix)
        return UuidElementIdGenerator(prefix=self.id_prefix)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GRIDMAKER_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("GRIDMAKER_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
