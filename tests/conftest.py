from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from adapters.ids.generators import SequentialElementIdGenerator
from app.config import AppSettings, GridSettings, LayoutSettings
from domain.models import GridDimensions, LayoutState, Viewport
from domain.services.layout_store import LayoutStore


def _clear_gridmaker_env() -> None:
    for key in list(os.environ):
        if key.startswith("GRIDMAKER_"):
            os.environ.pop(key, None)


_clear_gridmaker_env()


@pytest.fixture(autouse=True)
def clear_gridmaker_env() -> Generator[None, None, None]:
    _clear_gridmaker_env()
    yield
    _clear_gridmaker_env()


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings(
        title="Test Layout",
        default_viewport=Viewport.DESKTOP,
        desktop_container_width=12,
        tablet_container_width=8,
        desktop_grid=GridSettings(cols=6, rows=2),
        tablet_grid=GridSettings(cols=4, rows=2),
        mobile_grid=GridSettings(cols=1, rows=2),
        id_strategy="sequential",
        id_prefix="el",
    )


@pytest.fixture
def layout_settings_factory(
    layout_settings: LayoutSettings,
) -> Callable[..., LayoutSettings]:
    def _factory(**overrides: object) -> LayoutSettings:
        return layout_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(layout_settings: LayoutSettings) -> AppSettings:
    return AppSettings(layout=layout_settings)


@pytest.fixture
def app_settings_factory(
    layout_settings_factory: Callable[..., LayoutSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(layout=layout_settings_factory(**overrides))

    return _factory


@pytest.fixture
def store() -> LayoutStore:
    return LayoutStore(id_generator=SequentialElementIdGenerator())


@pytest.fixture
def store_factory() -> Callable[..., LayoutStore]:
    def _factory(
        *,
        desktop: tuple[int, int] = (6, 2),
        tablet: tuple[int, int] = (4, 2),
        mobile: tuple[int, int] = (1, 2),
    ) -> LayoutStore:
        initial = LayoutState(
            grid={
                Viewport.DESKTOP: GridDimensions(*desktop),
                Viewport.TABLET: GridDimensions(*tablet),
                Viewport.MOBILE: GridDimensions(*mobile),
            }
        )
        return LayoutStore(id_generator=SequentialElementIdGenerator(), initial_state=initial)

    return _factory
