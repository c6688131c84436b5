from __future__ import annotations

import copy
from functools import cache, lru_cache
from pathlib import Path
from typing import Any

import orjson

from domain.models import GridDimensions, LayoutState, Placement, Viewport


@lru_cache(maxsize=1)
def repo_root() -> Path:
    for parent in Path(__file__).resolve().parents:
        if (parent / "pyproject.toml").exists():
            return parent
    raise RuntimeError("Repository root not found")


def layout_fixture_path(name: str) -> Path:
    return repo_root() / "examples" / "layout" / name


@cache
def _load_layout_payload_cached(name: str) -> dict[str, Any]:
    payload = orjson.loads(layout_fixture_path(name).read_bytes())
    if not isinstance(payload, dict):
        raise TypeError(f"Expected dict payload in {name}")
    return payload


def load_layout_payload(name: str) -> dict[str, Any]:
    return copy.deepcopy(_load_layout_payload_cached(name))


def load_layout_text(name: str) -> str:
    return layout_fixture_path(name).read_text(encoding="utf-8")


def minimal_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": 1,
        "viewportConfig": {
            "desktop": {"containerWidth": 12},
            "tablet": {"containerWidth": 8},
        },
        "grid": {
            "desktop": {"cols": 6, "rows": 2},
            "tablet": {"cols": 4, "rows": 2},
            "mobile": {"cols": 1, "rows": 2},
        },
        "elements": [],
    }
    payload.update(overrides)
    return payload


def dumps(payload: Any) -> str:
    return orjson.dumps(payload).decode("utf-8")


def state_with_grid(cols: int, rows: int, viewport: Viewport = Viewport.DESKTOP) -> LayoutState:
    return LayoutState().with_grid(viewport, GridDimensions(cols=cols, rows=rows))


def assert_placements_fit(state: LayoutState) -> None:
    for viewport in state.grid:
        grid = state.grid_for(viewport)
        for element in state.elements:
            placement = element.placement(viewport)
            if placement is None:
                continue
            assert grid.fits(placement), (element.id, viewport, placement, grid)


def placement(col: int, row: int, col_span: int = 1, row_span: int = 1) -> Placement:
    return Placement(col=col, row=row, col_span=col_span, row_span=row_span)
