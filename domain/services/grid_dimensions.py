from __future__ import annotations

from typing import Callable, Optional

from domain.models import (
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    GridDimensions,
    LayoutState,
    Placement,
    Viewport,
)
from domain.services.placement_algebra import (
    adjust_after_remove_column,
    adjust_after_remove_row,
    clamp_placement,
)

PlacementTransform = Callable[[Placement], Optional[Placement]]


def clamp_cols(cols: int) -> int:
    return max(MIN_COLS, min(MAX_COLS, cols))


def clamp_rows(rows: int) -> int:
    return max(MIN_ROWS, min(MAX_ROWS, rows))


def _repair_placements(
    state: LayoutState, viewport: Viewport, transform: PlacementTransform
) -> LayoutState:
    changed = False
    elements = []
    for element in state.elements:
        current = element.placement(viewport)
        if current is None:
            elements.append(element)
            continue
        updated = transform(current)
        if updated == current:
            elements.append(element)
            continue
        changed = True
        elements.append(element.with_placement(viewport, updated))
    if not changed:
        return state
    return state.with_elements(tuple(elements))


def set_cols(state: LayoutState, viewport: Viewport, cols: int) -> LayoutState:
    grid = state.grid_for(viewport)
    target = clamp_cols(cols)
    if target == grid.cols:
        return state
    resized = state.with_grid(viewport, GridDimensions(cols=target, rows=grid.rows))
    return _repair_placements(
        resized, viewport, lambda placement: clamp_placement(placement, target, grid.rows)
    )


def set_rows(state: LayoutState, viewport: Viewport, rows: int) -> LayoutState:
    grid = state.grid_for(viewport)
    target = clamp_rows(rows)
    if target == grid.rows:
        return state
    resized = state.with_grid(viewport, GridDimensions(cols=grid.cols, rows=target))
    return _repair_placements(
        resized, viewport, lambda placement: clamp_placement(placement, grid.cols, target)
    )


def add_row(state: LayoutState, viewport: Viewport) -> LayoutState:
    grid = state.grid_for(viewport)
    if grid.rows >= MAX_ROWS:
        return state
    # growing never invalidates a placement, no repair pass
    return state.with_grid(viewport, GridDimensions(cols=grid.cols, rows=grid.rows + 1))


def add_column(state: LayoutState, viewport: Viewport) -> LayoutState:
    grid = state.grid_for(viewport)
    if grid.cols >= MAX_COLS:
        return state
    return state.with_grid(viewport, GridDimensions(cols=grid.cols + 1, rows=grid.rows))


def remove_row(state: LayoutState, viewport: Viewport, row_index: int) -> LayoutState:
    """Delete the 1-based row, shifting or shrinking placements below and across it."""
    grid = state.grid_for(viewport)
    if grid.rows <= MIN_ROWS:
        return state
    new_rows = grid.rows - 1
    resized = state.with_grid(viewport, GridDimensions(cols=grid.cols, rows=new_rows))
    return _repair_placements(
        resized,
        viewport,
        lambda placement: adjust_after_remove_row(placement, row_index, new_rows),
    )


def remove_column(state: LayoutState, viewport: Viewport, col_index: int) -> LayoutState:
    """Delete the 1-based column, shifting or shrinking placements right of and across it."""
    grid = state.grid_for(viewport)
    if grid.cols <= MIN_COLS:
        return state
    new_cols = grid.cols - 1
    resized = state.with_grid(viewport, GridDimensions(cols=new_cols, rows=grid.rows))
    return _repair_placements(
        resized,
        viewport,
        lambda placement: adjust_after_remove_column(placement, col_index, new_cols),
    )
