from __future__ import annotations

from typing import Callable, Optional

from domain.models import Element, LayoutState, Placement, Viewport
from domain.services.placement_algebra import (
    clamp_placement,
    move_to,
    resize_to,
    resize_to_cell,
)


def _update_element(
    state: LayoutState, element_id: str, update: Callable[[Element], Element]
) -> LayoutState:
    changed = False
    elements = []
    for element in state.elements:
        if element.id != element_id:
            elements.append(element)
            continue
        updated = update(element)
        changed = changed or updated != element
        elements.append(updated)
    if not changed:
        return state
    return state.with_elements(tuple(elements))


def add_element(state: LayoutState, description: str, element_id: str) -> LayoutState:
    if element_id in state.element_ids():
        msg = f"Duplicate element id: {element_id}"
        raise ValueError(msg)
    element = Element(id=element_id, description=description, placements={})
    return state.with_elements((*state.elements, element))


def remove_element(state: LayoutState, element_id: str) -> LayoutState:
    remaining = tuple(element for element in state.elements if element.id != element_id)
    if len(remaining) == len(state.elements):
        return state
    return state.with_elements(remaining)


def update_description(state: LayoutState, element_id: str, description: str) -> LayoutState:
    # Empty results are stored as-is; rejecting them is up to the caller.
    trimmed = description.strip()
    return _update_element(
        state,
        element_id,
        lambda element: Element(
            id=element.id, description=trimmed, placements=element.placements
        ),
    )


def set_placement(
    state: LayoutState,
    element_id: str,
    viewport: Viewport,
    placement: Optional[Placement],
) -> LayoutState:
    grid = state.grid_for(viewport)
    normalized = None if placement is None else clamp_placement(placement, grid.cols, grid.rows)
    return _update_element(
        state, element_id, lambda element: element.with_placement(viewport, normalized)
    )


def _edit_existing_placement(
    state: LayoutState,
    element_id: str,
    viewport: Viewport,
    edit: Callable[[Placement], Placement],
) -> LayoutState:
    def update(element: Element) -> Element:
        current = element.placement(viewport)
        if current is None:
            return element
        updated = edit(current)
        if updated == current:
            return element
        return element.with_placement(viewport, updated)

    return _update_element(state, element_id, update)


def move_placement(
    state: LayoutState, element_id: str, viewport: Viewport, col: int, row: int
) -> LayoutState:
    grid = state.grid_for(viewport)
    return _edit_existing_placement(
        state,
        element_id,
        viewport,
        lambda current: move_to(current, col, row, grid.cols, grid.rows),
    )


def resize_placement(
    state: LayoutState, element_id: str, viewport: Viewport, col_span: int, row_span: int
) -> LayoutState:
    grid = state.grid_for(viewport)
    return _edit_existing_placement(
        state,
        element_id,
        viewport,
        lambda current: resize_to(current, col_span, row_span, grid.cols, grid.rows),
    )


def resize_placement_to_cell(
    state: LayoutState, element_id: str, viewport: Viewport, end_col: int, end_row: int
) -> LayoutState:
    grid = state.grid_for(viewport)
    return _edit_existing_placement(
        state,
        element_id,
        viewport,
        lambda current: resize_to_cell(current, end_col, end_row, grid.cols, grid.rows),
    )
