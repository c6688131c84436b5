from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BeforeValidator

from domain.models import (
    DESKTOP_CONTAINER_WIDTHS,
    TABLET_CONTAINER_WIDTHS,
    LayoutDocument,
    LayoutState,
    Placement,
    Viewport,
    ViewportConfig,
)
from domain.services import element_registry, grid_dimensions

logger = logging.getLogger(__name__)

DesktopContainerWidth = Literal[12, 6, 4]
TabletContainerWidth = Literal[8, 4]

# Placements arrive in the document spelling (colSpan, rowSpan) or by field name.
PLACEMENT_WIRE_NAMES = {"colSpan": "col_span", "rowSpan": "row_span"}


def _placement_field_names(value: Any) -> Any:
    if isinstance(value, dict):
        return {PLACEMENT_WIRE_NAMES.get(key, key): item for key, item in value.items()}
    return value


WirePlacement = Annotated[Optional[Placement], BeforeValidator(_placement_field_names)]


@dataclass(frozen=True)
class SetViewport:
    viewport: Viewport
    type: Literal["set_viewport"] = "set_viewport"


@dataclass(frozen=True)
class SetDesktopContainerWidth:
    width: DesktopContainerWidth
    type: Literal["set_desktop_container_width"] = "set_desktop_container_width"


@dataclass(frozen=True)
class SetTabletContainerWidth:
    width: TabletContainerWidth
    type: Literal["set_tablet_container_width"] = "set_tablet_container_width"


@dataclass(frozen=True)
class SetGridCols:
    cols: int
    viewport: Optional[Viewport] = None
    type: Literal["set_grid_cols"] = "set_grid_cols"


@dataclass(frozen=True)
class SetGridRows:
    rows: int
    viewport: Optional[Viewport] = None
    type: Literal["set_grid_rows"] = "set_grid_rows"


@dataclass(frozen=True)
class AddRow:
    viewport: Optional[Viewport] = None
    type: Literal["add_row"] = "add_row"


@dataclass(frozen=True)
class RemoveRow:
    index: int
    viewport: Optional[Viewport] = None
    type: Literal["remove_row"] = "remove_row"


@dataclass(frozen=True)
class AddColumn:
    viewport: Optional[Viewport] = None
    type: Literal["add_column"] = "add_column"


@dataclass(frozen=True)
class RemoveColumn:
    index: int
    viewport: Optional[Viewport] = None
    type: Literal["remove_column"] = "remove_column"


@dataclass(frozen=True)
class AddElement:
    description: str
    element_id: Optional[str] = None
    type: Literal["add_element"] = "add_element"


@dataclass(frozen=True)
class RemoveElement:
    element_id: str
    type: Literal["remove_element"] = "remove_element"


@dataclass(frozen=True)
class UpdateElementDescription:
    element_id: str
    description: str
    type: Literal["update_element_description"] = "update_element_description"


@dataclass(frozen=True)
class SetPlacement:
    element_id: str
    viewport: Viewport
    placement: WirePlacement = None
    type: Literal["set_placement"] = "set_placement"


@dataclass(frozen=True)
class MovePlacement:
    element_id: str
    viewport: Viewport
    col: int
    row: int
    type: Literal["move_placement"] = "move_placement"


@dataclass(frozen=True)
class ResizePlacement:
    element_id: str
    viewport: Viewport
    col_span: int
    row_span: int
    type: Literal["resize_placement"] = "resize_placement"


@dataclass(frozen=True)
class ResizePlacementToCell:
    element_id: str
    viewport: Viewport
    end_col: int
    end_row: int
    type: Literal["resize_placement_to_cell"] = "resize_placement_to_cell"


@dataclass(frozen=True)
class ReplaceLayout:
    document: LayoutDocument
    type: Literal["replace_layout"] = "replace_layout"


@dataclass(frozen=True)
class ResetLayout:
    initial: LayoutState
    type: Literal["reset_layout"] = "reset_layout"


LayoutAction = Union[
    SetViewport,
    SetDesktopContainerWidth,
    SetTabletContainerWidth,
    SetGridCols,
    SetGridRows,
    AddRow,
    RemoveRow,
    AddColumn,
    RemoveColumn,
    AddElement,
    RemoveElement,
    UpdateElementDescription,
    SetPlacement,
    MovePlacement,
    ResizePlacement,
    ResizePlacementToCell,
    ReplaceLayout,
    ResetLayout,
]

# Actions a remote caller may send; replace/reset go through dedicated entry points.
EditorAction = Union[
    SetViewport,
    SetDesktopContainerWidth,
    SetTabletContainerWidth,
    SetGridCols,
    SetGridRows,
    AddRow,
    RemoveRow,
    AddColumn,
    RemoveColumn,
    AddElement,
    RemoveElement,
    UpdateElementDescription,
    SetPlacement,
    MovePlacement,
    ResizePlacement,
    ResizePlacementToCell,
]


def _target(state: LayoutState, viewport: Optional[Viewport]) -> Viewport:
    return state.viewport if viewport is None else viewport


def _with_viewport_config(state: LayoutState, config: ViewportConfig) -> LayoutState:
    if config == state.viewport_config:
        return state
    return LayoutState(
        viewport=state.viewport,
        viewport_config=config,
        grid=state.grid,
        elements=state.elements,
    )


def apply_action(state: LayoutState, action: LayoutAction) -> LayoutState:
    """Pure reducer: return the snapshot that results from applying one action."""
    if isinstance(action, SetViewport):
        if action.viewport == state.viewport:
            return state
        return LayoutState(
            viewport=action.viewport,
            viewport_config=state.viewport_config,
            grid=state.grid,
            elements=state.elements,
        )
    if isinstance(action, SetDesktopContainerWidth):
        if action.width not in DESKTOP_CONTAINER_WIDTHS:
            logger.warning("Ignoring unsupported desktop container width %r", action.width)
            return state
        return _with_viewport_config(
            state,
            ViewportConfig(
                desktop_container_width=action.width,
                tablet_container_width=state.viewport_config.tablet_container_width,
            ),
        )
    if isinstance(action, SetTabletContainerWidth):
        if action.width not in TABLET_CONTAINER_WIDTHS:
            logger.warning("Ignoring unsupported tablet container width %r", action.width)
            return state
        return _with_viewport_config(
            state,
            ViewportConfig(
                desktop_container_width=state.viewport_config.desktop_container_width,
                tablet_container_width=action.width,
            ),
        )
    if isinstance(action, SetGridCols):
        return grid_dimensions.set_cols(state, _target(state, action.viewport), action.cols)
    if isinstance(action, SetGridRows):
        return grid_dimensions.set_rows(state, _target(state, action.viewport), action.rows)
    if isinstance(action, AddRow):
        return grid_dimensions.add_row(state, _target(state, action.viewport))
    if isinstance(action, RemoveRow):
        return grid_dimensions.remove_row(state, _target(state, action.viewport), action.index)
    if isinstance(action, AddColumn):
        return grid_dimensions.add_column(state, _target(state, action.viewport))
    if isinstance(action, RemoveColumn):
        return grid_dimensions.remove_column(state, _target(state, action.viewport), action.index)
    if isinstance(action, AddElement):
        if action.element_id is None:
            msg = "AddElement needs an element_id before it reaches the reducer"
            raise ValueError(msg)
        return element_registry.add_element(state, action.description, action.element_id)
    if isinstance(action, RemoveElement):
        return element_registry.remove_element(state, action.element_id)
    if isinstance(action, UpdateElementDescription):
        return element_registry.update_description(state, action.element_id, action.description)
    if isinstance(action, SetPlacement):
        return element_registry.set_placement(
            state, action.element_id, action.viewport, action.placement
        )
    if isinstance(action, MovePlacement):
        return element_registry.move_placement(
            state, action.element_id, action.viewport, action.col, action.row
        )
    if isinstance(action, ResizePlacement):
        return element_registry.resize_placement(
            state, action.element_id, action.viewport, action.col_span, action.row_span
        )
    if isinstance(action, ResizePlacementToCell):
        return element_registry.resize_placement_to_cell(
            state, action.element_id, action.viewport, action.end_col, action.end_row
        )
    if isinstance(action, ReplaceLayout):
        return action.document.to_state(viewport=state.viewport)
    if isinstance(action, ResetLayout):
        return action.initial
    msg = f"Unsupported layout action: {action!r}"
    raise TypeError(msg)
