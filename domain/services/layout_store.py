from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Union

from domain.models import LayoutDocument, LayoutState, Placement, Viewport
from domain.ports.ids import ElementIdGenerator
from domain.services.layout_actions import (
    AddColumn,
    AddElement,
    AddRow,
    LayoutAction,
    MovePlacement,
    RemoveColumn,
    RemoveElement,
    RemoveRow,
    ReplaceLayout,
    ResetLayout,
    ResizePlacement,
    ResizePlacementToCell,
    SetDesktopContainerWidth,
    SetGridCols,
    SetGridRows,
    SetPlacement,
    SetTabletContainerWidth,
    SetViewport,
    UpdateElementDescription,
    apply_action,
)
from domain.services.layout_codec import (
    LayoutImportError,
    decode_layout_document,
    export_document,
    export_json,
    export_report,
)

logger = logging.getLogger(__name__)

LayoutListener = Callable[[LayoutState], None]

# Bounded so a misbehaving generator cannot spin forever.
MAX_ID_ATTEMPTS = 1000


@dataclass(frozen=True)
class ImportSuccess:
    document: LayoutDocument
    ok: bool = True


@dataclass(frozen=True)
class ImportFailure:
    error: LayoutImportError
    ok: bool = False

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message


ImportResult = Union[ImportSuccess, ImportFailure]


class LayoutStore:
    """Owns the current layout snapshot and routes every mutation through dispatch.

    Each dispatch reads the snapshot, applies one pure transform and commits the
    result; listeners only ever see complete snapshots.
    """

    def __init__(
        self,
        id_generator: ElementIdGenerator,
        initial_state: Optional[LayoutState] = None,
    ) -> None:
        self._id_generator = id_generator
        self._initial = initial_state or LayoutState()
        self._state = self._initial
        self._listeners: List[LayoutListener] = []

    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def initial_state(self) -> LayoutState:
        return self._initial

    def subscribe(self, listener: LayoutListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: LayoutAction) -> LayoutState:
        if isinstance(action, AddElement) and action.element_id is None:
            action = replace(action, element_id=self._fresh_element_id())
        previous = self._state
        current = apply_action(previous, action)
        if current is previous:
            return current
        self._state = current
        logger.debug("Applied %s", action.type)
        for listener in list(self._listeners):
            listener(current)
        return current

    def has_content(self) -> bool:
        """True once the layout holds elements or any grid differs from the initial one."""
        return bool(self._state.elements) or dict(self._state.grid) != dict(self._initial.grid)

    def reset(self) -> LayoutState:
        logger.info("Resetting layout to its initial state")
        return self.dispatch(ResetLayout(initial=self._initial))

    def _fresh_element_id(self) -> str:
        taken = self._state.element_ids()
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_generator.next_id()
            if candidate not in taken:
                return candidate
        msg = f"Could not generate a unique element id after {MAX_ID_ATTEMPTS} attempts"
        raise RuntimeError(msg)

    # Action surface

    def set_viewport(self, viewport: Viewport) -> None:
        self.dispatch(SetViewport(viewport=viewport))

    def set_desktop_container_width(self, width: int) -> None:
        self.dispatch(SetDesktopContainerWidth(width=width))  # type: ignore[arg-type]

    def set_tablet_container_width(self, width: int) -> None:
        self.dispatch(SetTabletContainerWidth(width=width))  # type: ignore[arg-type]

    def set_grid_cols(self, cols: int, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(SetGridCols(cols=cols, viewport=viewport))

    def set_grid_rows(self, rows: int, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(SetGridRows(rows=rows, viewport=viewport))

    def add_row(self, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(AddRow(viewport=viewport))

    def remove_row(self, index: int, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(RemoveRow(index=index, viewport=viewport))

    def add_column(self, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(AddColumn(viewport=viewport))

    def remove_column(self, index: int, viewport: Optional[Viewport] = None) -> None:
        self.dispatch(RemoveColumn(index=index, viewport=viewport))

    def add_element(self, description: str) -> str:
        element_id = self._fresh_element_id()
        self.dispatch(AddElement(description=description, element_id=element_id))
        return element_id

    def remove_element(self, element_id: str) -> None:
        self.dispatch(RemoveElement(element_id=element_id))

    def update_element_description(self, element_id: str, description: str) -> None:
        self.dispatch(UpdateElementDescription(element_id=element_id, description=description))

    def set_placement(
        self, element_id: str, viewport: Viewport, placement: Optional[Placement]
    ) -> None:
        self.dispatch(SetPlacement(element_id=element_id, viewport=viewport, placement=placement))

    def move_placement(self, element_id: str, viewport: Viewport, col: int, row: int) -> None:
        self.dispatch(MovePlacement(element_id=element_id, viewport=viewport, col=col, row=row))

    def resize_placement(
        self, element_id: str, viewport: Viewport, col_span: int, row_span: int
    ) -> None:
        self.dispatch(
            ResizePlacement(
                element_id=element_id, viewport=viewport, col_span=col_span, row_span=row_span
            )
        )

    def resize_placement_to_cell(
        self, element_id: str, viewport: Viewport, end_col: int, end_row: int
    ) -> None:
        self.dispatch(
            ResizePlacementToCell(
                element_id=element_id, viewport=viewport, end_col=end_col, end_row=end_row
            )
        )

    def import_document(self, text: Union[str, bytes]) -> ImportResult:
        """Replace the whole layout with a document; the state is untouched on failure."""
        try:
            document = decode_layout_document(text)
        except LayoutImportError as exc:
            logger.warning("Layout import rejected (%s): %s", exc.kind, exc.message)
            return ImportFailure(error=exc)
        self.dispatch(ReplaceLayout(document=document))
        logger.info("Imported layout with %d elements", len(document.elements))
        return ImportSuccess(document=document)

    def export_document(self) -> LayoutDocument:
        return export_document(self._state)

    def export_json(self) -> str:
        return export_json(self._state)

    def export_report(self) -> str:
        return export_report(self._state)
