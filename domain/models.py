from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    StrictInt,
    ValidationInfo,
    field_validator,
)

LAYOUT_DOCUMENT_VERSION = 1

MIN_COLS = 1
MAX_COLS = 24
MIN_ROWS = 1
MAX_ROWS = 48

DESKTOP_CONTAINER_WIDTHS: Tuple[int, ...] = (12, 6, 4)
TABLET_CONTAINER_WIDTHS: Tuple[int, ...] = (8, 4)


class Viewport(str, Enum):
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"

    @property
    def label(self) -> str:
        return self.value.capitalize()


VIEWPORTS: Tuple[Viewport, ...] = (Viewport.DESKTOP, Viewport.TABLET, Viewport.MOBILE)


@dataclass(frozen=True)
class Placement:
    col: int
    row: int
    col_span: int = 1
    row_span: int = 1

    @property
    def end_col(self) -> int:
        return self.col + self.col_span - 1

    @property
    def end_row(self) -> int:
        return self.row + self.row_span - 1

    def to_dict(self) -> dict[str, int]:
        return {
            "col": self.col,
            "row": self.row,
            "colSpan": self.col_span,
            "rowSpan": self.row_span,
        }


@dataclass(frozen=True)
class GridDimensions:
    cols: int
    rows: int

    def fits(self, placement: Placement) -> bool:
        return (
            placement.col >= 1
            and placement.row >= 1
            and placement.end_col <= self.cols
            and placement.end_row <= self.rows
        )

    def to_dict(self) -> dict[str, int]:
        return {"cols": self.cols, "rows": self.rows}


DEFAULT_GRID: Mapping[Viewport, GridDimensions] = {
    Viewport.DESKTOP: GridDimensions(cols=6, rows=2),
    Viewport.TABLET: GridDimensions(cols=4, rows=2),
    Viewport.MOBILE: GridDimensions(cols=1, rows=2),
}


@dataclass(frozen=True)
class ViewportConfig:
    """Container widths in grid columns; mobile always spans the full width."""

    desktop_container_width: int = 12
    tablet_container_width: int = 8

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {
            "desktop": {"containerWidth": self.desktop_container_width},
            "tablet": {"containerWidth": self.tablet_container_width},
        }


@dataclass(frozen=True)
class Element:
    id: str
    description: str
    placements: Mapping[Viewport, Placement] = field(default_factory=dict)

    def placement(self, viewport: Viewport) -> Optional[Placement]:
        return self.placements.get(viewport)

    def with_placement(self, viewport: Viewport, placement: Optional[Placement]) -> Element:
        placements: Dict[Viewport, Placement] = dict(self.placements)
        if placement is None:
            placements.pop(viewport, None)
        else:
            placements[viewport] = placement
        return Element(id=self.id, description=self.description, placements=placements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "placements": {
                viewport.value: self.placements[viewport].to_dict()
                for viewport in VIEWPORTS
                if viewport in self.placements
            },
        }


@dataclass(frozen=True)
class LayoutState:
    viewport: Viewport = Viewport.DESKTOP
    viewport_config: ViewportConfig = ViewportConfig()
    grid: Mapping[Viewport, GridDimensions] = field(default_factory=lambda: dict(DEFAULT_GRID))
    elements: Tuple[Element, ...] = ()

    def grid_for(self, viewport: Viewport) -> GridDimensions:
        return self.grid[viewport]

    def with_grid(self, viewport: Viewport, dimensions: GridDimensions) -> LayoutState:
        grid = dict(self.grid)
        grid[viewport] = dimensions
        return LayoutState(
            viewport=self.viewport,
            viewport_config=self.viewport_config,
            grid=grid,
            elements=self.elements,
        )

    def with_elements(self, elements: Tuple[Element, ...]) -> LayoutState:
        return LayoutState(
            viewport=self.viewport,
            viewport_config=self.viewport_config,
            grid=self.grid,
            elements=elements,
        )

    def find_element(self, element_id: str) -> Optional[Element]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def element_ids(self) -> set[str]:
        return {element.id for element in self.elements}


@dataclass(frozen=True)
class LayoutDocument:
    viewport_config: ViewportConfig
    grid: Mapping[Viewport, GridDimensions]
    elements: Tuple[Element, ...]
    version: int = LAYOUT_DOCUMENT_VERSION

    @classmethod
    def from_state(cls, state: LayoutState) -> LayoutDocument:
        return cls(
            viewport_config=state.viewport_config,
            grid=dict(state.grid),
            elements=tuple(state.elements),
        )

    def to_state(self, viewport: Viewport = Viewport.DESKTOP) -> LayoutState:
        return LayoutState(
            viewport=viewport,
            viewport_config=self.viewport_config,
            grid=dict(self.grid),
            elements=tuple(self.elements),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "viewportConfig": self.viewport_config.to_dict(),
            "grid": {viewport.value: self.grid[viewport].to_dict() for viewport in VIEWPORTS},
            "elements": [element.to_dict() for element in self.elements],
        }



# Wire schema for imported layout documents. Field names follow the camelCase JSON format.


def _integral_float_to_int(value: Any) -> Any:
    # 6.0 counts as the integer 6
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WireInt = Annotated[StrictInt, BeforeValidator(_integral_float_to_int)]


class PlacementSchema(BaseModel):
    col: WireInt = Field(ge=1)
    row: WireInt = Field(ge=1)
    col_span: WireInt = Field(alias="colSpan", ge=1)
    row_span: WireInt = Field(alias="rowSpan", ge=1)

    def to_placement(self) -> Placement:
        return Placement(
            col=self.col, row=self.row, col_span=self.col_span, row_span=self.row_span
        )


class PlacementsSchema(BaseModel):
    desktop: Optional[PlacementSchema] = None
    tablet: Optional[PlacementSchema] = None
    mobile: Optional[PlacementSchema] = None

    def for_viewport(self, viewport: Viewport) -> Optional[PlacementSchema]:
        return getattr(self, viewport.value)


class ElementSchema(BaseModel):
    id: str
    description: str
    placements: PlacementsSchema

    def to_element(self) -> Element:
        placements: Dict[Viewport, Placement] = {}
        for viewport in VIEWPORTS:
            entry = self.placements.for_viewport(viewport)
            if entry is not None:
                placements[viewport] = entry.to_placement()
        return Element(id=self.id, description=self.description, placements=placements)


class DesktopContainerSchema(BaseModel):
    container_width: Literal[12, 6, 4] = Field(alias="containerWidth")


class TabletContainerSchema(BaseModel):
    container_width: Literal[8, 4] = Field(alias="containerWidth")


class ViewportConfigSchema(BaseModel):
    desktop: DesktopContainerSchema
    tablet: TabletContainerSchema

    def to_config(self) -> ViewportConfig:
        return ViewportConfig(
            desktop_container_width=self.desktop.container_width,
            tablet_container_width=self.tablet.container_width,
        )


class GridDimensionsSchema(BaseModel):
    cols: WireInt = Field(ge=MIN_COLS, le=MAX_COLS)
    rows: WireInt = Field(ge=MIN_ROWS, le=MAX_ROWS)

    def to_dimensions(self) -> GridDimensions:
        return GridDimensions(cols=self.cols, rows=self.rows)


class GridSchema(BaseModel):
    desktop: GridDimensionsSchema
    tablet: GridDimensionsSchema
    mobile: GridDimensionsSchema

    def for_viewport(self, viewport: Viewport) -> GridDimensionsSchema:
        return getattr(self, viewport.value)


class LayoutDocumentSchema(BaseModel):
    version: Literal[1]
    viewport_config: ViewportConfigSchema = Field(alias="viewportConfig")
    grid: GridSchema
    elements: List[ElementSchema]

    @field_validator("elements", mode="after")
    @classmethod
    def ensure_unique_element_ids(cls, elements: List[ElementSchema]) -> List[ElementSchema]:
        seen: set[str] = set()
        for element in elements:
            if element.id in seen:
                msg = f"Duplicate element id: {element.id}"
                raise ValueError(msg)
            seen.add(element.id)
        return elements

    @field_validator("elements", mode="after")
    @classmethod
    def ensure_placements_fit_grid(
        cls, elements: List[ElementSchema], info: ValidationInfo
    ) -> List[ElementSchema]:
        grid: Optional[GridSchema] = info.data.get("grid")
        if grid is None:
            return elements
        overflowing: List[str] = []
        for index, element in enumerate(elements):
            for viewport in VIEWPORTS:
                entry = element.placements.for_viewport(viewport)
                dimensions = grid.for_viewport(viewport).to_dimensions()
                if entry is None or dimensions.fits(entry.to_placement()):
                    continue
                overflowing.append(
                    f"elements[{index}].placements.{viewport.value} exceeds the "
                    f"{viewport.value} grid of {dimensions.cols} columns × {dimensions.rows} rows"
                )
        if overflowing:
            raise ValueError("; ".join(overflowing))
        return elements

    def to_document(self) -> LayoutDocument:
        return LayoutDocument(
            viewport_config=self.viewport_config.to_config(),
            grid={
                viewport: self.grid.for_viewport(viewport).to_dimensions()
                for viewport in VIEWPORTS
            },
            elements=tuple(element.to_element() for element in self.elements),
            version=self.version,
        )
