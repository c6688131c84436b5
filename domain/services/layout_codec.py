from __future__ import annotations

from typing import List, Tuple, Union

import orjson

from domain.models import VIEWPORTS, LayoutDocument, LayoutState
from domain.services.validate_layout_document import (
    ValidationFailure,
    ValidationIssue,
    validate_layout_document,
)

REPORT_TITLE = "# Tailwind Grid Layout"


class LayoutImportError(ValueError):
    kind = "import"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(LayoutImportError):
    kind = "parse"


class ValidationError(LayoutImportError):
    kind = "validation"

    def __init__(self, message: str, issues: Tuple[ValidationIssue, ...] = ()) -> None:
        super().__init__(message)
        self.issues = issues


def export_document(state: LayoutState) -> LayoutDocument:
    return LayoutDocument.from_state(state)


def encode_layout_document(document: LayoutDocument) -> str:
    return orjson.dumps(document.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8")


def export_json(state: LayoutState) -> str:
    return encode_layout_document(export_document(state))


def decode_layout_document(text: Union[str, bytes]) -> LayoutDocument:
    """Parse and validate a layout document; raises ParseError or ValidationError."""
    if not text.strip():
        raise ParseError("Layout document is empty")
    try:
        # bytes go straight to orjson, which rejects invalid UTF-8
        payload = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise ParseError(str(exc)) from exc
    result = validate_layout_document(payload)
    if isinstance(result, ValidationFailure):
        raise ValidationError(result.message, result.issues)
    return result.document


def export_report(state: LayoutState) -> str:
    lines: List[str] = [REPORT_TITLE, "", "## Grid dimensions"]
    for viewport in VIEWPORTS:
        grid = state.grid_for(viewport)
        lines.append(f"- **{viewport.label}**: {grid.cols} columns × {grid.rows} rows")
    lines.append("")
    lines.append("## Container width (in 12-col context)")
    config = state.viewport_config
    lines.append(f"- **Desktop**: {config.desktop_container_width}/12 columns")
    lines.append(f"- **Tablet**: {config.tablet_container_width}/8 columns")
    lines.append("- **Mobile**: full width")
    lines.append("")
    for viewport in VIEWPORTS:
        lines.append(f"## {viewport.label}")
        placed = [
            (element, placement)
            for element in state.elements
            if (placement := element.placement(viewport)) is not None
        ]
        if not placed:
            lines.append("No elements placed.")
        for element, placement in placed:
            lines.append(
                f"- **{element.description}**: col {placement.col}, row {placement.row}, "
                f"col-span {placement.col_span}, row-span {placement.row_span}"
            )
        lines.append("")
    return "\n".join(lines)
