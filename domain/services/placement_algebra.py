from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from domain.models import Placement


def clamp_placement(placement: Placement, cols: int, rows: int) -> Optional[Placement]:
    """Shrink spans so the placement fits a cols x rows grid.

    Returns None when the anchor cell itself is outside the grid; callers treat
    that as "clear the placement". Valid input comes back unchanged.
    """
    if placement.col < 1 or placement.row < 1:
        return None
    col_span = max(1, min(placement.col_span, cols - placement.col + 1))
    row_span = max(1, min(placement.row_span, rows - placement.row + 1))
    if placement.col + col_span - 1 > cols or placement.row + row_span - 1 > rows:
        return None
    if col_span == placement.col_span and row_span == placement.row_span:
        return placement
    return replace(placement, col_span=col_span, row_span=row_span)


def _adjust_span_after_removal(
    start: int, span: int, removed: int, new_count: int
) -> Optional[Tuple[int, int]]:
    end = start + span - 1
    if end < removed:
        next_start, next_span = start, span
    elif start > removed:
        next_start, next_span = start - 1, span
    elif start == removed:
        if span <= 1:
            return None
        next_start, next_span = start, span - 1
    else:
        # removed line lies strictly inside the span
        next_start, next_span = start, span - 1
    if next_start < 1 or next_start + next_span - 1 > new_count:
        return None
    return next_start, next_span


def adjust_after_remove_row(
    placement: Optional[Placement], removed_row: int, new_rows: int
) -> Optional[Placement]:
    if placement is None:
        return None
    adjusted = _adjust_span_after_removal(placement.row, placement.row_span, removed_row, new_rows)
    if adjusted is None:
        return None
    row, row_span = adjusted
    if row == placement.row and row_span == placement.row_span:
        return placement
    return replace(placement, row=row, row_span=row_span)


def adjust_after_remove_column(
    placement: Optional[Placement], removed_col: int, new_cols: int
) -> Optional[Placement]:
    if placement is None:
        return None
    adjusted = _adjust_span_after_removal(placement.col, placement.col_span, removed_col, new_cols)
    if adjusted is None:
        return None
    col, col_span = adjusted
    if col == placement.col and col_span == placement.col_span:
        return placement
    return replace(placement, col=col, col_span=col_span)


def move_to(current: Placement, col: int, row: int, cols: int, rows: int) -> Placement:
    """Relocate the anchor, keeping as much of the span as fits; invalid moves keep current."""
    candidate = Placement(
        col=max(1, col),
        row=max(1, row),
        col_span=max(1, min(current.col_span, cols - col + 1)),
        row_span=max(1, min(current.row_span, rows - row + 1)),
    )
    clamped = clamp_placement(candidate, cols, rows)
    return current if clamped is None else clamped


def resize_to(current: Placement, col_span: int, row_span: int, cols: int, rows: int) -> Placement:
    candidate = replace(
        current,
        col_span=max(1, min(col_span, cols - current.col + 1)),
        row_span=max(1, min(row_span, rows - current.row + 1)),
    )
    clamped = clamp_placement(candidate, cols, rows)
    return current if clamped is None else clamped


def resize_to_cell(
    current: Placement, end_col: int, end_row: int, cols: int, rows: int
) -> Placement:
    """Resize so the bottom-right corner lands on (end_col, end_row), as a drag handle does."""
    last_col = max(current.col, min(cols, end_col))
    last_row = max(current.row, min(rows, end_row))
    return resize_to(
        current,
        last_col - current.col + 1,
        last_row - current.row + 1,
        cols,
        rows,
    )
