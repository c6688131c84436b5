from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence, Tuple, Union

from pydantic import ValidationError

from domain.models import LayoutDocument, LayoutDocumentSchema


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


@dataclass(frozen=True)
class ValidationSuccess:
    document: LayoutDocument
    ok: Literal[True] = True


@dataclass(frozen=True)
class ValidationFailure:
    issues: Tuple[ValidationIssue, ...]
    ok: Literal[False] = False

    @property
    def message(self) -> str:
        return "; ".join(str(issue) for issue in self.issues)


ValidationResult = Union[ValidationSuccess, ValidationFailure]


def validate_layout_document(payload: Any) -> ValidationResult:
    """Check a decoded JSON value against the layout document schema.

    Every violation pydantic reports becomes one issue with a dotted path such as
    ``grid.desktop.cols`` or ``elements[0].placements.tablet``.
    """
    try:
        schema = LayoutDocumentSchema.model_validate(payload)
    except ValidationError as exc:
        return ValidationFailure(issues=tuple(_issue_from_error(error) for error in exc.errors()))
    return ValidationSuccess(document=schema.to_document())


def _issue_from_error(error: Mapping[str, Any]) -> ValidationIssue:
    return ValidationIssue(path=_format_path(error["loc"]), message=error["msg"])


def _format_path(loc: Sequence[Union[int, str]]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path
