from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import LayoutDocument


class LayoutRepository(Protocol):
    def load(self, path: Path) -> LayoutDocument: ...

    def save(self, document: LayoutDocument, path: Path) -> None: ...
