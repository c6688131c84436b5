from __future__ import annotations

from typing import Protocol


class ElementIdGenerator(Protocol):
    def next_id(self) -> str: ...
