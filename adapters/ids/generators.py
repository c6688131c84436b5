from __future__ import annotations

import itertools
import uuid

from domain.ports.ids import ElementIdGenerator

DEFAULT_ID_PREFIX = "el"


class UuidElementIdGenerator(ElementIdGenerator):
    def __init__(self, prefix: str = DEFAULT_ID_PREFIX) -> None:
        self.prefix = prefix

    def next_id(self) -> str:
        return f"{self.prefix}-{uuid.uuid4().hex[:12]}"


class SequentialElementIdGenerator(ElementIdGenerator):
    """Deterministic ids (el-1, el-2, ...); handy for fixtures and demos."""

    def __init__(self, prefix: str = DEFAULT_ID_PREFIX, start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
