from __future__ import annotations

from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import write_text_atomic
from domain.models import LayoutDocument
from domain.ports.repositories import LayoutRepository
from domain.services.layout_codec import decode_layout_document, encode_layout_document


class FileSystemLayoutRepository(LayoutRepository):
    def load(self, path: Path) -> LayoutDocument:
        return decode_layout_document(path.read_bytes())

    def save(self, document: LayoutDocument, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_text_atomic(path, encode_layout_document(document) + "\n")
