from __future__ import annotations

from app.config import AppSettings
from domain.services.layout_store import LayoutStore


def build_layout_store(settings: AppSettings) -> LayoutStore:
    layout = settings.layout
    return LayoutStore(
        id_generator=layout.build_id_generator(),
        initial_state=layout.initial_state(),
    )
