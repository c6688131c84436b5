from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Annotated, Any, cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import ORJSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.config import AppSettings, load_settings
from app.layout_wiring import build_layout_store
from domain.services.layout_actions import EditorAction
from domain.services.layout_store import ImportFailure, LayoutStore

logger = logging.getLogger(__name__)

ACTION_ADAPTER: TypeAdapter[EditorAction] = TypeAdapter(
    Annotated[EditorAction, Field(discriminator="type")]
)

EXPORT_FILENAME = "layout.json"


@dataclass(frozen=True)
class LayoutContext:
    settings: AppSettings
    store: LayoutStore
    lock: threading.Lock = field(default_factory=threading.Lock)


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.layout.title)
    app.state.context = LayoutContext(settings=settings, store=build_layout_store(settings))

    @app.get("/")
    def index() -> RedirectResponse:
        return RedirectResponse(url="/api/layout", status_code=307)

    @app.get("/api/layout")
    def api_layout(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        with context.lock:
            return ORJSONResponse(build_layout_payload(context.store))

    @app.post("/api/actions")
    async def api_dispatch_action(
        request: Request,
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        raw_bytes = await request.body()
        try:
            action = ACTION_ADAPTER.validate_json(raw_bytes)
        except PydanticValidationError as exc:
            logger.warning("Rejected layout action with %d error(s)", exc.error_count())
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        payload = await run_in_threadpool(dispatch_action, context, action)
        return ORJSONResponse(payload)

    @app.post("/api/import")
    async def api_import(
        request: Request,
        replace: bool = Query(default=False),
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        raw_bytes = await request.body()
        return await run_in_threadpool(import_layout, context, raw_bytes, replace)

    @app.get("/api/export")
    def api_export(
        download: bool = Query(default=False),
        context: LayoutContext = Depends(get_context),
    ) -> Response:
        with context.lock:
            content = context.store.export_json()
        headers = {}
        if download:
            headers["Content-Disposition"] = f'attachment; filename="{EXPORT_FILENAME}"'
        return Response(content=content, media_type="application/json", headers=headers)

    @app.get("/api/export/report", response_class=PlainTextResponse)
    def api_export_report(context: LayoutContext = Depends(get_context)) -> PlainTextResponse:
        with context.lock:
            return PlainTextResponse(context.store.export_report())

    @app.post("/api/reset")
    def api_reset(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        with context.lock:
            context.store.reset()
            return ORJSONResponse(build_layout_payload(context.store))

    return app


def dispatch_action(context: LayoutContext, action: EditorAction) -> dict[str, Any]:
    with context.lock:
        try:
            context.store.dispatch(action)
        except ValueError as exc:
            logger.warning("Rejected layout action %s: %s", action.type, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return build_layout_payload(context.store)


def import_layout(context: LayoutContext, raw_bytes: bytes, replace: bool) -> ORJSONResponse:
    with context.lock:
        if context.store.has_content() and not replace:
            raise HTTPException(
                status_code=409,
                detail="Layout has content; pass replace=true to overwrite it",
            )
        result = context.store.import_document(raw_bytes)
        if isinstance(result, ImportFailure):
            return ORJSONResponse(
                {"error": result.kind, "message": result.message},
                status_code=400,
            )
        return ORJSONResponse(build_layout_payload(context.store))


def get_context(request: Request) -> LayoutContext:
    return cast(LayoutContext, request.app.state.context)


def build_layout_payload(store: LayoutStore) -> dict[str, Any]:
    state = store.state
    return {
        "viewport": state.viewport.value,
        "has_content": store.has_content(),
        "document": store.export_document().to_dict(),
    }


app = create_app(load_settings())
