from __future__ import annotations

from collections.abc import Callable
from typing import Any

import orjson
import pytest
from fastapi.testclient import TestClient

from app.config import AppSettings
from app import web_main
from app.web_main import create_app
from domain.models import Viewport
from tests.helpers.layout_fixtures import load_layout_text


@pytest.fixture
def client(app_settings: AppSettings) -> TestClient:
    return TestClient(create_app(app_settings))


def _dispatch(client: TestClient, action: dict[str, Any]) -> dict[str, Any]:
    response = client.post("/api/actions", json=action)
    assert response.status_code == 200, response.text
    return response.json()


def test_index_redirects_to_layout(client: TestClient) -> None:
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/api/layout"


def test_initial_layout_payload(client: TestClient) -> None:
    payload = client.get("/api/layout").json()

    assert payload["viewport"] == "desktop"
    assert payload["has_content"] is False
    assert payload["document"]["grid"]["desktop"] == {"cols": 6, "rows": 2}
    assert payload["document"]["elements"] == []


def test_initial_layout_follows_settings(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    settings = app_settings_factory(
        default_viewport=Viewport.MOBILE,
        desktop_container_width=6,
    )
    client = TestClient(create_app(settings))

    payload = client.get("/api/layout").json()

    assert payload["viewport"] == "mobile"
    assert payload["document"]["viewportConfig"]["desktop"] == {"containerWidth": 6}


def test_actions_edit_layout(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero"})
    _dispatch(
        client,
        {
            "type": "set_placement",
            "element_id": "el-1",
            "viewport": "desktop",
            "placement": {"col": 2, "row": 1, "col_span": 9, "row_span": 1},
        },
    )
    _dispatch(client, {"type": "set_viewport", "viewport": "tablet"})
    payload = _dispatch(client, {"type": "add_column"})

    assert payload["viewport"] == "tablet"
    assert payload["has_content"] is True
    document = payload["document"]
    assert document["grid"]["tablet"] == {"cols": 5, "rows": 2}
    assert document["elements"] == [
        {
            "id": "el-1",
            "description": "Hero",
            "placements": {"desktop": {"col": 2, "row": 1, "colSpan": 5, "rowSpan": 1}},
        }
    ]


def test_set_placement_accepts_document_field_names(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero"})

    payload = _dispatch(
        client,
        {
            "type": "set_placement",
            "element_id": "el-1",
            "viewport": "desktop",
            "placement": {"col": 2, "row": 1, "colSpan": 2, "rowSpan": 1},
        },
    )

    placements = payload["document"]["elements"][0]["placements"]
    assert placements == {"desktop": {"col": 2, "row": 1, "colSpan": 2, "rowSpan": 1}}


def test_remove_column_repairs_placements(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero"})
    _dispatch(
        client,
        {
            "type": "set_placement",
            "element_id": "el-1",
            "viewport": "desktop",
            "placement": {"col": 6, "row": 1},
        },
    )

    payload = _dispatch(client, {"type": "remove_column", "index": 6})

    assert payload["document"]["grid"]["desktop"]["cols"] == 5
    assert payload["document"]["elements"][0]["placements"] == {}


@pytest.mark.parametrize(
    "action",
    [
        {"type": "explode"},
        {"type": "set_grid_cols"},
        {"type": "set_desktop_container_width", "width": 5},
        {"type": "set_viewport", "viewport": "watch"},
        {"type": "replace_layout", "document": {}},
    ],
)
def test_invalid_actions_are_rejected(client: TestClient, action: dict[str, Any]) -> None:
    response = client.post("/api/actions", json=action)

    assert response.status_code == 422
    assert client.get("/api/layout").json()["has_content"] is False


def test_duplicate_explicit_element_id_is_rejected(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero", "element_id": "hero"})

    response = client.post(
        "/api/actions",
        json={"type": "add_element", "description": "Copy", "element_id": "hero"},
    )

    assert response.status_code == 422
    assert "Duplicate element id" in response.json()["detail"]
    assert len(client.get("/api/layout").json()["document"]["elements"]) == 1


def test_import_into_empty_layout(client: TestClient) -> None:
    response = client.post("/api/import", content=load_layout_text("landing_page.json"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["has_content"] is True
    assert len(payload["document"]["elements"]) == 4


def test_import_over_content_needs_replace_flag(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Draft"})
    text = load_layout_text("landing_page.json")

    conflict = client.post("/api/import", content=text)
    replaced = client.post("/api/import", params={"replace": "true"}, content=text)

    assert conflict.status_code == 409
    assert replaced.status_code == 200
    ids = [element["id"] for element in replaced.json()["document"]["elements"]]
    assert "el-1" not in ids


@pytest.mark.parametrize(
    ("body", "error"),
    [
        ("{not json", "parse"),
        ('{"version": 2}', "validation"),
    ],
)
def test_import_failures_report_error_kind(client: TestClient, body: str, error: str) -> None:
    response = client.post("/api/import", content=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == error
    assert payload["message"]
    assert client.get("/api/layout").json()["document"]["elements"] == []


def test_export_json_and_download_header(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero"})

    inline = client.get("/api/export")
    download = client.get("/api/export", params={"download": "true"})

    assert inline.status_code == 200
    assert inline.headers["content-type"].startswith("application/json")
    assert "content-disposition" not in inline.headers
    assert orjson.loads(inline.content)["elements"][0]["description"] == "Hero"
    assert download.headers["content-disposition"] == 'attachment; filename="layout.json"'


def test_export_report_is_plain_text(client: TestClient) -> None:
    response = client.get("/api/export/report")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("# Tailwind Grid Layout\n")


def test_reset_restores_initial_layout(client: TestClient) -> None:
    _dispatch(client, {"type": "add_element", "description": "Hero"})
    _dispatch(client, {"type": "add_row"})

    payload = client.post("/api/reset").json()

    assert payload["has_content"] is False
    assert payload["document"]["grid"]["desktop"] == {"cols": 6, "rows": 2}
    assert payload["document"]["elements"] == []


def test_store_updates_run_in_the_threadpool(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[str] = []
    run_in_threadpool = web_main.run_in_threadpool

    async def recording_run_in_threadpool(func: Callable[..., Any], *args: Any) -> Any:
        calls.append(func.__name__)
        return await run_in_threadpool(func, *args)

    monkeypatch.setattr(web_main, "run_in_threadpool", recording_run_in_threadpool)

    _dispatch(client, {"type": "add_element", "description": "Hero"})
    response = client.post(
        "/api/import", params={"replace": "true"}, content=load_layout_text("landing_page.json")
    )

    assert response.status_code == 200
    assert calls == ["dispatch_action", "import_layout"]
