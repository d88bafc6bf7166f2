# src/e2e/test_frontend_api_json.py

import io
import json

import fitz
import pytest

from namesearch.engine import Engine
from namesearch_frontend.web import app as flask_app


def _pdf() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Premabai resident\nJayram son of Ramlal", fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def client():
    import namesearch_frontend.web as webmod
    eng = Engine(mappings_dsn="memory://", fixes=())
    webmod._engine = eng
    try:
        yield flask_app.test_client(), eng
    finally:
        webmod._engine = None
        eng.shutdown()


@pytest.mark.e2e
def test_upload_then_search(client):
    c, eng = client
    rv = c.post("/api/document", data={"file": (io.BytesIO(_pdf()), "doc.pdf")},
                content_type="multipart/form-data")
    assert rv.status_code == 200
    assert rv.get_json() == {"row_count": 2}

    rv = c.get("/api/search?q=Jayram")
    data = rv.get_json()
    assert data["stage"] == "raw"
    assert [r["page"] for r in data["results"]] == [1]
    for key in ("page", "raw_text", "mapped_text", "normalized_text"):
        assert key in data["results"][0]


@pytest.mark.e2e
def test_raw_body_upload(client):
    c, eng = client
    rv = c.post("/api/document", data=_pdf(), content_type="application/pdf")
    assert rv.status_code == 200 and eng.row_count == 2


@pytest.mark.e2e
def test_bad_upload_reports_error_and_keeps_state(client):
    c, eng = client
    eng.load_rows([(1, "पममबरई निवासी")])
    rv = c.post("/api/document", data=b"not a pdf", content_type="application/pdf")
    assert rv.status_code == 400
    assert rv.get_json()["error"]
    st = c.get("/api/state").get_json()
    assert st["row_count"] == 1 and st["last_error"]


@pytest.mark.e2e
def test_teach_remove_and_suggest(client):
    c, eng = client
    eng.load_rows([(1, "पममबरई निवासी"), (2, "जयराम")])

    sugg = c.get("/api/suggest", query_string={"text": "प्रेमबाई निवासी"}).get_json()["suggestion"]
    assert sugg["garbled"] == "पममबरई निवासी" and sugg["page"] == 1

    rv = c.post("/api/mappings", json={"garbled": "पममबरई", "correct": "प्रेमबाई"})
    assert rv.get_json()["ok"] is True
    assert c.get("/api/mappings").get_json() == {"पममबरई": "प्रेमबाई"}
    data = c.get("/api/search", query_string={"q": "प्रेमबाई"}).get_json()
    assert data["stage"] in ("raw", "normalized")

    rv = c.delete("/api/mappings", json={"garbled": "पममबरई"})
    assert rv.get_json() == {"ok": True, "mappings": {}}
    rv = c.post("/api/mappings", json={"garbled": "", "correct": "x"})
    assert rv.get_json()["ok"] is False


@pytest.mark.e2e
def test_import_export(client):
    c, eng = client
    rv = c.post("/api/mappings/import", data=json.dumps({"जयररम": "जयराम"}, ensure_ascii=False))
    assert rv.get_json()["imported"] == 1
    assert json.loads(c.get("/api/mappings/export").get_data(as_text=True)) == {"जयररम": "जयराम"}
    assert c.post("/api/mappings/import", data="[1]").status_code == 400


@pytest.mark.e2e
def test_empty_query_returns_no_results(client):
    c, eng = client
    eng.load_rows([(1, "प्रेमबाई")])
    data = c.get("/api/search?q=").get_json()
    assert data["results"] == [] and data["stage"] == "none"
