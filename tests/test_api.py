"""
HTTP-level tests for the analysis and chat endpoints
"""
import json

import pytest
from fastapi.testclient import TestClient

from govdoc_backend.api import INTERNAL_ERROR_MESSAGE, create_app
from govdoc_backend.config import Settings
from govdoc_backend.routes.analysis import MISSING_BACKEND_MESSAGE
from govdoc_backend.services.chat_service import CHAT_APOLOGY
from govdoc_backend.utils.json_repair import PARSE_ERROR_MESSAGE

from conftest import VALID_RESULT, FakeBackend, encode, leftover_artifacts, make_corrupt_table_docx, make_docx


@pytest.mark.parametrize("body", [
    {"files": []},
    {},
    {"files": "not-a-list"},
    {"files": None},
])
def test_analyze_without_files_is_rejected(client, fake_backend, body):
    response = client.post("/api/analyze", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "File data is required"}
    assert fake_backend.structured_calls == []


def test_analyze_returns_result_with_explicit_nulls(client, fake_backend):
    body = {"files": [
        {"base64Data": encode(b"%PDF-1.7"), "mimeType": "application/pdf"},
        {"base64Data": encode(make_docx("DOCX-MARKER 과태료")), "mimeType": "application/msword"},
    ]}

    response = client.post("/api/analyze", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["documentType"] == VALID_RESULT["documentType"]
    assert data["sentiment"] == "URGENT"
    assert data["actions"][1] == {
        "description": "지방소득세 납부",
        "deadline": None,
        "amount": None,
        "recipient": None,
        "priority": "MEDIUM",
    }

    parts = fake_backend.structured_calls[0]["parts"]
    assert len(parts) == 3
    assert "DOCX-MARKER 과태료" in parts[2].content


def test_hwp_failure_fails_whole_request(client, fake_backend, scratch_dir):
    body = {"files": [
        {"base64Data": encode(b"%PDF-1.7"), "mimeType": "application/pdf"},
        {"base64Data": encode(b"FAIL"), "mimeType": "application/x-hwp"},
    ]}

    response = client.post("/api/analyze", json=body)

    assert response.status_code == 500
    assert "HWP 변환 오류" in response.json()["error"]
    assert fake_backend.structured_calls == []
    assert leftover_artifacts(scratch_dir) == []


def test_unparsable_model_output_is_500(settings):
    client = TestClient(create_app(backend=FakeBackend(structured_text="I'm sorry."), settings=settings))

    response = client.post("/api/analyze", json={"files": [{"base64Data": encode(b"hi"), "mimeType": "text/plain"}]})

    assert response.status_code == 500
    assert response.json() == {"error": PARSE_ERROR_MESSAGE}


def test_backend_failure_is_500(settings):
    backend = FakeBackend(structured_error=RuntimeError("connection reset"))
    client = TestClient(create_app(backend=backend, settings=settings))

    response = client.post("/api/analyze", json={"files": [{"base64Data": encode(b"hi"), "mimeType": "text/plain"}]})

    assert response.status_code == 500
    assert "connection reset" in response.json()["error"]


def test_invalid_base64_is_400(client):
    response = client.post("/api/analyze", json={"files": [{"base64Data": "abc", "mimeType": "text/plain"}]})

    assert response.status_code == 400
    assert "base64" in response.json()["error"]


def test_analyze_without_backend_is_500(settings):
    keyless = Settings(gemini_api_key=None, temp_dir=settings.temp_dir, static_dir=settings.static_dir)
    client = TestClient(create_app(backend=None, settings=keyless))

    response = client.post("/api/analyze", json={"files": [{"base64Data": encode(b"hi"), "mimeType": "text/plain"}]})

    assert response.status_code == 500
    assert response.json() == {"error": MISSING_BACKEND_MESSAGE}


def test_chat_returns_text(client, fake_backend):
    body = {
        "history": [
            {"role": "user", "parts": [{"text": "이게 뭔가요?"}]},
            {"role": "model", "parts": [{"text": "납부고지서입니다."}]},
        ],
        "message": "언제까지 내야 하나요?",
        "documentContext": json.dumps(VALID_RESULT, ensure_ascii=False),
    }

    response = client.post("/api/chat", json=body)

    assert response.status_code == 200
    assert response.json() == {"text": fake_backend.chat_text}
    call = fake_backend.chat_calls[0]
    assert [turn.text for turn in call["history"]] == ["이게 뭔가요?", "납부고지서입니다."]
    assert "종합소득세 납부고지서" in call["system_instruction"]


def test_chat_backend_failure_returns_apology(settings):
    backend = FakeBackend(chat_error=RuntimeError("timeout"))
    client = TestClient(create_app(backend=backend, settings=settings))

    response = client.post("/api/chat", json={"history": [], "message": "질문", "documentContext": "{}"})

    assert response.status_code == 200
    assert response.json() == {"text": CHAT_APOLOGY}


def test_chat_without_message_is_400(client, fake_backend):
    response = client.post("/api/chat", json={"history": []})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}
    assert fake_backend.chat_calls == []


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["backend_configured"] is True


def test_frontend_fallback_serves_index(settings, fake_backend, tmp_path):
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html>SPA</html>", encoding="utf-8")
    (dist / "assets" / "app.js").write_text("console.log(1)", encoding="utf-8")
    client = TestClient(create_app(backend=fake_backend, settings=settings))

    assert client.get("/assets/app.js").text == "console.log(1)"
    assert "SPA" in client.get("/documents/123").text
    assert client.get("/api/health").json()["status"] == "ok"


def test_no_frontend_build_means_404(client):
    assert client.get("/somewhere").status_code == 404


def test_corrupt_docx_table_is_json_500(client, fake_backend):
    body = {"files": [{"base64Data": encode(make_corrupt_table_docx()), "mimeType": "application/msword"}]}

    response = client.post("/api/analyze", json=body)

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json()["error"].startswith("DOCX 변환 오류")
    assert fake_backend.structured_calls == []


class ExplodingNormalizer:
    def normalize_all(self, files):
        raise RuntimeError("disk unavailable")


def test_unexpected_error_still_renders_error_body(fake_backend, settings):
    app = create_app(backend=fake_backend, settings=settings)
    app.state.normalizer = ExplodingNormalizer()
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/api/analyze", json={"files": [{"base64Data": encode(b"hi"), "mimeType": "text/plain"}]})

    assert response.status_code == 500
    assert response.json() == {"error": f"{INTERNAL_ERROR_MESSAGE}: disk unavailable"}
