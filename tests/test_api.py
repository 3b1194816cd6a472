"""
HTTP API Tests

Exercises the FastAPI application through the Starlette test client.
"""

from __future__ import annotations

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from conftest import sentence, word
from ltl_api.app import APIConfig, create_app, get_app
from ltl_api.routes_convert import router


@pytest.fixture
def client():
    return TestClient(create_app())


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "1.0.0"}
    assert get_app() is client.app


def test_validate(client, flat_conllu):
    data = client.post("/api/v1/validate", json={"content": flat_conllu}).json()
    assert data["is_valid"] is True
    assert data["validated_sentences"] == 2

    data = client.post("/api/v1/validate", json={"content": word("1", "a")}).json()
    assert data["is_valid"] is False
    assert data["error_count"] == 2


def test_parse(client, flat_conllu):
    data = client.post("/api/v1/parse", json={"content": flat_conllu}).json()
    assert data["sentence_count"] == 2
    assert data["token_count"] == 4
    assert len(data["sentences"]) == 2


def test_parse_strict_rejects_short_lines(client):
    text = sentence("1", "a", word("1", "a"), "2\tb\tb")
    response = client.post("/api/v1/parse", json={"content": text, "strict": True})
    assert response.status_code == 422
    assert response.json()["error"] is True


def test_metadata(client, flat_conllu):
    data = client.post("/api/v1/metadata", json={"content": flat_conllu}).json()
    assert data["doc_title"] == "Test Doc"
    assert data["doc_id"] == ""


def test_convert(client, flat_conllu):
    response = client.post("/api/v1/convert", json={
        "content": flat_conllu,
        "metadata": {"doc_title": "Commedia"},
        "options": {"include_morphological_layer": False},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["metadata"]["doc_title"] == "Commedia"
    assert data["metadata"]["corpus_ref"] == "http://example.org/corpus"
    assert data["sentences_converted"] == 2
    assert "<http://example.org/corpus/Commedia>" in data["turtle"]
    assert "oa:Annotation" not in data["turtle"]


def test_convert_uses_configured_labels(client, paragraph_conllu, runtime_config):
    runtime_config.set_setting("conversion", "paragraph_label", "Capitolo")
    data = client.post("/api/v1/convert", json={"content": paragraph_conllu}).json()
    assert "Capitolo_1" in data["turtle"]


def test_convert_without_tokens(client):
    response = client.post("/api/v1/convert", json={"content": "# docTitle = Empty\n"})
    assert response.status_code == 422
    assert response.json() == {
        "error": True,
        "message": "Conversion error: Document contains no sentences with tokens",
        "status_code": 422,
    }


def test_convert_validation_errors(client):
    text = sentence("1", "a", word("1", "a", head="x"))
    response = client.post("/api/v1/convert", json={"content": text, "validate_input": True})
    assert response.status_code == 422
    assert "HEAD must be integer or 0" in response.json()["message"]


def test_content_size_limit(flat_conllu):
    client = TestClient(create_app(APIConfig(max_upload_bytes=16)))
    response = client.post("/api/v1/validate", json={"content": flat_conllu})
    assert response.status_code == 413


def test_missing_content(client):
    assert client.post("/api/v1/convert", json={}).status_code == 422


def test_config_from_runtime_settings(runtime_config):
    runtime_config.set_setting("server", "port", 9100)
    config = APIConfig.from_runtime_config(runtime_config, host="0.0.0.0", port=None)
    assert config.port == 9100
    assert config.host == "0.0.0.0"
    assert config.max_upload_bytes == 10 * 1024 * 1024


def test_conversion_routes_run_in_worker_threads():
    endpoints = [route.endpoint for route in router.routes if isinstance(route, APIRoute)]
    assert len(endpoints) == 4
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
