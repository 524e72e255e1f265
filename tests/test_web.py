"""
Tests for the web API.
"""
import base64

import pytest
from fastapi.testclient import TestClient

from webpdf import __version__
from webpdf import web


@pytest.fixture
def client(monkeypatch, fake_extractor):
    monkeypatch.setattr(web, "ContentExtractor", fake_extractor)
    return TestClient(web.app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


def test_convert_returns_pdf_download(client, fake_extractor):
    response = client.post("/convert", data={"url": "example.com/post"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="my_post.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
    assert fake_extractor.requested[-1] == "https://example.com/post"


def test_convert_rejects_invalid_url(client):
    response = client.post("/convert", data={"url": "ftp://example.com/file"})
    assert response.status_code == 422


def test_convert_maps_extraction_failure_to_bad_gateway(monkeypatch, failing_extractor):
    monkeypatch.setattr(web, "ContentExtractor", failing_extractor)
    response = TestClient(web.app).post("/convert", data={"url": "https://example.com/missing"})

    assert response.status_code == 502
    assert "404" in response.json()["detail"]


def test_api_convert_returns_base64_pdf(client):
    response = client.post("/api/convert", json={"url": "https://example.com/post"})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["title"] == "My Post"
    assert body["metadata"]["author"] == "Jane Doe"
    assert body["page_count"] == 1
    assert body["filename"] == "my_post.pdf"
    assert base64.b64decode(body["pdf_base64"]).startswith(b"%PDF")


def test_api_convert_reports_failure(monkeypatch, failing_extractor):
    monkeypatch.setattr(web, "ContentExtractor", failing_extractor)
    response = TestClient(web.app).post("/api/convert", json={"url": "https://example.com/missing"})

    assert response.status_code == 502
    assert response.json()["success"] is False


def test_api_convert_validates_url(client):
    response = client.post("/api/convert", json={"url": "not a url"})
    assert response.status_code == 422
