"""Tests for the FastAPI web application."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from brainindex.service import BrainIndexService
from brainindex.web.app import app as default_app
from brainindex.web.app import create_app

WIDGET = {"name": "Widget API", "description": "Creates widgets", "tags": ["widget", "create"]}


@pytest.fixture
def client(service: BrainIndexService) -> TestClient:
    return TestClient(create_app(service, initialize=False))


class TestCreateApp:
    """Tests for the app factory."""

    def test_module_level_app(self) -> None:
        """Exposes a default app with its own service."""
        assert isinstance(default_app, FastAPI)
        assert isinstance(default_app.state.service, BrainIndexService)

    def test_startup_initializes_index(self, service, write_record) -> None:
        """Builds the index when the server starts."""
        write_record("apis", "widget.json", WIDGET)

        with TestClient(create_app(service)):
            assert service.ready is True

    def test_startup_without_initialize(self, service) -> None:
        """Leaves the index cold when initialize is off."""
        with TestClient(create_app(service, initialize=False)):
            assert service.ready is False


class TestSearchEndpoint:
    """Tests for POST /api/brain/search."""

    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}])
    def test_missing_query(self, client, body) -> None:
        """Returns 400 for missing or blank queries."""
        response = client.post("/api/brain/search", json=body)

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "missing_query"

    def test_indexed_results(self, client, write_record) -> None:
        """Returns indexed results when the index has hits."""
        write_record("apis", "widget.json", WIDGET)

        response = client.post("/api/brain/search", json={"query": "widget"})

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["search_method"] == "indexed"
        assert data["keywords_extracted"] == ["widget"]
        assert data["indexed_results"] == [
            {"category": "apis", "file": "widget.json", "matches": 1, "relevance": 100.0}
        ]

    def test_falls_back_to_full_scan(self, client, write_record) -> None:
        """Scans files when the index has no hits."""
        path = write_record("apis", "widget.json", WIDGET)

        response = client.post("/api/brain/search", json={"query": "widg"})

        data = response.json()
        assert data["search_method"] == "full_scan"
        assert data["counts"] == {"apis": 1, "docs": 0, "concepts": 0, "total": 1}
        assert data["results"]["apis"][0]["_source"] == str(path)

    def test_use_index_false(self, client, write_record) -> None:
        """Skips the index when asked to."""
        write_record("apis", "widget.json", WIDGET)

        response = client.post(
            "/api/brain/search", json={"query": "widget", "use_index": False, "limits": {"apis": 1}}
        )

        assert response.json()["search_method"] == "full_scan"
        assert response.json()["counts"]["apis"] == 1

    def test_unknown_category(self, client) -> None:
        """Returns 400 for an unknown category."""
        response = client.post("/api/brain/search", json={"query": "widget", "category": "videos"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_request"

    def test_unexpected_error(self, service) -> None:
        """Returns 500 when the search blows up."""
        broken = MagicMock(wraps=service)
        broken.search_indexed.side_effect = RuntimeError("disk on fire")
        client = TestClient(create_app(broken, initialize=False))

        response = client.post("/api/brain/search", json={"query": "widget"})

        assert response.status_code == 500
        assert response.json()["detail"] == {"error": "search_failed", "message": "disk on fire"}


class TestIndexEndpoints:
    """Tests for the index management endpoints."""

    def test_index_stats_not_ready(self, client) -> None:
        """Reports an uninitialized index."""
        response = client.get("/api/brain/index/stats")

        assert response.status_code == 200
        assert response.json()["index"] == {"ready": False, "message": "Index not initialized"}

    def test_rebuild(self, client, write_record) -> None:
        """Rebuilds and reports counts."""
        write_record("apis", "widget.json", WIDGET)

        response = client.post("/api/brain/index/rebuild")

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["indexed_files"] == 1
        assert result["total_files"] == 1
        stats = client.get("/api/brain/index/stats").json()["index"]
        assert stats["categories"]["apis"]["file_list"] == ["widget.json"]

    def test_initialize(self, client) -> None:
        """Initializes an empty corpus."""
        response = client.post("/api/brain/index/initialize")

        assert response.status_code == 200
        assert response.json()["message"] == "Index initialized successfully"
        assert response.json()["result"]["indexed_files"] == 0

    def test_rebuild_failure(self, service) -> None:
        """Returns 500 when the rebuild fails."""
        broken = MagicMock(wraps=service)
        broken.rebuild.side_effect = RuntimeError("boom")
        client = TestClient(create_app(broken, initialize=False))

        response = client.post("/api/brain/index/rebuild")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "rebuild_failed"

    def test_freshness(self, client) -> None:
        """Reports freshness once the index exists."""
        assert client.get("/api/brain/index/freshness").json()["fresh"] is False

        client.post("/api/brain/index/rebuild")
        data = client.get("/api/brain/index/freshness", params={"max_age_ms": 3_600_000}).json()

        assert data["fresh"] is True
        assert data["max_age_ms"] == 3_600_000
        assert set(data["ages"]) == {"apis", "docs", "concepts"}


class TestInfoEndpoints:
    """Tests for corpus stats and info."""

    def test_brain_stats_ready(self, client) -> None:
        """Reports ready when every category directory exists."""
        data = client.get("/api/brain/stats").json()

        assert data["brain"]["status"] == "ready"
        assert data["brain"]["storage"]["apis"]["files"] == 0

    def test_brain_stats_partial(self, tmp_path: Path) -> None:
        """Reports partial when a directory is missing."""
        from brainindex.config import AppConfig

        (tmp_path / "apis").mkdir()
        client = TestClient(create_app(BrainIndexService(AppConfig(root=tmp_path)), initialize=False))

        assert client.get("/api/brain/stats").json()["brain"]["status"] == "partial"

    def test_info(self, client) -> None:
        """Lists the available endpoints."""
        data = client.get("/api/brain/info").json()

        assert data["ok"] is True
        assert data["endpoints"]["search"] == "POST /api/brain/search"
