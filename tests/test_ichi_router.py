"""End-to-end tests for the ICHI HTTP API."""

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.config import settings


class TestSearchEndpoint:
    def test_search_leaf_entry(self, client: TestClient) -> None:
        response = client.get("/ichi/search", params={"q": "append"})
        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "append"
        assert body["count"] == 1
        assert body["results"] == [{"Title": "Removal of appendix", "Code": "KBO.JB.AE"}]

    def test_default_depth_from_settings(self, client: TestClient) -> None:
        body = client.get("/ichi/search", params={"q": "append"}).json()
        assert body["depth_in_kind"] == settings.search_default_depth == 1

    def test_missing_q(self, client: TestClient) -> None:
        response = client.get("/ichi/search")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing query parameter q"}

    def test_blank_q(self, client: TestClient) -> None:
        response = client.get("/ichi/search", params={"q": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing query parameter q"}

    def test_limit_clamped(self, client: TestClient) -> None:
        body = client.get("/ichi/search", params={"q": "therapy", "limit": 5000}).json()
        assert body["limit"] == 1000
        assert body["count"] == 2

    def test_wildcards_are_literal(self, client: TestClient) -> None:
        body = client.get("/ichi/search", params={"q": "100%"}).json()
        assert [r["Code"] for r in body["results"]] == ["AAA.AA.AA"]

    def test_depth_parameter(self, client: TestClient) -> None:
        body = client.get("/ichi/search", params={"q": "appendix", "depth": 2}).json()
        assert body["depth_in_kind"] == 2
        assert body["results"] == [{"Title": "Interventions on appendix", "Code": "KBO.JB"}]

    def test_storage_failure(self, client: TestClient) -> None:
        error = OperationalError("SELECT", {}, Exception("disk I/O error"))
        with patch("app.repositories.ichi_repository.ICHIRepository.search_title", side_effect=error):
            response = client.get("/ichi/search", params={"q": "append"})
        assert response.status_code == 500
        assert response.json()["error"] == "Search failed"
        assert "disk I/O error" in response.json()["details"]


class TestGetByCodeEndpoint:
    def test_found(self, client: TestClient) -> None:
        response = client.get("/ichi/IAA.BA.BC")
        assert response.status_code == 200
        assert response.json() == {
            "Code": "IAA.BA.BC",
            "BlockId": "IA",
            "Title": "Imaging, x_ray guided",
            "DisplayTitle": "Imaging, x_ray guided",
            "ClassKind": "category",
            "DepthInKind": 1,
        }

    def test_display_title_strips_padding(self, client: TestClient) -> None:
        body = client.get("/ichi/KBO.JB.AE").json()
        assert body["Title"] == "- - Removal of appendix"
        assert body["DisplayTitle"] == "Removal of appendix"

    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/ichi/NOPE.01")
        assert response.status_code == 404
        assert response.json() == {"error": "Code not found"}


class TestListEndpoint:
    def test_defaults(self, client: TestClient) -> None:
        body = client.get("/ichi").json()
        assert body["limit"] == 100
        assert body["offset"] == 0
        assert body["sort"] == "Code"
        assert body["count"] == 8
        assert body["results"][0]["Code"] == "AAA.AA.AA"

    def test_bounds_clamped(self, client: TestClient) -> None:
        body = client.get("/ichi", params={"limit": 99999, "offset": -5}).json()
        assert body["limit"] == 1000
        assert body["offset"] == 0

    def test_unknown_sort_falls_back_to_code(self, client: TestClient) -> None:
        by_code = client.get("/ichi", params={"sort": "Code"}).json()
        by_other = client.get("/ichi", params={"sort": "Title DESC"}).json()
        assert by_other["sort"] == "Code"
        assert by_other["results"] == by_code["results"]

    def test_sort_by_title(self, client: TestClient) -> None:
        body = client.get("/ichi", params={"sort": "Title", "limit": 2}).json()
        assert [r["Title"] for r in body["results"]] == ["- - Drainage of abscess of skin", "- - Removal of appendix"]


class TestHealthEndpoint:
    def test_health(self, client: TestClient) -> None:
        with patch("app.routers.health.check_ichi_loaded", return_value=True):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "ichi_loaded": True}
