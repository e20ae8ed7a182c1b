"""Tests for POST /api/vibe and GET /api/settings."""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
from fastapi.testclient import TestClient

from vibepilot.schemas.deezer import DeezerTrack
from vibepilot.services.deezer import RemoteServiceError
from vibepilot.services.vibe.interpreter import SchemaValidationError
from vibepilot.services.vibe.params import SearchParameters
from vibepilot.services.vibe.service import VibeResult


def _vibe_result() -> VibeResult:
    return VibeResult(
        explanation="Artist first, then genre",
        params=SearchParameters(
            query="glaive hyperpop",
            bpm_min=130,
            explanation="Artist first, then genre",
        ),
        tracks=[
            DeezerTrack(
                id=1234567,
                title="astrid",
                duration=142,
                rank=500000,
                preview="https://cdns-preview.dzcdn.net/stream/astrid.mp3",
                artist={"name": "glaive"},
                album={"title": "cypress grove", "cover_medium": "https://e-cdns/cover.jpg"},
            )
        ],
    )


class TestVibeEndpoint:
    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_200_with_tracks_and_metrics(self, mock_generate, _llm, client: TestClient):
        mock_generate.return_value = _vibe_result()

        response = client.post("/api/vibe", json={"prompt": "hyperpop songs like glaive"})

        assert response.status_code == 200
        data = response.json()
        assert data["explanation"] == "Artist first, then genre"
        assert data["params"]["query"] == "glaive hyperpop"
        assert data["params"]["bpm_min"] == 130
        assert data["params"]["bpm_max"] is None
        assert data["tracks"][0]["id"] == 1234567
        assert data["tracks"][0]["artist"]["name"] == "glaive"
        assert data["metrics"]["popularity"] == 50.0
        assert data["fallback_query"] is None
        mock_generate.assert_awaited_once_with("hyperpop songs like glaive")

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_works_signed_in(self, mock_generate, _llm, client: TestClient, auth_headers: dict):
        mock_generate.return_value = _vibe_result()

        response = client.post("/api/vibe", json={"prompt": "chill"}, headers=auth_headers)

        assert response.status_code == 200

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_empty_track_list_is_200(self, mock_generate, _llm, client: TestClient):
        mock_generate.return_value = VibeResult(
            explanation="Nothing matched",
            params=SearchParameters(query="", explanation="Nothing matched"),
        )

        response = client.post("/api/vibe", json={"prompt": "asdfgh"})

        assert response.status_code == 200
        assert response.json()["tracks"] == []

    def test_rejects_short_prompt(self, client: TestClient):
        response = client.post("/api/vibe", json={"prompt": "a"})
        assert response.status_code == 422

    def test_rejects_whitespace_prompt(self, client: TestClient):
        response = client.post("/api/vibe", json={"prompt": "    "})
        assert response.status_code == 422

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_prompt_is_stripped(self, mock_generate, _llm, client: TestClient):
        mock_generate.return_value = _vibe_result()

        client.post("/api/vibe", json={"prompt": "  chill vibes  "})

        mock_generate.assert_awaited_once_with("chill vibes")

    @patch("vibepilot.api.vibe.is_llm_available", return_value=False)
    def test_503_without_llm(self, _llm, client: TestClient):
        response = client.post("/api/vibe", json={"prompt": "chill vibes"})
        assert response.status_code == 503

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_schema_error_is_502(self, mock_generate, _llm, client: TestClient):
        mock_generate.side_effect = SchemaValidationError("missing query")

        response = client.post("/api/vibe", json={"prompt": "chill vibes"})

        assert response.status_code == 502
        assert "rephrasing" in response.json()["detail"]

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_remote_error_is_502_with_status(self, mock_generate, _llm, client: TestClient):
        mock_generate.side_effect = RemoteServiceError(503, "Service Unavailable")

        response = client.post("/api/vibe", json={"prompt": "chill vibes"})

        assert response.status_code == 502
        assert "503" in response.json()["detail"]

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.services.deezer.search_tracks", new_callable=AsyncMock)
    @patch("vibepilot.services.vibe.service.interpret_vibe", new_callable=AsyncMock)
    def test_deezer_timeout_is_502(self, mock_interpret, mock_search, _llm, client: TestClient):
        mock_interpret.return_value = SearchParameters(query="synthwave", explanation="")
        mock_search.side_effect = httpx.ReadTimeout("timed out")

        response = client.post("/api/vibe", json={"prompt": "late night synthwave"})

        assert response.status_code == 502
        assert response.json()["detail"] == "Deezer search is unavailable"

    @patch("vibepilot.api.vibe.is_llm_available", return_value=True)
    @patch("vibepilot.api.vibe.generate_vibe", new_callable=AsyncMock)
    def test_anthropic_error_is_502(self, mock_generate, _llm, client: TestClient):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        mock_generate.side_effect = anthropic.APIConnectionError(request=request)

        response = client.post("/api/vibe", json={"prompt": "chill vibes"})

        assert response.status_code == 502


class TestPublicSettings:
    @patch("vibepilot.api.is_llm_available", return_value=True)
    @patch("vibepilot.api.get_settings")
    def test_read_only_mode(self, mock_settings, _llm, client: TestClient):
        settings = MagicMock()
        settings.is_deezer_oauth_configured = False
        mock_settings.return_value = settings

        response = client.get("/api/settings")

        assert response.status_code == 200
        assert response.json() == {"llm_available": True, "playlist_saving_enabled": False}

    @patch("vibepilot.api.is_llm_available", return_value=False)
    @patch("vibepilot.api.get_settings")
    def test_playlist_saving_enabled(self, mock_settings, _llm, client: TestClient):
        settings = MagicMock()
        settings.is_deezer_oauth_configured = True
        mock_settings.return_value = settings

        response = client.get("/api/settings")

        assert response.json() == {"llm_available": False, "playlist_saving_enabled": True}


class TestHealth:
    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/api/health").json() == {"status": "ok", "service": "api"}
