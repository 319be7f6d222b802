"""
Tests for the FastAPI tool surface.

The DI container is patched so no Fireflies credentials or network
access are needed.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api_service.src.main import app, main
from services.tool_dispatcher import ToolResult
from shared_utils.error_handler import (
    InvalidParamsError,
    MethodNotFoundError,
    UnauthorizedError,
)


@pytest.fixture()
def api_client():
    return TestClient(app)


@pytest.fixture()
def dispatcher():
    """Patch the container so the endpoint sees a mock dispatcher."""
    mock_dispatcher = MagicMock()
    container = MagicMock()
    container.get_tool_dispatcher.return_value = mock_dispatcher
    with patch("api_service.src.main.get_di_container", return_value=container):
        yield mock_dispatcher


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestHealth:
    def test_healthy(self, api_client) -> None:
        response = api_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "search_transcripts" in body["tools"]


class TestListTools:
    def test_schemas_advertised(self, api_client) -> None:
        response = api_client.get("/api/tools")
        assert response.status_code == 200
        tools = {t["name"]: t for t in response.json()["tools"]}
        assert set(tools) == {
            "get_transcripts",
            "get_transcript_details",
            "search_transcripts",
            "generate_summary",
        }
        assert tools["search_transcripts"]["inputSchema"]["required"] == ["query"]


# ---------------------------------------------------------------------------
# Tool calls
# ---------------------------------------------------------------------------


class TestCallTool:
    def test_success(self, api_client, dispatcher) -> None:
        dispatcher.invoke.return_value = ToolResult(content=["[]"])

        response = api_client.post("/api/tools/get_transcripts", json={"limit": 5})

        assert response.status_code == 200
        assert response.json() == {"content": ["[]"], "text": "[]", "recovered_from": None}
        dispatcher.invoke.assert_called_once_with("get_transcripts", {"limit": 5})

    def test_missing_body_means_empty_arguments(self, api_client, dispatcher) -> None:
        dispatcher.invoke.return_value = ToolResult(content=["[]"])

        api_client.post("/api/tools/get_transcripts")

        dispatcher.invoke.assert_called_once_with("get_transcripts", {})

    def test_recovered_summary_reported(self, api_client, dispatcher) -> None:
        dispatcher.invoke.return_value = ToolResult(
            content=["No summary is available for transcript t1."],
            recovered_from="InvalidParams",
        )

        body = api_client.post("/api/tools/generate_summary", json={"transcript_id": "t1"}).json()

        assert body["recovered_from"] == "InvalidParams"

    @pytest.mark.parametrize(
        "error, status_code, kind",
        [
            (MethodNotFoundError("nope"), 404, "MethodNotFound"),
            (InvalidParamsError("query parameter is required"), 400, "InvalidParams"),
            (UnauthorizedError(), 401, "Unauthorized"),
        ],
    )
    def test_tool_error_mapped(self, api_client, dispatcher, error, status_code, kind) -> None:
        dispatcher.invoke.side_effect = error

        response = api_client.post("/api/tools/search_transcripts", json={})

        assert response.status_code == status_code
        assert response.json()["error"]["kind"] == kind
        assert response.json()["error"]["message"] == error.message

    def test_unexpected_exception_is_500(self, api_client, dispatcher) -> None:
        dispatcher.invoke.side_effect = RuntimeError("boom")

        response = api_client.post("/api/tools/get_transcripts", json={})

        assert response.status_code == 500
        assert response.json()["error"]["kind"] == "Internal"


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


class TestMain:
    @patch("api_service.src.main.uvicorn.run")
    @patch("api_service.src.main.configure_logging")
    @patch("api_service.src.main.load_settings_or_none", return_value=None)
    def test_exits_without_api_key(self, _load, _configure, mock_run, capsys) -> None:
        assert main() == 1
        assert "FIREFLIES_API_KEY" in capsys.readouterr().err
        mock_run.assert_not_called()

    @patch("api_service.src.main.uvicorn.run")
    @patch("api_service.src.main.configure_logging")
    @patch("api_service.src.main.load_settings_or_none")
    def test_binds_configured_host_and_port(self, mock_load, _configure, mock_run) -> None:
        mock_load.return_value = MagicMock(
            api_host="0.0.0.0", api_port=9000, log_level="INFO", environment="production"
        )

        assert main() == 0

        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        assert kwargs["log_level"] == "info"
