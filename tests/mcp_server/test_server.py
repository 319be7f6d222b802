"""
Tests for the MCP stdio server wiring.
"""

import json
from unittest.mock import MagicMock, patch

import anyio
import mcp.types as types
import pytest
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from domain.models import Transcript
from mcp_server.server import SERVER_NAME, build_server, main, to_mcp_error
from services.tool_dispatcher import TOOLS, ToolDispatcher
from services.transcript_service import TranscriptService
from shared_utils.constants import RpcErrorCode
from shared_utils.error_handler import (
    BackendTimeoutError,
    MethodNotFoundError,
    NotFoundError,
)
from shared_utils.logging_utils import NullLogger


@pytest.fixture()
def server(mock_source):
    service = TranscriptService(source=mock_source, list_timeout=None, logger=NullLogger())
    dispatcher = ToolDispatcher(transcript_service=service, logger=NullLogger())
    return build_server(dispatcher)


def _call(server, name, arguments=None):
    """Run one tools/call request through the server's registered handler."""
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return anyio.run(server.request_handlers[types.CallToolRequest], request)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestToMcpError:
    def test_method_not_found(self) -> None:
        err = to_mcp_error(MethodNotFoundError("nope"))
        assert isinstance(err, McpError)
        assert err.error.code == RpcErrorCode.METHOD_NOT_FOUND
        assert err.error.message == "Unknown tool: nope"
        assert err.error.data == {"kind": "MethodNotFound"}

    def test_not_found_is_invalid_params(self) -> None:
        err = to_mcp_error(NotFoundError("Transcript t1 not found"))
        assert err.error.code == RpcErrorCode.INVALID_PARAMS
        assert err.error.data["kind"] == "NotFound"

    def test_timeout_is_internal(self) -> None:
        err = to_mcp_error(BackendTimeoutError("Request timed out"))
        assert err.error.code == RpcErrorCode.INTERNAL_ERROR
        assert err.error.data["kind"] == "Timeout"

    def test_unclassified_exception_wrapped(self) -> None:
        err = to_mcp_error(ValueError("bad"))
        assert err.error.code == RpcErrorCode.INTERNAL_ERROR
        assert err.error.data["kind"] == "Internal"
        assert "bad" in err.error.message


# ---------------------------------------------------------------------------
# Server construction / entrypoint
# ---------------------------------------------------------------------------


class TestBuildServer:
    def test_returns_named_server(self) -> None:
        dispatcher = MagicMock()
        dispatcher.list_tools.return_value = TOOLS
        server = build_server(dispatcher, version="9.9.9")
        assert isinstance(server, Server)
        assert server.name == SERVER_NAME

    def test_lists_every_tool(self, server) -> None:
        handler = server.request_handlers[types.ListToolsRequest]
        result = anyio.run(handler, types.ListToolsRequest(method="tools/list"))
        assert [t.name for t in result.root.tools] == [t.name for t in TOOLS]


class TestCallToolRequest:
    def test_success_returns_text_blocks(self, server, mock_source) -> None:
        mock_source.fetch_transcripts.return_value = [Transcript(id="t-1", title="Sync")]

        result = _call(server, "get_transcripts", {"limit": 5})

        assert result.root.isError is False
        assert json.loads(result.root.content[0].text) == [{"id": "t-1", "title": "Sync"}]

    def test_unknown_tool_is_method_not_found(self, server) -> None:
        with pytest.raises(McpError) as exc_info:
            _call(server, "nope", {})
        assert exc_info.value.error.code == RpcErrorCode.METHOD_NOT_FOUND
        assert exc_info.value.error.data == {"kind": "MethodNotFound"}
        assert exc_info.value.error.message == "Unknown tool: nope"

    def test_missing_required_argument_is_invalid_params(self, server, mock_source) -> None:
        with pytest.raises(McpError) as exc_info:
            _call(server, "generate_summary", {})
        assert exc_info.value.error.code == RpcErrorCode.INVALID_PARAMS
        assert exc_info.value.error.data == {"kind": "InvalidParams"}
        assert exc_info.value.error.message == "transcript_id parameter is required"
        mock_source.fetch_summary.assert_not_called()

    def test_backend_not_found_keeps_kind(self, server, mock_source) -> None:
        mock_source.fetch_transcript.side_effect = NotFoundError("Transcript t-404 not found")
        with pytest.raises(McpError) as exc_info:
            _call(server, "get_transcript_details", {"transcript_id": "t-404"})
        assert exc_info.value.error.data == {"kind": "NotFound"}

    def test_unexpected_failure_is_internal(self, server, mock_source) -> None:
        mock_source.fetch_search_candidates.side_effect = RuntimeError("socket closed")
        with pytest.raises(McpError) as exc_info:
            _call(server, "search_transcripts", {"query": "roadmap"})
        assert exc_info.value.error.code == RpcErrorCode.INTERNAL_ERROR
        assert exc_info.value.error.data == {"kind": "Internal"}

    def test_missing_summary_is_a_normal_result(self, server, mock_source) -> None:
        mock_source.fetch_summary.return_value = Transcript(id="t-1")

        result = _call(server, "generate_summary", {"transcript_id": "t-1"})

        assert result.root.isError is False
        assert "t-1" in result.root.content[0].text


class TestMain:
    @patch("mcp_server.server.anyio.run")
    @patch("mcp_server.server.configure_logging")
    @patch("mcp_server.server.load_settings_or_none", return_value=None)
    def test_exits_without_api_key(self, _load, _configure, mock_run, capsys) -> None:
        assert main() == 1
        assert "FIREFLIES_API_KEY environment variable is required" in capsys.readouterr().err
        mock_run.assert_not_called()

    @patch("mcp_server.server.anyio.run")
    @patch("mcp_server.server.get_di_container")
    @patch("mcp_server.server.configure_logging")
    @patch("mcp_server.server.load_settings_or_none")
    def test_serves_when_configured(self, mock_load, _configure, mock_container, mock_run) -> None:
        mock_load.return_value = MagicMock(app_version="1.0.0")
        mock_container.return_value.get_tool_dispatcher.return_value.list_tools.return_value = TOOLS

        assert main() == 0
        mock_run.assert_called_once()

    @patch("mcp_server.server.anyio.run")
    @patch("mcp_server.server.get_di_container")
    @patch("mcp_server.server.configure_logging")
    @patch("mcp_server.server.load_settings_or_none")
    def test_fatal_error_exits_one(
        self, mock_load, _configure, mock_container, mock_run
    ) -> None:
        mock_load.return_value = MagicMock(app_version="1.0.0")
        mock_container.return_value.get_tool_dispatcher.side_effect = RuntimeError("configuration failed")

        assert main() == 1
        mock_run.assert_not_called()
