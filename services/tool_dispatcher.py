"""
ToolDispatcher - named, schema-typed tools over TranscriptService.

Owns the tool registry (name, description, JSON input schema) and turns
service results into text payloads. Failures leave as ToolError so each
outer surface (MCP, HTTP) can map ``kind`` onto its own protocol.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from domain.models import SummaryFormat
from services.transcript_service import TranscriptService
from shared_utils.constants import LogScope, ToolName
from shared_utils.error_handler import MethodNotFoundError, SummaryUnavailableError, ToolError
from shared_utils.logging_utils import ContextualLogger
from shared_utils.validation import InputValidator


DEGRADED_NOTE = (
    "Note: the full transcript query timed out, so only id, title and date "
    "are included."
)

SUMMARY_UNAVAILABLE_TEXT = (
    "No summary is available for transcript {transcript_id}. Fireflies "
    "generates summaries once processing has finished; try again later or "
    "use get_transcript_details to read the transcript itself."
)


@dataclass(frozen=True)
class ToolDefinition:
    """A tool as advertised to callers."""

    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolResult:
    """Text payload returned by a tool call.

    ``recovered_from`` names the error kind that was rendered as text
    instead of being raised.
    """

    content: List[str] = field(default_factory=list)
    recovered_from: Optional[str] = None

    @property
    def text(self) -> str:
        return "\n\n".join(self.content)


TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name=ToolName.GET_TRANSCRIPTS.value,
        description="Retrieve a list of meeting transcripts with optional date filtering",
        input_schema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": "Maximum number of transcripts to return (default: 20)",
                },
                "from_date": {
                    "type": "string",
                    "description": "Start date in ISO format (YYYY-MM-DD)",
                },
                "to_date": {
                    "type": "string",
                    "description": "End date in ISO format (YYYY-MM-DD)",
                },
            },
        },
    ),
    ToolDefinition(
        name=ToolName.GET_TRANSCRIPT_DETAILS.value,
        description="Retrieve detailed information about a specific transcript, including sentences",
        input_schema={
            "type": "object",
            "properties": {
                "transcript_id": {
                    "type": "string",
                    "description": "ID of the transcript to retrieve",
                },
            },
            "required": ["transcript_id"],
        },
    ),
    ToolDefinition(
        name=ToolName.SEARCH_TRANSCRIPTS.value,
        description="Search recent transcripts by title, spoken text or keywords",
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to look for (case-insensitive)",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of transcripts to return (default: 10)",
                },
            },
            "required": ["query"],
        },
    ),
    ToolDefinition(
        name=ToolName.GENERATE_SUMMARY.value,
        description="Generate a summary of a meeting transcript",
        input_schema={
            "type": "object",
            "properties": {
                "transcript_id": {
                    "type": "string",
                    "description": "ID of the transcript to summarize",
                },
                "format": {
                    "type": "string",
                    "enum": [f.value for f in SummaryFormat],
                    "description": "Format of the summary (bullet_points or paragraph)",
                },
            },
            "required": ["transcript_id"],
        },
    ),
]


class ToolDispatcher:
    """Maps tool names onto TranscriptService calls."""

    def __init__(
        self,
        *,
        transcript_service: TranscriptService,
        logger: Optional[Any] = None,
    ) -> None:
        self._service = transcript_service
        self._logger = ContextualLogger(LogScope.DISPATCH, logger)
        self._handlers: Dict[str, Callable[[Dict[str, Any]], ToolResult]] = {
            ToolName.GET_TRANSCRIPTS.value: self._get_transcripts,
            ToolName.GET_TRANSCRIPT_DETAILS.value: self._get_transcript_details,
            ToolName.SEARCH_TRANSCRIPTS.value: self._search_transcripts,
            ToolName.GENERATE_SUMMARY.value: self._generate_summary,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_tools(self) -> List[ToolDefinition]:
        return list(TOOLS)

    def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Run one tool call.

        Args:
            name: Tool name.
            arguments: Tool arguments; ``None`` means no arguments.

        Returns:
            ToolResult with one or more text blocks.

        Raises:
            MethodNotFoundError: Unknown tool name.
            ToolError: Any classified failure from validation or the backend.
        """
        handler = self._handlers.get(name)
        if handler is None:
            self._logger.warning("tool_not_found", tool=name)
            raise MethodNotFoundError(name)

        arguments = arguments or {}
        self._logger.info("tool_invoked", tool=name, argument_keys=sorted(arguments))
        try:
            result = handler(arguments)
        except ToolError as exc:
            self._logger.error("tool_failed", tool=name, kind=exc.kind, error=exc.message)
            raise

        self._logger.info(
            "tool_completed",
            tool=name,
            blocks=len(result.content),
            recovered_from=result.recovered_from,
        )
        return result

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _get_transcripts(self, arguments: Dict[str, Any]) -> ToolResult:
        result = self._service.list_transcripts(
            limit=InputValidator.coerce_integral(arguments.get("limit")),
            from_date=InputValidator.validate_optional_date(arguments.get("from_date")),
            to_date=InputValidator.validate_optional_date(arguments.get("to_date")),
        )
        content = [_to_json([t.to_output() for t in result.transcripts])]
        if result.degraded:
            content.append(DEGRADED_NOTE)
        return ToolResult(content=content)

    def _get_transcript_details(self, arguments: Dict[str, Any]) -> ToolResult:
        transcript = self._service.get_transcript_details(arguments.get("transcript_id"))
        return ToolResult(content=[_to_json(transcript.to_output())])

    def _search_transcripts(self, arguments: Dict[str, Any]) -> ToolResult:
        transcripts = self._service.search_transcripts(
            arguments.get("query"),
            limit=arguments.get("limit"),
        )
        return ToolResult(content=[_to_json([t.to_output() for t in transcripts])])

    def _generate_summary(self, arguments: Dict[str, Any]) -> ToolResult:
        transcript_id = arguments.get("transcript_id")
        try:
            text = self._service.generate_summary(transcript_id, arguments.get("format"))
        except SummaryUnavailableError as exc:
            self._logger.info("summary_unavailable", transcript_id=transcript_id)
            return ToolResult(
                content=[SUMMARY_UNAVAILABLE_TEXT.format(transcript_id=transcript_id)],
                recovered_from=exc.kind,
            )
        return ToolResult(content=[text])


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
