"""
Constants management.
Centralized configuration for all magic values, endpoints, and defaults.
"""

from enum import Enum
from typing import Final


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# Default values
class Defaults:
    """Defaults for backend access and tool arguments."""
    API_URL: Final[str] = "https://api.fireflies.ai/graphql"
    REQUEST_TIMEOUT: Final[float] = 60.0
    LIST_TIMEOUT: Final[float] = 90.0  # outer wall-clock bound for get_transcripts
    LIST_LIMIT: Final[int] = 20
    SEARCH_LIMIT: Final[int] = 10
    SEARCH_MIN_FETCH: Final[int] = 20
    SEARCH_OVERSAMPLE: Final[int] = 2
    BACKEND_PAGE_MAX: Final[int] = 50
    LOG_LEVEL: Final[str] = "INFO"


# Logging scopes
class LogScope:
    """Standardized logging scope names."""
    CONFIG = "config_loader"
    API = "api"
    MCP = "mcp_server"
    ERROR_HANDLER = "error_handler"
    BACKEND = "backend_client"
    TRANSCRIPTS = "transcript_service"
    DISPATCH = "tool_dispatcher"


# API endpoints and paths
class APIEndpoints:
    """API route definitions."""
    HEALTH = "/health"
    TOOLS = "/api/tools"
    TOOL_CALL = "/api/tools/{name}"


# Tool names exposed at the dispatch boundary
class ToolName(str, Enum):
    GET_TRANSCRIPTS = "get_transcripts"
    GET_TRANSCRIPT_DETAILS = "get_transcript_details"
    SEARCH_TRANSCRIPTS = "search_transcripts"
    GENERATE_SUMMARY = "generate_summary"


# Error kinds
class ErrorKind(str, Enum):
    """Standardized error kinds surfaced as ToolError.kind."""
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    INVALID_PARAMS = "InvalidParams"
    TIMEOUT = "Timeout"
    INTERNAL = "Internal"
    METHOD_NOT_FOUND = "MethodNotFound"


# JSON-RPC error codes used by the MCP surface
class RpcErrorCode:
    INVALID_REQUEST: Final[int] = -32600
    METHOD_NOT_FOUND: Final[int] = -32601
    INVALID_PARAMS: Final[int] = -32602
    INTERNAL_ERROR: Final[int] = -32603
