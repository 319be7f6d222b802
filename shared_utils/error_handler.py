"""
Structured error handling and response formatting.
Provides consistent error responses with error kinds and context.
"""

from typing import Optional, Dict, Any

from shared_utils.constants import ErrorKind, LogScope, RpcErrorCode
from shared_utils.logging_utils import get_scoped_logger


class ToolError(Exception):
    """Base exception for tool errors.

    ``kind`` is the classification callers assert on; ``http_status`` and
    ``rpc_code`` let each outer surface map it onto its own protocol.
    """

    def __init__(
        self,
        kind: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        http_status: int = 500,
        rpc_code: int = RpcErrorCode.INTERNAL_ERROR,
    ):
        self.kind = kind
        self.message = message
        self.context = context or {}
        self.http_status = http_status
        self.rpc_code = rpc_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to response dictionary."""
        return {
            "error": {
                "kind": self.kind,
                "message": self.message,
                "context": self.context
            }
        }


class UnauthorizedError(ToolError):
    """Backend rejected the credential."""

    def __init__(self, message: str = "Invalid API key or unauthorized access", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.UNAUTHORIZED.value,
            message=message,
            context=context,
            http_status=401,
            rpc_code=RpcErrorCode.INVALID_REQUEST,
        )


class NotFoundError(ToolError):
    """Requested resource does not exist upstream."""

    def __init__(self, message: str = "Resource not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.NOT_FOUND.value,
            message=message,
            context=context,
            http_status=404,
            rpc_code=RpcErrorCode.INVALID_PARAMS,
        )


class InvalidParamsError(ToolError):
    """Bad or missing caller input, or a request the backend rejected as malformed."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.INVALID_PARAMS.value,
            message=message,
            context=context,
            http_status=400,
            rpc_code=RpcErrorCode.INVALID_PARAMS,
        )


class SummaryUnavailableError(InvalidParamsError):
    """Transcript exists but carries no summary record."""

    def __init__(self, message: str = "Summary not available for this transcript", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context=context)


class BackendTimeoutError(ToolError):
    """Backend call exceeded its time bound."""

    def __init__(self, message: str = "Backend request timed out", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.TIMEOUT.value,
            message=message,
            context=context,
            http_status=504,
            rpc_code=RpcErrorCode.INTERNAL_ERROR,
        )


class InternalError(ToolError):
    """Catch-all; wraps the underlying message."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.INTERNAL.value,
            message=message,
            context=context,
            http_status=500,
            rpc_code=RpcErrorCode.INTERNAL_ERROR,
        )


class MethodNotFoundError(ToolError):
    """Unknown tool name at the dispatch boundary."""

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            kind=ErrorKind.METHOD_NOT_FOUND.value,
            message=f"Unknown tool: {name}",
            context={**(context or {}), "tool": name},
            http_status=404,
            rpc_code=RpcErrorCode.METHOD_NOT_FOUND,
        )


def log_exception(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
    logger: Optional[Any] = None
) -> None:
    """Log exception with structured context.

    Args:
        exc: Exception to log
        scope: Log scope identifier
        logger: Optional custom logger (uses structlog if not provided)
    """
    if logger is None:
        logger = get_scoped_logger(scope)

    if isinstance(exc, ToolError):
        logger.error(
            "tool_exception",
            kind=exc.kind,
            message=exc.message,
            context=exc.context
        )
    else:
        logger.error(
            "unexpected_exception",
            error_type=type(exc).__name__,
            message=str(exc),
            traceback=True
        )


def as_tool_error(exc: Exception) -> ToolError:
    """Return ``exc`` unchanged if it is a ToolError, else wrap it as Internal."""
    if isinstance(exc, ToolError):
        return exc
    return InternalError(
        f"Error processing request: {exc}",
        context={"error_type": type(exc).__name__},
    )


def handle_error(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
) -> Dict[str, Any]:
    """Handle exception and return structured error response.

    Args:
        exc: Exception to handle
        scope: Log scope

    Returns:
        Structured error response dictionary
    """
    log_exception(exc, scope)
    return as_tool_error(exc).to_dict()
