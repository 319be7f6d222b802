"""
FastAPI surface for the Fireflies transcript tools.

Endpoints:
    GET  /health               - Health check
    GET  /api/tools            - Tool names, descriptions and input schemas
    POST /api/tools/{name}     - Invoke a tool; body is the arguments object
"""

import os
import sys
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
import uvicorn

from services.tool_dispatcher import TOOLS
from shared_utils.config_loader import load_settings_or_none
from shared_utils.constants import APIEndpoints, Defaults, LogScope
from shared_utils.di_container import get_di_container
from shared_utils.error_handler import ToolError, handle_error
from shared_utils.logging_utils import ContextualLogger, configure_logging


# ---------------------------------------------------------------------------
# Application bootstrap
# ---------------------------------------------------------------------------

logger = ContextualLogger(scope=LogScope.API)

app = FastAPI(
    title="Fireflies Transcript Tools",
    description="Fireflies.ai transcripts exposed as callable tools",
)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.HEALTH)
def health_check() -> dict:
    """Health check endpoint."""
    logger.debug("health_check_requested")
    return {
        "status": "healthy",
        "tools": [tool.name for tool in TOOLS],
    }


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.TOOLS)
def list_tools() -> dict:
    """Advertise every tool with its JSON input schema."""
    return {"tools": [tool.to_dict() for tool in TOOLS]}


@app.post(APIEndpoints.TOOL_CALL)
@limiter.limit("60/minute")
async def call_tool(
    request: Request,
    name: str,
    body: Optional[dict] = None,
) -> JSONResponse:
    """Invoke one tool.

    Body JSON: the tool's arguments object (may be omitted).

    Returns ``{"content": [...], "text": ..., "recovered_from": ...}``;
    classified failures return ``{"error": {"kind", "message", "context"}}``
    with the kind's HTTP status.
    """
    try:
        dispatcher = get_di_container().get_tool_dispatcher()
        result = await run_in_threadpool(dispatcher.invoke, name, body or {})
        return JSONResponse(
            content={
                "content": result.content,
                "text": result.text,
                "recovered_from": result.recovered_from,
            }
        )

    except ToolError as e:
        logger.warning("tool_call_error", tool=name, kind=e.kind)
        return JSONResponse(status_code=e.http_status, content=e.to_dict())
    except Exception as e:
        error_response = handle_error(e, scope=LogScope.API)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )


def main() -> int:
    """Entrypoint - refuse to start without a usable configuration."""
    configure_logging(
        environment=os.environ.get("ENVIRONMENT", "development").lower(),
        level=os.environ.get("LOG_LEVEL", Defaults.LOG_LEVEL),
    )

    settings = load_settings_or_none()
    if settings is None:
        print("Error: FIREFLIES_API_KEY environment variable is required", file=sys.stderr)
        return 1

    logger.info("api_initialized", environment=settings.environment)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
