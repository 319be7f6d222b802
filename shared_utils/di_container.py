"""
Dependency injection container for managing application dependencies.
Centralizes client/service creation and lifecycle management.
"""

from typing import Optional

from shared_utils.config_loader import get_settings
from shared_utils.constants import LogScope
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.CONFIG)


class DIContainer:
    """Singleton dependency injection container."""

    _instance: Optional['DIContainer'] = None
    _transcript_source: Optional[object] = None
    _transcript_service: Optional[object] = None
    _tool_dispatcher: Optional[object] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def reset(self):
        """Reset container (useful for testing)."""
        self._transcript_source = None
        self._transcript_service = None
        self._tool_dispatcher = None

    def get_transcript_source(self):
        """Get or create FirefliesClient (lazy singleton).

        Raises:
            RuntimeError: If the client cannot be configured.
        """
        if self._transcript_source is None:
            from adapters.fireflies_client import FirefliesClient

            try:
                settings = get_settings()
            except Exception as e:
                logger.error("transcript_source_config_failed", error=str(e))
                raise RuntimeError(f"Backend client configuration failed: {e}") from e

            self._transcript_source = FirefliesClient(
                api_key=settings.fireflies_api_key,
                api_url=settings.fireflies_api_url,
                timeout=settings.request_timeout_seconds,
                dialect=settings.query_dialect,
            )
            logger.info(
                "transcript_source_initialized",
                dialect=settings.query_dialect.value,
            )
        return self._transcript_source

    def get_transcript_service(self):
        """Get or create TranscriptService (lazy singleton)."""
        if self._transcript_service is None:
            from services.transcript_service import TranscriptService

            settings = get_settings()
            self._transcript_service = TranscriptService(
                source=self.get_transcript_source(),
                list_timeout=settings.list_timeout_seconds,
            )
            logger.info("transcript_service_initialized")
        return self._transcript_service

    def get_tool_dispatcher(self):
        """Get or create ToolDispatcher (lazy singleton)."""
        if self._tool_dispatcher is None:
            from services.tool_dispatcher import ToolDispatcher

            self._tool_dispatcher = ToolDispatcher(
                transcript_service=self.get_transcript_service(),
            )
            logger.info("tool_dispatcher_initialized")
        return self._tool_dispatcher


# Global singleton instance
_container = DIContainer()


def get_di_container() -> DIContainer:
    """Get global DI container instance."""
    return _container
