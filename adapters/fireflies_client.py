"""
Fireflies GraphQL backend client.

Implements TranscriptSourcePort using ``requests`` against the single
GraphQL endpoint. Every transport failure is classified into a ToolError
before it leaves this module.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as ModelValidationError

from adapters import graphql_queries as queries
from domain.models import QueryDialect, Transcript
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import (
    BackendTimeoutError,
    InternalError,
    InvalidParamsError,
    NotFoundError,
    ToolError,
    UnauthorizedError,
)
from shared_utils.logging_utils import ContextualLogger


class FirefliesClient:
    """Fireflies.ai implementation of TranscriptSourcePort.

    Holds only immutable per-instance configuration; every call is
    independent.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = Defaults.API_URL,
        timeout: float = Defaults.REQUEST_TIMEOUT,
        dialect: QueryDialect = QueryDialect.ISO_DATETIME,
        session: Optional[requests.Session] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self._dialect = dialect
        self._session = session or requests.Session()
        self._logger = ContextualLogger(LogScope.BACKEND, logger)

    @property
    def dialect(self) -> QueryDialect:
        return self._dialect

    # ------------------------------------------------------------------
    # Query execution
    # ------------------------------------------------------------------

    def execute_query(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """POST one GraphQL request and return its ``data`` payload.

        Args:
            query: GraphQL document.
            variables: Query variables (never persisted).

        Returns:
            The response's ``data`` mapping.

        Raises:
            UnauthorizedError: HTTP 401.
            NotFoundError: HTTP 404.
            InvalidParamsError: HTTP 400.
            BackendTimeoutError: Request exceeded ``timeout``.
            InternalError: GraphQL ``errors`` present, or any other failure.
        """
        variables = variables or {}
        start_time = time.time()
        try:
            response = self._session.post(
                self._api_url,
                json={"query": query, "variables": variables},
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as exc:
            self._logger.warning("graphql_query_timeout", timeout=self._timeout)
            raise BackendTimeoutError(
                f"API request timed out after {self._timeout:g}s",
                context={"timeout": self._timeout},
            ) from exc
        except requests.exceptions.HTTPError as exc:
            error = self._classify_http_error(exc)
            self._logger.error(
                "graphql_query_failed",
                kind=error.kind,
                error=error.message,
            )
            raise error from exc
        except requests.exceptions.RequestException as exc:
            self._logger.error("graphql_transport_failed", error=str(exc))
            raise InternalError(f"API request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise InternalError("API returned a non-JSON response") from exc

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            message = _first_error_message(errors)
            self._logger.error(
                "graphql_errors_returned",
                error=message,
                error_count=len(errors),
            )
            raise InternalError(message)

        data = payload.get("data") if isinstance(payload, dict) else None
        if data is None:
            raise InternalError("API response carried no data")

        self._logger.debug(
            "graphql_query_completed",
            elapsed_seconds=time.time() - start_time,
            variables=sorted(variables),
        )
        return data

    @staticmethod
    def _classify_http_error(exc: requests.exceptions.HTTPError) -> ToolError:
        response = exc.response
        status = response.status_code if response is not None else None
        detail = _response_error_message(response)

        if status == 401:
            return UnauthorizedError()
        if status == 404:
            return NotFoundError()
        if status == 400:
            return InvalidParamsError(
                detail or "Backend rejected the request as malformed",
                context={"status": status},
            )
        return InternalError(f"API request failed: {exc}", context={"status": status})

    # ------------------------------------------------------------------
    # TranscriptSourcePort implementation
    # ------------------------------------------------------------------

    def fetch_transcripts(
        self,
        limit: Optional[int] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        minimal: bool = False,
    ) -> List[Transcript]:
        """Fetch one page of transcripts (full listing or minimal fields)."""
        query = queries.build_list_query(self._dialect, minimal=minimal)
        variables = queries.build_list_variables(
            self._dialect,
            limit if limit is not None else Defaults.LIST_LIMIT,
            from_date,
            to_date,
        )
        data = self.execute_query(query, variables)
        transcripts = _parse_transcripts(data.get("transcripts"))
        self._logger.info(
            "transcripts_fetched",
            count=len(transcripts),
            minimal=minimal,
        )
        return transcripts

    def fetch_transcript(self, transcript_id: str) -> Transcript:
        """Fetch one transcript with sentences, full summary and attendees."""
        data = self.execute_query(queries.build_detail_query(), {"id": transcript_id})
        return _parse_single(data.get("transcript"), transcript_id)

    def fetch_search_candidates(self, limit: int) -> List[Transcript]:
        """Fetch the page that client-side search filters over."""
        data = self.execute_query(queries.build_search_query(), {"limit": limit})
        return _parse_transcripts(data.get("transcripts"))

    def fetch_summary(self, transcript_id: str) -> Transcript:
        """Fetch id, title and summary fields of one transcript."""
        data = self.execute_query(queries.build_summary_query(), {"id": transcript_id})
        return _parse_single(data.get("transcript"), transcript_id)


# ----------------------------------------------------------------------
# Parsing helpers
# ----------------------------------------------------------------------


def _first_error_message(errors: Any) -> str:
    first = errors[0] if isinstance(errors, list) and errors else errors
    if isinstance(first, dict):
        return str(first.get("message") or "GraphQL execution failed")
    return str(first)


def _response_error_message(response: Optional[requests.Response]) -> Optional[str]:
    """Pull the first GraphQL error message out of an HTTP error body, if any."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("errors"):
        return _first_error_message(body["errors"])
    return None


def _parse_transcripts(raw: Any) -> List[Transcript]:
    if not raw:
        return []
    try:
        return [Transcript.model_validate(item) for item in raw if item is not None]
    except ModelValidationError as exc:
        raise InternalError(f"Unexpected transcript shape from API: {exc}") from exc


def _parse_single(raw: Any, transcript_id: str) -> Transcript:
    if raw is None:
        raise NotFoundError(
            f"Transcript {transcript_id} not found",
            context={"transcript_id": transcript_id},
        )
    try:
        return Transcript.model_validate(raw)
    except ModelValidationError as exc:
        raise InternalError(f"Unexpected transcript shape from API: {exc}") from exc
