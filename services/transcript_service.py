"""
TranscriptService - the four transcript operations over a TranscriptSourcePort.

Orchestrates:
    1. Argument defaults and required-input checks.
    2. The wall-clock bound on listings and the minimal-field fallback.
    3. Client-side search over one fetched page.
    4. Summary retrieval piped through the summary synthesizer.

No transport imports - depends only on the port & domain models.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from domain.models import SummaryFormat, Transcript, TranscriptListResult
from ports.transcript_source import TranscriptSourcePort
from services.summary_synthesizer import synthesize_summary
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import BackendTimeoutError
from shared_utils.logging_utils import ContextualLogger
from shared_utils.validation import InputValidator

T = TypeVar("T")


class TranscriptService:
    """Stateless transcript operations that depend on the source port."""

    def __init__(
        self,
        *,
        source: TranscriptSourcePort,
        list_timeout: Optional[float] = Defaults.LIST_TIMEOUT,
        logger: Optional[Any] = None,
    ) -> None:
        self._source = source
        self._list_timeout = list_timeout
        self._logger = ContextualLogger(LogScope.TRANSCRIPTS, logger)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_transcripts(
        self,
        limit: Optional[int] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> TranscriptListResult:
        """List transcripts, degrading to id/title/date on timeout.

        Args:
            limit: Page size; defaults to 20. Forwarded unvalidated.
            from_date: Optional lower bound (``YYYY-MM-DD``).
            to_date: Optional upper bound (``YYYY-MM-DD``).

        Returns:
            TranscriptListResult; ``degraded`` is True when the minimal
            query produced it.

        Raises:
            ToolError: Any non-timeout failure, or a timeout of the minimal query.
        """
        if limit is None:
            limit = Defaults.LIST_LIMIT

        try:
            transcripts = self._run_bounded(
                lambda: self._source.fetch_transcripts(
                    limit=limit,
                    from_date=from_date,
                    to_date=to_date,
                )
            )
            return TranscriptListResult(transcripts=transcripts)
        except BackendTimeoutError as exc:
            self._logger.warning(
                "list_transcripts_degraded",
                reason=exc.message,
                limit=limit,
            )

        transcripts = self._source.fetch_transcripts(
            limit=limit,
            from_date=from_date,
            to_date=to_date,
            minimal=True,
        )
        return TranscriptListResult(transcripts=transcripts, degraded=True)

    def get_transcript_details(self, transcript_id: str) -> Transcript:
        """Fetch one transcript in full, sentences included.

        Raises:
            InvalidParamsError: If ``transcript_id`` is empty.
        """
        transcript_id = InputValidator.validate_non_empty_string(transcript_id, "transcript_id")
        return self._source.fetch_transcript(transcript_id)

    def search_transcripts(self, query: str, limit: Optional[int] = None) -> List[Transcript]:
        """Case-insensitive substring search over title, sentences and keywords.

        One page of ``max(2 * limit, 20)`` candidates (at most the backend
        page maximum) is fetched, filtered, then truncated to ``limit``.

        Raises:
            InvalidParamsError: If ``query`` is empty or ``limit`` is not a
                positive integer.
        """
        query = InputValidator.validate_non_empty_string(query, "query")
        if limit is None:
            limit = Defaults.SEARCH_LIMIT
        limit = InputValidator.validate_positive_int(limit, "limit")

        fetch_limit = min(
            max(limit * Defaults.SEARCH_OVERSAMPLE, Defaults.SEARCH_MIN_FETCH),
            Defaults.BACKEND_PAGE_MAX,
        )
        fetch_limit = max(fetch_limit, limit)

        candidates = self._source.fetch_search_candidates(fetch_limit)
        needle = query.lower()
        matches = [t for t in candidates if _matches(t, needle)]

        self._logger.info(
            "search_completed",
            candidates=len(candidates),
            matches=len(matches),
            limit=limit,
        )
        return matches[:limit]

    def generate_summary(
        self,
        transcript_id: str,
        summary_format: Optional[str] = SummaryFormat.BULLET_POINTS.value,
    ) -> str:
        """Render the transcript's summary record as text.

        Raises:
            InvalidParamsError: If ``transcript_id`` is empty or the
                transcript has no summary record.
        """
        transcript_id = InputValidator.validate_non_empty_string(transcript_id, "transcript_id")
        summary_format = InputValidator.validate_summary_format(summary_format)

        transcript = self._source.fetch_summary(transcript_id)
        return synthesize_summary(transcript.summary, summary_format)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_bounded(self, call: Callable[[], T]) -> T:
        """Race ``call`` against the listing wall-clock bound.

        The call runs on a daemon thread so an abandoned call cannot delay
        interpreter exit. Its late result is discarded.
        """
        if self._list_timeout is None:
            return call()

        outcome: "queue.Queue[Tuple[bool, Any]]" = queue.Queue(maxsize=1)

        def _run() -> None:
            try:
                outcome.put((True, call()))
            except Exception as exc:
                outcome.put((False, exc))

        threading.Thread(target=_run, daemon=True, name="list-transcripts").start()

        try:
            succeeded, value = outcome.get(timeout=self._list_timeout)
        except queue.Empty as exc:
            raise BackendTimeoutError(
                f"Listing exceeded {self._list_timeout:g}s",
                context={"timeout": self._list_timeout},
            ) from exc

        if not succeeded:
            raise value
        return value


def _matches(transcript: Transcript, needle: str) -> bool:
    if transcript.title and needle in transcript.title.lower():
        return True

    for sentence in transcript.sentences or []:
        if sentence.text and needle in sentence.text.lower():
            return True

    keywords = transcript.summary.keywords if transcript.summary else None
    return any(needle in keyword.lower() for keyword in keywords or [])
