"""
Port interface for transcript retrieval.

Implementations: FirefliesClient (adapters/)
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from domain.models import Transcript


@runtime_checkable
class TranscriptSourcePort(Protocol):
    """Abstract interface for reading transcripts from the backend."""

    def fetch_transcripts(
        self,
        limit: Optional[int] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        minimal: bool = False,
    ) -> List[Transcript]:
        """Fetch one page of transcripts.

        Args:
            limit: Page size forwarded to the backend.
            from_date: Lower date bound (``YYYY-MM-DD``); omitted means unbounded.
            to_date: Upper date bound (``YYYY-MM-DD``); omitted means unbounded.
            minimal: Request only id, title and date.

        Raises:
            ToolError: Classified backend failure.
        """
        ...

    def fetch_transcript(self, transcript_id: str) -> Transcript:
        """Fetch one transcript with sentences and the full summary.

        Raises:
            NotFoundError: If the backend has no such transcript.
        """
        ...

    def fetch_search_candidates(self, limit: int) -> List[Transcript]:
        """Fetch one page of transcripts carrying title, sentence text and keywords."""
        ...

    def fetch_summary(self, transcript_id: str) -> Transcript:
        """Fetch the summary-focused subset of one transcript."""
        ...
