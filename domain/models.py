"""
Pure domain models for Fireflies transcript tools.

These models contain NO transport dependencies. They represent the backend's
transcript records after parsing and flow through ports and services.

Every field except ``Transcript.id`` is optional: which fields are populated
depends on the query that produced the record.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator


class SummaryFormat(str, Enum):
    """Output formats for generated summaries."""

    BULLET_POINTS = "bullet_points"
    PARAGRAPH = "paragraph"


class QueryDialect(str, Enum):
    """Date-filter representation accepted by the backend schema."""

    ISO_DATETIME = "iso_datetime"
    EPOCH_MILLIS = "epoch_millis"


def normalize_text_list(value: Any) -> Optional[List[str]]:
    """Collapse the backend's string-or-list shape into a list of strings.

    ``None`` stays ``None`` (field absent); a single string becomes a
    one-element list; an empty string becomes an empty list.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


class TranscriptSummary(BaseModel):
    """Backend-generated digest of a transcript."""

    overview: Optional[str] = None
    action_items: Optional[List[str]] = None
    keywords: Optional[List[str]] = None
    topics_discussed: Optional[List[str]] = None
    outline: Optional[List[str]] = None
    shorthand_bullet: Optional[List[str]] = None

    @field_validator(
        "action_items",
        "keywords",
        "topics_discussed",
        "outline",
        "shorthand_bullet",
        mode="before",
    )
    @classmethod
    def _normalize_list_fields(cls, value: Any) -> Optional[List[str]]:
        return normalize_text_list(value)


class Speaker(BaseModel):
    """Participant identified by the transcription engine."""

    id: Optional[Union[int, str]] = None
    name: Optional[str] = None


class Sentence(BaseModel):
    """Single transcribed utterance."""

    index: Optional[int] = None
    speaker: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("speaker", "speaker_name", "speaker_id"),
    )
    text: Optional[str] = None
    raw_text: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @field_validator("speaker", mode="before")
    @classmethod
    def _speaker_as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class MeetingAttendee(BaseModel):
    """Calendar attendee attached to a meeting."""

    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName"),
    )
    email: Optional[str] = None


class Transcript(BaseModel):
    """A single recorded meeting, identified by ``id``."""

    id: str
    title: Optional[str] = None
    date: Optional[Union[int, float, str]] = None  # epoch milliseconds
    date_string: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("date_string", "dateString"),
    )
    duration: Optional[Union[int, float]] = None
    transcript_url: Optional[str] = None
    participants: Optional[List[str]] = None
    speakers: Optional[List[Speaker]] = None
    sentences: Optional[List[Sentence]] = None
    summary: Optional[TranscriptSummary] = None
    meeting_attendees: Optional[List[MeetingAttendee]] = None

    def to_output(self) -> dict:
        """JSON-ready dict with unfetched fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class TranscriptListResult(BaseModel):
    """Result of a transcript listing.

    ``degraded`` is set when the primary query timed out and the
    minimal-field query (id, title, date) produced the transcripts.
    """

    transcripts: List[Transcript] = []
    degraded: bool = False
