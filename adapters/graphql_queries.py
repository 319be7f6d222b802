"""
GraphQL query shapes for the Fireflies backend.

One canonical field selection per operation, plus a dialect table mapping
canonical date bounds onto the variable types the backend schema accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from domain.models import QueryDialect


_SPEAKERS = "speakers { id name }"

LIST_FIELDS = f"""
          id
          title
          date
          dateString
          duration
          transcript_url
          participants
          {_SPEAKERS}
          summary {{
            keywords
            action_items
            overview
            topics_discussed
          }}"""

MINIMAL_FIELDS = """
          id
          title
          date"""

DETAIL_FIELDS = f"""
          id
          title
          date
          dateString
          duration
          transcript_url
          participants
          {_SPEAKERS}
          sentences {{
            index
            speaker_name
            speaker_id
            text
            raw_text
            start_time
            end_time
          }}
          summary {{
            keywords
            action_items
            outline
            shorthand_bullet
            overview
            topics_discussed
          }}
          meeting_attendees {{
            displayName
            email
          }}"""

SEARCH_FIELDS = f"""
          id
          title
          date
          dateString
          duration
          transcript_url
          participants
          {_SPEAKERS}
          sentences {{
            text
          }}
          summary {{
            keywords
            overview
          }}"""

SUMMARY_FIELDS = """
          id
          title
          summary {
            overview
            action_items
            keywords
            topics_discussed
          }"""


def _as_given(value: str) -> Any:
    return value


def _to_epoch_millis(value: str) -> Any:
    """Convert ``YYYY-MM-DD`` to UTC epoch milliseconds.

    Anything else is forwarded unchanged so the backend classifies it.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return value
    return int(parsed.timestamp() * 1000)


@dataclass(frozen=True)
class DialectSpec:
    """How one backend dialect types and encodes date bounds."""

    date_type: str
    encode_date: Callable[[str], Any]


DIALECTS: Dict[QueryDialect, DialectSpec] = {
    QueryDialect.ISO_DATETIME: DialectSpec(date_type="DateTime", encode_date=_as_given),
    QueryDialect.EPOCH_MILLIS: DialectSpec(date_type="Float", encode_date=_to_epoch_millis),
}


def build_list_query(dialect: QueryDialect, minimal: bool = False) -> str:
    """Listing query; ``minimal`` selects only id, title and date."""
    dialect_spec = DIALECTS[dialect]
    fields = MINIMAL_FIELDS if minimal else LIST_FIELDS
    name = "GetTranscriptsMinimal" if minimal else "GetTranscripts"
    return f"""
      query {name}($limit: Int, $fromDate: {dialect_spec.date_type}, $toDate: {dialect_spec.date_type}) {{
        transcripts(limit: $limit, fromDate: $fromDate, toDate: $toDate) {{{fields}
        }}
      }}
    """


def build_list_variables(
    dialect: QueryDialect,
    limit: Any,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> Dict[str, Any]:
    """Variables for the listing query; omitted bounds are left out entirely."""
    dialect_spec = DIALECTS[dialect]
    variables: Dict[str, Any] = {"limit": limit}
    if from_date:
        variables["fromDate"] = dialect_spec.encode_date(from_date)
    if to_date:
        variables["toDate"] = dialect_spec.encode_date(to_date)
    return variables


def build_search_query() -> str:
    return f"""
      query SearchTranscripts($limit: Int) {{
        transcripts(limit: $limit) {{{SEARCH_FIELDS}
        }}
      }}
    """


def build_detail_query() -> str:
    return f"""
      query GetTranscriptDetails($id: String!) {{
        transcript(id: $id) {{{DETAIL_FIELDS}
        }}
      }}
    """


def build_summary_query() -> str:
    return f"""
      query GetTranscriptSummary($id: String!) {{
        transcript(id: $id) {{{SUMMARY_FIELDS}
        }}
      }}
    """
