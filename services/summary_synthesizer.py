"""
Summary synthesis from a transcript's raw summary fields.

Pure functions: no I/O, no logging. Text is emitted in source field order.
"""

from __future__ import annotations

from typing import List, Optional, Union

from domain.models import SummaryFormat, TranscriptSummary, normalize_text_list
from shared_utils.error_handler import SummaryUnavailableError


def synthesize_summary(
    summary: Optional[TranscriptSummary],
    summary_format: Union[SummaryFormat, str, None] = SummaryFormat.BULLET_POINTS,
) -> str:
    """Render a summary record as text.

    Args:
        summary: The transcript's summary record, or None when absent.
        summary_format: ``bullet_points`` (default) or ``paragraph``.
            Unrecognised values render as paragraph.

    Returns:
        The rendered summary text.

    Raises:
        SummaryUnavailableError: If ``summary`` is absent (kind ``InvalidParams``).
    """
    if summary is None:
        raise SummaryUnavailableError()

    if summary_format is None:
        summary_format = SummaryFormat.BULLET_POINTS
    fmt = summary_format.value if isinstance(summary_format, SummaryFormat) else str(summary_format)

    if fmt == SummaryFormat.BULLET_POINTS.value:
        return _bullet_points(summary)
    return _paragraph(summary)


def _items(values: Optional[List[str]]) -> List[str]:
    # Already normalised by the model; re-run for records built by hand.
    return normalize_text_list(values) or []


def _bullet_points(summary: TranscriptSummary) -> str:
    lines: List[str] = []

    if summary.overview:
        lines.append(f"Overview: {summary.overview}")

    action_items = _items(summary.action_items)
    if action_items:
        lines.append("Action Items:")
        lines.extend(f"- {item}" for item in action_items)

    topics = _items(summary.topics_discussed)
    if topics:
        lines.append("Topics Discussed:")
        lines.extend(f"- {topic}" for topic in topics)

    # Keywords stay on one comma-joined line rather than a bulleted list.
    keywords = _items(summary.keywords)
    if keywords:
        lines.append(f"Keywords: {', '.join(keywords)}")

    return "\n".join(lines)


def _paragraph(summary: TranscriptSummary) -> str:
    text = ""

    if summary.overview:
        text += summary.overview + " "

    topics = _items(summary.topics_discussed)
    if topics:
        text += "Topics discussed include: " + "; ".join(topics) + ". "

    action_items = _items(summary.action_items)
    if action_items:
        text += "Action items include: " + "; ".join(action_items) + ". "

    keywords = _items(summary.keywords)
    if keywords:
        text += "Key topics: " + ", ".join(keywords) + "."

    return text.strip()
