"""
Report text assembly.

Layout (labels are part of the output contract, consumers show or export it verbatim):

    === AI-Generated Report ===

    Prompt: <prompt>

    Extracted Information:
    <ranked sentence 1>
    <ranked sentence 2>

    Generated on: <timestamp>

When nothing matched, the sentence lines are replaced by NO_RESULTS_MESSAGE.
"""

from datetime import datetime
from typing import Optional, Sequence

from .ranker import DEFAULT_THRESHOLD, rank_sentences

REPORT_TITLE = "=== AI-Generated Report ==="
NO_RESULTS_MESSAGE = "No relevant information found in the PDF for the given prompt."


def format_timestamp(timestamp: datetime) -> str:
    """
    Render a timestamp the way an en-US browser's toLocaleString() does.

    Example:
        >>> format_timestamp(datetime(2026, 10, 19, 15, 4, 5))
        '10/19/2026, 3:04:05 PM'
    """
    hour = timestamp.hour % 12 or 12
    meridiem = "AM" if timestamp.hour < 12 else "PM"
    return (
        f"{timestamp.month}/{timestamp.day}/{timestamp.year}, "
        f"{hour}:{timestamp.minute:02d}:{timestamp.second:02d} {meridiem}"
    )


def assemble_report(
    prompt: str,
    ranked_sentences: Optional[Sequence[str]],
    timestamp: datetime
) -> str:
    """
    Build the final report string.

    Args:
        prompt: User prompt, echoed as-is
        ranked_sentences: Sentence texts in ranking order.
            None or empty means nothing matched.
        timestamp: Generation time

    Returns:
        Report text
    """
    if ranked_sentences:
        body = "\n".join(ranked_sentences)
    else:
        body = NO_RESULTS_MESSAGE

    return (
        f"{REPORT_TITLE}\n\n"
        f"Prompt: {prompt}\n\n"
        f"Extracted Information:\n{body}"
        f"\n\nGenerated on: {format_timestamp(timestamp)}"
    )


def generate_report(
    document_text: str,
    prompt: str,
    threshold: float = DEFAULT_THRESHOLD,
    timestamp: Optional[datetime] = None,
    max_workers: Optional[int] = None
) -> str:
    """Rank the document against the prompt and assemble the report (timestamp defaults to now)."""
    ranked = rank_sentences(document_text, prompt, threshold=threshold, max_workers=max_workers)
    return assemble_report(
        prompt,
        [item.sentence for item in ranked],
        timestamp or datetime.now()
    )
