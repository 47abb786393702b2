"""Case-insensitive substring search over meeting titles, transcripts and summaries."""

from .types import Meeting, SearchMatches, SearchResult

CONTEXT_CHARS = 50
MAX_SNIPPETS = 3
DEFAULT_LIMIT = 10


def extract_snippet(text: str, query: str) -> str | None:
    """Return the first match of *query* in *text* with up to 50 characters
    of context on each side, or ``None`` when there is no match.

    A side that was clipped is marked with ``...``.
    """
    index = text.lower().find(query.lower())
    if index < 0:
        return None

    start = max(0, index - CONTEXT_CHARS)
    end = min(len(text), index + len(query) + CONTEXT_CHARS)
    snippet = text[start:end]
    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet = snippet + "..."
    return snippet


def search_meeting(meeting: Meeting, query: str) -> SearchResult | None:
    """Match one meeting; ``None`` when the query appears nowhere."""
    needle = query.lower()
    snippets: list[str] = []

    in_title = needle in meeting.title.lower() or (
        meeting.meeting_title is not None and needle in meeting.meeting_title.lower()
    )

    in_transcript = False
    for entry in meeting.transcript or []:
        snippet = extract_snippet(entry.text, query)
        if snippet is None:
            continue
        in_transcript = True
        snippets.append(f"[{entry.timestamp}] {entry.speaker.display_name}: {snippet}")
        if len(snippets) >= MAX_SNIPPETS:
            break

    in_summary = False
    summary_text = meeting.default_summary.markdown_formatted if meeting.default_summary else None
    if summary_text:
        snippet = extract_snippet(summary_text, query)
        in_summary = snippet is not None
        if snippet is not None and len(snippets) < MAX_SNIPPETS:
            snippets.append(f"[Summary] {snippet}")

    if not (in_title or in_transcript or in_summary):
        return None

    return SearchResult(
        meeting=meeting,
        matches=SearchMatches(
            in_title=in_title,
            in_transcript=in_transcript,
            in_summary=in_summary,
            context_snippets=snippets,
        ),
    )


def search_meetings(meetings: list[Meeting], query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
    """Search *meetings* in order, stopping once *limit* results are found."""
    results: list[SearchResult] = []
    for meeting in meetings:
        result = search_meeting(meeting, query)
        if result is None:
            continue
        results.append(result)
        if len(results) >= limit:
            break
    return results
