"""Meeting and participant statistics over an aggregated meeting collection."""

import math
from collections import Counter
from datetime import datetime

from .types import (
    DurationStats,
    InternalExternal,
    Meeting,
    MeetingStats,
    ParticipantInfo,
    ParticipantStats,
    RecorderInfo,
)

NO_TEAM = "No Team"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, rounded half up."""
    millis = (end - start).total_seconds() * 1000
    return round_half_up(millis / 60000)


def meeting_duration(meeting: Meeting) -> int:
    # Actual recording times, not the calendar schedule.
    return duration_minutes(meeting.recording_start_time, meeting.recording_end_time)


def format_minutes(minutes: int) -> str:
    """Human-readable duration: ``45 min``, ``2h 5m`` or ``1d 2h 5m``."""
    if minutes < 60:
        return f"{minutes} min"
    hours, rem_minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {rem_minutes}m"
    days, rem_hours = divmod(hours, 24)
    return f"{days}d {rem_hours}h {rem_minutes}m"


def percentage(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


def compute_meeting_stats(meetings: list[Meeting]) -> MeetingStats | None:
    """Duration, team and internal/external statistics.

    Returns ``None`` for an empty collection.
    """
    if not meetings:
        return None

    durations = [meeting_duration(m) for m in meetings]
    total_minutes = sum(durations)

    by_team: Counter[str] = Counter(m.recorded_by.team or NO_TEAM for m in meetings)
    internal = sum(1 for m in meetings if m.is_internal)

    return MeetingStats(
        total_meetings=len(meetings),
        duration_stats=DurationStats(
            average_minutes=round_half_up(total_minutes / len(meetings)),
            min_minutes=min(durations),
            max_minutes=max(durations),
            total_minutes=total_minutes,
        ),
        meetings_by_team=dict(by_team.most_common()),
        internal_vs_external=InternalExternal(
            internal=internal, external=len(meetings) - internal
        ),
    )


def compute_participant_stats(meetings: list[Meeting], limit: int = 10) -> ParticipantStats | None:
    """Top invitees, invitee domains and recorders, each capped at *limit*.

    People are keyed by lower-cased email; the first name and email seen
    for a key are the ones reported. Equal counts keep first-seen order.
    Returns ``None`` for an empty collection.
    """
    if not meetings:
        return None

    participants: dict[str, ParticipantInfo] = {}
    recorders: dict[str, RecorderInfo] = {}
    domains: Counter[str] = Counter()

    for meeting in meetings:
        for invitee in meeting.calendar_invitees:
            key = invitee.email.lower()
            if key in participants:
                participants[key].meeting_count += 1
            else:
                participants[key] = ParticipantInfo(
                    name=invitee.name, email=invitee.email, meeting_count=1
                )
            domains[invitee.email_domain.lower()] += 1

        recorder = meeting.recorded_by
        key = recorder.email.lower()
        if key in recorders:
            recorders[key].recording_count += 1
        else:
            recorders[key] = RecorderInfo(
                name=recorder.name, email=recorder.email, recording_count=1
            )

    top_participants = sorted(
        participants.values(), key=lambda p: p.meeting_count, reverse=True
    )[:limit]
    top_recorders = sorted(
        recorders.values(), key=lambda r: r.recording_count, reverse=True
    )[:limit]

    return ParticipantStats(
        total_meetings=len(meetings),
        top_participants=top_participants,
        domain_breakdown=dict(domains.most_common(limit)),
        top_recorders=top_recorders,
    )
