"""Data models for Fathom API objects and derived analytics."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Generic, NewType, TypeVar

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

# Opaque continuation token handed out by list endpoints. Never parsed.
Cursor = NewType("Cursor", str)

T = TypeVar("T")


class ResponseFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


class CalendarInviteesDomainType(str, Enum):
    ALL = "all"
    ONLY_INTERNAL = "only_internal"
    ONE_OR_MORE_EXTERNAL = "one_or_more_external"


class WebhookTriggerType(str, Enum):
    MY_RECORDINGS = "my_recordings"
    SHARED_EXTERNAL_RECORDINGS = "shared_external_recordings"
    MY_SHARED_WITH_TEAM_RECORDINGS = "my_shared_with_team_recordings"
    SHARED_TEAM_RECORDINGS = "shared_team_recordings"


class _Remote(BaseModel):
    """Read-only projection of an object returned by the Fathom API."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Recordings
# ---------------------------------------------------------------------------


class Speaker(_Remote):
    display_name: str
    matched_calendar_invitee_email: str | None = None


class TranscriptEntry(_Remote):
    """One utterance; ``timestamp`` is HH:MM:SS from the recording start."""

    speaker: Speaker
    text: str
    timestamp: str


class Summary(_Remote):
    template_name: str | None = None
    markdown_formatted: str | None = None


class Assignee(_Remote):
    name: str
    email: str
    team: str | None = None


class ActionItem(_Remote):
    description: str
    user_generated: bool = False
    completed: bool = False
    recording_timestamp: str | None = None
    recording_playback_url: str | None = None
    assignee: Assignee | None = None


class CalendarInvitee(_Remote):
    name: str
    matched_speaker_display_name: str | None = None
    email: str
    email_domain: str
    is_external: bool = False


class RecordedBy(_Remote):
    name: str
    email: str
    email_domain: str
    team: str | None = None


class CrmContact(_Remote):
    name: str
    email: str
    record_url: str


class CrmCompany(_Remote):
    name: str
    record_url: str


class CrmDeal(_Remote):
    name: str
    amount: float
    record_url: str


class CrmMatches(_Remote):
    contacts: list[CrmContact] | None = None
    companies: list[CrmCompany] | None = None
    deals: list[CrmDeal] | None = None
    error: str | None = None


class Meeting(_Remote):
    """A recorded meeting.

    The optional sections (``transcript``, ``default_summary``,
    ``action_items``, ``crm_matches``) are ``None`` when they were not
    requested, which is distinct from an empty list.
    """

    recording_id: int
    title: str
    meeting_title: str | None = None
    url: str = ""
    share_url: str | None = None
    created_at: datetime
    scheduled_start_time: datetime | None = None
    scheduled_end_time: datetime | None = None
    recording_start_time: datetime
    recording_end_time: datetime
    calendar_invitees_domains_type: str | None = None
    transcript_language: str | None = None
    transcript: list[TranscriptEntry] | None = None
    default_summary: Summary | None = None
    action_items: list[ActionItem] | None = None
    calendar_invitees: list[CalendarInvitee] = []
    recorded_by: RecordedBy
    crm_matches: CrmMatches | None = None

    @property
    def is_internal(self) -> bool:
        return self.calendar_invitees_domains_type == CalendarInviteesDomainType.ONLY_INTERNAL.value


class Page(BaseModel, Generic[T]):
    """One page of a cursor-paginated list endpoint."""

    limit: int | None = None
    next_cursor: Cursor | None = None
    items: list[T] = []


class SummaryResponse(_Remote):
    summary: Summary


class TranscriptResponse(_Remote):
    transcript: list[TranscriptEntry] = []


# ---------------------------------------------------------------------------
# Teams and webhooks
# ---------------------------------------------------------------------------


class Team(_Remote):
    name: str
    created_at: datetime


class TeamMember(_Remote):
    name: str
    email: str
    created_at: datetime


def _distinct_triggers(value: list[WebhookTriggerType]) -> list[WebhookTriggerType]:
    if len(set(value)) != len(value):
        raise ValueError("triggered_for must not contain duplicate trigger types")
    return value


TriggerTypes = Annotated[
    list[WebhookTriggerType],
    Field(min_length=1, max_length=len(WebhookTriggerType)),
    AfterValidator(_distinct_triggers),
]

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def _check_http_url(value: str) -> str:
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"destination_url must be an absolute http(s) URL: {value}") from e
    return value


# Validated as an absolute http(s) URL but forwarded exactly as given.
DestinationUrl = Annotated[str, AfterValidator(_check_http_url)]


class WebhookRequest(BaseModel):
    """Body of ``POST /webhooks``."""

    destination_url: DestinationUrl
    triggered_for: TriggerTypes
    include_action_items: bool = False
    include_crm_matches: bool = False
    include_summary: bool = False
    include_transcript: bool = False


class Webhook(_Remote):
    id: str
    url: str
    secret: str
    created_at: datetime
    include_transcript: bool = False
    include_crm_matches: bool = False
    include_summary: bool = False
    include_action_items: bool = False
    triggered_for: list[WebhookTriggerType]


# ---------------------------------------------------------------------------
# Analytics and search
# ---------------------------------------------------------------------------


class DurationStats(BaseModel):
    average_minutes: int
    min_minutes: int
    max_minutes: int
    total_minutes: int


class InternalExternal(BaseModel):
    internal: int
    external: int


class MeetingStats(BaseModel):
    total_meetings: int
    duration_stats: DurationStats
    meetings_by_team: dict[str, int]
    internal_vs_external: InternalExternal


class ParticipantInfo(BaseModel):
    name: str
    email: str
    meeting_count: int


class RecorderInfo(BaseModel):
    name: str
    email: str
    recording_count: int


class ParticipantStats(BaseModel):
    total_meetings: int
    top_participants: list[ParticipantInfo]
    domain_breakdown: dict[str, int]
    top_recorders: list[RecorderInfo]


class SearchMatches(BaseModel):
    in_title: bool = False
    in_transcript: bool = False
    in_summary: bool = False
    context_snippets: list[str] = []


class SearchResult(BaseModel):
    meeting: Meeting
    matches: SearchMatches
