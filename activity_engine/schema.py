"""Core data schema for unified activity items and appointments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Collection, Literal, Mapping, Optional

ItemType = Literal["task", "alert", "appointment", "follow-up"]
Urgency = Literal["now", "next", "scheduled"]
Priority = Literal["low", "medium", "high", "critical"]
Severity = Literal["info", "warning", "critical"]
AppointmentType = Literal["call", "meeting", "video_call"]
RiskLevel = Literal["low", "medium", "high"]

ITEM_TYPES = ("task", "alert", "appointment", "follow-up")
URGENCY_LEVELS = ("now", "next", "scheduled")
PRIORITY_LEVELS = ("low", "medium", "high", "critical")
SEVERITY_LEVELS = ("info", "warning", "critical")
APPOINTMENT_TYPES = ("meeting", "call", "video_call")
ENTITY_SCOPES = ("all", "client", "prospect")
STATUS_FILTERS = ("all", "pending", "completed", "read")
DATE_RANGES = ("today", "this-week", "this-month", "custom")


@dataclass(frozen=True, kw_only=True)
class UnifiedItem:
    """Fields shared by every unified work item.

    Concrete items are one of the subclasses below; ``type`` is fixed per
    subclass and ``urgency`` is only ever set by the normalizer.
    """

    type: ClassVar[str] = ""

    source_id: int | str
    title: str
    created_at: datetime
    urgency: Urgency
    priority: Priority = "medium"
    description: Optional[str] = None
    client_id: Optional[int] = None
    prospect_id: Optional[int] = None
    client_name: Optional[str] = None
    prospect_name: Optional[str] = None
    assigned_to: Optional[int] = None
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def id(self) -> str:
        return f"{self.type}-{self.source_id}"

    @property
    def effective_time(self) -> datetime:
        """Timestamp used for chronological ordering and date-range filters."""

        return self.created_at


@dataclass(frozen=True, kw_only=True)
class TaskItem(UnifiedItem):
    type: ClassVar[str] = "task"

    due_date: Optional[datetime] = None
    completed: bool = False

    @property
    def effective_time(self) -> datetime:
        return self.due_date or self.created_at


@dataclass(frozen=True, kw_only=True)
class FollowUpItem(TaskItem):
    type: ClassVar[str] = "follow-up"


@dataclass(frozen=True, kw_only=True)
class AlertItem(UnifiedItem):
    type: ClassVar[str] = "alert"

    severity: Optional[Severity] = None
    read: bool = False
    action_required: bool = False


@dataclass(frozen=True, kw_only=True)
class AppointmentItem(UnifiedItem):
    type: ClassVar[str] = "appointment"

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    appointment_type: Optional[str] = None

    @property
    def effective_time(self) -> datetime:
        return self.start_time or self.created_at


@dataclass(frozen=True)
class Filters:
    """Conjunctive filter criteria; empty or ``None`` fields impose nothing."""

    urgency: Collection[str] = ()
    types: Collection[str] = ()
    priority: Collection[str] = ()
    entity_type: str = "all"
    client_id: Optional[int] = None
    prospect_id: Optional[int] = None
    status: str = "all"
    search_query: Optional[str] = None
    date_range: Optional[str] = None
    custom_start: Optional[datetime] = None
    custom_end: Optional[datetime] = None


@dataclass(frozen=True)
class AppointmentLike:
    """Minimal appointment shape used by scheduling and risk scoring."""

    title: str
    start_time: datetime
    end_time: datetime
    type: str = "meeting"
    priority: str = "medium"
    description: Optional[str] = None
    client_name: Optional[str] = None
    location: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class HistoricalAppointment(AppointmentLike):
    """Past appointment labelled with whether the client attended.

    ``booked_at`` is the moment the appointment was confirmed; scoring is
    replayed as of that moment when it is known.
    """

    attended: bool
    booked_at: Optional[datetime] = None


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class AppointmentRecommendation:
    date: str
    start_time: str
    end_time: str
    type: str
    confidence: float
    rationale: str


@dataclass(frozen=True)
class ShowUpAssessment:
    likelihood: float
    risk_level: RiskLevel
    signals: list[str]


@dataclass
class Snapshot:
    """Already-loaded source records handed to the engine by its caller."""

    tasks: list[dict] = field(default_factory=list)
    alerts: list[dict] = field(default_factory=list)
    appointments: list[dict] = field(default_factory=list)
    follow_ups: list[dict] = field(default_factory=list)
    client_names: dict[int, str] = field(default_factory=dict)
    prospect_names: dict[int, str] = field(default_factory=dict)
