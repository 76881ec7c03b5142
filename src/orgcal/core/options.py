"""Export options consumed by the calendar engine."""

from dataclasses import dataclass

# include_todo policies
TODO_NONE = "none"
TODO_UNFINISHED = "unfinished"
TODO_UNBLOCKED = "unblocked"
TODO_ALL = "all"

# use_deadline / use_scheduled members
EVENT_IF_TODO = "event-if-todo"
EVENT_IF_NOT_TODO = "event-if-not-todo"
EVENT_IF_TODO_NOT_DONE = "event-if-todo-not-done"
TODO_DUE = "todo-due"
TODO_START = "todo-start"

# category sources
CATEGORY = "category"
TODO_STATE = "todo-state"
LOCAL_TAGS = "local-tags"
ALL_TAGS = "all-tags"

# with_timestamps policies
TIMESTAMPS_ACTIVE = "active"
TIMESTAMPS_INACTIVE = "inactive"
TIMESTAMPS_ALL = "all"
TIMESTAMPS_NONE = "none"

DATE_STYLES = ("american", "european", "iso")


@dataclass(frozen=True)
class ExportOptions:
    """
    Read-only knobs for one export pass.

    include_todo: one of the TODO_* policies, or a frozenset of keywords.
    include_body: False (omit), True (whole body) or a max character count.
    alarm_time: minutes before timed events; 0 disables global alarms.
    date_time_format: strftime template for timed values, ``%Z`` is the zone.
    """

    include_todo: str | frozenset[str] = TODO_NONE
    use_deadline: frozenset[str] = frozenset({EVENT_IF_TODO_NOT_DONE, EVENT_IF_NOT_TODO})
    use_scheduled: frozenset[str] = frozenset({EVENT_IF_TODO_NOT_DONE, EVENT_IF_NOT_TODO})
    categories: tuple[str, ...] = (LOCAL_TAGS, CATEGORY)
    with_timestamps: str = TIMESTAMPS_ACTIVE
    include_sexps: bool = True
    include_body: bool | int = True
    alarm_time: int = 0
    timezone: str | None = None
    date_time_format: str = ":%Y%m%dT%H%M%S"
    default_appointment_duration: int | None = None
    priority_highest: int = ord("A")
    priority_lowest: int = ord("C")
    priority_default: int = ord("B")
    deadline_summary_prefix: str = "DL: "
    scheduled_summary_prefix: str = "S: "
    exclude_tags: frozenset[str] = frozenset({"noexport"})
    ttl: str | None = None
    diary_date_style: str = "american"
    diary_start_year: int = 2005
    combined_name: str = "OrgMode"
    combined_description: str = ""
    combined_owner: str = ""

    @property
    def uses_utc(self) -> bool:
        """A format ending in Z means every local time is shifted to UTC."""
        return self.date_time_format.endswith("Z")
