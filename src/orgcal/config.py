"""Configuration management for orgcal."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.options import (
    DATE_STYLES,
    EVENT_IF_NOT_TODO,
    EVENT_IF_TODO_NOT_DONE,
    LOCAL_TAGS,
    CATEGORY,
    TODO_ALL,
    TODO_NONE,
    TODO_UNBLOCKED,
    TODO_UNFINISHED,
    ExportOptions,
)

logger = logging.getLogger(__name__)

ORGCAL_HOME = Path(os.environ.get("ORGCAL_HOME", Path.home() / "orgcal"))
CONFIG_FILE = ORGCAL_HOME / "config" / "orgcal.conf"

_TODO_POLICIES = (TODO_NONE, TODO_UNFINISHED, TODO_UNBLOCKED, TODO_ALL)
_TRUE = ("1", "true", "yes", "on", "t")


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: str) -> bool:
    return value.strip().lower() in _TRUE


@dataclass
class Config:
    """orgcal configuration."""

    include_todo: str = TODO_NONE
    include_todo_keywords: list[str] = field(default_factory=list)
    use_deadline: list[str] = field(default_factory=lambda: [EVENT_IF_TODO_NOT_DONE, EVENT_IF_NOT_TODO])
    use_scheduled: list[str] = field(default_factory=lambda: [EVENT_IF_TODO_NOT_DONE, EVENT_IF_NOT_TODO])
    categories: list[str] = field(default_factory=lambda: [LOCAL_TAGS, CATEGORY])
    with_timestamps: str = "active"
    include_sexps: bool = True
    include_body: bool | int = True
    alarm_time: int = 0
    timezone: str = ""
    date_time_format: str = ":%Y%m%dT%H%M%S"
    default_appointment_duration: int | None = None
    priority_highest: int = ord("A")
    priority_lowest: int = ord("C")
    priority_default: int = ord("B")
    deadline_summary_prefix: str = "DL: "
    scheduled_summary_prefix: str = "S: "
    exclude_tags: list[str] = field(default_factory=lambda: ["noexport"])
    ttl: str = ""
    diary_date_style: str = "american"
    diary_start_year: int = 2005
    combined_name: str = "OrgMode"
    combined_description: str = ""
    combined_owner: str = ""
    # Driver settings
    anniversaries_file: str = ""
    jobs: int = 1
    crlf: bool = False

    def export_options(self) -> ExportOptions:
        """Freeze the export-related settings for one pass."""
        include_todo: str | frozenset[str] = self.include_todo
        if self.include_todo_keywords:
            include_todo = frozenset(self.include_todo_keywords)
        return ExportOptions(
            include_todo=include_todo,
            use_deadline=frozenset(self.use_deadline),
            use_scheduled=frozenset(self.use_scheduled),
            categories=tuple(self.categories),
            with_timestamps=self.with_timestamps,
            include_sexps=self.include_sexps,
            include_body=self.include_body,
            alarm_time=self.alarm_time,
            timezone=self.timezone or None,
            date_time_format=self.date_time_format,
            default_appointment_duration=self.default_appointment_duration,
            priority_highest=self.priority_highest,
            priority_lowest=self.priority_lowest,
            priority_default=self.priority_default,
            deadline_summary_prefix=self.deadline_summary_prefix,
            scheduled_summary_prefix=self.scheduled_summary_prefix,
            exclude_tags=frozenset(self.exclude_tags),
            ttl=self.ttl or None,
            diary_date_style=self.diary_date_style,
            diary_start_year=self.diary_start_year,
            combined_name=self.combined_name,
            combined_description=self.combined_description,
            combined_owner=self.combined_owner,
        )


def _priority(value: str) -> int:
    """Priority as a letter ("A") or a number."""
    value = value.strip()
    if len(value) == 1 and value.isalpha():
        return ord(value.upper())
    return int(value)


def _include_body(value: str) -> bool | int:
    lowered = value.strip().lower()
    if lowered.isdigit():
        return int(lowered)
    return lowered in _TRUE


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str, config: Config | None = None) -> Config:
    """Apply ``key = value`` lines to a Config. Unknown keys are ignored."""
    config = config or Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        try:
            match key:
                case "include_todo":
                    if value.lower() in _TODO_POLICIES:
                        config.include_todo = value.lower()
                        config.include_todo_keywords = []
                    else:
                        # Explicit keyword set: "TODO,NEXT"
                        config.include_todo_keywords = _split(value)
                case "use_deadline":
                    config.use_deadline = _split(value)
                case "use_scheduled":
                    config.use_scheduled = _split(value)
                case "categories":
                    config.categories = _split(value)
                case "with_timestamps":
                    config.with_timestamps = value.lower()
                case "include_sexps":
                    config.include_sexps = _flag(value)
                case "include_body":
                    config.include_body = _include_body(value)
                case "alarm_time":
                    config.alarm_time = int(value)
                case "timezone":
                    config.timezone = value
                case "date_time_format":
                    config.date_time_format = value
                case "default_appointment_duration":
                    config.default_appointment_duration = int(value) if value else None
                case "priority_highest":
                    config.priority_highest = _priority(value)
                case "priority_lowest":
                    config.priority_lowest = _priority(value)
                case "priority_default":
                    config.priority_default = _priority(value)
                case "deadline_summary_prefix":
                    config.deadline_summary_prefix = value
                case "scheduled_summary_prefix":
                    config.scheduled_summary_prefix = value
                case "exclude_tags":
                    config.exclude_tags = _split(value)
                case "ttl":
                    config.ttl = value
                case "diary_date_style":
                    if value.lower() in DATE_STYLES:
                        config.diary_date_style = value.lower()
                    else:
                        logger.warning(f"Unknown diary date style: {value}")
                case "diary_start_year":
                    config.diary_start_year = int(value)
                case "combined_name":
                    config.combined_name = value
                case "combined_description":
                    config.combined_description = value
                case "combined_owner":
                    config.combined_owner = value
                case "anniversaries_file":
                    config.anniversaries_file = value
                case "jobs":
                    config.jobs = max(1, int(value))
                case "crlf":
                    config.crlf = _flag(value)
        except ValueError as e:
            logger.warning(f"Ignoring invalid value for {key}: {e}")

    return config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from orgcal.conf file."""
    path = path or CONFIG_FILE
    if not path.exists():
        return Config()
    return parse_config(path.read_text())
