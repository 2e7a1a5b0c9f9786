"""Configuration management for Agenda."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.calendar import WorkingHours
from .core.prioritization import ScoringCriteria

logger = logging.getLogger(__name__)

AGENDA_HOME = Path(os.environ.get("AGENDA_HOME", Path.home() / ".agenda"))
CONFIG_FILE = AGENDA_HOME / "config" / "agenda.conf"
DATA_DIR = AGENDA_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """Agenda configuration."""

    timezone: str = "UTC"
    work_hours: str = "09:00-17:00"
    strict_working_hours: bool = False
    slot_step_minutes: int = 60
    horizon_days: int = 7
    meeting_duration: int = 60
    preferred_times: list[str] = field(default_factory=list)
    buffer_minutes: int = 15
    due_date_weight: float = 1.0
    priority_weight: float = 1.0
    status_weight: float = 1.0
    dependency_weight: float = 1.0
    estimated_duration_weight: float = 1.0
    tasks_file: str = ""
    calendar_api_url: str = ""
    calendar_api_token: str = ""
    notify_webhook_url: str = ""
    run_log_file: str = ""
    fetch_workers: int = 4
    briefing_cron: str = "0 8 * * *"
    urgent_tasks_cron: str = "0 9-17/2 * * 1-5"
    calendar_review_cron: str = "0 18 * * 0"
    meeting_prep_cron: str = "*/15 * * * *"

    @property
    def working_hours(self) -> WorkingHours:
        return WorkingHours.parse(self.work_hours)

    @property
    def criteria(self) -> ScoringCriteria:
        return ScoringCriteria(
            due_date_weight=self.due_date_weight,
            priority_weight=self.priority_weight,
            status_weight=self.status_weight,
            dependency_weight=self.dependency_weight,
            estimated_duration_weight=self.estimated_duration_weight,
        )


_INT_KEYS = {"slot_step_minutes", "horizon_days", "meeting_duration", "buffer_minutes", "fetch_workers"}
_FLOAT_KEYS = {
    "due_date_weight",
    "priority_weight",
    "status_weight",
    "dependency_weight",
    "estimated_duration_weight",
}
_STR_KEYS = {
    "timezone",
    "tasks_file",
    "calendar_api_url",
    "calendar_api_token",
    "notify_webhook_url",
    "run_log_file",
    "briefing_cron",
    "urgent_tasks_cron",
    "calendar_review_cron",
    "meeting_prep_cron",
}


def _strip_value(value: str) -> str:
    """Remove surrounding quotes, or an inline comment from unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str) -> Config:
    """Parse KEY=value lines into a Config."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "work_hours":
                try:
                    WorkingHours.parse(value)
                except ValueError:
                    logger.warning(f"Ignoring invalid WORK_HOURS: {value!r}")
                else:
                    config.work_hours = value
            case "preferred_times":
                config.preferred_times = [t.strip() for t in value.split(",") if t.strip()]
            case "strict_working_hours":
                config.strict_working_hours = value.lower() in _TRUE
            case _ if key in _INT_KEYS:
                try:
                    setattr(config, key, int(value))
                except ValueError:
                    logger.warning(f"Ignoring non-integer {key.upper()}: {value!r}")
            case _ if key in _FLOAT_KEYS:
                try:
                    setattr(config, key, float(value))
                except ValueError:
                    logger.warning(f"Ignoring non-numeric {key.upper()}: {value!r}")
            case _ if key in _STR_KEYS:
                setattr(config, key, value)
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from agenda.conf file."""
    path = path or CONFIG_FILE
    if not path.exists():
        return Config()
    return parse_config(path.read_text())
