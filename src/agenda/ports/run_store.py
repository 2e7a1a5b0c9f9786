"""Automation run log interface."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass
class RunRecord:
    """One execution of a workflow or scheduled job."""

    name: str
    started_at: datetime
    finished_at: datetime
    success: bool
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "success": self.success,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RunRecord":
        return cls(
            name=data["name"],
            started_at=datetime.fromisoformat(data["started_at"]),
            finished_at=datetime.fromisoformat(data["finished_at"]),
            success=bool(data["success"]),
            detail=data.get("detail", ""),
        )


class RunStore(Protocol):
    """Interface for recording automation runs."""

    def record(self, run: RunRecord) -> None:
        """Store a run."""
        ...

    def recent(self, n: int = 10) -> list[RunRecord]:
        """Most recent runs, newest first."""
        ...
