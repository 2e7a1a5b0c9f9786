"""Run store adapters - in-memory ring and JSON lines file."""

import json
import logging
from collections import deque
from pathlib import Path

from agenda.ports.run_store import RunRecord

logger = logging.getLogger(__name__)


class InMemoryRunStore:
    """
    Keeps the last maxlen runs in memory.

    Implements RunStore protocol.
    """

    def __init__(self, maxlen: int = 100):
        self._runs: deque[RunRecord] = deque(maxlen=maxlen)

    def record(self, run: RunRecord) -> None:
        self._runs.append(run)

    def recent(self, n: int = 10) -> list[RunRecord]:
        return list(reversed(self._runs))[:n]


class FileRunStore:
    """
    Appends runs to a JSON lines file.

    Implements RunStore protocol.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, run: RunRecord) -> None:
        with self.path.open("a") as f:
            f.write(json.dumps(run.to_dict()) + "\n")

    def recent(self, n: int = 10) -> list[RunRecord]:
        if not self.path.exists():
            return []
        runs = []
        for line in self.path.read_text().splitlines():
            if not line.strip():
                continue
            try:
                runs.append(RunRecord.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable run record: {e}")
        return list(reversed(runs))[:n]
