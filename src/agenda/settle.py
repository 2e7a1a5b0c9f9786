"""Run independent jobs and collect a settled result for each.

A failing job never aborts its siblings; callers get every outcome plus a
success/failure tally.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class Settled:
    """Outcome of one job: a value on success, the exception on failure."""

    name: str
    value: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SettledBatch:
    results: list[Settled] = field(default_factory=list)

    @property
    def succeeded(self) -> list[Settled]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[Settled]:
        return [r for r in self.results if not r.ok]

    def values(self) -> dict[str, Any]:
        """Successful values by job name."""
        return {r.name: r.value for r in self.succeeded}

    def tally(self) -> dict[str, int]:
        return {
            "total": len(self.results),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
        }


def settle(jobs: dict[str, Callable[[], Any]], max_workers: int | None = None) -> SettledBatch:
    """
    Run named jobs concurrently and wait for all of them.

    Results come back in the order the jobs were given.
    """
    if not jobs:
        return SettledBatch()

    outcomes: dict[str, Settled] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(fn): name for name, fn in jobs.items()}
        for future in concurrent.futures.as_completed(futures):
            name = futures[future]
            try:
                outcomes[name] = Settled(name, value=future.result())
            except Exception as e:
                logger.error(f"Job {name} failed: {e}")
                outcomes[name] = Settled(name, error=e)

    return SettledBatch([outcomes[name] for name in jobs])
