"""Weighted multi-factor task ranking - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .errors import InvalidCriteria
from .tasks import Priority, Status, Task, filter_active, filter_by_ids


@dataclass(frozen=True)
class ScoringCriteria:
    """Relative weight of each factor. Weights need not sum to 1."""

    due_date_weight: float = 1.0
    priority_weight: float = 1.0
    status_weight: float = 1.0
    dependency_weight: float = 1.0
    estimated_duration_weight: float = 1.0

    def validate(self) -> None:
        for name, value in self.as_dict().items():
            if value < 0:
                raise InvalidCriteria(f"{name} must not be negative, got {value}")

    def as_dict(self) -> dict[str, float]:
        return {
            "due_date_weight": self.due_date_weight,
            "priority_weight": self.priority_weight,
            "status_weight": self.status_weight,
            "dependency_weight": self.dependency_weight,
            "estimated_duration_weight": self.estimated_duration_weight,
        }

    def total(self) -> float:
        return sum(self.as_dict().values())

    @classmethod
    def from_mapping(cls, values: dict, base: "ScoringCriteria | None" = None) -> "ScoringCriteria":
        """
        Build criteria from a mapping such as {"due_date": 2, "priority_weight": 0.5}.

        The "_weight" suffix is optional. Unknown keys raise InvalidCriteria.
        """
        merged = (base or cls()).as_dict()
        for key, value in values.items():
            name = key if key.endswith("_weight") else f"{key}_weight"
            if name not in merged:
                raise InvalidCriteria(f"Unknown scoring weight: {key}")
            merged[name] = float(value)
        return cls(**merged)


@dataclass(frozen=True)
class ScoringProfile:
    """
    Heuristic constants behind each factor and band.

    Bands are (upper bound, score) pairs checked in order; the first bound the
    value does not exceed wins.
    """

    overdue_score: float = 100
    due_date_bands: tuple[tuple[int, float], ...] = (
        (0, 90),
        (1, 80),
        (3, 70),
        (7, 50),
        (14, 30),
        (30, 20),
    )
    far_future_score: float = 10
    no_due_date_score: float = 15
    priority_scores: dict = field(
        default_factory=lambda: {
            Priority.LOW: 25,
            Priority.MEDIUM: 50,
            Priority.HIGH: 75,
            Priority.URGENT: 100,
        }
    )
    status_scores: dict = field(
        default_factory=lambda: {
            Status.IN_PROGRESS: 80,
            Status.PENDING: 60,
            Status.COMPLETED: 0,
            Status.CANCELLED: 0,
        }
    )
    dependency_base: float = 20
    dependency_step: float = 10
    dependency_cap: float = 80
    duration_bands: tuple[tuple[int, float], ...] = (
        (30, 80),
        (60, 70),
        (120, 60),
        (240, 50),
        (480, 40),
    )
    long_duration_score: float = 30
    unknown_duration_score: float = 50
    critical_threshold: float = 90
    high_threshold: float = 80
    medium_threshold: float = 60
    low_threshold: float = 40
    in_progress_limit: int = 3
    high_priority_limit: int = 5


DEFAULT_PROFILE = ScoringProfile()

RECOMMENDATIONS = {
    "critical": "Critical - Handle immediately",
    "high": "High - Schedule for today",
    "medium": "Medium - Schedule for this week",
    "low": "Low - Schedule when convenient",
    "defer": "Defer - Consider delegating or postponing",
}


@dataclass(frozen=True)
class TaskFactors:
    """Per-factor contributions before weighting."""

    due_date: float
    priority: float
    status: float
    dependencies: float
    estimated_duration: float

    def weighted_sum(self, criteria: ScoringCriteria) -> float:
        return (
            self.due_date * criteria.due_date_weight
            + self.priority * criteria.priority_weight
            + self.status * criteria.status_weight
            + self.dependencies * criteria.dependency_weight
            + self.estimated_duration * criteria.estimated_duration_weight
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "dueDate": self.due_date,
            "priority": self.priority,
            "status": self.status,
            "dependencies": self.dependencies,
            "estimatedDuration": self.estimated_duration,
        }


@dataclass
class PrioritizedTask:
    """A task with its composite score and annotations."""

    task: Task
    score: float
    factors: TaskFactors
    band: str
    recommendation: str
    raw_score: float = field(default=0.0, repr=False)


@dataclass
class PrioritizationSummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass
class PrioritizationResult:
    prioritized_tasks: list[PrioritizedTask]
    summary: PrioritizationSummary
    recommendations: list[str]


def _banded(value: float, bands, fallback: float) -> float:
    for upper, score in bands:
        if value <= upper:
            return score
    return fallback


def due_date_factor(task: Task, as_of: datetime, profile: ScoringProfile = DEFAULT_PROFILE) -> float:
    """Overdue scores highest; no deadline sits just above the far future."""
    if task.due_date is None:
        return profile.no_due_date_score
    if task.due_date < as_of:
        return profile.overdue_score
    return _banded(task.days_until_due(as_of), profile.due_date_bands, profile.far_future_score)


def priority_factor(task: Task, profile: ScoringProfile = DEFAULT_PROFILE) -> float:
    return profile.priority_scores[task.priority]


def status_factor(task: Task, profile: ScoringProfile = DEFAULT_PROFILE) -> float:
    return profile.status_scores[task.status]


def dependency_factor(task: Task, profile: ScoringProfile = DEFAULT_PROFILE) -> float:
    """More connections, more urgency, up to the cap."""
    score = profile.dependency_base + profile.dependency_step * len(task.dependencies)
    return min(score, profile.dependency_cap)


def duration_factor(task: Task, profile: ScoringProfile = DEFAULT_PROFILE) -> float:
    """Quick wins score higher."""
    if not task.estimated_duration:
        return profile.unknown_duration_score
    return _banded(task.estimated_duration, profile.duration_bands, profile.long_duration_score)


def compute_factors(task: Task, as_of: datetime, profile: ScoringProfile = DEFAULT_PROFILE) -> TaskFactors:
    return TaskFactors(
        due_date=due_date_factor(task, as_of, profile),
        priority=priority_factor(task, profile),
        status=status_factor(task, profile),
        dependencies=dependency_factor(task, profile),
        estimated_duration=duration_factor(task, profile),
    )


def score_band(score: float, profile: ScoringProfile = DEFAULT_PROFILE) -> str:
    """Summary band: critical, high, medium or low."""
    if score >= profile.critical_threshold:
        return "critical"
    if score >= profile.high_threshold:
        return "high"
    if score >= profile.medium_threshold:
        return "medium"
    return "low"


def recommend(score: float, profile: ScoringProfile = DEFAULT_PROFILE) -> str:
    """Recommendation text, monotonic in score."""
    band = score_band(score, profile)
    if band == "low" and score < profile.low_threshold:
        band = "defer"
    return RECOMMENDATIONS[band]


def score_task(
    task: Task,
    criteria: ScoringCriteria,
    as_of: datetime,
    profile: ScoringProfile = DEFAULT_PROFILE,
) -> PrioritizedTask:
    """
    Score a single task.

    The weighted sum is divided by the total weight so scores stay on the
    0-100 scale of the factors. The displayed score is rounded to two
    decimals; raw_score keeps full precision for ordering.
    """
    factors = compute_factors(task, as_of, profile)
    total = criteria.total()
    raw = factors.weighted_sum(criteria) / total if total > 0 else 0.0
    score = round(raw, 2)
    return PrioritizedTask(
        task=task,
        score=score,
        factors=factors,
        band=score_band(score, profile),
        recommendation=recommend(score, profile),
        raw_score=raw,
    )


def summarize(ranked: list[PrioritizedTask]) -> PrioritizationSummary:
    summary = PrioritizationSummary(total=len(ranked))
    for item in ranked:
        setattr(summary, item.band, getattr(summary, item.band) + 1)
    return summary


def generate_recommendations(
    ranked: list[PrioritizedTask],
    as_of: datetime,
    profile: ScoringProfile = DEFAULT_PROFILE,
) -> list[str]:
    """Free-text advice about the ranked set as a whole."""
    recommendations = []

    critical = [r for r in ranked if r.band == "critical"]
    if critical:
        recommendations.append(f"Focus on {len(critical)} critical task(s) first")

    overdue = [r for r in ranked if r.task.is_overdue(as_of)]
    if overdue:
        recommendations.append(f"{len(overdue)} task(s) are overdue and need immediate attention")

    in_progress = [r for r in ranked if r.task.status is Status.IN_PROGRESS]
    if len(in_progress) > profile.in_progress_limit:
        recommendations.append("Consider focusing on completing in-progress tasks before starting new ones")

    pressing = [r for r in ranked if r.task.priority in (Priority.URGENT, Priority.HIGH)]
    if len(pressing) > profile.high_priority_limit:
        recommendations.append("High number of urgent/high priority tasks - consider delegating some tasks")

    undated = [r for r in ranked if r.task.due_date is None]
    if undated:
        recommendations.append(f"{len(undated)} task(s) don't have due dates - consider setting deadlines")

    if not recommendations and ranked:
        recommendations.append("Task priorities are well balanced. Continue with current schedule.")

    return recommendations


def prioritize_tasks(
    tasks: list[Task],
    criteria: ScoringCriteria | None = None,
    subset_ids=None,
    *,
    as_of: datetime,
    profile: ScoringProfile = DEFAULT_PROFILE,
    exclude_inactive: bool = False,
) -> PrioritizationResult:
    """
    Rank tasks by weighted urgency.

    Pure function - no I/O. Identical input and as_of give identical output.

    Args:
        tasks: Tasks to rank
        criteria: Factor weights (defaults to 1.0 each)
        subset_ids: Only rank tasks with these ids; unknown ids are ignored
        as_of: Reference time for deadline computations
        profile: Heuristic constants
        exclude_inactive: Drop completed and cancelled tasks first

    Returns:
        PrioritizationResult ordered by descending score, ties by task id
    """
    criteria = criteria or ScoringCriteria()
    criteria.validate()

    if subset_ids is not None:
        tasks = filter_by_ids(tasks, subset_ids)
    if exclude_inactive:
        tasks = filter_active(tasks)

    ranked = [score_task(t, criteria, as_of, profile) for t in tasks]
    ranked.sort(key=lambda r: (-r.raw_score, r.task.id))

    return PrioritizationResult(
        prioritized_tasks=ranked,
        summary=summarize(ranked),
        recommendations=generate_recommendations(ranked, as_of, profile),
    )
