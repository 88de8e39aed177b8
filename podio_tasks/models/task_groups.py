"""
Task groupings returned by the listing operations
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from podio_tasks.models.due_status import DueStatus, classify_due_status
from podio_tasks.models.task import Task

_LAST_DATE = date.max
_LAST_DATETIME = datetime.max.replace(tzinfo=timezone.utc)
_FIRST_DATETIME = datetime.min.replace(tzinfo=timezone.utc)


def due_sort_key(task: Task):
    """Due date ascending, then creation time ascending; missing values last"""
    return (task.due_date or _LAST_DATE, task.created_on or _LAST_DATETIME)


def sort_by_due(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=due_sort_key)


def sort_completed(tasks: Iterable[Task]) -> List[Task]:
    """
    Order completed tasks by completion time, most recent first

    Tasks without a completion time go last. The sort is stable.
    """
    return sorted(
        tasks,
        key=lambda task: task.completed_on or _FIRST_DATETIME,
        reverse=True,
    )


class TasksByDue(BaseModel):
    """
    Active tasks partitioned by due status

    Each bucket is ordered by due date and then creation time.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    overdue: List[Task] = []
    today: List[Task] = []
    tomorrow: List[Task] = []
    later: List[Task] = []
    no_due_date: List[Task] = []

    @field_validator("overdue", "today", "tomorrow", "later", "no_due_date", mode="before")
    @classmethod
    def _null_bucket(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task], today: date) -> "TasksByDue":
        """
        Partition tasks into due status buckets relative to `today`

        Every task lands in exactly one bucket. Bucket membership depends
        only on the due date; callers pass active tasks.
        """
        buckets: Dict[DueStatus, List[Task]] = {status: [] for status in DueStatus}
        for task in tasks:
            buckets[classify_due_status(task.due_date, today)].append(task)
        return cls(**{status.value: sort_by_due(items) for status, items in buckets.items()})

    def bucket(self, status: DueStatus) -> List[Task]:
        return getattr(self, status.value)

    def all_tasks(self) -> List[Task]:
        tasks: List[Task] = []
        for status in DueStatus:
            tasks.extend(self.bucket(status))
        return tasks

    def regroup(self, today: date) -> "TasksByDue":
        """Re-partition and re-sort against a different "today" """
        return TasksByDue.from_tasks(self.all_tasks(), today)

    def __len__(self) -> int:
        return sum(len(self.bucket(status)) for status in DueStatus)


class TasksWithResponsible(BaseModel):
    """Tasks sharing one responsible user"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    responsible: Optional[int] = None
    tasks: List[Task] = []

    @field_validator("responsible", mode="before")
    @classmethod
    def _coerce_user(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("user_id", value.get("id"))
        return value


def group_by_responsible(tasks: Iterable[Task]) -> List[TasksWithResponsible]:
    """Group tasks by responsible user, keeping first-seen group order"""
    groups: Dict[Optional[int], List[Task]] = {}
    for task in tasks:
        groups.setdefault(task.responsible, []).append(task)
    return [
        TasksWithResponsible(responsible=responsible, tasks=sort_by_due(items))
        for responsible, items in groups.items()
    ]


class TaskTotal(BaseModel):
    """Task counts for one perspective (own or delegated)"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    overdue: int = 0
    today: int = 0
    started: int = 0
    total: int = 0


class TaskTotals(BaseModel):
    """Aggregate task counts, for one space or across all spaces"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    own: TaskTotal = TaskTotal()
    delegated: TaskTotal = TaskTotal()
