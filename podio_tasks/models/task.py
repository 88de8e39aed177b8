"""
Task model, lifecycle and request payloads
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from podio_tasks.models.due_status import DueStatus, classify_due_status
from podio_tasks.models.reference import Reference
from podio_tasks.utils.date_utils import parse_podio_datetime
from podio_tasks.utils.error_handler import RemoteRejected


class TaskStatus(str, Enum):
    """Task status as sent by the service"""

    ACTIVE = "active"
    COMPLETED = "completed"


class TaskState(str, Enum):
    """
    Lifecycle state of a task

    Completion collapses the started axis: a completed task is COMPLETED
    whatever its started flag says.
    """

    NOT_STARTED = "not_started"
    STARTED = "started"
    COMPLETED = "completed"


def _user_id(value: Any) -> Any:
    # The service sends users either as a bare id or as a user/profile object
    if isinstance(value, dict):
        return value.get("user_id", value.get("id"))
    return value


class Task(BaseModel):
    """
    Task snapshot

    Instances are immutable. The transition helpers return a new Task with
    the effect of the matching remote command applied, enforcing the same
    preconditions as the service.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(alias="task_id")
    text: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    private: bool = False
    status: TaskStatus = TaskStatus.ACTIVE
    started: bool = False
    responsible: Optional[int] = None
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None
    completed_on: Optional[datetime] = None
    space_id: Optional[int] = None
    link: Optional[str] = None
    reference: Optional[Reference] = Field(None, alias="ref")

    @field_validator("responsible", "created_by", mode="before")
    @classmethod
    def _coerce_user(cls, value: Any) -> Any:
        return _user_id(value)

    @field_validator("created_on", "completed_on", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_podio_datetime(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _empty_due_date(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @property
    def completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def state(self) -> TaskState:
        if self.completed:
            return TaskState.COMPLETED
        if self.started:
            return TaskState.STARTED
        return TaskState.NOT_STARTED

    def due_status(self, today: date) -> DueStatus:
        """Due status bucket of this task relative to `today`"""
        return classify_due_status(self.due_date, today)

    # Transitions

    def assign_to(self, responsible: int) -> "Task":
        return self.model_copy(update={"responsible": responsible})

    def mark_started(self) -> "Task":
        if self.completed:
            raise RemoteRejected(f"Task {self.id} is completed and cannot be started")
        return self.model_copy(update={"started": True})

    def mark_stopped(self) -> "Task":
        return self.model_copy(update={"started": False})

    def mark_completed(self, completed_on: Optional[datetime] = None) -> "Task":
        if self.completed:
            return self
        return self.model_copy(
            update={"status": TaskStatus.COMPLETED, "completed_on": completed_on}
        )

    def mark_incomplete(self) -> "Task":
        if not self.completed:
            raise RemoteRejected(f"Task {self.id} is not completed")
        return self.model_copy(update={"status": TaskStatus.ACTIVE, "completed_on": None})

    def with_due_date(self, due_date: Optional[date]) -> "Task":
        return self.model_copy(update={"due_date": due_date})

    def with_private(self, private: bool) -> "Task":
        return self.model_copy(update={"private": private})

    def with_text(self, text: str) -> "Task":
        return self.model_copy(update={"text": text})


class TaskCreate(BaseModel):
    """Task creation payload"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    description: Optional[str] = None
    private: bool = False
    due_date: Optional[date] = None
    responsible: Optional[int] = None
    file_ids: List[int] = []


class TaskCreateResponse(BaseModel):
    """Response of the create commands"""

    model_config = ConfigDict(populate_by_name=True)

    task_id: int


class AssignValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    responsible: int


class TaskDueDate(BaseModel):
    """Due date update; None clears the due date"""

    model_config = ConfigDict(frozen=True)

    due_date: Optional[date] = None


class TaskPrivate(BaseModel):
    model_config = ConfigDict(frozen=True)

    private: bool


class TaskText(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
