"""
Task access service

Each operation validates its input locally and then performs exactly one
call on the Podio transport. The service keeps no state between calls.
"""

from datetime import date, datetime
from typing import Any, Callable, List, Optional
from pydantic import ValidationError as PydanticValidationError
from zoneinfo import ZoneInfo
from podio_tasks.api.podio_client import PodioClient
from podio_tasks.config.constants import (
    TASK_ENDPOINT,
    TASK_ACTIVE_ENDPOINT,
    TASK_ASSIGNED_ACTIVE_ENDPOINT,
    TASK_ASSIGNED_COMPLETED_ENDPOINT,
    TASK_COMPLETED_ENDPOINT,
    TASK_STARTED_ENDPOINT,
    TASK_TOTAL_ENDPOINT,
    SORT_BY_DUE_DATE,
    SORT_BY_RESPONSIBLE,
)
from podio_tasks.models.context import UserContext
from podio_tasks.models.reference import Reference, resolve_reference_path
from podio_tasks.models.task import (
    Task,
    TaskCreate,
    TaskCreateResponse,
    AssignValue,
    TaskDueDate,
    TaskPrivate,
    TaskText,
)
from podio_tasks.models.task_groups import (
    TasksByDue,
    TasksWithResponsible,
    TaskTotals,
    sort_by_due,
    sort_completed,
)
from podio_tasks.utils.date_utils import get_current_date, get_task_timezone
from podio_tasks.utils.error_handler import RemoteUnavailable, ValidationFailed
from podio_tasks.utils.logger import logger


def _require_id(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationFailed(f"{name} must be a positive integer, got {value!r}")
    return value


def _require_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ValidationFailed("Task text must not be empty")
    return text


class TaskService:
    """Service for creating, mutating and listing tasks"""

    def __init__(
        self,
        client: PodioClient,
        timezone: Optional[str] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize task service

        Args:
            client: Podio transport
            timezone: IANA timezone deciding where "today" starts for due
                date bucketing, defaults to settings.TASK_TIMEZONE
            today_provider: Override for "today" (used by tests)
        """
        self.client = client
        self.timezone: ZoneInfo = get_task_timezone(timezone)
        self._today_provider = today_provider
        self.logger = logger

    def today(self) -> date:
        """Today's date in the configured task timezone"""
        if self._today_provider is not None:
            return self._today_provider()
        return get_current_date(self.timezone)

    # Response parsing

    def _parse(self, model, data: Any, operation: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise RemoteUnavailable(f"Unexpected response shape for {operation}: {e.error_count()} error(s)") from e

    def _parse_list(self, model, data: Any, operation: str) -> list:
        if not isinstance(data, list):
            raise RemoteUnavailable(f"Unexpected response shape for {operation}: expected a list")
        return [self._parse(model, item, operation) for item in data]

    def _parse_by_due(self, data: Any, operation: str) -> TasksByDue:
        by_due = self._parse(TasksByDue, data, operation)
        return by_due.regroup(self.today())

    # Single task

    async def get(self, context: UserContext, task_id: int) -> Task:
        """
        Get a task by id

        Raises:
            NotFound: If the task does not exist
        """
        _require_id(task_id, "task_id")
        data = await self.client.request("GET", f"{TASK_ENDPOINT}{task_id}", context)
        return self._parse(Task, data, "get")

    async def assign(self, context: UserContext, task_id: int, responsible: int) -> None:
        """Make `responsible` the user responsible for the task"""
        _require_id(task_id, "task_id")
        payload = AssignValue(responsible=_require_id(responsible, "responsible"))
        self.logger.info(f"Assigning task {task_id} to user {responsible}")
        await self.client.request(
            "POST",
            f"{TASK_ENDPOINT}{task_id}/assign",
            context,
            json_data=payload.model_dump(mode="json"),
        )

    async def complete(self, context: UserContext, task_id: int) -> None:
        """Mark the task as completed"""
        await self._command(context, task_id, "complete")

    async def incomplete(self, context: UserContext, task_id: int) -> None:
        """
        Mark a completed task as no longer completed

        Raises:
            RemoteRejected: If the task was never completed
        """
        await self._command(context, task_id, "incomplete")

    async def start(self, context: UserContext, task_id: int) -> None:
        """Indicate that work has started on the task"""
        await self._command(context, task_id, "start")

    async def stop(self, context: UserContext, task_id: int) -> None:
        """Indicate that work on the task has stopped"""
        await self._command(context, task_id, "stop")

    async def _command(self, context: UserContext, task_id: int, action: str) -> None:
        _require_id(task_id, "task_id")
        self.logger.info(f"Task {task_id}: {action}")
        await self.client.request("POST", f"{TASK_ENDPOINT}{task_id}/{action}", context, json_data={})

    async def update_due_date(self, context: UserContext, task_id: int, due_date: Optional[date]) -> None:
        """Replace the due date; None clears it"""
        _require_id(task_id, "task_id")
        if due_date is not None and (not isinstance(due_date, date) or isinstance(due_date, datetime)):
            raise ValidationFailed(f"due_date must be a calendar date or None, got {due_date!r}")
        payload = TaskDueDate(due_date=due_date)
        self.logger.info(f"Task {task_id}: due date -> {due_date}")
        await self.client.request(
            "PUT",
            f"{TASK_ENDPOINT}{task_id}/due_date",
            context,
            json_data=payload.model_dump(mode="json"),
        )

    async def update_private(self, context: UserContext, task_id: int, private: bool) -> None:
        """Make the task private or public"""
        _require_id(task_id, "task_id")
        if not isinstance(private, bool):
            raise ValidationFailed(f"private must be a boolean, got {private!r}")
        payload = TaskPrivate(private=private)
        self.logger.info(f"Task {task_id}: private -> {private}")
        await self.client.request(
            "PUT",
            f"{TASK_ENDPOINT}{task_id}/private",
            context,
            json_data=payload.model_dump(mode="json"),
        )

    async def update_text(self, context: UserContext, task_id: int, text: str) -> None:
        """Replace the text of the task"""
        _require_id(task_id, "task_id")
        payload = TaskText(text=_require_text(text))
        self.logger.info(f"Task {task_id}: text updated")
        await self.client.request(
            "PUT",
            f"{TASK_ENDPOINT}{task_id}/text",
            context,
            json_data=payload.model_dump(mode="json"),
        )

    # Creation

    def _create_body(self, payload: TaskCreate) -> dict:
        _require_text(payload.text)
        if payload.responsible is not None:
            _require_id(payload.responsible, "responsible")
        return payload.model_dump(mode="json", exclude_none=True)

    async def create(self, context: UserContext, payload: TaskCreate) -> int:
        """
        Create a stand-alone task

        Args:
            context: Identity of the creator
            payload: Task data; text is required

        Returns:
            Id of the new task
        """
        body = self._create_body(payload)
        data = await self.client.request("POST", TASK_ENDPOINT, context, json_data=body)
        task_id = self._parse(TaskCreateResponse, data, "create").task_id
        self.logger.info(f"Created task {task_id}")
        return task_id

    async def create_with_reference(self, context: UserContext, payload: TaskCreate, reference: Reference) -> int:
        """
        Create a task attached to another object

        Raises:
            InvalidReference: If the reference cannot be resolved
        """
        ref_path = resolve_reference_path(reference)
        body = self._create_body(payload)
        data = await self.client.request("POST", f"{TASK_ENDPOINT}{ref_path}/", context, json_data=body)
        task_id = self._parse(TaskCreateResponse, data, "create_with_reference").task_id
        self.logger.info(f"Created task {task_id} on {ref_path}")
        return task_id

    # Listings

    async def list_by_reference(self, context: UserContext, reference: Reference) -> List[Task]:
        """
        Get active and completed tasks attached to an object

        The reference is not set on the returned tasks.
        """
        ref_path = resolve_reference_path(reference)
        data = await self.client.request("GET", f"{TASK_ENDPOINT}{ref_path}/", context)
        tasks = self._parse_list(Task, data, "list_by_reference")
        return [task.model_copy(update={"reference": None}) for task in tasks]

    async def list_active_for_user(self, context: UserContext) -> TasksByDue:
        """Active tasks the user is responsible for, grouped by due status"""
        data = await self.client.request("GET", TASK_ACTIVE_ENDPOINT, context)
        return self._parse_by_due(data, "list_active_for_user")

    async def list_active_assigned_by_user(self, context: UserContext) -> TasksByDue:
        """Active tasks the user has assigned to others, grouped by due status"""
        data = await self.client.request("GET", TASK_ASSIGNED_ACTIVE_ENDPOINT, context)
        return self._parse_by_due(data, "list_active_assigned_by_user")

    async def list_completed_assigned_by_user(self, context: UserContext) -> List[Task]:
        """Completed tasks the user assigned to others, most recently completed first"""
        data = await self.client.request("GET", TASK_ASSIGNED_COMPLETED_ENDPOINT, context)
        return sort_completed(self._parse_list(Task, data, "list_completed_assigned_by_user"))

    async def list_completed_for_user(self, context: UserContext) -> List[Task]:
        """Completed tasks the user is responsible for, most recently completed first"""
        data = await self.client.request("GET", TASK_COMPLETED_ENDPOINT, context)
        return sort_completed(self._parse_list(Task, data, "list_completed_for_user"))

    async def list_started_for_user(self, context: UserContext) -> TasksByDue:
        """Started tasks the user is responsible for, grouped by due status"""
        data = await self.client.request("GET", TASK_STARTED_ENDPOINT, context)
        return self._parse_by_due(data, "list_started_for_user")

    async def list_in_space_by_due(self, context: UserContext, space_id: int) -> TasksByDue:
        """
        Tasks related to a space, grouped by due status

        Includes tasks referencing the space directly and tasks referencing
        objects in it (items, status updates).
        """
        _require_id(space_id, "space_id")
        data = await self.client.request(
            "GET",
            f"{TASK_ENDPOINT}in_space/{space_id}/",
            context,
            params={"sort_by": SORT_BY_DUE_DATE},
        )
        return self._parse_by_due(data, "list_in_space_by_due")

    async def list_in_space_by_responsible(self, context: UserContext, space_id: int) -> List[TasksWithResponsible]:
        """Tasks related to a space, grouped by responsible user

        Tasks within each group are ordered by due date and then creation time.
        """
        _require_id(space_id, "space_id")
        data = await self.client.request(
            "GET",
            f"{TASK_ENDPOINT}in_space/{space_id}/",
            context,
            params={"sort_by": SORT_BY_RESPONSIBLE},
        )
        groups = self._parse_list(TasksWithResponsible, data, "list_in_space_by_responsible")
        return [group.model_copy(update={"tasks": sort_by_due(group.tasks)}) for group in groups]

    async def get_totals(self, context: UserContext, space_id: Optional[int] = None) -> TaskTotals:
        """
        Task counts for the user

        Args:
            context: Identity to count for
            space_id: Space to count in, None for all visible spaces
        """
        params = None
        if space_id is not None:
            params = {"space_id": _require_id(space_id, "space_id")}
        data = await self.client.request("GET", TASK_TOTAL_ENDPOINT, context, params=params)
        return self._parse(TaskTotals, data, "get_totals")
