"""
Command line entry point
"""

import argparse
import asyncio
import sys
from datetime import date
from typing import List, Optional
from podio_tasks.api.podio_client import PodioClient
from podio_tasks.models.context import UserContext
from podio_tasks.models.reference import Reference
from podio_tasks.models.task import TaskCreate
from podio_tasks.services.task_service import TaskService
from podio_tasks.utils.error_handler import format_error_message
from podio_tasks.utils.formatters import (
    format_task,
    format_task_created,
    format_task_list,
    format_tasks_by_due,
    format_tasks_by_responsible,
    format_totals,
)
from podio_tasks.utils.logger import logger


class TaskCLI:
    """Runs one command against the task service and renders the result"""

    def __init__(self, service: TaskService, context: UserContext):
        self.service = service
        self.context = context
        self.logger = logger

    async def run(self, args: argparse.Namespace) -> str:
        handler = getattr(self, f"cmd_{args.command.replace('-', '_')}")
        return await handler(args)

    async def cmd_get(self, args) -> str:
        return format_task(await self.service.get(self.context, args.task_id))

    async def cmd_active(self, args) -> str:
        return format_tasks_by_due(await self.service.list_active_for_user(self.context))

    async def cmd_assigned(self, args) -> str:
        if args.completed:
            tasks = await self.service.list_completed_assigned_by_user(self.context)
            return format_task_list(tasks)
        return format_tasks_by_due(await self.service.list_active_assigned_by_user(self.context))

    async def cmd_completed(self, args) -> str:
        return format_task_list(await self.service.list_completed_for_user(self.context))

    async def cmd_started(self, args) -> str:
        return format_tasks_by_due(await self.service.list_started_for_user(self.context))

    async def cmd_space(self, args) -> str:
        if args.by == "responsible":
            groups = await self.service.list_in_space_by_responsible(self.context, args.space_id)
            return format_tasks_by_responsible(groups)
        return format_tasks_by_due(await self.service.list_in_space_by_due(self.context, args.space_id))

    async def cmd_ref(self, args) -> str:
        reference = Reference(type=args.ref_type, id=args.ref_id)
        return format_task_list(await self.service.list_by_reference(self.context, reference))

    async def cmd_totals(self, args) -> str:
        return format_totals(await self.service.get_totals(self.context, args.space_id))

    async def cmd_create(self, args) -> str:
        payload = TaskCreate(
            text=args.text,
            due_date=args.due,
            private=args.private,
            responsible=args.responsible,
        )
        if args.ref_type:
            reference = Reference(type=args.ref_type, id=args.ref_id)
            task_id = await self.service.create_with_reference(self.context, payload, reference)
        else:
            task_id = await self.service.create(self.context, payload)
        return format_task_created(task_id)

    async def cmd_assign(self, args) -> str:
        await self.service.assign(self.context, args.task_id, args.responsible)
        return f"✓ Task #{args.task_id} assigned to user {args.responsible}"

    async def cmd_complete(self, args) -> str:
        await self.service.complete(self.context, args.task_id)
        return f"✓ Task #{args.task_id} completed"

    async def cmd_incomplete(self, args) -> str:
        await self.service.incomplete(self.context, args.task_id)
        return f"✓ Task #{args.task_id} marked as incomplete"

    async def cmd_start(self, args) -> str:
        await self.service.start(self.context, args.task_id)
        return f"✓ Task #{args.task_id} started"

    async def cmd_stop(self, args) -> str:
        await self.service.stop(self.context, args.task_id)
        return f"✓ Task #{args.task_id} stopped"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="podio-tasks", description="Podio task client")
    parser.add_argument("--timezone", help="Timezone for due date buckets (default: TASK_TIMEZONE)")
    sub = parser.add_subparsers(dest="command", required=True)

    get = sub.add_parser("get", help="Show one task")
    get.add_argument("task_id", type=int)

    sub.add_parser("active", help="Active tasks you are responsible for")

    assigned = sub.add_parser("assigned", help="Tasks you assigned to others")
    assigned.add_argument("--completed", action="store_true", help="Show completed instead of active")

    sub.add_parser("completed", help="Completed tasks you were responsible for")
    sub.add_parser("started", help="Started tasks you are responsible for")

    space = sub.add_parser("space", help="Tasks related to a space")
    space.add_argument("space_id", type=int)
    space.add_argument("--by", choices=["due", "responsible"], default="due")

    ref = sub.add_parser("ref", help="Tasks attached to an object")
    ref.add_argument("ref_type")
    ref.add_argument("ref_id", type=int)

    totals = sub.add_parser("totals", help="Task counts")
    totals.add_argument("--space-id", type=int, default=None)

    create = sub.add_parser("create", help="Create a task")
    create.add_argument("text")
    create.add_argument("--due", type=date.fromisoformat, default=None, help="Due date, YYYY-MM-DD")
    create.add_argument("--private", action="store_true")
    create.add_argument("--responsible", type=int, default=None)
    create.add_argument("--ref-type", default=None)
    create.add_argument("--ref-id", type=int, default=None)

    assign = sub.add_parser("assign", help="Reassign a task")
    assign.add_argument("task_id", type=int)
    assign.add_argument("responsible", type=int)

    for name in ("complete", "incomplete", "start", "stop"):
        action = sub.add_parser(name, help=f"Mark a task as {name}")
        action.add_argument("task_id", type=int)

    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "create" and args.ref_type and args.ref_id is None:
        parser.error("--ref-type requires --ref-id")

    try:
        context = UserContext.from_settings()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    async with PodioClient() as client:
        try:
            cli = TaskCLI(TaskService(client, timezone=args.timezone), context)
            print(await cli.run(args))
        except Exception as e:
            print(format_error_message(e), file=sys.stderr)
            return 1
    return 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
