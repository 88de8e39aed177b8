"""
Message formatting utilities
"""

from typing import List
from podio_tasks.models.due_status import DueStatus
from podio_tasks.models.task import Task, TaskState
from podio_tasks.models.task_groups import TasksByDue, TasksWithResponsible, TaskTotals

BUCKET_TITLES = {
    DueStatus.OVERDUE: "Overdue",
    DueStatus.TODAY: "Due today",
    DueStatus.TOMORROW: "Due tomorrow",
    DueStatus.LATER: "Due later",
    DueStatus.NO_DUE_DATE: "No due date",
}

STATE_MARKS = {
    TaskState.NOT_STARTED: "[ ]",
    TaskState.STARTED: "[>]",
    TaskState.COMPLETED: "[x]",
}


def format_task(task: Task) -> str:
    """
    Format a single task as one line
    
    Args:
        task: Task to format
        
    Returns:
        Formatted line, e.g. "[ ] #42 Ship report (due 01.03.2024, private)"
    """
    line = f"{STATE_MARKS[task.state]} #{task.id} {task.text}"
    
    extras = []
    if task.due_date:
        extras.append(f"due {task.due_date.strftime('%d.%m.%Y')}")
    if task.completed and task.completed_on:
        extras.append(f"completed {task.completed_on.strftime('%d.%m.%Y %H:%M')}")
    if task.private:
        extras.append("private")
    if task.responsible is not None:
        extras.append(f"responsible {task.responsible}")
    
    if extras:
        line += f" ({', '.join(extras)})"
    return line


def format_task_list(tasks: List[Task], empty_message: str = "No tasks") -> str:
    """Format a flat list of tasks, one per line"""
    if not tasks:
        return empty_message
    return "\n".join(format_task(task) for task in tasks)


def format_tasks_by_due(by_due: TasksByDue) -> str:
    """
    Format tasks grouped by due status
    
    Empty buckets are left out.
    """
    sections = []
    for status in DueStatus:
        tasks = by_due.bucket(status)
        if not tasks:
            continue
        lines = [f"{BUCKET_TITLES[status]} ({len(tasks)}):"]
        lines.extend(f"  {format_task(task)}" for task in tasks)
        sections.append("\n".join(lines))
    
    if not sections:
        return "No tasks"
    return "\n\n".join(sections)


def format_tasks_by_responsible(groups: List[TasksWithResponsible]) -> str:
    if not groups:
        return "No tasks"
    sections = []
    for group in groups:
        who = f"User {group.responsible}" if group.responsible is not None else "Unassigned"
        lines = [f"{who} ({len(group.tasks)}):"]
        lines.extend(f"  {format_task(task)}" for task in group.tasks)
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def format_totals(totals: TaskTotals) -> str:
    """Format task totals as a small table"""
    rows = [
        f"{'':<10}{'overdue':>9}{'today':>7}{'started':>9}{'total':>7}",
    ]
    for label, total in (("own", totals.own), ("delegated", totals.delegated)):
        rows.append(
            f"{label:<10}{total.overdue:>9}{total.today:>7}{total.started:>9}{total.total:>7}"
        )
    return "\n".join(rows)


def format_task_created(task_id: int) -> str:
    return f"✓ Task #{task_id} created"
