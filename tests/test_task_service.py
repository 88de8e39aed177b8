"""
Tests for TaskService request shapes and local validation
"""

import pytest
from datetime import date, datetime
from podio_tasks.models.due_status import DueStatus
from podio_tasks.models.reference import Reference, ReferenceType
from podio_tasks.models.task import TaskCreate
from podio_tasks.services.task_service import TaskService
from podio_tasks.utils.error_handler import (
    InvalidReference,
    NotFound,
    RemoteRejected,
    RemoteUnavailable,
    ValidationFailed,
)


@pytest.mark.asyncio
async def test_get_task(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {
        "task_id": 42,
        "text": "Ship report",
        "status": "active",
        "due_date": "2024-03-01",
    }
    
    task = await task_service.get(context, 42)
    
    mock_podio_client.request.assert_called_once_with("GET", "/task/42", context)
    assert task.id == 42
    assert task.due_date == date(2024, 3, 1)


@pytest.mark.asyncio
async def test_get_propagates_not_found(task_service, mock_podio_client, context):
    mock_podio_client.request.side_effect = NotFound("HTTP 404")
    
    with pytest.raises(NotFound):
        await task_service.get(context, 404)


@pytest.mark.asyncio
async def test_get_with_malformed_response(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"text": "no id"}
    
    with pytest.raises(RemoteUnavailable, match="Unexpected response shape"):
        await task_service.get(context, 42)


@pytest.mark.asyncio
async def test_get_with_non_string_timestamp(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"task_id": 1, "text": "a", "created_on": 12345}
    
    with pytest.raises(RemoteUnavailable, match="Unexpected response shape"):
        await task_service.get(context, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["complete", "incomplete", "start", "stop"])
async def test_lifecycle_commands(task_service, mock_podio_client, context, action):
    await getattr(task_service, action)(context, 42)
    
    mock_podio_client.request.assert_called_once_with(
        "POST", f"/task/42/{action}", context, json_data={}
    )


@pytest.mark.asyncio
async def test_assign(task_service, mock_podio_client, context):
    await task_service.assign(context, 42, 7)
    
    mock_podio_client.request.assert_called_once_with(
        "POST", "/task/42/assign", context, json_data={"responsible": 7}
    )


@pytest.mark.asyncio
async def test_update_due_date(task_service, mock_podio_client, context):
    await task_service.update_due_date(context, 42, date(2024, 3, 5))
    
    mock_podio_client.request.assert_called_once_with(
        "PUT", "/task/42/due_date", context, json_data={"due_date": "2024-03-05"}
    )


@pytest.mark.asyncio
async def test_clear_due_date(task_service, mock_podio_client, context):
    await task_service.update_due_date(context, 42, None)
    
    mock_podio_client.request.assert_called_once_with(
        "PUT", "/task/42/due_date", context, json_data={"due_date": None}
    )


@pytest.mark.asyncio
async def test_update_due_date_rejects_datetime(task_service, mock_podio_client, context):
    with pytest.raises(ValidationFailed, match="calendar date"):
        await task_service.update_due_date(context, 42, datetime(2024, 3, 1, 10, 30))
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_update_private_and_text(task_service, mock_podio_client, context):
    await task_service.update_private(context, 42, True)
    await task_service.update_text(context, 42, "New text")
    
    calls = mock_podio_client.request.call_args_list
    assert calls[0].args == ("PUT", "/task/42/private", context)
    assert calls[0].kwargs == {"json_data": {"private": True}}
    assert calls[1].args == ("PUT", "/task/42/text", context)
    assert calls[1].kwargs == {"json_data": {"text": "New text"}}


@pytest.mark.asyncio
async def test_rejection_is_surfaced(task_service, mock_podio_client, context):
    mock_podio_client.request.side_effect = RemoteRejected("HTTP 400: Task is not completed")
    
    with pytest.raises(RemoteRejected):
        await task_service.incomplete(context, 42)


@pytest.mark.asyncio
async def test_create(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"task_id": 42}
    
    task_id = await task_service.create(
        context, TaskCreate(text="Ship report", due_date=date(2024, 3, 1))
    )
    
    assert task_id == 42
    mock_podio_client.request.assert_called_once_with(
        "POST",
        "/task/",
        context,
        json_data={"text": "Ship report", "due_date": "2024-03-01", "private": False, "file_ids": []},
    )


@pytest.mark.asyncio
async def test_create_with_reference(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"task_id": 43}
    
    task_id = await task_service.create_with_reference(
        context, TaskCreate(text="Review"), Reference(type=ReferenceType.ITEM, id=7)
    )
    
    assert task_id == 43
    args = mock_podio_client.request.call_args.args
    assert args == ("POST", "/task/item/7/", context)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n"])
async def test_create_rejects_empty_text_locally(task_service, mock_podio_client, context, text):
    with pytest.raises(ValidationFailed):
        await task_service.create(context, TaskCreate(text=text))
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_update_text_rejects_empty_text_locally(task_service, mock_podio_client, context):
    with pytest.raises(ValidationFailed):
        await task_service.update_text(context, 42, "  ")
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("task_id", [0, -3, True, "42"])
async def test_bad_task_id_rejected_locally(task_service, mock_podio_client, context, task_id):
    with pytest.raises(ValidationFailed):
        await task_service.complete(context, task_id)
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_bad_values_rejected_locally(task_service, mock_podio_client, context):
    with pytest.raises(ValidationFailed):
        await task_service.assign(context, 42, 0)
    with pytest.raises(ValidationFailed):
        await task_service.update_private(context, 42, "yes")
    with pytest.raises(ValidationFailed):
        await task_service.update_due_date(context, 42, "2024-03-01")
    with pytest.raises(ValidationFailed):
        await task_service.create(context, TaskCreate(text="x", responsible=-1))
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_reference_rejected_before_remote_call(task_service, mock_podio_client, context):
    with pytest.raises(InvalidReference):
        await task_service.create_with_reference(
            context, TaskCreate(text="Review"), Reference(type=ReferenceType.ITEM, id=0)
        )
    with pytest.raises(InvalidReference):
        await task_service.list_by_reference(context, Reference(type="nonsense", id=7))
    mock_podio_client.request.assert_not_called()


@pytest.mark.asyncio
async def test_list_by_reference_strips_reference(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = [
        {"task_id": 1, "text": "a", "ref": {"type": "item", "id": 7}},
        {"task_id": 2, "text": "b", "status": "completed"},
    ]
    
    tasks = await task_service.list_by_reference(context, Reference(type=ReferenceType.ITEM, id=7))
    
    mock_podio_client.request.assert_called_once_with("GET", "/task/item/7/", context)
    assert [t.id for t in tasks] == [1, 2]
    assert all(t.reference is None for t in tasks)


@pytest.mark.asyncio
async def test_list_active_for_user_is_regrouped_and_sorted(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {
        "overdue": [],
        "today": [
            {"task_id": 2, "text": "b", "due_date": "2024-03-01", "created_on": "2024-02-02 10:00:00"},
            {"task_id": 1, "text": "a", "due_date": "2024-03-01", "created_on": "2024-02-01 10:00:00"},
        ],
        # misfiled by the service relative to the configured timezone
        "later": [{"task_id": 3, "text": "c", "due_date": "2024-03-02"}],
    }
    
    by_due = await task_service.list_active_for_user(context)
    
    mock_podio_client.request.assert_called_once_with("GET", "/task/active/", context)
    assert [t.id for t in by_due.bucket(DueStatus.TODAY)] == [1, 2]
    assert [t.id for t in by_due.tomorrow] == [3]
    assert by_due.later == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, endpoint",
    [
        ("list_active_assigned_by_user", "/task/assigned/active/"),
        ("list_started_for_user", "/task/started/"),
    ],
)
async def test_grouped_listing_endpoints(task_service, mock_podio_client, context, method, endpoint):
    mock_podio_client.request.return_value = {}
    
    by_due = await getattr(task_service, method)(context)
    
    mock_podio_client.request.assert_called_once_with("GET", endpoint, context)
    assert len(by_due) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, endpoint",
    [
        ("list_completed_for_user", "/task/completed/"),
        ("list_completed_assigned_by_user", "/task/assigned/completed/"),
    ],
)
async def test_completed_listings_sorted_by_completion(task_service, mock_podio_client, context, method, endpoint):
    mock_podio_client.request.return_value = [
        {"task_id": 1, "text": "a", "status": "completed", "completed_on": "2024-02-01 10:00:00"},
        {"task_id": 2, "text": "b", "status": "completed", "completed_on": "2024-02-03 10:00:00"},
        {"task_id": 3, "text": "c", "status": "completed", "completed_on": "2024-02-02 10:00:00"},
    ]
    
    tasks = await getattr(task_service, method)(context)
    
    mock_podio_client.request.assert_called_once_with("GET", endpoint, context)
    assert [t.id for t in tasks] == [2, 3, 1]


@pytest.mark.asyncio
async def test_list_in_space_by_due(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"overdue": [{"task_id": 1, "text": "a", "due_date": "2024-01-01"}]}
    
    by_due = await task_service.list_in_space_by_due(context, 5)
    
    mock_podio_client.request.assert_called_once_with(
        "GET", "/task/in_space/5/", context, params={"sort_by": "due_date"}
    )
    assert [t.id for t in by_due.overdue] == [1]


@pytest.mark.asyncio
async def test_list_in_space_by_responsible(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = [
        {"responsible": {"user_id": 5}, "tasks": [{"task_id": 1, "text": "a"}]},
        {"responsible": {"user_id": 6}, "tasks": []},
    ]
    
    groups = await task_service.list_in_space_by_responsible(context, 5)
    
    mock_podio_client.request.assert_called_once_with(
        "GET", "/task/in_space/5/", context, params={"sort_by": "responsible"}
    )
    assert [g.responsible for g in groups] == [5, 6]


@pytest.mark.asyncio
async def test_list_in_space_by_responsible_sorts_each_group(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = [
        {
            "responsible": {"user_id": 5},
            "tasks": [
                {"task_id": 1, "text": "no due"},
                {"task_id": 2, "text": "later", "due_date": "2024-03-09"},
                {"task_id": 3, "text": "soon, newer", "due_date": "2024-03-02", "created_on": "2024-02-20 12:00:00"},
                {"task_id": 4, "text": "soon, older", "due_date": "2024-03-02", "created_on": "2024-02-10 12:00:00"},
            ],
        },
    ]
    
    groups = await task_service.list_in_space_by_responsible(context, 5)
    
    assert [t.id for t in groups[0].tasks] == [4, 3, 2, 1]


@pytest.mark.asyncio
async def test_list_expects_list_shape(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"tasks": []}
    
    with pytest.raises(RemoteUnavailable):
        await task_service.list_completed_for_user(context)


@pytest.mark.asyncio
async def test_totals_with_and_without_space(task_service, mock_podio_client, context):
    mock_podio_client.request.return_value = {"own": {"total": 4}, "delegated": {"total": 1}}
    
    totals = await task_service.get_totals(context)
    space_totals = await task_service.get_totals(context, space_id=5)
    
    calls = mock_podio_client.request.call_args_list
    assert calls[0].args == ("GET", "/task/total", context)
    assert calls[0].kwargs == {"params": None}
    assert calls[1].kwargs == {"params": {"space_id": 5}}
    assert totals.own.total == 4
    assert space_totals.delegated.total == 1


@pytest.mark.asyncio
async def test_transport_failure_is_not_swallowed(task_service, mock_podio_client, context):
    mock_podio_client.request.side_effect = RemoteUnavailable("Request timed out")
    
    with pytest.raises(RemoteUnavailable):
        await task_service.list_active_for_user(context)
    assert mock_podio_client.request.call_count == 1


def test_today_uses_configured_timezone(mock_podio_client):
    service = TaskService(mock_podio_client, timezone="Pacific/Kiritimati")
    assert service.timezone.key == "Pacific/Kiritimati"
    assert isinstance(service.today(), date)


def test_unknown_timezone(mock_podio_client):
    with pytest.raises(ValidationFailed, match="Unknown task timezone"):
        TaskService(mock_podio_client, timezone="Mars/Olympus")
