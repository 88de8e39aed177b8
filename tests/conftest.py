"""
Pytest configuration and fixtures
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock
from podio_tasks.api.podio_client import PodioClient
from podio_tasks.models.context import UserContext
from podio_tasks.services.task_service import TaskService
from tests.fakes import FakePodioClient

TODAY = date(2024, 3, 1)


@pytest.fixture
def context():
    """Context of the calling user"""
    return UserContext(access_token="test_token", user_id=1)


@pytest.fixture
def other_context():
    """Context of a second user"""
    return UserContext(access_token="other_token", user_id=2)


@pytest.fixture
def mock_podio_client():
    """Mock Podio client"""
    client = MagicMock(spec=PodioClient)
    client.request = AsyncMock(return_value={})
    return client


@pytest.fixture
def task_service(mock_podio_client):
    """Task service over the mocked client, with a fixed today"""
    return TaskService(mock_podio_client, timezone="UTC", today_provider=lambda: TODAY)


@pytest.fixture
def fake_client():
    """In-memory Podio stand-in"""
    return FakePodioClient(today=TODAY)


@pytest.fixture
def fake_service(fake_client):
    """Task service over the in-memory stand-in"""
    return TaskService(fake_client, timezone="UTC", today_provider=lambda: TODAY)
