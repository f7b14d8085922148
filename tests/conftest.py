"""
Root pytest configuration and shared fixtures.

The Google Tasks service is replaced by a ``MagicMock`` shaped like a
``googleapiclient`` resource, so ``service.tasks().insert(...).execute()``
works and every call can be asserted on.
"""

import json
import logging
from typing import Any, Dict, Union
from unittest.mock import MagicMock

import pytest
from mcp.types import TextContent

from google_tasks_mcp.config import GoogleCredentials, ServerConfig, set_config
from google_tasks_mcp.core.client import TasksClient
from google_tasks_mcp.tools.router import TaskRouter

# Response contract version from responses.py
RESPONSE_CONTRACT_VERSION = "response-v2"

SAMPLE_TASK = {
    "kind": "tasks#task",
    "id": "MTIzNDU2Nzg5",
    "title": "Buy milk",
    "status": "needsAction",
}


def extract_response_dict(result: Union[Dict[str, Any], TextContent]) -> Dict[str, Any]:
    """Extract dict from tool result, handling both dict and TextContent.

    Tools wrapped with canonical_tool return TextContent with minified JSON.

    Raises:
        TypeError: If result is neither dict nor TextContent
        json.JSONDecodeError: If TextContent.text is not valid JSON
    """
    if isinstance(result, dict):
        return result
    if isinstance(result, TextContent):
        return json.loads(result.text)
    raise TypeError(
        f"Expected dict or TextContent, got {type(result).__name__}"
    )


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the process-wide config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() calls made by the code under test."""
    package_logger = logging.getLogger("google_tasks_mcp")
    yield
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def credentials() -> GoogleCredentials:
    return GoogleCredentials(
        client_id="client-id.apps.googleusercontent.com",
        client_secret="GOCSPX-test-secret",
        redirect_uri="http://localhost:3000/oauth2callback",
        access_token="ya29.test-access-token",
        refresh_token="1//test-refresh-token-abcdefghijklmnop",
    )


@pytest.fixture
def test_config(credentials) -> ServerConfig:
    return ServerConfig(
        google=credentials,
        server_name="google-tasks-test",
        server_version="0.1.0",
        log_level="WARNING",
        log_format="human",
    )


@pytest.fixture
def sample_task() -> Dict[str, Any]:
    return dict(SAMPLE_TASK)


@pytest.fixture
def tasks_resource() -> MagicMock:
    """The object returned by ``service.tasks()``."""
    resource = MagicMock(name="tasks_resource")
    resource.list.return_value.execute.return_value = {
        "kind": "tasks#tasks",
        "items": [SAMPLE_TASK],
    }
    resource.insert.return_value.execute.return_value = SAMPLE_TASK
    resource.delete.return_value.execute.return_value = ""
    resource.patch.return_value.execute.return_value = {
        **SAMPLE_TASK,
        "status": "completed",
    }
    return resource


@pytest.fixture
def tasks_service(tasks_resource) -> MagicMock:
    service = MagicMock(name="tasks_service")
    service.tasks.return_value = tasks_resource
    return service


@pytest.fixture
def client(tasks_service) -> TasksClient:
    return TasksClient(tasks_service)


@pytest.fixture
def router(client) -> TaskRouter:
    return TaskRouter(client)
