"""Google Tasks API adapter for the default task list.

Every method issues exactly one call against ``@default`` and returns the
remote representation unchanged. Any failure on the remote path is logged
with its real cause and re-raised as ``RemoteServiceError``, whose message is
generic.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from google_tasks_mcp.config import GoogleCredentials
from google_tasks_mcp.core.errors import RemoteServiceError
from google_tasks_mcp.core.observability import get_audit_logger, redact_sensitive_data

logger = logging.getLogger(__name__)

GOOGLE_TASKS_API_VERSION = "v1"
TASKS_SCOPE = "https://www.googleapis.com/auth/tasks"
DEFAULT_TASK_LIST = "@default"


def build_tasks_service(credentials: GoogleCredentials) -> Any:
    """Build a Tasks API service object from configured OAuth credentials.

    google-auth refreshes the access token with the refresh token when it
    expires. The discovery document bundled with google-api-python-client is
    used, so building the service does not touch the network.
    """
    oauth_credentials = Credentials(
        token=credentials.access_token,
        refresh_token=credentials.refresh_token,
        token_uri=credentials.token_uri,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret,
        scopes=[TASKS_SCOPE],
    )
    return build(
        "tasks",
        GOOGLE_TASKS_API_VERSION,
        credentials=oauth_credentials,
        cache_discovery=False,
    )


class TasksClient:
    """Thin pass-through over ``service.tasks()`` for a single task list."""

    def __init__(self, service: Any, *, tasklist: str = DEFAULT_TASK_LIST) -> None:
        self._service = service
        self.tasklist = tasklist

    @classmethod
    def from_credentials(cls, credentials: GoogleCredentials) -> "TasksClient":
        return cls(build_tasks_service(credentials))

    def list_tasks(self) -> List[Dict[str, Any]]:
        """Return the tasks of the default list; an empty list has no ``items``."""
        response = self._execute(
            "list",
            lambda tasks: tasks.list(tasklist=self.tasklist),
        )
        return list((response or {}).get("items") or [])

    def create_task(
        self,
        title: str,
        notes: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"title": title}
        if notes is not None:
            body["notes"] = notes
        if status is not None:
            body["status"] = status
        return self._execute(
            "insert",
            lambda tasks: tasks.insert(tasklist=self.tasklist, body=body),
        )

    def delete_task(self, task_id: str) -> None:
        self._execute(
            "delete",
            lambda tasks: tasks.delete(tasklist=self.tasklist, task=task_id),
        )

    def set_status(self, task_id: str, status: str) -> Dict[str, Any]:
        """Partial update touching only ``status``."""
        return self._execute(
            "patch",
            lambda tasks: tasks.patch(
                tasklist=self.tasklist, task=task_id, body={"status": status}
            ),
        )

    def _execute(self, operation: str, make_request: Callable[[Any], Any]) -> Any:
        try:
            return make_request(self._service.tasks()).execute()
        except Exception as exc:
            logger.exception(
                "Google Tasks %s failed: %s: %s",
                operation,
                type(exc).__name__,
                redact_sensitive_data(str(exc)),
            )
            get_audit_logger().remote_failure(operation, exc)
            raise RemoteServiceError(operation) from exc


__all__ = [
    "DEFAULT_TASK_LIST",
    "GOOGLE_TASKS_API_VERSION",
    "TASKS_SCOPE",
    "TasksClient",
    "build_tasks_service",
]
