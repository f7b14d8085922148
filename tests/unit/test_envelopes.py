"""
Tests for response helper functions and the response-v2 envelope.
"""

from dataclasses import asdict

from google_tasks_mcp.core.context import sync_request_context
from google_tasks_mcp.core.errors import (
    InvalidArgumentsError,
    MethodNotFoundError,
    RemoteServiceError,
    TaskToolError,
)
from google_tasks_mcp.core.responses import (
    RESPONSE_VERSION,
    ErrorCode,
    ErrorType,
    ToolResponse,
    error_response,
    internal_error,
    method_not_found_error,
    success_response,
    validation_error,
)


class TestToolResponse:
    """Tests for the ToolResponse dataclass."""

    def test_default_meta_has_version(self):
        response = ToolResponse(success=True)
        assert response.data == {}
        assert response.meta == {"version": RESPONSE_VERSION}

    def test_serializes_with_asdict(self):
        response = success_response(count=0)
        assert set(asdict(response)) == {"success", "data", "error", "meta"}


class TestSuccessResponse:
    def test_kwargs_become_data(self):
        response = success_response(task={"id": "abc"})
        assert response.success is True
        assert response.error is None
        assert response.data == {"task": {"id": "abc"}}

    def test_data_and_kwargs_merge(self):
        response = success_response({"tasks": []}, count=0)
        assert response.data == {"tasks": [], "count": 0}

    def test_warnings_and_telemetry_in_meta(self):
        response = success_response(warnings=["slow"], telemetry={"duration_ms": 1.5})
        assert response.meta["warnings"] == ["slow"]
        assert response.meta["telemetry"] == {"duration_ms": 1.5}

    def test_request_id_from_context(self):
        with sync_request_context(correlation_id="tool_abc123"):
            response = success_response()
        assert response.meta["request_id"] == "tool_abc123"

    def test_no_request_id_outside_context(self):
        assert "request_id" not in success_response().meta


class TestErrorResponse:
    def test_defaults_to_internal(self):
        response = error_response("boom")
        assert response.success is False
        assert response.error == "boom"
        assert response.data["error_code"] == "INTERNAL_ERROR"
        assert response.data["error_type"] == "internal"

    def test_accepts_enum_or_string_codes(self):
        by_enum = error_response(
            "bad", error_code=ErrorCode.VALIDATION_ERROR, error_type=ErrorType.VALIDATION
        )
        by_string = error_response(
            "bad", error_code="VALIDATION_ERROR", error_type="validation"
        )
        assert by_enum.data == by_string.data

    def test_validation_error_includes_field(self):
        response = validation_error(
            "Task title cannot be empty after sanitization.",
            field="title",
            remediation="Provide a 'title' with visible characters",
        )
        assert response.data == {
            "error_code": "VALIDATION_ERROR",
            "error_type": "validation",
            "remediation": "Provide a 'title' with visible characters",
            "details": {"field": "title"},
        }

    def test_method_not_found_lists_allowed(self):
        response = method_not_found_error("rename_task", ["create_task", "list_tasks"])
        assert response.error == "Unknown tool: rename_task"
        assert response.data["error_code"] == "METHOD_NOT_FOUND"
        assert response.data["error_type"] == "not_found"
        assert response.data["remediation"] == "Use one of: create_task, list_tasks"
        assert response.data["details"]["allowed_tools"] == ["create_task", "list_tasks"]

    def test_internal_error_references_request_id(self):
        with sync_request_context(correlation_id="tool_ref42"):
            response = internal_error("An error occurred while processing your request")
        assert response.meta["request_id"] == "tool_ref42"
        assert response.data["remediation"].endswith("Reference: tool_ref42")


class TestErrorHierarchy:
    def test_codes_match_envelope_kinds(self):
        assert InvalidArgumentsError.error_code is ErrorCode.VALIDATION_ERROR
        assert InvalidArgumentsError.error_type is ErrorType.VALIDATION
        assert MethodNotFoundError.error_code is ErrorCode.METHOD_NOT_FOUND
        assert MethodNotFoundError.error_type is ErrorType.NOT_FOUND
        assert RemoteServiceError.error_code is ErrorCode.INTERNAL_ERROR
        assert RemoteServiceError.error_type is ErrorType.INTERNAL

    def test_all_share_base_class(self):
        for cls in (InvalidArgumentsError, MethodNotFoundError, RemoteServiceError):
            assert issubclass(cls, TaskToolError)

    def test_invalid_arguments_details(self):
        error = InvalidArgumentsError("bad", field="taskId", action="delete_task")
        assert error.details == {"field": "taskId", "action": "delete_task"}
