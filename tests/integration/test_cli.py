"""Tests for the google-tasks CLI using click's CliRunner."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from google_tasks_mcp.cli.main import cli
from google_tasks_mcp.config import ServerConfig
from google_tasks_mcp.core.errors import GENERIC_ERROR_MESSAGE

pytestmark = pytest.mark.integration


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, test_config, client):
    def _invoke(*args):
        return runner.invoke(cli, list(args), obj={"config": test_config, "client": client})

    return _invoke


def _envelope(result):
    """The response envelope line, ignoring any log lines mixed into the output."""
    for line in result.output.splitlines():
        if line.startswith('{"success"'):
            return json.loads(line)
    raise AssertionError(f"No envelope in output: {result.output!r}")


class TestToolsCommand:
    def test_lists_all_tools(self, invoke):
        result = invoke("tools")
        assert result.exit_code == 0
        envelope = _envelope(result)
        assert envelope["data"]["count"] == 4
        names = {tool["name"] for tool in envelope["data"]["tools"]}
        assert names == {"create_task", "list_tasks", "delete_task", "complete_task"}

    def test_runs_without_credentials(self, runner):
        result = runner.invoke(cli, ["tools"], obj={"config": ServerConfig(log_level="ERROR")})
        assert result.exit_code == 0


class TestCallCommand:
    def test_list_tasks(self, invoke, sample_task):
        result = invoke("call", "list_tasks")
        assert result.exit_code == 0
        assert _envelope(result)["data"]["tasks"] == [sample_task]

    def test_create_task_with_args(self, invoke, tasks_resource):
        result = invoke("call", "create_task", "--args", '{"title": "  Buy milk\\u0001"}')
        assert result.exit_code == 0
        tasks_resource.insert.assert_called_once_with(
            tasklist="@default", body={"title": "Buy milk"}
        )

    def test_output_is_minified(self, invoke):
        result = invoke("call", "list_tasks")
        line = next(l for l in result.output.splitlines() if l.startswith('{"success"'))
        assert line == json.dumps(json.loads(line), separators=(",", ":"))

    def test_validation_error_exits_1(self, invoke, tasks_resource):
        result = invoke("call", "delete_task", "--args", '{"taskId": ""}')
        assert result.exit_code == 1
        assert _envelope(result)["data"]["error_code"] == "VALIDATION_ERROR"
        tasks_resource.delete.assert_not_called()

    def test_unknown_tool_exits_1(self, invoke):
        result = invoke("call", "rename_task")
        assert result.exit_code == 1
        assert _envelope(result)["data"]["error_code"] == "METHOD_NOT_FOUND"

    def test_malformed_json_is_validation_error(self, invoke, tasks_resource):
        result = invoke("call", "create_task", "--args", "{title: nope")
        assert result.exit_code == 1
        envelope = _envelope(result)
        assert envelope["data"]["error_code"] == "VALIDATION_ERROR"
        assert envelope["data"]["details"] == {"field": "args"}
        tasks_resource.insert.assert_not_called()

    def test_remote_failure_exits_1_with_generic_message(self, invoke, tasks_resource):
        tasks_resource.patch.return_value.execute.side_effect = OSError("socket closed")
        result = invoke("call", "complete_task", "--args", '{"taskId": "abc"}')
        assert result.exit_code == 1
        envelope = _envelope(result)
        assert envelope["error"] == GENERIC_ERROR_MESSAGE
        assert "socket closed" not in json.dumps(envelope)

    def test_missing_credentials(self, runner):
        result = runner.invoke(
            cli,
            ["call", "list_tasks"],
            obj={"config": ServerConfig(log_level="ERROR")},
        )
        assert result.exit_code == 1
        assert "Missing required configuration" in result.output

    def test_client_built_from_credentials(self, runner, test_config, tasks_service):
        with patch(
            "google_tasks_mcp.core.client.build_tasks_service", return_value=tasks_service
        ) as build:
            result = runner.invoke(cli, ["call", "list_tasks"], obj={"config": test_config})
        assert result.exit_code == 0
        build.assert_called_once_with(test_config.google)
