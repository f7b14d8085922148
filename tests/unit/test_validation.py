"""Tests for argument sanitization and length/enum checks."""

import pytest

from google_tasks_mcp.core.errors import InvalidArgumentsError
from google_tasks_mcp.core.validation import (
    MAX_NOTES_LENGTH,
    MAX_TITLE_LENGTH,
    is_valid_task_status,
    optional_text,
    require_text,
    sanitize_string,
    validate_status,
)


class TestSanitizeString:
    """Tests for sanitize_string."""

    def test_trims_surrounding_whitespace(self):
        assert sanitize_string("  Buy milk \n") == "Buy milk"

    def test_removes_control_characters(self):
        assert sanitize_string("Buy\x00 milk\x07") == "Buy milk"

    def test_removes_delete_character(self):
        assert sanitize_string("milk\x7f") == "milk"

    def test_trims_whitespace_hidden_behind_control_characters(self):
        """Control chars are removed before trimming."""
        assert sanitize_string("  Buy milk \x01") == "Buy milk"

    def test_keeps_interior_whitespace_and_unicode(self):
        assert sanitize_string("Lait  entier é") == "Lait  entier é"

    def test_only_control_characters_becomes_empty(self):
        assert sanitize_string("\x01\x02 \t\x1f") == ""

    def test_non_string_rejected(self):
        with pytest.raises(InvalidArgumentsError, match="Input must be a string"):
            sanitize_string(42)


class TestRequireText:
    """Tests for required free-text arguments."""

    def _title(self, arguments):
        return require_text(
            arguments,
            "title",
            action="create_task",
            max_length=MAX_TITLE_LENGTH,
            label="Task title",
        )

    def test_returns_sanitized_value(self):
        assert self._title({"title": " Groceries\x02 "}) == "Groceries"

    def test_missing_key_rejected(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            self._title({})
        assert exc_info.value.field == "title"
        assert exc_info.value.action == "create_task"

    def test_empty_string_rejected(self):
        with pytest.raises(InvalidArgumentsError, match="non-empty string"):
            self._title({"title": ""})

    def test_non_string_rejected(self):
        with pytest.raises(InvalidArgumentsError):
            self._title({"title": ["Buy milk"]})

    def test_max_length_accepted(self):
        assert self._title({"title": "a" * MAX_TITLE_LENGTH}) == "a" * MAX_TITLE_LENGTH

    def test_over_max_length_rejected(self):
        with pytest.raises(InvalidArgumentsError, match="exceeds 256 characters"):
            self._title({"title": "a" * (MAX_TITLE_LENGTH + 1)})

    def test_length_checked_before_sanitizing(self):
        """Padding counts toward the ceiling even though it would be trimmed."""
        with pytest.raises(InvalidArgumentsError, match="exceeds"):
            self._title({"title": "a" * MAX_TITLE_LENGTH + " "})

    def test_whitespace_only_rejected_after_sanitization(self):
        with pytest.raises(
            InvalidArgumentsError, match="Task title cannot be empty after sanitization."
        ):
            self._title({"title": " \x01\t "})


class TestOptionalText:
    """Tests for optional free-text arguments."""

    def _notes(self, arguments):
        return optional_text(
            arguments, "notes", action="create_task", max_length=MAX_NOTES_LENGTH
        )

    def test_absent_returns_none(self):
        assert self._notes({}) is None

    def test_explicit_none_returns_none(self):
        assert self._notes({"notes": None}) is None

    def test_sanitizes_to_empty_returns_none(self):
        assert self._notes({"notes": "  \x00 "}) is None

    def test_returns_sanitized_value(self):
        assert self._notes({"notes": "\tsemi-skimmed\n"}) == "semi-skimmed"

    def test_over_max_length_rejected(self):
        with pytest.raises(InvalidArgumentsError, match="exceeds 8192 characters"):
            self._notes({"notes": "n" * (MAX_NOTES_LENGTH + 1)})

    def test_non_string_rejected(self):
        with pytest.raises(InvalidArgumentsError, match="must be a string"):
            self._notes({"notes": 7})


class TestStatus:
    """Tests for status enumeration checks."""

    @pytest.mark.parametrize("status", ["needsAction", "completed"])
    def test_valid_statuses(self, status):
        assert is_valid_task_status(status)
        assert validate_status(status, action="complete_task") == status

    @pytest.mark.parametrize("status", ["done", "COMPLETED", "", None, 1])
    def test_invalid_statuses(self, status):
        assert not is_valid_task_status(status)
        with pytest.raises(InvalidArgumentsError) as exc_info:
            validate_status(status, action="complete_task")
        assert exc_info.value.message == (
            "Invalid task status. Must be 'needsAction' or 'completed'."
        )
        assert exc_info.value.details == {"field": "status", "action": "complete_task"}
