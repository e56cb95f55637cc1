"""Tests for error types and codes."""

import pytest

from jestrun.core.errors import (
    ConfigError,
    ErrorCode,
    JestRunError,
    NoPriorCommandError,
    NotFoundError,
    RunError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CONFIG_INVALID_PATTERN, 2000),
            (ErrorCode.NO_BACKING_FILE, 7000),
            (ErrorCode.NO_TEST_BLOCK, 7000),
            (ErrorCode.NO_PRIOR_COMMAND, 7000),
            (ErrorCode.PROCESS_START_FAILED, 7000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestJestRunError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = JestRunError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = JestRunError(code=ErrorCode.NO_TEST_BLOCK, message="Nothing here")

        # When
        result = str(error)

        # Then
        assert result == "[7002] NO_TEST_BLOCK: Nothing here"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(JestRunError) as exc_info:
            raise NoPriorCommandError.empty()

        assert exc_info.value.code == ErrorCode.NO_PRIOR_COMMAND


class TestConfigError:
    """ConfigError factory method tests."""

    def test_parse_error_includes_path_and_reason(self) -> None:
        error = ConfigError.parse_error("/tmp/x.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/tmp/x.yaml" in error.message
        assert error.details == {"path": "/tmp/x.yaml", "reason": "bad indent"}

    def test_invalid_value_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("runner.root_search_step", 3, "must be 1 or 2")

        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "3"
        assert "runner.root_search_step" in error.message

    def test_invalid_pattern_names_tag(self) -> None:
        error = ConfigError.invalid_pattern("tap", "unbalanced parenthesis")

        assert error.code == ErrorCode.CONFIG_INVALID_PATTERN
        assert "'tap'" in error.message


class TestNotFoundError:
    """NotFoundError factory method tests."""

    def test_no_backing_file_without_path(self) -> None:
        error = NotFoundError.no_backing_file()

        assert error.code == ErrorCode.NO_BACKING_FILE
        assert error.message == "Buffer is not visiting a file"

    def test_no_backing_file_with_path(self) -> None:
        error = NotFoundError.no_backing_file("src/gone.test.ts")

        assert "src/gone.test.ts" in error.message

    def test_no_test_block_names_keyword(self) -> None:
        error = NotFoundError.no_test_block("a.test.js", "describe")

        assert error.code == ErrorCode.NO_TEST_BLOCK
        assert "'describe'" in error.message
        assert error.details == {"path": "a.test.js", "keyword": "describe"}


class TestRunError:
    """RunError factory method tests."""

    def test_start_failed_carries_command_and_cwd(self) -> None:
        error = RunError.start_failed("npx jest", "/nope", "No such file or directory")

        assert error.code == ErrorCode.PROCESS_START_FAILED
        assert error.details["command"] == "npx jest"
        assert error.details["working_directory"] == "/nope"
