"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report extension loading issues, test package parsing failures and
execution errors in a structured and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, TypedDict

from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint
    from typing import Self

    from pydantic_core import ErrorDetails, ValidationError

FORMAT_FILENAME = '<unknown file>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file (zero based).
    line_num: int | None
    #: Column number in the source file (zero based).
    column_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None


class ErrorFormatter:
    """Utility class for formatting harness errors.

    This formatter is responsible for producing human-readable
    error messages with optional source location and YAML snippets.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message.rstrip()

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line
            and column when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a snippet of the YAML source around the error.

        Args:
            context: Error context containing the underlying exception.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        error = context.get('error')
        if not isinstance(error, MarkedYAMLError) or error.problem_mark is None:
            return ''

        snippet = error.problem_mark.get_snippet(indent=0) or ''

        return cls._make_indent(snippet, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal extension-related issues.

    This warning is used when an extension cannot be loaded or
    initialized, but the problem does not prevent further execution
    (for example, when running in relaxed mode).
    """


class HarnessError(Exception, ErrorFormatter):
    """Base exception for all harness errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Optional error context with location data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class PluginError(HarnessError):
    """Error raised for fatal extension-related failures.

    This exception is raised when an extension entry point is invalid,
    misconfigured, or fails to load in strict mode.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize an extension error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class ModelTypeError(PluginError):
    """Error raised when a model type can not be registered."""


class TestLoadError(HarnessError):
    """Error raised when test packages can not be located or read."""

    __test__ = False


class InvalidTestFileError(TestLoadError):
    """Error raised when a test document is invalid.

    Covers malformed YAML, unknown or duplicate fields, null values
    where they are not permitted, and unresolved references.
    """

    @classmethod
    def from_yaml_error(cls, message: str, error: MarkedYAMLError) -> 'Self':
        """Create a file error from a YAML parsing failure.

        Args:
            message: Leading message identifying the failed document.
            error: Exception raised by the YAML parser.

        Returns:
            InvalidTestFileError carrying the YAML location and snippet.
        """
        mark = error.problem_mark or error.context_mark
        error_context = ErrorContext(error=error)
        if mark is not None:
            error_context.update(
                filename=mark.name,
                line_num=mark.line,
                column_num=mark.column,
            )

        problem = error.problem or error.context or 'Invalid YAML'
        message += f'{linesep}{' ' * FORMAT_INDENT}{problem}'

        return cls(message, context=error_context)

    @classmethod
    def from_pydantic_error(cls, message: str, error: 'ValidationError', *,
                            filename: str | None = None) -> 'Self':
        """Create a file error from a Pydantic validation failure.

        Args:
            message: Leading message identifying the failed document.
            error: ValidationError raised by Pydantic.
            filename: Name of the source file being validated.

        Returns:
            InvalidTestFileError listing every validation issue.
        """
        error_context = ErrorContext(filename=filename, error=error)

        for item in error.errors(include_url=False, include_input=False):
            message += f'{linesep}{' ' * FORMAT_INDENT}{cls._describe_issue(item)}'

        return cls(message, context=error_context)

    @staticmethod
    def _describe_issue(error: 'ErrorDetails') -> str:
        """Render a single Pydantic issue as `path: message`."""
        path = '.'.join(str(item) for item in error['loc'])
        if not path:
            return error['msg']

        return f'{path}: {error['msg']}'


class MissingDependencyError(TestLoadError):
    """Error raised when a reference names an unknown dependency."""

    def __init__(self, dependency_id: str, location: str | None = None) -> None:
        """Initialize a missing dependency error.

        Args:
            dependency_id: Identifier the reference could not resolve.
            location: Location of the referencing document element.
        """
        self.dependency_id = dependency_id
        self.location = location

        message = f'Missing dependency: {dependency_id}'
        if location:
            message += f', referenced: {location}'

        super().__init__(message)


class HandlerNotRegisteredError(HarnessError):
    """Error raised when no handler is registered for an element type."""

    def __init__(self, kind: str, model: type) -> None:
        """Initialize the error.

        Args:
            kind: Element kind, `input` or `expectation`.
            model: Concrete type without a registered handler.
        """
        self.model = model

        super().__init__(
            f'No handler registered for {kind} type: '
            f'{model.__module__}.{model.__qualname__}',
        )


class ExecutionError(HarnessError):
    """Base error for test execution failures."""


class CaseTeardownError(ExecutionError):
    """Error raised when after-test listeners fail."""


class SuiteExecutionError(ExecutionError):
    """Error raised when a suite fails outside of an isolated test case."""


class SuiteTeardownError(ExecutionError):
    """Error raised when after-suite listeners fail."""
