"""Test case result records."""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import Field

from systest_harness.models import SchemaModel
from systest_harness.package import TestCase  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Callable

#: Source of the current time used to time executions.
type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get the current UTC time."""
    return datetime.now(UTC)


class Outcome(StrEnum):
    """Outcome of a test case."""

    PASSED = 'passed'
    SKIPPED = 'skipped'
    FAILED = 'failed'
    ERROR = 'error'


class CaseResult(SchemaModel):
    """Immutable result of a single test case.

    A result is exactly one of skipped, successful, failed (an unmet
    expectation) or errored (any other exception).
    """

    test_case: TestCase = Field(
        title='Test case',
        description='Executed test case.',
    )

    start: datetime = Field(
        title='Start',
        description='Time the test case execution started.',
    )

    duration: timedelta = Field(
        title='Duration',
        description='Time the test case execution took.',
    )

    skipped: bool = Field(
        default=False,
        title='Skipped',
        description='Whether the test case was not run.',
    )

    failure: AssertionError | None = Field(
        default=None,
        title='Failure',
        description='Unmet expectation, if the test case failed.',
    )

    error: Exception | None = Field(
        default=None,
        title='Error',
        description='Unexpected exception, if the test case errored.',
    )

    @classmethod
    def builder(cls, test_case: TestCase, clock: 'Clock' = utc_now) -> 'CaseResultBuilder':
        """Start timing the execution of a test case.

        Args:
            test_case: Test case being executed.
            clock: Source of the current time.

        Returns:
            Builder producing the result.
        """
        return CaseResultBuilder(test_case, clock)

    @property
    def outcome(self) -> Outcome:
        """Outcome of the test case."""
        if self.skipped:
            return Outcome.SKIPPED

        if self.failure is not None:
            return Outcome.FAILED

        if self.error is not None:
            return Outcome.ERROR

        return Outcome.PASSED

    @property
    def passed(self) -> bool:
        """Whether the test case ran and succeeded."""
        return self.outcome is Outcome.PASSED

    @property
    def issue(self) -> str | None:
        """Message of the failure or error, if any."""
        if self.failure is not None:
            return str(self.failure)

        if self.error is not None:
            return str(self.error)

        return None


class CaseResultBuilder:
    """Builder of a single test case result.

    The builder records the start time when created and the duration when
    the result is built.
    """

    def __init__(self, test_case: TestCase, clock: 'Clock' = utc_now) -> None:
        self.test_case = test_case
        self.clock = clock
        self.start = clock()

    def skipped(self) -> CaseResult:
        """Build the result of a disabled test case."""
        return self._build(skipped=True)

    def success(self) -> CaseResult:
        """Build the result of a successful test case."""
        return self._build()

    def failure(self, failure: AssertionError) -> CaseResult:
        """Build the result of a test case with an unmet expectation."""
        return self._build(failure=failure)

    def error(self, error: Exception) -> CaseResult:
        """Build the result of a test case that raised unexpectedly."""
        return self._build(error=error)

    def _build(self, *, skipped: bool = False,
               failure: AssertionError | None = None,
               error: Exception | None = None) -> CaseResult:
        return CaseResult(
            test_case=self.test_case,
            start=self.start,
            duration=self.clock() - self.start,
            skipped=skipped,
            failure=failure,
            error=error,
        )
