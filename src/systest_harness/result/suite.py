"""Test suite result records."""

from datetime import datetime, timedelta  # noqa: TC003
from typing import TYPE_CHECKING

from pydantic import Field

from systest_harness.models import SchemaModel
from systest_harness.package import TestSuite  # noqa: TC001

from .case import CaseResult, Outcome, utc_now

if TYPE_CHECKING:
    from .case import Clock


class SuiteResult(SchemaModel):
    """Immutable result of a test suite.

    A suite result either aggregates the results of its test cases or
    carries a suite-level setup error, never both. A setup error counts
    as an error of every test case declared by the suite.
    """

    test_suite: TestSuite = Field(
        title='Test suite',
        description='Executed test suite.',
    )

    start: datetime = Field(
        title='Start',
        description='Time the suite execution started.',
    )

    duration: timedelta = Field(
        title='Duration',
        description='Time the suite execution took.',
    )

    case_results: tuple[CaseResult, ...] = Field(
        default=(),
        title='Test case results',
        description='Results of the executed test cases in execution order.',
    )

    error: Exception | None = Field(
        default=None,
        title='Error',
        description='Suite-level setup error, if the suite could not run.',
    )

    @classmethod
    def builder(cls, test_suite: TestSuite, clock: 'Clock' = utc_now) -> 'SuiteResultBuilder':
        """Start timing the execution of a test suite.

        Args:
            test_suite: Test suite being executed.
            clock: Source of the current time.

        Returns:
            Builder producing the result.
        """
        return SuiteResultBuilder(test_suite, clock)

    def test_results(self) -> tuple[CaseResult, ...]:
        """Get the results of the executed test cases."""
        return self.case_results

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for result in self.case_results if result.outcome is outcome)

    @property
    def passed(self) -> int:
        """Number of successful test cases."""
        return self._count(Outcome.PASSED)

    @property
    def skipped(self) -> int:
        """Number of skipped test cases."""
        return self._count(Outcome.SKIPPED)

    @property
    def failures(self) -> int:
        """Number of test cases with unmet expectations."""
        return self._count(Outcome.FAILED)

    @property
    def errors(self) -> int:
        """Number of errored test cases.

        Every declared test case counts as errored when the suite itself
        failed to set up.
        """
        if self.error is not None:
            return len(self.test_suite.cases)

        return self._count(Outcome.ERROR)


class SuiteResultBuilder:
    """Append-only builder of a test suite result."""

    def __init__(self, test_suite: TestSuite, clock: 'Clock' = utc_now) -> None:
        self.test_suite = test_suite
        self.clock = clock
        self.start = clock()

        self._case_results: list[CaseResult] = []
        self._error: Exception | None = None

    def add(self, result: CaseResult) -> 'SuiteResultBuilder':
        """Append the result of a test case of the suite.

        Raises:
            ValueError: If the suite already has a setup error or the test
                case belongs to another suite.
        """
        if self._error is not None:
            raise ValueError('Suite result already has a setup error')

        if result.test_case.suite is not self.test_suite:
            raise ValueError(
                f'Test case {result.test_case.name!r} does not belong '
                f'to suite {self.test_suite.name!r}',
            )

        self._case_results.append(result)

        return self

    def error(self, error: Exception) -> 'SuiteResultBuilder':
        """Record a suite-level setup error.

        Raises:
            ValueError: If test case results were already added.
        """
        if self._case_results:
            raise ValueError('Suite result already has test case results')

        self._error = error

        return self

    def build(self) -> SuiteResult:
        """Build the suite result, recording its duration."""
        return SuiteResult(
            test_suite=self.test_suite,
            start=self.start,
            duration=self.clock() - self.start,
            case_results=tuple(self._case_results),
            error=self._error,
        )
