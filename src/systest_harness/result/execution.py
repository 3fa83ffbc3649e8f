"""Whole run result record."""

from typing import TYPE_CHECKING

from pydantic import Field

from systest_harness.models import SchemaModel

from .suite import SuiteResult

if TYPE_CHECKING:
    from collections.abc import Iterable


class ExecutionResult(SchemaModel):
    """Immutable result of a test run across every executed suite."""

    results: tuple[SuiteResult, ...] = Field(
        default=(),
        title='Suite results',
        description='Results of the executed suites in execution order.',
    )

    @classmethod
    def of(cls, results: 'Iterable[SuiteResult]') -> 'ExecutionResult':
        """Create a run result from suite results."""
        return cls(results=tuple(results))

    def is_empty(self) -> bool:
        """Whether no suite was executed."""
        return not self.results

    @property
    def passed_count(self) -> int:
        """Number of successful test cases."""
        return sum(result.passed for result in self.results)

    @property
    def failed(self) -> int:
        """Number of test cases with unmet expectations."""
        return sum(result.failures for result in self.results)

    @property
    def errors(self) -> int:
        """Number of errored test cases."""
        return sum(result.errors for result in self.results)

    @property
    def skipped(self) -> int:
        """Number of skipped test cases."""
        return sum(result.skipped for result in self.results)

    def passed(self) -> bool:
        """Whether the run had neither failures nor errors."""
        return self.failed == 0 and self.errors == 0

    def combine(self, other: 'ExecutionResult') -> 'ExecutionResult':
        """Create a run result holding the suites of both results."""
        return ExecutionResult(results=(*self.results, *other.results))
