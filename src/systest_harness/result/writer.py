"""Persistence of run results."""

import logging
from typing import TYPE_CHECKING, Any, Protocol

from yaml import safe_dump

if TYPE_CHECKING:
    from pathlib import Path

    from .case import CaseResult
    from .execution import ExecutionResult
    from .suite import SuiteResult

logger = logging.getLogger(__name__)

#: Name of the results file written to the results directory.
RESULTS_FILENAME = 'results.yml'


class ResultsWriter(Protocol):
    """Sink persisting the result of a run."""

    def write(self, result: 'ExecutionResult') -> None:
        """Persist a run result."""


class YamlResultsWriter:
    """Writer of a YAML summary of a run into a results directory."""

    def __init__(self, directory: 'Path') -> None:
        self.directory = directory

    @property
    def path(self) -> 'Path':
        """Path of the written results file."""
        return self.directory / RESULTS_FILENAME

    def write(self, result: 'ExecutionResult') -> None:
        """Write the run summary, replacing any previous one."""
        self.directory.mkdir(parents=True, exist_ok=True)

        with self.path.open('wt', encoding='utf-8') as output:
            safe_dump(
                self.serialize(result),
                output,
                allow_unicode=True,
                sort_keys=False,
            )

        logger.info('Results written to %s', self.path)

    @classmethod
    def serialize(cls, result: 'ExecutionResult') -> dict[str, Any]:
        """Convert a run result into plain data."""
        return {
            'passed': result.passed(),
            'tests': {
                'passed': result.passed_count,
                'failed': result.failed,
                'errors': result.errors,
                'skipped': result.skipped,
            },
            'suites': [cls._serialize_suite(suite) for suite in result.results],
        }

    @classmethod
    def _serialize_suite(cls, result: 'SuiteResult') -> dict[str, Any]:
        suite = result.test_suite
        data: dict[str, Any] = {
            'name': suite.name,
            'location': suite.location,
            'start': result.start.isoformat(),
            'duration': result.duration.total_seconds(),
            'failures': result.failures,
            'errors': result.errors,
            'skipped': result.skipped,
        }
        if result.error is not None:
            data['error'] = str(result.error)

        data['tests'] = [cls._serialize_case(case) for case in result.case_results]

        return data

    @staticmethod
    def _serialize_case(result: 'CaseResult') -> dict[str, Any]:
        data: dict[str, Any] = {
            'name': result.test_case.name,
            'outcome': str(result.outcome),
            'duration': result.duration.total_seconds(),
        }
        if (issue := result.issue) is not None:
            data['message'] = issue
        if result.skipped and result.test_case.disabled_reason is not None:
            data['message'] = result.test_case.disabled_reason

        return data
