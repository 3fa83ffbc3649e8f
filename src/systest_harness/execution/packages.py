"""Execution of every discovered test package."""

import logging
from typing import TYPE_CHECKING

from systest_harness.result import ExecutionResult

if TYPE_CHECKING:
    from systest_harness.core import TestPackagesLoader
    from systest_harness.result import ResultsWriter, SuiteResult

    from .suite import TestSuiteExecutor

logger = logging.getLogger(__name__)


class TestPackagesExecutor:
    """Executor of the suites of every package a loader discovers."""

    __test__ = False

    def __init__(self, loader: 'TestPackagesLoader', suite_executor: 'TestSuiteExecutor',
                 results_writer: 'ResultsWriter') -> None:
        self.loader = loader
        self.suite_executor = suite_executor
        self.results_writer = results_writer

    def execute(self) -> ExecutionResult:
        """Execute every suite of every package.

        The package stream is closed once consumed, including when
        execution raises. Results are written when at least one suite ran.

        Returns:
            Result of the run.

        Raises:
            TestLoadError: If a package can not be loaded.
            ExecutionError: If a suite or test case teardown fails.
        """
        results: list[SuiteResult] = []

        with self.loader.stream() as packages:
            for package in packages:
                logger.debug('Executing test package: %s', package.root)
                results.extend(
                    self.suite_executor.execute(suite)
                    for suite in package.suites
                )

        result = ExecutionResult.of(results)
        if not result.is_empty():
            self.results_writer.write(result)

        return result
