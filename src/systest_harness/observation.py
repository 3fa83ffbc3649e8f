"""Logging observers of parsing and execution.

The harness reports progress and advisory findings through the standard
library logging; configuring handlers is left to the application.
"""

import logging
from os import linesep
from typing import TYPE_CHECKING

from systest_harness.extensions.listeners import TestLifecycleListener

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from systest_harness.package import TestCase, TestSuite
    from systest_harness.result import CaseResult, SuiteResult

logger = logging.getLogger(__name__)


class LoggingParserObserver:
    """Parser observer logging unused dependencies as warnings."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log if log is not None else logger

    def unused_dependencies(self, package_path: 'Path', unused: 'Sequence[Path]') -> None:
        """Log the dependency documents no test case references."""
        indent = f'{linesep}\t'
        self.log.warning(
            'Unused dependencies in test package.%spackage location: %s%sunused dependencies:%s',
            linesep, package_path, linesep,
            ''.join(f'{indent}{path.as_uri()}' for path in unused),
        )


class LoggingTestLifecycleListener(TestLifecycleListener):
    """Lifecycle listener logging suite and test case progress."""

    def before_suite(self, suite: 'TestSuite') -> None:
        logger.info("Starting suite '%s'", suite.name)

    def after_suite(self, suite: 'TestSuite', result: 'SuiteResult') -> None:  # noqa: ARG002
        logger.info("Finished suite '%s'", suite.name)

    def before_test(self, test_case: 'TestCase') -> None:
        logger.info("Starting test '%s'", test_case.name)

    def after_test(self, test_case: 'TestCase', result: 'CaseResult') -> None:  # noqa: ARG002
        logger.info("Finished test '%s'", test_case.name)
