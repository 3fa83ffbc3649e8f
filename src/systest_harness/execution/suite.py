"""Execution of a single test suite."""

import logging
from typing import TYPE_CHECKING

from systest_harness.errors import (
    ExecutionError,
    HandlerNotRegisteredError,
    SuiteExecutionError,
    SuiteTeardownError,
)
from systest_harness.result import CaseResult, SuiteResult, utc_now

from .case import TestCaseExecutor, chained
from .inputters import Inputters
from .verifiers import Verifiers

if TYPE_CHECKING:
    from datetime import timedelta

    from systest_harness.extensions import ListenerRegistry, ModelRegistry, TestListeners
    from systest_harness.package import TestSuite
    from systest_harness.result import Clock, SuiteResultBuilder

logger = logging.getLogger(__name__)


class TestSuiteExecutor:
    """Executor of the lifecycle of a test suite.

    Every suite runs with a fresh set of listeners and dispatchers. The
    lifecycle is: before-suite listeners and seeding, then the test cases
    in declaration order, then after-suite listeners in reverse order.
    A setup failure is recorded as a suite error; failures while running
    the test cases and teardown failures abort the caller.
    """

    __test__ = False

    def __init__(self, model: 'ModelRegistry', listeners: 'ListenerRegistry',
                 verifier_timeout: 'timedelta', clock: 'Clock' = utc_now) -> None:
        """Initialize the executor.

        Args:
            model: Registry of element types and their handlers. Frozen
                on initialization.
            listeners: Registry of listener factories.
            verifier_timeout: Upper bound verifiers may wait for expectations.
            clock: Source of the current time.
        """
        model.freeze()

        self.model = model
        self.listeners = listeners
        self.verifier_timeout = verifier_timeout
        self.clock = clock

    def execute(self, suite: 'TestSuite') -> SuiteResult:
        """Execute a test suite.

        Args:
            suite: Suite to execute.

        Returns:
            Result of the suite.

        Raises:
            SuiteExecutionError: If running the test cases fails.
            SuiteTeardownError: If an after-suite listener raises.
            CaseTeardownError: If an after-test listener raises.
            HandlerNotRegisteredError: If an element type has no handler.
        """
        builder = SuiteResult.builder(suite, self.clock)

        if suite.disabled is not None:
            logger.info(
                'Skipping disabled suite: %s, reason: %s',
                suite.name, suite.disabled.reason,
            )
            for test_case in suite.cases:
                builder.add(CaseResult.builder(test_case, self.clock).skipped())
            return builder.build()

        listeners = self.listeners.create()
        inputters = Inputters(self.model)
        case_executor = TestCaseExecutor(
            listeners,
            inputters,
            Verifiers(self.model, self.verifier_timeout),
            clock=self.clock,
        )

        try:
            if self._setup(suite, listeners, inputters, builder):
                self._run(suite, case_executor, builder)

        finally:
            result = builder.build()
            self._teardown(suite, listeners, result)

        return result

    @staticmethod
    def _setup(suite: 'TestSuite', listeners: 'TestListeners',
               inputters: Inputters, builder: 'SuiteResultBuilder') -> bool:
        """Invoke before-suite listeners and feed the seed data.

        Returns:
            Whether the setup succeeded.
        """
        try:
            listeners.for_each(lambda listener: listener.before_suite(suite))
            inputters.input(suite.package.seed_data, suite)

        except HandlerNotRegisteredError:
            raise

        except Exception as base:
            logger.exception('Suite setup failed for test suite: %s', suite.name)
            builder.error(chained(ExecutionError(
                f'Suite setup failed for test suite: {suite.name}, cause: {base}',
            ), base))
            return False

        return True

    @staticmethod
    def _run(suite: 'TestSuite', case_executor: TestCaseExecutor,
             builder: 'SuiteResultBuilder') -> None:
        """Execute the test cases in declaration order."""
        try:
            for test_case in suite.cases:
                builder.add(case_executor.execute(test_case))

        except (ExecutionError, HandlerNotRegisteredError):
            raise

        except Exception as base:
            raise SuiteExecutionError(
                f'Suite execution failed for test suite: {suite.name}, cause: {base}',
            ) from base

    @staticmethod
    def _teardown(suite: 'TestSuite', listeners: 'TestListeners',
                  result: SuiteResult) -> None:
        """Invoke after-suite listeners in reverse order."""
        try:
            listeners.for_each_reverse(lambda listener: listener.after_suite(suite, result))

        except Exception as base:
            raise SuiteTeardownError(
                f'Suite teardown failed for test suite: {suite.name}, cause: {base}',
            ) from base
