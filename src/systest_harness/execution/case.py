"""Execution of a single test case."""

import logging
from typing import TYPE_CHECKING

from systest_harness.errors import CaseTeardownError, ExecutionError, HandlerNotRegisteredError
from systest_harness.result import CaseResult, utc_now

if TYPE_CHECKING:
    from systest_harness.extensions import TestListeners
    from systest_harness.package import TestCase
    from systest_harness.result import CaseResultBuilder, Clock

    from .inputters import Inputters
    from .verifiers import Verifiers

logger = logging.getLogger(__name__)


def chained[E: Exception](error: E, cause: BaseException) -> E:
    """Attach a cause to an error recorded instead of raised."""
    error.__cause__ = cause

    return error


class TestCaseExecutor:
    """Executor of the lifecycle of a single test case.

    The lifecycle is: before-test listeners in registration order, then
    the run unless the case is disabled, then after-test listeners in
    reverse registration order. Setup and run problems are recorded in
    the result; teardown problems abort the caller.
    """

    __test__ = False

    def __init__(self, listeners: 'TestListeners', inputters: 'Inputters',
                 verifiers: 'Verifiers', clock: 'Clock' = utc_now) -> None:
        self.listeners = listeners
        self.inputters = inputters
        self.verifiers = verifiers
        self.clock = clock

    def execute(self, test_case: 'TestCase') -> CaseResult:
        """Execute a test case.

        Args:
            test_case: Test case to execute.

        Returns:
            Result of the test case.

        Raises:
            CaseTeardownError: If an after-test listener raises.
            HandlerNotRegisteredError: If an element type has no handler.
        """
        builder = CaseResult.builder(test_case, self.clock)

        try:
            result = self._setup(test_case, builder)
            if result is None:
                result = self._run(test_case, builder)

        except HandlerNotRegisteredError as error:
            self._teardown(test_case, builder.error(error))
            raise

        self._teardown(test_case, result)

        return result

    def _setup(self, test_case: 'TestCase', builder: 'CaseResultBuilder') -> CaseResult | None:
        """Invoke before-test listeners and skip disabled test cases."""
        try:
            self.listeners.for_each(lambda listener: listener.before_test(test_case))

        except Exception as base:
            logger.exception('Test setup failed for test case: %s', test_case.name)
            return builder.error(chained(ExecutionError(
                f'Test setup failed for test case: {test_case.name}, cause: {base}',
            ), base))

        if test_case.disabled is not None:
            logger.info(
                'Skipping disabled test case: %s, reason: %s',
                test_case.name, test_case.disabled_reason,
            )
            return builder.skipped()

        return None

    def _run(self, test_case: 'TestCase', builder: 'CaseResultBuilder') -> CaseResult:
        """Prepare the verifier, feed the inputs and verify."""
        try:
            verifier = self.verifiers.prepare(test_case.expectations, test_case)
            self.inputters.input(test_case.inputs, test_case.suite)
            verifier.verify()

        except AssertionError as failure:
            return builder.failure(failure)

        except HandlerNotRegisteredError:
            raise

        except Exception as base:
            logger.exception('Test run failed for test case: %s', test_case.name)
            return builder.error(chained(ExecutionError(
                f'Test run failed for test case: {test_case.name}, cause: {base}',
            ), base))

        return builder.success()

    def _teardown(self, test_case: 'TestCase', result: CaseResult) -> None:
        """Invoke after-test listeners in reverse order."""
        try:
            self.listeners.for_each_reverse(
                lambda listener: listener.after_test(test_case, result),
            )

        except Exception as base:
            raise CaseTeardownError(
                f'Test teardown failed for test case: {test_case.name}, cause: {base}',
            ) from base
