"""Preparation of expectation verifiers by their registered handlers."""

from typing import TYPE_CHECKING

from systest_harness.extensions import ExpectationOptions, Verifier

from .inputters import SuiteOptions, group_by_type

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import timedelta

    from systest_harness.extensions import ModelRegistry
    from systest_harness.package import TestCase, TestSuite
    from systest_harness.schema import Expectation


class VerificationOptions(SuiteOptions, ExpectationOptions):
    """Options of a suite with the verification timeout."""

    def __init__(self, suite: 'TestSuite', timeout: 'timedelta') -> None:
        super().__init__(suite)
        self._timeout = timeout

    @property
    def timeout(self) -> 'timedelta':
        return self._timeout


class CompositeVerifier(Verifier):
    """Verifier running verifiers in order, stopping at the first failure."""

    def __init__(self, verifiers: 'Sequence[Verifier]') -> None:
        self.verifiers = tuple(verifiers)

    def verify(self) -> None:
        for verifier in self.verifiers:
            verifier.verify()


class Verifiers:
    """Dispatcher preparing expectations with the handlers of their types."""

    def __init__(self, model: 'ModelRegistry', timeout: 'timedelta') -> None:
        self.model = model
        self.timeout = timeout

    def prepare(self, expectations: 'Iterable[Expectation]',
                test_case: 'TestCase') -> CompositeVerifier:
        """Prepare the verification of expectations.

        Expectations are grouped by type in first-seen order and each
        group is prepared once by the handler of its type.

        Args:
            expectations: Expectations in declaration order.
            test_case: Test case whose suite provides the handler options.

        Returns:
            Verifier running the prepared verifiers in group order.

        Raises:
            HandlerNotRegisteredError: If an expectation type has no handler.
        """
        groups = [
            (self.model.expectation_handler(expectation_type), items)
            for expectation_type, items in group_by_type(expectations).items()
        ]

        options = VerificationOptions(test_case.suite, self.timeout)

        return CompositeVerifier([
            handler.prepare(items, options)
            for handler, items in groups
        ])
