"""Test lifecycle listeners.

Extensions hook into suite and test case execution by registering
listener factories. A fresh set of listeners is created for each suite,
so state held by a listener never leaks between suites.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from systest_harness.package import TestCase, TestSuite
    from systest_harness.result import CaseResult, SuiteResult

#: Zero-argument callable creating a listener, usually the listener class.
type ListenerFactory = Callable[[], TestLifecycleListener]


class TestLifecycleListener:
    """Listener of suite and test case lifecycle events.

    Every hook is a no-op by default. Before-hooks are invoked in
    registration order and after-hooks in reverse registration order.
    """

    __test__ = False

    def before_suite(self, suite: 'TestSuite') -> None:
        """Invoked before a suite is set up."""
        return None

    def after_suite(self, suite: 'TestSuite', result: 'SuiteResult') -> None:
        """Invoked after a suite has run."""
        return None

    def before_test(self, test_case: 'TestCase') -> None:
        """Invoked before a test case runs."""
        return None

    def after_test(self, test_case: 'TestCase', result: 'CaseResult') -> None:
        """Invoked after a test case has run."""
        return None


class TestListeners:
    """Ordered collection of lifecycle listeners of a single suite."""

    __test__ = False

    def __init__(self) -> None:
        self._listeners: list[TestLifecycleListener] = []

    def append(self, listener: TestLifecycleListener) -> None:
        """Add a listener after all the existing ones."""
        self._listeners.append(listener)

    def __iter__(self) -> 'Iterator[TestLifecycleListener]':
        return iter(tuple(self._listeners))

    def reverse(self) -> 'Iterator[TestLifecycleListener]':
        """Iterate the listeners in reverse registration order."""
        return reversed(tuple(self._listeners))

    def for_each(self, action: 'Callable[[TestLifecycleListener], None]') -> None:
        """Invoke an action on every listener in registration order."""
        for listener in self:
            action(listener)

    def for_each_reverse(self, action: 'Callable[[TestLifecycleListener], None]') -> None:
        """Invoke an action on every listener in reverse registration order."""
        for listener in self.reverse():
            action(listener)


class ListenerRegistry:
    """Registry of listener factories contributed by extensions."""

    def __init__(self) -> None:
        self._factories: list[ListenerFactory] = []

    def add(self, factory: ListenerFactory) -> None:
        """Register a listener factory.

        Args:
            factory: Zero-argument callable returning a new listener.
        """
        self._factories.append(factory)

    def __len__(self) -> int:
        return len(self._factories)

    def create(self) -> TestListeners:
        """Create a fresh set of listeners.

        Returns:
            New listeners, one per registered factory, in registration order.
        """
        listeners = TestListeners()
        for factory in self._factories:
            listeners.append(factory())

        return listeners
