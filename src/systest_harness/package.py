"""Runtime test package model.

Packages, suites and test cases are assembled once by the package parser,
consumed once by the executors and discarded. They are read-only: every
sequence is exposed as a tuple and suites and cases hold a back reference
to their owner.
"""

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from pathlib import Path

    from systest_harness.schema import Disabled, Expectation, Input, Option

#: Callable building a suite owned by the given package.
type SuiteBuilder = Callable[[TestPackage], TestSuite]

#: Callable building a test case owned by the given suite.
type CaseBuilder = Callable[[TestSuite], TestCase]


class TestPackage:
    """Test package loaded from a single directory.

    Attributes:
        root: Package directory.
        seed_data: Inputs fed before each suite of the package.
        suites: Suites of the package in file name order.
    """

    __test__ = False

    def __init__(self, root: 'Path', seed_data: 'Iterable[Input]',
                 suites: 'Iterable[SuiteBuilder]') -> None:
        self.root = root
        self.seed_data: tuple[Input, ...] = tuple(seed_data)
        self.suites: tuple[TestSuite, ...] = tuple(build(self) for build in suites)

    def __repr__(self) -> str:
        return f'TestPackage(root={str(self.root)!r}, suites={len(self.suites)})'


class TestSuite:
    """Named, ordered collection of test cases.

    Attributes:
        name: Suite name.
        description: Optional suite description.
        disabled: Marker disabling the suite, if set.
        location: Location of the suite document.
        services: Names of the services under test.
        cases: Test cases in declaration order.
        package: Owning package.
    """

    __test__ = False

    def __init__(self, package: TestPackage, *, name: str, location: str,
                 services: 'Sequence[str]', cases: 'Iterable[CaseBuilder]',
                 options: 'Iterable[Option]' = (),
                 description: str | None = None,
                 disabled: 'Disabled | None' = None) -> None:
        self.package = package
        self.name = name
        self.description = description
        self.disabled = disabled
        self.location = location
        self.services = tuple(services)

        grouped: dict[type, list[Option]] = defaultdict(list)
        for option in options:
            grouped[type(option)].append(option)
        self._options: Mapping[type, tuple[Option, ...]] = {
            option_type: tuple(items)
            for option_type, items in grouped.items()
        }

        self.cases: tuple[TestCase, ...] = tuple(build(self) for build in cases)

    def options[T: 'Option'](self, option_type: type[T]) -> tuple[T, ...]:
        """Get the options of a given type.

        Args:
            option_type: Concrete option type.

        Returns:
            Options of the type in declaration order, possibly empty.
        """
        return self._options.get(option_type, ())  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f'TestSuite(name={self.name!r}, location={self.location!r})'


class TestCase:
    """Single named check: feed inputs, then verify expectations.

    Attributes:
        name: Test case name.
        notes: Optional free text notes.
        description: Optional test case description.
        disabled: Marker disabling the test case, if set.
        location: Location of the test case definition.
        inputs: Inputs in declaration order.
        expectations: Expectations in declaration order.
        suite: Owning suite.
    """

    __test__ = False

    def __init__(self, suite: TestSuite, *, name: str, location: str,
                 expectations: 'Iterable[Expectation]',
                 inputs: 'Iterable[Input]' = (),
                 notes: str | None = None,
                 description: str | None = None,
                 disabled: 'Disabled | None' = None) -> None:
        self.suite = suite
        self.name = name
        self.notes = notes
        self.description = description
        self.disabled = disabled
        self.location = location
        self.inputs: tuple[Input, ...] = tuple(inputs)
        self.expectations: tuple[Expectation, ...] = tuple(expectations)

    @property
    def disabled_reason(self) -> str | None:
        """Reason the test case is disabled, or `None` if it is enabled."""
        if self.disabled is None:
            return None

        return self.disabled.reason

    def __repr__(self) -> str:
        return f'TestCase(name={self.name!r}, location={self.location!r})'
