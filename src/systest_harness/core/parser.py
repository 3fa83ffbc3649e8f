"""Test package parser.

This module turns a package directory into a runtime `TestPackage`:

- `seed/` holds inputs fed to the services before each suite runs;
- `inputs/` and `expectations/` hold documents referenced by id from
  test cases;
- every YAML file directly in the package directory is a suite document.

References are resolved while the package is assembled, so a package
that parses is fully linked. Dependency documents no test case
references are reported to a parser observer.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from systest_harness.errors import InvalidTestFileError, TestLoadError
from systest_harness.observation import LoggingParserObserver
from systest_harness.package import TestCase, TestPackage, TestSuite

from .dependencies import DependencyCache, list_documents
from .documents import DocumentReader

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

if TYPE_CHECKING:
    from systest_harness.extensions import ModelRegistry
    from systest_harness.package import CaseBuilder, SuiteBuilder
    from systest_harness.schema import Expectation, Input, TestCaseDef, TestSuiteDef

#: Predicate selecting suite documents by path.
type SuiteFilter = Callable[[Path], bool]

SEED_DIRECTORY = 'seed'
INPUTS_DIRECTORY = 'inputs'
EXPECTATIONS_DIRECTORY = 'expectations'


class ParserObserver(Protocol):
    """Observer of advisory parser findings."""

    def unused_dependencies(self, package_path: Path, unused: 'Sequence[Path]') -> None:
        """Report dependency documents no test case references.

        Args:
            package_path: Package directory.
            unused: Absolute paths of the unused documents.
        """


def accept_all(path: Path) -> bool:  # noqa: ARG001
    """Suite filter accepting every suite document."""
    return True


class TestPackageParser:
    """Parser of test package directories."""

    __test__ = False

    def __init__(self, model: 'ModelRegistry',
                 observer: ParserObserver | None = None) -> None:
        """Initialize the parser.

        The model registry is frozen, since document models are built from
        the registered types.

        Args:
            model: Registry of element types.
            observer: Observer of advisory findings. Logs them by default.
        """
        model.freeze()

        self.reader = DocumentReader(model)
        self.observer = observer if observer is not None else LoggingParserObserver()

    def parse(self, path: Path, suite_filter: SuiteFilter = accept_all) -> TestPackage | None:
        """Parse a package directory.

        Args:
            path: Package directory.
            suite_filter: Predicate selecting suite documents by path.

        Returns:
            The assembled package, or `None` if the directory has no
            `expectations` directory or no suite document passes the filter.

        Raises:
            TestLoadError: If any document is invalid or a reference can
                not be resolved.
        """
        if not (path / EXPECTATIONS_DIRECTORY).is_dir():
            return None

        try:
            return self._parse(path, suite_filter)

        except TestLoadError as base:
            raise TestLoadError(f'Failed to parse test package {path}: {base}') from base

    def _parse(self, path: Path, suite_filter: SuiteFilter) -> TestPackage | None:
        """Load, resolve and assemble a package."""
        seed: DependencyCache[Input] = DependencyCache.scan(
            path / SEED_DIRECTORY,
            self.reader.read_input,
        )
        inputs: DependencyCache[Input] = DependencyCache.scan(
            path / INPUTS_DIRECTORY,
            self.reader.read_input,
        )
        expectations: DependencyCache[Expectation] = DependencyCache.scan(
            path / EXPECTATIONS_DIRECTORY,
            self.reader.read_expectation,
        )

        seed_data = seed.values()

        suites = [
            self._suite_builder(self.reader.read_suite(suite_path), inputs, expectations)
            for suite_path in list_documents(path)
            if suite_filter(suite_path)
        ]
        if not suites:
            return None

        package = TestPackage(path, seed_data, suites)

        unused = [
            dependency.absolute()
            for dependency in (*inputs.unused(), *expectations.unused())
        ]
        if unused:
            self.observer.unused_dependencies(path, unused)

        return package

    @classmethod
    def _suite_builder(cls, definition: 'TestSuiteDef',
                       inputs: DependencyCache['Input'],
                       expectations: DependencyCache['Expectation']) -> 'SuiteBuilder':
        """Resolve a suite definition into a suite builder.

        Raises:
            InvalidTestFileError: If a test case can not be resolved.
        """
        try:
            cases = [
                cls._case_builder(case, inputs, expectations)
                for case in definition.tests  # type: ignore[attr-defined]
            ]

        except TestLoadError as base:
            raise InvalidTestFileError(
                f'Error in suite {definition.name!r}: {base}',
            ) from base

        def build(package: TestPackage) -> TestSuite:
            return TestSuite(
                package,
                name=definition.name,
                description=definition.description,
                disabled=definition.disabled,
                location=definition.location,
                services=definition.services,
                options=definition.options,  # type: ignore[attr-defined]
                cases=cases,
            )

        return build

    @staticmethod
    def _case_builder(definition: 'TestCaseDef',
                      inputs: DependencyCache['Input'],
                      expectations: DependencyCache['Expectation']) -> 'CaseBuilder':
        """Resolve the references of a test case definition.

        Raises:
            InvalidTestFileError: If a reference can not be resolved.
        """
        try:
            case_inputs = [
                inputs.get(ref.id, ref.location)
                for ref in definition.inputs  # type: ignore[attr-defined]
            ]
            case_expectations = [
                expectations.get(ref.id, ref.location)
                for ref in definition.expectations  # type: ignore[attr-defined]
            ]

        except TestLoadError as base:
            raise InvalidTestFileError(f'{definition.name!r}: {base}') from base

        def build(suite: TestSuite) -> TestCase:
            return TestCase(
                suite,
                name=definition.name,
                notes=definition.notes,
                description=definition.description,
                disabled=definition.disabled,
                location=definition.location,
                inputs=case_inputs,
                expectations=case_expectations,
            )

        return build
