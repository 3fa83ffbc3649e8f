"""Tests configurations and fixtures."""

from datetime import timedelta
from functools import partial
from importlib.metadata import EntryPoint, EntryPoints
from pathlib import Path
from textwrap import dedent
from typing import TYPE_CHECKING, Any

import pytest

from systest_harness.extensions import SystemTest
from systest_harness.package import TestCase, TestPackage, TestSuite
from systest_harness.schema import UNKNOWN_LOCATION
from tests.examples.extensions import ExampleExtension

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from systest_harness.extensions import ModelRegistry
    from systest_harness.schema import Disabled, Input, Option


@pytest.fixture
def extension() -> ExampleExtension:
    """Provide a fresh example extension with its own in-memory broker."""
    return ExampleExtension()


@pytest.fixture
def api(extension: ExampleExtension) -> SystemTest:
    """Provide a harness facade initialized with the example extension."""
    system_test = SystemTest()
    extension.initialize(system_test)

    return system_test


@pytest.fixture
def model(api: SystemTest) -> 'ModelRegistry':
    """Provide the model registry of the example facade."""
    return api.model


@pytest.fixture
def timeout() -> timedelta:
    """Provide a short verification timeout."""
    return timedelta(seconds=5)


@pytest.fixture
def write_file() -> 'Callable[[Path, str], Path]':
    """Provide a helper writing dedented text files, creating parents."""
    def write(path: 'Path', content: str) -> 'Path':
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content), encoding='utf-8')
        return path

    return write


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of extensions in the `systest_extensions` entry point group.

    The returned factory allows configuring:
    - successfully loadable extensions (instances or classes),
    - or an exception raised during extension loading,
    - or an empty entry point list.
    """
    def patch(*extensions: object, raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled extension configuration.

        Args:
            extensions: Objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
                Used to simulate extension load failures.

        Returns:
            A mock patch object produced by `mocker.patch` that replaces
            `importlib.metadata.entry_points` for the duration of the test.
        """
        entrypoints = []
        for position, extension in enumerate(extensions):
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'systest_extensions'
            ep.name = f'tests{position}'
            ep.value = 'tests.examples.extensions:ExampleExtension'
            ep.load.return_value = extension
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch


@pytest.fixture
def build_suite() -> 'Callable[..., TestSuite]':
    """Provide a factory of runtime suites assembled without documents.

    Each positional argument holds the keyword arguments of a test case;
    `name` and `expectations` are required.
    """
    def build(*cases: dict[str, Any], name: str = 'suite',
              seed: 'Iterable[Input]' = (), options: 'Iterable[Option]' = (),
              disabled: 'Disabled | None' = None) -> TestSuite:
        def build_suite(package: TestPackage) -> TestSuite:
            return TestSuite(
                package,
                name=name,
                location=UNKNOWN_LOCATION,
                services=['service'],
                options=options,
                disabled=disabled,
                cases=[
                    partial(TestCase, **{'location': UNKNOWN_LOCATION, **case})
                    for case in cases
                ],
            )

        return TestPackage(Path('/tests/package'), seed, [build_suite]).suites[0]

    return build
