"""End-to-end runs of test packages against the in-memory broker."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from systest_harness.errors import CaseTeardownError, TestLoadError
from systest_harness.executor import run
from systest_harness.extensions import TestLifecycleListener
from systest_harness.result import ExecutionResult
from systest_harness.settings import ExecutorSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from pyfakefs.fake_filesystem import FakeFilesystem
    from pytest_mock import MockerFixture

    from systest_harness.extensions import SystemTest
    from systest_harness.package import TestCase
    from systest_harness.result import CaseResult

ROOT = Path('/tests')

PASSING = """
  - name: {name}
    inputs: [new_order]
    expectations: [e1]
"""

FAILING = """
  - name: {name}
    expectations: [e1]
"""


@pytest.fixture
def write_package(fs: 'FakeFilesystem',
                  write_file: 'Callable[[Path, str], Path]') -> 'Callable[..., Path]':
    """Provide a writer of a package whose cases all expect `e1`."""
    def write(*cases: str) -> Path:
        package = ROOT / 'orders'
        write_file(package / 'inputs' / 'new_order.yml', """
            !message
            key: order
            value: created
        """)
        write_file(package / 'expectations' / 'e1.yml', """
            !message
            key: order
            value: created
        """)
        tests = ''.join(
            template.format(name=f'case {position}')
            for position, template in enumerate(cases, start=1)
        )
        write_file(package / 'suite.yml', f'name: orders\nservices: [order-service]\ntests:{tests}')

        return package

    return write


@pytest.fixture
def settings() -> ExecutorSettings:
    """Provide settings of runs below the test root."""
    return ExecutorSettings(test_directory=ROOT, verifier_timeout=5)


@pytest.mark.parametrize('cases, counts', (
    pytest.param((FAILING,), (0, 1, 0), id='one failing'),
    pytest.param((PASSING, FAILING), (1, 1, 0), id='one passing one failing'),
    pytest.param((PASSING, PASSING, PASSING), (3, 0, 0), id='all passing'),
))
def test_run(write_package: 'Callable[..., Path]', settings: ExecutorSettings,
             api: 'SystemTest', mocker: 'MockerFixture',
             cases: tuple[str, ...], counts: tuple[int, int, int]) -> None:
    """Verify run counts for packages with passing and failing cases."""
    write_package(*cases)
    writer = mocker.Mock()

    result = run(settings, api=api, results_writer=writer)

    assert (result.passed_count, result.failed, result.errors) == counts
    assert result.passed() is (counts[1] == 0)
    writer.write.assert_called_once_with(result)


def test_run_logs_summary(write_package: 'Callable[..., Path]', settings: ExecutorSettings,
                          api: 'SystemTest', mocker: 'MockerFixture',
                          caplog: pytest.LogCaptureFixture) -> None:
    """Verify issues and the summary are logged."""
    write_package(PASSING, FAILING)
    caplog.set_level('INFO', logger='systest_harness')

    run(settings, api=api, results_writer=mocker.Mock())

    assert "orders:case 2: Message order=created was not published" in caplog.text
    assert 'suites: 1, passed: 1, failed: 1, errors: 0, skipped: 0' in caplog.text


def test_run_without_packages(fs: 'FakeFilesystem', settings: ExecutorSettings,
                              api: 'SystemTest', mocker: 'MockerFixture',
                              caplog: pytest.LogCaptureFixture) -> None:
    """Verify an empty run writes nothing."""
    fs.create_dir(ROOT)
    writer = mocker.Mock()

    result = run(settings, api=api, results_writer=writer)

    assert result == ExecutionResult()
    writer.write.assert_not_called()
    assert 'No test suites found in /tests' in caplog.text


def test_run_writes_yaml_results(write_package: 'Callable[..., Path]', api: 'SystemTest') -> None:
    """Verify results are written to the configured directory by default."""
    write_package(PASSING)

    run(ExecutorSettings(test_directory=ROOT, result_directory=Path('/results')), api=api)

    assert Path('/results/results.yml').is_file()


def test_run_missing_test_directory(fs: 'FakeFilesystem', settings: ExecutorSettings,
                                   api: 'SystemTest', mocker: 'MockerFixture') -> None:
    """Verify a missing test directory aborts the run."""
    with pytest.raises(TestLoadError, match=r'^Test directory does not exist: /tests$'):
        run(settings, api=api, results_writer=mocker.Mock())


def test_teardown_failure_aborts_run(write_package: 'Callable[..., Path]', settings: ExecutorSettings,
                                     api: 'SystemTest', mocker: 'MockerFixture') -> None:
    """Verify a test case teardown failure propagates past the suite and package."""
    class BrokenTeardown(TestLifecycleListener):
        def after_test(self, test_case: 'TestCase', result: 'CaseResult') -> None:  # noqa: ARG002
            raise RuntimeError('listener broke')

    api.listeners.add(BrokenTeardown)
    write_package(PASSING, PASSING)
    writer = mocker.Mock()

    with pytest.raises(CaseTeardownError, match=r'^Test teardown failed for test case: case 1'):
        run(settings, api=api, results_writer=writer)

    writer.write.assert_not_called()
