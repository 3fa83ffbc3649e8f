"""Test executor wiring.

Assembles the extension facade, the package parser and loader, and the
package, suite and test case executors into a single run.
"""

import logging
from typing import TYPE_CHECKING

from systest_harness.core import ExtensionsLoader, TestPackageParser, TestPackagesLoader
from systest_harness.execution import TestPackagesExecutor, TestSuiteExecutor
from systest_harness.extensions import SystemTest
from systest_harness.observation import LoggingParserObserver, LoggingTestLifecycleListener
from systest_harness.result import ResultLogFormatter, YamlResultsWriter

if TYPE_CHECKING:
    from systest_harness.result import ExecutionResult, ResultsWriter
    from systest_harness.settings import ExecutorSettings

logger = logging.getLogger(__name__)


def load_system_test(strict: bool = True) -> SystemTest:
    """Create the extension facade and initialize installed extensions.

    The logging lifecycle listener is always the first listener.

    Args:
        strict: Whether an extension loading problem raises.

    Returns:
        Initialized facade with a frozen model registry.

    Raises:
        PluginError: If an extension fails to load on strict mode.
    """
    api = SystemTest()
    api.listeners.add(LoggingTestLifecycleListener)

    extensions = ExtensionsLoader(strict=strict).load(api)
    logger.debug('Loaded extensions: %s', ', '.join(ext.name for ext in extensions))

    api.model.freeze()

    return api


def run(settings: 'ExecutorSettings', api: SystemTest | None = None,
        results_writer: 'ResultsWriter | None' = None) -> 'ExecutionResult':
    """Run every test package below the configured test directory.

    Args:
        settings: Run settings.
        api: Initialized extension facade. Installed extensions are
            loaded if omitted.
        results_writer: Sink of the run result. Writes YAML into the
            configured result directory if omitted.

    Returns:
        Result of the run.

    Raises:
        HarnessError: If extensions or packages can not be loaded, or a
            teardown fails.
    """
    if api is None:
        api = load_system_test(settings.strict)

    if results_writer is None:
        results_writer = YamlResultsWriter(settings.result_directory)

    parser = TestPackageParser(api.model, LoggingParserObserver())
    executor = TestPackagesExecutor(
        TestPackagesLoader(settings.test_directory, parser, settings.suites_filter()),
        TestSuiteExecutor(api.model, api.listeners, settings.verifier_timeout),
        results_writer,
    )

    result = executor.execute()

    if result.is_empty():
        logger.warning('No test suites found in %s', settings.test_directory)
        return result

    if issues := ResultLogFormatter.format_issues(result):
        logger.error('Test run issues:\n%s', issues)
    logger.info('Test run summary: %s', ResultLogFormatter.format_summary(result))

    return result
