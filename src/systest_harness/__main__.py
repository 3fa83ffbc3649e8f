"""Command-line adapter of the systest harness.

The tool runs the test packages found below a directory and prints the
JSON Schema of suite documents for the installed extensions.
"""

import logging
from json import dumps
from pathlib import Path

from click import Choice, FloatRange, UsageError, argument, echo, group, option
from click import Path as PathParam
from pydantic import ValidationError

from systest_harness.core import DocumentModelBuilder
from systest_harness.errors import HarnessError
from systest_harness.executor import load_system_test, run
from systest_harness.settings import ExecutorSettings

logger = logging.getLogger('systest_harness')

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

#: Exit code of a run with failed or errored test cases.
EXIT_FAILED = 1
#: Exit code of a run aborted by a harness error.
EXIT_ERROR = 2

TestDirectory = PathParam(
    exists=True,
    file_okay=False,
    path_type=Path,
)

ResultDirectory = PathParam(
    file_okay=False,
    writable=True,
    path_type=Path,
)


@group(help='Command-line utilities for the systest harness.')
def cli() -> None:
    """Root CLI group for systest tools."""
    return None


@cli.command(
    name='run',
    help='Run every test package found below TEST_DIRECTORY.',
)
@argument('test_directory', type=TestDirectory)
@option(
    '-r', '--results', 'result_directory',
    type=ResultDirectory,
    default=None,
    help='Directory the results are written to.',
)
@option(
    '-t', '--timeout', 'verifier_timeout',
    type=FloatRange(min=0, min_open=True),
    default=None,
    help='Seconds verifiers may wait for expectations to be met.',
)
@option(
    '-s', '--suite-pattern',
    default=None,
    help='Regular expression suite document paths must match to run.',
)
@option(
    '--relaxed',
    is_flag=True,
    default=False,
    help='Warn about extension loading problems instead of failing.',
)
@option(
    '--log-level',
    type=Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Level of the log output.',
)
def run_tests(test_directory: Path, result_directory: Path | None,
              verifier_timeout: float | None, suite_pattern: str | None,
              relaxed: bool, log_level: str | None) -> None:
    """Run test packages and exit with the run outcome."""
    overrides = {
        'test_directory': test_directory,
        'result_directory': result_directory,
        'verifier_timeout': verifier_timeout,
        'suite_pattern': suite_pattern,
        'log_level': log_level,
    }
    if relaxed:
        overrides['strict'] = False

    try:
        settings = ExecutorSettings(**{
            key: value
            for key, value in overrides.items()
            if value is not None
        })

    except ValidationError as error:
        raise UsageError(str(error)) from error

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    try:
        result = run(settings)

    except HarnessError as error:
        logger.error('Test run aborted: %s', error)  # noqa: TRY400
        raise SystemExit(EXIT_ERROR) from error

    if not result.passed():
        raise SystemExit(EXIT_FAILED)


@cli.command(
    name='schema',
    help='Print the suite document JSON Schema to standard output.',
)
@option(
    '--relaxed',
    is_flag=True,
    default=False,
    help='Warn about extension loading problems instead of failing.',
)
def print_schema(relaxed: bool) -> None:
    """Generate and print the JSON Schema."""
    api = load_system_test(strict=not relaxed)
    model = DocumentModelBuilder(api.model).test_suite

    echo(dumps(model.model_json_schema(), ensure_ascii=False, indent=2))


if __name__ == '__main__':
    cli()
