"""Runtime settings of the test executor.

Settings are resolved from keyword arguments (for example, command line
options) and from environment variables prefixed with `SYSTEST_`.
"""

from datetime import timedelta
from pathlib import Path
from re import Pattern
from re import compile as regexp
from typing import TYPE_CHECKING, Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from systest_harness.models import SettingsModel

if TYPE_CHECKING:
    from systest_harness.core import SuiteFilter

#: Log levels accepted by the executor.
type LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ExecutorSettings(SettingsModel):
    """Settings of a test run."""

    model_config = SettingsConfigDict(
        env_prefix='SYSTEST_',
        frozen=True,
        extra='ignore',
    )

    test_directory: Path = Field(
        default=Path(),
        title='Test directory',
        description='Root directory searched recursively for test packages.',
    )

    result_directory: Path = Field(
        default=Path('test-results'),
        title='Result directory',
        description='Directory the run results are written to.',
    )

    verifier_timeout: timedelta = Field(
        default=timedelta(seconds=60),
        gt=timedelta(0),
        title='Verifier timeout',
        description='Upper bound verifiers may wait for expectations to be met.',
    )

    suite_pattern: Pattern[str] = Field(
        default=regexp('.*'),
        title='Suite pattern',
        description='Regular expression suite document paths must match to run.',
    )

    strict: bool = Field(
        default=True,
        title='Strict extension loading',
        description='Whether an extension loading problem aborts the run.',
    )

    log_level: LogLevel = Field(
        default='INFO',
        title='Log level',
        description='Level of the harness log output.',
    )

    def suites_filter(self) -> 'SuiteFilter':
        """Get the suite document predicate derived from the suite pattern."""
        pattern = self.suite_pattern

        def suites_filter(path: Path) -> bool:
            return pattern.search(path.as_posix()) is not None

        return suites_filter
