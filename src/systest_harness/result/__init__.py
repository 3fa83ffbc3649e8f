"""Immutable run result records, their builders and their rendering."""

from .case import CaseResult, CaseResultBuilder, Clock, Outcome, utc_now
from .execution import ExecutionResult
from .formatter import ResultLogFormatter
from .suite import SuiteResult, SuiteResultBuilder
from .writer import RESULTS_FILENAME, ResultsWriter, YamlResultsWriter

__all__ = (
    'RESULTS_FILENAME',
    'CaseResult',
    'CaseResultBuilder',
    'Clock',
    'ExecutionResult',
    'Outcome',
    'ResultLogFormatter',
    'ResultsWriter',
    'SuiteResult',
    'SuiteResultBuilder',
    'YamlResultsWriter',
    'utc_now',
)
