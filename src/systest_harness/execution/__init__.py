"""Hierarchical execution of test packages, suites and test cases."""

from .case import TestCaseExecutor
from .inputters import Inputters, SuiteOptions, group_by_type
from .packages import TestPackagesExecutor
from .suite import TestSuiteExecutor
from .verifiers import CompositeVerifier, VerificationOptions, Verifiers

__all__ = (
    'CompositeVerifier',
    'Inputters',
    'SuiteOptions',
    'TestCaseExecutor',
    'TestPackagesExecutor',
    'TestSuiteExecutor',
    'VerificationOptions',
    'Verifiers',
    'group_by_type',
)
