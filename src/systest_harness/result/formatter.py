"""Human-readable rendering of run results for logs."""

from os import linesep
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .case import CaseResult
    from .execution import ExecutionResult
    from .suite import SuiteResult


class ResultLogFormatter:
    """Formatter of run results for log output."""

    @classmethod
    def format_issues(cls, result: 'ExecutionResult') -> str:
        """List every suite and test case that did not pass.

        Each issue takes one line: `<suite>: <message>` for suite setup
        errors and `<suite>:<case>: <message>` for failed or errored test
        cases.

        Args:
            result: Run result.

        Returns:
            Issues separated by line breaks, empty if there are none.
        """
        issues: list[str] = []
        for suite_result in result.results:
            if (suite_issue := cls.format_suite_issue(suite_result)) is not None:
                issues.append(suite_issue)

            issues.extend(
                case_issue
                for case_result in suite_result.case_results
                if (case_issue := cls.format_case_issue(case_result)) is not None
            )

        return linesep.join(issues)

    @staticmethod
    def format_suite_issue(result: 'SuiteResult') -> str | None:
        """Format the setup error of a suite, if any."""
        if result.error is None:
            return None

        return f'{result.test_suite.name}: {result.error}'

    @staticmethod
    def format_case_issue(result: 'CaseResult') -> str | None:
        """Format the failure or error of a test case, if any."""
        if (issue := result.issue) is None:
            return None

        test_case = result.test_case

        return f'{test_case.suite.name}:{test_case.name}: {issue}'

    @staticmethod
    def format_summary(result: 'ExecutionResult') -> str:
        """Format the counts of a run result."""
        return (
            f'suites: {len(result.results)}, '
            f'passed: {result.passed_count}, '
            f'failed: {result.failed}, '
            f'errors: {result.errors}, '
            f'skipped: {result.skipped}'
        )
