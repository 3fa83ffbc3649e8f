"""Suite and test case document definitions.

These models describe the static part of a suite document. Fields holding
pluggable elements (case inputs and expectations, suite options and the
test cases themselves) depend on the registered types and are attached by
the document model builder.
"""

from pydantic import AnyUrl, Field

from systest_harness.models import DescribedMixin, SchemaModel
from systest_harness.names import Name, ServiceName  # noqa: TC001

from .locations import LocationAware


class Disabled(SchemaModel):
    """Marker disabling a suite or a test case."""

    reason: str = Field(
        pattern=r'\S',
        title='Reason',
        description='Why the suite or test case is disabled.',
    )

    issue: AnyUrl | None = Field(
        default=None,
        title='Issue',
        description='Link to the issue tracking the re-enabling.',
    )


class TestCaseDef(DescribedMixin, LocationAware):
    """Static part of a test case definition."""

    __test__ = False

    name: Name

    notes: str | None = Field(
        default=None,
        title='Notes',
        description='Free text notes about the test case.',
    )

    disabled: Disabled | None = Field(
        default=None,
        title='Disabled',
        description='Disables the test case when set.',
    )


class TestSuiteDef(DescribedMixin, LocationAware):
    """Static part of a test suite definition."""

    __test__ = False

    name: Name

    disabled: Disabled | None = Field(
        default=None,
        title='Disabled',
        description='Disables every test case of the suite when set.',
    )

    services: list[ServiceName] = Field(
        min_length=1,
        title='Services under test',
        description='Names of the services the suite runs against.',
    )
