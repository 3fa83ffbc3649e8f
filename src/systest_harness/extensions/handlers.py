"""Handler interfaces implemented by extensions.

Handlers give meaning to pluggable elements: an `InputHandler` applies
inputs of one concrete type to the services under test, an
`ExpectationHandler` turns expectations of one concrete type into a
`Verifier` that checks them.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from systest_harness.schema import Expectation, Input, Option

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import timedelta


class InputOptions(ABC):
    """Options available to input handlers."""

    @abstractmethod
    def get[T: Option](self, option_type: type[T]) -> tuple[T, ...]:
        """Get the suite options of a given type.

        Args:
            option_type: Concrete option type.

        Returns:
            Options of the type declared by the current suite, in
            declaration order.
        """


class ExpectationOptions(InputOptions):
    """Options available to expectation handlers."""

    @property
    @abstractmethod
    def timeout(self) -> 'timedelta':
        """Upper bound of the time a verifier may wait for expectations."""


class InputHandler[T: Input](ABC):
    """Handler applying inputs of a single concrete type.

    Processing may be asynchronous, in which case `flush` must block
    until every processed input has been applied.
    """

    @abstractmethod
    def process(self, item: T, options: InputOptions) -> None:
        """Apply a single input.

        Args:
            item: Input to apply.
            options: Options of the current suite.
        """

    def flush(self) -> None:  # noqa: B027
        """Wait until every processed input has been applied."""
        return None


class Verifier(ABC):
    """Check prepared by an expectation handler."""

    @abstractmethod
    def verify(self) -> None:
        """Verify the prepared expectations.

        May block up to the verification timeout while waiting for the
        expectations to be met.

        Raises:
            AssertionError: If an expectation is not met.
        """


class ExpectationHandler[T: Expectation](ABC):
    """Handler checking expectations of a single concrete type."""

    @abstractmethod
    def prepare(self, expectations: 'Sequence[T]',
                options: ExpectationOptions) -> Verifier:
        """Prepare the verification of a group of expectations.

        Preparation happens before the inputs of a test case are applied,
        so handlers may start observing the services under test early.

        Args:
            expectations: Expectations of the handled type, in declaration
                order.
            options: Options of the current suite and the verification
                timeout.

        Returns:
            Verifier checking all given expectations.
        """
