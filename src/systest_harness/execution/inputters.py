"""Dispatch of inputs to their registered handlers."""

from typing import TYPE_CHECKING

from systest_harness.extensions import InputOptions

if TYPE_CHECKING:
    from collections.abc import Iterable

    from systest_harness.extensions import InputHandler, ModelRegistry
    from systest_harness.package import TestSuite
    from systest_harness.schema import Input, Option


def group_by_type[T](items: 'Iterable[T]') -> dict[type, list[T]]:
    """Partition items by concrete type.

    Groups keep the order in which their type was first seen and items
    keep their relative order within a group.

    Args:
        items: Heterogeneous items.

    Returns:
        Items keyed by concrete type.
    """
    groups: dict[type, list[T]] = {}
    for item in items:
        groups.setdefault(type(item), []).append(item)

    return groups


class SuiteOptions(InputOptions):
    """Options declared by a suite."""

    def __init__(self, suite: 'TestSuite') -> None:
        self.suite = suite

    def get[T: Option](self, option_type: type[T]) -> tuple[T, ...]:
        return self.suite.options(option_type)


class Inputters:
    """Dispatcher feeding inputs to the handlers of their types."""

    def __init__(self, model: 'ModelRegistry') -> None:
        self.model = model

    def input(self, inputs: 'Iterable[Input]', suite: 'TestSuite') -> None:
        """Feed inputs to their handlers.

        Every input is processed by the handler of its type, grouped by
        type in first-seen order. Each distinct handler is then flushed
        once, so every input is applied when this returns.

        Args:
            inputs: Inputs in declaration order.
            suite: Suite providing the handler options.

        Raises:
            HandlerNotRegisteredError: If an input type has no handler.
        """
        groups = [
            (self.model.input_handler(input_type), items)
            for input_type, items in group_by_type(inputs).items()
        ]

        options = SuiteOptions(suite)
        used: dict[int, InputHandler] = {}

        for handler, items in groups:
            for item in items:
                handler.process(item, options)
            used.setdefault(id(handler), handler)

        for handler in used.values():
            handler.flush()
