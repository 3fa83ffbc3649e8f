"""Extension interface of the harness.

An extension is discovered through the `systest_extensions` entry point
group and initialized once per run with a `SystemTest` facade. During
initialization it may:
- register input, expectation, option and reference types together with
  the handlers that apply them;
- register lifecycle listener factories.

Once every extension is initialized the model registry is frozen and the
facade is treated as read-only.
"""

from abc import ABC, abstractmethod

from .handlers import (
    ExpectationHandler,
    ExpectationOptions,
    InputHandler,
    InputOptions,
    Verifier,
)
from .listeners import ListenerFactory, ListenerRegistry, TestLifecycleListener, TestListeners
from .registry import ModelCategory, ModelRegistry, ModelType

__all__ = (
    'ExpectationHandler',
    'ExpectationOptions',
    'InputHandler',
    'InputOptions',
    'ListenerFactory',
    'ListenerRegistry',
    'ModelCategory',
    'ModelRegistry',
    'ModelType',
    'SystemTest',
    'TestExtension',
    'TestLifecycleListener',
    'TestListeners',
    'Verifier',
)


class SystemTest:
    """Facade handed to extensions during initialization.

    Attributes:
        model: Registry of element types and their handlers.
        listeners: Registry of lifecycle listener factories.
    """

    __test__ = False

    def __init__(self, model: ModelRegistry | None = None,
                 listeners: ListenerRegistry | None = None) -> None:
        self.model = model if model is not None else ModelRegistry()
        self.listeners = listeners if listeners is not None else ListenerRegistry()


class TestExtension(ABC):
    """Base of harness extensions."""

    __test__ = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the extension used in diagnostics."""

    @abstractmethod
    def initialize(self, api: SystemTest) -> None:
        """Register the types and listeners provided by the extension.

        Args:
            api: Harness facade to register with.
        """
