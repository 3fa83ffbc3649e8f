"""Model type registry.

The registry records which concrete element types extend each category
base, the lookup name used to select them in documents and, for inputs
and expectations, the handler that applies them.

The registry is populated once by extensions at startup and frozen before
it is handed to the parser and executors.
"""

from enum import Enum
from typing import Any

from pydantic import Field

from systest_harness.errors import HandlerNotRegisteredError, ModelTypeError
from systest_harness.models import SchemaModel
from systest_harness.names import TYPE_NAME_PATTERN, subtype_name
from systest_harness.schema import (
    SIMPLE_REF_NAME,
    Expectation,
    ExpectationRef,
    Input,
    InputRef,
    Option,
    Ref,
    SimpleRef,
)

from .handlers import ExpectationHandler, InputHandler


class ModelCategory(Enum):
    """Category of a registered element type."""

    REF = 'ref'
    INPUT_REF = 'input_ref'
    EXPECTATION_REF = 'expectation_ref'
    INPUT = 'input'
    EXPECTATION = 'expectation'
    OPTION = 'option'

    @property
    def base(self) -> type:
        """Base type every type of the category must extend."""
        return _CATEGORY_BASES[self]


_CATEGORY_BASES: dict[ModelCategory, type] = {
    ModelCategory.REF: Ref,
    ModelCategory.INPUT_REF: InputRef,
    ModelCategory.EXPECTATION_REF: ExpectationRef,
    ModelCategory.INPUT: Input,
    ModelCategory.EXPECTATION: Expectation,
    ModelCategory.OPTION: Option,
}

#: Categories selected by the same document field.
#: Lookup names must be unique within each group.
DISPATCH_GROUPS: tuple[tuple[ModelCategory, ...], ...] = (
    (ModelCategory.REF, ModelCategory.INPUT_REF),
    (ModelCategory.REF, ModelCategory.EXPECTATION_REF),
    (ModelCategory.INPUT,),
    (ModelCategory.EXPECTATION,),
    (ModelCategory.OPTION,),
)

_HANDLER_TYPES: dict[ModelCategory, type] = {
    ModelCategory.INPUT: InputHandler,
    ModelCategory.EXPECTATION: ExpectationHandler,
}


def qualified_name(model: Any) -> str:  # noqa: ANN401
    """Get the fully qualified name of a type for diagnostics."""
    module = getattr(model, '__module__', None)
    qualname = getattr(model, '__qualname__', None) or repr(model)
    if not module:
        return qualname

    return f'{module}.{qualname}'


class ModelType(SchemaModel):
    """Metadata of a registered element type."""

    category: ModelCategory = Field(
        title='Category',
        description='Category the type is registered in.',
    )

    model: type = Field(
        title='Concrete type',
        description='Registered subtype of the category base.',
    )

    name: str = Field(
        title='Lookup name',
        description='Name selecting the type in documents.',
    )

    handler: Any = Field(
        default=None,
        title='Handler',
        description='Handler of input and expectation types.',
    )

    @classmethod
    def create(cls, model: Any, category: ModelCategory,  # noqa: ANN401
               name: str | None = None, handler: Any = None) -> 'ModelType':  # noqa: ANN401
        """Validate and create type metadata.

        Args:
            model: Concrete element type.
            category: Registration category.
            name: Explicit lookup name. Derived from the type name if omitted.
            handler: Handler for input and expectation types.

        Returns:
            Type metadata.

        Raises:
            ModelTypeError: If the type, the name or the handler is invalid.
        """
        if not isinstance(model, type) or not model.__name__.isidentifier():
            raise ModelTypeError(f'Anonymous types can not be registered: {model!r}')

        base = category.base
        if model is base or not issubclass(model, base):
            raise ModelTypeError(
                f'Not a subtype of {base.__name__}: {qualified_name(model)}',
            )

        if name is None:
            name = subtype_name(model, base.__name__)
        elif not name.strip():
            raise ModelTypeError(f'Blank name for type: {qualified_name(model)}')

        if not TYPE_NAME_PATTERN.match(name):
            raise ModelTypeError(
                f'Invalid name {name!r} for type: {qualified_name(model)}',
            )

        required = _HANDLER_TYPES.get(category)
        if required is None and handler is not None:
            raise ModelTypeError(
                f'Handlers are not supported for {category.value} type: '
                f'{qualified_name(model)}',
            )
        if required is not None and not isinstance(handler, required):
            raise ModelTypeError(
                f'Handler for {category.value} type {qualified_name(model)} '
                f'must be an instance of {required.__name__}',
            )

        return cls(category=category, model=model, name=name, handler=handler)


class ModelRegistry:
    """Registry of element types contributed by extensions.

    Every registry contains the built-in `SimpleRef` type, registered as a
    reference named `simple`.
    """

    def __init__(self) -> None:
        self._types: dict[type, ModelType] = {}
        self._frozen = False

        self.add_ref(SimpleRef, name=SIMPLE_REF_NAME)

    @property
    def frozen(self) -> bool:
        """Whether the registry is read-only."""
        return self._frozen

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    def register(self, model: type, category: ModelCategory,
                 name: str | None = None, handler: Any = None) -> ModelType:  # noqa: ANN401
        """Register an element type.

        Args:
            model: Concrete element type.
            category: Registration category.
            name: Explicit lookup name. Derived from the type name if omitted.
            handler: Handler applying the type. Required for input and
                expectation types, rejected for the others.

        Returns:
            Metadata of the registered type.

        Raises:
            ModelTypeError: If the registry is frozen, the type is already
                registered, or the registration is invalid.
        """
        if self._frozen:
            raise ModelTypeError(
                f'Model registry is frozen, can not register: {qualified_name(model)}',
            )

        if isinstance(model, type) and model in self._types:
            raise ModelTypeError(f'duplicate type: {qualified_name(model)}')

        model_type = ModelType.create(model, category, name=name, handler=handler)

        for group in DISPATCH_GROUPS:
            if category not in group:
                continue
            for existing in self._types.values():
                if existing.category in group and existing.name == model_type.name:
                    raise ModelTypeError(
                        f'ambiguous type name {model_type.name!r}: '
                        f'{qualified_name(model)} conflicts with '
                        f'{qualified_name(existing.model)}',
                    )

        self._types[model] = model_type

        return model_type

    def add_ref(self, model: type[Ref], name: str | None = None) -> ModelType:
        """Register a reference type usable for inputs and expectations."""
        return self.register(model, ModelCategory.REF, name=name)

    def add_input_ref(self, model: type[InputRef], name: str | None = None) -> ModelType:
        """Register an input reference type."""
        return self.register(model, ModelCategory.INPUT_REF, name=name)

    def add_expectation_ref(self, model: type[ExpectationRef],
                            name: str | None = None) -> ModelType:
        """Register an expectation reference type."""
        return self.register(model, ModelCategory.EXPECTATION_REF, name=name)

    def add_input[T: Input](self, model: type[T], handler: InputHandler[T],
                            name: str | None = None) -> ModelType:
        """Register an input type with its handler."""
        return self.register(model, ModelCategory.INPUT, name=name, handler=handler)

    def add_expectation[T: Expectation](self, model: type[T],
                                        handler: ExpectationHandler[T],
                                        name: str | None = None) -> ModelType:
        """Register an expectation type with its handler."""
        return self.register(model, ModelCategory.EXPECTATION, name=name, handler=handler)

    def add_option(self, model: type[Option], name: str | None = None) -> ModelType:
        """Register a suite option type."""
        return self.register(model, ModelCategory.OPTION, name=name)

    def has_type(self, model: type) -> bool:
        """Check whether a type is registered in any category."""
        return model in self._types

    def all_types(self) -> tuple[ModelType, ...]:
        """Get metadata of every registered type in registration order."""
        return tuple(self._types.values())

    def types_for(self, *categories: ModelCategory) -> dict[str, type]:
        """Get the types of the given categories keyed by lookup name.

        Args:
            *categories: Categories to include.

        Returns:
            Mapping of lookup names to types, in registration order.
        """
        return {
            model_type.name: model_type.model
            for model_type in self._types.values()
            if model_type.category in categories
        }

    def handler_for(self, model: type) -> Any | None:  # noqa: ANN401
        """Get the handler registered for a type, if any."""
        if (model_type := self._types.get(model)) is None:
            return None

        return model_type.handler

    def input_handler[T: Input](self, model: type[T]) -> InputHandler[T]:
        """Get the handler of an input type.

        Raises:
            HandlerNotRegisteredError: If the type is not a registered input.
        """
        return self._require_handler(model, ModelCategory.INPUT)

    def expectation_handler[T: Expectation](self, model: type[T]) -> ExpectationHandler[T]:
        """Get the handler of an expectation type.

        Raises:
            HandlerNotRegisteredError: If the type is not a registered expectation.
        """
        return self._require_handler(model, ModelCategory.EXPECTATION)

    def _require_handler(self, model: type, category: ModelCategory) -> Any:  # noqa: ANN401
        """Get a handler of a type registered in the given category."""
        model_type = self._types.get(model)
        if model_type is None or model_type.category is not category:
            raise HandlerNotRegisteredError(category.value, model)

        return model_type.handler

