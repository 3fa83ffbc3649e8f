"""Dynamic document schema composition utilities.

This module builds runtime Pydantic models for test documents from the
types registered in a model registry.

Pluggable elements are resolved with tagged unions: the tag is read from
the `@type` key of a mapping (or from a local YAML tag, which the loader
turns into that key), while bare scalars and untagged mappings in
reference lists resolve to the built-in simple reference type.
"""

from collections.abc import Mapping
from functools import cached_property
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BaseModel, Field, RootModel, create_model
from pydantic_core import core_schema

from systest_harness.extensions import ModelCategory
from systest_harness.schema import (
    SIMPLE_REF_NAME,
    Expectation,
    ExpectationRef,
    Input,
    InputRef,
    LocatedDict,
    Option,
    TestCaseDef,
    TestSuiteDef,
    location_of,
)

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler

if TYPE_CHECKING:
    from systest_harness.extensions import ModelRegistry

#: Mapping key holding the lookup name of a pluggable element.
TYPE_KEY = '@type'

#: Root model for input documents.
type InputDocument = RootModel[Input]

#: Root model for expectation documents.
type ExpectationDocument = RootModel[Expectation]


def strip_type_key(data: Any) -> Any:  # noqa: ANN401
    """Remove the type tag from a raw mapping, keeping its location."""
    if not isinstance(data, Mapping) or TYPE_KEY not in data:
        return data

    fields = {key: value for key, value in data.items() if key != TYPE_KEY}
    if (location := location_of(data)) is None:
        return fields

    return LocatedDict(fields, location=location)


class TypeDispatch:
    """Annotation resolving a pluggable element to its registered type.

    Attributes:
        kind: Human-readable element kind used in error messages.
        types: Registered types keyed by lookup name.
        default: Lookup name used for scalars and untagged mappings.
    """

    def __init__(self, kind: str, types: Mapping[str, type],
                 default: str | None = None) -> None:
        self.kind = kind
        self.types = dict(types)
        self.default = default
        self._names = {model: name for name, model in self.types.items()}

    def discriminate(self, data: Any) -> str | None:  # noqa: ANN401
        """Get the lookup name of a raw or validated element."""
        if isinstance(data, BaseModel):
            return self._names.get(type(data))

        if isinstance(data, str):
            return self.default

        if isinstance(data, Mapping):
            tag = data.get(TYPE_KEY, self.default)
            return tag if isinstance(tag, str) else None

        return None

    def __get_pydantic_core_schema__(self, source: Any,  # noqa: ANN401
                                     handler: 'GetCoreSchemaHandler') -> core_schema.CoreSchema:
        """Build a tagged union over the registered types."""
        choices = {
            name: core_schema.no_info_before_validator_function(
                strip_type_key,
                handler.generate_schema(model),
            )
            for name, model in self.types.items()
        }
        expected = ', '.join(repr(name) for name in self.types)

        return core_schema.tagged_union_schema(
            choices,
            discriminator=self.discriminate,
            custom_error_type='element_type',
            custom_error_message=f'Unknown {self.kind} type, expected one of: {expected}',
        )


class DocumentModelBuilder:
    """Builder of document models for the types of a model registry.

    Models are built lazily and cached, so the registry must not change
    once a model has been requested.
    """

    def __init__(self, model: 'ModelRegistry') -> None:
        self.model = model

    def element_type(self, kind: str, base: type, *categories: ModelCategory,
                     default: str | None = None) -> Any | None:  # noqa: ANN401
        """Build an annotated type selecting one of the registered types.

        Args:
            kind: Human-readable element kind used in error messages.
            base: Common base of the selectable types.
            *categories: Registry categories to select from.
            default: Lookup name for scalars and untagged mappings.

        Returns:
            Annotated type, or `None` if no type is registered.
        """
        types = self.model.types_for(*categories)
        if not types:
            return None

        return Annotated[base, TypeDispatch(kind, types, default=default)]

    @cached_property
    def input_ref(self) -> Any:  # noqa: ANN401
        """Type of references in case `inputs` lists."""
        return self.element_type(
            'input reference',
            InputRef,
            ModelCategory.REF,
            ModelCategory.INPUT_REF,
            default=SIMPLE_REF_NAME,
        )

    @cached_property
    def expectation_ref(self) -> Any:  # noqa: ANN401
        """Type of references in case `expectations` lists."""
        return self.element_type(
            'expectation reference',
            ExpectationRef,
            ModelCategory.REF,
            ModelCategory.EXPECTATION_REF,
            default=SIMPLE_REF_NAME,
        )

    @cached_property
    def input_document(self) -> type[InputDocument] | None:
        """Root model of input documents, or `None` without input types."""
        element = self.element_type('input', Input, ModelCategory.INPUT)
        if element is None:
            return None

        return create_model(
            'InputDocument',
            __base__=RootModel,
            root=(element, ...),
        )

    @cached_property
    def expectation_document(self) -> type[ExpectationDocument] | None:
        """Root model of expectation documents, or `None` without expectation types."""
        element = self.element_type('expectation', Expectation, ModelCategory.EXPECTATION)
        if element is None:
            return None

        return create_model(
            'ExpectationDocument',
            __base__=RootModel,
            root=(element, ...),
        )

    def build_options_field(self) -> tuple[Any, Any]:
        """Build a Pydantic field definition for suite options.

        Returns:
            A tuple suitable for passing to `create_model`.
                If no option type is registered, only an empty list
                is accepted.
        """
        element = self.element_type('option', Option, ModelCategory.OPTION)
        if element is None:
            return list[Any], Field(default_factory=list, max_length=0)

        return list[element], Field(  # type: ignore[valid-type]
            default_factory=list,
            title='Suite options',
            description=(
                'Options tuning how handlers behave for every test case '
                'of the suite.'
            ),
        )

    @cached_property
    def test_case(self) -> type[TestCaseDef]:
        """Model of test case definitions."""
        return create_model(  # type: ignore[call-overload,no-any-return]
            'TestCaseDef',
            __base__=TestCaseDef,
            inputs=(list[self.input_ref], Field(  # type: ignore[name-defined]
                default_factory=list,
                title='Inputs',
                description='References to the inputs fed to the services.',
            )),
            expectations=(list[self.expectation_ref], Field(  # type: ignore[name-defined]
                min_length=1,
                title='Expectations',
                description='References to the expectations that must be met.',
            )),
        )

    @cached_property
    def test_suite(self) -> type[TestSuiteDef]:
        """Model of test suite documents."""
        return create_model(  # type: ignore[call-overload,no-any-return]
            'TestSuiteDef',
            __base__=TestSuiteDef,
            options=self.build_options_field(),
            tests=(list[self.test_case], Field(  # type: ignore[name-defined]
                min_length=1,
                title='Test cases',
                description='Test cases of the suite, run in declaration order.',
            )),
        )
