"""Tests for the model type registry."""

import pytest

from systest_harness.errors import HandlerNotRegisteredError, ModelTypeError
from systest_harness.extensions import ModelCategory, ModelRegistry
from systest_harness.schema import Expectation, Input, Option, Ref, SimpleRef
from tests.examples.elements import (
    AliasInputRef,
    Broker,
    CountExpectation,
    MessageExpectation,
    MessageExpectationHandler,
    MessageInput,
    MessageInputHandler,
    TopicOption,
)


class OtherTopicOption(Option):
    """Option clashing by name with `TopicOption`."""


class AliasRef(Ref):
    """Reference clashing by name with `AliasInputRef`."""


class UnhandledInput(Input):
    """Input without a registered handler."""


def test_simple_ref_is_built_in() -> None:
    """Verify every registry contains the simple reference type."""
    registry = ModelRegistry()

    assert registry.has_type(SimpleRef)
    assert registry.types_for(ModelCategory.REF) == {'simple': SimpleRef}


def test_registration_derives_names() -> None:
    """Verify lookup names are derived from type names."""
    registry = ModelRegistry()
    broker = Broker()

    registry.add_input(MessageInput, MessageInputHandler(broker))
    registry.add_expectation(MessageExpectation, MessageExpectationHandler(broker))
    registry.add_option(TopicOption)
    registry.add_input_ref(AliasInputRef)

    assert registry.types_for(ModelCategory.INPUT) == {'message': MessageInput}
    assert registry.types_for(ModelCategory.EXPECTATION) == {'message': MessageExpectation}
    assert registry.types_for(ModelCategory.OPTION) == {'topic': TopicOption}
    assert registry.types_for(ModelCategory.REF, ModelCategory.INPUT_REF) == {
        'simple': SimpleRef,
        'alias': AliasInputRef,
    }
    assert [item.model for item in registry.all_types()] == [
        SimpleRef, MessageInput, MessageExpectation, TopicOption, AliasInputRef,
    ]


def test_explicit_name() -> None:
    """Verify an explicit lookup name overrides the derived one."""
    registry = ModelRegistry()

    model_type = registry.add_option(TopicOption, name='kafka_topic')

    assert model_type.name == 'kafka_topic'
    assert registry.types_for(ModelCategory.OPTION) == {'kafka_topic': TopicOption}


def test_handler_lookup(model: ModelRegistry) -> None:
    """Verify handlers are found by concrete type and category."""
    assert isinstance(model.input_handler(MessageInput), MessageInputHandler)
    assert isinstance(model.expectation_handler(MessageExpectation), MessageExpectationHandler)
    assert model.handler_for(TopicOption) is None

    with pytest.raises(HandlerNotRegisteredError, match=r'^No handler registered for input type: .*CountExpectation$'):
        model.input_handler(CountExpectation)  # type: ignore[arg-type]

    with pytest.raises(HandlerNotRegisteredError, match=r'^No handler registered for expectation type: .*UnhandledInput'):
        model.expectation_handler(UnhandledInput)  # type: ignore[arg-type]


@pytest.mark.parametrize('register, message', (
    pytest.param(
        lambda registry: registry.add_option(object()),
        r'^Anonymous types can not be registered',
        id='anonymous type',
    ),
    pytest.param(
        lambda registry: registry.add_option(Option),
        r'^Not a subtype of Option: systest_harness\.schema\.elements\.Option$',
        id='base type',
    ),
    pytest.param(
        lambda registry: registry.add_option(MessageInput),
        r'^Not a subtype of Option: tests\.examples\.elements\.MessageInput$',
        id='other category',
    ),
    pytest.param(
        lambda registry: registry.add_option(TopicOption, name='  '),
        r'^Blank name for type',
        id='blank name',
    ),
    pytest.param(
        lambda registry: registry.add_option(TopicOption, name='kafka-topic'),
        r"^Invalid name 'kafka-topic' for type",
        id='invalid name',
    ),
    pytest.param(
        lambda registry: registry.add_input(MessageInput, None),
        r'must be an instance of InputHandler$',
        id='missing handler',
    ),
    pytest.param(
        lambda registry: registry.add_input(MessageInput, MessageExpectationHandler(Broker())),
        r'must be an instance of InputHandler$',
        id='wrong handler',
    ),
    pytest.param(
        lambda registry: registry.register(TopicOption, ModelCategory.OPTION, handler=object()),
        r'^Handlers are not supported for option type',
        id='handler for option',
    ),
))
def test_invalid_registration(register, message: str) -> None:  # noqa: ANN001
    """Verify invalid registrations are rejected."""
    registry = ModelRegistry()

    with pytest.raises(ModelTypeError, match=message):
        register(registry)


def test_duplicate_type() -> None:
    """Verify a type can be registered only once."""
    registry = ModelRegistry()
    registry.add_option(TopicOption)

    with pytest.raises(ModelTypeError, match=r'^duplicate type: tests\.examples\.elements\.TopicOption$'):
        registry.add_option(TopicOption, name='other')


@pytest.mark.parametrize('first, second', (
    pytest.param(
        lambda registry: registry.add_option(TopicOption),
        lambda registry: registry.add_option(OtherTopicOption, name='topic'),
        id='same category',
    ),
    pytest.param(
        lambda registry: registry.add_input_ref(AliasInputRef),
        lambda registry: registry.add_ref(AliasRef),
        id='overlapping reference categories',
    ),
))
def test_ambiguous_name(first, second) -> None:  # noqa: ANN001
    """Verify lookup names are unique among types selected by the same field."""
    registry = ModelRegistry()
    first(registry)

    with pytest.raises(ModelTypeError, match=r"^ambiguous type name '(topic|alias)'"):
        second(registry)


def test_same_name_in_separate_categories() -> None:
    """Verify an input and an expectation may share a lookup name."""
    registry = ModelRegistry()
    broker = Broker()

    registry.add_input(MessageInput, MessageInputHandler(broker))
    registry.add_expectation(MessageExpectation, MessageExpectationHandler(broker))

    assert registry.has_type(MessageInput)
    assert registry.has_type(MessageExpectation)


def test_frozen_registry() -> None:
    """Verify a frozen registry rejects new types."""
    registry = ModelRegistry()
    registry.freeze()

    assert registry.frozen

    with pytest.raises(ModelTypeError, match=r'^Model registry is frozen'):
        registry.add_option(TopicOption)


def test_expectation_base_category() -> None:
    """Verify category base types."""
    assert ModelCategory.EXPECTATION.base is Expectation
    assert ModelCategory.REF.base is Ref
