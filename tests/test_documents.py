"""Tests for YAML document loading and document model composition."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import yaml

from systest_harness.core import TYPE_KEY, DocumentLoader, DocumentModelBuilder, DocumentReader
from systest_harness.errors import InvalidTestFileError
from systest_harness.extensions import ModelRegistry
from systest_harness.schema import UNKNOWN_LOCATION, LocatedDict, LocatedStr, SimpleRef
from tests.examples.elements import (
    AliasInputRef,
    CountExpectation,
    MessageExpectation,
    MessageInput,
    TopicOption,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from pyfakefs.fake_filesystem import FakeFilesystem


def test_locations() -> None:
    """Verify loaded mappings and strings remember their lines."""
    content = yaml.load(
        'name: smoke\n'
        'tests:\n'
        '  - name: first\n'
        '    expectations: [published]\n',
        Loader=DocumentLoader,  # noqa: S506
    )

    assert isinstance(content, LocatedDict)
    assert content.location == '<unicode string>:1'

    case = content['tests'][0]
    assert case.location == '<unicode string>:3'
    assert isinstance(case['expectations'][0], LocatedStr)
    assert case['expectations'][0].location == '<unicode string>:4'
    assert all(type(key) is str for key in case)


def test_tagged_mapping() -> None:
    """Verify a local tag selects the element type."""
    content = yaml.load('!message\nkey: k\nvalue: v\n', Loader=DocumentLoader)  # noqa: S506

    assert content == {TYPE_KEY: 'message', 'key': 'k', 'value': 'v'}
    assert content.location == '<unicode string>:1'


@pytest.mark.parametrize('content, message', (
    pytest.param(
        'key: k\nkey: v\n',
        r"found duplicate key 'key'",
        id='duplicate key',
    ),
    pytest.param(
        "!message\n'@type': message\nkey: k\n",
        r"found both tag !message and '@type' key",
        id='tag and type key',
    ),
    pytest.param(
        '!message [k, v]\n',
        r'expected a mapping for tag !message, but found sequence',
        id='tagged sequence',
    ),
))
def test_invalid_yaml(content: str, message: str) -> None:
    """Verify loader rejections."""
    with pytest.raises(yaml.constructor.ConstructorError, match=message):
        yaml.load(content, Loader=DocumentLoader)  # noqa: S506


def test_merge_keys_are_allowed() -> None:
    """Verify merge keys are not reported as duplicates."""
    content = yaml.load(
        'base: &base {key: k}\n'
        'item:\n'
        '  <<: *base\n'
        '  value: v\n',
        Loader=DocumentLoader,  # noqa: S506
    )

    assert content['item'] == {'key': 'k', 'value': 'v'}


def test_references_dispatch(model: ModelRegistry) -> None:
    """Verify references resolve to simple or registered types."""
    builder = DocumentModelBuilder(model)

    case = builder.test_case.model_validate({
        'name': 'publish',
        'inputs': [
            'order',
            {'id': 'customer'},
            {TYPE_KEY: 'alias', 'id': 'payment', 'alias': 'card'},
        ],
        'expectations': ['published'],
    })

    assert [type(ref) for ref in case.inputs] == [SimpleRef, SimpleRef, AliasInputRef]  # type: ignore[attr-defined]
    assert [ref.id for ref in case.inputs] == ['order', 'customer', 'payment']  # type: ignore[attr-defined]
    assert case.inputs[2].alias == 'card'  # type: ignore[attr-defined]
    assert case.location == UNKNOWN_LOCATION


def test_unknown_element_type(model: ModelRegistry) -> None:
    """Verify unknown type names are reported with the known ones."""
    builder = DocumentModelBuilder(model)

    with pytest.raises(ValueError, match=r"Unknown expectation type, expected one of: 'message', 'count'"):
        builder.expectation_document.model_validate({TYPE_KEY: 'http', 'status': 200})  # type: ignore[union-attr]


def test_missing_models_without_types() -> None:
    """Verify documents of a category without types have no model."""
    builder = DocumentModelBuilder(ModelRegistry())

    assert builder.input_document is None
    assert builder.expectation_document is None
    assert builder.expectation_ref is not None


def test_options_without_types() -> None:
    """Verify suites accept only empty options without option types."""
    builder = DocumentModelBuilder(ModelRegistry())
    suite = {
        'name': 'smoke',
        'services': ['orders'],
        'tests': [{'name': 'first', 'expectations': ['published']}],
    }

    assert builder.test_suite.model_validate(suite).options == []  # type: ignore[attr-defined]

    with pytest.raises(ValueError, match=r'options'):
        builder.test_suite.model_validate({**suite, 'options': [{'topic': 'orders'}]})


def test_suite_schema(model: ModelRegistry) -> None:
    """Verify the suite JSON Schema lists registered option types."""
    schema = DocumentModelBuilder(model).test_suite.model_json_schema()

    assert {'name', 'services', 'tests', 'options'} <= set(schema['properties'])
    assert set(schema['required']) >= {'name', 'services', 'tests'}


def test_read_documents(fs: 'FakeFilesystem', model: ModelRegistry,
                        write_file: 'Callable[[Path, str], Path]') -> None:
    """Verify typed documents are read with their locations."""
    input_path = write_file(Path('/package/inputs/order.yml'), """
        '@type': message
        key: order
        value: created
    """)
    expectation_path = write_file(Path('/package/expectations/count.yml'), """
        !count
        count: 2
    """)
    suite_path = write_file(Path('/package/orders.yml'), """
        name: orders
        services: [order-service]
        options:
          - !topic
            topic: orders
        tests:
          - name: publish
            inputs: [order]
            expectations: [count]
    """)

    reader = DocumentReader(model)

    item = reader.read_input(input_path)
    assert isinstance(item, MessageInput)
    assert (item.key, item.value) == ('order', 'created')
    assert item.location == '/package/inputs/order.yml:2'

    expectation = reader.read_expectation(expectation_path)
    assert isinstance(expectation, CountExpectation)
    assert expectation.count == 2

    suite = reader.read_suite(suite_path)
    assert suite.location == '/package/orders.yml:2'
    assert [type(option) for option in suite.options] == [TopicOption]  # type: ignore[attr-defined]
    assert suite.options[0].topic == 'orders'  # type: ignore[attr-defined]
    assert suite.options[0].location == '/package/orders.yml:5'  # type: ignore[attr-defined]
    assert suite.tests[0].location == '/package/orders.yml:8'  # type: ignore[attr-defined]
    assert suite.tests[0].inputs[0].location == '/package/orders.yml:9'  # type: ignore[attr-defined]


@pytest.mark.parametrize('content, message', (
    pytest.param(
        """
        name: orders
        services: [order-service]
        tests:
          - name: publish
            expectations: [published]
            timeout: 10
        """,
        r'tests\.0\.timeout: Extra inputs are not permitted',
        id='unknown field',
    ),
    pytest.param(
        """
        name: orders
        services: [order-service]
        tests:
          - name: publish
            expectations: []
        """,
        r'tests\.0\.expectations: List should have at least 1 item',
        id='no expectations',
    ),
    pytest.param(
        """
        name: orders
        services: [order-service]
        tests:
          - name: publish
            description: null
            notes:
            expectations: [published]
          - name:
            expectations: [published]
        """,
        r'tests\.1\.name: Input should be a valid string',
        id='null name',
    ),
    pytest.param(
        """
        name: '  '
        services: []
        tests: []
        """,
        r'name: String should match pattern',
        id='blank name',
    ),
    pytest.param(
        """
        name: orders
        services: [order-service]
        tests:
          - name: publish
            expectations: [published]
            expectations: [count]
        """,
        r"found duplicate key 'expectations'",
        id='duplicate field',
    ),
))
def test_invalid_suite(fs: 'FakeFilesystem', model: ModelRegistry,
                       write_file: 'Callable[[Path, str], Path]',
                       content: str, message: str) -> None:
    """Verify invalid suite documents are reported with their file."""
    path = write_file(Path('/package/orders.yml'), content)

    with pytest.raises(InvalidTestFileError, match=r'^Failed to load TestSuiteDef from /package/orders\.yml') as error:
        DocumentReader(model).read_suite(path)

    assert error.match(message)


def test_read_without_registered_types(fs: 'FakeFilesystem',
                                       write_file: 'Callable[[Path, str], Path]') -> None:
    """Verify reading a document of a category without types fails."""
    path = write_file(Path('/package/inputs/order.yml'), 'key: order\n')

    with pytest.raises(InvalidTestFileError, match=r'No Input types are registered'):
        DocumentReader(ModelRegistry()).read_input(path)


def test_read_untyped_input(fs: 'FakeFilesystem', model: ModelRegistry,
                            write_file: 'Callable[[Path, str], Path]') -> None:
    """Verify input documents must name their type."""
    path = write_file(Path('/package/inputs/order.yml'), 'key: order\nvalue: created\n')

    with pytest.raises(InvalidTestFileError, match=r"Unknown input type, expected one of: 'message'"):
        DocumentReader(model).read_input(path)


def test_expectation_location_survives_tag(fs: 'FakeFilesystem', model: ModelRegistry,
                                           write_file: 'Callable[[Path, str], Path]') -> None:
    """Verify the type key is stripped before model validation."""
    path = write_file(Path('/package/expectations/published.yml'), """
        '@type': message
        key: order
        value: created
    """)

    expectation = DocumentReader(model).read_expectation(path)

    assert isinstance(expectation, MessageExpectation)
    assert expectation.location == '/package/expectations/published.yml:2'
