"""Harness name primitive types and naming rules.

This module defines the lookup-name derivation used by the model type
registry and strongly-typed aliases used by test documents for names
and identifiers.

The rules defined here form part of the public document contract and are
relied upon by the registry, the document loader and extension authors.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for registered type lookup names.
#: Names must start with a letter and may contain letters, digits, or underscores.
_TYPE_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for explicit type lookup names.
TYPE_NAME_PATTERN = regexp(rf'^{_TYPE_NAME_PATTERN}$', flags=ASCII)

#: Upper case letters starting a new CamelCase word.
_WORD_BOUNDARY = regexp(r'([A-Z])')


def subtype_name(model: type, base_name: str) -> str:
    """Derive the lookup name of a registered subtype.

    The base type name is stripped from the end of the subtype name when
    present, the remaining CamelCase words are joined with underscores
    and lower cased, for example `KafkaTopicExpectation` with the base
    `Expectation` becomes `kafka_topic`.

    Args:
        model: Concrete subtype.
        base_name: Name of the category base type.

    Returns:
        Derived lookup name.
    """
    name = model.__name__
    if name.endswith(base_name) and name != base_name:
        name = name.removesuffix(base_name)

    return _WORD_BOUNDARY.sub(r'_\1', name).lower().removeprefix('_')


Name = Annotated[
    str, Field(
        pattern=r'\S',
        title='Name',
        description=(
            'Human-readable name of a suite or a test case. '
            'Used in logs, results and error messages. '
            'Must contain at least one non-whitespace character.'
        ),
        examples=[
            'smoke test',
            'order is published downstream',
        ],
    ),
]

ServiceName = Annotated[
    str, Field(
        pattern=r'\S',
        title='Service name',
        description=(
            'Name of a service under test. '
            'Must contain at least one non-whitespace character.'
        ),
        examples=[
            'order-service',
        ],
    ),
]

DependencyId = Annotated[
    str, Field(
        pattern=r'\S',
        title='Dependency identifier',
        description=(
            'Identifier of an input or expectation document. '
            'Matches the document file name without its extension.'
        ),
        examples=[
            'new_order',
            'order_published',
        ],
    ),
]
