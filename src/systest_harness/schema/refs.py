"""Reference types linking test cases to dependency documents.

A reference names an input or expectation document by its id, which is
the document file name without its extension. Extensions may register
their own reference types; the built-in `SimpleRef` accepts either a bare
id scalar or a mapping with an `id` field.
"""

from typing import Any

from pydantic import Field, model_validator

from systest_harness.names import DependencyId  # noqa: TC001

from .locations import LocatedDict, LocationAware, location_of

#: Lookup name of the built-in simple reference type.
SIMPLE_REF_NAME = 'simple'


class BaseRef(LocationAware):
    """Common base of all reference types."""

    id: DependencyId = Field(
        title='Dependency identifier',
        description='Id of the referenced input or expectation document.',
    )


class InputRef(BaseRef):
    """Reference to an input document."""


class ExpectationRef(BaseRef):
    """Reference to an expectation document."""


class Ref(InputRef, ExpectationRef):
    """Reference usable for both inputs and expectations."""


class SimpleRef(Ref):
    """Category-agnostic reference given by a bare id.

    In a suite document the reference can be written either as a bare
    scalar (`- order_published`) or as a mapping (`- id: order_published`).
    """

    @model_validator(mode='before')
    @classmethod
    def expand_scalar(cls, data: Any) -> Any:  # noqa: ANN401
        """Expand a bare id scalar into a mapping."""
        if not isinstance(data, str):
            return data

        if (location := location_of(data)) is None:
            return {'id': data}

        return LocatedDict({'id': data}, location=location)
