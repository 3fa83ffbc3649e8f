"""YAML document loading.

This module defines the YAML loader used for every test document and a
reader that validates loaded documents against the models built from the
model registry.

The loader extends the safe loader so that:
- duplicate mapping keys are rejected;
- mappings and strings remember the file and line they were read from;
- a local tag on a mapping (`!kafka_topic {...}`) selects the element
  type, as an alternative to the `@type` key.
"""

from os import linesep
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from yaml import SafeLoader, load
from yaml.constructor import ConstructorError
from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, ScalarNode

from systest_harness.errors import HarnessError, InvalidTestFileError
from systest_harness.schema import LocatedDict, LocatedStr

from .builder import TYPE_KEY, DocumentModelBuilder

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from pydantic import BaseModel
    from yaml.nodes import Node

if TYPE_CHECKING:
    from systest_harness.extensions import ModelRegistry
    from systest_harness.schema import Expectation, Input, TestSuiteDef

MERGE_TAG = 'tag:yaml.org,2002:merge'


class DocumentLoader(SafeLoader):
    """Safe YAML loader producing location-aware values."""

    @staticmethod
    def location_of(node: 'Node') -> str:
        """Format the location of a node as `<file>:<line>`."""
        mark = node.start_mark

        return f'{mark.name}:{mark.line + 1}'

    def construct_mapping(self, node: 'Node', deep: bool = False) -> dict[Any, Any]:
        """Construct a mapping, rejecting duplicate keys."""
        if isinstance(node, MappingNode):
            seen = set()
            for key_node, _ in node.value:
                if key_node.tag == MERGE_TAG or not isinstance(key_node, ScalarNode):
                    continue
                if key_node.value in seen:
                    raise ConstructorError(
                        'while constructing a mapping', node.start_mark,
                        f'found duplicate key {key_node.value!r}', key_node.start_mark,
                    )
                seen.add(key_node.value)

        mapping = super().construct_mapping(node, deep=deep)

        return {
            str(key) if isinstance(key, LocatedStr) else key: value
            for key, value in mapping.items()
        }

    def construct_located_mapping(self, node: 'Node') -> 'Iterator[LocatedDict]':
        """Construct a mapping annotated with its location."""
        data = LocatedDict(location=self.location_of(node))
        yield data
        data.update(self.construct_mapping(node))

    def construct_located_str(self, node: 'Node') -> LocatedStr:
        """Construct a string annotated with its location."""
        return LocatedStr(self.construct_scalar(node), location=self.location_of(node))

    def construct_tagged_mapping(self, tag_suffix: str,
                                 node: 'Node') -> 'Iterator[LocatedDict]':
        """Construct an element mapping typed by a local tag."""
        if not isinstance(node, MappingNode):
            raise ConstructorError(
                None, None,
                f'expected a mapping for tag !{tag_suffix}, but found {node.id}',
                node.start_mark,
            )

        data = LocatedDict({TYPE_KEY: tag_suffix}, location=self.location_of(node))
        yield data

        mapping = self.construct_mapping(node)
        if TYPE_KEY in mapping:
            raise ConstructorError(
                'while constructing a tagged mapping', node.start_mark,
                f'found both tag !{tag_suffix} and {TYPE_KEY!r} key', node.start_mark,
            )
        data.update(mapping)


DocumentLoader.add_constructor(
    'tag:yaml.org,2002:map',
    DocumentLoader.construct_located_mapping,
)
DocumentLoader.add_constructor(
    'tag:yaml.org,2002:str',
    DocumentLoader.construct_located_str,
)
DocumentLoader.add_multi_constructor(
    '!',
    DocumentLoader.construct_tagged_mapping,
)


class DocumentReader:
    """Reader of test documents validated against registered types."""

    def __init__(self, model: 'ModelRegistry') -> None:
        self.builder = DocumentModelBuilder(model)

    def read_input(self, path: 'Path') -> 'Input':
        """Read an input document.

        Raises:
            InvalidTestFileError: If the document is not a valid input.
        """
        return self._read(path, 'Input', self.builder.input_document).root

    def read_expectation(self, path: 'Path') -> 'Expectation':
        """Read an expectation document.

        Raises:
            InvalidTestFileError: If the document is not a valid expectation.
        """
        return self._read(path, 'Expectation', self.builder.expectation_document).root

    def read_suite(self, path: 'Path') -> 'TestSuiteDef':
        """Read a test suite document.

        Raises:
            InvalidTestFileError: If the document is not a valid suite.
        """
        return self._read(path, 'TestSuiteDef', self.builder.test_suite)

    @staticmethod
    def load(path: 'Path') -> Any:  # noqa: ANN401
        """Load raw YAML content of a document.

        Args:
            path: Document file path.

        Returns:
            Loaded location-aware content.
        """
        with path.open(encoding='utf-8') as stream:
            return load(stream, Loader=DocumentLoader)  # noqa: S506

    def _read[T: BaseModel](self, path: 'Path', kind: str, model: type[T] | None) -> T:
        """Load and validate a document.

        Args:
            path: Document file path.
            kind: Name of the loaded kind used in error messages.
            model: Model validating the document content.

        Returns:
            Validated document model.

        Raises:
            InvalidTestFileError: If the document can not be loaded or
                validated.
        """
        message = f'Failed to load {kind} from {path}{linesep}Please check the file is valid.'

        if model is None:
            raise InvalidTestFileError(f'{message}{linesep}No {kind} types are registered')

        try:
            content = self.load(path)

        except MarkedYAMLError as base:
            raise InvalidTestFileError.from_yaml_error(message, base) from base

        except HarnessError:
            raise

        except Exception as base:
            raise InvalidTestFileError(f'{message}{linesep}{base}') from base

        try:
            return model.model_validate(content)

        except ValidationError as base:
            raise InvalidTestFileError.from_pydantic_error(
                message,
                base,
                filename=str(path),
            ) from base
