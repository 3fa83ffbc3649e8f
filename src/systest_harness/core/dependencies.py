"""Dependency document cache.

Input and expectation documents of a package are indexed by id when the
package is parsed, but only read when a test case first references them.
The cache remembers which documents were used, so the parser can report
the ones no test case references.
"""

from typing import TYPE_CHECKING

from systest_harness.errors import MissingDependencyError, TestLoadError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

#: File extensions of test documents.
DOCUMENT_SUFFIXES = ('.yml', '.yaml')


def list_documents(directory: 'Path') -> list['Path']:
    """List the documents directly inside a directory, sorted by name.

    Args:
        directory: Directory to list. A missing directory has no documents.

    Returns:
        Paths of the YAML files in the directory.
    """
    if not directory.is_dir():
        return []

    return sorted(
        path
        for path in directory.iterdir()
        if path.suffix in DOCUMENT_SUFFIXES and path.is_file()
    )


class CachedDocument[T]:
    """Lazily read document with a usage flag.

    Attributes:
        path: Document file path.
        used: Whether the document was requested.
    """

    def __init__(self, path: 'Path', reader: 'Callable[[Path], T]') -> None:
        self.path = path
        self.used = False

        self._reader = reader
        self._value: T | None = None

    @property
    def value(self) -> T:
        """Read the document on first access and mark it used."""
        self.used = True
        if self._value is None:
            self._value = self._reader(self.path)

        return self._value


class DependencyCache[T]:
    """Cache of dependency documents keyed by id.

    The id of a document is its file name without the extension.
    """

    def __init__(self, documents: dict[str, CachedDocument[T]]) -> None:
        self._documents = documents

    @classmethod
    def scan(cls, directory: 'Path', reader: 'Callable[[Path], T]') -> 'DependencyCache[T]':
        """Index the documents of a directory without reading them.

        Args:
            directory: Dependency directory.
            reader: Callable reading and validating a single document.

        Returns:
            Cache of the documents found.

        Raises:
            TestLoadError: If two documents share the same id.
        """
        documents: dict[str, CachedDocument[T]] = {}
        for path in list_documents(directory):
            if (existing := documents.get(path.stem)) is not None:
                raise TestLoadError(
                    f'Duplicate dependency id {path.stem!r}: '
                    f'{existing.path} and {path}',
                )
            documents[path.stem] = CachedDocument(path, reader)

        return cls(documents)

    def get(self, dependency_id: str, location: str | None = None) -> T:
        """Get a document by id, reading it on first access.

        Args:
            dependency_id: Document id.
            location: Location of the reference, used in error messages.

        Returns:
            Validated document.

        Raises:
            MissingDependencyError: If no document has the id.
            InvalidTestFileError: If the document is invalid.
        """
        if (document := self._documents.get(dependency_id)) is None:
            raise MissingDependencyError(dependency_id, location)

        return document.value

    def values(self) -> tuple[T, ...]:
        """Read every document, in file name order."""
        return tuple(document.value for document in self._documents.values())

    def unused(self) -> tuple['Path', ...]:
        """Get paths of the documents that were never requested."""
        return tuple(
            document.path
            for document in self._documents.values()
            if not document.used
        )
