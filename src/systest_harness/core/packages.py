"""Discovery of test packages under a root directory."""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from systest_harness.errors import TestLoadError

from .parser import accept_all

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType
    from typing import Self

    from systest_harness.package import TestPackage

    from .parser import SuiteFilter, TestPackageParser


def walk_directories(root: Path) -> 'Iterator[Path]':
    """Walk a directory tree top-down, visiting subdirectories in name order."""
    directories = os.walk(root)
    try:
        for directory, subdirectories, _ in directories:
            subdirectories.sort()
            yield Path(directory)
    finally:
        directories.close()


class TestPackageStream:
    """Lazily parsed sequence of test packages.

    The stream owns an open directory walk and must be closed once
    consumed, preferably by using it as a context manager.
    """

    __test__ = False

    def __init__(self, directories: 'Iterator[Path]',
                 parser: 'TestPackageParser', suite_filter: 'SuiteFilter') -> None:
        self._directories = directories
        self._parser = parser
        self._suite_filter = suite_filter
        self._closed = False

    def __iter__(self) -> 'Self':
        return self

    def __next__(self) -> 'TestPackage':
        if self._closed:
            raise StopIteration

        for directory in self._directories:
            package = self._parser.parse(directory, self._suite_filter)
            if package is not None:
                return package

        raise StopIteration

    @property
    def closed(self) -> bool:
        """Whether the directory walk was released."""
        return self._closed

    def close(self) -> None:
        """Release the directory walk."""
        if self._closed:
            return

        self._closed = True
        close = getattr(self._directories, 'close', None)
        if close is not None:
            close()

    def __enter__(self) -> 'Self':
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc_value: BaseException | None,
                 traceback: 'TracebackType | None') -> None:
        self.close()


class TestPackagesLoader:
    """Loader of every test package below a root directory.

    Directories are visited top-down in name order; each directory that
    parses to a package yields one.
    """

    __test__ = False

    def __init__(self, root: 'Path', parser: 'TestPackageParser',
                 suite_filter: 'SuiteFilter' = accept_all) -> None:
        self.root = root
        self.parser = parser
        self.suite_filter = suite_filter

    def stream(self) -> TestPackageStream:
        """Open a stream of the packages below the root directory.

        Returns:
            Stream to be closed by the caller.

        Raises:
            TestLoadError: If the root directory does not exist or is not
                a directory.
        """
        if not self.root.exists():
            raise TestLoadError(f'Test directory does not exist: {self.root}')

        if not self.root.is_dir():
            raise TestLoadError(f'Not a directory: {self.root}')

        return TestPackageStream(
            walk_directories(self.root),
            self.parser,
            self.suite_filter,
        )
