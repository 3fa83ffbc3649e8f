"""Test package loading core.

Integrates extension discovery, document model composition and YAML
loading into the parser turning package directories into runnable
test packages.
"""

from .builder import TYPE_KEY, DocumentModelBuilder, TypeDispatch
from .dependencies import CachedDocument, DependencyCache
from .documents import DocumentLoader, DocumentReader
from .loader import EXTENSIONS_GROUP, ExtensionsLoader
from .packages import TestPackagesLoader, TestPackageStream
from .parser import ParserObserver, SuiteFilter, TestPackageParser, accept_all

__all__ = (
    'EXTENSIONS_GROUP',
    'TYPE_KEY',
    'CachedDocument',
    'DependencyCache',
    'DocumentLoader',
    'DocumentModelBuilder',
    'DocumentReader',
    'ExtensionsLoader',
    'ParserObserver',
    'SuiteFilter',
    'TestPackageParser',
    'TestPackageStream',
    'TestPackagesLoader',
    'TypeDispatch',
    'accept_all',
)
