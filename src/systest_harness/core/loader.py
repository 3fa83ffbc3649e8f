"""Extensions discovery and loading infrastructure.

Extensions are discovered via Python entry points of the
`systest_extensions` group. An entry point may expose an extension
instance or an extension class with a no-argument constructor.

Extensions are loaded defensively: individual failures do not interrupt
the loading process unless strict mode is enabled.
"""

from typing import TYPE_CHECKING
from warnings import warn

from systest_harness.errors import PluginError, PluginWarning
from systest_harness.extensions import TestExtension

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

    from systest_harness.extensions import SystemTest

#: Entry point group extensions are discovered from.
EXTENSIONS_GROUP = 'systest_extensions'


class ExtensionsLoader:
    """Loader initializing extensions against a harness facade.

    Attributes:
        strict_mode: If True, any extension loading issue raises an error.
            If False, issues are emitted as warnings and loading continues.
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict_mode = strict
        self.extensions: dict[str, TestExtension] = {}

    def emit_extension_issue(self, message: str,
                             entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Emit an extension warning or return the exception.

        Args:
            message: Warning message to emit.
            entrypoint: Entry point the extension was loaded from, if applicable.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=2)

        return None

    def add_extension(self, extension: TestExtension, api: 'SystemTest',
                      entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a single extension.

        Args:
            extension: Extension to initialize.
            api: Harness facade handed to the extension.
            entrypoint: Entry point the extension was loaded from, if applicable.

        Raises:
            PluginError: If the extension fails to initialize on strict mode.
        """
        name = extension.name
        if name in self.extensions:
            if error := self.emit_extension_issue(
                f'Extension {name!r} is already loaded',
                entrypoint,
            ):
                raise error
            return None

        try:
            extension.initialize(api)

        except Exception as base:
            if error := self.emit_extension_issue(
                f'Failed to initialize extension {name!r}: {base}',
                entrypoint,
            ):
                raise error from base
            return None

        self.extensions[name] = extension

    def _load_extension(self, entrypoint: 'EntryPoint', api: 'SystemTest') -> None:
        """Load and initialize a single extension entry point.

        Args:
            entrypoint: Entry point describing the extension to load.
            api: Harness facade handed to the extension.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        try:
            extension = entrypoint.load()
            if isinstance(extension, type) and issubclass(extension, TestExtension):
                extension = extension()

        except Exception as base:
            if error := self.emit_extension_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        if not isinstance(extension, TestExtension):
            if error := self.emit_extension_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not an extension',
                entrypoint,
            ):
                raise error
            return None

        self.add_extension(extension, api, entrypoint)

    def load(self, api: 'SystemTest') -> tuple[TestExtension, ...]:
        """Discover extensions via entry points and initialize them.

        Args:
            api: Harness facade handed to every extension.

        Returns:
            Every successfully initialized extension.

        Raises:
            PluginError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=EXTENSIONS_GROUP):
            self._load_extension(entrypoint, api)

        return tuple(self.extensions.values())
