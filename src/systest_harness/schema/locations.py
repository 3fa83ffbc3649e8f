"""Source location tracking for loaded document values.

The document loader produces `LocatedDict` and `LocatedStr` values that
remember the file and line of the YAML node they were constructed from.
Models deriving from `LocationAware` pick that location up during
validation and expose it for diagnostics.
"""

from typing import TYPE_CHECKING, Any

from pydantic import PrivateAttr, model_validator

from systest_harness.models import SchemaModel

if TYPE_CHECKING:
    from typing import Self

    from pydantic import ModelWrapValidatorHandler

#: Location reported by values that were not loaded from a file.
UNKNOWN_LOCATION = 'unknown'


class Located:
    """Marker base for loaded values carrying a source location."""

    location: str


class LocatedDict(dict[str, Any], Located):
    """Mapping loaded from a document, annotated with its location."""

    def __init__(self, *args: Any, location: str = UNKNOWN_LOCATION,  # noqa: ANN401
                 **kwargs: Any) -> None:  # noqa: ANN401
        super().__init__(*args, **kwargs)
        self.location = location


class LocatedStr(str, Located):
    """String scalar loaded from a document, annotated with its location."""

    def __new__(cls, value: str, location: str = UNKNOWN_LOCATION) -> 'Self':
        instance = super().__new__(cls, value)
        instance.location = location
        return instance


def location_of(value: object) -> str | None:
    """Get the source location of a loaded value, if it has one."""
    if isinstance(value, Located):
        return value.location

    return None


class LocationAware(SchemaModel):
    """Base model for document elements aware of their source location.

    The location has the form `<file path>:<line>` and defaults to
    `unknown` for elements that were not loaded from a file.
    """

    _location: str = PrivateAttr(default=UNKNOWN_LOCATION)

    @model_validator(mode='wrap')
    @classmethod
    def track_location(cls, data: Any,  # noqa: ANN401
                        handler: 'ModelWrapValidatorHandler[Self]') -> 'Self':
        """Copy the source location of the raw value onto the model."""
        instance = handler(data)
        if (location := location_of(data)) is not None:
            instance._location = location  # noqa: SLF001

        return instance

    @property
    def location(self) -> str:
        """Location of the element in its source document."""
        return self._location
