"""Declarative base schema of test documents.

Defines immutable Pydantic models that describe pluggable elements
(inputs, expectations, options and references), suite and test case
definitions, and the source location tracking shared by all of them.
"""

from .definitions import Disabled, TestCaseDef, TestSuiteDef
from .elements import Expectation, Input, Option
from .locations import (
    UNKNOWN_LOCATION,
    LocatedDict,
    LocatedStr,
    LocationAware,
    location_of,
)
from .refs import SIMPLE_REF_NAME, BaseRef, ExpectationRef, InputRef, Ref, SimpleRef

__all__ = (
    'SIMPLE_REF_NAME',
    'UNKNOWN_LOCATION',
    'BaseRef',
    'Disabled',
    'Expectation',
    'ExpectationRef',
    'Input',
    'InputRef',
    'LocatedDict',
    'LocatedStr',
    'LocationAware',
    'Option',
    'Ref',
    'SimpleRef',
    'TestCaseDef',
    'TestSuiteDef',
    'location_of',
)
