"""Base types of pluggable test elements.

Extensions subclass these bases to define what an input, an expectation
or a suite option looks like in a test document. The harness itself
attaches no meaning to them: inputs are applied and expectations are
checked by the handlers registered alongside their types.
"""

from .locations import LocationAware


class Input(LocationAware):
    """Base of all input types.

    An input is data fed to the services under test, either as suite seed
    data or as the inputs of a single test case.
    """


class Expectation(LocationAware):
    """Base of all expectation types.

    An expectation describes an observable outcome the services under test
    must produce after the inputs of a test case are applied.
    """


class Option(LocationAware):
    """Base of all suite option types.

    Options tune how handlers behave for every test case in a suite.
    """
