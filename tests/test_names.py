"""Tests for registered type name derivation."""

import pytest

from systest_harness.names import TYPE_NAME_PATTERN, subtype_name


class KafkaTopicExpectation:
    """CamelCase type with the base suffix."""


class HttpCall:
    """Type without the base suffix."""


class Expectation:
    """Type named exactly as the base."""


@pytest.mark.parametrize('model, base_name, expected', (
    pytest.param(KafkaTopicExpectation, 'Expectation', 'kafka_topic', id='suffix stripped'),
    pytest.param(HttpCall, 'Expectation', 'http_call', id='no suffix'),
    pytest.param(Expectation, 'Expectation', 'expectation', id='base name kept'),
))
def test_subtype_name(model: type, base_name: str, expected: str) -> None:
    """Verify lookup names derived from CamelCase type names."""
    assert subtype_name(model, base_name) == expected


@pytest.mark.parametrize('name, valid', (
    pytest.param('kafka_topic', True, id='snake case'),
    pytest.param('Topic2', True, id='letters and digits'),
    pytest.param('_hidden', False, id='leading underscore'),
    pytest.param('2topic', False, id='leading digit'),
    pytest.param('kafka-topic', False, id='dash'),
    pytest.param('', False, id='empty'),
))
def test_type_name_pattern(name: str, valid: bool) -> None:
    """Verify explicit lookup names validation."""
    assert bool(TYPE_NAME_PATTERN.match(name)) is valid
