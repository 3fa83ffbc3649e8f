"""Test suite for the systest-harness package.

This package contains unit and integration tests validating the model
type registry, test document loading, package parsing, dispatch to
handlers and the execution lifecycle of suites and test cases.
"""
