"""Declarative system test harness.

The `systest_harness` package discovers YAML test packages on disk,
resolves their data dependencies and executes them against running
services, producing pass, fail, error or skip outcomes per test case
and per suite.

Key features:
- directory-based test packages with `seed`, `inputs` and `expectations`
  documents referenced by id from suite documents;
- pluggable input, expectation, option and reference types registered
  by extensions together with the handlers that apply them;
- a package, suite and case execution lifecycle with ordered listener
  hooks and isolated failure handling.

The core is a library; the `systest` command line tool is a thin adapter
around it.
"""
