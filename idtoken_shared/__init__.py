"""
Shared utilities for the ID token verifier.

This package aggregates the building blocks the verifier core relies on:

- config: Verifier configuration via pydantic-settings
- logging: Structured logging (structlog)
- metrics: Prometheus counters for validations and key refreshes
- errors: Canonical error taxonomy for the verification pipeline
- test_helpers: Key and token factories for the test-suite

Do not import from idtoken_verifier into this package.
"""
