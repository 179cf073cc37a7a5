"""
cxd test suite.

Tests are organized by layer:
    tests/unit/         Unit tests (rows, store, resolver, config, launch)
    tests/integration/  Integration tests (CLI against a real SQLite file)

Run all tests:
    pytest

Run unit tests only:
    pytest tests/unit/
"""
