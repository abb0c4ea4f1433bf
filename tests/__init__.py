"""Test suite for vdjpool.

Test organization:
- fixtures/: Mock sample generators and test utilities
- unit/: Unit tests for individual modules

Run tests with:
    pytest tests/
    pytest tests/unit/
    pytest tests/ -v --tb=short
"""
