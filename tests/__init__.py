"""
Test suite for Warehouse Admin.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_migration_service.py -v
"""
