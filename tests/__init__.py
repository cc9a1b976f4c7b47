"""
Test suite for the Donation Catalog backend.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_wizard_reducer.py -v
"""
