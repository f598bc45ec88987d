"""
Test suite for the Account Tracker application.

This package contains all test types:
- Unit tests
- Integration tests
- API endpoint tests
- Database migration tests
- Regression tests
- Security tests
- Property-based tests
"""
