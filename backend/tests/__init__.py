"""
Test Suite

Structure:
    - unit/test_engine: transition table, preconditions, permissions, executor
    - unit/test_services: job post and application services on in-memory fakes
    - unit/test_utils: token validation
    - integration/test_api: HTTP surface through FastAPI's TestClient

Usage:
    pytest
"""
