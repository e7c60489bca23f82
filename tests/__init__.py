"""
Medlas Test Suite
=================

Test Structure:
- test_tools/: Slot arithmetic, conflict detection and interaction table
- test_services/: Record store, adherence, schedule, LLM and assistant services
- test_actions/: Insights engine
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_api/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""
