# Integration Tests
"""
Integration tests verify complete user workflows through the web UI.

Principle: Test behavior, not implementation.
"""
