# Glimpse Test Suite
"""
Test suite for Glimpse.

Unit tests cover the backends, session, screens and navigation;
service tests cover the backend access layer against both document
stores; integration tests drive the web UI through the TestClient.
"""
