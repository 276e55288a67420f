"""
Test suite for the mock interceptor.

This package contains:
- unit/: registry, dispatcher, gate, models, config and client tests
- integration/: Flask test-client and live-server tests
- e2e/: Playwright browser tests (run with ``-m e2e``)
"""
