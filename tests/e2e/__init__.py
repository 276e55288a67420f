"""
Browser-level tests for the mock interceptor.

This package contains Playwright-based tests that drive a real browser
against the live app while its external API is served by mock routes.
"""
