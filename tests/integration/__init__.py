"""
Integration test package for the mock interceptor.

Tests use the Flask test client or a live server and demonstrate:
- Dispatching through the mock blueprint
- Managing mocks over the admin endpoints
- Redirecting outbound calls with EXTERNAL_API_BASE
- Structural absence of mocks outside test mode
"""
