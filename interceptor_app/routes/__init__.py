"""
Routes package for the interceptor application.

This package contains route blueprints:
- api: REST API endpoints, including the external-data consumer
- views: HTML page routes for the web interface
- mocks: the mock interceptor surface, mounted only in test mode
"""
