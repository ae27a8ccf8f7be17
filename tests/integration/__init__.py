"""Integration tests for the HTTP API working as a system.

Requests go through the real FastAPI app with ASGITransport; only the
remote Assistants API is faked.
"""
