"""Test package for Fraud Chat.

Structure:
    - unit/: Claim store, polling, assistant orchestration, rendering
    - integration/: HTTP API workflows through the FastAPI app

The remote Assistants API is replaced by an in-memory fake served through
httpx.MockTransport; no test touches the network.
Leverages pytest with pytest-check for soft assertions.
"""
