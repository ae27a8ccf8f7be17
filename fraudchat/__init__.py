"""Fraud Chat - health-insurance claim submission with LLM fraud screening.

Combines FastAPI for the HTTP API, the OpenAI Assistants API for claim
analysis and chat, NiceGUI for the dashboard, and Pydantic for data validation.

Components:
    - claims: In-memory claim store
    - agent: Remote assistant setup, claim analysis, chat, and reply polling
    - api: HTTP endpoints for claims, analysis and chat
    - ui: Rendering helpers and the web dashboard
    - models: Request/response schemas
"""

__version__ = "0.1.0"
