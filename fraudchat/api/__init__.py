"""FastAPI endpoints for claim submission, fraud analysis and chat.

Endpoints:
    - GET /health: Service health status
    - GET /assistant/status: Whether AI features are configured and ready
    - GET, POST /claims: List and submit claims
    - GET /claims/{id}: One claim
    - POST /claims/{id}/status: Manual approve or flag
    - POST /claims/{id}/analysis: Fraud analysis by the assistant
    - POST /chat: Chat with the assistant
    - GET /chat/transcript: Chat history
"""

from fraudchat.api.app import create_app

__all__ = ["create_app"]
