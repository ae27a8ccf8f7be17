"""NiceGUI interface - thin visualization layer for claims and chat.

Responsibilities:
    - Claim submission form and claim list
    - Chat transcript with the fraud assistant
    - Fraud alert notifications and disabled-state banner

Contains minimal business logic. Delegates all operations to the API.
Remains a pure presentation layer.
"""
