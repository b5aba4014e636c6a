"""
So Quoteable Backend — Middleware Package
==========================================

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    Rate limiting runs first so rejected requests cost nothing else. The
    request ID is set before access logging so every log line carries it.
"""
