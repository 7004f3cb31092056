"""
TrayLoad Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID: correlation ID for logs, error bodies and X-Request-ID
    - Logging: one access line per request with status and duration
"""
