# Middleware package init
"""
Termbook Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error log written
    while handling the request carry the same id.
"""
