# Middleware package init
"""
Notes API - Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    The request ID is set first so the access log line can carry it, and it
    is written to the response headers on the way out.
"""
