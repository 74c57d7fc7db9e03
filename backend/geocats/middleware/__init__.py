# Middleware package init
"""
GeoCats Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID sets the correlation id used by logs and error bodies
    - Rate Limit rejects over-quota clients before a session is opened
    - Logging records method, path, status and duration once the handler returns

Responses travel the chain in reverse, so X-Request-ID is present on every
response, 429s included.
"""
