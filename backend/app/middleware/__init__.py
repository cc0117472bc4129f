# Middleware package init
"""
Journal Board Backend — Middleware Package
============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: assign or propagate X-Request-ID before anything logs
    2. Logging:    one access line per request, tagged with that ID
    3. GZip/CORS:  FastAPI/Starlette built-ins

    Responses travel the chain in reverse, so the logged duration covers
    the handler, the transaction commit and serialization.
"""
