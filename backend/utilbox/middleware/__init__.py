"""
Utilbox Backend: Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so the access log line and any error envelope
      carry the same correlation ID.
    - Logging measures the full duration including CORS and the route.
    - CORS is Starlette's CORSMiddleware, configured in main.py.
"""
