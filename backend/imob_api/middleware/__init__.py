# Middleware package init
"""
Imob API — Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [CORS] → [GZip] → [Security Headers] → [Request Context]
            → [Logging + error boundary] → [Auth Gate] → Route Handler

    - CORS outermost: preflight requests are answered before authentication,
      and every response (including 401/403/500) carries CORS headers
    - Security Headers and Request Context wrap everything that can answer,
      so gate rejections and 500s carry them too
    - Logging inside Request Context: the access line has the request ID and,
      after the gate accepted the token, the subject
    - Auth Gate last: only authenticated requests reach the router
"""
