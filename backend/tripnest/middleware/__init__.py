# Middleware package init
"""
TripNest Backend - Middleware Package
=======================================

Middleware Chain (outermost first, as registered in main.py):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route Handler

    - Request ID: assigns X-Request-ID and stores it in a ContextVar
    - Logging:    one access-log line per request with status and duration
    - Session:    Starlette SessionMiddleware (signed cookie holding the user id)
    - GZip, CORS: Starlette's stock middleware
"""
