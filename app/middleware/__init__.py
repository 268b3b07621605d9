# Middleware package init
"""
Quai Antique API — Middleware Package
=======================================

Middleware Chain (request direction):
    Request → [Request ID] → [Access Log] → [Auth Throttle] → [GZip] → [CORS] → Route

    1. Request ID: correlation id stored in a ContextVar and echoed back
    2. Access Log: method, path, status and duration for every request,
       throttled ones included
    3. Auth Throttle: rejects credential flooding on /api/login and
       /api/registration before any hashing work happens
"""
