# Routes package init
"""
Quai Antique API — Routes Package
===================================

What:  HTTP route handlers; thin wrappers that delegate to services.

Route Inventory:
    - security.py:  POST /api/registration        (create account)
                    POST /api/login               (authenticate, get token)
                    GET  /api/me, /api/me/{id}    (own profile)
                    PUT  /api/me/edit/{id}        (edit own profile)
    - catalog.py:   POST/GET/PUT/DELETE /api/restaurant[/{id}]
                    POST/GET/PUT/DELETE /api/category[/{id}]
                    POST/GET/PUT/DELETE /api/food[/{id}]
    - health.py:    GET  /health
"""
