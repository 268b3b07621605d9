# Security package init
"""
Quai Antique API — Security Package
=====================================

What:  Credential primitives and request authentication.

Module Inventory:
    - passwords.py:      PasswordHasher (salted one-way hashing + verification)
    - tokens.py:         issue_api_token() (bearer token generation)
    - authenticator.py:  get_current_user FastAPI dependency (bearer → User)
"""
