# Routes package init
"""
GeoCats Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - cats.py:     /api/cats/...     cat CRUD, owner and admin variants, area query
    - users.py:    /api/users/...    registration, profiles, current user, token check
    - auth.py:     /api/auth/login   bearer token issue
    - uploads.py:  /uploads/{name}   stored cat images
    - health.py:   /health           service health check

Routes stay thin: declare field rules, resolve identity and context,
call the service, return its response model.
"""
