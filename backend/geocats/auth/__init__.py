"""
GeoCats Backend — Authentication & Authorization
==================================================

What:  Everything that turns a bearer token into an ``Identity`` and decides
       what that identity may do.

Modules:
    - security.py:  bcrypt password hashing, JWT issue/verify
    - identity.py:  ``Identity`` model and the ``get_current_identity`` dependency
    - policy.py:    capability predicate shared by every gated handler
"""
