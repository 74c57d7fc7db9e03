"""
GeoCats Backend — ORM Models
==============================

What:  SQLAlchemy models for the two collections the API manages.
How:   Importing this package registers every model with ``Base.metadata``
       (used by Alembic and by the test suite's ``create_all``).
"""

from geocats.models.cat import Cat
from geocats.models.user import User, UserRole

__all__ = ["Cat", "User", "UserRole"]
