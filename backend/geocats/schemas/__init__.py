# Schemas package init
"""
GeoCats Backend — Pydantic Schemas
====================================

What:  The API contract: request bodies (validated on input) and projections
       (the only fields a response may carry).
How:   ORM rows are never returned directly. Each response goes through a
       projection model built with ``from_model``, so password hashes and
       internal columns cannot leak.
"""
