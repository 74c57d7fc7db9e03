# Services package init
"""
GeoCats Backend — Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services accept a session plus validated inputs, apply the ownership and
       role rules, perform the store operation, and return response models.
       Each service is a stateless module-level singleton.

Service Inventory:
    - CatService:  cat CRUD, owner/admin gated updates and deletes, area query
    - UserService: registration, profile lookups, self-update/delete, login
    - FileService: upload validation, storage, serving and cleanup
"""
