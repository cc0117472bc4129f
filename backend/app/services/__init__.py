# Services package init
"""
Journal Board Backend — Services Layer
========================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle authorization, ordering and storage.
How:   Services accept an AsyncSession plus plain values, raise typed
       exceptions (app/exceptions.py), and return Pydantic response models.

Service Inventory:
    - access:          Token verifier + AccessGate (edit/read authorization)
    - ordering:        Ordering engine for page order_idx and element z
    - board_service:   Board create / lookup / update / delete
    - page_service:    Page CRUD and repositioning
    - element_service: Element CRUD and batch restack
    - recap_service:   Day / week / month summaries of a board's pages
    - file_service:    Image upload validation, storage and serving

Every service module exposes a stateless module-level singleton
(e.g. `page_service = PageService()`).
"""
