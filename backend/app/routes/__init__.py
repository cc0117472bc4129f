# Routes package init
"""
Journal Board Backend — API Routes Package
============================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory (all under /api/v1 unless noted):
    - boards.py:    /boards, /boards/edit/{token}, /boards/public/{token}, /boards/{id}
    - pages.py:     /boards/{id}/pages[/{page_id}]
    - elements.py:  /boards/{id}/pages/{page_id}/elements[/reorder|/{element_id}]
    - recap.py:     /boards/{id}/recap
    - uploads.py:   /boards/{id}/upload, and /uploads/boards/{id}/{filename} (no prefix)
    - health.py:    /health, /health/db (no prefix)

Design Principle:
    Routes are THIN: extract path/query/body, pass the raw token to the
    service, wrap the result. Authorization, ordering and storage live in
    app/services.
"""
