# Routes package init
"""
Termbook Backend: API Routes Package
======================================

Route Inventory:
    - definitions.py: GET/POST /definitions, GET/PUT/DELETE /definitions/{id}
    - dashboard.py:   GET /dashboard/definitions
    - health.py:      GET /health

Routes stay thin: extract input, resolve the caller, call a service, wrap
the result in the response envelope. Business rules live in services.
"""
