# Services package init
"""
Termbook Backend: Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and the repository.
How:   Services accept a session, the calling user and validated payloads,
       apply moderation rules and return response schemas. They never read
       request state directly.

Service Inventory:
    - DefinitionService: search, fetch, create, update, soft delete
    - DashboardService:  per-user submissions and status totals
"""
