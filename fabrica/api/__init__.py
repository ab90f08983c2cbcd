"""
Fabrica REST API.

Provides DRF ViewSets for:
- Product (list, create, delete, receive/issue stock)
- Recipe (list, retrieve, define/replace via PUT)
- Production (feasibility, execute)
- ProductionOrder (CRUD + status transitions)
"""
