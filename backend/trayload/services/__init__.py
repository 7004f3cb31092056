"""
TrayLoad Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - ProjectService:    projects and support distance overrides
    - CableTypeService:  cable catalogue
    - CableService:      cable schedule
    - TrayService:       trays
    - LoadingService:    builds the loading report via trayload.loading
    - scope:             project-scoped lookups shared by the above
"""
