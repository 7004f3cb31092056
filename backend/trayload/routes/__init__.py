"""
TrayLoad Backend — API Routes Package
=======================================

Route Inventory:
    - projects.py:     /api/projects, /api/projects/{id}
                       /api/projects/{id}/support-overrides[/{tray_type}]
    - cable_types.py:  /api/projects/{id}/cable-types[/{cable_type_id}]
    - cables.py:       /api/projects/{id}/cables[/{cable_id}]
    - trays.py:        /api/projects/{id}/trays[/{tray_id}]
    - loading.py:      /api/projects/{id}/loading, /api/projects/{id}/tray-types
    - materials.py:    /api/materials/trays[/{id}], /api/materials/supports[/{id}]
    - health.py:       /health

Routes are thin: they extract request data, call one service method and
shape the HTTP response. Business rules live in the services.
"""
