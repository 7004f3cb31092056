"""
TrayLoad — Tray Loading Engine
================================

What:  Pure, synchronous computation over one project's snapshot:
       tray type aggregation, cable weight resolution, support-spacing
       resolution and the display projection built on top of them.
How:   Callers build immutable snapshots (trayload.loading.types), resolve
       cable routing (trayload.loading.routing) and call
       build_loading_report. Nothing here touches the database or keeps
       state between calls.
"""

from trayload.loading.aggregator import aggregate_types
from trayload.loading.projector import (
    build_loading_report,
    compute_load_figures,
    compute_support_figures,
    project_tray_rows,
    project_type_rows,
)
from trayload.loading.routing import resolve_tray_assignments
from trayload.loading.spacing import resolve_support_spacing
from trayload.loading.types import (
    CableSnapshot,
    CableTypeSnapshot,
    LoadingReport,
    MaterialSupportSnapshot,
    MaterialTraySnapshot,
    RoutingResolution,
    TraySnapshot,
    TrayTypeName,
)
from trayload.loading.weights import resolve_weights

__all__ = [
    "CableSnapshot",
    "CableTypeSnapshot",
    "LoadingReport",
    "MaterialSupportSnapshot",
    "MaterialTraySnapshot",
    "RoutingResolution",
    "TraySnapshot",
    "TrayTypeName",
    "aggregate_types",
    "build_loading_report",
    "compute_load_figures",
    "compute_support_figures",
    "project_tray_rows",
    "project_type_rows",
    "resolve_support_spacing",
    "resolve_tray_assignments",
    "resolve_weights",
]
