"""
TrayLoad — Cable Routing Resolution
=====================================

What:  Turns a cable's free-text routing into a single tray assignment.
How:   A routing is a "/"-separated list of tray names, e.g. "T-101/T-102".
       Each segment is trimmed and matched case-insensitively against tray
       names. The first tray matched on the route becomes the cable's
       tray; it alone carries the cable's weight.
Who:   LoadingService, before handing cables to resolve_weights.

Every further tray on the route is returned as a crossing: the cable
passes through it, so its unit weight counts towards that tray's load per
metre, but its total weight is never booked there a second time.

Cables that already carry a tray_id are passed through untouched.
Segments naming no known tray are ignored.
"""

from typing import Dict, Iterable, List, Optional

from trayload.loading.types import CableSnapshot, RoutingResolution, TraySnapshot

ROUTING_SEPARATOR = "/"


def routing_segments(routing: Optional[str]) -> List[str]:
    """Split a routing string into normalized, non-empty tray name keys."""
    if not routing:
        return []
    segments = (segment.strip().casefold() for segment in routing.split(ROUTING_SEPARATOR))
    return [segment for segment in segments if segment]


def resolve_tray_assignments(
    cables: Iterable[CableSnapshot],
    trays: Iterable[TraySnapshot],
) -> RoutingResolution:
    """
    Assign each cable to exactly one tray.

    Returns:
        RoutingResolution with one assigned snapshot per placed cable, in
        cable order, and one crossing snapshot per further distinct tray
        on a routed cable's path. Cables whose routing names no known tray
        are left out of both.
    """
    tray_ids_by_name: Dict[str, str] = {}
    for tray in trays:
        tray_ids_by_name.setdefault(tray.name.strip().casefold(), tray.id)

    assignments: List[CableSnapshot] = []
    crossings: List[CableSnapshot] = []
    for cable in cables:
        if cable.tray_id is not None:
            assignments.append(cable)
            continue

        route: List[str] = []
        for segment in routing_segments(cable.routing):
            tray_id = tray_ids_by_name.get(segment)
            if tray_id is not None and tray_id not in route:
                route.append(tray_id)
        if not route:
            continue

        assignments.append(cable.model_copy(update={"tray_id": route[0]}))
        crossings.extend(cable.model_copy(update={"tray_id": tray_id}) for tray_id in route[1:])

    return RoutingResolution(assignments=tuple(assignments), crossings=tuple(crossings))
