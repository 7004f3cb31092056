"""
TrayLoad — Weight Resolver
============================

What:  Computes the cable load carried by each tray.
How:   Joins every assigned cable to its cable type for the unit weight,
       multiplies by the cable's effective length and sums per tray. A tray
       flagged for a grounding cable gets that type's unit weight once.
       Cables only passing through a tray add their unit weight to its
       load per metre and nothing to its total.
Who:   Called by build_loading_report; results feed the per-type and
       per-tray projections.

Dangling references never abort the computation. A cable whose cable type
is unknown still counts as a cable on its tray but contributes no weight,
and the reference is reported in WeightResolution.unresolved. The same
holds for a grounding selection that names a cable type whose purpose is
not grounding.
"""

import logging
from typing import Dict, Iterable, List, Optional

from trayload.loading.types import (
    CableSnapshot,
    CableTypeSnapshot,
    ReferenceKind,
    TraySnapshot,
    TrayWeight,
    UnresolvedReference,
    WeightResolution,
)

logger = logging.getLogger(__name__)


def resolve_weights(
    cables: Iterable[CableSnapshot],
    cable_types: Iterable[CableTypeSnapshot],
    trays: Iterable[TraySnapshot],
    crossings: Iterable[CableSnapshot] = (),
) -> WeightResolution:
    """
    Sum cable weights per tray.

    Per cable:  weight_kg_per_m * (install_length ?? design_length ?? 0)
    Per tray:   sum over assigned cables, plus the grounding cable's unit
                weight once when include_grounding_cable resolves.

    load_per_meter_kg is the sum of the unit weights involved (cables and
    grounding conductor); it stays None when nothing on the tray has a
    known unit weight. total_weight_kg is always a number, 0.0 for an
    empty tray.

    Cables with tray_id=None are not routed through any tray and are
    skipped. Cables pointing at a tray outside the snapshot are reported.

    crossings are further trays on a routed cable's path (see
    resolve_tray_assignments). They raise through_cable_count and
    load_per_meter_kg of that tray; the cable's weight stays on the one
    tray it is assigned to.
    """
    tray_list = list(trays)
    types_by_id: Dict[str, CableTypeSnapshot] = {
        cable_type.id: cable_type for cable_type in cable_types
    }

    totals: Dict[str, float] = {tray.id: 0.0 for tray in tray_list}
    counts: Dict[str, int] = {tray.id: 0 for tray in tray_list}
    through: Dict[str, int] = {tray.id: 0 for tray in tray_list}
    per_meter: Dict[str, Optional[float]] = {tray.id: None for tray in tray_list}
    unresolved: List[UnresolvedReference] = []

    for cable in cables:
        if cable.tray_id is None:
            continue
        if cable.tray_id not in totals:
            unresolved.append(
                UnresolvedReference(
                    kind=ReferenceKind.TRAY,
                    source_id=cable.id,
                    missing_id=cable.tray_id,
                )
            )
            continue

        counts[cable.tray_id] += 1

        cable_type = types_by_id.get(cable.cable_type_id)
        if cable_type is None:
            unresolved.append(
                UnresolvedReference(
                    kind=ReferenceKind.CABLE_TYPE,
                    source_id=cable.id,
                    missing_id=cable.cable_type_id,
                    tray_id=cable.tray_id,
                )
            )
            continue

        unit_weight = cable_type.weight_kg_per_m
        if unit_weight is None:
            continue
        totals[cable.tray_id] += unit_weight * cable.effective_length
        per_meter[cable.tray_id] = (per_meter[cable.tray_id] or 0.0) + unit_weight

    for crossing in crossings:
        if crossing.tray_id not in through:
            continue
        through[crossing.tray_id] += 1
        cable_type = types_by_id.get(crossing.cable_type_id)
        # The assigned tray already reported a missing type for this cable
        if cable_type is None or cable_type.weight_kg_per_m is None:
            continue
        per_meter[crossing.tray_id] = (
            (per_meter[crossing.tray_id] or 0.0) + cable_type.weight_kg_per_m
        )

    for tray in tray_list:
        if not tray.include_grounding_cable or tray.grounding_cable_type_id is None:
            continue
        grounding_type = types_by_id.get(tray.grounding_cable_type_id)
        if grounding_type is None or not grounding_type.is_grounding:
            unresolved.append(
                UnresolvedReference(
                    kind=ReferenceKind.GROUNDING_CABLE_TYPE,
                    source_id=tray.id,
                    missing_id=tray.grounding_cable_type_id,
                    tray_id=tray.id,
                )
            )
            continue
        unit_weight = grounding_type.weight_kg_per_m
        if unit_weight is None:
            continue
        totals[tray.id] += unit_weight
        per_meter[tray.id] = (per_meter[tray.id] or 0.0) + unit_weight

    if unresolved:
        logger.debug("Weight resolution left %d unresolved references", len(unresolved))

    return WeightResolution(
        trays={
            tray_id: TrayWeight(
                total_weight_kg=totals[tray_id],
                cable_count=counts[tray_id],
                through_cable_count=through[tray_id],
                load_per_meter_kg=per_meter[tray_id],
            )
            for tray_id in totals
        },
        unresolved=tuple(unresolved),
    )
