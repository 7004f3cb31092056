"""
TrayLoad — Result Projector
=============================

What:  Shapes resolver output into the display-ready report.
How:   Per-type rows join ResolvedSupport with the group's trays and their
       weights. Per-tray rows add support figures (how many supports a run
       needs at the effective spacing and what they weigh) and the combined
       load of tray, supports and cables.
Who:   build_loading_report is the engine's single entry point used by
       LoadingService; the helpers are public for direct testing.

Pipeline:
    trays + override keys ─▶ aggregate_types ─▶ resolve_support_spacing ─┐
    cables + cable types + trays ─▶ resolve_weights ──────────────────────┴─▶ rows
    material trays + material supports ───────────────────────────────────────▶ load
"""

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from trayload.loading.aggregator import aggregate_types
from trayload.loading.spacing import resolve_support_spacing
from trayload.loading.types import (
    CableSnapshot,
    CableTypeSnapshot,
    LoadFigures,
    LoadingReport,
    MaterialSupportSnapshot,
    MaterialTraySnapshot,
    OverrideMap,
    ReferenceKind,
    ResolvedSupport,
    SupportChoiceMap,
    SupportFigures,
    TrayLoadRow,
    TraySnapshot,
    TrayTypeGroup,
    TrayTypeRow,
    TrayWeight,
    UnresolvedReference,
    WeightResolution,
    normalize_measure,
)
from trayload.loading.weights import resolve_weights

# An extra support is added when the leftover run exceeds this share of a span
SUPPORT_REMAINDER_RATIO = 0.2
MIN_SUPPORTS_PER_RUN = 2

# Standard gravity, kg → kN
KN_PER_KG = 9.80665 / 1000


def compute_support_figures(
    length_mm: Optional[float],
    spacing_m: Optional[float],
    weight_per_piece_kg: Optional[float] = None,
) -> SupportFigures:
    """
    Count supports along a tray run.

    Rule:
        segments = floor(length / spacing)
        count    = max(2, segments + 1)
        count   += 1 if segments >= 1 and remainder > 0.2 * spacing

    Counts are None when either the length or the spacing is unknown;
    weights are None when the per-piece weight is unknown.
    """
    length_m = length_mm / 1000 if length_mm is not None and length_mm > 0 else None
    spacing = spacing_m if spacing_m is not None and spacing_m > 0 else None
    piece_weight = normalize_measure(weight_per_piece_kg)

    if length_m is None or spacing is None:
        return SupportFigures(
            length_m=length_m,
            spacing_m=spacing,
            weight_per_piece_kg=piece_weight,
        )

    segments = math.floor(length_m / spacing)
    supports_count = max(MIN_SUPPORTS_PER_RUN, segments + 1)
    remainder = length_m - segments * spacing
    if segments >= 1 and remainder > spacing * SUPPORT_REMAINDER_RATIO:
        supports_count += 1

    total_weight_kg = supports_count * piece_weight if piece_weight is not None else None
    weight_per_meter_kg = total_weight_kg / length_m if total_weight_kg is not None else None

    return SupportFigures(
        length_m=length_m,
        spacing_m=spacing,
        supports_count=supports_count,
        weight_per_piece_kg=piece_weight,
        total_weight_kg=total_weight_kg,
        weight_per_meter_kg=weight_per_meter_kg,
    )


def compute_load_figures(
    length_m: Optional[float],
    tray_weight_per_meter_kg: Optional[float],
    support_weight_per_meter_kg: Optional[float],
    cables_load_per_meter_kg: Optional[float],
) -> LoadFigures:
    """Combine tray, support and cable loads of one run (see LoadFigures)."""
    length = length_m if length_m is not None and length_m > 0 else None

    tray_load = None
    if tray_weight_per_meter_kg is not None and support_weight_per_meter_kg is not None:
        tray_load = tray_weight_per_meter_kg + support_weight_per_meter_kg
    tray_total = tray_load * length if tray_load is not None and length is not None else None
    cables_total = (
        cables_load_per_meter_kg * length
        if cables_load_per_meter_kg is not None and length is not None
        else None
    )

    total_load = None
    if tray_load is not None and cables_load_per_meter_kg is not None:
        total_load = tray_load + cables_load_per_meter_kg
    total_weight = None
    if tray_total is not None and cables_total is not None:
        total_weight = tray_total + cables_total

    return LoadFigures(
        tray_weight_per_meter_kg=tray_weight_per_meter_kg,
        tray_load_per_meter_kg=tray_load,
        tray_total_own_weight_kg=tray_total,
        cables_load_per_meter_kg=cables_load_per_meter_kg,
        cables_total_weight_kg=cables_total,
        total_load_per_meter_kg=total_load,
        total_weight_kg=total_weight,
        total_load_per_meter_kn=total_load * KN_PER_KG if total_load is not None else None,
    )


def project_type_rows(
    resolved: Sequence[ResolvedSupport],
    groups: Iterable[TrayTypeGroup],
    weights: WeightResolution,
) -> List[TrayTypeRow]:
    """One row per resolved type, in resolver order, with summed tray weights."""
    groups_by_name: Dict[str, TrayTypeGroup] = {group.type_name: group for group in groups}
    rows: List[TrayTypeRow] = []

    for support in resolved:
        group = groups_by_name.get(support.type_name)
        tray_ids = group.tray_ids if group is not None else ()
        total_weight_kg = sum(
            (weights.trays[tray_id].total_weight_kg for tray_id in tray_ids if tray_id in weights.trays),
            0.0,
        )
        rows.append(
            TrayTypeRow(
                type_name=support.type_name,
                width_mm=support.width_mm,
                has_multiple_widths=support.has_multiple_widths,
                effective_support_spacing=support.effective_support_spacing,
                needs_manual_resolution=support.needs_manual_resolution,
                has_override=support.has_override,
                support_id=support.support_id,
                total_weight_kg=total_weight_kg,
                tray_count=len(tray_ids),
            )
        )

    return rows


def project_tray_rows(
    trays: Iterable[TraySnapshot],
    weights: WeightResolution,
    resolved: Iterable[ResolvedSupport],
    default_support_distance: Optional[float] = None,
    support_weight_kg: Optional[float] = None,
    material_trays: Iterable[MaterialTraySnapshot] = (),
    material_supports: Iterable[MaterialSupportSnapshot] = (),
) -> List[TrayLoadRow]:
    """
    One row per tray, ordered by case-insensitive tray name.

    The spacing used for support figures is the type's effective spacing,
    falling back to default_support_distance (the project's policy). The
    weight per support is that of the catalogue support chosen for the
    type when it has one, else support_weight_kg. The tray's own weight
    per metre comes from the catalogue tray with the same type label.
    """
    support_by_type: Mapping[str, ResolvedSupport] = {
        support.type_name: support for support in resolved
    }
    material_by_type: Dict[str, MaterialTraySnapshot] = {}
    for material in material_trays:
        material_by_type.setdefault(material.match_key, material)
    supports_by_id: Dict[str, MaterialSupportSnapshot] = {
        support.id: support for support in material_supports
    }
    fallback = normalize_measure(default_support_distance)
    rows: List[TrayLoadRow] = []

    for tray in sorted(trays, key=lambda item: item.name.strip().casefold()):
        resolved_support = support_by_type.get(tray.tray_type) if tray.tray_type else None

        spacing = resolved_support.effective_support_spacing if resolved_support else None
        if spacing is None:
            spacing = fallback

        piece_weight = support_weight_kg
        chosen = supports_by_id.get(resolved_support.support_id) if resolved_support else None
        if chosen is not None and chosen.weight_kg is not None:
            piece_weight = chosen.weight_kg

        material = material_by_type.get(tray.tray_type.casefold()) if tray.tray_type else None
        weight = weights.trays.get(tray.id, TrayWeight())
        supports = compute_support_figures(tray.length_mm, spacing, piece_weight)

        rows.append(
            TrayLoadRow(
                tray_id=tray.id,
                name=tray.name,
                tray_type=tray.tray_type,
                width_mm=tray.width_mm,
                length_mm=tray.length_mm,
                cable_count=weight.cable_count,
                through_cable_count=weight.through_cable_count,
                total_weight_kg=weight.total_weight_kg,
                load_per_meter_kg=weight.load_per_meter_kg,
                material_tray_id=material.id if material else None,
                supports=supports,
                load=compute_load_figures(
                    supports.length_m,
                    material.weight_kg_per_m if material else None,
                    supports.weight_per_meter_kg,
                    weight.load_per_meter_kg,
                ),
            )
        )

    return rows


def _unresolved_supports(
    resolved: Iterable[ResolvedSupport],
    material_supports: Iterable[MaterialSupportSnapshot],
) -> List[UnresolvedReference]:
    known = {support.id for support in material_supports}
    return [
        UnresolvedReference(
            kind=ReferenceKind.MATERIAL_SUPPORT,
            source_id=support.type_name,
            missing_id=support.support_id,
        )
        for support in resolved
        if support.support_id is not None and support.support_id not in known
    ]


def build_loading_report(
    cables: Iterable[CableSnapshot],
    cable_types: Iterable[CableTypeSnapshot],
    trays: Iterable[TraySnapshot],
    overrides: Optional[OverrideMap] = None,
    default_support_distance: Optional[float] = None,
    support_weight_kg: Optional[float] = None,
    *,
    crossings: Iterable[CableSnapshot] = (),
    support_choices: Optional[SupportChoiceMap] = None,
    material_trays: Iterable[MaterialTraySnapshot] = (),
    material_supports: Iterable[MaterialSupportSnapshot] = (),
) -> LoadingReport:
    """
    Run the full engine over one project snapshot.

    Cables must already carry their tray assignment, and crossings their
    further trays (see trayload.loading.routing). Identical inputs always
    produce an identical report.
    """
    tray_list = list(trays)
    support_list = list(material_supports)
    override_map: OverrideMap = overrides or {}

    groups = aggregate_types(tray_list, override_map.keys())
    resolved = resolve_support_spacing(groups, override_map, support_choices)
    weights = resolve_weights(cables, cable_types, tray_list, crossings)

    return LoadingReport(
        types=tuple(project_type_rows(resolved, groups, weights)),
        trays=tuple(
            project_tray_rows(
                tray_list,
                weights,
                resolved,
                default_support_distance=default_support_distance,
                support_weight_kg=support_weight_kg,
                material_trays=material_trays,
                material_supports=support_list,
            )
        ),
        unresolved=weights.unresolved + tuple(_unresolved_supports(resolved, support_list)),
    )
