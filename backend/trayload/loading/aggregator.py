"""
TrayLoad — Tray Type Aggregator
=================================

What:  Partitions a project's trays by their free-text type label.
How:   One pass over trays collects tray ids and distinct widths per type;
       override keys then add any pre-declared types not seen on a tray.
       The result is stably sorted by TrayTypeName.sort_key.
Who:   Called by build_loading_report before weights and spacing.

Width comparison is exact float equality: 300 and 300.0 are the same
width, 300 and 300.0001 are not. No tolerance is applied.
"""

import logging
from typing import Dict, Iterable, List

from trayload.loading.types import TraySnapshot, TrayTypeGroup, TrayTypeName

logger = logging.getLogger(__name__)


def aggregate_types(
    trays: Iterable[TraySnapshot],
    override_keys: Iterable[str],
) -> List[TrayTypeGroup]:
    """
    Build one TrayTypeGroup per distinct non-empty tray type.

    Args:
        trays: The project's trays, any order, may be empty.
        override_keys: Type names present in the override map. A key with
            no matching tray still yields a group (tray_count == 0).

    Returns:
        Groups ordered by case-insensitive type name; names that collate
        equal keep their first-seen order (trays before override keys).
    """
    widths_by_type: Dict[TrayTypeName, List[float]] = {}
    trays_by_type: Dict[TrayTypeName, List[str]] = {}

    for tray in trays:
        type_name = TrayTypeName.parse(tray.tray_type)
        if type_name is None:
            continue
        widths = widths_by_type.setdefault(type_name, [])
        trays_by_type.setdefault(type_name, []).append(tray.id)
        # A tray without a width still belongs to the type
        if tray.width_mm is not None and tray.width_mm not in widths:
            widths.append(tray.width_mm)

    for key in override_keys:
        type_name = TrayTypeName.parse(key)
        if type_name is None or type_name in widths_by_type:
            continue
        widths_by_type[type_name] = []
        trays_by_type[type_name] = []

    groups = []
    for type_name, widths in widths_by_type.items():
        has_multiple_widths = len(widths) > 1
        if has_multiple_widths:
            logger.debug("Tray type %r has conflicting widths %s", type_name, widths)
        groups.append(
            TrayTypeGroup(
                type_name=type_name,
                widths=tuple(widths),
                has_multiple_widths=has_multiple_widths,
                width_mm=widths[0] if len(widths) == 1 else None,
                tray_ids=tuple(trays_by_type[type_name]),
            )
        )

    groups.sort(key=lambda group: TrayTypeName(group.type_name).sort_key)
    return groups
