"""
TrayLoad — Support-Spacing Resolver
=====================================

What:  Decides the effective support spacing for each tray type.
How:   Each group is resolved independently against the override map:

           override present            → spacing = override (any width state)
           single/no width, no override → spacing = None
           multiple widths, no override → spacing = None,
                                          needs_manual_resolution = True

       The last state only leaves through a user-entered override.
Who:   Called by build_loading_report after aggregate_types.

Override keys match type names exactly (case-sensitive) after surrounding
whitespace is stripped. This resolver never raises for data issues; an
unresolved ambiguity is reported as data.
"""

import logging
from typing import Iterable, List, Optional

from trayload.loading.types import (
    OverrideMap,
    ResolvedSupport,
    SupportChoiceMap,
    TrayTypeGroup,
    normalize_overrides,
    normalize_support_choices,
)

logger = logging.getLogger(__name__)


def resolve_support_spacing(
    groups: Iterable[TrayTypeGroup],
    overrides: Optional[OverrideMap],
    support_choices: Optional[SupportChoiceMap] = None,
) -> List[ResolvedSupport]:
    """
    Merge aggregated groups with manual overrides.

    No default spacing is invented here: a type without an override gets
    effective_support_spacing=None and any fallback is the caller's policy.
    Output order is the input order.

    support_choices maps a type to the catalogue support picked with its
    override; it is carried through unchanged and never affects spacing.
    """
    override_map = normalize_overrides(overrides)
    choice_map = normalize_support_choices(support_choices)
    resolved: List[ResolvedSupport] = []

    for group in groups:
        spacing = override_map.get(group.type_name)
        has_override = spacing is not None
        needs_manual_resolution = group.has_multiple_widths and not has_override
        if needs_manual_resolution:
            logger.debug(
                "Tray type %r needs a manual support distance (widths %s)",
                group.type_name,
                list(group.widths),
            )
        resolved.append(
            ResolvedSupport(
                type_name=group.type_name,
                width_mm=group.width_mm,
                has_multiple_widths=group.has_multiple_widths,
                effective_support_spacing=spacing,
                needs_manual_resolution=needs_manual_resolution,
                has_override=has_override,
                support_id=choice_map.get(group.type_name),
            )
        )

    return resolved
