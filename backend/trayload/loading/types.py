"""
TrayLoad — Loading Engine Value Types
=======================================

What:  Immutable snapshot models handed into the loading engine, and the
       derived result models it hands back.
How:   Frozen pydantic models. Raw data is normalized once, here, when a
       snapshot is built: negative / NaN / infinite measures become None,
       tray type labels are wrapped in TrayTypeName, identifiers become str.
Who:   Built by LoadingService from ORM rows (from_attributes=True);
       consumed by aggregator, weights, spacing and projector.

Nullable measures:
    None means "no data". 0.0 is a real value. The engine never confuses the
    two: a missing install length falls back to the design length, a missing
    unit weight contributes nothing, and a tray without cables weighs 0.0.
"""

import math
import unicodedata
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Boundary normalization
# ══════════════════════════════════════════════════════════════════════════

def normalize_measure(value: Any) -> Optional[float]:
    """
    Coerce a raw numeric input into a non-negative float or None.

    Accepts int, float, Decimal and numeric strings (a decimal comma is
    accepted, as typed into the cable schedule UI). Blank strings, negative
    numbers, NaN and infinities are treated as absent.

    Raises:
        ValueError: for booleans and strings that are not numbers at all.
            Those are outside the documented input shapes.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("boolean is not a measure")
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if value == "":
            return None
        try:
            value = float(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a number")
    if not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"unsupported measure type: {type(value).__name__}")

    number = float(value)
    if not math.isfinite(number) or number < 0:
        return None
    return number


def normalize_identifier(value: Any) -> Any:
    """UUIDs from the ORM become their canonical string form."""
    if isinstance(value, UUID):
        return str(value)
    return value


class TrayTypeName(str):
    """
    A tray type label with surrounding whitespace removed.

    Equality and hashing are inherited from str, so override lookup stays
    exact and case-sensitive ("Power" and "power" are different types).
    Only display ordering folds case and accents, through sort_key.
    """

    __slots__ = ()

    def __new__(cls, raw: str) -> "TrayTypeName":
        if not isinstance(raw, str):
            raise ValueError("tray type name must be a string")
        cleaned = raw.strip()
        if not cleaned:
            raise ValueError("tray type name must not be blank")
        return super().__new__(cls, cleaned)

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["TrayTypeName"]:
        """Return a TrayTypeName, or None for a missing or blank label."""
        if raw is None:
            return None
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValueError("tray type name must be a string")
        if not raw.strip():
            return None
        return cls(raw)

    @property
    def sort_key(self) -> str:
        """Case- and accent-insensitive collation key ("Élan" sorts with "elan")."""
        decomposed = unicodedata.normalize("NFKD", self)
        stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
        return stripped.casefold()


def normalize_overrides(
    overrides: Optional[Mapping[str, Any]],
) -> Dict[TrayTypeName, Optional[float]]:
    """
    Normalize a raw override map.

    Keys go through TrayTypeName.parse (blank keys are dropped). Values go
    through normalize_measure; a distance of zero is also absent. A key whose
    value normalizes to None is kept: it still declares the tray type.
    If two raw keys normalize to the same name, the first one wins.
    """
    normalized: Dict[TrayTypeName, Optional[float]] = {}
    for raw_key, raw_value in (overrides or {}).items():
        name = TrayTypeName.parse(raw_key)
        if name is None or name in normalized:
            continue
        distance = normalize_measure(raw_value)
        normalized[name] = distance if distance else None
    return normalized


def normalize_support_choices(
    choices: Optional[Mapping[str, Any]],
) -> Dict[TrayTypeName, Optional[str]]:
    """Same key rules as normalize_overrides; values are support ids, blank means none."""
    normalized: Dict[TrayTypeName, Optional[str]] = {}
    for raw_key, raw_value in (choices or {}).items():
        name = TrayTypeName.parse(raw_key)
        if name is None or name in normalized:
            continue
        support_id = normalize_identifier(raw_value)
        if isinstance(support_id, str) and not support_id.strip():
            support_id = None
        normalized[name] = support_id
    return normalized


# ══════════════════════════════════════════════════════════════════════════
# Input snapshots
# ══════════════════════════════════════════════════════════════════════════

class Snapshot(BaseModel):
    """Base for read snapshots: immutable, buildable straight from ORM rows."""

    model_config = {"frozen": True, "from_attributes": True}


class CableTypeSnapshot(Snapshot):
    """A project's cable category. Unit weight is looked up here, never cached on cables."""

    id: str
    name: str
    purpose: Optional[str] = None
    diameter_mm: Optional[float] = None
    weight_kg_per_m: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return normalize_identifier(v)

    @field_validator("diameter_mm", "weight_kg_per_m", mode="before")
    @classmethod
    def coerce_measures(cls, v: Any) -> Optional[float]:
        return normalize_measure(v)

    @property
    def is_grounding(self) -> bool:
        return self.purpose is not None and self.purpose.strip().lower() == "grounding"


class CableSnapshot(Snapshot):
    """
    A cable and the single tray it is assigned to for this computation.

    tray_id is None until routing has been resolved upstream
    (see trayload.loading.routing); unassigned cables load no tray.
    """

    id: str
    cable_id: str
    cable_type_id: Optional[str] = None
    tray_id: Optional[str] = None
    tag: Optional[str] = None
    from_location: Optional[str] = None
    to_location: Optional[str] = None
    routing: Optional[str] = None
    design_length: Optional[float] = None
    install_length: Optional[float] = None

    @field_validator("id", "cable_type_id", "tray_id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return normalize_identifier(v)

    @field_validator("design_length", "install_length", mode="before")
    @classmethod
    def coerce_measures(cls, v: Any) -> Optional[float]:
        return normalize_measure(v)

    @property
    def effective_length(self) -> float:
        """Install length if known, else design length, else 0."""
        if self.install_length is not None:
            return self.install_length
        if self.design_length is not None:
            return self.design_length
        return 0.0


class TraySnapshot(Snapshot):
    """A tray. tray_type is free text; blank labels mean "no type"."""

    id: str
    name: str
    tray_type: Optional[str] = None
    purpose: Optional[str] = None
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    length_mm: Optional[float] = None
    include_grounding_cable: bool = False
    grounding_cable_type_id: Optional[str] = None

    @field_validator("id", "grounding_cable_type_id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return normalize_identifier(v)

    @field_validator("tray_type", mode="after")
    @classmethod
    def parse_type_name(cls, v: Optional[str]) -> Optional[TrayTypeName]:
        return TrayTypeName.parse(v)

    @field_validator("width_mm", "height_mm", "length_mm", mode="before")
    @classmethod
    def coerce_measures(cls, v: Any) -> Optional[float]:
        return normalize_measure(v)

    @field_validator("include_grounding_cable", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return bool(v)


class MaterialTraySnapshot(Snapshot):
    """
    Catalogue entry for a tray product.

    Matched to project trays by type label, ignoring case and surrounding
    whitespace. weight_kg_per_m is the tray's own weight.
    """

    id: str
    tray_type: str
    manufacturer: Optional[str] = None
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    weight_kg_per_m: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return normalize_identifier(v)

    @field_validator("width_mm", "height_mm", "weight_kg_per_m", mode="before")
    @classmethod
    def coerce_measures(cls, v: Any) -> Optional[float]:
        return normalize_measure(v)

    @property
    def match_key(self) -> str:
        return self.tray_type.strip().casefold()


class MaterialSupportSnapshot(Snapshot):
    """Catalogue entry for a support bracket; weight_kg is per piece."""

    id: str
    support_type: str
    weight_kg: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return normalize_identifier(v)

    @field_validator("weight_kg", mode="before")
    @classmethod
    def coerce_measures(cls, v: Any) -> Optional[float]:
        return normalize_measure(v)


# ══════════════════════════════════════════════════════════════════════════
# Derived results
# ══════════════════════════════════════════════════════════════════════════

class TrayTypeGroup(Snapshot):
    """
    All trays sharing one type label.

    widths holds each distinct non-null width once, in first-seen order.
    width_mm is set only when exactly one width was observed.
    """

    type_name: str
    widths: Tuple[float, ...] = ()
    has_multiple_widths: bool = False
    width_mm: Optional[float] = None
    tray_ids: Tuple[str, ...] = ()

    @property
    def tray_count(self) -> int:
        return len(self.tray_ids)


class RoutingResolution(Snapshot):
    """
    Cables placed on trays.

    assignments holds each placed cable once, on the tray that carries its
    weight. crossings holds a copy per further tray the cable passes
    through; those add to load per metre only.
    """

    assignments: Tuple[CableSnapshot, ...] = ()
    crossings: Tuple[CableSnapshot, ...] = ()


class ReferenceKind(str, Enum):
    CABLE_TYPE = "cable_type"
    GROUNDING_CABLE_TYPE = "grounding_cable_type"
    TRAY = "tray"
    MATERIAL_SUPPORT = "material_support"


class UnresolvedReference(Snapshot):
    """A pointer that did not resolve within the supplied snapshot."""

    kind: ReferenceKind
    source_id: str = Field(
        description="Cable, tray or tray type holding the dangling reference"
    )
    missing_id: Optional[str] = Field(
        default=None,
        description="Identifier that could not be found; None when never set",
    )
    tray_id: Optional[str] = Field(default=None, description="Tray being loaded when found")


class TrayWeight(Snapshot):
    total_weight_kg: float = 0.0
    cable_count: int = 0
    through_cable_count: int = 0
    load_per_meter_kg: Optional[float] = None


class WeightResolution(Snapshot):
    """Per-tray weights plus every reference that failed to resolve."""

    trays: Dict[str, TrayWeight] = Field(default_factory=dict)
    unresolved: Tuple[UnresolvedReference, ...] = ()


class ResolvedSupport(Snapshot):
    type_name: str
    width_mm: Optional[float] = None
    has_multiple_widths: bool = False
    effective_support_spacing: Optional[float] = None
    needs_manual_resolution: bool = False
    has_override: bool = False
    support_id: Optional[str] = None


class TrayTypeRow(Snapshot):
    """Display-ready per-type record."""

    type_name: str
    width_mm: Optional[float] = None
    has_multiple_widths: bool = False
    effective_support_spacing: Optional[float] = None
    needs_manual_resolution: bool = False
    has_override: bool = False
    support_id: Optional[str] = None
    total_weight_kg: float = 0.0
    tray_count: int = 0


class SupportFigures(Snapshot):
    """Support count and support self-weight along one tray run."""

    length_m: Optional[float] = None
    spacing_m: Optional[float] = None
    supports_count: Optional[int] = None
    weight_per_piece_kg: Optional[float] = None
    total_weight_kg: Optional[float] = None
    weight_per_meter_kg: Optional[float] = None


class LoadFigures(Snapshot):
    """
    Combined structural load of one tray run.

    tray_load_per_meter_kg    = tray own weight + supports, per metre
    cables_total_weight_kg    = cable load per metre * run length
    total_load_per_meter_kg   = tray load + cable load, per metre
    total_weight_kg           = tray own weight total + cables total

    Every figure is None as soon as one of its inputs is unknown.
    """

    tray_weight_per_meter_kg: Optional[float] = None
    tray_load_per_meter_kg: Optional[float] = None
    tray_total_own_weight_kg: Optional[float] = None
    cables_load_per_meter_kg: Optional[float] = None
    cables_total_weight_kg: Optional[float] = None
    total_load_per_meter_kg: Optional[float] = None
    total_weight_kg: Optional[float] = None
    total_load_per_meter_kn: Optional[float] = None


class TrayLoadRow(Snapshot):
    """Display-ready per-tray record."""

    tray_id: str
    name: str
    tray_type: Optional[str] = None
    width_mm: Optional[float] = None
    length_mm: Optional[float] = None
    cable_count: int = 0
    through_cable_count: int = 0
    total_weight_kg: float = 0.0
    load_per_meter_kg: Optional[float] = None
    material_tray_id: Optional[str] = None
    supports: SupportFigures = Field(default_factory=SupportFigures)
    load: LoadFigures = Field(default_factory=LoadFigures)


class LoadingReport(Snapshot):
    types: Tuple[TrayTypeRow, ...] = ()
    trays: Tuple[TrayLoadRow, ...] = ()
    unresolved: Tuple[UnresolvedReference, ...] = ()


OverrideMap = Mapping[str, Optional[Union[float, int, Decimal]]]
SupportChoiceMap = Mapping[str, Optional[str]]
