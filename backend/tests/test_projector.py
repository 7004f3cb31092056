"""
TrayLoad Backend — Report Projection Tests
============================================

What we test:
    ✅ Support counts along a tray run, including the remainder rule
    ✅ Support self-weight totals
    ✅ Full report over a small project snapshot
    ✅ Determinism: identical inputs give identical reports
    ✅ Project spacing fallback when a type has no override
    ✅ Combined tray, support and cable load per run
    ✅ A routed cable's weight is counted once in its type total
    ✅ Catalogue support weight replaces the project support weight
"""

import pytest

from trayload.loading import (
    CableSnapshot,
    CableTypeSnapshot,
    MaterialSupportSnapshot,
    MaterialTraySnapshot,
    TraySnapshot,
    build_loading_report,
    resolve_tray_assignments,
)
from trayload.loading.projector import KN_PER_KG, compute_load_figures, compute_support_figures
from trayload.loading.types import ReferenceKind


class TestComputeSupportFigures:

    @pytest.mark.parametrize(
        "length_mm, expected",
        [
            (6000, 4),   # exact spans
            (6500, 5),   # remainder 0.5 m > 0.4 m
            (6300, 4),   # remainder 0.3 m ≤ 0.4 m
            (1000, 2),   # shorter than one span
        ],
    )
    def test_support_count(self, length_mm, expected):
        assert compute_support_figures(length_mm, 2.0).supports_count == expected

    def test_support_weight(self):
        figures = compute_support_figures(6000, 2.0, 1.5)

        assert figures.length_m == 6.0
        assert figures.total_weight_kg == pytest.approx(6.0)
        assert figures.weight_per_meter_kg == pytest.approx(1.0)

    def test_unknown_piece_weight_leaves_weights_empty(self):
        figures = compute_support_figures(6000, 2.0)

        assert figures.supports_count == 4
        assert figures.total_weight_kg is None
        assert figures.weight_per_meter_kg is None

    @pytest.mark.parametrize("length_mm, spacing", [(None, 2.0), (6000, None), (0, 2.0), (6000, 0)])
    def test_missing_inputs_give_no_count(self, length_mm, spacing):
        figures = compute_support_figures(length_mm, spacing, 1.5)

        assert figures.supports_count is None
        assert figures.total_weight_kg is None
        assert figures.weight_per_piece_kg == 1.5


class TestComputeLoadFigures:

    def test_combines_tray_supports_and_cables(self):
        load = compute_load_figures(6.0, 3.0, 1.0, 2.5)

        assert load.tray_load_per_meter_kg == pytest.approx(4.0)
        assert load.tray_total_own_weight_kg == pytest.approx(24.0)
        assert load.cables_total_weight_kg == pytest.approx(15.0)
        assert load.total_load_per_meter_kg == pytest.approx(6.5)
        assert load.total_weight_kg == pytest.approx(39.0)
        assert load.total_load_per_meter_kn == pytest.approx(6.5 * 9.80665 / 1000)

    def test_unknown_tray_weight_leaves_combined_figures_empty(self):
        load = compute_load_figures(6.0, None, 1.0, 2.5)

        assert load.tray_load_per_meter_kg is None
        assert load.total_load_per_meter_kg is None
        assert load.total_weight_kg is None
        assert load.cables_total_weight_kg == pytest.approx(15.0)

    def test_unknown_length_leaves_totals_empty(self):
        load = compute_load_figures(None, 3.0, 1.0, 2.5)

        assert load.tray_total_own_weight_kg is None
        assert load.cables_total_weight_kg is None
        assert load.total_weight_kg is None
        assert load.total_load_per_meter_kg == pytest.approx(6.5)


def project_snapshot():
    cable_types = [
        CableTypeSnapshot(id="ct-power", name="NYY 4x95", weight_kg_per_m=2.0),
        CableTypeSnapshot(id="ct-pe", name="PE 50", purpose="Grounding", weight_kg_per_m=0.3),
    ]
    trays = [
        TraySnapshot(id="t3", name="m-2", tray_type="Mesh", width_mm=400, length_mm=3000),
        TraySnapshot(id="t1", name="L-1", tray_type="Ladder", width_mm=300, length_mm=6000),
        TraySnapshot(id="t2", name="M-1", tray_type="Mesh", width_mm=200, length_mm=6500),
        TraySnapshot(
            id="t4",
            name="L-2",
            tray_type=" Ladder ",
            width_mm=300,
            length_mm=6000,
            include_grounding_cable=True,
            grounding_cable_type_id="ct-pe",
        ),
    ]
    cables = [
        CableSnapshot(id="c1", cable_id="C1", cable_type_id="ct-power", tray_id="t1", design_length=10),
        CableSnapshot(id="c2", cable_id="C2", cable_type_id="ct-power", tray_id="t2", install_length=5),
        CableSnapshot(id="c3", cable_id="C3", cable_type_id="ct-gone", tray_id="t2", install_length=5),
    ]
    return cables, cable_types, trays


class TestBuildLoadingReport:

    def test_full_report(self):
        cables, cable_types, trays = project_snapshot()

        report = build_loading_report(
            cables,
            cable_types,
            trays,
            overrides={"Ladder": 2.0, "Fiber": 1.2},
            default_support_distance=1.5,
            support_weight_kg=1.5,
        )

        assert [row.type_name for row in report.types] == ["Fiber", "Ladder", "Mesh"]
        fiber, ladder, mesh = report.types

        assert fiber.tray_count == 0
        assert fiber.effective_support_spacing == 1.2
        assert fiber.total_weight_kg == 0.0

        assert ladder.width_mm == 300.0
        assert ladder.effective_support_spacing == 2.0
        assert ladder.has_override is True
        assert ladder.tray_count == 2
        assert ladder.total_weight_kg == pytest.approx(20.3)

        assert mesh.has_multiple_widths is True
        assert mesh.width_mm is None
        assert mesh.needs_manual_resolution is True
        assert mesh.has_override is False
        assert mesh.effective_support_spacing is None
        assert mesh.total_weight_kg == pytest.approx(10.0)

        assert [row.name for row in report.trays] == ["L-1", "L-2", "M-1", "m-2"]
        by_name = {row.name: row for row in report.trays}
        assert by_name["L-1"].supports.spacing_m == 2.0
        assert by_name["L-1"].supports.supports_count == 4
        # Mesh has no spacing of its own, so the project distance applies
        assert by_name["M-1"].supports.spacing_m == 1.5
        assert by_name["M-1"].supports.supports_count == 6
        assert by_name["M-1"].cable_count == 2

        [reference] = report.unresolved
        assert reference.source_id == "c3"
        assert reference.missing_id == "ct-gone"

    def test_no_spacing_anywhere_leaves_counts_empty(self):
        cables, cable_types, trays = project_snapshot()

        report = build_loading_report(cables, cable_types, trays)

        assert all(row.supports.supports_count is None for row in report.trays)
        assert all(row.effective_support_spacing is None for row in report.types)

    def test_identical_inputs_give_identical_reports(self):
        cables, cable_types, trays = project_snapshot()
        overrides = {"Mesh": 1.0}

        first = build_loading_report(cables, cable_types, trays, overrides, 1.5, 2.0)
        second = build_loading_report(cables, cable_types, trays, overrides, 1.5, 2.0)

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_missing_type_does_not_disturb_other_trays(self):
        cables, cable_types, trays = project_snapshot()

        report = build_loading_report(cables, cable_types, trays)
        by_name = {row.name: row for row in report.trays}

        assert by_name["L-1"].total_weight_kg == pytest.approx(20.0)
        assert by_name["M-1"].total_weight_kg == pytest.approx(10.0)

    def test_empty_project(self):
        report = build_loading_report([], [], [])

        assert report.types == ()
        assert report.trays == ()
        assert report.unresolved == ()


class TestRoutedCables:

    def test_routed_cable_weight_counted_once_in_type_total(self):
        trays = [
            TraySnapshot(id=f"t{i}", name=f"T-{i}", tray_type="Ladder", width_mm=300, length_mm=6000)
            for i in range(3)
        ]
        cable_types = [CableTypeSnapshot(id="ct", name="NYY 4x95", weight_kg_per_m=2.0)]
        cables = [CableSnapshot(id="c1", cable_id="C1", cable_type_id="ct", routing="T-0/T-1/T-2", design_length=100)]

        routing = resolve_tray_assignments(cables, trays)
        report = build_loading_report(routing.assignments, cable_types, trays, crossings=routing.crossings)

        [ladder] = report.types
        assert ladder.total_weight_kg == pytest.approx(200.0)
        assert sum(row.total_weight_kg for row in report.trays) == pytest.approx(200.0)
        assert [row.cable_count for row in report.trays] == [1, 0, 0]
        assert [row.through_cable_count for row in report.trays] == [0, 1, 1]
        assert all(row.load_per_meter_kg == pytest.approx(2.0) for row in report.trays)


class TestMaterialCatalogue:

    TRAYS = [
        TraySnapshot(id="t1", name="L-1", tray_type="Ladder", length_mm=6000),
        TraySnapshot(id="t2", name="M-1", tray_type="Mesh", length_mm=6000),
    ]
    CABLE_TYPES = [CableTypeSnapshot(id="ct", name="NYY", weight_kg_per_m=0.5)]
    CABLES = [CableSnapshot(id="c1", cable_id="C1", cable_type_id="ct", tray_id="t1", design_length=6)]
    MATERIAL_TRAYS = [MaterialTraySnapshot(id="mt-1", tray_type="  LADDER ", weight_kg_per_m=3.0)]
    SUPPORTS = [MaterialSupportSnapshot(id="ms-1", support_type="Bracket", weight_kg=4.0)]

    def build(self, support_choices):
        return build_loading_report(
            self.CABLES,
            self.CABLE_TYPES,
            self.TRAYS,
            overrides={"Ladder": 2.0, "Mesh": 2.0},
            support_weight_kg=1.0,
            support_choices=support_choices,
            material_trays=self.MATERIAL_TRAYS,
            material_supports=self.SUPPORTS,
        )

    def test_chosen_support_replaces_project_support_weight(self):
        report = self.build({"Ladder": "ms-1"})
        ladder, mesh = report.trays

        assert report.types[0].support_id == "ms-1"
        assert ladder.supports.weight_per_piece_kg == 4.0
        assert ladder.supports.total_weight_kg == pytest.approx(16.0)
        assert mesh.supports.weight_per_piece_kg == 1.0
        assert report.unresolved == ()

    def test_material_tray_matched_ignoring_case(self):
        report = self.build({"Ladder": "ms-1"})
        ladder, mesh = report.trays

        assert ladder.material_tray_id == "mt-1"
        assert ladder.load.tray_weight_per_meter_kg == 3.0
        assert ladder.load.total_weight_kg == pytest.approx(37.0)
        assert ladder.load.total_load_per_meter_kn == pytest.approx(37.0 / 6 * KN_PER_KG)
        assert mesh.material_tray_id is None
        assert mesh.load.total_weight_kg is None

    def test_unknown_support_falls_back_and_is_reported(self):
        report = self.build({"Ladder": "ms-gone"})

        assert report.trays[0].supports.weight_per_piece_kg == 1.0
        [reference] = report.unresolved
        assert reference.kind == ReferenceKind.MATERIAL_SUPPORT
        assert reference.source_id == "Ladder"
        assert reference.missing_id == "ms-gone"
