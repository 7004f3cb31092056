"""
TrayLoad Backend — Loading Service Unit Tests
===============================================

What:  Tests for LoadingService (DB snapshot → engine → API report).
How:   execute() is answered in the order the service queries:
       project, cable types, cables, trays, overrides, material trays,
       material supports.

What we test:
    ✅ A routed cable loads the first tray on its route only
    ✅ Further trays on the route carry its load per metre
    ✅ Project support distance used where a type has no override
    ✅ Override rows resolve conflicting widths
    ✅ Catalogue tray weight and chosen support feed the combined load
    ✅ Dangling cable types reported, not raised
    ✅ Missing project → NotFoundError, failed read → DatabaseError
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from trayload.exceptions import DatabaseError, NotFoundError
from trayload.loading.projector import KN_PER_KG
from trayload.loading.types import ReferenceKind
from trayload.services.loading_service import LoadingService


@pytest.fixture
def project_snapshot(make_result, project_row, cable_type_row, tray_row, cable_row, override_row):
    """Builds the seven execute() results for one project."""

    def _make(overrides=(), extra_cables=(), material_trays=(), material_supports=()):
        project = project_row(support_distance=1.5, support_weight=2.0)
        power = cable_type_row(project.id, name="NYY 4x95", weight_kg_per_m=0.5)
        trays = [
            tray_row(project.id, name="T-101", tray_type="Ladder 300", width_mm=300.0),
            tray_row(project.id, name="T-102", tray_type="Ladder 300", width_mm=400.0),
        ]
        cables = [
            cable_row(project.id, power.id, cable_id="C-1", routing="T-101 / t-102", design_length=10.0),
        ]
        cables.extend(cable_row(project.id, **c) for c in extra_cables)
        return project, [
            make_result(one=project),
            make_result(rows=[power]),
            make_result(rows=cables),
            make_result(rows=trays),
            make_result(rows=[override_row(project.id, *o) for o in overrides]),
            make_result(rows=list(material_trays)),
            make_result(rows=list(material_supports)),
        ]

    return _make


class TestLoadingService:

    def setup_method(self):
        self.service = LoadingService()

    @pytest.mark.asyncio
    async def test_routed_cable_loads_first_tray_only(self, mock_db_session, project_snapshot):
        project, results = project_snapshot()
        mock_db_session.execute = AsyncMock(side_effect=results)

        report = await self.service.build_report(mock_db_session, project.id)

        assert report.project_id == project.id
        assert report.default_support_distance == 1.5
        t101, t102 = report.trays
        assert (t101.name, t101.cable_count, t101.through_cable_count) == ("T-101", 1, 0)
        assert (t102.name, t102.cable_count, t102.through_cable_count) == ("T-102", 0, 1)
        assert t101.total_weight_kg == pytest.approx(5.0)
        assert t102.total_weight_kg == 0.0
        for tray in report.trays:
            assert tray.load_per_meter_kg == pytest.approx(0.5)
            # 6 m at the project's 1.5 m: five supports of 2 kg
            assert tray.supports.spacing_m == 1.5
            assert tray.supports.supports_count == 5
            assert tray.supports.total_weight_kg == pytest.approx(10.0)
        assert report.unresolved == []

    @pytest.mark.asyncio
    async def test_conflicting_widths_need_manual_resolution(self, mock_db_session, project_snapshot):
        project, results = project_snapshot()
        mock_db_session.execute = AsyncMock(side_effect=results)

        result = await self.service.list_tray_types(mock_db_session, project.id)

        [ladder] = result.types
        assert ladder.type_name == "Ladder 300"
        assert ladder.has_multiple_widths is True
        assert ladder.needs_manual_resolution is True
        assert ladder.has_override is False
        assert ladder.total_weight_kg == pytest.approx(5.0)
        assert result.needs_manual_resolution == 1

    @pytest.mark.asyncio
    async def test_override_resolves_type(self, mock_db_session, project_snapshot):
        project, results = project_snapshot(overrides=[("Ladder 300", 2.0), ("Fiber", None)])
        mock_db_session.execute = AsyncMock(side_effect=results)

        report = await self.service.build_report(mock_db_session, project.id)

        assert [t.type_name for t in report.types] == ["Fiber", "Ladder 300"]
        fiber, ladder = report.types
        assert fiber.tray_count == 0
        assert fiber.has_override is False
        assert ladder.effective_support_spacing == 2.0
        assert ladder.has_override is True
        assert ladder.needs_manual_resolution is False
        assert all(t.supports.supports_count == 4 for t in report.trays)

    @pytest.mark.asyncio
    async def test_catalogue_feeds_combined_load(
        self, mock_db_session, project_snapshot, material_tray_row, material_support_row
    ):
        bracket = material_support_row(weight_kg=4.0)
        ladder = material_tray_row(tray_type=" ladder 300 ", weight_kg_per_m=3.0)
        project, results = project_snapshot(
            overrides=[("Ladder 300", 2.0, bracket.id)],
            material_trays=[ladder],
            material_supports=[bracket],
        )
        mock_db_session.execute = AsyncMock(side_effect=results)

        report = await self.service.build_report(mock_db_session, project.id)

        assert report.types[0].support_id == str(bracket.id)
        t101 = report.trays[0]
        assert t101.material_tray_id == str(ladder.id)
        # 6 m at 2 m: four brackets of 4 kg replace the project's 2 kg support
        assert t101.supports.weight_per_piece_kg == 4.0
        assert t101.supports.total_weight_kg == pytest.approx(16.0)
        assert t101.load.tray_total_own_weight_kg == pytest.approx(34.0)
        assert t101.load.cables_total_weight_kg == pytest.approx(3.0)
        assert t101.load.total_weight_kg == pytest.approx(37.0)
        assert t101.load.total_load_per_meter_kn == pytest.approx(37.0 / 6 * KN_PER_KG)
        assert report.unresolved == []

    @pytest.mark.asyncio
    async def test_dangling_cable_type_is_reported(self, mock_db_session, project_snapshot):
        missing_type = uuid4()
        project, results = project_snapshot(
            extra_cables=[
                {"cable_type_id": missing_type, "cable_id": "C-2", "routing": "T-101", "design_length": 50.0}
            ]
        )
        mock_db_session.execute = AsyncMock(side_effect=results)

        report = await self.service.build_report(mock_db_session, project.id)

        t101 = next(t for t in report.trays if t.name == "T-101")
        assert t101.cable_count == 2
        assert t101.total_weight_kg == pytest.approx(5.0)
        [reference] = report.unresolved
        assert reference.kind == ReferenceKind.CABLE_TYPE
        assert reference.missing_id == str(missing_type)

    @pytest.mark.asyncio
    async def test_missing_project(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await self.service.build_report(mock_db_session, uuid4())

        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_read_is_wrapped(self, mock_db_session, make_result, project_row):
        project = project_row()
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=project), RuntimeError("connection lost")]
        )

        with pytest.raises(DatabaseError):
            await self.service.build_report(mock_db_session, project.id)
