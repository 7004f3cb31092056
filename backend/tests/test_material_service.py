"""
TrayLoad Backend — Material Catalogue Service Unit Tests
==========================================================

What we test:
    ✅ Catalogue types unique ignoring case, conflicts name the catalogue
    ✅ Partial updates re-check uniqueness only when the type changes
    ✅ Unknown catalogue rows → NotFoundError
    ✅ Catalogue snapshot handed to the loading engine
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from trayload.exceptions import ConflictError, DatabaseError, NotFoundError
from trayload.models.material import MaterialSupport, MaterialTray
from trayload.schemas.material import (
    MaterialSupportCreate,
    MaterialSupportUpdate,
    MaterialTrayCreate,
    MaterialTrayUpdate,
)
from trayload.services.material_service import MaterialService


class TestMaterialTrays:

    def setup_method(self):
        self.service = MaterialService()

    @pytest.mark.asyncio
    async def test_create_tray(self, mock_db_session, make_result, added_rows):
        mock_db_session.execute.return_value = make_result(scalar=0)

        result = await self.service.create_tray(
            mock_db_session, MaterialTrayCreate(tray_type=" Ladder 300 ", weight_kg_per_m=3.2)
        )

        [row] = added_rows
        assert isinstance(row, MaterialTray)
        assert row.tray_type == "Ladder 300"
        assert result.weight_kg_per_m == 3.2

    @pytest.mark.asyncio
    async def test_duplicate_type_any_case(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(scalar=1)

        with pytest.raises(ConflictError) as exc_info:
            await self.service.create_tray(mock_db_session, MaterialTrayCreate(tray_type="ladder 300"))

        assert exc_info.value.message == (
            "material tray with tray_type 'ladder 300' already exists in the catalogue"
        )
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_weight_skips_uniqueness(self, mock_db_session, make_result, material_tray_row):
        existing = material_tray_row(weight_kg_per_m=3.0)
        mock_db_session.execute = AsyncMock(side_effect=[make_result(one=existing)])

        result = await self.service.update_tray(
            mock_db_session, existing.id, MaterialTrayUpdate(weight_kg_per_m=4.5)
        )

        assert existing.weight_kg_per_m == 4.5
        assert result.tray_type == "Ladder 300"
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_update_missing_tray(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_tray(mock_db_session, uuid4(), MaterialTrayUpdate(width_mm=200))

        assert exc_info.value.context["resource"] == "material tray"

    @pytest.mark.asyncio
    async def test_list_failure_is_wrapped(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(DatabaseError):
            await self.service.list_trays(mock_db_session)


class TestMaterialSupports:

    def setup_method(self):
        self.service = MaterialService()

    @pytest.mark.asyncio
    async def test_create_support(self, mock_db_session, make_result, added_rows):
        mock_db_session.execute.return_value = make_result(scalar=0)

        result = await self.service.create_support(
            mock_db_session, MaterialSupportCreate(support_type="Bracket 300", weight_kg=4.0)
        )

        [row] = added_rows
        assert isinstance(row, MaterialSupport)
        assert result.weight_kg == 4.0

    @pytest.mark.asyncio
    async def test_rename_to_existing_type(self, mock_db_session, make_result, material_support_row):
        existing = material_support_row()
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(one=existing), make_result(scalar=1)]
        )

        with pytest.raises(ConflictError):
            await self.service.update_support(
                mock_db_session, existing.id, MaterialSupportUpdate(support_type="BRACKET 400")
            )

        assert existing.support_type == "Bracket 300"

    @pytest.mark.asyncio
    async def test_delete_support(self, mock_db_session, make_result, material_support_row):
        existing = material_support_row()
        mock_db_session.execute.return_value = make_result(one=existing)

        await self.service.delete_support(mock_db_session, existing.id)

        mock_db_session.delete.assert_awaited_once_with(existing)

    @pytest.mark.asyncio
    async def test_delete_missing_support(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await self.service.delete_support(mock_db_session, uuid4())


class TestCatalogueSnapshot:

    @pytest.mark.asyncio
    async def test_load_snapshot(
        self, mock_db_session, make_result, material_tray_row, material_support_row
    ):
        tray = material_tray_row()
        support = material_support_row(weight_kg=None)
        mock_db_session.execute = AsyncMock(
            side_effect=[make_result(rows=[tray]), make_result(rows=[support])]
        )

        trays, supports = await MaterialService().load_snapshot(mock_db_session)

        assert [t.id for t in trays] == [str(tray.id)]
        assert trays[0].match_key == "ladder 300"
        assert supports[0].weight_kg is None
