"""HTTP surface tests with services replaced through dependency overrides."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import ProgrammingError

from src.controlplane.api.dependencies.services import (
    get_backup_service,
    get_project_service,
    get_row_service,
    get_setting_service,
    get_stats_service,
    get_table_service,
)
from src.controlplane.core.exceptions import BadRequestError, NotFoundError
from src.controlplane.core.shutdown import request_tracker
from src.controlplane.main import create_app
from src.controlplane.models.enums import OrganizationRole
from src.controlplane.schemas.row import RowPage
from src.controlplane.schemas.stats import DatabaseStats
from src.controlplane.schemas.table import Table
from src.controlplane.services.project_policy import ProjectPolicy
from src.controlplane.services.project_service import ProjectService
from tests.factories import BackupFactory, ProjectFactory

pytestmark = pytest.mark.unit

USER_ID = "6fa459ea-ee8a-3ca4-894e-db77e160355e"


@pytest.fixture
def project():
    return ProjectFactory.active()


@pytest.fixture
def project_service(project) -> MagicMock:
    service = MagicMock()
    service.get_for_user = AsyncMock(return_value=project)
    service.get_for_writer = AsyncMock(return_value=project)
    return service


@pytest.fixture
def table_service() -> MagicMock:
    service = MagicMock()
    service.list_tables = AsyncMock(return_value=[])
    service.create = AsyncMock()
    service.delete = AsyncMock()
    return service


@pytest.fixture
def backup_service() -> MagicMock:
    service = MagicMock()
    service.create = AsyncMock()
    service.delete = AsyncMock()
    return service


@pytest.fixture
def setting_service() -> MagicMock:
    service = MagicMock()
    service.set_storage_driver = AsyncMock()
    return service


@pytest.fixture
def row_service() -> MagicMock:
    service = MagicMock()
    service.list_rows = AsyncMock(return_value=RowPage(items=[], total=0, limit=100, offset=0))
    service.get = AsyncMock()
    service.create = AsyncMock()
    service.update = AsyncMock()
    service.delete = AsyncMock()
    return service


@pytest.fixture
def stats_service() -> MagicMock:
    service = MagicMock()
    service.database_stats = AsyncMock()
    return service


@pytest.fixture
def app(
    settings,
    project_service,
    table_service,
    backup_service,
    setting_service,
    row_service,
    stats_service,
) -> FastAPI:
    app = create_app(settings)
    app.dependency_overrides[get_project_service] = lambda: project_service
    app.dependency_overrides[get_table_service] = lambda: table_service
    app.dependency_overrides[get_backup_service] = lambda: backup_service
    app.dependency_overrides[get_setting_service] = lambda: setting_service
    app.dependency_overrides[get_row_service] = lambda: row_service
    app.dependency_overrides[get_stats_service] = lambda: stats_service
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    request_tracker.reset()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    request_tracker.reset()


def headers(project) -> dict[str, str]:
    return {"X-User-ID": USER_ID, "X-Project": str(project.id)}


class TestHeaders:
    async def test_missing_user_is_unauthorized(self, client, project):
        response = await client.get("/api/v1/tables", headers={"X-Project": str(project.id)})

        assert response.status_code == 401
        body = response.json()
        assert body["detail"] == "X-User-ID header is required"
        assert body["request_id"]

    async def test_malformed_user_id(self, client, project):
        response = await client.get(
            "/api/v1/tables", headers={"X-User-ID": "nope", "X-Project": str(project.id)}
        )
        assert response.status_code == 401

    async def test_missing_project(self, client):
        response = await client.get("/api/v1/tables", headers={"X-User-ID": USER_ID})

        assert response.status_code == 400
        assert response.json()["detail"] == "X-Project header is required"

    async def test_unknown_project(self, client, project_service, project):
        project_service.get_for_user.side_effect = NotFoundError("project.error.notFound")

        response = await client.get("/api/v1/tables", headers=headers(project))

        assert response.status_code == 404
        assert response.json()["detail"] == "project.error.notFound"

    async def test_request_id_echoed(self, client, project):
        request_id = uuid4().hex
        response = await client.get(
            "/api/v1/tables", headers={**headers(project), "X-Request-ID": request_id}
        )
        assert response.headers["X-Request-ID"] == request_id


class TestTables:
    async def test_list_uses_project_database(self, client, table_service, project):
        response = await client.get("/api/v1/tables", headers=headers(project))

        assert response.status_code == 200
        table_service.list_tables.assert_awaited_once_with(project.db_name, "public")

    async def test_create(self, client, table_service, project):
        table_service.create.return_value = Table(
            id=16384, name="orders", schema_name="public", estimated_rows=0, total_size="8192 bytes"
        )

        response = await client.post(
            "/api/v1/tables",
            headers=headers(project),
            json={"name": "orders", "columns": [{"name": "id", "type": "serial", "primary": True}]},
        )

        assert response.status_code == 201
        assert response.json()["schema"] == "public"

    async def test_invalid_column_type_never_reaches_service(self, client, table_service, project):
        response = await client.post(
            "/api/v1/tables",
            headers=headers(project),
            json={"name": "orders", "columns": [{"name": "id", "type": "int; DROP TABLE x"}]},
        )

        assert response.status_code == 422
        table_service.create.assert_not_awaited()

    async def test_native_database_error_returned(self, client, table_service, project):
        table_service.delete.side_effect = ProgrammingError(
            "DROP TABLE", {}, Exception('cannot drop table orders because other objects depend on it')
        )

        response = await client.delete("/api/v1/tables/orders", headers=headers(project))

        assert response.status_code == 400
        assert "other objects depend on it" in response.json()["detail"]


class TestRows:
    async def test_list_pages(self, client, row_service, project):
        response = await client.get(
            "/api/v1/tables/orders/rows?limit=10&offset=20", headers=headers(project)
        )

        assert response.status_code == 200
        row_service.list_rows.assert_awaited_once_with(project.db_name, "orders", 10, 20)

    async def test_limit_is_bounded(self, client, row_service, project):
        response = await client.get("/api/v1/tables/orders/rows?limit=0", headers=headers(project))

        assert response.status_code == 422
        row_service.list_rows.assert_not_awaited()

    async def test_get_by_key(self, client, row_service, project):
        row_service.get.return_value = {"id": 7, "note": "first"}

        response = await client.get("/api/v1/tables/orders/rows/7", headers=headers(project))

        assert response.status_code == 200
        assert response.json() == {"id": 7, "note": "first"}
        row_service.get.assert_awaited_once_with(project.db_name, "orders", "7")

    async def test_missing_row(self, client, row_service, project):
        row_service.get.side_effect = NotFoundError("row.error.notFound")

        response = await client.get("/api/v1/tables/orders/rows/7", headers=headers(project))

        assert response.status_code == 404
        assert response.json()["detail"] == "row.error.notFound"

    async def test_insert(self, client, row_service, project):
        row_service.create.return_value = {"id": 8, "note": "second"}

        response = await client.post(
            "/api/v1/tables/orders/rows",
            json={"values": {"note": "second"}},
            headers=headers(project),
        )

        assert response.status_code == 201
        assert response.json()["id"] == 8
        _, table, data = row_service.create.await_args.args
        assert table == "orders"
        assert data.values == {"note": "second"}

    async def test_invalid_column_name_never_reaches_service(self, client, row_service, project):
        response = await client.post(
            "/api/v1/tables/orders/rows",
            json={"values": {"note; drop table orders": "x"}},
            headers=headers(project),
        )

        assert response.status_code == 422
        row_service.create.assert_not_awaited()

    async def test_update_needs_values(self, client, row_service, project):
        response = await client.patch(
            "/api/v1/tables/orders/rows/7", json={"values": {}}, headers=headers(project)
        )

        assert response.status_code == 422
        row_service.update.assert_not_awaited()

    async def test_delete(self, client, row_service, project):
        response = await client.delete("/api/v1/tables/orders/rows/7", headers=headers(project))

        assert response.status_code == 204
        row_service.delete.assert_awaited_once_with(project.db_name, "orders", "7")


class TestStats:
    async def test_stats_for_project_database(self, client, stats_service, project):
        stats_service.database_stats.return_value = DatabaseStats(
            db_name=project.db_name, total_bytes=8192, tables=[], indexes=[]
        )

        response = await client.get("/api/v1/stats", headers=headers(project))

        assert response.status_code == 200
        assert response.json()["total_bytes"] == 8192
        stats_service.database_stats.assert_awaited_once_with(project.db_name, "public")


class TestBackups:
    async def test_create_is_accepted(self, client, backup_service, project):
        backup = BackupFactory.creating(project_id=project.id)
        backup_service.create.return_value = (backup, f"backup-create-{backup.id}")

        response = await client.post("/api/v1/backups", headers=headers(project))

        assert response.status_code == 202
        body = response.json()
        assert body["backup"]["status"] == "creating"
        assert body["workflow_id"] == f"backup-create-{backup.id}"

    async def test_delete_in_progress(self, client, backup_service, project):
        backup_service.delete.side_effect = BadRequestError("backup.error.deleteInProgress")
        backup = BackupFactory.deleting(project_id=project.id)

        response = await client.delete(f"/api/v1/backups/{backup.id}", headers=headers(project))

        assert response.status_code == 400
        assert response.json()["detail"] == "backup.error.deleteInProgress"



class TestWriteAccess:
    """Read-only members see a project but cannot change it."""

    @pytest.fixture
    def explorer_service(self, project) -> ProjectService:
        project_repo = MagicMock()
        project_repo.get_by_id = AsyncMock(return_value=project)
        organization_repo = MagicMock()
        organization_repo.get_member_role = AsyncMock(return_value=OrganizationRole.EXPLORER.value)
        return ProjectService(
            project_repo, ProjectPolicy(organization_repo), MagicMock(), MagicMock(), AsyncMock()
        )

    @pytest.fixture
    def explorer_client(self, app, client, explorer_service) -> AsyncClient:
        app.dependency_overrides[get_project_service] = lambda: explorer_service
        return client

    async def test_explorer_can_read(self, explorer_client, table_service, project):
        response = await explorer_client.get("/api/v1/tables", headers=headers(project))

        assert response.status_code == 200

    async def test_explorer_cannot_drop_table(self, explorer_client, table_service, project):
        response = await explorer_client.delete("/api/v1/tables/orders", headers=headers(project))

        assert response.status_code == 403
        assert response.json()["detail"] == "project.error.updateForbidden"
        table_service.delete.assert_not_awaited()

    async def test_explorer_cannot_back_up(self, explorer_client, backup_service, project):
        response = await explorer_client.post("/api/v1/backups", headers=headers(project))

        assert response.status_code == 403
        backup_service.create.assert_not_awaited()

    async def test_explorer_can_list_rows(self, explorer_client, row_service, project):
        response = await explorer_client.get("/api/v1/tables/orders/rows", headers=headers(project))

        assert response.status_code == 200

    @pytest.mark.parametrize(
        ("method", "path", "body"),
        [
            ("POST", "/api/v1/tables/orders/rows", {"values": {"note": "x"}}),
            ("PATCH", "/api/v1/tables/orders/rows/7", {"values": {"note": "x"}}),
            ("DELETE", "/api/v1/tables/orders/rows/7", None),
        ],
    )
    async def test_explorer_cannot_change_rows(
        self, explorer_client, row_service, project, method, path, body
    ):
        response = await explorer_client.request(method, path, json=body, headers=headers(project))

        assert response.status_code == 403
        row_service.create.assert_not_awaited()
        row_service.update.assert_not_awaited()
        row_service.delete.assert_not_awaited()

class TestStorageDriverSetting:
    async def test_unknown_driver_rejected(self, client, setting_service):
        response = await client.put(
            "/api/v1/settings/storage-driver",
            headers={"X-User-ID": USER_ID},
            json={"driver": "ftp"},
        )

        assert response.status_code == 422
        setting_service.set_storage_driver.assert_not_awaited()
