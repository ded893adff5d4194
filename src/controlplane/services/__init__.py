from src.controlplane.services.backup_service import BackupService
from src.controlplane.services.column_service import ColumnService
from src.controlplane.services.function_service import FunctionService
from src.controlplane.services.index_service import IndexService
from src.controlplane.services.project_policy import ProjectPolicy
from src.controlplane.services.project_service import ProjectService
from src.controlplane.services.row_service import RowService
from src.controlplane.services.setting_service import SettingService
from src.controlplane.services.stats_service import StatsService
from src.controlplane.services.table_service import TableService
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory
from src.controlplane.services.workflow_launcher import WorkflowLauncher

__all__ = [
    "BackupService",
    "ColumnService",
    "FunctionService",
    "IndexService",
    "ProjectPolicy",
    "ProjectService",
    "RowService",
    "SettingService",
    "StatsService",
    "TableService",
    "TenantConnectionFactory",
    "WorkflowLauncher",
]
