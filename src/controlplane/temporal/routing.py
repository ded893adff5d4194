from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import StrEnum

from temporalio.common import Priority


class QueueKind(StrEnum):
    """Workflow workload types for queue routing."""

    PROJECT = "project"  # PostgREST container start/removal
    BACKUP = "backup"  # Backup creation/deletion (dump, copy, upload)


@dataclass(frozen=True)
class TemporalRoute:
    """Routing result for workflow execution."""

    namespace: str
    task_queue: str
    priority: Priority | None = None


def _stable_shard(key: str, shards: int) -> int:
    """Compute stable shard from key using SHA256 (not Python hash())."""
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") % max(1, shards)


def task_queue_name(prefix: str, kind: QueueKind, shard: int) -> str:
    """Generate task queue name: {prefix}.{kind}.{shard:02d}"""
    return f"{prefix}.{kind}.{shard:02d}"


def route_for_project(
    *,
    project_id: str,
    namespace: str,
    prefix: str,
    shards: int,
    kind: QueueKind,
    fairness_weight: int = 1,
) -> TemporalRoute:
    """
    Get routing info for a project-scoped workflow.

    All workflows for one project land on the same shard; the project id
    is the fairness key so one busy project cannot starve the others.

    Args:
        project_id: UUID string for the project
        namespace: Temporal namespace
        prefix: Queue name prefix (e.g., "controlplane")
        shards: Number of queue shards
        kind: Workload type for queue selection
        fairness_weight: Priority weight (higher = more capacity)

    Returns:
        TemporalRoute with task_queue and fairness priority
    """
    shard = _stable_shard(project_id, shards)
    tq = task_queue_name(prefix, kind, shard)
    priority = Priority(fairness_key=project_id, fairness_weight=fairness_weight)
    return TemporalRoute(namespace=namespace, task_queue=tq, priority=priority)
