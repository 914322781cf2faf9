"""Project and deployment collectors (fail-soft).

Data comes from the deployment service's CLI when a command is configured
(``projects_command`` / ``deployments_command`` in the settings, an argv
list that prints JSON), otherwise from ``projects.json`` /
``deployments.json`` snapshots in the data directory.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from shuttle_tui.collectors import CollectError, read_snapshot, run_json_command
from shuttle_tui.formatting import age_of, short_id
from shuttle_tui.models import PanelData


def _load(kind: str, settings: Mapping[str, Any], data_dir: Path) -> list[dict]:
    command = settings.get(f"{kind}_command")
    if command:
        if isinstance(command, str):
            command = command.split()
        if not command:
            raise CollectError(f"empty {kind}_command")
        payload = run_json_command([str(part) for part in command])
    else:
        payload = read_snapshot(data_dir / f"{kind}.json")

    if isinstance(payload, dict):
        payload = payload.get(kind, [])
    if not isinstance(payload, list):
        raise CollectError(f"unexpected {kind} payload")
    return [row for row in payload if isinstance(row, dict)]


def _project_item(row: dict) -> dict:
    state = row.get("state")
    if isinstance(state, dict):
        # {"ready": {...}} style states carry details under the state name.
        state = next(iter(state), "unknown")
    return {
        "id": short_id(row.get("id")),
        "name": str(row.get("name") or row.get("project_name") or "-"),
        "state": str(state or "unknown"),
        "age": age_of(row.get("created_at")),
    }


def _deployment_item(row: dict) -> dict:
    return {
        "id": short_id(row.get("id")),
        "project": str(row.get("project") or row.get("project_name") or "-"),
        "state": str(row.get("state") or "unknown"),
        "updated": age_of(row.get("last_update") or row.get("updated_at") or row.get("created_at")),
    }


def collect_projects(settings: Mapping[str, Any], data_dir: Path) -> PanelData:
    try:
        rows = _load("projects", settings, data_dir)
    except CollectError as exc:
        return PanelData.failed("projects", "Projects", str(exc))

    items = [_project_item(row) for row in rows]
    return PanelData(
        key="projects",
        title="Projects",
        status="ok",
        items=items,
        meta={"count": len(items)},
        errors=[],
    )


def collect_deployments(settings: Mapping[str, Any], data_dir: Path) -> PanelData:
    try:
        rows = _load("deployments", settings, data_dir)
    except CollectError as exc:
        return PanelData.failed("deployments", "Deployments", str(exc))

    items = [_deployment_item(row) for row in rows]
    failing = [item for item in items if item["state"].lower() in ("crashed", "failed", "errored")]
    return PanelData(
        key="deployments",
        title="Deployments",
        status="warn" if failing else "ok",
        items=items,
        meta={"count": len(items), "failing": len(failing)},
        errors=[],
    )
