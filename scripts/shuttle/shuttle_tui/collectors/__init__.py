"""Collector helpers and package exports."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

COMMAND_TIMEOUT = 8


class CollectError(Exception):
    """A data source could not be read; the message is shown in the panel."""


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return None


def run_json_command(cmd: list[str], timeout: int = COMMAND_TIMEOUT) -> Any:
    """Run a CLI that prints JSON and return the decoded payload."""
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CollectError(f"{cmd[0]} not installed") from exc
    except subprocess.TimeoutExpired as exc:
        raise CollectError(f"{cmd[0]} timed out") from exc
    except UnicodeDecodeError as exc:
        raise CollectError(f"undecodable output from {cmd[0]}") from exc
    except OSError as exc:
        raise CollectError(f"cannot run {cmd[0]}: {exc.strerror or exc}") from exc

    if proc.returncode != 0:
        output = (proc.stderr or proc.stdout or f"{cmd[0]} failed").strip().splitlines()
        raise CollectError(output[0] if output else f"{cmd[0]} failed")

    try:
        return json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise CollectError(f"invalid JSON from {cmd[0]}") from exc


def read_snapshot(path: Path) -> Any:
    if not path.exists():
        raise CollectError(f"no snapshot at {path}")
    payload = read_json(path)
    if payload is None:
        raise CollectError(f"unreadable snapshot {path.name}")
    return payload
