#!/usr/bin/env python3
"""Thin entrypoint for the shuttle terminal dashboard."""

from __future__ import annotations

from shuttle_tui.app import main


if __name__ == "__main__":
    raise SystemExit(main())
