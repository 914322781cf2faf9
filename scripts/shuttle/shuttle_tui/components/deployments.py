"""Deployments screen."""

from __future__ import annotations

from shuttle_tui.collectors.service import collect_deployments
from shuttle_tui.components.actions import DeploymentsLoaded
from shuttle_tui.components.listing import Collector, ServiceList
from shuttle_tui.tab import Tab


class Deployments(ServiceList):
    tab = Tab.DEPLOYMENTS
    key = "deployments"
    title = "Deployments"
    loaded = DeploymentsLoaded
    columns = (
        ("Project", "project"),
        ("State", "state"),
        ("Updated", "updated"),
        ("ID", "id"),
    )

    def __init__(self, collect: Collector = collect_deployments):
        super().__init__(collect)
