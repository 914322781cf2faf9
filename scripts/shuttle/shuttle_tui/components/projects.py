"""Projects screen."""

from __future__ import annotations

from shuttle_tui.collectors.service import collect_projects
from shuttle_tui.components.actions import ProjectsLoaded
from shuttle_tui.components.listing import Collector, ServiceList
from shuttle_tui.tab import Tab


class Projects(ServiceList):
    tab = Tab.PROJECTS
    key = "projects"
    title = "Projects"
    loaded = ProjectsLoaded
    columns = (
        ("Name", "name"),
        ("State", "state"),
        ("Created", "age"),
        ("ID", "id"),
    )

    def __init__(self, collect: Collector = collect_projects):
        super().__init__(collect)
