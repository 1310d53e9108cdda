"""Tests for the saved cutlist repository and its in-memory mirror."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import replace
from typing import Any, Optional

from cutlistedit.app.models import (
    CompactPart,
    CutlistFolder,
    SavedCutlistData,
    SavedCutlistProject,
)
from cutlistedit.services.saved_projects import SavedProjectRepository

OLD_STAMP = "2024-01-01T00:00:00+00:00"


class FakeStore:
    """In-memory store; operations listed in ``fail`` return the failure sentinel."""

    def __init__(
        self,
        folders: Optional[list[CutlistFolder]] = None,
        projects: Optional[list[SavedCutlistProject]] = None,
        fail: tuple[str, ...] = (),
        raise_on: tuple[str, ...] = (),
    ) -> None:
        self.folders = list(folders or [])
        self.projects = list(projects or [])
        self.fail = set(fail)
        self.raise_on = set(raise_on)
        self.calls: list[str] = []
        self.updates: list[dict[str, Any]] = []

    def _check(self, name: str) -> bool:
        self.calls.append(name)
        if name in self.raise_on:
            raise RuntimeError(f"{name} exploded")
        return name not in self.fail

    async def load_folders(self):
        if not self._check("load_folders"):
            return None
        return list(self.folders)

    async def load_projects(self):
        if not self._check("load_projects"):
            return None
        return list(self.projects)

    async def save_project(self, name, data, folder_id=None):
        if not self._check("save_project"):
            return None
        project = SavedCutlistProject(
            id=str(uuid.uuid4()), name=name, folder_id=folder_id, data=data
        )
        self.projects.insert(0, project)
        return project

    async def update_project(self, project_id, updates: dict[str, Any]):
        self.updates.append(dict(updates))
        return self._check("update_project")

    async def delete_project(self, project_id):
        return self._check("delete_project")

    async def create_folder(self, name, parent_id=None):
        if not self._check("create_folder"):
            return None
        folder = CutlistFolder(id=str(uuid.uuid4()), name=name, parent_id=parent_id)
        self.folders.append(folder)
        return folder

    async def rename_folder(self, folder_id, name):
        return self._check("rename_folder")

    async def delete_folder(self, folder_id):
        return self._check("delete_folder")


def _seeded_store(**kwargs) -> FakeStore:
    folders = [
        CutlistFolder(id="F1", name="Kitchens"),
        CutlistFolder(id="F2", name="Offices"),
        CutlistFolder(id="F3", name="Islands", parent_id="F1"),
    ]
    projects = [
        SavedCutlistProject(id="P1", name="Smith", folder_id="F1", updated_at=OLD_STAMP),
        SavedCutlistProject(id="P2", name="Jones", folder_id="F1", updated_at=OLD_STAMP),
        SavedCutlistProject(id="P3", name="Desk", folder_id="F2", updated_at=OLD_STAMP),
    ]
    return FakeStore(folders=folders, projects=projects, **kwargs)


def _loaded(store: FakeStore, **kwargs) -> SavedProjectRepository:
    repository = SavedProjectRepository(store, **kwargs)
    assert asyncio.run(repository.refresh()) is True
    return repository


def test_refresh_replaces_mirror() -> None:
    store = _seeded_store()
    repository = _loaded(store)

    assert [folder.id for folder in repository.folders] == ["F1", "F2", "F3"]
    assert [project.id for project in repository.projects] == ["P1", "P2", "P3"]
    assert repository.loading is False

    store.projects = store.projects[:1]
    assert asyncio.run(repository.refresh()) is True
    assert [project.id for project in repository.projects] == ["P1"]


def test_refresh_failure_keeps_previous_mirror() -> None:
    store = _seeded_store()
    repository = _loaded(store)

    store.fail.add("load_projects")
    store.folders = []

    assert asyncio.run(repository.refresh()) is False
    assert len(repository.folders) == 3
    assert len(repository.projects) == 3


def test_save_project_prepends_new_project() -> None:
    repository = _loaded(_seeded_store())
    data = SavedCutlistData(
        parts=[CompactPart(id="a", name="A", length_mm=720, width_mm=560)], kerf=4
    )

    project = asyncio.run(repository.save_project("Kitchen", data, None))

    assert project is not None
    assert project.id
    assert project.folder_id is None
    assert len(repository.projects) == 4
    assert repository.projects[0] is project


def test_save_project_failure_leaves_mirror() -> None:
    repository = _loaded(_seeded_store(fail=("save_project",)))

    assert asyncio.run(repository.save_project("Kitchen", SavedCutlistData())) is None
    assert [project.id for project in repository.projects] == ["P1", "P2", "P3"]


def test_update_project_patches_only_given_fields() -> None:
    repository = _loaded(_seeded_store())

    assert asyncio.run(repository.update_project("P1", name="Smith v2")) is True

    updated = repository.get_project("P1")
    assert updated.name == "Smith v2"
    assert updated.folder_id == "F1"
    assert updated.updated_at > OLD_STAMP
    assert repository.get_project("P2").updated_at == OLD_STAMP


def test_update_project_moves_to_root_and_coerces_data() -> None:
    repository = _loaded(_seeded_store())

    ok = asyncio.run(
        repository.update_project(
            "P3", folder_id=None, data={"kerf": 5, "parts": [{"id": "x", "name": "X"}]}
        )
    )

    assert ok is True
    project = repository.get_project("P3")
    assert project.folder_id is None
    assert project.name == "Desk"
    assert project.data.kerf == 5.0
    assert [part.id for part in project.data.parts] == ["x"]


def test_update_project_with_none_data_keeps_snapshot() -> None:
    store = _seeded_store()
    snapshot = SavedCutlistData(
        parts=[CompactPart(id="top", name="Top", length_mm=600, width_mm=400)]
    )
    store.projects[0] = replace(store.projects[0], data=snapshot)
    repository = _loaded(store)

    assert asyncio.run(repository.update_project("P1", name="X", data=None)) is True

    assert store.updates == [{"name": "X"}]
    project = repository.get_project("P1")
    assert project.name == "X"
    assert [part.id for part in project.data.parts] == ["top"]


def test_update_project_failure_is_not_optimistic() -> None:
    repository = _loaded(_seeded_store(fail=("update_project",)))
    before = list(repository.projects)

    assert asyncio.run(repository.update_project("P1", name="Nope")) is False
    assert repository.projects == before


def test_delete_project_only_on_success() -> None:
    store = _seeded_store(fail=("delete_project",))
    repository = _loaded(store)

    assert asyncio.run(repository.delete_project("P2")) is False
    assert repository.get_project("P2") is not None

    store.fail.clear()
    assert asyncio.run(repository.delete_project("P2")) is True
    assert repository.get_project("P2") is None
    assert len(repository.projects) == 2


def test_create_and_rename_folder() -> None:
    repository = _loaded(_seeded_store())

    folder = asyncio.run(repository.create_folder("Wardrobes", "F2"))
    assert folder is not None
    assert repository.folders[-1] is folder
    assert folder.parent_id == "F2"

    assert asyncio.run(repository.rename_folder("F2", "Office Desks")) is True
    renamed = repository.get_folder("F2")
    assert renamed.name == "Office Desks"
    assert renamed.parent_id is None


def test_folder_failures_leave_mirror() -> None:
    repository = _loaded(
        _seeded_store(fail=("create_folder", "rename_folder", "delete_folder"))
    )
    before = list(repository.folders)

    assert asyncio.run(repository.create_folder("New")) is None
    assert asyncio.run(repository.rename_folder("F1", "Renamed")) is False
    assert asyncio.run(repository.delete_folder("F1")) is False
    assert repository.folders == before
    assert repository.get_project("P1").folder_id == "F1"


def test_delete_folder_orphans_projects_to_root() -> None:
    repository = _loaded(_seeded_store())

    assert asyncio.run(repository.delete_folder("F1")) is True

    assert repository.get_folder("F1") is None
    assert repository.get_project("P1").folder_id is None
    assert repository.get_project("P2").folder_id is None
    assert repository.get_project("P3").folder_id == "F2"
    assert [project.id for project in repository.projects] == ["P1", "P2", "P3"]


def test_raising_store_is_reported_as_failure() -> None:
    store = _seeded_store()
    repository = _loaded(store)
    store.raise_on.update({"save_project", "delete_folder", "load_folders"})

    assert asyncio.run(repository.save_project("Boom", SavedCutlistData())) is None
    assert asyncio.run(repository.delete_folder("F1")) is False
    assert asyncio.run(repository.refresh()) is False
    assert len(repository.projects) == 3


def test_changed_callback_fires_after_confirmed_mutations() -> None:
    events: list[str] = []
    store = _seeded_store()
    repository = _loaded(store, changed_callback=lambda: events.append("changed"))
    assert events == ["changed"]

    asyncio.run(repository.rename_folder("F1", "K"))
    store.fail.add("delete_project")
    asyncio.run(repository.delete_project("P1"))

    assert events == ["changed", "changed"]


def test_folder_tree_helpers() -> None:
    repository = _loaded(_seeded_store())

    assert [folder.id for folder in repository.folder_children()] == ["F1", "F2"]
    assert [folder.id for folder in repository.folder_children("F1")] == ["F3"]
    assert [project.id for project in repository.projects_in_folder("F1")] == ["P1", "P2"]
    assert repository.projects_in_folder(None) == []
    assert [folder.name for folder in repository.folder_path("F3")] == ["Kitchens", "Islands"]
    assert repository.folder_path(None) == []

    repository.folders = [
        replace(folder, parent_id="F3") if folder.id == "F1" else folder
        for folder in repository.folders
    ]
    assert [folder.id for folder in repository.folder_path("F3")] == ["F1", "F3"]


def test_overlapping_updates_last_resolution_wins() -> None:
    repository = _loaded(_seeded_store())

    async def scenario() -> None:
        await asyncio.gather(
            repository.update_project("P1", name="first"),
            repository.update_project("P1", name="second"),
        )

    asyncio.run(scenario())
    assert repository.get_project("P1").name == "second"
