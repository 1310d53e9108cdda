"""Local JSON file backend for saved cutlist projects and folders."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from cutlistedit.app.models import CutlistFolder, SavedCutlistData, SavedCutlistProject
from cutlistedit.core.paths import default_store_path
from cutlistedit.core.utils import utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CutlistStoreError(RuntimeError):
    """Raised when the store document cannot be read or written."""


def _empty_document() -> dict:
    return {"version": JsonCutlistStore.VERSION, "folders": [], "projects": []}


class JsonCutlistStore:
    """Persist folders and saved projects in a single JSON document.

    Every public coroutine reports failure as ``None``/``False`` and logs the
    cause instead of raising. File access runs in a worker thread and
    mutations are serialized, so overlapping calls never drop an update.
    """

    VERSION = "1.0"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    # Document helpers -------------------------------------------------

    def _read(self) -> dict:
        if not self.path.exists():
            return _empty_document()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            raise CutlistStoreError(f"Could not read '{self.path}': {exc}") from exc
        if not isinstance(data, dict):
            raise CutlistStoreError(f"Invalid store document in '{self.path}'.")

        version = data.get("version")
        if version != self.VERSION:
            logger.warning(
                "Store version %s differs from supported %s.", version, self.VERSION
            )
        for key in ("folders", "projects"):
            data.setdefault(key, [])
            if not isinstance(data[key], list):
                raise CutlistStoreError(
                    f"Invalid '{key}' section in '{self.path}': expected a list."
                )
        return data

    def _write(self, data: dict) -> None:
        data["version"] = self.VERSION
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=self.path.name, suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise CutlistStoreError(f"Could not write '{self.path}': {exc}") from exc

    @staticmethod
    def _find(records: list, record_id: Optional[str]) -> Optional[dict]:
        if record_id is None:
            return None
        return next(
            (
                item
                for item in records
                if isinstance(item, dict) and item.get("id") == record_id
            ),
            None,
        )

    def _mutation_lock(self) -> asyncio.Lock:
        # One lock per running loop; separate asyncio.run() calls get fresh ones.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _run(self, label: str, work: Callable[[], T], failure: Any) -> Any:
        try:
            return await asyncio.to_thread(work)
        except CutlistStoreError as exc:
            logger.error("Error %s: %s", label, exc)
            return failure

    async def _mutate(self, label: str, work: Callable[[], T], failure: Any) -> Any:
        async with self._mutation_lock():
            return await self._run(label, work, failure)

    # Folders ----------------------------------------------------------

    async def load_folders(self) -> Optional[list[CutlistFolder]]:
        return await self._run("loading cutlist folders", self._load_folders, None)

    def _load_folders(self) -> list[CutlistFolder]:
        folders = [
            CutlistFolder.from_dict(item)
            for item in self._read()["folders"]
            if isinstance(item, dict)
        ]
        return sorted(folders, key=lambda item: (item.sort_order, item.name))

    async def create_folder(
        self, name: str, parent_id: Optional[str] = None
    ) -> Optional[CutlistFolder]:
        return await self._mutate(
            "creating cutlist folder", lambda: self._create_folder(name, parent_id), None
        )

    def _create_folder(self, name: str, parent_id: Optional[str]) -> CutlistFolder:
        data = self._read()
        if parent_id is not None and self._find(data["folders"], parent_id) is None:
            raise CutlistStoreError(f"Parent folder '{parent_id}' not found.")
        stamp = utc_now_iso()
        folder = CutlistFolder(
            id=str(uuid.uuid4()),
            name=name,
            parent_id=parent_id,
            created_at=stamp,
            updated_at=stamp,
        )
        data["folders"].append(folder.to_dict())
        self._write(data)
        return folder

    async def rename_folder(self, folder_id: str, name: str) -> bool:
        return await self._mutate(
            "renaming cutlist folder", lambda: self._rename_folder(folder_id, name), False
        )

    def _rename_folder(self, folder_id: str, name: str) -> bool:
        data = self._read()
        record = self._find(data["folders"], folder_id)
        if record is None:
            raise CutlistStoreError(f"Folder '{folder_id}' not found.")
        record["name"] = name
        record["updated_at"] = utc_now_iso()
        self._write(data)
        return True

    async def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder, moving its projects to the root.

        Child folders are re-parented to the deleted folder's parent.
        """
        return await self._mutate(
            "deleting cutlist folder", lambda: self._delete_folder(folder_id), False
        )

    def _delete_folder(self, folder_id: str) -> bool:
        data = self._read()
        record = self._find(data["folders"], folder_id)
        if record is None:
            raise CutlistStoreError(f"Folder '{folder_id}' not found.")
        new_parent = record.get("parent_id")
        data["folders"] = [item for item in data["folders"] if item is not record]
        for folder in data["folders"]:
            if isinstance(folder, dict) and folder.get("parent_id") == folder_id:
                folder["parent_id"] = new_parent
        for project in data["projects"]:
            if isinstance(project, dict) and project.get("folder_id") == folder_id:
                project["folder_id"] = None
        self._write(data)
        return True

    # Projects ---------------------------------------------------------

    async def load_projects(self) -> Optional[list[SavedCutlistProject]]:
        return await self._run("loading cutlist projects", self._load_projects, None)

    def _load_projects(self) -> list[SavedCutlistProject]:
        projects = [
            SavedCutlistProject.from_dict(item)
            for item in self._read()["projects"]
            if isinstance(item, dict)
        ]
        return sorted(projects, key=lambda item: item.updated_at, reverse=True)

    async def save_project(
        self,
        name: str,
        data: SavedCutlistData,
        folder_id: Optional[str] = None,
    ) -> Optional[SavedCutlistProject]:
        return await self._mutate(
            "saving cutlist project",
            lambda: self._save_project(name, data, folder_id),
            None,
        )

    def _save_project(
        self, name: str, data: Any, folder_id: Optional[str]
    ) -> SavedCutlistProject:
        document = self._read()
        if folder_id is not None and self._find(document["folders"], folder_id) is None:
            raise CutlistStoreError(f"Folder '{folder_id}' not found.")
        stamp = utc_now_iso()
        project = SavedCutlistProject(
            id=str(uuid.uuid4()),
            name=name,
            folder_id=folder_id,
            data=(
                data
                if isinstance(data, SavedCutlistData)
                else SavedCutlistData.from_dict(data)
            ),
            created_at=stamp,
            updated_at=stamp,
        )
        document["projects"].append(project.to_dict())
        self._write(document)
        return project

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> bool:
        return await self._mutate(
            "updating cutlist project",
            lambda: self._update_project(project_id, updates),
            False,
        )

    def _update_project(self, project_id: str, updates: dict[str, Any]) -> bool:
        document = self._read()
        record = self._find(document["projects"], project_id)
        if record is None:
            raise CutlistStoreError(f"Project '{project_id}' not found.")
        if "folder_id" in updates:
            folder_id = updates["folder_id"]
            if folder_id is not None and self._find(document["folders"], folder_id) is None:
                raise CutlistStoreError(f"Folder '{folder_id}' not found.")
            record["folder_id"] = folder_id
        if "name" in updates:
            record["name"] = updates["name"]
        if "data" in updates:
            payload = updates["data"]
            record["data"] = (
                payload.to_dict() if isinstance(payload, SavedCutlistData) else payload
            )
        record["updated_at"] = utc_now_iso()
        self._write(document)
        return True

    async def delete_project(self, project_id: str) -> bool:
        return await self._mutate(
            "deleting cutlist project", lambda: self._delete_project(project_id), False
        )

    def _delete_project(self, project_id: str) -> bool:
        document = self._read()
        record = self._find(document["projects"], project_id)
        if record is None:
            raise CutlistStoreError(f"Project '{project_id}' not found.")
        document["projects"] = [item for item in document["projects"] if item is not record]
        self._write(document)
        return True


__all__ = ["CutlistStoreError", "JsonCutlistStore"]
