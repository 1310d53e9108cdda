"""Saved cutlist projects organized in folders, mirrored in memory."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Optional,
    Protocol,
    TypeVar,
    Union,
)

from cutlistedit.app.models import CutlistFolder, SavedCutlistData, SavedCutlistProject
from cutlistedit.core.utils import utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class CutlistStore(Protocol):
    """Persistence backend for folders and saved projects.

    Failures are reported as ``None``/``False``; loads return ``None`` when
    the backend cannot be read, as opposed to an empty list.
    ``delete_folder`` must move the folder's projects to the root.
    """

    async def load_folders(self) -> Optional[list[CutlistFolder]]: ...

    async def load_projects(self) -> Optional[list[SavedCutlistProject]]: ...

    async def save_project(
        self,
        name: str,
        data: SavedCutlistData,
        folder_id: Optional[str] = None,
    ) -> Optional[SavedCutlistProject]: ...

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> bool: ...

    async def delete_project(self, project_id: str) -> bool: ...

    async def create_folder(
        self, name: str, parent_id: Optional[str] = None
    ) -> Optional[CutlistFolder]: ...

    async def rename_folder(self, folder_id: str, name: str) -> bool: ...

    async def delete_folder(self, folder_id: str) -> bool: ...


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    reason: str


Result = Union[Success[T], Failure]


async def _attempt(label: str, operation: Callable[[], Awaitable[T]]) -> Result:
    """Run a store call and tag its outcome."""
    try:
        value = await operation()
    except Exception as exc:
        logger.error("Cutlist store %s raised: %s", label, exc)
        return Failure(f"{label}: {exc}")
    if value is None or value is False:
        logger.warning("Cutlist store %s failed.", label)
        return Failure(f"{label} failed")
    return Success(value)


class SavedProjectRepository:
    """Coordinate folder/project CRUD with an in-memory mirror of the store.

    The mirror only changes after the store confirms an operation. Public
    methods return the created entity, ``True``, or ``None``/``False`` on
    failure; they never raise.
    """

    def __init__(
        self,
        store: CutlistStore,
        changed_callback: Optional[Callable[[], None]] = None,
    ) -> None:
        self.store = store
        self.folders: list[CutlistFolder] = []
        self.projects: list[SavedCutlistProject] = []
        self.loading: bool = False
        self._changed_callback = changed_callback

    # Mirror helpers ---------------------------------------------------

    def _notify(self) -> None:
        if self._changed_callback:
            try:
                self._changed_callback()
            except Exception as exc:  # pragma: no cover
                logger.warning("Mirror change callback failed: %s", exc)

    def get_project(self, project_id: str) -> Optional[SavedCutlistProject]:
        return next((item for item in self.projects if item.id == project_id), None)

    def get_folder(self, folder_id: str) -> Optional[CutlistFolder]:
        return next((item for item in self.folders if item.id == folder_id), None)

    def folder_children(self, parent_id: Optional[str] = None) -> list[CutlistFolder]:
        """Folders directly under ``parent_id`` (``None`` for the root)."""
        return [item for item in self.folders if item.parent_id == parent_id]

    def projects_in_folder(self, folder_id: Optional[str] = None) -> list[SavedCutlistProject]:
        return [item for item in self.projects if item.folder_id == folder_id]

    def folder_path(self, folder_id: Optional[str]) -> list[CutlistFolder]:
        """Return the chain of folders from the root down to ``folder_id``."""
        chain: list[CutlistFolder] = []
        seen: set[str] = set()
        current = self.get_folder(folder_id) if folder_id else None
        while current is not None and current.id not in seen:
            seen.add(current.id)
            chain.append(current)
            current = self.get_folder(current.parent_id) if current.parent_id else None
        chain.reverse()
        return chain

    # Loading ----------------------------------------------------------

    async def refresh(self) -> bool:
        """Reload folders and projects together and swap the mirror."""
        self.loading = True
        try:
            folders, projects = await asyncio.gather(
                _attempt("load_folders", self.store.load_folders),
                _attempt("load_projects", self.store.load_projects),
            )
        finally:
            self.loading = False
        if not isinstance(folders, Success) or not isinstance(projects, Success):
            return False
        self.folders = list(folders.value)
        self.projects = list(projects.value)
        self._notify()
        return True

    # Projects ---------------------------------------------------------

    async def save_project(
        self,
        name: str,
        data: SavedCutlistData,
        folder_id: Optional[str] = None,
    ) -> Optional[SavedCutlistProject]:
        result = await _attempt(
            "save_project", lambda: self.store.save_project(name, data, folder_id)
        )
        if isinstance(result, Failure):
            return None
        project = result.value
        self.projects = [project, *self.projects]
        self._notify()
        return project

    async def update_project(
        self,
        project_id: str,
        *,
        name: Any = UNSET,
        folder_id: Any = UNSET,
        data: Any = UNSET,
    ) -> bool:
        """Update the given fields; ``folder_id=None`` moves to the root.

        ``data=None`` is treated like an omitted snapshot.
        """
        updates: dict[str, Any] = {}
        if name is not UNSET:
            updates["name"] = name
        if folder_id is not UNSET:
            updates["folder_id"] = folder_id
        if data is not UNSET and data is not None:
            updates["data"] = (
                data if isinstance(data, SavedCutlistData) else SavedCutlistData.from_dict(data)
            )

        result = await _attempt(
            "update_project", lambda: self.store.update_project(project_id, updates)
        )
        if isinstance(result, Failure):
            return False
        stamp = utc_now_iso()
        self.projects = [
            replace(item, **updates, updated_at=stamp) if item.id == project_id else item
            for item in self.projects
        ]
        self._notify()
        return True

    async def delete_project(self, project_id: str) -> bool:
        result = await _attempt(
            "delete_project", lambda: self.store.delete_project(project_id)
        )
        if isinstance(result, Failure):
            return False
        self.projects = [item for item in self.projects if item.id != project_id]
        self._notify()
        return True

    # Folders ----------------------------------------------------------

    async def create_folder(
        self, name: str, parent_id: Optional[str] = None
    ) -> Optional[CutlistFolder]:
        result = await _attempt(
            "create_folder", lambda: self.store.create_folder(name, parent_id)
        )
        if isinstance(result, Failure):
            return None
        folder = result.value
        self.folders = [*self.folders, folder]
        self._notify()
        return folder

    async def rename_folder(self, folder_id: str, name: str) -> bool:
        result = await _attempt(
            "rename_folder", lambda: self.store.rename_folder(folder_id, name)
        )
        if isinstance(result, Failure):
            return False
        self.folders = [
            replace(item, name=name) if item.id == folder_id else item
            for item in self.folders
        ]
        self._notify()
        return True

    async def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder; its projects move to the root, they are not deleted."""
        result = await _attempt(
            "delete_folder", lambda: self.store.delete_folder(folder_id)
        )
        if isinstance(result, Failure):
            return False
        self.folders = [item for item in self.folders if item.id != folder_id]
        self.projects = [
            replace(item, folder_id=None) if item.folder_id == folder_id else item
            for item in self.projects
        ]
        self._notify()
        return True


__all__ = [
    "CutlistStore",
    "Failure",
    "Result",
    "SavedProjectRepository",
    "Success",
    "UNSET",
]
