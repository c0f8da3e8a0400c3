"""Folder listing, creation and deletion over the local store."""

from __future__ import annotations

from doc_library.core.logging import get_logger
from doc_library.models.dto import OperationResult
from doc_library.models.entities import ROOT_FOLDER_ID, Folder, folder_path
from doc_library.store.local_store import LocalStore
from doc_library.utils.ids import new_id
from doc_library.utils.time import to_iso, utc_now

logger = get_logger(__name__)

ROOT_FOLDER = Folder(id=ROOT_FOLDER_ID, name="Root", path="/", parent_id=None)


class FolderService:
    """The root folder always exists even when nothing is stored for it."""

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def list_folders(self) -> list[Folder]:
        folders = self.store.get_folders()
        if any(folder.id == ROOT_FOLDER_ID for folder in folders):
            return folders
        return [ROOT_FOLDER.model_copy(), *folders]

    def get_folder(self, folder_id: str) -> Folder | None:
        return next((folder for folder in self.list_folders() if folder.id == folder_id), None)

    def create_folder(self, name: str, parent_id: str | None = None, description: str = "") -> OperationResult:
        clean = name.strip()
        if not clean:
            return OperationResult.fail("Folder name must not be empty")
        if any(folder.name == clean for folder in self.list_folders()):
            return OperationResult.fail(f"A folder named '{clean}' already exists")

        now = to_iso(utc_now())
        folder = Folder(
            id=new_id("folder"),
            name=clean,
            path=folder_path(clean),
            parent_id=parent_id,
            description=description,
            created_at=now,
            updated_at=now,
        )
        stored = self.store.get_folders()
        stored.append(folder)
        if not self.store.save_folders(stored):
            return OperationResult.fail("Folder could not be saved")
        logger.info("Created folder %s (%s)", folder.name, folder.id)
        return OperationResult.ok(f"Folder '{clean}' created", data=folder)

    def delete_folder(self, folder_id: str) -> OperationResult:
        if folder_id == ROOT_FOLDER_ID:
            return OperationResult.fail("The root folder cannot be deleted")
        stored = self.store.get_folders()
        if not any(folder.id == folder_id for folder in stored):
            return OperationResult.fail(f"Folder {folder_id} not found")
        if any(folder.parent_id == folder_id for folder in stored):
            return OperationResult.fail("Folder still contains subfolders")
        if not self.store.save_folders([folder for folder in stored if folder.id != folder_id]):
            return OperationResult.fail("Folder could not be deleted")
        logger.info("Deleted folder %s", folder_id)
        return OperationResult.ok("Folder deleted")


__all__ = ["FolderService", "ROOT_FOLDER"]
