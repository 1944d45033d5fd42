"""
User files service.

Reads the user files directory as a tree of folder/file nodes, creates folders
and renames entries. Every call works straight against the filesystem, nothing
is cached between requests.
"""

import logging
import os
import re
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from app.exceptions import (
    AlreadyExistsError,
    InvalidRequestError,
    NotADirectoryPathError,
    PathNotFoundError,
    PathOutsideRootError,
)
from app.schemas.filesystem import FileNode, FolderNode, RenameResult, TreeNode
from app.utils.files import (
    created_at,
    generate_id,
    get_extension,
    get_mime_type,
    sort_by_last_update,
    updated_at,
)

logger = logging.getLogger(__name__)

DEFAULT_FOLDERS = ("Documents", "Images")

# Characters rejected in new names
INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


class UserFilesService:
    """Filesystem operations scoped to a single root directory"""

    def __init__(
        self,
        root_dir: str | Path,
        default_folders: Iterable[str] = DEFAULT_FOLDERS,
        root_folder_name: str = "My Files",
    ):
        self.root_dir = Path(os.path.abspath(root_dir))
        self.default_folders = list(default_folders)
        self.root_folder_name = root_folder_name

    def resolve_path(self, relative_path: Optional[str]) -> Path:
        """
        Join a client supplied path onto the root directory.

        Leading slashes are ignored, so "/Documents" and "Documents" name the
        same folder. The result is normalized lexically (symlinks are left
        alone) and must not escape the root.

        Raises:
            PathOutsideRootError: if the path climbs above the root
        """
        relative = (relative_path or "").lstrip("/")
        target = Path(os.path.normpath(self.root_dir / relative))
        if target != self.root_dir and self.root_dir not in target.parents:
            raise PathOutsideRootError("Path is outside the user files directory")
        return target

    def initialize(self) -> None:
        """
        Make sure the root directory exists, seeding the default folders into
        it when it is empty. Failures are logged and otherwise ignored.
        """
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            if not any(self.root_dir.iterdir()):
                for name in self.default_folders:
                    (self.root_dir / name).mkdir(parents=True, exist_ok=True)
                logger.info("Seeded %s with default folders", self.root_dir)
        except OSError:
            logger.exception("Error initializing user files directory %s", self.root_dir)

    def read_directory(
        self,
        dir_path: Path,
        relative_path: str = "",
        _ancestors: FrozenSet[str] = frozenset(),
    ) -> List[TreeNode]:
        """
        Describe the contents of a directory, recursing into subfolders.

        Args:
            dir_path: Absolute directory to read
            relative_path: The same directory relative to the root

        Returns:
            Nodes sorted by last modification, newest first. An unreadable
            directory yields an empty list.
        """
        try:
            names = os.listdir(dir_path)
        except OSError as e:
            logger.warning("Error reading directory %r: %s", relative_path or "/", e)
            return []

        ancestors = _ancestors | {os.path.realpath(dir_path)}
        nodes: List[TreeNode] = []

        for name in names:
            full_path = dir_path / name
            item_relative_path = f"{relative_path}/{name}" if relative_path else name

            try:
                stats = full_path.stat()
            except OSError as e:
                # Dangling symlinks and entries removed mid-walk
                logger.warning("Skipping %r: %s", item_relative_path, e)
                continue

            if stat.S_ISDIR(stats.st_mode):
                if os.path.realpath(full_path) in ancestors:
                    logger.warning("Not descending into %r: symlink cycle", item_relative_path)
                    children: List[TreeNode] = []
                else:
                    children = self.read_directory(full_path, item_relative_path, ancestors)

                nodes.append(FolderNode(
                    id=generate_id(),
                    name=name,
                    children=children,
                    created_at=created_at(stats),
                    updated_at=updated_at(stats),
                ))
            else:
                nodes.append(FileNode(
                    id=generate_id(),
                    name=name,
                    size=stats.st_size,
                    extension=get_extension(name),
                    mime_type=get_mime_type(name),
                    created_at=created_at(stats),
                    updated_at=updated_at(stats),
                ))

        return sort_by_last_update(nodes, descending=True)

    def read_tree(self, relative_path: str = "") -> FolderNode:
        """
        Read a folder as a tree wrapped in a synthetic root node.

        The root node's id is the requested path ("root" for the top level)
        and its timestamps are the time of the read.

        Raises:
            PathNotFoundError: if the folder does not exist
            NotADirectoryPathError: if the path names a file
        """
        self.initialize()
        target = self.resolve_path(relative_path)

        try:
            stats = target.stat()
        except OSError as e:
            raise PathNotFoundError("Directory not found") from e
        if not stat.S_ISDIR(stats.st_mode):
            raise NotADirectoryPathError("Path is not a directory")

        children = self.read_directory(target, relative_path)

        if relative_path:
            name = relative_path.split("/")[-1] or "user-files"
        else:
            name = self.root_folder_name
        now = datetime.now(timezone.utc)

        return FolderNode(
            id=relative_path or "root",
            name=name,
            children=children,
            created_at=now,
            updated_at=now,
        )

    def create_folder(self, folder_path: Optional[str], name: Optional[str]) -> FolderNode:
        """
        Create a folder named `name` inside `folder_path` (the root if empty).

        Missing parent folders are created too. The returned node is built
        from the request, not read back from disk.

        Raises:
            InvalidRequestError: if the name is missing or blank
            AlreadyExistsError: if the folder already exists
        """
        if not name or not name.strip():
            raise InvalidRequestError("Folder name is required")
        name = name.strip()

        self.initialize()
        target = self.resolve_path(os.path.join(folder_path or "", name))

        if target.is_dir():
            raise AlreadyExistsError("Folder already exists")

        try:
            target.mkdir(parents=True)
        except FileExistsError as e:
            # Lost a race with another create, or a file holds the name
            raise AlreadyExistsError("Folder already exists") from e

        logger.info("Created folder %s", target)
        now = datetime.now(timezone.utc)
        return FolderNode(
            id=generate_id(),
            name=name,
            children=[],
            created_at=now,
            updated_at=now,
        )

    def rename(self, old_path: Optional[str], new_name: Optional[str]) -> RenameResult:
        """
        Rename a file or folder in place. Existing entries are never
        overwritten.

        The returned new path swaps the first occurrence of the old name in
        `old_path` for the new name.

        Raises:
            InvalidRequestError: if either value is missing or the name is
                blank or uses forbidden characters
            PathNotFoundError: if nothing exists at `old_path`
            AlreadyExistsError: if a sibling already uses the new name
        """
        if not old_path or not new_name:
            raise InvalidRequestError("Old path and new name are required")

        trimmed_name = new_name.strip()
        if not trimmed_name:
            raise InvalidRequestError("New name cannot be empty")
        if INVALID_NAME_CHARS.search(trimmed_name):
            raise InvalidRequestError("Name contains invalid characters")
        if trimmed_name in (".", ".."):
            raise InvalidRequestError("Invalid name")

        source = self.resolve_path(old_path)
        if source == self.root_dir:
            raise InvalidRequestError("Cannot rename the user files directory")
        if not os.path.lexists(source):
            raise PathNotFoundError("File or folder not found")

        destination = source.parent / trimmed_name
        if os.path.lexists(destination):
            raise AlreadyExistsError("A file or folder with this name already exists")

        try:
            os.rename(source, destination)
        except FileExistsError as e:
            raise AlreadyExistsError("A file or folder with this name already exists") from e

        logger.info("Renamed %s to %s", source, destination)
        old_name = os.path.basename(old_path.rstrip("/"))
        return RenameResult(
            old_path=old_path,
            new_path=old_path.replace(old_name, trimmed_name, 1),
            new_name=trimmed_name,
        )
