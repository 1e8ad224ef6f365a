"""Create/read/update/delete operations on the hash-sharded storage layout."""

import logging
import os
import shutil
import threading
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Union

from filestore_api.errors import (
    InvalidInputError,
    NameMismatchError,
    NotFoundError,
    StorageInitError,
    StorageIOError,
)
from filestore_api.storage.paths import PathResolver

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


def init_storage(storage_root: Union[str, Path]) -> Path:
    """Create the storage root if it is missing. Failure is fatal."""
    root = Path(storage_root)
    if root.is_dir():
        return root
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create storage directory {root}: {e}")
        raise StorageInitError(f"Storage initialization failed for {root}") from e
    logger.info(f"Storage directory initialized at {root}")
    return root


class StorageEngine:
    """
    Single-file operations against a storage root.

    `save` never overwrites: a second upload under an existing name is
    discarded and the existing path returned. `update` is the only way to
    replace content, and it requires the file to exist already.

    Both write through `<root>/<name>.tmp` while holding a lock for that name,
    so concurrent writers of one name never share a temp file.
    """

    def __init__(self, storage_root: Union[str, Path], resolver: Optional[PathResolver] = None):
        self.storage_root = Path(storage_root)
        self.resolver = resolver or PathResolver(self.storage_root)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def init_storage(self) -> Path:
        return init_storage(self.storage_root)

    def save(self, name: str, content: BinaryIO) -> str:
        """
        Store `content` under `name` unless a file with that name already exists.

        :param name: The original file name, extension included.
        :param content: A readable binary stream. Left unread when the name is taken.
        :return: The storage-relative path of the stored file.
        """
        logger.info(f"Saving file: {name}")
        if not name:
            raise InvalidInputError("File name cannot be empty")

        self.resolver.validate_name(name)
        file_path = self.resolver.resolve(name)

        temp_path = self._temp_path(name)
        with self._lock_for(name):
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)

                if file_path.exists():
                    logger.debug(f"File already exists at {file_path}, keeping stored content")
                    return self.resolver.relative_path(file_path)

                # the target only ever appears complete; a failed copy leaves nothing behind
                self._write_temp(temp_path, content)
                try:
                    os.link(temp_path, file_path)
                except FileExistsError:
                    logger.debug(f"File appeared at {file_path} during save, keeping stored content")
            except OSError as e:
                logger.error(f"Error saving file {name}: {e}")
                raise StorageIOError(f"File saving failed for {name}") from e
            finally:
                temp_path.unlink(missing_ok=True)

        logger.info(f"File successfully stored at {file_path}")
        return self.resolver.relative_path(file_path)

    def update(self, name: str, content: BinaryIO, uploaded_name: Optional[str] = None) -> str:
        """
        Replace the content of an existing file in one visible step.

        The new content is written to `<root>/<name>.tmp` first and then moved
        over the target with `os.replace`, so readers of the target path see
        either the old content or the new content, never a partial write.

        :param name: The file to update.
        :param content: A readable binary stream with the new content.
        :param uploaded_name: The name the client attached to the upload, if any.
            It must match `name` when given.
        :return: The storage-relative path of the updated file.
        """
        logger.info(f"Updating file: {name}")
        if uploaded_name and uploaded_name != name:
            logger.debug(
                f"File name mismatch - expected '{name}', but got '{uploaded_name}'"
            )
            raise NameMismatchError(name, uploaded_name)

        self.resolver.validate_name(name)
        file_path = self.resolver.resolve(name)

        if not file_path.exists():
            logger.debug(f"File not found {file_path}")
            raise NotFoundError(name)

        temp_path = self._temp_path(name)
        with self._lock_for(name):
            try:
                self._write_temp(temp_path, content)
                os.replace(temp_path, file_path)
            except OSError as e:
                logger.error(f"Error updating file {name}: {e}")
                temp_path.unlink(missing_ok=True)
                raise StorageIOError(f"File update failed for {name}") from e

        logger.info(f"File updated at {file_path}")
        return self.resolver.relative_path(file_path)

    def _temp_path(self, name: str) -> Path:
        return self.storage_root / f"{name}{TEMP_SUFFIX}"

    def _lock_for(self, name: str) -> threading.Lock:
        """One lock per name, so only one writer at a time owns `<name>.tmp`."""
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    @staticmethod
    def _write_temp(temp_path: Path, content: BinaryIO) -> None:
        with open(temp_path, "wb") as destination:
            shutil.copyfileobj(content, destination)

    def retrieve(self, name: str) -> Path:
        """Return the path of a stored file without reading it."""
        logger.info(f"Retrieving file: {name}")
        file_path = self.resolver.resolve(name)

        if not file_path.is_file():
            logger.debug(f"File not found {file_path}")
            raise NotFoundError(name)

        return file_path

    def delete(self, name: str) -> bool:
        """
        Remove a stored file.

        :raises NotFoundError: if the file is absent. Nothing is removed then.
        :raises StorageIOError: if the filesystem refuses the removal.
        :return: Whether a file was actually removed.
        """
        logger.info(f"Deleting file: {name}")
        file_path = self.retrieve(name)
        try:
            file_path.unlink()
            deleted = True
        except FileNotFoundError:
            deleted = False
        except OSError as e:
            logger.error(f"Error deleting file {name}: {e}")
            raise StorageIOError(f"File deletion failed for {name}") from e

        logger.info(f"File {name} deleted={deleted}")
        return deleted
