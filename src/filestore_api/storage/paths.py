"""Name validation and hash-sharded path resolution."""

import hashlib
import logging
import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Union

from filestore_api.errors import InvalidInputError, InvalidNameError

logger = logging.getLogger(__name__)

FILE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")
SHARD_KEY_LENGTH = 2


def strip_extension(name: str) -> str:
    """Drop everything from the last `.` on; names without a dot are returned whole."""
    base, dot, _ = name.rpartition(".")
    return base if dot else name


def shard_key(name: str) -> str:
    """First two lowercase hex characters of SHA-256 over the UTF-8 name."""
    digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
    return digest[:SHARD_KEY_LENGTH]


class PathResolver:
    """
    Maps file names onto the sharded layout under a storage root.

    A file named `report.pdf` lives at `<root>/<shard>/report.pdf`, where the
    shard is derived from the name alone. The mapping is a pure function of
    the name, so there is no index to persist or rebuild.
    """

    def __init__(self, storage_root: Union[str, Path]):
        self.storage_root = Path(storage_root)

    def validate_name(self, name: str) -> None:
        """
        Check the part of `name` before its last dot against FILE_NAME_PATTERN.

        The extension itself is not inspected.

        :raises InvalidNameError: if the base name does not match.
        """
        base_name = strip_extension(name)
        logger.debug(f"Validating file name '{base_name}'")
        if not FILE_NAME_PATTERN.fullmatch(base_name):
            logger.warning(f"Invalid file name '{name}'")
            raise InvalidNameError(name)

    def shard_key(self, name: str) -> str:
        return shard_key(name)

    def resolve(self, name: str) -> Path:
        """
        Resolve `name` to `<root>/<shard>/<name>`.

        :raises InvalidInputError: if the name is blank, or would not land
            directly inside its shard directory.
        """
        if name is None or not name.strip():
            raise InvalidInputError("File name cannot be null or empty when resolving path")
        if name in (".", "..") or PurePosixPath(name).name != name or PureWindowsPath(name).name != name:
            raise InvalidInputError(f"File name cannot contain path segments: {name}")

        path = self.storage_root / shard_key(name) / name
        logger.debug(f"Resolved path '{path}' for file '{name}'")
        return path

    def relative_path(self, path: Path) -> str:
        """Express a resolved path as `<root>/<shard>/<name>` with forward slashes."""
        relative = path.relative_to(self.storage_root)
        return f"{self.storage_root.as_posix()}/{relative.as_posix()}"
