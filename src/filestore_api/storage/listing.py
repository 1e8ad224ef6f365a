"""Bulk queries over the whole storage root: regex search with pagination, and file count."""

import logging
import os
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Pattern, Union

from filestore_api.errors import InvalidPatternError, StorageIOError
from filestore_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileDescriptor:
    name: str


@dataclass
class ListingPage:
    """One page of search results plus the total number of matches across all shards."""
    files: List[FileDescriptor] = field(default_factory=list)
    total_matching: int = 0
    page: int = 0
    size: int = 0


def compile_pattern(regex: str) -> Pattern[str]:
    try:
        return re.compile(regex)
    except re.error as e:
        logger.error(f"Invalid regex pattern: {regex} ({e})")
        raise InvalidPatternError(regex) from e


def list_shard_directories(storage_root: Path) -> List[Path]:
    """Directories directly under the root, sorted by name."""
    try:
        shards = [entry for entry in storage_root.iterdir() if entry.is_dir()]
    except OSError as e:
        logger.error(f"Error listing storage root {storage_root}: {e}")
        raise StorageIOError(f"File listing failed for {storage_root}") from e
    return sorted(shards, key=lambda shard: shard.name)


def _iter_file_names(shard: Path) -> Iterator[str]:
    """Regular files inside one shard, by name."""
    with os.scandir(shard) as entries:
        names = [entry.name for entry in entries if entry.is_file()]
    yield from sorted(names)


class RegexListingEngine:
    """
    Regex search over every shard, with pagination.

    Two passes over the shards:

    1. count: each shard is counted on its own worker thread and the
       per-shard counts are summed, so order does not matter;
    2. collect: shards are walked one after another in ascending order,
       files within a shard in name order, keeping a running match index
       across the whole walk. This pass must stay sequential to keep the
       global order that pagination relies on.

    A shard that cannot be read is logged and treated as empty in both passes.
    """

    def __init__(self, storage_root: Union[str, Path], max_workers: Optional[int] = None):
        self.storage_root = Path(storage_root)
        self.max_workers = max_workers

    @log_execution_time
    def list(self, regex: str, page: int, size: int) -> ListingPage:
        logger.info(f"Listing files: regex={regex}, page={page}, size={size}")
        pattern = compile_pattern(regex)
        shards = list_shard_directories(self.storage_root)

        total_matching = self.count_matching(pattern, shards)
        files = self.collect_page(pattern, shards, offset=page * size, size=size)

        logger.info(
            f"Found {len(files)} files for this page, total matching items: {total_matching}"
        )
        return ListingPage(files=files, total_matching=total_matching, page=page, size=size)

    def count_matching(self, pattern: Pattern[str], shards: List[Path]) -> int:
        if not shards:
            return 0
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="shard-count"
        ) as executor:
            per_shard = executor.map(lambda shard: self._count_shard(pattern, shard), shards)
            return sum(per_shard)

    def _count_shard(self, pattern: Pattern[str], shard: Path) -> int:
        logger.debug(
            f"Processing folder: {shard} on thread: {threading.current_thread().name}"
        )
        try:
            return sum(1 for name in _iter_file_names(shard) if pattern.fullmatch(name))
        except OSError as e:
            logger.error(f"Error counting files in {shard}: {e}")
            return 0

    def collect_page(
        self, pattern: Pattern[str], shards: List[Path], offset: int, size: int
    ) -> List[FileDescriptor]:
        files: List[FileDescriptor] = []
        matched = 0
        for shard in shards:
            try:
                for name in _iter_file_names(shard):
                    if not pattern.fullmatch(name):
                        continue
                    matched += 1
                    if matched > offset and len(files) < size:
                        files.append(FileDescriptor(name=name))
            except OSError as e:
                logger.error(f"Error listing files in {shard}: {e}")
            if len(files) >= size:
                break
        return files


class CountEngine:
    """Counts every regular file under the storage root, whatever its depth."""

    def __init__(self, storage_root: Union[str, Path]):
        self.storage_root = Path(storage_root)

    @log_execution_time
    def count_all(self) -> int:
        logger.info("Counting total stored files")
        if not self.storage_root.is_dir():
            logger.error(f"Storage directory {self.storage_root} is not accessible")
            raise StorageIOError(f"Error counting files in {self.storage_root}")

        def _raise(error: OSError) -> None:
            raise error

        total = 0
        try:
            for dirpath, _, filenames in os.walk(self.storage_root, onerror=_raise):
                total += sum(1 for name in filenames if os.path.isfile(os.path.join(dirpath, name)))
        except OSError as e:
            logger.error(f"Error accessing storage directory: {e}")
            raise StorageIOError(f"Error counting files in {self.storage_root}") from e

        logger.info(f"Total files counted={total}")
        return total
