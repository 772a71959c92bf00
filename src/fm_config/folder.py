"""Per-folder configuration sections.

A folder's settings live either in a standalone ``.directory`` file inside
the folder or in one section of the shared directory settings cache, keyed
by the folder's path string.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .atomic import atomic_replace
from .exceptions import ConfigFileError
from .store import KeyedSectionStore
from .utils import PathLike
from .utils import native_path
from .utils import path_key

logger = logging.getLogger(__name__)

DIRECTORY_FILENAME = ".directory"
DIRECTORY_GROUP = "File Manager"


class FolderConfig:
    """One opened configuration section.

    Obtain instances through FolderConfigCache.open(); setters mark the
    section changed and close() persists it.

    Attributes:
        store: Store holding the section
        group: Section name inside the store
        filepath: Standalone file backing the store, None for cached sections
        changed: Whether the section was modified since it was opened
    """

    def __init__(self, store: KeyedSectionStore, group: str, filepath: Path | None = None):
        self.store = store
        self.group = group
        self.filepath = filepath
        self.changed = False

    @property
    def is_standalone(self) -> bool:
        return self.filepath is not None

    def is_empty(self) -> bool:
        return not self.store.has_section(self.group)

    # ===== Getters =====

    def get_int(self, key: str) -> int | None:
        return self.store.get_int(self.group, key)

    def get_bool(self, key: str) -> bool | None:
        return self.store.get_bool(self.group, key)

    def get_string(self, key: str) -> str | None:
        return self.store.get_string(self.group, key)

    def get_string_list(self, key: str) -> list[str] | None:
        return self.store.get_string_list(self.group, key)

    # ===== Setters =====

    def set_int(self, key: str, value: int) -> None:
        self.changed = True
        self.store.set_int(self.group, key, value)

    def set_bool(self, key: str, value: bool) -> None:
        self.changed = True
        self.store.set_bool(self.group, key, value)

    def set_string(self, key: str, value: str) -> None:
        self.changed = True
        self.store.set_string(self.group, key, value)

    def set_string_list(self, key: str, values: Iterable[str]) -> None:
        self.changed = True
        self.store.set_string_list(self.group, key, values)

    def remove_key(self, key: str) -> None:
        self.changed = True
        self.store.remove_key(self.group, key)

    def purge(self) -> None:
        """Drop the whole section."""
        self.changed = True
        self.store.remove_section(self.group)


class FolderConfigCache:
    """Shared directory settings cache.

    Holds one section per configured path for the process lifetime. Any
    change to a cached section raises the file-wide ``changed`` flag; the
    file is written only by save().

    Args:
        path: Location of the cache file
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.store = KeyedSectionStore()
        self.changed = False

    def load(self) -> None:
        """Read the cache file, starting empty if it is missing or unreadable."""
        self.store.load(self.path)
        self.changed = False

    def save(self) -> bool:
        """Write the cache file if any section changed.

        Returns:
            True if the file is up to date, False if writing failed (the
            changed flag stays set so a later save retries)
        """
        if not self.changed:
            return True
        try:
            atomic_replace(self.path, self.store.dumps().encode("utf-8"))
        except ConfigFileError as e:
            logger.warning(f"Failed to save directory settings: {e}")
            return False
        self.changed = False
        return True

    @contextmanager
    def open(self, path: PathLike) -> Iterator[FolderConfig]:
        """Open the configuration section for ``path``.

        The section is closed when the block exits, whatever the outcome.
        """
        fc = self._open(path)
        try:
            yield fc
        finally:
            self.close(fc)

    def _open(self, path: PathLike) -> FolderConfig:
        local = native_path(path)
        if local is not None:
            filepath = local / DIRECTORY_FILENAME
            if filepath.is_file():
                store = KeyedSectionStore()
                if store.load(filepath):
                    for group in (DIRECTORY_GROUP, path_key(path)):
                        if store.has_section(group):
                            return FolderConfig(store, group, filepath)
        return FolderConfig(self.store, path_key(path))

    def close(self, fc: FolderConfig) -> bool:
        """Release ``fc``, persisting it if it changed.

        Returns:
            False if a standalone file could not be written
        """
        if not fc.changed:
            return True
        fc.changed = False
        if fc.filepath is None:
            self.changed = True
            return True
        try:
            atomic_replace(fc.filepath, fc.store.dumps().encode("utf-8"))
        except ConfigFileError as e:
            logger.warning(f"Failed to save folder settings: {e}")
            return False
        return True
