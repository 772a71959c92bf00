"""Configuration manager for the file manager profile."""

import logging
import os
from collections.abc import Sequence
from dataclasses import fields
from pathlib import Path

from .atomic import atomic_replace
from .folder import FolderConfigCache
from .models import AppConfig
from .models import PathConfigResult
from .models import ProfilePaths
from .models import SortSpec
from .models import ViewMode
from .profile import dump_profile
from .profile import load_from_store
from .resolver import PathConfigResolver
from .store import KeyedSectionStore
from .utils import PathLike

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages global defaults and per-folder settings of one profile.

    Global defaults are loaded from a chain of profile files, each one
    overriding settings of the previous ones:
    1. System profile files, in the order of ``paths.system_dirs``
    2. The user profile file (or, once, the legacy file it replaces)

    Per-folder settings are resolved through ``resolver``.

    Args:
        paths: Profile locations
    """

    def __init__(self, paths: ProfilePaths):
        """Initialize configuration manager with injected paths.

        Args:
            paths: ProfilePaths defining where config files are located
        """
        self.paths = paths
        self.defaults = AppConfig()
        self.cache = FolderConfigCache(paths.cache_file)
        self.save_pending = False
        self._resolver = PathConfigResolver(self.defaults, self.cache, self.request_save)

    @property
    def resolver(self) -> PathConfigResolver:
        return self._resolver

    # ===== Profile Loading =====

    def load(self) -> AppConfig:
        """Load defaults from the profile chain and the directory settings cache.

        Returns:
            The loaded defaults (also available as ``defaults``)
        """
        self._reset_defaults()
        store = KeyedSectionStore()

        for system_dir in self.paths.system_dirs:
            if store.load(system_dir / self.paths.profile_file.name):
                load_from_store(self.defaults, store)

        legacy = self.paths.legacy_file
        if legacy is not None and legacy.is_file() and not self.paths.profile_file.exists():
            if store.load(legacy):
                load_from_store(self.defaults, store)
                self._migrate_legacy(legacy)
        elif store.load(self.paths.profile_file):
            load_from_store(self.defaults, store)

        self.cache.load()
        return self.defaults

    def _reset_defaults(self) -> None:
        # keep the object identity, the resolver holds a reference to it
        fresh = AppConfig()
        for f in fields(fresh):
            setattr(self.defaults, f.name, getattr(fresh, f.name))

    def _migrate_legacy(self, legacy: Path) -> None:
        """Move the pre-profile config file into the profile directory."""
        try:
            self.paths.user_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            os.replace(legacy, self.paths.profile_file)
        except OSError as e:
            logger.warning(f"Failed to migrate {legacy} to {self.paths.profile_file}: {e}")
            return
        logger.info(f"Migrated {legacy} to {self.paths.profile_file}")

    # ===== Profile Saving =====

    def save_profile(self) -> bool:
        """Rewrite the user profile file and flush the directory settings cache.

        Returns:
            False if the directory settings cache could not be written

        Raises:
            ConfigFileError: If the profile file cannot be written
        """
        self.paths.user_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        atomic_replace(self.paths.profile_file, dump_profile(self.defaults).encode("utf-8"))
        logger.info(f"Saved profile to {self.paths.profile_file}")
        return self.cache.save()

    def request_save(self) -> None:
        """Mark configuration as changed; the next flush() writes it."""
        self.save_pending = True

    def flush(self) -> bool:
        """Save configuration if a save was requested or the cache is dirty.

        The pending mark stays set while anything failed to write, so a
        later flush() retries.

        Returns:
            True if everything pending was written
        """
        if self.save_pending:
            if not self.save_profile():
                return False
        elif self.cache.changed:
            if not self.cache.save():
                return False
        else:
            return False
        self.save_pending = False
        return True

    # ===== Per-path Settings =====

    def get_config_for_path(self, path: PathLike) -> tuple[bool, PathConfigResult]:
        """Resolve configuration for ``path``. See PathConfigResolver.resolve."""
        return self._resolver.resolve(path)

    def save_config_for_path(
        self,
        path: PathLike,
        sort: SortSpec,
        view_mode: ViewMode | str | int | None,
        show_hidden: bool,
        columns: Sequence[str] | None = None,
    ) -> bool:
        """Save configuration for ``path``. See PathConfigResolver.save."""
        return self._resolver.save(path, sort, view_mode, show_hidden, columns)

    def clear_config_for_path(self, path: PathLike) -> None:
        """Forget configuration for ``path``. See PathConfigResolver.clear."""
        self._resolver.clear(path)
