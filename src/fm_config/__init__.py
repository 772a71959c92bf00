"""fm-config: Global and per-folder configuration for a file manager.

This library provides mechanism for two kinds of settings:
- Global defaults loaded from a profile chain (system profiles, then the
  user's pcmanfm.conf)
- Per-folder overrides of sort, view mode, hidden files and columns, kept in
  a folder's own .directory file or in the shared dir-settings.conf cache

Applications inject profile paths; the library resolves, stores and
persists the settings.

Public API:
    ConfigManager: Loads and saves the profile, resolves per-folder settings
    PathConfigResolver: Per-path resolve/save/clear operations
    ProfilePaths: Dataclass defining profile file locations
    AppConfig, DesktopConfig: Global default settings
    SortSpec, PathConfigResult: Per-folder settings
    SortColumn, GroupMode, ViewMode, SidePaneMode: Setting enums
    KeyedSectionStore: Section/key store behind every configuration file
    atomic_replace: Crash-safe file replacement
    ConfigError, ConfigFileError: Exception types

Example:
    ```python
    from fm_config import ConfigManager, ProfilePaths, SortColumn, SortSpec, ViewMode

    config = ConfigManager(ProfilePaths.for_profile())
    config.load()

    # Settings for one folder, falling back to the global defaults
    found, settings = config.get_config_for_path("/home/user/Photos")

    # Remember a folder's own settings
    config.save_config_for_path(
        "/home/user/Photos",
        SortSpec(column=SortColumn.MTIME, ascending=False),
        ViewMode.THUMBNAIL,
        show_hidden=False,
    )
    config.flush()
    ```
"""

from .atomic import atomic_replace
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .manager import ConfigManager
from .models import AppConfig
from .models import DesktopConfig
from .models import GroupMode
from .models import PathConfigResult
from .models import ProfilePaths
from .models import SidePaneMode
from .models import SortColumn
from .models import SortSpec
from .models import ViewMode
from .resolver import PathConfigResolver
from .store import KeyedSectionStore

__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "PathConfigResolver",
    "ProfilePaths",
    "AppConfig",
    "DesktopConfig",
    "SortSpec",
    "PathConfigResult",
    "SortColumn",
    "GroupMode",
    "ViewMode",
    "SidePaneMode",
    "KeyedSectionStore",
    "atomic_replace",
    "ConfigError",
    "ConfigFileError",
]
