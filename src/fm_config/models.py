"""Data models for fm-config."""

import os
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from enum import IntEnum
from pathlib import Path

from platformdirs import site_config_dir
from platformdirs import user_config_dir

APP_DIRNAME = "pcmanfm"
PROFILE_FILENAME = "pcmanfm.conf"
CACHE_FILENAME = "dir-settings.conf"
DEFAULT_PROFILE = "default"


class SortColumn(IntEnum):
    """Folder model columns a view can be sorted by.

    Index values match the legacy ``sort_by`` integers.
    """

    NAME = 0
    ICON = 1
    SIZE = 2
    DESC = 3
    PERM = 4
    OWNER = 5
    MTIME = 6
    INFO = 7
    GICON = 8
    DIRNAME = 9
    EXT = 10

    @property
    def column_name(self) -> str | None:
        """Stable name used in configuration files, None for internal columns."""
        return _COLUMN_NAMES.get(self)

    @classmethod
    def from_name(cls, name: str) -> "SortColumn | None":
        for column, column_name in _COLUMN_NAMES.items():
            if column_name == name:
                return column
        return None

    @classmethod
    def is_valid_index(cls, index: int) -> bool:
        return 0 <= index < len(cls)


_COLUMN_NAMES = {
    SortColumn.NAME: "name",
    SortColumn.SIZE: "size",
    SortColumn.DESC: "desc",
    SortColumn.PERM: "perm",
    SortColumn.OWNER: "owner",
    SortColumn.MTIME: "mtime",
    SortColumn.DIRNAME: "dirname",
    SortColumn.EXT: "ext",
}


class GroupMode(Enum):
    """Whether folders are listed before files or mixed with them."""

    FOLDERS_FIRST = "folders-first"
    MINGLED = "mingled"


class ViewMode(Enum):
    """Standard folder view modes.

    Definition order matches the legacy integer values.
    """

    ICON = "icon"
    COMPACT = "compact"
    THUMBNAIL = "thumbnail"
    LIST = "list"

    @classmethod
    def parse(cls, value: "ViewMode | str | int | None") -> "ViewMode | None":
        """Coerce a name, legacy integer or member into a ViewMode.

        Returns:
            The matching mode, or None if the value is not recognized
        """
        if isinstance(value, ViewMode):
            return value
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            # isdigit() alone accepts non-ASCII digits that int() rejects
            if not (value.isascii() and value.isdigit()):
                try:
                    return cls(value)
                except ValueError:
                    return None
            value = int(value)
        if isinstance(value, int):
            members = list(cls)
            if 0 <= value < len(members):
                return members[value]
        return None


class SidePaneMode(Enum):
    """Side pane contents. Values are the legacy integers."""

    PLACES = 1
    DIRTREE = 2
    REMOTE = 3

    @property
    def mode_name(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "SidePaneMode | None":
        try:
            return cls[name.upper()]
        except KeyError:
            return None


@dataclass(frozen=True)
class SortSpec:
    """Sort state of a folder view."""

    column: SortColumn = SortColumn.NAME
    ascending: bool = True
    case_sensitive: bool = False
    group_mode: GroupMode = GroupMode.FOLDERS_FIRST


@dataclass(frozen=True)
class PathConfigResult:
    """Configuration resolved for one path."""

    sort: SortSpec
    view_mode: ViewMode
    show_hidden: bool
    columns: tuple[str, ...] | None = None


@dataclass
class DesktopConfig:
    """Settings of the desktop window.

    Colors are kept as the ``#rrggbb`` strings found in the profile.
    """

    configured: bool = False
    wallpaper_mode: int = 0
    wallpaper_common: bool = True
    wallpaper: str | None = None
    wallpapers: list[str | None] = field(default_factory=list)
    desktop_bg: str = "#000000"
    desktop_fg: str = "#ffffff"
    desktop_shadow: str = "#000000"
    desktop_font: str | None = None
    show_wm_menu: bool = False
    sort: SortSpec = field(default_factory=lambda: SortSpec(column=SortColumn.MTIME))


@dataclass
class AppConfig:
    """Process-wide default configuration.

    Created once by ConfigManager and handed to the resolver, which seeds
    every per-path result from it.
    """

    # [config]
    bm_open_method: int = 0
    # [volume]
    mount_on_startup: bool = True
    mount_removable: bool = True
    autorun: bool = True
    # [ui]
    always_show_tabs: int = 0
    hide_close_btn: int = 0
    max_tab_chars: int = 32
    win_width: int = 640
    win_height: int = 480
    splitter_pos: int = 150
    side_pane_mode: SidePaneMode = SidePaneMode.PLACES
    side_pane_hidden: bool = False
    view_mode: ViewMode = ViewMode.ICON
    show_hidden: bool = False
    sort: SortSpec = field(default_factory=SortSpec)
    columns: tuple[str, ...] | None = None
    # [desktop]
    desktop: DesktopConfig = field(default_factory=DesktopConfig)


@dataclass(frozen=True)
class ProfilePaths:
    """Locations of one profile's configuration files.

    Attributes:
        user_dir: Per-user profile directory holding pcmanfm.conf and the
            shared directory settings cache
        system_dirs: System-wide profile directories, loaded in order
        legacy_file: Pre-profile configuration file migrated on first load

    Applications inject these paths; for_profile() builds the XDG defaults.
    """

    user_dir: Path
    system_dirs: tuple[Path, ...] = ()
    legacy_file: Path | None = None

    @property
    def profile_file(self) -> Path:
        return self.user_dir / PROFILE_FILENAME

    @property
    def cache_file(self) -> Path:
        return self.user_dir / CACHE_FILENAME

    @classmethod
    def for_profile(cls, name: str | None = None) -> "ProfilePaths":
        """Build XDG locations for a named profile.

        Args:
            name: Profile name, empty or None for the default profile
        """
        legacy_name = name
        if not name:
            name = DEFAULT_PROFILE
            legacy_name = APP_DIRNAME

        user_base = Path(user_config_dir(APP_DIRNAME, appauthor=False))
        site_dirs = site_config_dir(APP_DIRNAME, appauthor=False, multipath=True)
        return cls(
            user_dir=user_base / name,
            system_dirs=tuple(Path(d) / name for d in site_dirs.split(os.pathsep) if d),
            legacy_file=user_base / f"{legacy_name}.conf",
        )
