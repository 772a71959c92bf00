"""Reading and writing the profile file (pcmanfm.conf)."""

import logging

from .models import AppConfig
from .models import DesktopConfig
from .models import SidePaneMode
from .models import ViewMode
from .sorting import decode_sort
from .sorting import encode_sort
from .store import KeyedSectionStore

logger = logging.getLogger(__name__)

CONFIG_SECTION = "config"
VOLUME_SECTION = "volume"
UI_SECTION = "ui"
DESKTOP_SECTION = "desktop"

SORT_KEY = "sort"
SIDE_PANE_HIDDEN = "hidden"

# one wallpaper per workspace
MAX_WALLPAPERS = 64


def load_desktop_config(store: KeyedSectionStore, group: str, cfg: DesktopConfig) -> None:
    """Apply the desktop settings in ``group`` to ``cfg``.

    Nothing changes if the group is missing.
    """
    if not store.has_section(group):
        return

    cfg.configured = True
    wallpaper_mode = store.get_int(group, "wallpaper_mode")
    if wallpaper_mode is not None:
        cfg.wallpaper_mode = wallpaper_mode

    cfg.wallpaper = None
    count = min(max(store.get_int(group, "wallpapers_configured") or 0, 0), MAX_WALLPAPERS)
    cfg.wallpapers = [store.get_string(group, f"wallpaper{i}") for i in range(count)]

    wallpaper_common = store.get_bool(group, "wallpaper_common")
    if wallpaper_common is not None:
        cfg.wallpaper_common = wallpaper_common
    if cfg.wallpaper_common:
        cfg.wallpaper = store.get_string(group, "wallpaper")

    for key in ("desktop_bg", "desktop_fg", "desktop_shadow"):
        color = store.get_string(group, key)
        if color:
            setattr(cfg, key, color)

    cfg.desktop_font = store.get_string(group, "desktop_font")

    show_wm_menu = store.get_bool(group, "show_wm_menu")
    if show_wm_menu is not None:
        cfg.show_wm_menu = show_wm_menu
    cfg.sort = decode_sort(store, group, SORT_KEY, cfg.sort)


def _load_side_pane(store: KeyedSectionStore, cfg: AppConfig) -> None:
    tokens = store.get_string_list(UI_SECTION, "side_pane_mode")
    if tokens is None:
        return

    mode = None
    hidden = False
    for token in tokens:
        if token == SIDE_PANE_HIDDEN:
            hidden = True
        elif token[:1].isdigit():
            # legacy integer
            try:
                mode = SidePaneMode(int(token))
            except ValueError:
                mode = None
        else:
            mode = SidePaneMode.from_name(token)

    if mode is not None:
        cfg.side_pane_mode = mode
        cfg.side_pane_hidden = hidden


def load_from_store(cfg: AppConfig, store: KeyedSectionStore) -> None:
    """Apply every setting present in ``store`` to ``cfg``.

    Settings missing from ``store`` or unparsable keep their current value,
    so calling this for several files in turn merges them field by field.
    """

    def apply(section: str, key: str, getter, attr: str | None = None) -> None:
        value = getter(section, key)
        if value is not None:
            setattr(cfg, attr or key, value)

    # behavior
    apply(CONFIG_SECTION, "bm_open_method", store.get_int)

    # volume management
    for key in ("mount_on_startup", "mount_removable", "autorun"):
        apply(VOLUME_SECTION, key, store.get_bool)

    load_desktop_config(store, DESKTOP_SECTION, cfg.desktop)

    # ui
    for key in ("always_show_tabs", "hide_close_btn", "max_tab_chars", "win_width", "win_height", "splitter_pos"):
        apply(UI_SECTION, key, store.get_int)

    _load_side_pane(store, cfg)

    view_mode = ViewMode.parse(store.get_string(UI_SECTION, "view_mode"))
    if view_mode is not None:
        cfg.view_mode = view_mode
    apply(UI_SECTION, "show_hidden", store.get_bool)
    cfg.sort = decode_sort(store, UI_SECTION, SORT_KEY, cfg.sort)

    columns = store.get_string_list(UI_SECTION, "columns")
    if columns is not None:
        cfg.columns = tuple(columns)


def save_desktop_config(store: KeyedSectionStore, group: str, cfg: DesktopConfig) -> None:
    """Write ``cfg`` as section ``group`` of ``store``."""
    store.set_int(group, "wallpaper_mode", cfg.wallpaper_mode)
    store.set_int(group, "wallpaper_common", cfg.wallpaper_common)
    if cfg.wallpapers:
        store.set_int(group, "wallpapers_configured", len(cfg.wallpapers))
        for i, wallpaper in enumerate(cfg.wallpapers):
            if wallpaper:
                store.set_string(group, f"wallpaper{i}", wallpaper)
    if cfg.wallpaper_common and cfg.wallpaper:
        store.set_string(group, "wallpaper", cfg.wallpaper)
    store.set_string(group, "desktop_bg", cfg.desktop_bg)
    store.set_string(group, "desktop_fg", cfg.desktop_fg)
    store.set_string(group, "desktop_shadow", cfg.desktop_shadow)
    if cfg.desktop_font:
        store.set_string(group, "desktop_font", cfg.desktop_font)
    store.set_int(group, "show_wm_menu", cfg.show_wm_menu)
    store.set_string_list(group, SORT_KEY, encode_sort(cfg.sort))


def dump_profile(cfg: AppConfig) -> str:
    """Render ``cfg`` as a complete profile file.

    Sections are written as [config], [volume], [ui] and, once configured,
    [desktop]. Keys not modelled by AppConfig are not carried over.
    """
    store = KeyedSectionStore()

    store.set_int(CONFIG_SECTION, "bm_open_method", cfg.bm_open_method)

    store.set_int(VOLUME_SECTION, "mount_on_startup", cfg.mount_on_startup)
    store.set_int(VOLUME_SECTION, "mount_removable", cfg.mount_removable)
    store.set_int(VOLUME_SECTION, "autorun", cfg.autorun)

    store.set_int(UI_SECTION, "always_show_tabs", cfg.always_show_tabs)
    store.set_int(UI_SECTION, "max_tab_chars", cfg.max_tab_chars)
    store.set_int(UI_SECTION, "win_width", cfg.win_width)
    store.set_int(UI_SECTION, "win_height", cfg.win_height)
    store.set_int(UI_SECTION, "splitter_pos", cfg.splitter_pos)
    side_pane = [cfg.side_pane_mode.mode_name]
    if cfg.side_pane_hidden:
        side_pane.insert(0, SIDE_PANE_HIDDEN)
    store.set_string_list(UI_SECTION, "side_pane_mode", side_pane)
    store.set_string(UI_SECTION, "view_mode", cfg.view_mode.value)
    store.set_int(UI_SECTION, "show_hidden", cfg.show_hidden)
    store.set_string_list(UI_SECTION, SORT_KEY, encode_sort(cfg.sort))
    if cfg.columns:
        store.set_string_list(UI_SECTION, "columns", cfg.columns)

    if cfg.desktop.configured:
        save_desktop_config(store, DESKTOP_SECTION, cfg.desktop)

    return store.dumps()
