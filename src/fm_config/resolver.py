"""Per-path configuration resolution."""

import logging
from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import replace

from .folder import FolderConfig
from .folder import FolderConfigCache
from .models import AppConfig
from .models import PathConfigResult
from .models import SortSpec
from .models import ViewMode
from .sorting import decode_sort
from .sorting import encode_sort
from .utils import SEARCH_ROOT
from .utils import PathLike
from .utils import is_native
from .utils import is_search_root
from .utils import scheme_root

logger = logging.getLogger(__name__)

# Capitalized keys, as used in .directory files
SORT_KEY = "Sort"
VIEW_MODE_KEY = "ViewMode"
SHOW_HIDDEN_KEY = "ShowHidden"
COLUMNS_KEY = "Columns"

SEARCH_COLUMNS = ("name", "desc", "dirname", "size", "mtime")


def _parse_section(fc: FolderConfig, result: PathConfigResult) -> PathConfigResult:
    """Overlay the fields present in ``fc`` onto ``result``."""
    changes: dict = {"sort": decode_sort(fc.store, fc.group, SORT_KEY, result.sort)}

    raw_view_mode = fc.get_string(VIEW_MODE_KEY)
    if raw_view_mode is not None:
        view_mode = ViewMode.parse(raw_view_mode)
        if view_mode is not None:
            changes["view_mode"] = view_mode
        else:
            logger.debug(f"Ignoring unknown view mode {raw_view_mode!r} in [{fc.group}]")

    show_hidden = fc.get_bool(SHOW_HIDDEN_KEY)
    if show_hidden is not None:
        changes["show_hidden"] = show_hidden

    columns = fc.get_string_list(COLUMNS_KEY)
    if columns:
        changes["columns"] = tuple(columns)

    return replace(result, **changes)


class PathConfigResolver:
    """Finds and stores the configuration of individual folders.

    Lookup order for a path:
    1. Its own section (``.directory`` file or shared cache entry)
    2. For virtual paths, the section of the scheme root
    3. For search paths, built-in search view settings
    4. Global defaults

    Args:
        defaults: Global configuration used to seed every result
        cache: Shared directory settings cache
        request_save: Called after every change so the owner can schedule a flush
    """

    def __init__(
        self,
        defaults: AppConfig,
        cache: FolderConfigCache,
        request_save: Callable[[], None] | None = None,
    ):
        self.defaults = defaults
        self.cache = cache
        self._request_save = request_save

    def _defaults_result(self) -> PathConfigResult:
        return PathConfigResult(
            sort=self.defaults.sort,
            view_mode=self.defaults.view_mode,
            show_hidden=self.defaults.show_hidden,
            columns=self.defaults.columns,
        )

    def _changed(self) -> None:
        if self._request_save is not None:
            self._request_save()

    def resolve(self, path: PathLike) -> tuple[bool, PathConfigResult]:
        """Get configuration for ``path``.

        Returns:
            Tuple of (found, result). found is False when no individual
            configuration applies, in which case result holds the defaults.
        """
        result = self._defaults_result()

        with self.cache.open(path) as fc:
            if not fc.is_empty():
                return True, _parse_section(fc, result)

        if is_native(path):
            return False, result

        root = scheme_root(path)
        with self.cache.open(root) as fc:
            if not fc.is_empty():
                return True, _parse_section(fc, result)

        if is_search_root(root):
            return True, replace(
                result,
                view_mode=ViewMode.LIST,
                show_hidden=True,
                columns=SEARCH_COLUMNS,
            )

        return False, result

    def save(
        self,
        path: PathLike,
        sort: SortSpec,
        view_mode: ViewMode | str | int | None,
        show_hidden: bool,
        columns: Sequence[str] | None = None,
    ) -> bool:
        """Save configuration for ``path``.

        Args:
            path: Folder path or URI
            sort: Sort state to store
            view_mode: View mode; unrecognized values leave the stored one unchanged
            show_hidden: Whether hidden files are shown
            columns: Visible columns; None leaves them unchanged, an empty
                sequence resets them to the default

        Returns:
            False if the save was refused (search view without columns)
        """
        target: PathLike = path
        if not is_native(path) and is_search_root(scheme_root(path)):
            target = SEARCH_ROOT
            # search view mode is immutable
            view_mode = ViewMode.LIST

        with self.cache.open(target) as fc:
            if target == SEARCH_ROOT and fc.is_empty() and not columns:
                # columns are mandatory for the search view
                logger.info("Not saving search view settings without columns")
                return False

            fc.set_string_list(SORT_KEY, encode_sort(sort))
            mode = ViewMode.parse(view_mode)
            if mode is not None:
                fc.set_string(VIEW_MODE_KEY, mode.value)
            fc.set_bool(SHOW_HIDDEN_KEY, show_hidden)
            if columns:
                fc.set_string_list(COLUMNS_KEY, columns)
            elif columns is not None:
                fc.remove_key(COLUMNS_KEY)

        logger.info(f"Saved folder settings for {target}")
        self._changed()
        return True

    def clear(self, path: PathLike) -> None:
        """Forget individual configuration of ``path``."""
        with self.cache.open(path) as fc:
            fc.purge()
        logger.info(f"Cleared folder settings for {path}")
        self._changed()
