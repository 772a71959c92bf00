"""Tests for PathConfigResolver."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from fm_config import AppConfig
from fm_config import GroupMode
from fm_config import PathConfigResolver
from fm_config import PathConfigResult
from fm_config import SortColumn
from fm_config import SortSpec
from fm_config import ViewMode
from fm_config.folder import FolderConfigCache

SORT = SortSpec(column=SortColumn.MTIME, ascending=False, case_sensitive=True)


class TestPathConfigResolver:
    """Test PathConfigResolver class."""

    @pytest.fixture
    def workdir(self):
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def defaults(self):
        return AppConfig(
            view_mode=ViewMode.COMPACT,
            sort=SortSpec(column=SortColumn.SIZE),
            columns=("name", "size"),
        )

    @pytest.fixture
    def cache(self, workdir):
        return FolderConfigCache(workdir / "dir-settings.conf")

    @pytest.fixture
    def save_requests(self):
        return []

    @pytest.fixture
    def resolver(self, defaults, cache, save_requests):
        return PathConfigResolver(defaults, cache, lambda: save_requests.append(True))

    @pytest.fixture
    def folder(self, workdir):
        folder = workdir / "Photos"
        folder.mkdir()
        return folder

    def _default_result(self, defaults):
        return PathConfigResult(
            sort=defaults.sort,
            view_mode=defaults.view_mode,
            show_hidden=defaults.show_hidden,
            columns=defaults.columns,
        )

    # ===== Resolve =====

    def test_resolve_without_override_returns_defaults(self, resolver, defaults, folder):
        found, result = resolver.resolve(folder)
        assert found is False
        assert result == self._default_result(defaults)

    def test_resolve_virtual_without_override_returns_defaults(self, resolver, defaults):
        found, result = resolver.resolve("sftp://host/srv")
        assert found is False
        assert result == self._default_result(defaults)

    def test_resolve_reads_cached_section(self, resolver, cache, folder):
        cache.store.loads(f"[{folder}]\nSort=name;descending;\nViewMode=list\nShowHidden=true\nColumns=name;mtime;\n")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result == PathConfigResult(
            sort=SortSpec(column=SortColumn.NAME, ascending=False),
            view_mode=ViewMode.LIST,
            show_hidden=True,
            columns=("name", "mtime"),
        )

    def test_resolve_partial_section_keeps_defaults(self, resolver, cache, defaults, folder):
        """Test fields missing from the section keep the default values."""
        cache.store.loads(f"[{folder}]\nShowHidden=true\n")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.show_hidden is True
        assert result.view_mode is defaults.view_mode
        assert result.columns == defaults.columns
        assert result.sort.column is SortColumn.SIZE

    def test_resolve_malformed_values_fall_back(self, resolver, cache, defaults, folder):
        cache.store.loads(f"[{folder}]\nViewMode=sideways\nShowHidden=perhaps\nsort_type=x\n")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.view_mode is defaults.view_mode
        assert result.show_hidden is defaults.show_hidden

    def test_resolve_non_ascii_digit_view_mode(self, resolver, cache, defaults, folder):
        cache.store.loads(f"[{folder}]\nViewMode=²\n")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.view_mode is defaults.view_mode

    def test_resolve_legacy_view_mode_integer(self, resolver, cache, folder):
        cache.store.loads(f"[{folder}]\nViewMode=2\n")
        assert resolver.resolve(folder)[1].view_mode is ViewMode.THUMBNAIL

    def test_resolve_legacy_sort_fields(self, resolver, cache, folder):
        cache.store.loads(f"[{folder}]\nsort_type=1\nsort_by=6\n")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.sort.ascending is False
        assert result.sort.column is SortColumn.MTIME

    def test_resolve_standalone_directory_file(self, resolver, folder):
        (folder / ".directory").write_text("[File Manager]\nViewMode=thumbnail\n", encoding="utf-8")

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.view_mode is ViewMode.THUMBNAIL

    def test_resolve_standalone_with_legacy_path_header(self, resolver, folder):
        (folder / ".directory").write_text(f"[{folder}]\nShowHidden=true\n", encoding="utf-8")
        found, result = resolver.resolve(folder)

        assert found is True
        assert result.show_hidden is True

    def test_standalone_without_our_section_uses_cache(self, resolver, cache, folder):
        """Test a .directory file written by another program does not hide the cache."""
        (folder / ".directory").write_text("[Desktop Entry]\nIcon=folder-pictures\n", encoding="utf-8")
        cache.store.loads(f"[{folder}]\nViewMode=list\n")

        assert resolver.resolve(folder)[1].view_mode is ViewMode.LIST

    def test_resolve_falls_back_to_scheme_root(self, resolver, cache):
        cache.store.loads("[sftp://host/]\nViewMode=list\n")

        found, result = resolver.resolve("sftp://host/srv/www")

        assert found is True
        assert result.view_mode is ViewMode.LIST

    def test_own_section_wins_over_scheme_root(self, resolver, cache):
        cache.store.loads("[sftp://host/]\nViewMode=list\n\n[sftp://host/srv]\nViewMode=icon\n")
        assert resolver.resolve("sftp://host/srv")[1].view_mode is ViewMode.ICON

    def test_search_builtin_settings(self, resolver, defaults):
        found, result = resolver.resolve("search:///home/user?name=*.txt")

        assert found is True
        assert result.view_mode is ViewMode.LIST
        assert result.show_hidden is True
        assert result.columns == ("name", "desc", "dirname", "size", "mtime")
        assert result.sort == defaults.sort

    def test_resolve_does_not_touch_cache(self, resolver, cache, folder, save_requests):
        resolver.resolve(folder)
        resolver.resolve("search:///?x")
        assert cache.changed is False
        assert cache.store.sections() == []
        assert save_requests == []

    # ===== Save =====

    def test_save_then_resolve(self, resolver, folder):
        assert resolver.save(folder, SORT, ViewMode.LIST, True, ["name", "size", "mtime"]) is True

        found, result = resolver.resolve(folder)

        assert found is True
        assert result == PathConfigResult(
            sort=SORT,
            view_mode=ViewMode.LIST,
            show_hidden=True,
            columns=("name", "size", "mtime"),
        )

    @pytest.mark.parametrize("view_mode", [ViewMode.THUMBNAIL, "thumbnail", 2])
    def test_save_valid_view_mode(self, resolver, folder, view_mode):
        resolver.save(folder, SORT, view_mode, False)
        assert resolver.resolve(folder)[1].view_mode is ViewMode.THUMBNAIL

    @pytest.mark.parametrize("view_mode", [None, "sideways", 42, -1])
    def test_save_invalid_view_mode_ignored(self, resolver, defaults, folder, view_mode):
        resolver.save(folder, SORT, view_mode, False)

        found, result = resolver.resolve(folder)

        assert found is True
        assert result.view_mode is defaults.view_mode
        assert result.sort == SORT

    def test_save_invalid_view_mode_keeps_stored_one(self, resolver, folder):
        resolver.save(folder, SORT, ViewMode.LIST, False)
        resolver.save(folder, SORT, "bogus", False)
        assert resolver.resolve(folder)[1].view_mode is ViewMode.LIST

    def test_save_without_columns_keeps_stored_columns(self, resolver, folder):
        resolver.save(folder, SORT, ViewMode.LIST, False, ["name", "owner"])
        resolver.save(folder, SORT, ViewMode.LIST, True, None)
        assert resolver.resolve(folder)[1].columns == ("name", "owner")

    def test_save_empty_columns_resets_to_default(self, resolver, defaults, folder):
        resolver.save(folder, SORT, ViewMode.LIST, False, ["name", "owner"])
        resolver.save(folder, SORT, ViewMode.LIST, False, [])
        assert resolver.resolve(folder)[1].columns == defaults.columns

    def test_save_writes_token_list(self, resolver, cache, folder):
        resolver.save(folder, SortSpec(group_mode=GroupMode.MINGLED), ViewMode.ICON, False)
        text = cache.store.dumps()
        assert "Sort=name;ascending;mingle;" in text
        assert "ShowHidden=false" in text

    def test_save_replaces_legacy_fields(self, resolver, cache, folder):
        """Test a saved section is read back from the token list."""
        cache.store.loads(f"[{folder}]\nsort_type=1\nsort_by=6\n")
        resolver.save(folder, SortSpec(column=SortColumn.NAME), ViewMode.ICON, False)
        assert resolver.resolve(folder)[1].sort == SortSpec(column=SortColumn.NAME)

    def test_save_marks_cache_changed_and_requests_save(self, resolver, cache, folder, save_requests):
        resolver.save(folder, SORT, ViewMode.LIST, False)
        assert cache.changed is True
        assert save_requests == [True]
        # nothing is written before an explicit save
        assert not cache.path.exists()

    def test_save_to_standalone_file(self, resolver, cache, folder):
        directory_file = folder / ".directory"
        directory_file.write_text("[File Manager]\nViewMode=icon\n", encoding="utf-8")

        resolver.save(folder, SORT, ViewMode.LIST, True)

        assert "ViewMode=list" in directory_file.read_text(encoding="utf-8")
        assert cache.changed is False
        assert cache.store.sections() == []

    # ===== Search View =====

    def test_search_save_without_columns_refused(self, resolver, cache, save_requests):
        assert resolver.save("search:///home?name=x", SORT, ViewMode.ICON, True, []) is False
        assert resolver.save("search:///home?name=x", SORT, ViewMode.ICON, True, None) is False
        assert cache.store.sections() == []
        assert cache.changed is False
        assert save_requests == []

    def test_search_save_refusal_leaves_other_paths(self, resolver, folder):
        resolver.save(folder, SORT, ViewMode.THUMBNAIL, True, ["name"])
        before = resolver.resolve(folder)

        resolver.save("search:///", SORT, ViewMode.ICON, False, [])

        assert resolver.resolve(folder) == before

    def test_search_save_goes_to_scheme_root(self, resolver, cache):
        assert resolver.save("search:///home?name=x", SORT, ViewMode.ICON, False, ["name", "size"]) is True
        assert cache.store.sections() == ["search:///"]

        found, result = resolver.resolve("search:///srv?name=y")

        assert found is True
        assert result.view_mode is ViewMode.LIST
        assert result.columns == ("name", "size")
        assert result.sort == SORT

    def test_search_save_existing_entry_without_columns(self, resolver):
        """Test an existing search entry can be updated without new columns."""
        resolver.save("search:///", SORT, ViewMode.LIST, False, ["name", "size"])
        assert resolver.save("search:///?q", SortSpec(), None, True) is True

        result = resolver.resolve("search:///?q")[1]
        assert result.sort == SortSpec()
        assert result.columns == ("name", "size")

    # ===== Clear =====

    def test_clear_then_resolve(self, resolver, folder, save_requests):
        resolver.save(folder, SORT, ViewMode.LIST, True, ["name"])
        resolver.clear(folder)

        assert resolver.resolve(folder)[0] is False
        assert save_requests == [True, True]

    def test_clear_missing_section(self, resolver, cache, folder):
        resolver.clear(folder)
        assert resolver.resolve(folder)[0] is False
        assert cache.changed is True

    def test_clear_standalone_file(self, resolver, folder):
        directory_file = folder / ".directory"
        directory_file.write_text("[File Manager]\nViewMode=list\n\n[Desktop Entry]\nIcon=x\n", encoding="utf-8")

        resolver.clear(folder)

        text = directory_file.read_text(encoding="utf-8")
        assert "File Manager" not in text
        assert "Icon=x" in text
