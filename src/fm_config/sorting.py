"""Sort specification codec.

Sort state is stored as a token list, column first, then flags::

    Sort=mtime;descending;case;mingle;

Older files carry two integers instead, ``sort_type`` (0 ascending,
1 descending) and ``sort_by`` (a column index). Those are only read; saving
always writes the token list.
"""

from collections.abc import Sequence

from .models import GroupMode
from .models import SortColumn
from .models import SortSpec
from .store import KeyedSectionStore

ASCENDING = "ascending"
DESCENDING = "descending"
CASE_SENSITIVE = "case"
MINGLE = "mingle"

LEGACY_SORT_TYPE = "sort_type"
LEGACY_SORT_BY = "sort_by"
LEGACY_DESCENDING = 1


def sort_from_tokens(tokens: Sequence[str], default: SortSpec) -> SortSpec:
    """Decode a token list.

    Flags are reset before the tokens are applied; only the column falls
    back to ``default`` when the first token does not name a known column.
    """
    column = None
    ascending = True
    case_sensitive = False
    group_mode = GroupMode.FOLDERS_FIRST

    for i, token in enumerate(tokens):
        if i == 0:
            # column should be first
            column = SortColumn.from_name(token)
        elif token == ASCENDING:
            ascending = True
        elif token == DESCENDING:
            ascending = False
        elif token == CASE_SENSITIVE:
            case_sensitive = True
        elif token == MINGLE:
            group_mode = GroupMode.MINGLED

    return SortSpec(
        column=column if column is not None else default.column,
        ascending=ascending,
        case_sensitive=case_sensitive,
        group_mode=group_mode,
    )


def sort_from_legacy(sort_type: int | None, sort_by: int | None, default: SortSpec) -> SortSpec:
    """Decode the legacy two-integer form.

    Out-of-range column indexes are ignored. The legacy form has no case or
    grouping flags, so those are reset.
    """
    column = default.column
    if sort_by is not None and SortColumn.is_valid_index(sort_by):
        column = SortColumn(sort_by)
    return SortSpec(column=column, ascending=sort_type != LEGACY_DESCENDING)


def decode_sort(store: KeyedSectionStore, section: str, key: str, default: SortSpec) -> SortSpec:
    """Read sort state from ``section``, preferring the token list under ``key``."""
    tokens = store.get_string_list(section, key)
    if tokens is not None:
        return sort_from_tokens(tokens, default)
    return sort_from_legacy(
        store.get_int(section, LEGACY_SORT_TYPE),
        store.get_int(section, LEGACY_SORT_BY),
        default,
    )


def encode_sort(spec: SortSpec) -> list[str]:
    """Encode sort state as a token list."""
    name = spec.column.column_name
    if name is None:
        # the name column always has a name
        name = SortColumn.NAME.column_name
    tokens = [name, ASCENDING if spec.ascending else DESCENDING]
    if spec.case_sensitive:
        tokens.append(CASE_SENSITIVE)
    if spec.group_mode is GroupMode.MINGLED:
        tokens.append(MINGLE)
    return tokens
