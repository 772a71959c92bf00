"""Path helpers for fm-config.

Paths are either native filesystem paths or virtual URIs such as
``search:///?show_hidden=0`` or ``sftp://host/dir``. Virtual paths are
configured by their full URI string and fall back to their scheme root.
"""

import os
import re
from pathlib import Path
from urllib.parse import unquote
from urllib.parse import urlsplit

SEARCH_PREFIX = "search:"
SEARCH_ROOT = "search:///"

# two or more characters, so "C:\..." stays native
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")

PathLike = str | os.PathLike[str]


def _uri_scheme(path: PathLike) -> str | None:
    if not isinstance(path, str):
        return None
    match = _SCHEME_RE.match(path)
    if not match:
        return None
    return match.group(0)[:-1].lower()


def is_native(path: PathLike) -> bool:
    """Check whether ``path`` lives on the local filesystem.

    Examples:
        >>> is_native("/home/user")
        True
        >>> is_native("file:///home/user")
        True
        >>> is_native("search:///?recursive=1")
        False
    """
    scheme = _uri_scheme(path)
    return scheme is None or scheme == "file"


def native_path(path: PathLike) -> Path | None:
    """Filesystem path for a native ``path``, None for virtual ones."""
    scheme = _uri_scheme(path)
    if scheme is None:
        return Path(path)
    if scheme == "file":
        return Path(unquote(urlsplit(str(path)).path))
    return None


def path_key(path: PathLike) -> str:
    """String identifying ``path`` in the shared cache.

    Examples:
        >>> path_key("file:///home/user/")
        '/home/user'
        >>> path_key("sftp://host/srv")
        'sftp://host/srv'
    """
    local = native_path(path)
    if local is None:
        return str(path)
    return str(local)


def scheme_root(path: PathLike) -> str:
    """Topmost ancestor of a virtual ``path``.

    Examples:
        >>> scheme_root("search:///home/user?name=*.txt")
        'search:///'
        >>> scheme_root("sftp://user@host/srv/www")
        'sftp://user@host/'
    """
    parts = urlsplit(str(path))
    return f"{parts.scheme}://{parts.netloc}/"


def is_search_root(root: str) -> bool:
    return root.startswith(SEARCH_PREFIX)
