"""Crash-safe file replacement."""

import logging
import os
from pathlib import Path

from .exceptions import ConfigFileError

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"
BACKUP_SUFFIX = ".backup"


def _sibling(target: Path, suffix: str) -> Path:
    return target.with_name(target.name + suffix)


def atomic_replace(target: Path, data: bytes) -> None:
    """Replace ``target`` with ``data`` without ever exposing a partial file.

    Steps: write ``target.tmp``, move the current ``target`` to
    ``target.backup``, move ``target.tmp`` to ``target``, remove the backup.
    If the process dies between the two moves, ``target.backup`` holds the
    last good content.

    Args:
        target: File to replace
        data: New file content

    Raises:
        ConfigFileError: If any step fails; ``target`` keeps its old content
    """
    target = Path(target)
    tmp = _sibling(target, TMP_SUFFIX)
    backup = _sibling(target, BACKUP_SUFFIX)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise ConfigFileError(f"Cannot save {tmp}: {e}") from e

    backed_up = False
    if target.exists():
        try:
            os.replace(target, backup)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise ConfigFileError(f"Cannot rename {target} to {backup}: {e}") from e
        backed_up = True

    try:
        os.replace(tmp, target)
    except OSError as e:
        if backed_up:
            try:
                os.replace(backup, target)
            except OSError as restore_error:
                logger.warning(f"Cannot restore {target} from {backup}: {restore_error}")
        raise ConfigFileError(f"Cannot rename {tmp} to {target}: {e}") from e

    try:
        backup.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Cannot remove {backup}: {e}")
