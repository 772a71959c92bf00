"""Ordered section store with key-file text format."""

import configparser
import io
import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ";"

_BOOLEAN_STATES = configparser.ConfigParser.BOOLEAN_STATES

# [DEFAULT] is an ordinary section in key files
_NO_DEFAULT_SECTION = "\x00"

_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}


def _unescape(raw: str, separator: str | None = None) -> list[str]:
    """Split ``raw`` on unescaped ``separator`` and resolve escapes."""
    items: list[str] = []
    current: list[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            if separator is not None and nxt == separator:
                current.append(nxt)
            else:
                current.append(_ESCAPES.get(nxt, "\\" + nxt))
        elif separator is not None and ch == separator:
            items.append("".join(current))
            current = []
        else:
            current.append(ch)
    if current or separator is None:
        items.append("".join(current))
    return items


def _escape(value: str, separator: str | None = None) -> str:
    out = value.replace("\\", "\\\\").replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
    if separator is not None:
        out = out.replace(separator, "\\" + separator)
    if out.startswith(" "):
        out = "\\s" + out[1:]
    return out


class KeyedSectionStore:
    """Ordered map of section name -> key/value records.

    Values are kept as raw text and converted by the typed getters, which
    return None when a key is missing or its value cannot be parsed, so
    callers can tell "not present" apart from their own defaults.
    """

    def __init__(self) -> None:
        self._parser = self._new_parser()

    @staticmethod
    def _new_parser() -> configparser.RawConfigParser:
        parser = configparser.RawConfigParser(
            delimiters=("=",),
            comment_prefixes=("#",),
            strict=False,
            empty_lines_in_values=False,
            default_section=_NO_DEFAULT_SECTION,
        )
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        return parser

    # ===== Load / Save =====

    def load(self, path: Path) -> bool:
        """Replace contents with the file at ``path``.

        Returns:
            True if the file was read and parsed, False otherwise (store is left empty)
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            self.clear()
            return False
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read configuration from {path}: {e}")
            self.clear()
            return False
        return self.loads(text, source=str(path))

    def loads(self, text: str, source: str = "<string>") -> bool:
        """Replace contents with parsed ``text``."""
        parser = self._new_parser()
        try:
            parser.read_string(text, source=source)
        except configparser.Error as e:
            logger.warning(f"Malformed configuration in {source}: {e}")
            self.clear()
            return False
        self._parser = parser
        return True

    def dumps(self) -> str:
        buf = io.StringIO()
        self._parser.write(buf, space_around_delimiters=False)
        return buf.getvalue()

    def clear(self) -> None:
        self._parser = self._new_parser()

    # ===== Sections =====

    def sections(self) -> list[str]:
        return self._parser.sections()

    def has_section(self, section: str) -> bool:
        return self._parser.has_section(section)

    def remove_section(self, section: str) -> bool:
        return self._parser.remove_section(section)

    def keys(self, section: str) -> list[str]:
        if not self._parser.has_section(section):
            return []
        return self._parser.options(section)

    # ===== Typed getters =====

    def get_raw(self, section: str, key: str) -> str | None:
        if not self._parser.has_option(section, key):
            return None
        return self._parser.get(section, key)

    def get_string(self, section: str, key: str) -> str | None:
        raw = self.get_raw(section, key)
        if raw is None:
            return None
        return _unescape(raw)[0]

    def get_int(self, section: str, key: str) -> int | None:
        raw = self.get_raw(section, key)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.debug(f"Ignoring non-integer value {raw!r} for [{section}] {key}")
            return None

    def get_bool(self, section: str, key: str) -> bool | None:
        raw = self.get_raw(section, key)
        if raw is None:
            return None
        value = _BOOLEAN_STATES.get(raw.strip().lower())
        if value is None:
            logger.debug(f"Ignoring non-boolean value {raw!r} for [{section}] {key}")
        return value

    def get_string_list(self, section: str, key: str) -> list[str] | None:
        raw = self.get_raw(section, key)
        if raw is None:
            return None
        return _unescape(raw, LIST_SEPARATOR)

    # ===== Setters =====

    def _set(self, section: str, key: str, raw: str) -> None:
        if not self._parser.has_section(section):
            self._parser.add_section(section)
        self._parser.set(section, key, raw)

    def set_string(self, section: str, key: str, value: str) -> None:
        self._set(section, key, _escape(value))

    def set_int(self, section: str, key: str, value: int) -> None:
        self._set(section, key, str(int(value)))

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self._set(section, key, "true" if value else "false")

    def set_string_list(self, section: str, key: str, values: Iterable[str]) -> None:
        self._set(section, key, "".join(_escape(v, LIST_SEPARATOR) + LIST_SEPARATOR for v in values))

    def remove_key(self, section: str, key: str) -> bool:
        if not self._parser.has_section(section):
            return False
        return self._parser.remove_option(section, key)
