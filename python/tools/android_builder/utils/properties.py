#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Reading and editing of Java-style ``.properties`` files.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Union

from loguru import logger

from ..core.models import ProjectProperties

_LIBRARY_REFERENCE = re.compile(r"^\s*android\.library\.reference\.\d+=(.*)(?:\s|$)", re.M)
_GRADLE_INCLUDE = re.compile(r"^\s*cordova\.gradle\.include\.\d+=(.*)(?:\s|$)", re.M)
_SYSTEM_LIBRARY = re.compile(r"^\s*cordova\.system\.library\.\d+=(.*)(?:\s|$)", re.M)

_ENTRY = re.compile(r"^\s*((?:[^\\:=\s]|\\.)+)\s*[:=]?\s*(.*)$")


def find_all_unique(data: str, pattern: Pattern[str]) -> List[str]:
    """Return the first group of every match, de-duplicated in first-seen order."""
    return list(dict.fromkeys(m.group(1).rstrip("\r") for m in pattern.finditer(data)))


def parse_project_properties(data: str) -> ProjectProperties:
    return ProjectProperties(
        libs=find_all_unique(data, _LIBRARY_REFERENCE),
        gradle_includes=find_all_unique(data, _GRADLE_INCLUDE),
        system_libs=find_all_unique(data, _SYSTEM_LIBRARY),
    )


def read_project_properties(path: Union[Path, str]) -> ProjectProperties:
    """Parse library, gradle include and system library references."""
    path = Path(path)
    properties = parse_project_properties(path.read_text(encoding="utf-8"))
    logger.debug(
        f"Read {path}",
        extra={
            "libs": properties.libs,
            "gradle_includes": properties.gradle_includes,
            "system_libs": properties.system_libs,
        },
    )
    return properties


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_WRITE_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def _escape(value: str, is_key: bool = False) -> str:
    """Escape for writing; non-ASCII characters become ``\\uXXXX``."""
    chars: List[str] = []
    for char in value:
        if char in "\\:=":
            chars.append("\\" + char)
        elif char in _WRITE_ESCAPES:
            chars.append(_WRITE_ESCAPES[char])
        elif char == " " and is_key:
            chars.append("\\ ")
        elif ord(char) > 0x7E:
            encoded = char.encode("utf-16-be")
            chars.extend(
                f"\\u{int.from_bytes(encoded[i:i + 2], 'big'):04x}"
                for i in range(0, len(encoded), 2)
            )
        else:
            chars.append(char)
    return "".join(chars)


def _unescape(value: str) -> str:
    def replace(match: re.Match) -> str:
        escaped = match.group(1)
        if len(escaped) == 5:
            return chr(int(escaped[1:], 16))
        return _ESCAPES.get(escaped, escaped)

    text = re.sub(r"\\(u[0-9a-fA-F]{4}|.)", replace, value)
    # Re-join surrogate pairs produced by \uXXXX\uXXXX sequences.
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _is_comment(line: str) -> bool:
    stripped = line.lstrip()
    return not stripped or stripped[0] in "#!"


def _continues(line: str) -> bool:
    """A line ending in an odd number of backslashes runs on to the next."""
    return (len(line) - len(line.rstrip("\\"))) % 2 == 1


def _logical_line(record: str) -> str:
    parts = record.split("\n")
    logical = parts[0]
    for part in parts[1:]:
        logical = logical[:-1] + part.lstrip()
    return logical


class PropertiesEditor:
    """
    Line-preserving editor for a ``.properties`` file.

    Existing comments, ordering and continuation lines survive a round trip;
    ``set`` replaces a key in place or appends it at the end. Files are read
    and written as ISO-8859-1 like ``java.util.Properties``.
    """

    def __init__(self, path: Union[Path, str]) -> None:
        self.path = Path(path)
        # One record per logical entry; continued entries keep their
        # physical lines joined by "\n".
        self._records: List[str] = []
        self._index: Dict[str, int] = {}

        physical: List[str] = []
        if self.path.exists():
            text = self.path.read_text(encoding="latin-1")
            physical = re.split(r"\r\n|\r|\n", text)
            if physical[-1] == "":
                physical.pop()

        i = 0
        while i < len(physical):
            raw = [physical[i]]
            if not _is_comment(physical[i]):
                while _continues(raw[-1]) and i + 1 < len(physical):
                    i += 1
                    raw.append(physical[i])
            self._records.append("\n".join(raw))
            i += 1

        for number, record in enumerate(self._records):
            if _is_comment(record):
                continue
            match = _ENTRY.match(_logical_line(record))
            if match:
                self._index[_unescape(match.group(1))] = number

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        number = self._index.get(key)
        if number is None:
            return default
        match = _ENTRY.match(_logical_line(self._records[number]))
        return _unescape(match.group(2)) if match else default

    def set(self, key: str, value: str) -> None:
        line = f"{_escape(key, is_key=True)}={_escape(value)}"
        if key in self._index:
            self._records[self._index[key]] = line
        else:
            self._index[key] = len(self._records)
            self._records.append(line)

    def add_head_comment(self, comment: str) -> None:
        """Prepend comment lines, adding ``#`` where a line lacks one."""
        head = [
            text if text.lstrip().startswith(("#", "!")) else f"# {text}"
            for text in comment.splitlines()
        ]
        self._records = head + self._records
        self._index = {key: number + len(head) for key, number in self._index.items()}

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.to_string(), encoding="latin-1")
        logger.debug(f"Saved properties file {self.path}")

    def to_string(self) -> str:
        return "\n".join(self._records) + "\n"


def create_editor(path: Union[Path, str]) -> PropertiesEditor:
    return PropertiesEditor(path)
