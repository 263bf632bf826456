#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Discovery and ranking of Gradle output artifacts.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from loguru import logger

ARCH_SPECIFIC = re.compile(r"-x86|-arm")
UNSIGNED_BUILD = re.compile(r"-unsigned")


def is_arch_specific(path: Union[Path, str]) -> bool:
    return bool(ARCH_SPECIFIC.search(Path(path).name))


def output_sort_key(path: Path) -> Tuple[bool, bool, int, int, str]:
    """
    Ranking key for artifacts.

    Generic builds sort before arch-specific ones, signed before unsigned,
    newest first, then longer paths first; the path text breaks any
    remaining tie.
    """
    # Only the file name counts; a directory such as "build-arm" does not
    # make the artifacts below it arch-specific.
    name = path.name
    return (
        bool(ARCH_SPECIFIC.search(name)),
        bool(UNSIGNED_BUILD.search(name)),
        -path.stat().st_mtime_ns,
        -len(str(path)),
        str(path),
    )


def sort_output_files(files: List[Path]) -> List[Path]:
    return sorted(files, key=output_sort_key)


def recursively_find_files(directory: Union[Path, str], extension: str) -> List[Path]:
    """
    Collect files ending in ``.<extension>`` below directory.

    A missing directory or empty extension yields an empty list.
    """
    directory = Path(directory)
    if not extension or not directory.exists():
        return []

    files: List[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            files.extend(recursively_find_files(entry, extension))
        elif entry.suffix == f".{extension}":
            files.append(entry.resolve())
    return files


def find_output_files(
    directory: Union[Path, str],
    build_type: str,
    arch: Optional[str],
    extension: str,
) -> List[Path]:
    """
    Find artifacts of one build type, keeping a single arch flavour.

    The newest file decides whether arch-specific or generic artifacts
    are reported, the walk order breaking mtime ties. When several
    arch-specific files remain and ``arch`` is given, only files named for
    that arch are kept.
    """
    files = recursively_find_files(Path(directory) / build_type, extension)
    if not files:
        return files

    newest = max(files, key=lambda p: p.stat().st_mtime_ns)
    arch_specific = is_arch_specific(newest)
    files = [f for f in files if is_arch_specific(f) == arch_specific]

    if arch_specific and len(files) > 1 and arch:
        files = [f for f in files if f"-{arch}" in f.name]

    logger.debug(
        f"Found {len(files)} .{extension} file(s) in {directory}",
        extra={"build_type": build_type, "arch": arch},
    )
    return files
