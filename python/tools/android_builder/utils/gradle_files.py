#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Text generation and patching for settings.gradle and app/build.gradle.

Everything here is pure string work; callers decide when files are read
and written.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from ..core.errors import ManifestError, UnsupportedLibraryError

CORDOVA_LIB = "CordovaLib"

SETTINGS_HEADER = '// GENERATED FILE - DO NOT EDIT\ninclude ":"\n'

# Legacy SDK-relative library paths and the Maven coordinates replacing them.
SYSTEM_LIBRARY_MAPPINGS: Sequence[Tuple[Pattern[str], str]] = (
    (
        re.compile(r"^/?extras/android/support/(.*)$"),
        r"com.android.support:support-\1:+",
    ),
    (
        re.compile(
            r"^/?google/google_play_services/libproject/google-play-services_lib/?$"
        ),
        "com.google.android.gms:play-services:+",
    ),
)

_MAVEN_COORDINATE = re.compile(r":.*:")
_MANIFEST_PACKAGE = re.compile(r'<manifest[\s\S]*?package\s*=\s*"(.*?)"', re.I)
_DEPENDENCIES_BLOCK = re.compile(
    r"(SUB-PROJECT DEPENDENCIES START)[\s\S]*(// SUB-PROJECT DEPENDENCIES END)"
)
_EXTENSIONS_BLOCK = re.compile(
    r"(PLUGIN GRADLE EXTENSIONS START)[\s\S]*(// PLUGIN GRADLE EXTENSIONS END)"
)


def extract_project_name(
    manifest_data: str, manifest_path: Optional[Union[Path, str]] = None
) -> str:
    """Return the last segment of the manifest's package name."""
    match = _MANIFEST_PACKAGE.search(manifest_data)
    if not match:
        raise ManifestError(
            f"Could not find package name in {manifest_path}",
            manifest_path=manifest_path,
        )
    return match.group(1).rsplit(".", 1)[-1]


def to_gradle_path(sub_project: str) -> str:
    return re.sub(r"[/\\]", ":", sub_project)


def lib_name(sub_project: str, project_name: str) -> str:
    """Gradle project name with the ``<name>-`` prefix stripped once."""
    return to_gradle_path(sub_project).replace(f"{project_name}-", "", 1)


def resolve_system_library(reference: str) -> str:
    """Map a system library reference to a Maven coordinate."""
    # Already in gradle form if it has two ':'s
    if _MAVEN_COORDINATE.search(reference):
        return reference

    for pattern, replacement in SYSTEM_LIBRARY_MAPPINGS:
        if pattern.search(reference):
            return pattern.sub(replacement, reference)

    raise UnsupportedLibraryError(
        f"Unsupported system library (does not work with gradle): {reference}",
        library=reference,
    )


def render_settings(sub_projects: Iterable[str], project_name: str) -> str:
    lines: List[str] = [SETTINGS_HEADER]
    for sub_project in sub_projects:
        real_dir = to_gradle_path(sub_project)
        name = lib_name(sub_project, project_name)
        lines.append(f'include ":{name}"\n')
        if f"{project_name}-" in real_dir:
            lines.append(
                f'project(":{name}").projectDir = new File("{sub_project}")\n'
            )
    return "".join(lines)


def render_project_dependency(name: str, excludes_cordova_lib: bool) -> str:
    line = f'    implementation(project(path: ":{name}"))'
    if excludes_cordova_lib:
        return line + '{\n        exclude module:("' + CORDOVA_LIB + '")\n    }\n'
    return line + "\n"


def render_system_dependency(maven_ref: str) -> str:
    return f'    implementation "{maven_ref}"\n'


def render_gradle_includes(includes: Iterable[str]) -> str:
    return "".join(f'apply from: "../{path}"\n' for path in includes)


def replace_dependencies_block(build_gradle: str, deps_list: str) -> str:
    return _DEPENDENCIES_BLOCK.sub(
        lambda m: f"{m.group(1)}\n{deps_list}    {m.group(2)}", build_gradle, count=1
    )


def replace_extensions_block(build_gradle: str, include_list: str) -> str:
    return _EXTENSIONS_BLOCK.sub(
        lambda m: f"{m.group(1)}\n{include_list}{m.group(2)}", build_gradle, count=1
    )
