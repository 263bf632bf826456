#!/usr/bin/env python3
"""
Tests for artifact discovery and ranking.
"""

import os
from pathlib import Path
from typing import List

import pytest

from android_builder.builders.project_builder import ProjectBuilder
from android_builder.core.models import BuildType
from android_builder.utils.outputs import (
    find_output_files,
    recursively_find_files,
    sort_output_files,
)


def touch(path: Path, mtime: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    os.utime(path, (mtime, mtime))
    return path.resolve()


def names(paths: List[Path]) -> List[str]:
    return [p.name for p in paths]


class TestSortOrder:
    def test_generic_before_arch_specific(self, tmp_path: Path):
        arm = touch(tmp_path / "app-arm64-debug.apk", 2000)
        generic = touch(tmp_path / "app-debug.apk", 1000)
        assert sort_output_files([arm, generic]) == [generic, arm]

    def test_signed_before_unsigned(self, tmp_path: Path):
        unsigned = touch(tmp_path / "app-release-unsigned.apk", 2000)
        signed = touch(tmp_path / "app-release.apk", 1000)
        assert sort_output_files([unsigned, signed]) == [signed, unsigned]

    def test_newest_first(self, tmp_path: Path):
        old = touch(tmp_path / "a" / "app-debug.apk", 1000)
        new = touch(tmp_path / "b" / "app-debug.apk", 2000)
        assert sort_output_files([old, new]) == [new, old]

    def test_then_longer_path_first(self, tmp_path: Path):
        short = touch(tmp_path / "app.apk", 1000)
        long = touch(tmp_path / "app-debug.apk", 1000)
        assert sort_output_files([short, long]) == [long, short]

    def test_order_is_total_and_input_independent(self, tmp_path: Path):
        files = [
            touch(tmp_path / "app-x86-debug.apk", 3000),
            touch(tmp_path / "app-debug-unsigned.apk", 3000),
            touch(tmp_path / "app-debug.apk", 1000),
            touch(tmp_path / "app-arm-debug.apk", 1000),
            touch(tmp_path / "app-zzz.apk", 1000),
            touch(tmp_path / "app-aaa.apk", 1000),
        ]
        expected = sort_output_files(files)
        assert sort_output_files(list(reversed(files))) == expected
        assert names(expected) == [
            "app-debug.apk",
            "app-aaa.apk",
            "app-zzz.apk",
            "app-debug-unsigned.apk",
            "app-x86-debug.apk",
            "app-arm-debug.apk",
        ]


class TestDiscovery:
    def test_missing_directory_yields_nothing(self, tmp_path: Path):
        assert recursively_find_files(tmp_path / "missing", "apk") == []
        assert find_output_files(tmp_path / "missing", "debug", None, "apk") == []

    def test_empty_extension_yields_nothing(self, tmp_path: Path):
        touch(tmp_path / "app.apk", 1000)
        assert recursively_find_files(tmp_path, "") == []

    def test_recurses_and_filters_extension(self, tmp_path: Path):
        touch(tmp_path / "debug" / "app-debug.apk", 1000)
        touch(tmp_path / "debug" / "nested" / "other.apk", 1000)
        touch(tmp_path / "debug" / "output.json", 1000)
        found = recursively_find_files(tmp_path, "apk")
        assert sorted(names(found)) == ["app-debug.apk", "other.apk"]

    def test_walk_order_breaks_mtime_tie_for_flavour(self, tmp_path: Path):
        touch(tmp_path / "debug" / "app-debug.apk", 1000)
        touch(tmp_path / "debug" / "app-x86-debug.apk", 1000)
        assert names(find_output_files(tmp_path, "debug", "x86", "apk")) == ["app-debug.apk"]

    def test_newest_generic_build_beats_stale_split_build(self, tmp_path: Path):
        touch(tmp_path / "debug" / "app-arm64-debug.apk", 1000)
        touch(tmp_path / "debug" / "app-debug.apk", 5000)
        assert names(find_output_files(tmp_path, "debug", None, "apk")) == ["app-debug.apk"]

    def test_newest_split_build_beats_stale_generic_build(self, tmp_path: Path):
        touch(tmp_path / "debug" / "app-debug.apk", 1000)
        touch(tmp_path / "debug" / "app-x86-debug.apk", 5000)
        assert names(find_output_files(tmp_path, "debug", None, "apk")) == ["app-x86-debug.apk"]

    def test_arch_suffix_in_directory_name_is_ignored(self, tmp_path: Path):
        split_dir = touch(tmp_path / "build-arm" / "app-debug.apk", 1000)
        arch_file = touch(tmp_path / "plain" / "app-x86-debug.apk", 2000)
        unsigned_dir = touch(tmp_path / "out-unsigned" / "app-debug.apk", 500)
        assert sort_output_files([arch_file, unsigned_dir, split_dir]) == [
            split_dir,
            unsigned_dir,
            arch_file,
        ]

    def test_arch_filter_applies_to_arch_specific_builds(self, tmp_path: Path):
        touch(tmp_path / "debug" / "app-arm64-debug.apk", 1000)
        touch(tmp_path / "debug" / "app-x86-debug.apk", 1000)
        touch(tmp_path / "debug" / "app-x86_64-debug.apk", 1000)
        found = find_output_files(tmp_path, "debug", "x86", "apk")
        assert sorted(names(found)) == ["app-x86-debug.apk", "app-x86_64-debug.apk"]

        assert len(find_output_files(tmp_path, "debug", None, "apk")) == 3


class TestBuilderOutputs:
    def test_find_output_apks_sorted(self, builder: ProjectBuilder):
        apk_dir = builder.apk_dir / "release"
        touch(apk_dir / "app-release-unsigned.apk", 2000)
        touch(apk_dir / "app-release.apk", 1000)

        assert names(builder.find_output_apks(BuildType.RELEASE)) == [
            "app-release.apk",
            "app-release-unsigned.apk",
        ]

    def test_find_output_bundles(self, builder: ProjectBuilder):
        touch(builder.aab_dir / "debug" / "app-debug.aab", 1000)
        touch(builder.apk_dir / "debug" / "app-debug.apk", 1000)
        assert names(builder.find_output_bundles("debug")) == ["app-debug.aab"]

    def test_fetch_build_results(self, builder: ProjectBuilder):
        touch(builder.apk_dir / "debug" / "app-debug.apk", 1000)
        results = builder.fetch_build_results("debug")

        assert results.build_type is BuildType.DEBUG
        assert names(results.apk_paths) == ["app-debug.apk"]
        assert results.primary == results.apk_paths[0]

    def test_unknown_build_type_rejected(self, builder: ProjectBuilder):
        with pytest.raises(ValueError):
            builder.find_output_apks("profile")
