#!/usr/bin/env python3
"""
Tests for settings.gradle generation and build.gradle block rewriting.
"""

import pytest

from android_builder.core.errors import ManifestError, UnsupportedLibraryError
from android_builder.utils import gradle_files


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("com.clevertap.android:clevertap-android-sdk:4.0.0", "com.clevertap.android:clevertap-android-sdk:4.0.0"),
        ("com.google.firebase:firebase-messaging:+", "com.google.firebase:firebase-messaging:+"),
        ("extras/android/support/v4", "com.android.support:support-v4:+"),
        ("/extras/android/support/appcompat-v7", "com.android.support:support-appcompat-v7:+"),
        (
            "google/google_play_services/libproject/google-play-services_lib/",
            "com.google.android.gms:play-services:+",
        ),
    ],
)
def test_resolve_system_library(reference, expected):
    assert gradle_files.resolve_system_library(reference) == expected


def test_unmapped_system_library_raises():
    with pytest.raises(UnsupportedLibraryError, match="does not work with gradle"):
        gradle_files.resolve_system_library("libs/my-local-lib")


def test_single_colon_reference_is_not_a_coordinate():
    with pytest.raises(UnsupportedLibraryError):
        gradle_files.resolve_system_library("com.example:lib")


def test_extract_project_name_across_lines():
    manifest = '<manifest\n  xmlns:android="x"\n  PACKAGE = "io.clevertap.demo.App">'
    assert gradle_files.extract_project_name(manifest) == "App"


def test_extract_project_name_without_dots():
    assert gradle_files.extract_project_name('<manifest package="demo">') == "demo"


def test_extract_project_name_missing():
    with pytest.raises(ManifestError):
        gradle_files.extract_project_name("<manifest/>", "AndroidManifest.xml")


def test_lib_name_strips_project_prefix_once():
    assert gradle_files.lib_name("plugin\\hello-lib", "hello") == "plugin:lib"
    assert gradle_files.lib_name("hello-hello-lib", "hello") == "hello-lib"


def test_render_settings_only_adds_project_dir_for_prefixed_paths():
    settings = gradle_files.render_settings(["CordovaLib", "plugin/hello-lib"], "hello")
    assert settings == (
        "// GENERATED FILE - DO NOT EDIT\n"
        'include ":"\n'
        'include ":CordovaLib"\n'
        'include ":plugin:lib"\n'
        'project(":plugin:lib").projectDir = new File("plugin/hello-lib")\n'
    )


def test_render_settings_without_sub_projects():
    assert gradle_files.render_settings([], "hello") == gradle_files.SETTINGS_HEADER


def test_replace_dependencies_block_is_idempotent():
    build_gradle = (
        "dependencies {\n"
        "    // SUB-PROJECT DEPENDENCIES START\n"
        "    implementation 'stale:dep:1'\n"
        "    // SUB-PROJECT DEPENDENCIES END\n"
        "}\n"
    )
    deps = gradle_files.render_system_dependency("a:b:1")
    once = gradle_files.replace_dependencies_block(build_gradle, deps)
    twice = gradle_files.replace_dependencies_block(once, deps)

    assert once == twice
    assert "stale:dep" not in once
    assert '    implementation "a:b:1"\n    // SUB-PROJECT DEPENDENCIES END' in once


def test_replacement_text_is_not_treated_as_a_template():
    build_gradle = "// PLUGIN GRADLE EXTENSIONS START\n// PLUGIN GRADLE EXTENSIONS END\n"
    include = gradle_files.render_gradle_includes(["plugin\\1\\extras.gradle"])
    result = gradle_files.replace_extensions_block(build_gradle, include)
    assert 'apply from: "../plugin\\1\\extras.gradle"\n' in result


def test_blocks_without_markers_are_left_alone():
    build_gradle = "dependencies {}\n"
    assert gradle_files.replace_dependencies_block(build_gradle, "x") == build_gradle
    assert gradle_files.replace_extensions_block(build_gradle, "x") == build_gradle


def test_render_project_dependency_exclude_block():
    assert gradle_files.render_project_dependency("lib", False) == (
        '    implementation(project(path: ":lib"))\n'
    )
    assert gradle_files.render_project_dependency("lib", True) == (
        '    implementation(project(path: ":lib")){\n'
        '        exclude module:("CordovaLib")\n'
        "    }\n"
    )
