#!/usr/bin/env python3
"""
Shared fixtures: a minimal Cordova-style Android platform project.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from android_builder.builders.project_builder import ProjectBuilder
from android_builder.core.models import BuildResult

APP_BUILD_GRADLE = """\
apply plugin: 'com.android.application'

dependencies {
    implementation fileTree(dir: 'libs', include: '*.jar')
    // SUB-PROJECT DEPENDENCIES START
    // SUB-PROJECT DEPENDENCIES END
}

// PLUGIN GRADLE EXTENSIONS START
// PLUGIN GRADLE EXTENSIONS END
"""

MANIFEST = """\
<?xml version='1.0' encoding='utf-8'?>
<manifest android:hardwareAccelerated="true"
    android:versionCode="1"
    package="com.example.hello" xmlns:android="http://schemas.android.com/apk/res/android">
</manifest>
"""

PROJECT_PROPERTIES = """\
target=android-29
android.library.reference.1=CordovaLib
android.library.reference.2=app
android.library.reference.3=clevertap-plugin/hello-clevertap
cordova.gradle.include.1=clevertap-plugin/hello-build-extras.gradle
cordova.system.library.1=com.clevertap.android:clevertap-android-sdk:4.0.0
cordova.system.library.2=extras/android/support/v4
"""


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "android"
    (root / "app" / "src" / "main").mkdir(parents=True)
    (root / "app" / "src" / "main" / "AndroidManifest.xml").write_text(MANIFEST)
    (root / "app" / "build.gradle").write_text(APP_BUILD_GRADLE)
    (root / "project.properties").write_text(PROJECT_PROPERTIES)
    (root / "build.gradle").write_text("// root build file\n")
    (root / "CordovaLib").mkdir()
    (root / "CordovaLib" / "build.gradle").write_text("apply plugin: 'com.android.library'\n")
    (root / "cordova" / "lib").mkdir(parents=True)
    (root / "cordova" / "lib" / "plugin-build.gradle").write_text(
        "dependencies {\n    implementation project(':CordovaLib')\n}\n"
    )
    (root / "clevertap-plugin").mkdir()
    return root


@pytest.fixture
def runner() -> AsyncMock:
    return AsyncMock(return_value=BuildResult(success=True, output="BUILD SUCCESSFUL"))


@pytest.fixture
def builder(project_root: Path, runner: AsyncMock) -> ProjectBuilder:
    return ProjectBuilder(
        project_root,
        command_runner=runner,
        gradle_locator=lambda: "/usr/bin/gradle",
    )
