#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ProjectBuilder: prepares a Cordova-style Android platform project and drives
its Gradle wrapper.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Union

from loguru import logger

from ..core.base import BuildHelperBase
from ..core.errors import BuildError, ErrorContext, RequirementsError
from ..core.models import (
    BuildOptions,
    BuildResult,
    BuildResults,
    BuildStatus,
    BuildType,
    PackageType,
    ProjectProperties,
)
from ..utils import gradle_files
from ..utils.outputs import find_output_files, sort_output_files
from ..utils.properties import create_editor, read_project_properties
from ..utils.requirements import (
    MISSING_TARGET_MESSAGE,
    check_android_target,
    check_gradle,
)

MARKER = "YOUR CHANGES WILL BE ERASED!"
SIGNING_PROPERTIES = "-signing.properties"
TEMPLATE = (
    "# This file is automatically generated.\n"
    f"# Do not modify this file -- {MARKER}\n"
)

DEFAULT_DISTRIBUTION_URL = (
    "https://services.gradle.org/distributions/gradle-6.5-all.zip"
)


class ProjectBuilder(BuildHelperBase):
    """
    Gradle driver for an Android platform project.

    The project root is expected to hold ``project.properties``, the root
    ``build.gradle``, ``wrapper.gradle`` and the ``app`` module.
    """

    def __init__(
        self,
        root: Union[Path, str],
        *,
        gradle_locator: Callable[[], str] = check_gradle,
        **kwargs,
    ) -> None:
        super().__init__(root, **kwargs)
        self.apk_dir = self.root / "app" / "build" / "outputs" / "apk"
        self.aab_dir = self.root / "app" / "build" / "outputs" / "bundle"
        self.gradle_locator = gradle_locator

    @property
    def wrapper(self) -> Path:
        return self.root / ("gradlew.bat" if os.name == "nt" else "gradlew")

    def signing_properties_path(self, build_type: Union[BuildType, str]) -> Path:
        return self.root / f"{BuildType(build_type).value}{SIGNING_PROPERTIES}"

    def get_args(self, cmd: str, opts: BuildOptions) -> List[str]:
        """Gradle arguments for a debug, release or pass-through command."""
        build_file = str(self.root / "build.gradle")

        if opts.package_type is PackageType.BUNDLE:
            build_cmd = {
                "release": ":app:bundleRelease",
                "debug": ":app:bundleDebug",
            }.get(cmd, cmd)
            args = [build_cmd, "-b", build_file]
        else:
            build_cmd = {
                "release": "cdvBuildRelease",
                "debug": "cdvBuildDebug",
            }.get(cmd, cmd)
            args = [build_cmd, "-b", build_file]
            if opts.arch:
                args.append(f"-PcdvBuildArch={opts.arch}")

        args.extend(opts.extra_args)
        return args

    async def run_gradle_wrapper(self, gradle_cmd: str) -> Optional[BuildResult]:
        """Generate the Gradle wrapper unless the project already has one."""
        if (self.root / "gradlew").exists():
            logger.debug("Gradle wrapper already present")
            return None

        cmd = [
            gradle_cmd,
            "-p",
            str(self.root),
            "wrapper",
            "-b",
            str(self.root / "wrapper.gradle"),
        ]
        return self._checked(await self.run_command(cmd), cmd)

    def read_project_properties(self) -> ProjectProperties:
        return read_project_properties(self.root / "project.properties")

    def extract_real_project_name_from_manifest(self) -> str:
        manifest_path = self.root / "app" / "src" / "main" / "AndroidManifest.xml"
        manifest_data = manifest_path.read_text(encoding="utf-8")
        return gradle_files.extract_project_name(manifest_data, manifest_path)

    def prep_build_files(self) -> None:
        """Make the project buildable, minus the gradle wrapper."""
        plugin_build_gradle = self.root / "cordova" / "lib" / "plugin-build.gradle"
        properties = self.read_project_properties()
        sub_projects = properties.libs
        name = self.extract_real_project_name_from_manifest()

        # Resolve before touching the file system so a bad reference leaves
        # the project untouched.
        maven_refs = [
            gradle_files.resolve_system_library(ref) for ref in properties.system_libs
        ]

        for sub_project in sub_projects:
            if sub_project == gradle_files.CORDOVA_LIB:
                continue
            sub_project_gradle = self.root / sub_project / "build.gradle"
            if not sub_project_gradle.exists():
                logger.debug(f"Copying plugin-build.gradle into {sub_project}")
                sub_project_gradle.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(plugin_build_gradle, sub_project_gradle)

        (self.root / "settings.gradle").write_text(
            gradle_files.render_settings(sub_projects, name), encoding="utf-8"
        )

        deps_list = ""
        for sub_project in sub_projects:
            logger.info(f"Subproject Path: {sub_project}")
            lib_name = gradle_files.lib_name(sub_project, name)
            if lib_name == "app":
                continue
            project_gradle = (self.root / sub_project / "build.gradle").read_text(
                encoding="utf-8"
            )
            deps_list += gradle_files.render_project_dependency(
                lib_name, gradle_files.CORDOVA_LIB in project_gradle
            )
        deps_list += "".join(
            gradle_files.render_system_dependency(ref) for ref in maven_refs
        )

        app_build_gradle = self.root / "app" / "build.gradle"
        build_gradle = app_build_gradle.read_text(encoding="utf-8")
        build_gradle = gradle_files.replace_dependencies_block(build_gradle, deps_list)
        build_gradle = gradle_files.replace_extensions_block(
            build_gradle,
            gradle_files.render_gradle_includes(properties.gradle_includes),
        )
        app_build_gradle.write_text(build_gradle, encoding="utf-8")

        logger.success(f"Prepared build files for {len(sub_projects)} sub-project(s)")

    def update_distribution_url(self) -> str:
        properties_path = self.root / "gradle" / "wrapper" / "gradle-wrapper.properties"
        distribution_url = os.environ.get(
            "CORDOVA_ANDROID_GRADLE_DISTRIBUTION_URL", DEFAULT_DISTRIBUTION_URL
        )
        editor = create_editor(properties_path)
        editor.set("distributionUrl", distribution_url)
        editor.save()
        logger.debug(f"Gradle Distribution URL: {distribution_url}")
        return distribution_url

    def write_signing_properties(self, opts: BuildOptions) -> Optional[Path]:
        """Regenerate <buildType>-signing.properties from opts.package_info."""
        signing_path = self.signing_properties_path(opts.build_type)
        if signing_path.exists():
            signing_path.unlink()

        if not opts.package_info:
            return None

        editor = create_editor(signing_path)
        editor.add_head_comment(TEMPLATE)
        opts.package_info.append_to_properties(editor)
        editor.save()
        logger.info(f"Wrote signing configuration to {signing_path.name}")
        return signing_path

    async def prep_env(self, opts: BuildOptions) -> None:
        self.status = BuildStatus.PREPARING
        try:
            gradle_path = self.gradle_locator()
            await self.run_gradle_wrapper(gradle_path)
            self.prep_build_files()
            self.update_distribution_url()
            self.write_signing_properties(opts)
        except Exception:
            self.status = BuildStatus.FAILED
            raise
        self.status = BuildStatus.COMPLETED

    async def build(self, opts: BuildOptions) -> BuildResult:
        """Build the project with the Gradle wrapper."""
        self.status = BuildStatus.BUILDING
        cmd_name = "debug" if opts.build_type is BuildType.DEBUG else "release"
        cmd = [str(self.wrapper), *self.get_args(cmd_name, opts)]

        try:
            result = self._checked(await self.run_command(cmd), cmd)
        except BuildError as error:
            if MISSING_TARGET_MESSAGE in str(error) or MISSING_TARGET_MESSAGE in error.output:
                try:
                    await check_android_target(error)
                except RequirementsError as diagnosis:
                    raise error from diagnosis
            raise

        self.status = BuildStatus.COMPLETED
        logger.success(f"{opts.build_type.value.capitalize()} build finished")
        return result

    async def clean(self, opts: BuildOptions) -> BuildResult:
        self.status = BuildStatus.CLEANING
        cmd = [str(self.wrapper), *self.get_args("clean", opts)]
        result = self._checked(await self.run_command(cmd), cmd)

        shutil.rmtree(self.root / "out", ignore_errors=True)

        for build_type in BuildType:
            signing_path = self.signing_properties_path(build_type)
            if not signing_path.exists():
                continue
            if MARKER in signing_path.read_text(encoding="utf-8"):
                signing_path.unlink()
                logger.debug(f"Removed {signing_path.name}")
            else:
                logger.debug(f"Keeping user-maintained {signing_path.name}")

        self.status = BuildStatus.COMPLETED
        return result

    def find_output_apks(
        self, build_type: Union[BuildType, str], arch: Optional[str] = None
    ) -> List[Path]:
        return sort_output_files(
            find_output_files(self.apk_dir, BuildType(build_type).value, arch, "apk")
        )

    def find_output_bundles(self, build_type: Union[BuildType, str]) -> List[Path]:
        return sort_output_files(
            find_output_files(self.aab_dir, BuildType(build_type).value, None, "aab")
        )

    def fetch_build_results(
        self, build_type: Union[BuildType, str], arch: Optional[str] = None
    ) -> BuildResults:
        return BuildResults(
            apk_paths=self.find_output_apks(build_type, arch),
            build_type=BuildType(build_type),
        )

    def _checked(self, result: BuildResult, cmd: List[str]) -> BuildResult:
        """Turn a non-zero exit into BuildError."""
        if result.success:
            return result

        self.status = BuildStatus.FAILED
        raise BuildError(
            f"Command failed with exit code {result.exit_code}: {' '.join(cmd)}",
            task=cmd[1] if len(cmd) > 1 else None,
            context=ErrorContext(
                command=" ".join(cmd),
                exit_code=result.exit_code,
                working_directory=self.root,
                stdout=result.output,
                stderr=result.error,
                execution_time=result.execution_time,
            ),
        )
